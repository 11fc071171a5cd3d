"""
Schedule suggestions from Gemini.

Given a free-text role ("dentist", "barber", ...) ask the model for a
WeeklyScheduleConfig-shaped JSON payload. Entirely optional: without
GEMINI_API_KEY the feature is disabled, and every failure surfaces as
Unavailable so callers can degrade to "no suggestion".
"""

import json
import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from ... import config
from ...errors import Unavailable
from .schemas import WeeklyScheduleConfig

logger = logging.getLogger(__name__)

PROMPT_TEMPLATE = (
    "Suggest a weekly opening schedule for a {role}. "
    "Reply with JSON only, shaped as "
    '{{"slotDuration": <minutes>, "weeklySchedule": [{{"day": "Monday", "isEnabled": true, '
    '"startTime": "HH:MM", "endTime": "HH:MM", "overbookingRules": []}}, ...]}} '
    "with exactly one entry for each day from Monday to Sunday, 24-hour times."
)


def _strip_code_fence(text: str) -> str:
    """Models sometimes wrap JSON in ```json fences"""
    text = text.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else ""
        if text.rstrip().endswith("```"):
            text = text.rstrip()[:-3]
    return text.strip()


class SuggestionService:
    """Client for the Gemini generateContent endpoint"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.api_key = api_key if api_key is not None else config.GEMINI_API_KEY
        self.model = model or config.GEMINI_MODEL
        self.timeout = timeout if timeout is not None else config.SUGGESTION_TIMEOUT_SECONDS

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    async def suggest(self, role: str) -> WeeklyScheduleConfig:
        """Ask for a schedule; raises Unavailable on any failure"""
        if not self.enabled:
            raise Unavailable("Schedule suggestions are not configured")

        url = f"{config.GEMINI_API_URL}/{self.model}:generateContent"
        payload = {
            "contents": [{"parts": [{"text": PROMPT_TEMPLATE.format(role=role.strip())}]}],
            "generationConfig": {"responseMimeType": "application/json"},
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as http_client:
                response = await http_client.post(
                    url, params={"key": self.api_key}, json=payload
                )
        except httpx.HTTPError as e:
            logger.warning(f"⚠️ Schedule suggestion request failed: {type(e).__name__}: {e}")
            raise Unavailable("Schedule suggestion service unreachable") from e

        if response.status_code != 200:
            logger.warning(f"⚠️ Schedule suggestion failed: HTTP {response.status_code}")
            raise Unavailable("Schedule suggestion service unavailable")

        try:
            data = response.json()
            text = data["candidates"][0]["content"]["parts"][0]["text"]
            suggestion = WeeklyScheduleConfig.model_validate(json.loads(_strip_code_fence(text)))
        except (ValueError, KeyError, IndexError, TypeError, ValidationError) as e:
            logger.warning(f"⚠️ Schedule suggestion had an invalid format: {e}")
            raise Unavailable("Schedule suggestion had an invalid format") from e

        logger.info(f"✅ Schedule suggestion generated for role '{role}'")
        return suggestion
