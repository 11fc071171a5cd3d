"""Schedule router - FastAPI endpoints for the weekly schedule"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...access import Capability
from ...auth import AuthSession, require_capability
from ...database import get_db
from .schemas import (
    ScheduleResponse,
    ScheduleUpdate,
    SlotAvailability,
    SuggestionRequest,
    SuggestionResponse,
)
from .service import ScheduleService
from .suggestion_service import SuggestionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/schedule", tags=["Schedule"])


def get_suggestion_service() -> SuggestionService:
    return SuggestionService()


def get_schedule_service(
    db: Session = Depends(get_db),
    suggestions: SuggestionService = Depends(get_suggestion_service),
) -> ScheduleService:
    """Dependency injection for ScheduleService"""
    return ScheduleService(db, suggestions)


@router.get("", response_model=ScheduleResponse)
async def get_schedule(service: ScheduleService = Depends(get_schedule_service)):
    """Public: current weekly schedule"""
    return service.get_schedule()


@router.put("", response_model=ScheduleResponse)
async def update_schedule(
    data: ScheduleUpdate,
    session: AuthSession = Depends(require_capability(Capability.MANAGE_SCHEDULE)),
    service: ScheduleService = Depends(get_schedule_service),
):
    """Replace the whole weekly schedule"""
    logger.info(f"📅 Schedule update requested by {session.email}")
    return service.update_schedule(data)


@router.get("/slots", response_model=dict[str, list[SlotAvailability]])
async def get_slots(service: ScheduleService = Depends(get_schedule_service)):
    """Public: bookable slots per weekday with remaining capacity"""
    return {day.value: slots for day, slots in service.get_availability().items()}


@router.post("/suggest", response_model=SuggestionResponse)
async def suggest_schedule(
    data: SuggestionRequest,
    _session: AuthSession = Depends(require_capability(Capability.MANAGE_SCHEDULE)),
    service: ScheduleService = Depends(get_schedule_service),
):
    """AI schedule suggestion for a role; never fails, `available` is false instead"""
    suggestion = await service.suggest_schedule(data.role)
    return SuggestionResponse(available=suggestion is not None, suggestion=suggestion)
