"""Schedule service - Business logic for the weekly schedule"""

import logging
from datetime import datetime, timezone
from typing import Optional

from pydantic import ValidationError
from sqlalchemy.orm import Session

from ... import config
from ...errors import InvalidInput, Unavailable
from ..bookings.repository import BookingRepository
from .repository import ScheduleRepository
from .schemas import (
    WEEKDAYS,
    DaySchedule,
    ScheduleResponse,
    ScheduleUpdate,
    Slot,
    SlotAvailability,
    Weekday,
    WeeklyScheduleConfig,
)
from .slots import find_slot, generate_slots
from .suggestion_service import SuggestionService

logger = logging.getLogger(__name__)

WEEKEND = {Weekday.SATURDAY, Weekday.SUNDAY}


def default_schedule() -> WeeklyScheduleConfig:
    """Mon-Fri 09:00-17:00 open, weekend 09:00-13:00 closed, no overbooking"""
    return WeeklyScheduleConfig(
        slotDuration=config.DEFAULT_SLOT_DURATION_MINUTES,
        weeklySchedule=[
            DaySchedule(
                day=day,
                isEnabled=day not in WEEKEND,
                startTime="09:00",
                endTime="13:00" if day in WEEKEND else "17:00",
            )
            for day in WEEKDAYS
        ],
    )


class ScheduleService:
    """Service layer for schedule business logic"""

    def __init__(self, db: Session, suggestions: Optional[SuggestionService] = None):
        self.db = db
        self.repo = ScheduleRepository()
        self.bookings = BookingRepository()
        self.suggestions = suggestions or SuggestionService()

    def get_schedule(self) -> ScheduleResponse:
        """Current schedule, falling back to the default when nothing is stored"""
        setting = self.repo.get_schedule(self.db)
        if not setting:
            return ScheduleResponse(**default_schedule().model_dump())

        value = dict(setting.value or {})
        value.setdefault("slotDuration", config.DEFAULT_SLOT_DURATION_MINUTES)
        try:
            return ScheduleResponse.model_validate(value)
        except ValidationError as e:
            logger.error(f"❌ Stored schedule is invalid, serving default: {e}")
            return ScheduleResponse(**default_schedule().model_dump())

    def update_schedule(self, data: ScheduleUpdate) -> ScheduleResponse:
        """Replace the whole weekly schedule"""
        slot_duration = data.slotDuration or self.get_schedule().slotDuration
        try:
            schedule = WeeklyScheduleConfig(
                slotDuration=slot_duration, weeklySchedule=data.weeklySchedule
            )
        except ValidationError as e:
            messages = "; ".join(err["msg"] for err in e.errors())
            raise InvalidInput(f"Invalid weeklySchedule: {messages}") from e

        value = schedule.model_dump(mode="json")
        value["updatedAt"] = datetime.now(timezone.utc).isoformat()
        self.repo.save_schedule(self.db, value)

        enabled_days = [d.day.value for d in schedule.weeklySchedule if d.isEnabled]
        logger.info(
            f"📅 Schedule updated: slotDuration={schedule.slotDuration}, enabled={enabled_days}"
        )
        return ScheduleResponse.model_validate(value)

    def get_slots(self) -> dict[Weekday, list[Slot]]:
        return generate_slots(self.get_schedule())

    def find_slot(self, day: Weekday, time: str) -> Optional[Slot]:
        return find_slot(self.get_schedule(), day, time)

    def get_availability(self) -> dict[Weekday, list[SlotAvailability]]:
        """Generated slots with how many bookings each already holds"""
        counts = self.bookings.count_by_slot(self.db)
        availability = {}
        for day, slots in self.get_slots().items():
            availability[day] = [
                SlotAvailability(
                    time=slot.time,
                    capacity=slot.capacity,
                    booked=counts.get((day.value, slot.time), 0),
                    remaining=max(0, slot.capacity - counts.get((day.value, slot.time), 0)),
                )
                for slot in slots
            ]
        return availability

    async def suggest_schedule(self, role: str) -> Optional[WeeklyScheduleConfig]:
        """AI suggestion for a role, or None when the feature is unavailable"""
        try:
            return await self.suggestions.suggest(role)
        except Unavailable as e:
            logger.info(f"Schedule suggestion unavailable for role '{role}': {e.detail}")
            return None
