"""Scheduling schemas - the weekly time grid and derived slots"""

import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ...shared.validators import parse_time, validate_time


class Weekday(str, Enum):
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"


# Monday-first
WEEKDAYS: list[Weekday] = list(Weekday)


class OverbookingRule(BaseModel):
    """Capacity override for slots starting inside [startTime, endTime)"""

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    startTime: str
    endTime: str
    capacity: int = Field(..., ge=1)

    @field_validator("startTime", "endTime")
    @classmethod
    def validate_times(cls, v):
        return validate_time(v)


class DaySchedule(BaseModel):
    day: Weekday
    isEnabled: bool = False
    startTime: Optional[str] = None
    endTime: Optional[str] = None
    overbookingRules: list[OverbookingRule] = Field(default_factory=list)

    @field_validator("startTime", "endTime")
    @classmethod
    def validate_times(cls, v):
        # Disabled days may leave their hours blank
        if v is None or v == "":
            return None
        return validate_time(v)

    @model_validator(mode="after")
    def validate_window(self):
        if self.isEnabled:
            if self.startTime is None or self.endTime is None:
                raise ValueError(f"{self.day.value}: enabled days need a start and end time")
            if parse_time(self.startTime) >= parse_time(self.endTime):
                raise ValueError(f"{self.day.value}: startTime must be before endTime")

        rule_ids = [rule.id for rule in self.overbookingRules]
        if len(rule_ids) != len(set(rule_ids)):
            raise ValueError(f"{self.day.value}: overbooking rule ids must be unique")
        return self


class WeeklyScheduleConfig(BaseModel):
    """Seven day schedules, Monday-first, plus the shared slot duration"""

    slotDuration: int = Field(30, gt=0)
    weeklySchedule: list[DaySchedule]

    @field_validator("weeklySchedule")
    @classmethod
    def validate_week(cls, days):
        if len(days) != 7:
            raise ValueError("weeklySchedule must contain exactly 7 days")

        seen = {d.day for d in days}
        if len(seen) != 7:
            raise ValueError("weeklySchedule must contain each weekday exactly once")

        order = {day: index for index, day in enumerate(WEEKDAYS)}
        return sorted(days, key=lambda d: order[d.day])

    def get_day(self, day: Weekday) -> Optional[DaySchedule]:
        for day_schedule in self.weeklySchedule:
            if day_schedule.day == day:
                return day_schedule
        return None


class ScheduleUpdate(BaseModel):
    """Body of PUT /api/schedule - the whole week is replaced"""

    weeklySchedule: list[DaySchedule]
    slotDuration: Optional[int] = Field(None, gt=0)


class ScheduleResponse(WeeklyScheduleConfig):
    updatedAt: Optional[datetime] = None


class Slot(BaseModel):
    day: Weekday
    time: str
    capacity: int


class SlotAvailability(BaseModel):
    time: str
    capacity: int
    booked: int
    remaining: int


class SuggestionRequest(BaseModel):
    role: str = Field(..., min_length=1, max_length=100)


class SuggestionResponse(BaseModel):
    available: bool
    suggestion: Optional[WeeklyScheduleConfig] = None
