"""
Slot generation - renders a weekly schedule into bookable slots.

Pure functions only: no I/O, no state. Malformed day input degrades to an empty
slot list for that day rather than raising.
"""

from collections.abc import Iterable
from typing import Optional

from ...shared.validators import format_time, parse_time
from .schemas import DaySchedule, OverbookingRule, Slot, Weekday, WeeklyScheduleConfig

DEFAULT_CAPACITY = 1


def resolve_capacity(minute: int, rules: Iterable[OverbookingRule]) -> int:
    """
    Capacity of a slot starting at `minute`.

    Among the rules whose half-open window [startTime, endTime) contains the
    slot start, the one with the latest startTime wins; on equal starts the
    earlier-listed rule wins. The winning capacity replaces the default of 1.
    """
    winner: Optional[OverbookingRule] = None
    winner_start = -1

    for rule in rules:
        rule_start = parse_time(rule.startTime)
        rule_end = parse_time(rule.endTime)
        if rule_start is None or rule_end is None:
            continue
        if not rule_start <= minute < rule_end:
            continue
        if rule_start > winner_start:
            winner = rule
            winner_start = rule_start

    if winner is None:
        return DEFAULT_CAPACITY
    return max(DEFAULT_CAPACITY, winner.capacity)


def generate_day_slots(day_schedule: DaySchedule, slot_duration: Optional[int]) -> list[Slot]:
    """Slots for a single day, ordered by time"""
    if not day_schedule.isEnabled or not slot_duration or slot_duration <= 0:
        return []

    start = parse_time(day_schedule.startTime)
    end = parse_time(day_schedule.endTime)
    if start is None or end is None or start >= end:
        return []

    rules = day_schedule.overbookingRules or []
    slots = []
    # The last slot only has to start before endTime; its nominal end may run past it
    for minute in range(start, end, slot_duration):
        slots.append(
            Slot(
                day=day_schedule.day,
                time=format_time(minute),
                capacity=resolve_capacity(minute, rules),
            )
        )
    return slots


def generate_slots(config: WeeklyScheduleConfig) -> dict[Weekday, list[Slot]]:
    """Map every weekday in the config to its ordered list of slots"""
    return {
        day_schedule.day: generate_day_slots(day_schedule, config.slotDuration)
        for day_schedule in config.weeklySchedule
    }


def find_slot(config: WeeklyScheduleConfig, day: Weekday, time: str) -> Optional[Slot]:
    """The generated slot at (day, time), or None if the schedule has no such slot"""
    day_schedule = config.get_day(day)
    if day_schedule is None:
        return None

    minute = parse_time(time)
    if minute is None:
        return None

    wanted = format_time(minute)
    for slot in generate_day_slots(day_schedule, config.slotDuration):
        if slot.time == wanted:
            return slot
    return None
