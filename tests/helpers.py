"""Shared builders for test data."""

from appointly.domain.scheduling.schemas import WeeklyScheduleConfig

TEST_PASSWORD = "password123"

DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


def week(**overrides):
    """A valid weeklySchedule payload; keyword args (day names) update single days."""
    days = []
    for day in DAY_NAMES:
        entry = {
            "day": day,
            "isEnabled": day not in ("Saturday", "Sunday"),
            "startTime": "09:00",
            "endTime": "17:00",
            "overbookingRules": [],
        }
        entry.update(overrides.get(day, {}))
        days.append(entry)
    return days


def config(slot_duration=30, **overrides) -> WeeklyScheduleConfig:
    return WeeklyScheduleConfig(slotDuration=slot_duration, weeklySchedule=week(**overrides))


def rule(start, end, capacity, rule_id=None):
    data = {"startTime": start, "endTime": end, "capacity": capacity}
    if rule_id:
        data["id"] = rule_id
    return data
