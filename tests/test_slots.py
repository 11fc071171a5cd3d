"""Tests for slot generation."""

from appointly.domain.scheduling.schemas import DaySchedule, OverbookingRule, Weekday
from appointly.domain.scheduling.slots import (
    find_slot,
    generate_day_slots,
    generate_slots,
    resolve_capacity,
)

from .helpers import config, rule


def _times(slots):
    return [s.time for s in slots]


def _capacities(slots):
    return {s.time: s.capacity for s in slots}


def _raw_day(**fields):
    """A DaySchedule that skips validation, as if read from bad stored data."""
    data = {
        "day": Weekday.MONDAY,
        "isEnabled": True,
        "startTime": "09:00",
        "endTime": "17:00",
        "overbookingRules": [],
    }
    data.update(fields)
    return DaySchedule.model_construct(**data)


class TestSlotEnumeration:
    def test_full_day_of_half_hour_slots(self):
        slots = generate_slots(config())[Weekday.MONDAY]

        assert len(slots) == 16
        assert slots[0].time == "09:00"
        assert slots[-1].time == "16:30"
        assert all(s.day == Weekday.MONDAY for s in slots)

    def test_every_weekday_present_monday_first(self):
        result = generate_slots(config())

        assert list(result) == list(Weekday)

    def test_disabled_days_have_no_slots(self):
        result = generate_slots(config())

        assert result[Weekday.SATURDAY] == []
        assert result[Weekday.SUNDAY] == []

    def test_uneven_duration_keeps_last_slot_starting_before_end(self):
        cfg = config(slot_duration=25, Monday={"startTime": "09:00", "endTime": "10:00"})

        slots = generate_slots(cfg)[Weekday.MONDAY]

        # 09:50 runs past 10:00 and is kept, not clamped
        assert _times(slots) == ["09:00", "09:25", "09:50"]

    def test_duration_longer_than_window_yields_single_slot(self):
        cfg = config(slot_duration=60, Monday={"startTime": "09:00", "endTime": "09:20"})

        assert _times(generate_slots(cfg)[Weekday.MONDAY]) == ["09:00"]

    def test_times_are_zero_padded_24_hour(self):
        cfg = config(slot_duration=60, Monday={"startTime": "07:00", "endTime": "15:00"})

        times = _times(generate_slots(cfg)[Weekday.MONDAY])

        assert times[:3] == ["07:00", "08:00", "09:00"]
        assert times[-1] == "14:00"

    def test_output_is_deterministic(self):
        cfg = config(Monday={"overbookingRules": [rule("09:00", "12:00", 2)]})

        first = generate_slots(cfg)
        second = generate_slots(cfg)

        assert first == second
        assert {d: [s.model_dump() for s in v] for d, v in first.items()} == {
            d: [s.model_dump() for s in v] for d, v in second.items()
        }


class TestMalformedDays:
    def test_end_before_start_is_empty(self):
        assert generate_day_slots(_raw_day(startTime="12:00", endTime="09:00"), 30) == []

    def test_zero_length_window_is_empty(self):
        assert generate_day_slots(_raw_day(startTime="09:00", endTime="09:00"), 30) == []

    def test_missing_times_are_empty(self):
        assert generate_day_slots(_raw_day(startTime=None), 30) == []
        assert generate_day_slots(_raw_day(endTime=""), 30) == []

    def test_unparseable_times_are_empty(self):
        assert generate_day_slots(_raw_day(startTime="25:00"), 30) == []
        assert generate_day_slots(_raw_day(endTime="5pm"), 30) == []

    def test_non_positive_duration_is_empty(self):
        assert generate_day_slots(_raw_day(), 0) == []
        assert generate_day_slots(_raw_day(), -15) == []

    def test_disabled_day_is_empty(self):
        assert generate_day_slots(_raw_day(isEnabled=False), 30) == []


class TestCapacityResolution:
    def test_latest_start_wins_on_overlap(self):
        cfg = config(
            Monday={"overbookingRules": [rule("09:00", "12:00", 2), rule("10:00", "11:00", 5)]}
        )

        caps = _capacities(generate_slots(cfg)[Weekday.MONDAY])

        assert caps["10:30"] == 5
        assert caps["09:30"] == 2
        assert caps["13:00"] == 1

    def test_rule_order_does_not_change_winner(self):
        cfg = config(
            Monday={"overbookingRules": [rule("10:00", "11:00", 5), rule("09:00", "12:00", 2)]}
        )

        caps = _capacities(generate_slots(cfg)[Weekday.MONDAY])

        assert caps["10:00"] == 5
        assert caps["10:30"] == 5
        assert caps["09:00"] == 2

    def test_windows_are_half_open(self):
        cfg = config(
            Monday={"overbookingRules": [rule("09:00", "12:00", 2), rule("10:00", "11:00", 5)]}
        )

        caps = _capacities(generate_slots(cfg)[Weekday.MONDAY])

        # 11:00 leaves the inner rule, 12:00 leaves the outer one
        assert caps["11:00"] == 2
        assert caps["12:00"] == 1

    def test_capacity_replaces_default_instead_of_adding(self):
        cfg = config(Monday={"overbookingRules": [rule("09:00", "10:00", 3)]})

        assert _capacities(generate_slots(cfg)[Weekday.MONDAY])["09:00"] == 3

    def test_equal_starts_keep_first_listed_rule(self):
        rules = [
            OverbookingRule(id="a", startTime="10:00", endTime="12:00", capacity=3),
            OverbookingRule(id="b", startTime="10:00", endTime="11:00", capacity=4),
        ]

        assert resolve_capacity(10 * 60 + 30, rules) == 3

    def test_rule_outside_opening_hours_has_no_effect(self):
        cfg = config(Monday={"overbookingRules": [rule("18:00", "19:00", 9)]})

        slots = generate_slots(cfg)[Weekday.MONDAY]

        assert {s.capacity for s in slots} == {1}

    def test_rules_do_not_leak_across_days(self):
        cfg = config(Monday={"overbookingRules": [rule("09:00", "17:00", 4)]})

        result = generate_slots(cfg)

        assert {s.capacity for s in result[Weekday.MONDAY]} == {4}
        assert {s.capacity for s in result[Weekday.TUESDAY]} == {1}

    def test_capacity_never_below_one(self):
        bad_rule = OverbookingRule.model_construct(
            id="x", startTime="09:00", endTime="10:00", capacity=0
        )

        assert resolve_capacity(9 * 60, [bad_rule]) == 1

    def test_rule_with_unparseable_window_is_ignored(self):
        bad_rule = OverbookingRule.model_construct(
            id="x", startTime="nine", endTime="10:00", capacity=6
        )

        assert resolve_capacity(9 * 60, [bad_rule]) == 1


class TestFindSlot:
    def test_finds_generated_slot(self):
        cfg = config(Monday={"overbookingRules": [rule("09:00", "10:00", 3)]})

        slot = find_slot(cfg, Weekday.MONDAY, "09:30")

        assert slot is not None
        assert slot.capacity == 3

    def test_normalizes_unpadded_time(self):
        assert find_slot(config(), Weekday.MONDAY, "9:30").time == "09:30"

    def test_off_grid_time_is_not_a_slot(self):
        assert find_slot(config(), Weekday.MONDAY, "09:15") is None

    def test_time_at_closing_is_not_a_slot(self):
        assert find_slot(config(), Weekday.MONDAY, "17:00") is None

    def test_disabled_day_has_no_slot(self):
        assert find_slot(config(), Weekday.SATURDAY, "09:00") is None
