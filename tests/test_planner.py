"""Tests for the slot-overlap checker."""

from datetime import time

import pytest

from backend.services import planner

MONDAY = 1
TUESDAY = 2

EXISTING = [
    {"id": "p1", "day_of_week": MONDAY, "start_time": "09:00", "end_time": "10:00"},
    {"id": "p2", "day_of_week": MONDAY, "start_time": "14:00:00", "end_time": "15:30:00"},
]


class TestFindConflicts:
    """Half-open interval overlap within one weekday."""

    @pytest.mark.parametrize(
        "start,end,expected",
        [
            ("09:30", "10:30", ["p1"]),
            ("08:00", "09:00", []),
            ("10:00", "11:00", []),
            ("09:15", "09:45", ["p1"]),
            ("08:00", "16:00", ["p1", "p2"]),
            ("15:00", "15:15", ["p2"]),
            ("15:30", "16:00", []),
        ],
    )
    def test_monday(self, start, end, expected):
        conflicts = planner.find_conflicts(MONDAY, start, end, EXISTING)
        assert [plan["id"] for plan in conflicts] == expected

    def test_other_day_never_conflicts(self):
        assert planner.find_conflicts(TUESDAY, "09:00", "10:00", EXISTING) == []

    def test_accepts_time_objects(self):
        assert planner.has_overlap(MONDAY, time(9, 59), time(10, 30), EXISTING)

    def test_empty_schedule(self):
        assert not planner.has_overlap(MONDAY, "09:00", "10:00", [])

    def test_seconds_are_ignored_on_both_sides(self):
        assert planner.find_conflicts(MONDAY, "10:00:30", "11:00", EXISTING) == []
        assert planner.find_conflicts(MONDAY, "08:00", "09:00:59", EXISTING) == []


class TestValidateInterval:
    """Start must come strictly before end."""

    def test_valid(self):
        assert planner.validate_interval("09:00", "10:15") == (time(9, 0), time(10, 15))

    @pytest.mark.parametrize("start,end", [("10:00", "10:00"), ("11:00", "10:00")])
    def test_inverted_or_empty(self, start, end):
        with pytest.raises(ValueError, match="End time must be after start time"):
            planner.validate_interval(start, end)

    def test_garbage(self):
        with pytest.raises(ValueError):
            planner.parse_time_of_day("nine o'clock")


def test_plan_duration_hours():
    assert planner.plan_duration_hours({"start_time": "09:00", "end_time": "10:30"}) == 1.5


def test_day_names_start_on_sunday():
    assert planner.DAY_NAMES[0] == "Sunday"
    assert planner.DAY_NAMES[6] == "Saturday"
