from __future__ import annotations

from datetime import time

DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]
RECURRENCES = ("once", "weekly", "daily")


def parse_time_of_day(value) -> time:
    if isinstance(value, time):
        return value.replace(microsecond=0, tzinfo=None)
    raw = str(value or "").strip()
    parts = raw.split(":")
    if len(parts) not in (2, 3) or not all(part.isdigit() for part in parts):
        raise ValueError(f"Invalid time of day: {value!r}")
    hour, minute = int(parts[0]), int(parts[1])
    second = int(parts[2]) if len(parts) == 3 else 0
    return time(hour, minute, second)


def format_time_of_day(value) -> str:
    return parse_time_of_day(value).strftime("%H:%M")


def validate_interval(start, end) -> tuple[time, time]:
    start_t = parse_time_of_day(start)
    end_t = parse_time_of_day(end)
    if start_t >= end_t:
        raise ValueError("End time must be after start time")
    return start_t, end_t


def intervals_overlap(a_start, a_end, b_start, b_end) -> bool:
    """Half-open ``[start, end)`` intersection; touching edges do not overlap."""
    return parse_time_of_day(a_start) < parse_time_of_day(b_end) and parse_time_of_day(a_end) > parse_time_of_day(
        b_start
    )


def find_conflicts(day_of_week: int, start, end, plans) -> list[dict]:
    # Slots are stored at minute resolution; compare both sides the same way.
    start = format_time_of_day(start)
    end = format_time_of_day(end)
    conflicts = []
    for plan in plans or []:
        if int(plan.get("day_of_week", -1)) != int(day_of_week):
            continue
        existing_start = format_time_of_day(plan.get("start_time"))
        existing_end = format_time_of_day(plan.get("end_time"))
        if intervals_overlap(start, end, existing_start, existing_end):
            conflicts.append(plan)
    return conflicts


def has_overlap(day_of_week: int, start, end, plans) -> bool:
    return bool(find_conflicts(day_of_week, start, end, plans))


def plan_duration_hours(plan) -> float:
    start_t = parse_time_of_day(plan.get("start_time"))
    end_t = parse_time_of_day(plan.get("end_time"))
    minutes = (end_t.hour * 60 + end_t.minute) - (start_t.hour * 60 + start_t.minute)
    return minutes / 60
