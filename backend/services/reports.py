from __future__ import annotations

import calendar as _calendar
import math
from datetime import date, timedelta

from backend.services.progress import round_half_up

REPORT_RANGES = ("week", "month", "all")
WEEKS_SHOWN = 8


def report_start_date(range_name: str, today: date) -> date:
    if range_name == "week":
        return today - timedelta(days=7)
    if range_name == "month":
        year, month = (today.year, today.month - 1) if today.month > 1 else (today.year - 1, 12)
        day = min(today.day, _calendar.monthrange(year, month)[1])
        return date(year, month, day)
    if range_name == "all":
        try:
            return today.replace(year=today.year - 1)
        except ValueError:
            # Feb 29
            return today.replace(year=today.year - 1, day=28)
    raise ValueError(f"Unknown report range: {range_name}")


def _hours(log) -> float:
    return float(log.get("hours_studied") or 0)


def _as_date(value) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def week_start(day: date) -> date:
    # Weeks start on Sunday; date.weekday() has Monday == 0.
    return day - timedelta(days=(day.weekday() + 1) % 7)


def subject_performance(tasks, logs, subjects=None) -> list[dict]:
    subject_map = {s["id"]: s for s in subjects or []}
    rows: dict[str, dict] = {}
    for task in tasks or []:
        key = task.get("subject_id")
        if key not in rows:
            subject = subject_map.get(key, {})
            rows[key] = {
                "subject_id": key,
                "name": subject.get("name") or task.get("subject_name") or "Unknown",
                "color": subject.get("color") or task.get("subject_color"),
                "tasks_completed": 0,
                "tasks_total": 0,
                "hours_studied": 0.0,
            }
        row = rows[key]
        row["tasks_total"] += 1
        if task.get("status") == "completed":
            row["tasks_completed"] += 1

    for log in logs or []:
        row = rows.get(log.get("subject_id"))
        if row is not None:
            row["hours_studied"] += _hours(log)

    for row in rows.values():
        row["hours_studied"] = round_half_up(row["hours_studied"], 1)
    return list(rows.values())


def weekly_progress(logs) -> list[dict]:
    weeks: dict[date, float] = {}
    for log in logs or []:
        start = week_start(_as_date(log["date"]))
        weeks[start] = weeks.get(start, 0.0) + _hours(log)
    ordered = sorted(weeks.items())[-WEEKS_SHOWN:]
    return [
        {
            "week_start": start.isoformat(),
            "week": f"{start.strftime('%b')} {start.day}",
            "hours": round_half_up(hours, 1),
        }
        for start, hours in ordered
    ]


def task_status_distribution(tasks) -> list[dict]:
    counts = {"pending": 0, "in_progress": 0, "completed": 0, "overdue": 0}
    for task in tasks or []:
        status = task.get("status")
        if status in counts:
            counts[status] += 1
    return [{"status": status.replace("_", " "), "count": count} for status, count in counts.items()]


def report_summary(tasks, logs) -> dict:
    total = len(tasks or [])
    completed = sum(1 for task in tasks or [] if task.get("status") == "completed")
    return {
        "total_hours": round_half_up(sum(_hours(log) for log in logs or []), 1),
        "tasks_completed": completed,
        "tasks_total": total,
        "completion_rate": int(round_half_up(completed / total * 100)) if total else 0,
    }


def allowed_absences(credits, semester_length_weeks) -> int | None:
    """Classes that can be missed while keeping attendance strictly above 75%."""
    if not credits:
        return None
    total_classes = int(credits) * int(semester_length_weeks)
    return max(0, math.ceil(0.25 * total_classes) - 1)
