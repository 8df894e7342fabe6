from __future__ import annotations

import math
from datetime import datetime

from backend.services.clock import parse_instant, utc_now

STATUSES = ("pending", "in_progress", "completed", "overdue")

# Manual transitions; any status may go back to pending.
_FORWARD = {
    "pending": {"pending", "in_progress", "completed"},
    "in_progress": {"pending", "in_progress", "completed"},
    "completed": {"pending", "completed"},
    "overdue": {"pending", "in_progress", "completed", "overdue"},
}


def _as_float(value) -> float:
    if value is None:
        return 0.0
    return float(value)


def round_half_up(value: float, digits: int = 0) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def logged_hours_by_task(logs) -> dict[str, float]:
    totals: dict[str, float] = {}
    for log in logs or []:
        task_id = log.get("task_id")
        if not task_id:
            continue
        totals[task_id] = totals.get(task_id, 0.0) + _as_float(log.get("hours_studied"))
    return totals


def compute_progress(hours_required, logged: float, explicit_progress=None) -> tuple[float, int]:
    """Return ``(remaining_hours, progress_percent)`` for one task.

    An explicit progress of 0 counts as unset; tasks are created with 0 and
    the estimate from logged hours takes over until a real value is recorded.
    """
    remaining = max(0.0, _as_float(hours_required) - logged)
    if explicit_progress:
        progress = int(round_half_up(_as_float(explicit_progress)))
    else:
        total_estimate = logged + remaining
        progress = int(round_half_up(100 * logged / total_estimate)) if total_estimate > 0 else 0
    progress = min(100, max(0, progress))
    return round_half_up(remaining, 1), progress


def annotate_tasks(tasks, logs) -> list[dict]:
    logged = logged_hours_by_task(logs)
    annotated = []
    for task in tasks or []:
        remaining, progress = compute_progress(
            task.get("hours_required"),
            logged.get(task.get("id"), 0.0),
            task.get("progress_percentage"),
        )
        payload = dict(task)
        payload["remaining_hours"] = remaining
        payload["progress_percent"] = progress
        annotated.append(payload)
    return annotated


def is_active(task) -> bool:
    return task.get("status") != "completed" and int(task.get("progress_percent", 0) or 0) < 100


def display_status(task, now: datetime | None = None) -> str:
    status = task.get("status") or "pending"
    if status == "completed":
        return status
    due = parse_instant(task.get("due_date"))
    if due is not None and due < (now or utc_now()):
        return "overdue"
    return status


def next_status(current: str | None, requested: str) -> str:
    if requested not in STATUSES:
        raise ValueError(f"Unknown task status: {requested}")
    if requested == "overdue":
        raise ValueError("Overdue is derived from the due date and cannot be set manually")
    allowed = _FORWARD.get(current or "pending", _FORWARD["pending"])
    if requested not in allowed:
        raise ValueError(f"Cannot move task from {current} to {requested}")
    return requested


def apply_completion(task, logged_hours: float, progress: int) -> dict:
    """Work out the task patch after a "log task progress" submission.

    ``logged_hours`` is the total logged against the task including the new
    entry.
    """
    if not 0 <= int(progress) <= 100:
        raise ValueError("Progress must be between 0 and 100")
    remaining, _ = compute_progress(task.get("hours_required"), logged_hours, progress)
    should_complete = int(progress) == 100 or remaining <= 0
    patch = {
        "progress_percentage": int(progress),
        "status": "completed" if should_complete else (task.get("status") or "pending"),
    }
    if should_complete:
        patch["completed_at"] = utc_now()
    return patch


def subject_task_stats(subjects, tasks, default_color: str = "#A78BFA") -> list[dict]:
    stats: dict[str, dict] = {}
    names = {}
    for subject in subjects or []:
        names[subject["id"]] = subject
        stats[subject["id"]] = _empty_stat(subject["id"], subject.get("name"), subject.get("color") or default_color)

    for task in tasks or []:
        sid = task.get("subject_id") or "unknown"
        if sid not in stats:
            known = names.get(sid, {})
            stats[sid] = _empty_stat(sid, known.get("name") or "Unknown", known.get("color") or default_color)
        stat = stats[sid]
        stat["total"] += 1
        status = task.get("status")
        if status == "completed":
            stat["completed"] += 1
        elif status == "in_progress":
            stat["in_progress"] += 1
        elif status == "pending":
            stat["pending"] += 1
        elif status == "overdue":
            stat["overdue"] += 1

    for stat in stats.values():
        stat["completion_rate"] = int(round_half_up(stat["completed"] / stat["total"] * 100)) if stat["total"] > 0 else 0
    return list(stats.values())


def _empty_stat(subject_id, name, color) -> dict:
    return {
        "subject_id": subject_id,
        "name": name,
        "color": color,
        "total": 0,
        "completed": 0,
        "in_progress": 0,
        "pending": 0,
        "overdue": 0,
        "completion_rate": 0,
    }
