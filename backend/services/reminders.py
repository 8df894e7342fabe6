from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo

from backend import repositories
from backend.services.clock import parse_instant, to_utc_iso, utc_now
from backend.services.planner import parse_time_of_day
from backend.settings import get_settings

logger = logging.getLogger(__name__)

# Days before the due date for the early reminder; the second one fires on the due date.
LEAD_DAYS = 2


@dataclass
class ReconcileResult:
    reminders: list[dict] = field(default_factory=list)
    removed_duplicates: int = 0
    created: list[dict] = field(default_factory=list)


def reminder_key(reminder) -> str:
    task_id = reminder.get("task_id") or "null"
    return f"{task_id}::{to_utc_iso(reminder.get('remind_at'))}"


def _sort_key(reminder):
    return parse_instant(reminder.get("remind_at")) or datetime.min.replace(tzinfo=timezone.utc)


def sort_reminders(reminders) -> list[dict]:
    return sorted(reminders or [], key=_sort_key)


def dedupe_reminders(reminders) -> tuple[list[dict], list[str]]:
    """Keep the first reminder per (task, instant); return ``(kept, duplicate_ids)``."""
    kept = []
    duplicate_ids = []
    seen = set()
    for reminder in reminders or []:
        key = reminder_key(reminder)
        if key in seen:
            if reminder.get("id"):
                duplicate_ids.append(reminder["id"])
            continue
        seen.add(key)
        kept.append(reminder)
    return kept, duplicate_ids


def candidate_instants(due_date, reminder_time, tz: tzinfo) -> list[datetime]:
    due_local = parse_instant(due_date).astimezone(tz)
    at = parse_time_of_day(reminder_time)
    instants = []
    for offset in (LEAD_DAYS, 0):
        day = due_local.date() - timedelta(days=offset)
        local = datetime(day.year, day.month, day.day, at.hour, at.minute, at.second, tzinfo=tz)
        instants.append(local.astimezone(timezone.utc))
    return instants


def synthesize_reminders(tasks, existing, reminder_time, now: datetime, tz: tzinfo) -> list[dict]:
    existing_keys = {reminder_key(item) for item in existing or []}
    to_insert = []
    for task in tasks or []:
        if task.get("status") == "completed" or not task.get("due_date"):
            continue
        due_label = parse_instant(task["due_date"]).astimezone(tz).strftime("%Y-%m-%d %H:%M")
        for candidate in candidate_instants(task["due_date"], reminder_time, tz):
            if candidate <= now:
                continue
            payload = {
                "task_id": task["id"],
                "remind_at": to_utc_iso(candidate),
                "message": f'Reminder: "{task.get("title")}" is due on {due_label}',
                "notification_type": "email",
                "status": "pending",
            }
            key = reminder_key(payload)
            if key in existing_keys:
                continue
            existing_keys.add(key)
            to_insert.append(payload)
    return to_insert


def merge_reminders(existing, inserted) -> list[dict]:
    combined, _ = dedupe_reminders(list(existing or []) + list(inserted or []))
    return sort_reminders(combined)


def classify_reminder(reminder, task_status: str | None, now: datetime) -> str:
    remind_at = parse_instant(reminder.get("remind_at"))
    if reminder.get("status") == "pending" and remind_at is not None and remind_at > now and task_status != "completed":
        return "upcoming"
    return "past"


async def reconcile_reminders(user_email: str, now: datetime | None = None) -> ReconcileResult:
    now = now or utc_now()
    settings = get_settings()
    existing = await repositories.list_reminders(user_email)
    tasks = await repositories.list_tasks(user_email, exclude_status="completed")

    kept, duplicate_ids = dedupe_reminders(existing)
    result = ReconcileResult()
    if duplicate_ids:
        try:
            await repositories.delete_reminders(user_email, duplicate_ids)
            result.removed_duplicates = len(duplicate_ids)
            await repositories.log_system_event(
                "warning",
                f"Removed {len(duplicate_ids)} duplicate reminder(s)",
                user_email=user_email,
            )
        except Exception as exc:
            logger.warning("Failed to remove duplicate reminder rows (non-fatal): %s", exc)

    try:
        profile = await repositories.get_profile(user_email)
        reminder_time = profile.get("reminder_time") or settings.default_reminder_time
        candidates = synthesize_reminders(tasks, kept, reminder_time, now, ZoneInfo(settings.app_timezone))
        if candidates:
            result.created = await repositories.create_reminders(user_email, candidates)
        result.reminders = merge_reminders(kept, result.created)
    except Exception as exc:
        logger.error("Automatic reminder generation failed: %s", exc)
        result.created = []
        result.reminders = sort_reminders(kept)
    return result
