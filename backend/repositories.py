from __future__ import annotations

from datetime import date, datetime
from uuid import uuid4

from sqlalchemy import text as sql_text, bindparam

from backend.db import get_sessionmaker
from backend.services.clock import to_utc_iso, utc_now
from backend.settings import get_settings

PROFILES_TABLE = "profiles"
SUBJECTS_TABLE = "subjects"
TASKS_TABLE = "tasks"
PROGRESS_LOGS_TABLE = "progress_logs"
STUDY_PLANS_TABLE = "study_plans"
REMINDERS_TABLE = "reminders"
SYSTEM_LOGS_TABLE = "system_logs"

ROLES = {"student", "mentor", "admin"}
TASK_TYPES = {"assignment", "quiz", "revision", "exam", "project"}
PRIORITIES = {"low", "medium", "high"}
NOTIFICATION_TYPES = {"email", "push", "both"}
REMINDER_STATUSES = {"pending", "sent", "failed"}
SUBJECT_COLORS = [
    "#6A0DAD",
    "#8A2BE2",
    "#A78BFA",
    "#14B8A6",
    "#06B6D4",
    "#64748B",
    "#9CA3AF",
    "#EC4899",
    "#F59E0B",
]

PROFILE_COLUMNS = "user_email, full_name, role, reminder_time, semester_length_weeks, created_at, updated_at"
SUBJECT_COLUMNS = "id, user_email, name, instructor, credits, color, created_at, updated_at"
TASK_COLUMNS = (
    "t.id, t.user_email, t.subject_id, t.title, t.description, t.task_type, t.due_date, t.priority, "
    "t.hours_required, t.status, t.progress_percentage, t.completed_at, t.created_at, t.updated_at, "
    "s.name AS subject_name, s.color AS subject_color"
)
LOG_COLUMNS = (
    "l.id, l.user_email, l.subject_id, l.task_id, l.date, l.hours_studied, l.notes, l.created_at, "
    "s.name AS subject_name, s.color AS subject_color"
)
PLAN_COLUMNS = (
    "p.id, p.user_email, p.subject_id, p.task_id, p.day_of_week, p.start_time, p.end_time, p.recurrence, "
    "p.location, p.notes, p.created_at, s.name AS subject_name, s.color AS subject_color"
)
REMINDER_COLUMNS = "id, user_email, task_id, remind_at, message, notification_type, status, sent_at, created_at"


def _new_id() -> str:
    return uuid4().hex


def _now_iso() -> str:
    return to_utc_iso(utc_now())


def _normalize_time_value(value):
    if value is None:
        return None
    if hasattr(value, "strftime"):
        return value.strftime("%H:%M")
    value_str = str(value).strip()
    return value_str[:5] if value_str else None


def _normalize_choice(value, allowed: set, default: str) -> str:
    value = str(value or "").strip().lower()
    return value if value in allowed else default


def _parse_hours(value):
    if value is None:
        return None
    hours = float(value)
    return hours if hours >= 0 else 0.0


def _normalize_row(row) -> dict:
    if not row:
        return {}
    payload = dict(row)
    for key, value in list(payload.items()):
        if isinstance(value, (datetime, date)):
            payload[key] = value.isoformat()
    return payload


# -- profiles --------------------------------------------------------------


async def get_profile(user_email: str) -> dict:
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        row = (await session.execute(
            sql_text(f"SELECT {PROFILE_COLUMNS} FROM {PROFILES_TABLE} WHERE user_email = :user_email"),
            {"user_email": user_email},
        )).mappings().fetchone()
    if row:
        return _normalize_row(row)
    return await create_profile(user_email)


async def create_profile(user_email: str, full_name: str | None = None) -> dict:
    settings = get_settings()
    record = {
        "user_email": user_email,
        "full_name": full_name or user_email.split("@")[0].replace(".", " ").title(),
        "role": "admin" if user_email in settings.admin_emails else "student",
        "reminder_time": settings.default_reminder_time,
        "semester_length_weeks": settings.default_semester_weeks,
        "created_at": _now_iso(),
        "updated_at": _now_iso(),
    }
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        await session.execute(
            sql_text(
                f"""
                INSERT INTO {PROFILES_TABLE}
                (user_email, full_name, role, reminder_time, semester_length_weeks, created_at, updated_at)
                VALUES (:user_email, :full_name, :role, :reminder_time, :semester_length_weeks, :created_at, :updated_at)
                ON CONFLICT(user_email) DO NOTHING
                """
            ),
            record,
        )
        await session.commit()
    return record


async def update_profile(user_email: str, patch: dict) -> dict:
    allowed = {"full_name", "reminder_time", "semester_length_weeks", "role"}
    updates = []
    params = {"user_email": user_email}
    for key, value in patch.items():
        if key not in allowed or value is None:
            continue
        updates.append(f"{key} = :{key}")
        if key == "role":
            params[key] = _normalize_choice(value, ROLES, "student")
        elif key == "reminder_time" and hasattr(value, "strftime"):
            params[key] = value.strftime("%H:%M:%S")
        else:
            params[key] = value
    await get_profile(user_email)
    if not updates:
        return await get_profile(user_email)
    updates.append("updated_at = :updated_at")
    params["updated_at"] = _now_iso()
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        await session.execute(
            sql_text(f"UPDATE {PROFILES_TABLE} SET {', '.join(updates)} WHERE user_email = :user_email"),
            params,
        )
        await session.commit()
    return await get_profile(user_email)


async def list_profiles() -> list[dict]:
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        rows = (await session.execute(
            sql_text(f"SELECT {PROFILE_COLUMNS} FROM {PROFILES_TABLE} ORDER BY created_at DESC")
        )).mappings().all()
    return [_normalize_row(row) for row in rows]


async def profile_exists(user_email: str) -> bool:
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        row = (await session.execute(
            sql_text(f"SELECT 1 FROM {PROFILES_TABLE} WHERE user_email = :user_email"),
            {"user_email": user_email},
        )).fetchone()
    return row is not None


async def count_rows(table_name: str) -> int:
    if table_name not in {PROFILES_TABLE, SUBJECTS_TABLE, TASKS_TABLE}:
        raise ValueError(f"Counting {table_name} is not supported")
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        count = (await session.execute(sql_text(f"SELECT COUNT(*) FROM {table_name}"))).scalar_one()
    return int(count or 0)


# -- subjects --------------------------------------------------------------


async def list_subjects(user_email: str, order: str = "created") -> list[dict]:
    order_sql = "name ASC" if order == "name" else "created_at DESC"
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        rows = (await session.execute(
            sql_text(
                f"SELECT {SUBJECT_COLUMNS} FROM {SUBJECTS_TABLE} "
                f"WHERE user_email = :user_email ORDER BY {order_sql}"
            ),
            {"user_email": user_email},
        )).mappings().all()
    return [_normalize_row(row) for row in rows]


async def get_subject(user_email: str, subject_id: str) -> dict:
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        row = (await session.execute(
            sql_text(
                f"SELECT {SUBJECT_COLUMNS} FROM {SUBJECTS_TABLE} WHERE id = :id AND user_email = :user_email"
            ),
            {"id": subject_id, "user_email": user_email},
        )).mappings().fetchone()
    return _normalize_row(row)


async def create_subject(user_email: str, payload: dict) -> dict:
    record = {
        "id": _new_id(),
        "user_email": user_email,
        "name": " ".join(str(payload.get("name") or "").split())[:120] or "Untitled subject",
        "instructor": payload.get("instructor") or None,
        "credits": payload.get("credits"),
        "color": payload.get("color") or SUBJECT_COLORS[0],
        "created_at": _now_iso(),
        "updated_at": _now_iso(),
    }
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        await session.execute(
            sql_text(
                f"""
                INSERT INTO {SUBJECTS_TABLE}
                (id, user_email, name, instructor, credits, color, created_at, updated_at)
                VALUES (:id, :user_email, :name, :instructor, :credits, :color, :created_at, :updated_at)
                """
            ),
            record,
        )
        await session.commit()
    return record


async def update_subject(user_email: str, subject_id: str, patch: dict) -> dict:
    allowed = {"name", "instructor", "credits", "color"}
    updates = []
    params = {"id": subject_id, "user_email": user_email}
    for key, value in patch.items():
        if key not in allowed:
            continue
        updates.append(f"{key} = :{key}")
        params[key] = value
    if not updates:
        return await get_subject(user_email, subject_id)
    updates.append("updated_at = :updated_at")
    params["updated_at"] = _now_iso()
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        await session.execute(
            sql_text(
                f"UPDATE {SUBJECTS_TABLE} SET {', '.join(updates)} WHERE id = :id AND user_email = :user_email"
            ),
            params,
        )
        await session.commit()
    return await get_subject(user_email, subject_id)


async def delete_subject(user_email: str, subject_id: str) -> None:
    params = {"user_email": user_email, "subject_id": subject_id}
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        await session.execute(
            sql_text(
                f"""
                DELETE FROM {REMINDERS_TABLE}
                WHERE user_email = :user_email
                  AND task_id IN (
                    SELECT id FROM {TASKS_TABLE} WHERE user_email = :user_email AND subject_id = :subject_id
                  )
                """
            ),
            params,
        )
        await session.execute(
            sql_text(f"DELETE FROM {TASKS_TABLE} WHERE user_email = :user_email AND subject_id = :subject_id"),
            params,
        )
        await session.execute(
            sql_text(f"DELETE FROM {STUDY_PLANS_TABLE} WHERE user_email = :user_email AND subject_id = :subject_id"),
            params,
        )
        await session.execute(
            sql_text(f"DELETE FROM {PROGRESS_LOGS_TABLE} WHERE user_email = :user_email AND subject_id = :subject_id"),
            params,
        )
        await session.execute(
            sql_text(f"DELETE FROM {SUBJECTS_TABLE} WHERE user_email = :user_email AND id = :subject_id"),
            params,
        )
        await session.commit()


# -- tasks -----------------------------------------------------------------


async def list_tasks(
    user_email: str,
    status: str | None = None,
    priority: str | None = None,
    exclude_status: str | None = None,
    due_from: str | None = None,
    created_from: str | None = None,
) -> list[dict]:
    clauses = ["t.user_email = :user_email"]
    params = {"user_email": user_email}
    if status:
        clauses.append("t.status = :status")
        params["status"] = status
    if priority:
        clauses.append("t.priority = :priority")
        params["priority"] = priority
    if exclude_status:
        clauses.append("t.status <> :exclude_status")
        params["exclude_status"] = exclude_status
    if due_from:
        clauses.append("t.due_date >= :due_from")
        params["due_from"] = due_from
    if created_from:
        clauses.append("t.created_at >= :created_from")
        params["created_from"] = created_from
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        rows = (await session.execute(
            sql_text(
                f"""
                SELECT {TASK_COLUMNS}
                FROM {TASKS_TABLE} t
                LEFT JOIN {SUBJECTS_TABLE} s ON s.id = t.subject_id
                WHERE {' AND '.join(clauses)}
                ORDER BY t.due_date IS NULL, t.due_date, t.created_at
                """
            ),
            params,
        )).mappings().all()
    return [_normalize_row(row) for row in rows]


async def get_task(user_email: str, task_id: str) -> dict:
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        row = (await session.execute(
            sql_text(
                f"""
                SELECT {TASK_COLUMNS}
                FROM {TASKS_TABLE} t
                LEFT JOIN {SUBJECTS_TABLE} s ON s.id = t.subject_id
                WHERE t.id = :id AND t.user_email = :user_email
                """
            ),
            {"id": task_id, "user_email": user_email},
        )).mappings().fetchone()
    return _normalize_row(row)


async def create_task(user_email: str, payload: dict) -> dict:
    record = {
        "id": _new_id(),
        "user_email": user_email,
        "subject_id": payload.get("subject_id"),
        "title": payload.get("title") or "Untitled task",
        "description": payload.get("description") or None,
        "task_type": _normalize_choice(payload.get("task_type"), TASK_TYPES, "assignment"),
        "due_date": to_utc_iso(payload.get("due_date")),
        "priority": _normalize_choice(payload.get("priority"), PRIORITIES, "medium"),
        "hours_required": _parse_hours(payload.get("hours_required")) or 0.0,
        "status": payload.get("status") or "pending",
        "progress_percentage": int(payload.get("progress_percentage") or 0),
        "completed_at": None,
        "created_at": _now_iso(),
        "updated_at": _now_iso(),
    }
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        await session.execute(
            sql_text(
                f"""
                INSERT INTO {TASKS_TABLE}
                (id, user_email, subject_id, title, description, task_type, due_date, priority,
                 hours_required, status, progress_percentage, completed_at, created_at, updated_at)
                VALUES
                (:id, :user_email, :subject_id, :title, :description, :task_type, :due_date, :priority,
                 :hours_required, :status, :progress_percentage, :completed_at, :created_at, :updated_at)
                """
            ),
            record,
        )
        await session.commit()
    return await get_task(user_email, record["id"])


async def update_task(user_email: str, task_id: str, patch: dict) -> dict:
    allowed = {
        "subject_id",
        "title",
        "description",
        "task_type",
        "due_date",
        "priority",
        "hours_required",
        "status",
        "progress_percentage",
        "completed_at",
    }
    updates = []
    params = {"id": task_id, "user_email": user_email}
    for key, value in patch.items():
        if key not in allowed:
            continue
        updates.append(f"{key} = :{key}")
        if key == "priority":
            params[key] = _normalize_choice(value, PRIORITIES, "medium")
        elif key == "task_type":
            params[key] = _normalize_choice(value, TASK_TYPES, "assignment")
        elif key == "hours_required":
            params[key] = _parse_hours(value)
        elif key in {"due_date", "completed_at"}:
            params[key] = to_utc_iso(value)
        elif key == "progress_percentage":
            params[key] = None if value is None else int(value)
        else:
            params[key] = value
    if not updates:
        return await get_task(user_email, task_id)
    updates.append("updated_at = :updated_at")
    params["updated_at"] = _now_iso()
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        await session.execute(
            sql_text(
                f"UPDATE {TASKS_TABLE} SET {', '.join(updates)} WHERE id = :id AND user_email = :user_email"
            ),
            params,
        )
        await session.commit()
    return await get_task(user_email, task_id)


async def delete_task(user_email: str, task_id: str) -> None:
    params = {"user_email": user_email, "task_id": task_id}
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        await session.execute(
            sql_text(f"DELETE FROM {REMINDERS_TABLE} WHERE user_email = :user_email AND task_id = :task_id"),
            params,
        )
        await session.execute(
            sql_text(
                f"UPDATE {STUDY_PLANS_TABLE} SET task_id = NULL WHERE user_email = :user_email AND task_id = :task_id"
            ),
            params,
        )
        await session.execute(
            sql_text(
                f"UPDATE {PROGRESS_LOGS_TABLE} SET task_id = NULL WHERE user_email = :user_email AND task_id = :task_id"
            ),
            params,
        )
        await session.execute(
            sql_text(f"DELETE FROM {TASKS_TABLE} WHERE user_email = :user_email AND id = :task_id"),
            params,
        )
        await session.commit()


# -- progress logs ---------------------------------------------------------


async def list_progress_logs(
    user_email: str,
    task_ids: list[str] | None = None,
    since: str | None = None,
) -> list[dict]:
    clauses = ["l.user_email = :user_email"]
    params: dict = {"user_email": user_email}
    if since:
        clauses.append("l.date >= :since")
        params["since"] = since
    if task_ids is not None:
        if not task_ids:
            return []
        clauses.append("l.task_id IN :task_ids")
        params["task_ids"] = list(task_ids)
    stmt = sql_text(
        f"""
        SELECT {LOG_COLUMNS}
        FROM {PROGRESS_LOGS_TABLE} l
        LEFT JOIN {SUBJECTS_TABLE} s ON s.id = l.subject_id
        WHERE {' AND '.join(clauses)}
        ORDER BY l.date DESC, l.created_at DESC
        """
    )
    if task_ids is not None:
        stmt = stmt.bindparams(bindparam("task_ids", expanding=True))
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        rows = (await session.execute(stmt, params)).mappings().all()
    return [_normalize_row(row) for row in rows]


async def create_progress_log(user_email: str, payload: dict) -> dict:
    log_date = payload.get("date") or utc_now().date()
    record = {
        "id": _new_id(),
        "user_email": user_email,
        "subject_id": payload.get("subject_id"),
        "task_id": payload.get("task_id") or None,
        "date": log_date.isoformat() if hasattr(log_date, "isoformat") else str(log_date)[:10],
        "hours_studied": float(payload["hours_studied"]),
        "notes": payload.get("notes") or None,
        "created_at": _now_iso(),
    }
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        await session.execute(
            sql_text(
                f"""
                INSERT INTO {PROGRESS_LOGS_TABLE}
                (id, user_email, subject_id, task_id, date, hours_studied, notes, created_at)
                VALUES (:id, :user_email, :subject_id, :task_id, :date, :hours_studied, :notes, :created_at)
                """
            ),
            record,
        )
        await session.commit()
    return record


async def delete_progress_log(user_email: str, log_id: str) -> None:
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        await session.execute(
            sql_text(f"DELETE FROM {PROGRESS_LOGS_TABLE} WHERE user_email = :user_email AND id = :id"),
            {"user_email": user_email, "id": log_id},
        )
        await session.commit()


# -- study plans -----------------------------------------------------------


async def list_study_plans(user_email: str, day_of_week: int | None = None) -> list[dict]:
    clauses = ["p.user_email = :user_email"]
    params: dict = {"user_email": user_email}
    if day_of_week is not None:
        clauses.append("p.day_of_week = :day_of_week")
        params["day_of_week"] = int(day_of_week)
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        rows = (await session.execute(
            sql_text(
                f"""
                SELECT {PLAN_COLUMNS}
                FROM {STUDY_PLANS_TABLE} p
                LEFT JOIN {SUBJECTS_TABLE} s ON s.id = p.subject_id
                WHERE {' AND '.join(clauses)}
                ORDER BY p.day_of_week, p.start_time
                """
            ),
            params,
        )).mappings().all()
    return [_normalize_row(row) for row in rows]


async def create_study_plan(user_email: str, payload: dict) -> dict:
    record = {
        "id": _new_id(),
        "user_email": user_email,
        "subject_id": payload.get("subject_id"),
        "task_id": payload.get("task_id"),
        "day_of_week": int(payload["day_of_week"]),
        "start_time": _normalize_time_value(payload.get("start_time")),
        "end_time": _normalize_time_value(payload.get("end_time")),
        "recurrence": payload.get("recurrence") or "weekly",
        "location": payload.get("location"),
        "notes": payload.get("notes"),
        "created_at": _now_iso(),
    }
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        await session.execute(
            sql_text(
                f"""
                INSERT INTO {STUDY_PLANS_TABLE}
                (id, user_email, subject_id, task_id, day_of_week, start_time, end_time,
                 recurrence, location, notes, created_at)
                VALUES
                (:id, :user_email, :subject_id, :task_id, :day_of_week, :start_time, :end_time,
                 :recurrence, :location, :notes, :created_at)
                """
            ),
            record,
        )
        await session.commit()
    return record


async def delete_study_plan(user_email: str, plan_id: str) -> None:
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        await session.execute(
            sql_text(f"DELETE FROM {STUDY_PLANS_TABLE} WHERE user_email = :user_email AND id = :id"),
            {"user_email": user_email, "id": plan_id},
        )
        await session.commit()


# -- reminders -------------------------------------------------------------


async def list_reminders(user_email: str) -> list[dict]:
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        rows = (await session.execute(
            sql_text(
                f"""
                SELECT {REMINDER_COLUMNS}
                FROM {REMINDERS_TABLE}
                WHERE user_email = :user_email
                ORDER BY remind_at ASC, created_at ASC
                """
            ),
            {"user_email": user_email},
        )).mappings().all()
    return [_normalize_row(row) for row in rows]


async def get_reminder(user_email: str, reminder_id: str) -> dict:
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        row = (await session.execute(
            sql_text(
                f"SELECT {REMINDER_COLUMNS} FROM {REMINDERS_TABLE} WHERE id = :id AND user_email = :user_email"
            ),
            {"id": reminder_id, "user_email": user_email},
        )).mappings().fetchone()
    return _normalize_row(row)


def _reminder_record(user_email: str, payload: dict) -> dict:
    return {
        "id": _new_id(),
        "user_email": user_email,
        "task_id": payload.get("task_id"),
        "remind_at": to_utc_iso(payload.get("remind_at")),
        "message": payload.get("message") or "Reminder: Task due soon",
        "notification_type": _normalize_choice(payload.get("notification_type"), NOTIFICATION_TYPES, "email"),
        "status": _normalize_choice(payload.get("status"), REMINDER_STATUSES, "pending"),
        "sent_at": None,
        "created_at": _now_iso(),
    }


async def create_reminders(user_email: str, payloads: list[dict]) -> list[dict]:
    records = [_reminder_record(user_email, payload) for payload in payloads]
    if not records:
        return []
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        await session.execute(
            sql_text(
                f"""
                INSERT INTO {REMINDERS_TABLE}
                (id, user_email, task_id, remind_at, message, notification_type, status, sent_at, created_at)
                VALUES
                (:id, :user_email, :task_id, :remind_at, :message, :notification_type, :status, :sent_at, :created_at)
                """
            ),
            records,
        )
        await session.commit()
    return records


async def create_reminder(user_email: str, payload: dict) -> dict:
    records = await create_reminders(user_email, [payload])
    return records[0]


async def update_reminder(user_email: str, reminder_id: str, patch: dict) -> dict:
    allowed = {"task_id", "remind_at", "message", "notification_type", "status", "sent_at"}
    updates = []
    params = {"id": reminder_id, "user_email": user_email}
    for key, value in patch.items():
        if key not in allowed:
            continue
        updates.append(f"{key} = :{key}")
        if key in {"remind_at", "sent_at"}:
            params[key] = to_utc_iso(value)
        elif key == "notification_type":
            params[key] = _normalize_choice(value, NOTIFICATION_TYPES, "email")
        elif key == "status":
            params[key] = _normalize_choice(value, REMINDER_STATUSES, "pending")
        else:
            params[key] = value
    if updates:
        session_factory = get_sessionmaker()
        async with session_factory() as session:
            await session.execute(
                sql_text(
                    f"UPDATE {REMINDERS_TABLE} SET {', '.join(updates)} WHERE id = :id AND user_email = :user_email"
                ),
                params,
            )
            await session.commit()
    return await get_reminder(user_email, reminder_id)


async def delete_reminder(user_email: str, reminder_id: str) -> None:
    await delete_reminders(user_email, [reminder_id])


async def delete_reminders(user_email: str, reminder_ids: list[str]) -> None:
    if not reminder_ids:
        return
    stmt = sql_text(
        f"DELETE FROM {REMINDERS_TABLE} WHERE user_email = :user_email AND id IN :ids"
    ).bindparams(bindparam("ids", expanding=True))
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        await session.execute(stmt, {"user_email": user_email, "ids": list(reminder_ids)})
        await session.commit()


# -- system logs -----------------------------------------------------------


async def log_system_event(log_type: str, message: str, user_email: str | None = None) -> None:
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        await session.execute(
            sql_text(
                f"""
                INSERT INTO {SYSTEM_LOGS_TABLE} (id, log_type, message, user_email, created_at)
                VALUES (:id, :log_type, :message, :user_email, :created_at)
                """
            ),
            {
                "id": _new_id(),
                "log_type": log_type,
                "message": message,
                "user_email": user_email,
                "created_at": _now_iso(),
            },
        )
        await session.commit()


async def list_system_logs(limit: int = 20) -> list[dict]:
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        rows = (await session.execute(
            sql_text(
                f"""
                SELECT id, log_type, message, user_email, created_at
                FROM {SYSTEM_LOGS_TABLE}
                ORDER BY created_at DESC
                LIMIT :limit
                """
            ),
            {"limit": int(limit)},
        )).mappings().all()
    return [_normalize_row(row) for row in rows]
