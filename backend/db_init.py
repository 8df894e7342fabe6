from __future__ import annotations

from sqlalchemy import text as sql_text

from backend.db import get_engine


PROFILES_TABLE = "profiles"
SUBJECTS_TABLE = "subjects"
TASKS_TABLE = "tasks"
PROGRESS_LOGS_TABLE = "progress_logs"
STUDY_PLANS_TABLE = "study_plans"
REMINDERS_TABLE = "reminders"
SYSTEM_LOGS_TABLE = "system_logs"


async def init_db():
    engine = get_engine()
    async with engine.begin() as conn:
        await conn.execute(
            sql_text(
                f"""
                CREATE TABLE IF NOT EXISTS {PROFILES_TABLE} (
                    user_email TEXT PRIMARY KEY,
                    full_name TEXT,
                    role TEXT NOT NULL DEFAULT 'student',
                    reminder_time TEXT DEFAULT '07:00:00',
                    semester_length_weeks INTEGER DEFAULT 16,
                    created_at TEXT NOT NULL,
                    updated_at TEXT
                )
                """
            )
        )
        await conn.execute(
            sql_text(
                f"""
                CREATE TABLE IF NOT EXISTS {SUBJECTS_TABLE} (
                    id TEXT PRIMARY KEY,
                    user_email TEXT NOT NULL,
                    name TEXT NOT NULL,
                    instructor TEXT,
                    credits INTEGER,
                    color TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT
                )
                """
            )
        )
        await conn.execute(
            sql_text(
                f"""
                CREATE TABLE IF NOT EXISTS {TASKS_TABLE} (
                    id TEXT PRIMARY KEY,
                    user_email TEXT NOT NULL,
                    subject_id TEXT,
                    title TEXT NOT NULL,
                    description TEXT,
                    task_type TEXT NOT NULL DEFAULT 'assignment',
                    due_date TEXT,
                    priority TEXT NOT NULL DEFAULT 'medium',
                    hours_required REAL DEFAULT 0,
                    status TEXT NOT NULL DEFAULT 'pending',
                    progress_percentage INTEGER DEFAULT 0,
                    completed_at TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT
                )
                """
            )
        )
        await conn.execute(
            sql_text(
                f"""
                CREATE TABLE IF NOT EXISTS {PROGRESS_LOGS_TABLE} (
                    id TEXT PRIMARY KEY,
                    user_email TEXT NOT NULL,
                    subject_id TEXT,
                    task_id TEXT,
                    date TEXT NOT NULL,
                    hours_studied REAL NOT NULL,
                    notes TEXT,
                    created_at TEXT NOT NULL
                )
                """
            )
        )
        await conn.execute(
            sql_text(
                f"""
                CREATE TABLE IF NOT EXISTS {STUDY_PLANS_TABLE} (
                    id TEXT PRIMARY KEY,
                    user_email TEXT NOT NULL,
                    subject_id TEXT,
                    task_id TEXT,
                    day_of_week INTEGER NOT NULL,
                    start_time TEXT NOT NULL,
                    end_time TEXT NOT NULL,
                    recurrence TEXT DEFAULT 'weekly',
                    location TEXT,
                    notes TEXT,
                    created_at TEXT NOT NULL
                )
                """
            )
        )
        await conn.execute(
            sql_text(
                f"""
                CREATE TABLE IF NOT EXISTS {REMINDERS_TABLE} (
                    id TEXT PRIMARY KEY,
                    user_email TEXT NOT NULL,
                    task_id TEXT,
                    remind_at TEXT NOT NULL,
                    message TEXT,
                    notification_type TEXT DEFAULT 'email',
                    status TEXT NOT NULL DEFAULT 'pending',
                    sent_at TEXT,
                    created_at TEXT NOT NULL
                )
                """
            )
        )
        await conn.execute(
            sql_text(
                f"""
                CREATE TABLE IF NOT EXISTS {SYSTEM_LOGS_TABLE} (
                    id TEXT PRIMARY KEY,
                    log_type TEXT NOT NULL DEFAULT 'info',
                    message TEXT NOT NULL,
                    user_email TEXT,
                    created_at TEXT NOT NULL
                )
                """
            )
        )

    async def ensure_index(index_sql: str) -> None:
        try:
            async with engine.begin() as conn:
                await conn.execute(sql_text(index_sql))
        except Exception:
            return

    await ensure_index(
        f"CREATE INDEX IF NOT EXISTS idx_{TASKS_TABLE}_user_due "
        f"ON {TASKS_TABLE} (user_email, status, due_date)"
    )
    await ensure_index(
        f"CREATE INDEX IF NOT EXISTS idx_{PROGRESS_LOGS_TABLE}_user_task "
        f"ON {PROGRESS_LOGS_TABLE} (user_email, task_id)"
    )
    await ensure_index(
        f"CREATE INDEX IF NOT EXISTS idx_{STUDY_PLANS_TABLE}_user_day "
        f"ON {STUDY_PLANS_TABLE} (user_email, day_of_week)"
    )
    await ensure_index(
        f"CREATE INDEX IF NOT EXISTS idx_{REMINDERS_TABLE}_user_task_at "
        f"ON {REMINDERS_TABLE} (user_email, task_id, remind_at)"
    )
    await ensure_index(
        f"CREATE INDEX IF NOT EXISTS idx_{SYSTEM_LOGS_TABLE}_created "
        f"ON {SYSTEM_LOGS_TABLE} (created_at)"
    )
