from __future__ import annotations

import asyncio
from datetime import timedelta
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends
from fastapi.encoders import jsonable_encoder

from backend.auth import require_user_email
from backend.schemas import DashboardResponse
from backend.services import progress, planner
from backend.services.clock import parse_instant, utc_now
from backend.settings import get_settings
from backend import repositories

router = APIRouter()

TOP_TASKS = 5


@router.get("/v1/dashboard", response_model=DashboardResponse)
async def dashboard(user_email: str = Depends(require_user_email)):
    now = utc_now()
    today_local = now.astimezone(ZoneInfo(get_settings().app_timezone))
    # 0 = Sunday
    today_dow = (today_local.weekday() + 1) % 7

    subjects, tasks, plans = await asyncio.gather(
        repositories.list_subjects(user_email),
        repositories.list_tasks(user_email),
        repositories.list_study_plans(user_email, day_of_week=today_dow),
    )
    logs = await repositories.list_progress_logs(user_email, task_ids=[task["id"] for task in tasks])
    annotated = progress.annotate_tasks(tasks, logs)

    visible = []
    for task in annotated:
        due = parse_instant(task.get("due_date"))
        if task.get("status") != "completed" and due is not None and due >= now:
            visible.append((due, task))
    todo = [task for _, task in visible if progress.is_active(task)][:TOP_TASKS]
    soon_cutoff = now + timedelta(hours=24)
    due_soon = [task for due, task in visible if progress.is_active(task) and due <= soon_cutoff][:TOP_TASKS]
    week_cutoff = now + timedelta(days=7)

    for plan in plans:
        plan["duration_hours"] = planner.plan_duration_hours(plan)

    return {
        "stats": {
            "total_subjects": len(subjects),
            "total_tasks": len(tasks),
            "completed_tasks": sum(1 for task in tasks if task.get("status") == "completed"),
            "upcoming_tasks": sum(1 for due, _ in visible if due <= week_cutoff),
        },
        "todo": jsonable_encoder(todo),
        "due_soon": jsonable_encoder(due_soon),
        "today_plans": jsonable_encoder(plans),
    }
