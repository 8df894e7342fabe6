from __future__ import annotations

import asyncio
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, HTTPException, Query

from backend.auth import require_user_email
from backend.schemas import ReportResponse
from backend.services import reports
from backend.services.clock import utc_now
from backend.settings import get_settings
from backend import repositories

router = APIRouter()


@router.get("/v1/reports", response_model=ReportResponse)
async def get_report(
    range_name: str = Query("week", alias="range"),
    user_email: str = Depends(require_user_email),
):
    today = utc_now().astimezone(ZoneInfo(get_settings().app_timezone)).date()
    try:
        start = reports.report_start_date(range_name, today)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    subjects, tasks, logs = await asyncio.gather(
        repositories.list_subjects(user_email),
        repositories.list_tasks(user_email, created_from=start.isoformat()),
        repositories.list_progress_logs(user_email, since=start.isoformat()),
    )
    return {
        "range": range_name,
        "start_date": start.isoformat(),
        "subject_performance": reports.subject_performance(tasks, logs, subjects),
        "weekly_progress": reports.weekly_progress(logs),
        "task_status": reports.task_status_distribution(tasks),
        "summary": reports.report_summary(tasks, logs),
    }
