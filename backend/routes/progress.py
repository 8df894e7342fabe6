from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, Depends, HTTPException

from backend.auth import require_user_email
from backend.schemas import ProgressLogCreate
from backend.services import progress
from backend import repositories

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/v1/progress/logs")
async def list_logs(user_email: str = Depends(require_user_email)):
    items = await repositories.list_progress_logs(user_email)
    return {"items": items}


@router.post("/v1/progress/logs")
async def create_log(payload: ProgressLogCreate, user_email: str = Depends(require_user_email)):
    if not await repositories.get_subject(user_email, payload.subject_id):
        raise HTTPException(status_code=400, detail="Unknown subject")
    if payload.task_id and not await repositories.get_task(user_email, payload.task_id):
        raise HTTPException(status_code=400, detail="Unknown task")
    try:
        return await repositories.create_progress_log(user_email, payload.model_dump())
    except Exception as exc:
        logger.exception("Failed to save progress log: %s", exc)
        raise HTTPException(status_code=500, detail="Internal error")


@router.delete("/v1/progress/logs/{log_id}")
async def delete_log(log_id: str, user_email: str = Depends(require_user_email)):
    try:
        await repositories.delete_progress_log(user_email, log_id)
        return {"ok": True}
    except Exception as exc:
        logger.exception("Failed to delete progress log: %s", exc)
        raise HTTPException(status_code=500, detail="Internal error")


@router.get("/v1/progress/summary")
async def progress_summary(user_email: str = Depends(require_user_email)):
    subjects, tasks = await asyncio.gather(
        repositories.list_subjects(user_email, order="name"),
        repositories.list_tasks(user_email),
    )
    return {"subjects": progress.subject_task_stats(subjects, tasks)}
