from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.encoders import jsonable_encoder

from backend.auth import require_user_email
from backend.schemas import TaskCreate, TaskPatch, TaskStatusPayload, TaskCompletionPayload
from backend.services import progress
from backend.services.clock import to_utc_iso, utc_now
from backend import repositories

logger = logging.getLogger(__name__)

router = APIRouter()


async def _annotate(user_email: str, tasks: list[dict]) -> list[dict]:
    task_ids = [item["id"] for item in tasks]
    logs = await repositories.list_progress_logs(user_email, task_ids=task_ids)
    annotated = progress.annotate_tasks(tasks, logs)
    now = utc_now()
    for item in annotated:
        item["display_status"] = progress.display_status(item, now)
    return annotated


async def _require_task(user_email: str, task_id: str) -> dict:
    record = await repositories.get_task(user_email, task_id)
    if not record:
        raise HTTPException(status_code=404, detail="Task not found")
    return record


async def _require_subject(user_email: str, subject_id: str) -> dict:
    record = await repositories.get_subject(user_email, subject_id)
    if not record:
        raise HTTPException(status_code=400, detail="Unknown subject")
    return record


@router.get("/v1/tasks")
async def list_tasks(
    status: str | None = Query(None),
    priority: str | None = Query(None),
    upcoming_only: bool = Query(False),
    user_email: str = Depends(require_user_email),
):
    if upcoming_only:
        items = await repositories.list_tasks(
            user_email,
            status=status,
            priority=priority,
            exclude_status="completed",
            due_from=to_utc_iso(utc_now()),
        )
    else:
        items = await repositories.list_tasks(user_email, status=status, priority=priority)
    return {"items": jsonable_encoder(await _annotate(user_email, items))}


@router.post("/v1/tasks")
async def create_task(payload: TaskCreate, user_email: str = Depends(require_user_email)):
    await _require_subject(user_email, payload.subject_id)
    try:
        record = await repositories.create_task(user_email, payload.model_dump())
        return jsonable_encoder(record)
    except Exception as exc:
        logger.exception("Failed to create task: %s", exc)
        raise HTTPException(status_code=500, detail="Internal error")


@router.get("/v1/tasks/{task_id}")
async def get_task(task_id: str, user_email: str = Depends(require_user_email)):
    record = await _require_task(user_email, task_id)
    annotated = await _annotate(user_email, [record])
    return jsonable_encoder(annotated[0])


@router.patch("/v1/tasks/{task_id}")
async def patch_task(task_id: str, payload: TaskPatch, user_email: str = Depends(require_user_email)):
    await _require_task(user_email, task_id)
    patch = payload.model_dump(exclude_unset=True)
    if patch.get("subject_id"):
        await _require_subject(user_email, patch["subject_id"])
    try:
        record = await repositories.update_task(user_email, task_id, patch)
        return jsonable_encoder(record)
    except Exception as exc:
        logger.exception("Failed to update task: %s", exc)
        raise HTTPException(status_code=500, detail="Internal error")


@router.patch("/v1/tasks/{task_id}/status")
async def change_task_status(task_id: str, payload: TaskStatusPayload, user_email: str = Depends(require_user_email)):
    record = await _require_task(user_email, task_id)
    try:
        status = progress.next_status(record.get("status"), payload.status)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    patch = {"status": status, "completed_at": utc_now() if status == "completed" else None}
    try:
        record = await repositories.update_task(user_email, task_id, patch)
        return jsonable_encoder(record)
    except Exception as exc:
        logger.exception("Failed to update task status: %s", exc)
        raise HTTPException(status_code=500, detail="Internal error")


@router.post("/v1/tasks/{task_id}/complete")
async def log_task_completion(
    task_id: str,
    payload: TaskCompletionPayload,
    user_email: str = Depends(require_user_email),
):
    task = await _require_task(user_email, task_id)
    try:
        await repositories.create_progress_log(
            user_email,
            {
                "subject_id": task.get("subject_id"),
                "task_id": task_id,
                "hours_studied": payload.hours_studied,
                "notes": payload.description or f"Completed: {task.get('title')}",
            },
        )
        logs = await repositories.list_progress_logs(user_email, task_ids=[task_id])
        logged = progress.logged_hours_by_task(logs).get(task_id, 0.0)
        patch = progress.apply_completion(task, logged, payload.progress_percentage)
        record = await repositories.update_task(user_email, task_id, patch)
        annotated = progress.annotate_tasks([record], logs)
        return jsonable_encoder(annotated[0])
    except Exception as exc:
        logger.exception("Failed to log task completion: %s", exc)
        raise HTTPException(status_code=500, detail="Internal error")


@router.delete("/v1/tasks/{task_id}")
async def delete_task(task_id: str, user_email: str = Depends(require_user_email)):
    await _require_task(user_email, task_id)
    try:
        await repositories.delete_task(user_email, task_id)
        return {"ok": True}
    except Exception as exc:
        logger.exception("Failed to delete task: %s", exc)
        raise HTTPException(status_code=500, detail="Internal error")
