from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.encoders import jsonable_encoder

from backend.auth import require_user_email
from backend.schemas import ReminderCreate, ReminderPatch, ReminderStatusPayload, RemindersResponse
from backend.services import reminders as reminder_service
from backend.services.clock import utc_now
from backend import repositories

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/v1/reminders", response_model=RemindersResponse)
async def list_reminders(user_email: str = Depends(require_user_email)):
    now = utc_now()
    result = await reminder_service.reconcile_reminders(user_email, now=now)
    tasks = {task["id"]: task for task in await repositories.list_tasks(user_email)}
    upcoming, past = [], []
    for reminder in result.reminders:
        task = tasks.get(reminder.get("task_id"), {})
        payload = dict(reminder)
        payload["task_title"] = task.get("title")
        payload["task_status"] = task.get("status")
        payload["subject_name"] = task.get("subject_name")
        payload["subject_color"] = task.get("subject_color")
        if reminder_service.classify_reminder(reminder, task.get("status"), now) == "upcoming":
            upcoming.append(payload)
        else:
            past.append(payload)
    return {
        "upcoming": jsonable_encoder(upcoming),
        "past": jsonable_encoder(past),
        "removed_duplicates": result.removed_duplicates,
        "created": len(result.created),
    }


@router.post("/v1/reminders")
async def create_reminder(payload: ReminderCreate, user_email: str = Depends(require_user_email)):
    if not await repositories.get_task(user_email, payload.task_id):
        raise HTTPException(status_code=400, detail="Unknown task")
    try:
        return await repositories.create_reminder(user_email, payload.model_dump())
    except Exception as exc:
        logger.exception("Failed to save reminder: %s", exc)
        raise HTTPException(status_code=500, detail="Internal error")


@router.patch("/v1/reminders/{reminder_id}")
async def patch_reminder(reminder_id: str, payload: ReminderPatch, user_email: str = Depends(require_user_email)):
    if not await repositories.get_reminder(user_email, reminder_id):
        raise HTTPException(status_code=404, detail="Reminder not found")
    patch = payload.model_dump(exclude_unset=True)
    if patch.get("task_id") and not await repositories.get_task(user_email, patch["task_id"]):
        raise HTTPException(status_code=400, detail="Unknown task")
    # Editing re-arms the reminder.
    patch["status"] = "pending"
    try:
        return await repositories.update_reminder(user_email, reminder_id, patch)
    except Exception as exc:
        logger.exception("Failed to update reminder: %s", exc)
        raise HTTPException(status_code=500, detail="Internal error")


@router.patch("/v1/reminders/{reminder_id}/status")
async def update_reminder_status(
    reminder_id: str,
    payload: ReminderStatusPayload,
    user_email: str = Depends(require_user_email),
):
    if not await repositories.get_reminder(user_email, reminder_id):
        raise HTTPException(status_code=404, detail="Reminder not found")
    try:
        return await repositories.update_reminder(
            user_email,
            reminder_id,
            {"status": payload.status, "sent_at": utc_now()},
        )
    except Exception as exc:
        logger.exception("Failed to update reminder: %s", exc)
        raise HTTPException(status_code=500, detail="Internal error")


@router.delete("/v1/reminders/{reminder_id}")
async def delete_reminder(reminder_id: str, user_email: str = Depends(require_user_email)):
    try:
        await repositories.delete_reminder(user_email, reminder_id)
        return {"ok": True}
    except Exception as exc:
        logger.exception("Failed to delete reminder: %s", exc)
        raise HTTPException(status_code=500, detail="Internal error")
