from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from backend.auth import require_user_email
from backend.schemas import StudyPlanCreate
from backend.services import planner
from backend import repositories

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/v1/plans")
async def list_plans(
    day_of_week: int | None = Query(None, ge=0, le=6),
    user_email: str = Depends(require_user_email),
):
    items = await repositories.list_study_plans(user_email, day_of_week=day_of_week)
    for item in items:
        item["duration_hours"] = planner.plan_duration_hours(item)
    return {"items": items}


@router.post("/v1/plans")
async def create_plan(payload: StudyPlanCreate, user_email: str = Depends(require_user_email)):
    try:
        start_time = planner.format_time_of_day(payload.start_time)
        end_time = planner.format_time_of_day(payload.end_time)
        planner.validate_interval(start_time, end_time)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    if payload.task_id and payload.new_task:
        raise HTTPException(status_code=400, detail="Choose either an existing task or a new one")
    if not await repositories.get_subject(user_email, payload.subject_id):
        raise HTTPException(status_code=400, detail="Unknown subject")

    existing = await repositories.list_study_plans(user_email, day_of_week=payload.day_of_week)
    conflicts = planner.find_conflicts(payload.day_of_week, start_time, end_time, existing)
    if conflicts:
        raise HTTPException(
            status_code=409,
            detail="This time slot overlaps with an existing study plan. Please choose a different time.",
        )

    subject_id = payload.subject_id
    task_id = payload.task_id
    if task_id:
        task = await repositories.get_task(user_email, task_id)
        if not task:
            raise HTTPException(status_code=400, detail="Unknown task")
        subject_id = task.get("subject_id") or subject_id
        location, notes = "Assigned Task", f"Assigned task id: {task_id}"
    elif payload.new_task:
        location, notes = "Created via Planner", f"Task created: {payload.new_task.title}"
    else:
        location, notes = None, None

    try:
        # Two independent writes; a failed plan insert leaves the new task in place.
        if payload.new_task:
            task = await repositories.create_task(
                user_email,
                {**payload.new_task.model_dump(), "subject_id": subject_id, "progress_percentage": 0},
            )
            task_id = task["id"]
        record = await repositories.create_study_plan(
            user_email,
            {
                "subject_id": subject_id,
                "task_id": task_id,
                "day_of_week": payload.day_of_week,
                "start_time": start_time,
                "end_time": end_time,
                "recurrence": payload.recurrence,
                "location": location,
                "notes": notes,
            },
        )
        return record
    except Exception as exc:
        logger.exception("Failed to save study plan: %s", exc)
        raise HTTPException(status_code=500, detail="Internal error")


@router.delete("/v1/plans/{plan_id}")
async def delete_plan(plan_id: str, user_email: str = Depends(require_user_email)):
    try:
        await repositories.delete_study_plan(user_email, plan_id)
        return {"ok": True}
    except Exception as exc:
        logger.exception("Failed to delete study plan: %s", exc)
        raise HTTPException(status_code=500, detail="Internal error")
