from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from backend.auth import require_user_email
from backend.schemas import SubjectCreate, SubjectPatch
from backend.services.reports import allowed_absences
from backend import repositories

logger = logging.getLogger(__name__)

router = APIRouter()


def _with_absences(subject: dict, semester_weeks: int) -> dict:
    payload = dict(subject)
    payload["allowed_absences"] = allowed_absences(subject.get("credits"), semester_weeks)
    return payload


@router.get("/v1/subjects")
async def list_subjects(order: str = "created", user_email: str = Depends(require_user_email)):
    profile = await repositories.get_profile(user_email)
    semester_weeks = profile.get("semester_length_weeks") or 16
    items = await repositories.list_subjects(user_email, order=order)
    return {"items": [_with_absences(item, semester_weeks) for item in items]}


@router.post("/v1/subjects")
async def create_subject(payload: SubjectCreate, user_email: str = Depends(require_user_email)):
    if not payload.name.strip():
        raise HTTPException(status_code=400, detail="Subject name cannot be empty")
    try:
        return await repositories.create_subject(user_email, payload.model_dump())
    except Exception as exc:
        logger.exception("Failed to create subject: %s", exc)
        raise HTTPException(status_code=500, detail="Internal error")


@router.patch("/v1/subjects/{subject_id}")
async def patch_subject(subject_id: str, payload: SubjectPatch, user_email: str = Depends(require_user_email)):
    if not await repositories.get_subject(user_email, subject_id):
        raise HTTPException(status_code=404, detail="Subject not found")
    try:
        return await repositories.update_subject(user_email, subject_id, payload.model_dump(exclude_unset=True))
    except Exception as exc:
        logger.exception("Failed to update subject: %s", exc)
        raise HTTPException(status_code=500, detail="Internal error")


@router.delete("/v1/subjects/{subject_id}")
async def delete_subject(subject_id: str, user_email: str = Depends(require_user_email)):
    if not await repositories.get_subject(user_email, subject_id):
        raise HTTPException(status_code=404, detail="Subject not found")
    try:
        await repositories.delete_subject(user_email, subject_id)
        return {"ok": True}
    except Exception as exc:
        logger.exception("Failed to delete subject: %s", exc)
        raise HTTPException(status_code=500, detail="Internal error")
