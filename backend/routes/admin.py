from __future__ import annotations

import asyncio
import logging
from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException

from backend.auth import require_admin
from backend.schemas import AdminOverviewResponse, RoleUpdatePayload
from backend.services.clock import parse_instant, utc_now
from backend import repositories

logger = logging.getLogger(__name__)

router = APIRouter()

ACTIVE_WINDOW = timedelta(days=7)
RECENT_LOGS = 20


@router.get("/v1/admin/overview", response_model=AdminOverviewResponse)
async def admin_overview(admin_email: str = Depends(require_admin)):
    users, total_subjects, total_tasks, logs = await asyncio.gather(
        repositories.list_profiles(),
        repositories.count_rows(repositories.SUBJECTS_TABLE),
        repositories.count_rows(repositories.TASKS_TABLE),
        repositories.list_system_logs(limit=RECENT_LOGS),
    )
    cutoff = utc_now() - ACTIVE_WINDOW
    active_users = 0
    for user in users:
        last_seen = parse_instant(user.get("updated_at"))
        if last_seen is not None and last_seen > cutoff:
            active_users += 1
    return {
        "stats": {
            "total_users": len(users),
            "total_subjects": total_subjects,
            "total_tasks": total_tasks,
            "active_users": active_users,
        },
        "users": users,
        "logs": logs,
    }


@router.put("/v1/admin/users/{email}/role")
async def update_user_role(email: str, payload: RoleUpdatePayload, admin_email: str = Depends(require_admin)):
    target = email.strip().lower()
    if not await repositories.profile_exists(target):
        raise HTTPException(status_code=404, detail="User not found")
    try:
        record = await repositories.update_profile(target, {"role": payload.role})
        await repositories.log_system_event("info", f"Role of {target} changed to {payload.role}", user_email=admin_email)
        return record
    except Exception as exc:
        logger.exception("Failed to update user role: %s", exc)
        raise HTTPException(status_code=500, detail="Internal error")
