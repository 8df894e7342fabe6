from __future__ import annotations

from fastapi import APIRouter, Depends

from backend.auth import require_user_email
from backend import repositories
from backend.schemas import ProfileSettingsPayload, ProfileResponse

router = APIRouter()


@router.get("/v1/profile", response_model=ProfileResponse)
async def get_profile(user_email: str = Depends(require_user_email)):
    return await repositories.get_profile(user_email)


@router.put("/v1/profile/settings", response_model=ProfileResponse)
async def update_settings(payload: ProfileSettingsPayload, user_email: str = Depends(require_user_email)):
    patch = payload.model_dump(exclude_unset=True)
    return await repositories.update_profile(user_email, patch)
