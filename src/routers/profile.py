"""Profile endpoints for the authenticated user."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException

from src.dependencies import CurrentUser, Profiles
from src.models.tracking import Profile, ProfileUpdate
from src.services.profiles import ProfileStoreError

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("/me", response_model=Profile)
async def get_my_profile(user: CurrentUser, store: Profiles) -> Any:
    try:
        profile = await store.get_profile(user.user_id)
    except ProfileStoreError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    if profile is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    return profile


@router.patch("/me", response_model=Profile)
async def update_my_profile(user: CurrentUser, body: ProfileUpdate, store: Profiles) -> Any:
    if not body.model_fields_set:
        raise HTTPException(status_code=400, detail="No fields to update")
    try:
        profile = await store.update_profile(user.user_id, body)
    except ProfileStoreError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    if profile is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    return profile
