"""Shared FastAPI dependencies injected into route handlers."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, HTTPException, Request

from src.services.profiles import ProfileStore


@dataclass(frozen=True)
class AuthContext:
    """Authenticated user context extracted from the Supabase JWT."""

    user_id: uuid.UUID  # Supabase auth user id (JWT "sub")
    email: str | None = None
    role: str | None = None
    session_id: str | None = None


async def get_current_user(request: Request) -> AuthContext:
    """Extract the authenticated user from the request state.

    The Supabase auth middleware sets ``request.state.auth`` before routes run.
    """
    auth: AuthContext | None = getattr(request.state, "auth", None)
    if auth is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return auth


def get_profile_store(request: Request) -> ProfileStore:
    """Return the app-wide ProfileStore created at startup."""
    store: ProfileStore | None = getattr(request.app.state, "profile_store", None)
    if store is None:
        store = ProfileStore()
        request.app.state.profile_store = store
    return store


# Annotated shortcuts for route signatures
CurrentUser = Annotated[AuthContext, Depends(get_current_user)]
Profiles = Annotated[ProfileStore, Depends(get_profile_store)]
