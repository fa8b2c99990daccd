"""Endpoints for logged menstrual cycles."""

from __future__ import annotations

import uuid
from typing import Any

from fastapi import APIRouter, HTTPException, Query

from src.dependencies import CurrentUser
from src.models.tracking import CycleCreate, CycleRecord
from src.services.supabase import execute, fetch, fetchrow

router = APIRouter(prefix="/cycles", tags=["cycles"])


@router.get("", response_model=list[CycleRecord])
async def list_cycles(
    user: CurrentUser,
    limit: int = Query(default=24, ge=1, le=200),
) -> Any:
    rows = await fetch(
        """
        SELECT * FROM cycles WHERE user_id = $1
        ORDER BY start_date DESC NULLS LAST, created_at DESC
        LIMIT $2
        """,
        user.user_id, limit,
        user_id=user.user_id,
    )
    return [dict(r) for r in rows]


@router.post("", response_model=CycleRecord, status_code=201)
async def create_cycle(user: CurrentUser, body: CycleCreate) -> Any:
    row = await fetchrow(
        """
        INSERT INTO cycles (cycle_id, user_id, start_date, length)
        VALUES (gen_random_uuid(), $1, $2, $3)
        RETURNING *
        """,
        user.user_id, body.start_date, body.length,
        user_id=user.user_id,
    )
    return dict(row)


@router.delete("/{cycle_id}", status_code=204)
async def delete_cycle(cycle_id: uuid.UUID, user: CurrentUser) -> None:
    result = await execute(
        "DELETE FROM cycles WHERE cycle_id = $1 AND user_id = $2",
        cycle_id, user.user_id,
        user_id=user.user_id,
    )
    if result == "DELETE 0":
        raise HTTPException(status_code=404, detail="Cycle not found")
