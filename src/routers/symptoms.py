"""Endpoints for daily symptom logs."""

from __future__ import annotations

import uuid
from datetime import date
from typing import Any

from fastapi import APIRouter, HTTPException, Query

from src.dependencies import CurrentUser
from src.models.tracking import SymptomCreate, SymptomRecord
from src.services.supabase import execute, fetch, fetchrow

router = APIRouter(prefix="/symptoms", tags=["symptoms"])


@router.get("", response_model=list[SymptomRecord])
async def list_symptoms(
    user: CurrentUser,
    start_date: date | None = Query(default=None),
    end_date: date | None = Query(default=None),
    limit: int = Query(default=60, ge=1, le=365),
) -> Any:
    """Symptom history, newest date first."""
    conditions = ["user_id = $1"]
    params: list[Any] = [user.user_id]
    idx = 2

    if start_date:
        conditions.append(f"date >= ${idx}")
        params.append(start_date)
        idx += 1
    if end_date:
        conditions.append(f"date <= ${idx}")
        params.append(end_date)
        idx += 1

    where = " AND ".join(conditions)
    rows = await fetch(
        f"SELECT * FROM symptom_logs WHERE {where} ORDER BY date DESC, created_at DESC LIMIT ${idx}",
        *params, limit,
        user_id=user.user_id,
    )
    return [dict(r) for r in rows]


@router.post("", response_model=SymptomRecord, status_code=201)
async def create_symptom_log(user: CurrentUser, body: SymptomCreate) -> Any:
    row = await fetchrow(
        """
        INSERT INTO symptom_logs (
            symptom_id, user_id, date, mood, symptoms, menstrual_flow, spotting
        ) VALUES (gen_random_uuid(), $1, $2, $3, $4, $5, $6)
        RETURNING *
        """,
        user.user_id,
        body.date,
        body.mood.value if body.mood else None,
        body.symptoms,
        body.menstrual_flow.value,
        body.spotting.value,
        user_id=user.user_id,
    )
    return dict(row)


@router.delete("/{symptom_id}", status_code=204)
async def delete_symptom_log(symptom_id: uuid.UUID, user: CurrentUser) -> None:
    result = await execute(
        "DELETE FROM symptom_logs WHERE symptom_id = $1 AND user_id = $2",
        symptom_id, user.user_id,
        user_id=user.user_id,
    )
    if result == "DELETE 0":
        raise HTTPException(status_code=404, detail="Symptom log not found")
