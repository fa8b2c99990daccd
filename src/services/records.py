"""Load a user's tracking records for the data health check."""

from __future__ import annotations

import logging
import uuid

from src.models.tracking import CycleRecord, SymptomRecord
from src.services.supabase import fetch

logger = logging.getLogger("flowtrack.records")


async def load_cycles(user_id: uuid.UUID) -> list[CycleRecord]:
    """Return all of a user's cycle records, oldest first."""
    rows = await fetch(
        "SELECT * FROM cycles WHERE user_id = $1 ORDER BY start_date NULLS FIRST, created_at",
        user_id,
        user_id=user_id,
    )
    return [CycleRecord.model_validate(dict(r)) for r in rows]


async def load_symptoms(user_id: uuid.UUID) -> list[SymptomRecord]:
    """Return all of a user's symptom logs, newest first."""
    rows = await fetch(
        "SELECT * FROM symptom_logs WHERE user_id = $1 ORDER BY date DESC, created_at DESC",
        user_id,
        user_id=user_id,
    )
    records = [SymptomRecord.model_validate(dict(r)) for r in rows]
    logger.debug("Loaded %d symptom log(s) for user %s", len(records), user_id)
    return records
