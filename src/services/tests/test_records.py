"""Tests for loading tracking records from Postgres."""

from __future__ import annotations

from datetime import date, datetime, timezone
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from src.models.tracking import MenstrualFlow, Mood, Spotting
from src.services import records
from src.services.tests.conftest import TEST_USER_ID

CREATED = datetime(2026, 2, 1, 8, 30, tzinfo=timezone.utc)


class TestLoadRecords:
    @pytest.mark.asyncio
    async def test_load_cycles(self, monkeypatch: pytest.MonkeyPatch) -> None:
        rows = [
            {
                "cycle_id": uuid4(),
                "user_id": TEST_USER_ID,
                "start_date": date(2026, 1, 3),
                "length": 29,
                "created_at": CREATED,
                "updated_at": CREATED,
            },
            {
                "cycle_id": uuid4(),
                "user_id": TEST_USER_ID,
                "start_date": None,
                "length": 17,
                "created_at": CREATED,
                "updated_at": CREATED,
            },
        ]
        fetch = AsyncMock(return_value=rows)
        monkeypatch.setattr(records, "fetch", fetch)

        cycles = await records.load_cycles(TEST_USER_ID)

        assert [c.length for c in cycles] == [29, 17]
        assert cycles[1].start_date is None
        assert fetch.call_args.kwargs["user_id"] == TEST_USER_ID

    @pytest.mark.asyncio
    async def test_load_symptoms(self, monkeypatch: pytest.MonkeyPatch) -> None:
        rows = [
            {
                "symptom_id": uuid4(),
                "user_id": TEST_USER_ID,
                "date": date(2026, 2, 20),
                "created_at": CREATED,
                "mood": "Irritated",
                "symptoms": ["Cramps", "Bloating"],
                "menstrual_flow": "heavy",
                "spotting": "none",
            },
            {
                "symptom_id": uuid4(),
                "user_id": TEST_USER_ID,
                "date": date(2026, 2, 19),
                "created_at": CREATED,
                "mood": None,
                "symptoms": [],
                "menstrual_flow": "none",
                "spotting": "light",
            },
        ]
        monkeypatch.setattr(records, "fetch", AsyncMock(return_value=rows))

        symptoms = await records.load_symptoms(TEST_USER_ID)

        assert symptoms[0].mood == Mood.irritated
        assert symptoms[0].symptoms == ["Cramps", "Bloating"]
        assert symptoms[0].menstrual_flow == MenstrualFlow.heavy
        assert symptoms[1].mood is None
        assert symptoms[1].spotting == Spotting.light
