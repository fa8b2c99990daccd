"""Shared fixtures for data health check tests."""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
from uuid import UUID, uuid4

import pytest

from src.health_check.config_loader import HealthCheckConfig, load_health_check_config
from src.health_check.evaluator import HealthEvaluator
from src.models.tracking import (
    CycleRecord,
    MenstrualFlow,
    Mood,
    Profile,
    Spotting,
    SymptomRecord,
)

# Canonical test user and reference time
TEST_USER_ID = UUID("12345678-1234-5678-1234-567812345678")
OTHER_USER_ID = UUID("87654321-4321-8765-4321-876543218765")
TEST_NOW = datetime(2026, 2, 23, 12, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Profile fetchers
# ---------------------------------------------------------------------------


class GatedFetcher:
    """Profile fetcher that blocks until released, to control completion order."""

    def __init__(self, profile: Profile | None) -> None:
        self.profile = profile
        self.release = asyncio.Event()
        self.calls = 0

    async def __call__(self, user_id):
        self.calls += 1
        await self.release.wait()
        return self.profile


# ---------------------------------------------------------------------------
# Record builders
# ---------------------------------------------------------------------------


def make_cycle(length: int, user_id: UUID = TEST_USER_ID) -> CycleRecord:
    return CycleRecord(cycle_id=uuid4(), user_id=user_id, length=length)


def make_symptom(
    days_ago: int,
    user_id: UUID = TEST_USER_ID,
    symptoms: list[str] | None = None,
) -> SymptomRecord:
    log_date = TEST_NOW.date() - timedelta(days=days_ago)
    return SymptomRecord(
        symptom_id=uuid4(),
        user_id=user_id,
        date=log_date,
        created_at=TEST_NOW - timedelta(days=days_ago),
        mood=Mood.calm,
        symptoms=symptoms or ["Cramps"],
        menstrual_flow=MenstrualFlow.light,
        spotting=Spotting.none,
    )


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def health_check_config() -> HealthCheckConfig:
    """Load the bundled config for tests."""
    return load_health_check_config()


@pytest.fixture
def evaluator(health_check_config: HealthCheckConfig) -> HealthEvaluator:
    return HealthEvaluator(health_check_config)


@pytest.fixture
def complete_profile() -> Profile:
    return Profile(
        id=TEST_USER_ID,
        name="Maya",
        cycle_length=28,
        period_length=5,
    )


@pytest.fixture
def regular_cycles() -> list[CycleRecord]:
    return [make_cycle(length) for length in (28, 29, 27, 30)]


@pytest.fixture
def stale_symptoms() -> list[SymptomRecord]:
    """Ten symptom logs, all older than the freshness window."""
    return [make_symptom(days_ago=40 + i) for i in range(10)]
