"""Data health check endpoints.

A user's ``HealthCheckRunner`` lives only while a check is in flight.
Concurrent requests join the same runner, and a recheck replaces its result
(last write wins).  Once the latest check has finished and its report has
been returned, the runner is dropped; the next GET runs a fresh check.
Dismissing the check closes the runner so results still in flight are
discarded.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any

from fastapi import APIRouter, HTTPException

from src.dependencies import CurrentUser, Profiles
from src.health_check.runner import EvaluationSnapshot, HealthCheckRunner
from src.models.health import HealthCheckReport
from src.services.profiles import ProfileStore
from src.services.records import load_cycles, load_symptoms

router = APIRouter(prefix="/data-health", tags=["data health"])
logger = logging.getLogger("flowtrack.data_health")

# Runners with a check in flight, keyed by user
_runners: dict[uuid.UUID, HealthCheckRunner] = {}


def _runner_for(user_id: uuid.UUID) -> HealthCheckRunner:
    runner = _runners.get(user_id)
    if runner is None or runner.closed:
        runner = HealthCheckRunner()
        _runners[user_id] = runner
    return runner


def _release(user_id: uuid.UUID, runner: HealthCheckRunner) -> None:
    """Drop the user's runner once nothing is left in flight on it."""
    if _runners.get(user_id) is runner and not runner.loading:
        del _runners[user_id]


async def _snapshot(user_id: uuid.UUID, store: ProfileStore) -> EvaluationSnapshot:
    try:
        cycles = await load_cycles(user_id)
        symptoms = await load_symptoms(user_id)
    except Exception as exc:
        logger.exception("Failed to load tracking data for user %s", user_id)
        raise HTTPException(status_code=503, detail="Tracking data unavailable") from exc
    return EvaluationSnapshot(
        user_id=user_id,
        fetch_profile=store.get_profile,
        cycles=cycles,
        symptoms=symptoms,
    )


async def _displayed_report(user_id: uuid.UUID, runner: HealthCheckRunner) -> HealthCheckReport:
    try:
        result = await runner.wait()
    finally:
        _release(user_id, runner)
    if result is None:
        raise HTTPException(status_code=409, detail="Health check was dismissed")
    return HealthCheckReport.from_result(result, runner.last_checked)


@router.get("", response_model=HealthCheckReport)
async def get_data_health(user: CurrentUser, store: Profiles) -> Any:
    """Return the displayed report, running a check if none is in flight."""
    runner = _runners.get(user.user_id)
    if runner is None or runner.closed:
        snapshot = await _snapshot(user.user_id, store)
        # Another request may have started a check while records loaded.
        runner = _runner_for(user.user_id)
        if runner.current is None and not runner.loading:
            runner.start(snapshot)
    return await _displayed_report(user.user_id, runner)


@router.post("/recheck", response_model=HealthCheckReport)
async def recheck_data_health(user: CurrentUser, store: Profiles) -> Any:
    snapshot = await _snapshot(user.user_id, store)
    runner = _runner_for(user.user_id)
    runner.recheck(snapshot)
    return await _displayed_report(user.user_id, runner)


@router.delete("", status_code=204)
async def dismiss_data_health(user: CurrentUser) -> None:
    runner = _runners.pop(user.user_id, None)
    if runner is not None:
        runner.close()
