"""Asynchronous data health check runner.

Wraps ``HealthEvaluator.evaluate_async`` in asyncio tasks and keeps the most
recent result for display.  Every ``start()`` allocates a monotonic sequence
number; a completed evaluation is applied only if it is still the latest one
started and the runner has not been closed.  Superseded or dismissed results
are discarded on completion.

Usage::

    runner = HealthCheckRunner()
    await runner.start(snapshot)
    report = runner.current

    runner.recheck(snapshot)   # last write wins
    runner.close()             # in-flight results are dropped
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Sequence
from uuid import UUID

from src.health_check.evaluator import HealthEvaluator, ProfileFetcher
from src.health_check.summary import format_last_checked
from src.models.health import EvaluationResult, HealthCategory
from src.models.tracking import CycleRecord, SymptomRecord

logger = logging.getLogger("flowtrack.health_check.runner")


@dataclass
class EvaluationSnapshot:
    """Inputs for one evaluation.

    Attributes:
        user_id:       The user being checked.
        fetch_profile: Async callback(user_id) → Profile | None.
        cycles:        Loaded cycle records.
        symptoms:      Loaded symptom logs.
        now:           Reference time (None = time of evaluation).
    """

    user_id: UUID
    fetch_profile: ProfileFetcher
    cycles: Sequence[CycleRecord] = field(default_factory=list)
    symptoms: Sequence[SymptomRecord] = field(default_factory=list)
    now: datetime | None = None


class HealthCheckRunner:
    """Run health checks on demand with last-write-wins result handling."""

    def __init__(self, evaluator: HealthEvaluator | None = None) -> None:
        self._evaluator = evaluator or HealthEvaluator()
        self._sequence = 0
        self._current: EvaluationResult | None = None
        self._last_checked: datetime | None = None
        self._pending: asyncio.Task[EvaluationResult] | None = None
        self._closed = False

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def current(self) -> EvaluationResult | None:
        """The displayed result, or None if no evaluation has been applied."""
        return self._current

    @property
    def loading(self) -> bool:
        return self._pending is not None and not self._pending.done()

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def sequence(self) -> int:
        """Sequence number of the most recently started evaluation."""
        return self._sequence

    @property
    def last_checked(self) -> str:
        """Time of the latest applied result that completed without a fault."""
        return format_last_checked(self._last_checked)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def start(self, snapshot: EvaluationSnapshot) -> asyncio.Task[EvaluationResult]:
        """Start a new evaluation and return its task.

        Must be called from a running event loop.  The task resolves to this
        evaluation's result whether or not it ends up displayed.

        Raises:
            RuntimeError: If the runner has been closed.
        """
        if self._closed:
            raise RuntimeError("HealthCheckRunner is closed")

        self._sequence += 1
        sequence = self._sequence
        task = asyncio.create_task(self._run(sequence, snapshot))
        self._pending = task
        logger.debug("Started data health check #%d for user %s", sequence, snapshot.user_id)
        return task

    def recheck(self, snapshot: EvaluationSnapshot) -> asyncio.Task[EvaluationResult]:
        """Re-run the check; any older in-flight result becomes stale."""
        return self.start(snapshot)

    async def wait(self) -> EvaluationResult | None:
        """Wait for the latest started evaluation, then return the displayed result."""
        # A recheck started while waiting replaces the pending task.
        while self._pending is not None and not self._pending.done():
            await asyncio.shield(self._pending)
        return self._current

    def close(self) -> None:
        """Dismiss the runner.  Results that complete afterwards are discarded."""
        self._closed = True
        logger.debug("Closed data health check runner at #%d", self._sequence)

    # ------------------------------------------------------------------

    async def _run(self, sequence: int, snapshot: EvaluationSnapshot) -> EvaluationResult:
        result = await self._evaluator.evaluate_async(
            snapshot.user_id,
            snapshot.fetch_profile,
            snapshot.cycles,
            snapshot.symptoms,
            now=snapshot.now,
        )
        result = result.model_copy(update={"sequence": sequence})
        self._apply(result)
        return result

    def _apply(self, result: EvaluationResult) -> bool:
        if self._closed:
            logger.debug("Discarding health check #%d: runner closed", result.sequence)
            return False
        if result.sequence != self._sequence:
            logger.debug(
                "Discarding stale health check #%d (latest is #%d)",
                result.sequence, self._sequence,
            )
            return False
        self._current = result
        if not any(f.category == HealthCategory.system for f in result.findings):
            self._last_checked = result.checked_at
        return True
