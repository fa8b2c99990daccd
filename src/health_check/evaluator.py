"""Data health evaluator.

Inspects a user's profile, cycle records and symptom logs and classifies each
dimension as good, warning, or error.  Rules run in a fixed order, which is
also the display order:

1. Profile completeness
2. Cycle sufficiency
3. Symptom presence
4. Data freshness   (skipped when no symptoms are logged)
5. Cycle length anomalies (skipped when no cycles are logged)

Any unexpected exception stops evaluation.  Findings gathered so far are kept
and a terminal System/error finding is appended; nothing propagates to the
caller.  Inputs are never mutated.
"""

from __future__ import annotations

import logging
from datetime import datetime, time, timedelta, timezone
from typing import Awaitable, Callable, Sequence
from uuid import UUID

from src.health_check.config_loader import HealthCheckConfig, get_health_check_config
from src.health_check.summary import overall_status, recommendations
from src.models.health import CheckStatus, EvaluationResult, Finding, HealthCategory
from src.models.tracking import CycleRecord, Profile, SymptomRecord

logger = logging.getLogger("flowtrack.health_check.evaluator")

ProfileFetcher = Callable[[UUID], Awaitable["Profile | None"]]

SYSTEM_ERROR = Finding(
    category=HealthCategory.system,
    status=CheckStatus.error,
    message="Error checking data health",
)


class HealthEvaluator:
    """Run the data health rules over a snapshot of one user's records.

    Usage::

        evaluator = HealthEvaluator()
        result = evaluator.evaluate(user_id, profile, cycles, symptoms)
        for finding in result.findings:
            print(finding.category.value, finding.status.value, finding.message)
    """

    def __init__(self, config: HealthCheckConfig | None = None) -> None:
        self._config = config or get_health_check_config()

    def evaluate(
        self,
        user_id: UUID,
        profile: Profile | None,
        cycles: Sequence[CycleRecord],
        symptoms: Sequence[SymptomRecord],
        now: datetime | None = None,
    ) -> EvaluationResult:
        """Evaluate an already fetched profile plus in-memory records.

        Args:
            user_id:  The user whose records are checked.
            profile:  The user's profile, or None if the lookup found nothing.
            cycles:   Cycle records; entries for other users are ignored.
            symptoms: Symptom logs; entries for other users are ignored.
            now:      Reference time (defaults to the current UTC time).

        Returns:
            EvaluationResult with findings in rule order.
        """
        now = now or datetime.now(timezone.utc)
        findings: list[Finding] = []
        try:
            self._run_rules(findings, user_id, profile, cycles, symptoms, now)
        except Exception:
            logger.exception("Error performing data health check for user %s", user_id)
            findings.append(SYSTEM_ERROR)
        return self._build_result(findings, now)

    async def evaluate_async(
        self,
        user_id: UUID,
        fetch_profile: ProfileFetcher,
        cycles: Sequence[CycleRecord],
        symptoms: Sequence[SymptomRecord],
        now: datetime | None = None,
    ) -> EvaluationResult:
        """Fetch the profile, then evaluate.

        A failing lookup yields a result holding only the System/error finding.
        """
        now = now or datetime.now(timezone.utc)
        findings: list[Finding] = []
        try:
            profile = await fetch_profile(user_id)
            self._run_rules(findings, user_id, profile, cycles, symptoms, now)
        except Exception:
            logger.exception("Error performing data health check for user %s", user_id)
            findings.append(SYSTEM_ERROR)
        return self._build_result(findings, now)

    # ------------------------------------------------------------------
    # Rules
    # ------------------------------------------------------------------

    def _run_rules(
        self,
        findings: list[Finding],
        user_id: UUID,
        profile: Profile | None,
        cycles: Sequence[CycleRecord],
        symptoms: Sequence[SymptomRecord],
        now: datetime,
    ) -> None:
        # Findings are appended one rule at a time so that a fault keeps
        # everything emitted before it.
        findings.append(self._check_profile(profile))

        user_cycles = [c for c in cycles if c.user_id == user_id]
        findings.append(self._check_cycles(user_cycles))

        user_symptoms = [s for s in symptoms if s.user_id == user_id]
        findings.append(self._check_symptoms(user_symptoms))

        freshness = self._check_freshness(user_symptoms, now)
        if freshness is not None:
            findings.append(freshness)

        quality = self._check_cycle_lengths(user_cycles)
        if quality is not None:
            findings.append(quality)

    @staticmethod
    def _check_profile(profile: Profile | None) -> Finding:
        if profile is None:
            return Finding(
                category=HealthCategory.profile,
                status=CheckStatus.error,
                message="Profile not found",
            )
        if not profile.name or not profile.cycle_length or not profile.period_length:
            return Finding(
                category=HealthCategory.profile,
                status=CheckStatus.warning,
                message="Profile information is incomplete",
            )
        return Finding(
            category=HealthCategory.profile,
            status=CheckStatus.good,
            message="Profile is complete",
        )

    def _check_cycles(self, cycles: list[CycleRecord]) -> Finding:
        n = len(cycles)
        if n == 0:
            return Finding(
                category=HealthCategory.cycles,
                status=CheckStatus.warning,
                message="No cycle data recorded",
                count=0,
            )
        if n < self._config.cycles.min_for_predictions:
            return Finding(
                category=HealthCategory.cycles,
                status=CheckStatus.warning,
                message="Limited cycle data for accurate predictions",
                count=n,
            )
        return Finding(
            category=HealthCategory.cycles,
            status=CheckStatus.good,
            message="Sufficient cycle data for analysis",
            count=n,
        )

    @staticmethod
    def _check_symptoms(symptoms: list[SymptomRecord]) -> Finding:
        if not symptoms:
            return Finding(
                category=HealthCategory.symptoms,
                status=CheckStatus.warning,
                message="No symptom data recorded",
                count=0,
            )
        return Finding(
            category=HealthCategory.symptoms,
            status=CheckStatus.good,
            message="Symptom tracking is active",
            count=len(symptoms),
        )

    def _check_freshness(
        self, symptoms: list[SymptomRecord], now: datetime
    ) -> Finding | None:
        if not symptoms:
            return None

        # Log dates count from midnight, compared against the exact cutoff.
        cutoff = now - timedelta(days=self._config.freshness.window_days)
        recent = [
            s for s in symptoms
            if datetime.combine(s.date, time.min, tzinfo=now.tzinfo) >= cutoff
        ]
        if recent:
            return Finding(
                category=HealthCategory.data_freshness,
                status=CheckStatus.good,
                message="Recent data is available",
            )
        return Finding(
            category=HealthCategory.data_freshness,
            status=CheckStatus.warning,
            message=f"No recent symptom data (last {self._config.freshness.window_days} days)",
        )

    def _check_cycle_lengths(self, cycles: list[CycleRecord]) -> Finding | None:
        lengths = [c.length for c in cycles]
        if not lengths:
            return None

        cl = self._config.cycle_length
        if any(not cl.is_normal(length) for length in lengths):
            return Finding(
                category=HealthCategory.data_quality,
                status=CheckStatus.warning,
                message="Some cycle lengths are outside normal range",
            )
        return Finding(
            category=HealthCategory.data_quality,
            status=CheckStatus.good,
            message="Cycle data appears normal",
        )

    # ------------------------------------------------------------------

    @staticmethod
    def _build_result(findings: list[Finding], now: datetime) -> EvaluationResult:
        overall = overall_status(findings)
        logger.debug("Data health check finished: %d finding(s), overall=%s", len(findings), overall.value)
        return EvaluationResult(
            findings=findings,
            overall=overall,
            recommendations=recommendations(findings),
            checked_at=now,
        )
