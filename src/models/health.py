"""Pydantic models for data health check findings and reports."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import ConfigDict, Field

from src.models.base import FlowtrackBase, utc_now


# ---------- Enums ----------

class HealthCategory(str, Enum):
    profile = "Profile"
    cycles = "Cycles"
    symptoms = "Symptoms"
    data_freshness = "Data Freshness"
    data_quality = "Data Quality"
    system = "System"


class CheckStatus(str, Enum):
    good = "good"
    warning = "warning"
    error = "error"


class OverallHealth(str, Enum):
    excellent = "excellent"
    good = "good"
    poor = "poor"
    unknown = "unknown"

    @property
    def label(self) -> str:
        return _OVERALL_LABELS[self]


_OVERALL_LABELS = {
    OverallHealth.excellent: "Excellent",
    OverallHealth.good: "Good",
    OverallHealth.poor: "Needs Attention",
    OverallHealth.unknown: "Unknown",
}


# ---------- Findings ----------

class Finding(FlowtrackBase):
    """One categorized health check result."""

    model_config = ConfigDict(frozen=True)

    category: HealthCategory
    status: CheckStatus
    message: str
    count: int | None = None


class EvaluationResult(FlowtrackBase):
    """Output of one evaluator pass.

    ``sequence`` is the runner's request number; 0 for direct calls.
    """

    findings: list[Finding] = Field(default_factory=list)
    overall: OverallHealth = OverallHealth.unknown
    recommendations: list[str] = Field(default_factory=list)
    checked_at: datetime = Field(default_factory=utc_now)
    sequence: int = 0


class HealthCheckReport(EvaluationResult):
    overall_label: str
    last_checked: str

    @classmethod
    def from_result(cls, result: EvaluationResult, last_checked: str) -> HealthCheckReport:
        return cls(
            **result.model_dump(),
            overall_label=result.overall.label,
            last_checked=last_checked,
        )
