"""Aggregate health check findings into an overall status and recommendations.

Both derivations read only the finding list.  Recommendations key off
category + status, never message text.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable

from src.models.health import CheckStatus, Finding, HealthCategory, OverallHealth

# Ordered: recommendations are surfaced in this order.
RECOMMENDATIONS: dict[HealthCategory, str] = {
    HealthCategory.cycles: "Log more cycle data for better predictions",
    HealthCategory.symptoms: "Start tracking daily symptoms for insights",
    HealthCategory.profile: "Complete your profile information",
    HealthCategory.data_freshness: "Update your recent health information",
}

LAST_CHECKED_FORMAT = "%Y-%m-%d %H:%M:%S"


def overall_status(findings: Iterable[Finding]) -> OverallHealth:
    """Classify a finding list as excellent, good, poor, or unknown.

    Args:
        findings: Findings from one evaluator pass.

    Returns:
        ``unknown`` for no findings, ``excellent`` if all are good, ``poor``
        if any is an error, else ``good``.
    """
    statuses = [f.status for f in findings]
    if not statuses:
        return OverallHealth.unknown
    if all(s == CheckStatus.good for s in statuses):
        return OverallHealth.excellent
    if any(s == CheckStatus.error for s in statuses):
        return OverallHealth.poor
    return OverallHealth.good


def recommendations(findings: Iterable[Finding]) -> list[str]:
    """Return one recommendation per category with a non-good finding."""
    flagged = {f.category for f in findings if f.status != CheckStatus.good}
    return [text for category, text in RECOMMENDATIONS.items() if category in flagged]


def format_last_checked(checked_at: datetime | None) -> str:
    """Render the "last checked" timestamp in local time, or '' if never checked."""
    if checked_at is None:
        return ""
    return checked_at.astimezone().strftime(LAST_CHECKED_FORMAT)
