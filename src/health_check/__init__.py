"""Data health check for Flowtrack.

Inspects the quality of user-entered tracking data and reports one finding
per dimension plus an overall status.

Modules:
    evaluator     — Rule engine over profile, cycles, and symptom logs
    summary       — Overall status, recommendations, display timestamp
    runner        — Async runner with stale-result discarding
    config_loader — Thresholds from health_check_config.yaml
"""

from src.health_check.config_loader import HealthCheckConfig, get_health_check_config
from src.health_check.evaluator import HealthEvaluator
from src.health_check.runner import EvaluationSnapshot, HealthCheckRunner
from src.health_check.summary import overall_status, recommendations

__all__ = [
    "HealthEvaluator",
    "HealthCheckRunner",
    "EvaluationSnapshot",
    "HealthCheckConfig",
    "get_health_check_config",
    "overall_status",
    "recommendations",
]
