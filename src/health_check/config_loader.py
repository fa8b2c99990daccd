"""Load, validate, and hot-reload the data health check thresholds.

The config lives in ``health_check_config.yaml`` alongside this module.  It is
loaded once on first use and cached.  Call ``reload_health_check_config()`` to
re-read from disk after an edit.

Usage::

    from src.health_check.config_loader import get_health_check_config

    config = get_health_check_config()
    config.cycle_length.is_normal(28)        # True
    config.freshness.window_days             # 30
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger("flowtrack.health_check.config")

# Path to the YAML file sitting next to this module
_CONFIG_PATH = Path(__file__).parent / "health_check_config.yaml"


# ---------------------------------------------------------------------------
# Typed config sections
# ---------------------------------------------------------------------------


@dataclass
class CycleCountConfig:
    min_for_predictions: int = 3


@dataclass
class CycleLengthConfig:
    """Normal cycle length range, inclusive on both ends."""

    min_days: int = 21
    max_days: int = 35

    def is_normal(self, length: int) -> bool:
        return self.min_days <= length <= self.max_days


@dataclass
class FreshnessConfig:
    window_days: int = 30


@dataclass
class HealthCheckConfig:
    """Complete, validated health check configuration.

    Attributes:
        version:      Config schema version string.
        cycles:       Minimum cycle count for reliable predictions.
        cycle_length: Normal cycle length range.
        freshness:    Window for recent symptom data.
    """

    version: str = "1.0"
    cycles: CycleCountConfig = field(default_factory=CycleCountConfig)
    cycle_length: CycleLengthConfig = field(default_factory=CycleLengthConfig)
    freshness: FreshnessConfig = field(default_factory=FreshnessConfig)


# ---------------------------------------------------------------------------
# Loader / validation
# ---------------------------------------------------------------------------


class ConfigValidationError(ValueError):
    """Raised when health_check_config.yaml fails validation."""


def _load_yaml(path: Path) -> dict:
    """Read and parse a YAML file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigValidationError: If the YAML is malformed.
    """
    if not path.exists():
        raise FileNotFoundError(f"Health check config not found: {path}")

    with path.open("r", encoding="utf-8") as fh:
        try:
            raw = yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise ConfigValidationError(f"YAML parse error in {path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigValidationError(f"{path} must contain a mapping at the top level")
    return raw


def _validate_and_build(raw: dict) -> HealthCheckConfig:
    """Validate the raw YAML dict and construct a HealthCheckConfig.

    Missing sections fall back to defaults.  All problems are collected and
    reported together.

    Raises:
        ConfigValidationError: If any value is invalid.
    """
    errors: list[str] = []

    def _positive_int(section: dict, key: str, name: str, default: int) -> int:
        value: Any = section.get(key, default)
        try:
            number = int(value)
        except (TypeError, ValueError):
            errors.append(f"{name}.{key} must be an integer, got {value!r}")
            return default
        if number <= 0:
            errors.append(f"{name}.{key} = {number} must be positive")
        return number

    def _section(name: str) -> dict:
        section = raw.get(name) or {}
        if not isinstance(section, dict):
            errors.append(f"'{name}' must be a mapping")
            return {}
        return section

    version = str(raw.get("version", "1.0"))

    # ── Cycle count ──
    cycles = CycleCountConfig(
        min_for_predictions=_positive_int(
            _section("cycles"), "min_for_predictions", "cycles", 3
        ),
    )

    # ── Cycle length ──
    cl_raw = _section("cycle_length")
    cycle_length = CycleLengthConfig(
        min_days=_positive_int(cl_raw, "min_days", "cycle_length", 21),
        max_days=_positive_int(cl_raw, "max_days", "cycle_length", 35),
    )
    if cycle_length.min_days > cycle_length.max_days:
        errors.append(
            f"cycle_length.min_days ({cycle_length.min_days}) exceeds "
            f"cycle_length.max_days ({cycle_length.max_days})"
        )

    # ── Freshness ──
    freshness = FreshnessConfig(
        window_days=_positive_int(_section("freshness"), "window_days", "freshness", 30),
    )

    if errors:
        raise ConfigValidationError(
            f"health_check_config.yaml has {len(errors)} validation error(s):\n"
            + "\n".join(f"  • {e}" for e in errors)
        )

    return HealthCheckConfig(
        version=version,
        cycles=cycles,
        cycle_length=cycle_length,
        freshness=freshness,
    )


def load_health_check_config(path: Path | None = None) -> HealthCheckConfig:
    """Load and validate the health check config from disk.

    Args:
        path: Override path to YAML. Uses the bundled file by default.
    """
    target = path or _CONFIG_PATH
    config = _validate_and_build(_load_yaml(target))
    logger.info("Loaded health check config v%s from %s", config.version, target)
    return config


# ---------------------------------------------------------------------------
# Global singleton with hot-reload support
# ---------------------------------------------------------------------------

_config: HealthCheckConfig | None = None
_config_lock = threading.Lock()


def get_health_check_config() -> HealthCheckConfig:
    """Return the global HealthCheckConfig singleton, loading it on first call."""
    global _config
    if _config is None:
        with _config_lock:
            if _config is None:  # double-checked locking
                _config = load_health_check_config()
    return _config


def reload_health_check_config(path: Path | None = None) -> HealthCheckConfig:
    """Reload the config from disk and replace the global singleton.

    If validation fails, the old config is retained and the error is re-raised.

    Raises:
        ConfigValidationError: If the new config is invalid.
        FileNotFoundError:     If the config file is missing.
    """
    global _config
    new_config = load_health_check_config(path)  # validate before acquiring lock
    with _config_lock:
        old_version = _config.version if _config else "none"
        _config = new_config
    logger.info("Reloaded health check config: %s → %s", old_version, new_config.version)
    return new_config
