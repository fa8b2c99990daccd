"""Tests for health check config loading and validation."""

from __future__ import annotations

from pathlib import Path

import pytest

from src.health_check import config_loader
from src.health_check.config_loader import (
    ConfigValidationError,
    HealthCheckConfig,
    get_health_check_config,
    load_health_check_config,
    reload_health_check_config,
)


def write_config(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "health_check_config.yaml"
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def reset_singleton(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config_loader, "_config", None)


class TestHealthCheckConfig:
    def test_bundled_config_has_standard_thresholds(
        self, health_check_config: HealthCheckConfig
    ) -> None:
        assert health_check_config.cycles.min_for_predictions == 3
        assert health_check_config.cycle_length.min_days == 21
        assert health_check_config.cycle_length.max_days == 35
        assert health_check_config.freshness.window_days == 30

    def test_cycle_length_range_is_inclusive(
        self, health_check_config: HealthCheckConfig
    ) -> None:
        cl = health_check_config.cycle_length
        assert cl.is_normal(21)
        assert cl.is_normal(35)
        assert not cl.is_normal(20)
        assert not cl.is_normal(36)

    def test_missing_sections_use_defaults(self, tmp_path: Path) -> None:
        config = load_health_check_config(write_config(tmp_path, "version: '2.0'\n"))
        assert config.version == "2.0"
        assert config == HealthCheckConfig(version="2.0")

    def test_invalid_values_are_collected(self, tmp_path: Path) -> None:
        path = write_config(
            tmp_path,
            "cycles:\n  min_for_predictions: -1\n"
            "cycle_length:\n  min_days: 40\n  max_days: 30\n"
            "freshness:\n  window_days: soon\n",
        )
        with pytest.raises(ConfigValidationError) as exc_info:
            load_health_check_config(path)
        message = str(exc_info.value)
        assert "3 validation error(s)" in message
        assert "cycles.min_for_predictions" in message
        assert "freshness.window_days" in message

    def test_malformed_yaml(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigValidationError):
            load_health_check_config(write_config(tmp_path, "cycles: [unclosed\n"))

    def test_non_mapping_top_level(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigValidationError):
            load_health_check_config(write_config(tmp_path, "- 1\n- 2\n"))

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_health_check_config(tmp_path / "nope.yaml")

    def test_singleton_is_cached(self) -> None:
        assert get_health_check_config() is get_health_check_config()

    def test_reload_replaces_singleton(self, tmp_path: Path) -> None:
        original = get_health_check_config()
        path = write_config(tmp_path, "version: '9'\nfreshness:\n  window_days: 14\n")
        reloaded = reload_health_check_config(path)
        assert reloaded is not original
        assert get_health_check_config().freshness.window_days == 14

    def test_failed_reload_keeps_old_config(self, tmp_path: Path) -> None:
        original = get_health_check_config()
        path = write_config(tmp_path, "freshness:\n  window_days: 0\n")
        with pytest.raises(ConfigValidationError):
            reload_health_check_config(path)
        assert get_health_check_config() is original
