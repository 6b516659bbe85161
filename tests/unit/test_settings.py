"""Tests for application settings."""

import pytest
from pydantic import ValidationError

from mindguard.config.settings import MonitoringThresholds, Settings, get_settings


class TestMonitoringThresholds:
    """Tests for MonitoringThresholds."""

    def test_defaults(self) -> None:
        """Test default windows and thresholds."""
        thresholds = MonitoringThresholds()
        assert thresholds.tip_window_days == 7
        assert thresholds.tip_min_streak == 3
        assert thresholds.tip_high_streak == 5
        assert thresholds.risk_window_days == 7
        assert thresholds.risk_streak_threshold == 7

    def test_high_tier_below_min(self) -> None:
        """Test the high tier cannot be below the first tier."""
        with pytest.raises(ValidationError):
            MonitoringThresholds(tip_min_streak=4, tip_high_streak=3)

    def test_window_must_cover_threshold(self) -> None:
        """Test a risk window shorter than the threshold is rejected."""
        with pytest.raises(ValidationError):
            MonitoringThresholds(risk_window_days=5, risk_streak_threshold=7)

    def test_non_positive_threshold(self) -> None:
        """Test thresholds must be positive."""
        with pytest.raises(ValidationError):
            MonitoringThresholds(risk_streak_threshold=0)


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test default settings."""
        monkeypatch.delenv("ENVIRONMENT", raising=False)
        monkeypatch.delenv("DATABASE_URL", raising=False)
        settings = Settings(_env_file=None)
        assert settings.ENVIRONMENT == "development"
        assert settings.DATABASE_URL.startswith("sqlite+aiosqlite://")
        assert settings.monitoring == MonitoringThresholds()

    def test_nested_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test monitoring thresholds load from nested environment variables."""
        monkeypatch.setenv("MONITORING__RISK_STREAK_THRESHOLD", "5")
        monkeypatch.setenv("MONITORING__TIP_MIN_STREAK", "2")
        settings = Settings(_env_file=None)
        assert settings.monitoring.risk_streak_threshold == 5
        assert settings.monitoring.tip_min_streak == 2

    def test_invalid_environment(self) -> None:
        """Test unknown environments are rejected."""
        with pytest.raises(ValidationError):
            Settings(_env_file=None, ENVIRONMENT="staging")

    def test_get_settings_cached(self) -> None:
        """Test settings are created once."""
        get_settings.cache_clear()
        try:
            assert get_settings() is get_settings()
        finally:
            get_settings.cache_clear()
