"""Application settings loaded from environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class MonitoringThresholds(BaseModel):
    """Window sizes and streak thresholds used by the monitoring pipeline.

    The self-tip and risk sides read the same timeline but with
    independent windows and thresholds.
    """

    # Self-care tips
    tip_window_days: int = 7
    """Number of recent classified entries inspected for a tip."""

    tip_min_streak: int = 3
    """Streak length at which a tip is shown."""

    tip_high_streak: int = 5
    """Streak length at which the higher tip tier is selected."""

    # Supervisor-facing risk
    risk_window_days: int = 7
    """Number of recent classified entries inspected for risk."""

    risk_streak_threshold: int = 7
    """Streak length that escalates a subject on its own."""

    @model_validator(mode="after")
    def check_consistency(self) -> "MonitoringThresholds":
        """Reject threshold combinations that can never trigger."""
        if self.tip_min_streak < 1 or self.risk_streak_threshold < 1:
            raise ValueError("streak thresholds must be positive")
        if self.tip_high_streak < self.tip_min_streak:
            raise ValueError("tip_high_streak must be >= tip_min_streak")
        if self.tip_window_days < self.tip_min_streak:
            raise ValueError("tip_window_days must cover tip_min_streak")
        if self.risk_window_days < self.risk_streak_threshold:
            raise ValueError("risk_window_days must cover risk_streak_threshold")
        return self


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Configuration
    ENVIRONMENT: Literal["development", "test", "production"] = "development"
    DEBUG: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./mindguard.db"

    # Emotion lookup cache
    emotion_cache_ttl_seconds: int = 86400
    emotion_cache_max_entries: int = 512

    # Monitoring pipeline
    monitoring: MonitoringThresholds = MonitoringThresholds()


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
