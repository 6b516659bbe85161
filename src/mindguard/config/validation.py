"""Configuration validation for startup checks.

Validates that the database and monitoring configuration is usable
before the engine evaluates its first entry.

Usage:
    from mindguard.config.validation import validate_or_raise

    # During startup
    validate_or_raise()
"""

import logging
from dataclasses import dataclass
from enum import Enum

from mindguard.config.settings import Settings, get_settings
from mindguard.utils.exceptions import ConfigurationError

logger = logging.getLogger("mindguard.config")

ASYNC_DRIVERS = ("+aiosqlite", "+asyncpg", "+psycopg", "+aiomysql", "+asyncmy")


class ValidationSeverity(str, Enum):
    """Severity of configuration validation issues."""

    ERROR = "error"  # Must be fixed, the engine cannot start
    WARNING = "warning"  # Engine starts but may misbehave


@dataclass
class ValidationResult:
    """Result of a configuration validation check."""

    field: str
    severity: ValidationSeverity
    message: str
    suggestion: str | None = None

    def __str__(self) -> str:
        prefix = "ERROR" if self.severity == ValidationSeverity.ERROR else "WARNING"
        result = f"[{prefix}] {self.field}: {self.message}"
        if self.suggestion:
            result += f"\n  Suggestion: {self.suggestion}"
        return result


def validate_configuration(settings: Settings | None = None) -> list[ValidationResult]:
    """Validate application configuration.

    Args:
        settings: Settings to validate (default: global settings)

    Returns:
        List of validation results (empty if all checks pass)
    """
    if settings is None:
        settings = get_settings()

    results: list[ValidationResult] = []
    results.extend(_validate_database(settings))
    results.extend(_validate_emotion_cache(settings))
    results.extend(_validate_monitoring(settings))
    results.extend(_validate_environment(settings))
    return results


def validate_or_raise(settings: Settings | None = None) -> None:
    """Validate configuration and raise if errors found.

    Args:
        settings: Settings to validate

    Raises:
        ConfigurationError: If any validation errors are found
    """
    results = validate_configuration(settings)
    errors = [r for r in results if r.severity == ValidationSeverity.ERROR]

    if errors:
        error_messages = "\n".join(str(e) for e in errors)
        raise ConfigurationError(f"Configuration validation failed:\n{error_messages}")

    for warning in (r for r in results if r.severity == ValidationSeverity.WARNING):
        logger.warning(str(warning))


# =============================================================================
# Validators
# =============================================================================


def _validate_database(settings: Settings) -> list[ValidationResult]:
    """Validate database configuration."""
    results: list[ValidationResult] = []

    if not settings.DATABASE_URL:
        results.append(
            ValidationResult(
                field="DATABASE_URL",
                severity=ValidationSeverity.ERROR,
                message="Database URL is required",
                suggestion="Set DATABASE_URL=sqlite+aiosqlite:///./mindguard.db",
            )
        )
        return results

    if not any(driver in settings.DATABASE_URL for driver in ASYNC_DRIVERS):
        results.append(
            ValidationResult(
                field="DATABASE_URL",
                severity=ValidationSeverity.ERROR,
                message="Database URL must use an async driver",
                suggestion="Use a URL such as postgresql+asyncpg://... or sqlite+aiosqlite://...",
            )
        )

    if settings.ENVIRONMENT == "production" and settings.DATABASE_URL.startswith("sqlite"):
        results.append(
            ValidationResult(
                field="DATABASE_URL",
                severity=ValidationSeverity.WARNING,
                message="SQLite does not lock rows for concurrent evaluations",
                suggestion="Use PostgreSQL in production",
            )
        )

    return results


def _validate_emotion_cache(settings: Settings) -> list[ValidationResult]:
    """Validate emotion cache bounds."""
    results: list[ValidationResult] = []

    if settings.emotion_cache_max_entries < 1:
        results.append(
            ValidationResult(
                field="emotion_cache_max_entries",
                severity=ValidationSeverity.ERROR,
                message="Cache must hold at least one entry",
            )
        )

    if settings.emotion_cache_ttl_seconds <= 0:
        results.append(
            ValidationResult(
                field="emotion_cache_ttl_seconds",
                severity=ValidationSeverity.WARNING,
                message="Non-positive TTL disables caching of emotion areas",
            )
        )

    return results


def _validate_monitoring(settings: Settings) -> list[ValidationResult]:
    """Validate monitoring thresholds beyond the model's own checks."""
    results: list[ValidationResult] = []
    thresholds = settings.monitoring

    if thresholds.risk_window_days > thresholds.risk_streak_threshold:
        results.append(
            ValidationResult(
                field="monitoring.risk_window_days",
                severity=ValidationSeverity.WARNING,
                message="Risk window is longer than the streak threshold",
                suggestion=(
                    "Streaks past the threshold are reported and stored with their full "
                    "length, up to the window size"
                ),
            )
        )

    return results


def _validate_environment(settings: Settings) -> list[ValidationResult]:
    """Validate environment-specific settings."""
    results: list[ValidationResult] = []

    if settings.ENVIRONMENT == "production" and settings.DEBUG:
        results.append(
            ValidationResult(
                field="DEBUG",
                severity=ValidationSeverity.WARNING,
                message="DEBUG is enabled in production",
                suggestion="Set DEBUG=false",
            )
        )

    return results
