"""Core infrastructure for Mindguard."""

from mindguard.core.exceptions import (
    HistoryRecordNotFoundError,
    InvalidRiskLevelError,
    NotFoundError,
    PersistenceFailureError,
    RiskStateError,
    SubjectNotFoundError,
)
from mindguard.core.logging import LogContext, get_logger, setup_logging

__all__ = [
    # Exceptions
    "NotFoundError",
    "SubjectNotFoundError",
    "HistoryRecordNotFoundError",
    "InvalidRiskLevelError",
    "RiskStateError",
    "PersistenceFailureError",
    # Logging
    "LogContext",
    "get_logger",
    "setup_logging",
]
