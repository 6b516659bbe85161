"""Database repositories for clean data access."""

from .base import BaseRepository
from .risk_history import RiskHistoryRepository
from .risk_state import RiskStateRepository

__all__ = [
    "BaseRepository",
    "RiskHistoryRepository",
    "RiskStateRepository",
]
