"""Database models for Mindguard."""

from .base import Base, PortableJSON, PortableUUID, TimestampMixin
from .risk import RiskHistoryRecord, SubjectRiskStatus

__all__ = [
    "Base",
    "TimestampMixin",
    "PortableJSON",
    "PortableUUID",
    "RiskHistoryRecord",
    "SubjectRiskStatus",
]
