"""Risk state and risk history models.

``SubjectRiskStatus`` holds the single mutable risk state per subject.
``RiskHistoryRecord`` is the append-only ledger of level transitions;
only its confirmation fields are ever updated.
"""

from datetime import UTC, date, datetime
from uuid import UUID

from sqlalchemy import Boolean, Date, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from uuid_utils.compat import uuid7

from mindguard.monitoring.types import (
    Area,
    ResolutionInfo,
    RiskLevel,
    RiskState,
    SubjectType,
)

from .base import Base, PortableJSON, PortableUUID, TimestampMixin


def _utcnow() -> datetime:
    return datetime.now(UTC)


class SubjectRiskStatus(Base, TimestampMixin):
    """Persisted risk state of one monitored subject."""

    __tablename__ = "subject_risk_states"

    subject_id: Mapped[UUID] = mapped_column(PortableUUID(), primary_key=True)
    subject_type: Mapped[str] = mapped_column(
        String(20), nullable=False, default=SubjectType.STUDENT.value
    )

    risk_level: Mapped[str] = mapped_column(
        String(20), nullable=False, default=RiskLevel.NORMAL.value
    )
    risk_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    streak_area: Mapped[str | None] = mapped_column(String(20), nullable=True)
    streak_length: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    last_checked_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    target_entry_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    target_entry_id: Mapped[UUID | None] = mapped_column(PortableUUID(), nullable=True)
    risk_updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    # Supervisor resolution of a danger state
    danger_resolved_by: Mapped[UUID | None] = mapped_column(PortableUUID(), nullable=True)
    danger_resolved_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    danger_resolve_memo: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (Index("idx_risk_state_level", "risk_level"),)

    def to_domain(self) -> RiskState:
        """Build a detached domain snapshot of this row."""
        resolution = None
        if self.danger_resolved_at is not None and self.danger_resolved_by is not None:
            resolution = ResolutionInfo(
                resolved_by=self.danger_resolved_by,
                resolved_at=self.danger_resolved_at,
                memo=self.danger_resolve_memo,
            )
        return RiskState(
            subject_id=self.subject_id,
            subject_type=SubjectType(self.subject_type),
            level=RiskLevel.parse(self.risk_level),
            reason=self.risk_reason,
            streak_area=Area.parse(self.streak_area),
            streak_length=self.streak_length,
            last_checked_date=self.last_checked_date,
            target_entry_date=self.target_entry_date,
            target_entry_id=self.target_entry_id,
            resolution=resolution,
            risk_updated_at=self.risk_updated_at,
        )

    def apply(self, state: RiskState) -> None:
        """Copy a reconciled domain state onto this row."""
        self.subject_type = state.subject_type.value
        self.risk_level = state.level.value
        self.risk_reason = state.reason
        self.streak_area = state.streak_area.value if state.streak_area else None
        self.streak_length = state.streak_length
        self.last_checked_date = state.last_checked_date
        self.target_entry_date = state.target_entry_date
        self.target_entry_id = state.target_entry_id
        self.risk_updated_at = state.risk_updated_at
        if state.resolution is None:
            self.danger_resolved_by = None
            self.danger_resolved_at = None
            self.danger_resolve_memo = None
        else:
            self.danger_resolved_by = state.resolution.resolved_by
            self.danger_resolved_at = state.resolution.resolved_at
            self.danger_resolve_memo = state.resolution.memo

    def __repr__(self) -> str:
        return f"<SubjectRiskStatus(subject={self.subject_id}, level={self.risk_level})>"


class RiskHistoryRecord(Base):
    """Audit entry for one risk level transition of a subject."""

    __tablename__ = "risk_history"

    # UUIDv7 is time-ordered, so ids sort in creation order
    history_id: Mapped[UUID] = mapped_column(PortableUUID(), primary_key=True, default=uuid7)
    subject_id: Mapped[UUID] = mapped_column(PortableUUID(), nullable=False)

    previous_level: Mapped[str | None] = mapped_column(String(20), nullable=True)
    new_level: Mapped[str] = mapped_column(String(20), nullable=False)
    cause: Mapped[str] = mapped_column(String(50), nullable=False)
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    streak_area: Mapped[str | None] = mapped_column(String(20), nullable=True)
    streak_length: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    keyword_evidence: Mapped[list[str]] = mapped_column(
        PortableJSON(), nullable=False, default=list
    )

    target_entry_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    target_entry_id: Mapped[UUID | None] = mapped_column(PortableUUID(), nullable=True)

    # Supervisor (or system) confirmation
    confirmed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    confirmed_by: Mapped[UUID | None] = mapped_column(PortableUUID(), nullable=True)
    confirmed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    supervisor_memo: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )

    __table_args__ = (
        Index("idx_risk_history_subject", "subject_id", "created_at"),
        Index("idx_risk_history_confirmed", "confirmed"),
        Index("idx_risk_history_created", "created_at"),
        Index("idx_risk_history_new_level", "new_level"),
    )

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "history_id": str(self.history_id),
            "subject_id": str(self.subject_id),
            "previous_level": self.previous_level,
            "new_level": self.new_level,
            "cause": self.cause,
            "reason": self.reason,
            "streak_area": self.streak_area,
            "streak_length": self.streak_length,
            "keyword_evidence": list(self.keyword_evidence or []),
            "target_entry_date": (
                self.target_entry_date.isoformat() if self.target_entry_date else None
            ),
            "target_entry_id": str(self.target_entry_id) if self.target_entry_id else None,
            "confirmed": self.confirmed,
            "confirmed_by": str(self.confirmed_by) if self.confirmed_by else None,
            "confirmed_at": self.confirmed_at.isoformat() if self.confirmed_at else None,
            "supervisor_memo": self.supervisor_memo,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self) -> str:
        return (
            f"<RiskHistoryRecord(id={self.history_id}, subject={self.subject_id}, "
            f"{self.previous_level}->{self.new_level}, cause={self.cause})>"
        )
