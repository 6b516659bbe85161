"""Types and data models for the monitoring module.

Defines the mood-quadrant areas, risk levels, timeline entries, streaks,
tip decisions and the per-subject risk state reconciled by the engine.
"""

from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from mindguard.core.exceptions import InvalidRiskLevelError

SYSTEM_ACTOR_ID = UUID(int=0)
"""Confirmer recorded on history entries the engine resolves by itself."""


# =============================================================================
# Enums
# =============================================================================


class Area(str, Enum):
    """Mood-quadrant area assigned to a classified entry."""

    RED = "red"  # High energy, unpleasant
    YELLOW = "yellow"  # High energy, pleasant
    BLUE = "blue"  # Low energy, unpleasant
    GREEN = "green"  # Low energy, pleasant

    @classmethod
    def parse(cls, value: "str | Area | None") -> "Area | None":
        """Parse an area tag case-insensitively.

        Raises:
            ValueError: If the tag is not one of the four areas.
        """
        if value is None or isinstance(value, Area):
            return value
        return cls(value.strip().lower())

    @property
    def description(self) -> str:
        """Short human description of the area."""
        return AREA_DESCRIPTIONS[self]

    @property
    def is_extreme(self) -> bool:
        """Whether a sustained run in this area escalates straight to danger."""
        return self in EXTREME_AREAS


AREA_DESCRIPTIONS: dict[Area, str] = {
    Area.RED: "strong emotions",
    Area.YELLOW: "lively emotions",
    Area.BLUE: "subdued emotions",
    Area.GREEN: "peaceful emotions",
}

EXTREME_AREAS: frozenset[Area] = frozenset({Area.RED, Area.BLUE})


class RiskLevel(str, Enum):
    """Ordered severity of a subject's flagged status."""

    NORMAL = "normal"
    CAUTION = "caution"
    DANGER = "danger"

    @classmethod
    def parse(cls, value: "str | RiskLevel") -> "RiskLevel":
        """Parse a level tag case-insensitively.

        Raises:
            InvalidRiskLevelError: If the tag is not a known level.
        """
        if isinstance(value, RiskLevel):
            return value
        if not isinstance(value, str):
            raise InvalidRiskLevelError(value)
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise InvalidRiskLevelError(value) from None

    @property
    def rank(self) -> int:
        """Numeric rank used for ordering (normal < caution < danger)."""
        return _LEVEL_RANK[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank >= other.rank


_LEVEL_RANK: dict[RiskLevel, int] = {
    RiskLevel.NORMAL: 0,
    RiskLevel.CAUTION: 1,
    RiskLevel.DANGER: 2,
}


class RiskCause(str, Enum):
    """Cause tag recorded on a risk history record."""

    KEYWORD_DETECTED = "KEYWORD_DETECTED"
    CONTINUOUS_EXTREME_AREA = "CONTINUOUS_EXTREME_AREA"
    CONTINUOUS_SAME_AREA = "CONTINUOUS_SAME_AREA"
    RESOLVED = "RESOLVED"


class SubjectType(str, Enum):
    """Kind of account a risk state belongs to."""

    STUDENT = "student"  # Monitored for supervisor-facing risk
    TEACHER = "teacher"  # Receives tips only


# =============================================================================
# Timeline and Streaks
# =============================================================================


@dataclass(frozen=True)
class TimelineEntry:
    """A classified journal entry as seen by the monitoring pipeline.

    ``area`` is None when the entry has not been classified or its
    emotion code could not be resolved; such entries break streaks.
    """

    entry_date: date
    area: Area | None = None
    entry_id: UUID | None = None
    emotion_code: str | None = None


@dataclass(frozen=True)
class StreakResult:
    """Run of date-adjacent, same-area entries ending at the newest entry."""

    area: Area | None = None
    length: int = 0

    @classmethod
    def empty(cls) -> "StreakResult":
        """Streak of an empty window or an unclassified newest entry."""
        return cls(area=None, length=0)


@dataclass(frozen=True)
class TipDecision:
    """Whether to show a self-care tip to the entry's author.

    ``consecutive_days`` is the actual streak length; ``tip_code`` only
    distinguishes two tiers and is used to pick the tip content.
    """

    show: bool = False
    area: Area | None = None
    consecutive_days: int | None = None
    tip_code: str | None = None

    @classmethod
    def hidden(cls) -> "TipDecision":
        """Decision for windows that do not warrant a tip."""
        return cls()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "show": self.show,
            "area": self.area.value if self.area else None,
            "consecutive_days": self.consecutive_days,
            "tip_code": self.tip_code,
        }


# =============================================================================
# Risk
# =============================================================================


class RiskHint(BaseModel):
    """Optional per-entry risk signal produced by the upstream classifier.

    All fields are absent when the classifier runs without an external
    signal.
    """

    llm_level: RiskLevel | None = None
    llm_reason: str | None = None
    keyword_evidence: list[str] = Field(default_factory=list)

    @field_validator("llm_level", mode="before")
    @classmethod
    def parse_level(cls, value: Any) -> RiskLevel | None:
        """Accept level tags in any case; reject unknown tags."""
        if value is None or value == "":
            return None
        return RiskLevel.parse(value)

    @field_validator("keyword_evidence", mode="before")
    @classmethod
    def drop_empty_keywords(cls, value: Any) -> Any:
        """Normalize a missing keyword list and strip blank keywords.

        Anything other than a list or tuple is left for type validation
        to reject.
        """
        if value is None:
            return []
        if not isinstance(value, (list, tuple)):
            return value
        return [
            keyword.strip() if isinstance(keyword, str) else keyword
            for keyword in value
            if keyword is not None and not (isinstance(keyword, str) and not keyword.strip())
        ]


@dataclass(frozen=True)
class RiskCandidate:
    """Level and reason proposed by the classifier before reconciliation."""

    level: RiskLevel
    reason: str | None = None


@dataclass(frozen=True)
class ResolutionInfo:
    """Explicit supervisor resolution of a danger state."""

    resolved_by: UUID
    resolved_at: datetime
    memo: str | None = None


@dataclass
class RiskState:
    """Current risk status of one subject.

    Owned by the risk state machine and mutated in place by it.
    ``target_entry_date``/``target_entry_id`` identify the newest entry
    the state reflects and anchor the ordering guard.
    """

    subject_id: UUID
    subject_type: SubjectType = SubjectType.STUDENT
    level: RiskLevel = RiskLevel.NORMAL
    reason: str | None = None
    streak_area: Area | None = None
    streak_length: int = 0
    last_checked_date: date | None = None
    target_entry_date: date | None = None
    target_entry_id: UUID | None = None
    resolution: ResolutionInfo | None = None
    risk_updated_at: datetime | None = None

    @property
    def is_resolved(self) -> bool:
        """Whether a supervisor has resolved the current danger state."""
        return self.resolution is not None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "subject_id": str(self.subject_id),
            "subject_type": self.subject_type.value,
            "level": self.level.value,
            "reason": self.reason,
            "streak_area": self.streak_area.value if self.streak_area else None,
            "streak_length": self.streak_length,
            "last_checked_date": (
                self.last_checked_date.isoformat() if self.last_checked_date else None
            ),
            "target_entry_date": (
                self.target_entry_date.isoformat() if self.target_entry_date else None
            ),
            "target_entry_id": str(self.target_entry_id) if self.target_entry_id else None,
            "resolution": (
                {
                    "resolved_by": str(self.resolution.resolved_by),
                    "resolved_at": self.resolution.resolved_at.isoformat(),
                    "memo": self.resolution.memo,
                }
                if self.resolution
                else None
            ),
            "risk_updated_at": (
                self.risk_updated_at.isoformat() if self.risk_updated_at else None
            ),
        }


@dataclass
class ReconcileResult:
    """Outcome of reconciling a candidate against a subject's state."""

    new_state: RiskState
    transitioned: bool
    previous_level: RiskLevel
    stale: bool = False


@dataclass
class RiskEvaluation:
    """Result of one full risk pipeline run for an entry."""

    subject_id: UUID
    entry_date: date
    streak: StreakResult = field(default_factory=StreakResult.empty)
    candidate: RiskCandidate | None = None
    state: RiskState | None = None
    transitioned: bool = False
    previous_level: RiskLevel | None = None
    history_id: UUID | None = None
    skipped: bool = False
    skip_reason: str | None = None
    evaluated_at: datetime = field(default_factory=lambda: datetime.now(UTC))


@dataclass
class EntryAnalysis:
    """Tip and risk outcomes produced after an entry is classified."""

    tip: TipDecision
    risk: RiskEvaluation
