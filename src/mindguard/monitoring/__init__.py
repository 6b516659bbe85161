"""Emotional pattern and risk monitoring.

The pure pipeline components (streaks, tips, classification and the risk
state machine) are exported here. The database-backed pieces live in
``mindguard.monitoring.ledger`` and ``mindguard.monitoring.engine``.
"""

from mindguard.monitoring.classifier import classify_risk, describe_streak
from mindguard.monitoring.protocol import AreaLookup, TimelineReader
from mindguard.monitoring.state_machine import RiskStateMachine, create_risk_state_machine
from mindguard.monitoring.streak import compute_streak
from mindguard.monitoring.tips import decide_tip, tip_for_streak
from mindguard.monitoring.types import (
    SYSTEM_ACTOR_ID,
    Area,
    EntryAnalysis,
    ReconcileResult,
    ResolutionInfo,
    RiskCandidate,
    RiskCause,
    RiskEvaluation,
    RiskHint,
    RiskLevel,
    RiskState,
    StreakResult,
    SubjectType,
    TimelineEntry,
    TipDecision,
)

__all__ = [
    # Streaks and tips
    "compute_streak",
    "decide_tip",
    "tip_for_streak",
    # Risk
    "classify_risk",
    "describe_streak",
    "RiskStateMachine",
    "create_risk_state_machine",
    # Collaborators
    "AreaLookup",
    "TimelineReader",
    # Types
    "SYSTEM_ACTOR_ID",
    "Area",
    "EntryAnalysis",
    "ReconcileResult",
    "ResolutionInfo",
    "RiskCandidate",
    "RiskCause",
    "RiskEvaluation",
    "RiskHint",
    "RiskLevel",
    "RiskState",
    "StreakResult",
    "SubjectType",
    "TimelineEntry",
    "TipDecision",
]
