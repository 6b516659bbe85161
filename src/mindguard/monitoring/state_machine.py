"""Risk state machine reconciling candidate levels with a subject's state.

Enforces two guards before applying a candidate:
- Ordering: an entry older than the one the state already reflects is a no-op.
- Sticky danger: a danger state only leaves danger after an explicit
  supervisor resolution.
"""

from datetime import UTC, date, datetime
from uuid import UUID

from mindguard.core.exceptions import InvalidRiskLevelError, SubjectNotFoundError
from mindguard.core.logging import get_logger
from mindguard.monitoring.types import (
    ReconcileResult,
    RiskCandidate,
    RiskLevel,
    RiskState,
    StreakResult,
)

logger = get_logger(__name__)


class RiskStateMachine:
    """Applies classifier candidates to per-subject risk states.

    The machine holds no state of its own; each call mutates the given
    ``RiskState`` in place. Callers must serialize calls per subject.

    Example:
        machine = RiskStateMachine()
        result = machine.reconcile(subject_id, candidate, streak, state,
                                   entry_date, entry_id)
        if result.transitioned:
            ledger.record(...)
    """

    def reconcile(
        self,
        subject_id: UUID,
        candidate: RiskCandidate,
        streak: StreakResult,
        current_state: RiskState | None,
        target_entry_date: date,
        target_entry_id: UUID | None,
        checked_on: date | None = None,
    ) -> ReconcileResult:
        """Reconcile a candidate level against the subject's current state.

        Args:
            subject_id: Subject being evaluated.
            candidate: Level and reason from the classifier.
            streak: Streak the candidate was derived from.
            current_state: The subject's persisted state.
            target_entry_date: Date of the entry that triggered the evaluation.
            target_entry_id: Identifier of that entry.
            checked_on: Evaluation date (defaults to today, UTC).

        Returns:
            ReconcileResult with the (possibly mutated) state.

        Raises:
            SubjectNotFoundError: If the subject has no state.
            InvalidRiskLevelError: If the candidate level is not a RiskLevel.
        """
        if current_state is None:
            raise SubjectNotFoundError(subject_id)

        candidate_level = self._validate_level(candidate.level)
        candidate_reason = candidate.reason
        previous_level = current_state.level

        if (
            current_state.target_entry_date is not None
            and target_entry_date < current_state.target_entry_date
        ):
            logger.debug(
                "stale_entry_skipped",
                subject_id=str(subject_id),
                entry_date=target_entry_date.isoformat(),
                target_entry_date=current_state.target_entry_date.isoformat(),
            )
            return ReconcileResult(
                new_state=current_state,
                transitioned=False,
                previous_level=previous_level,
                stale=True,
            )

        if (
            previous_level == RiskLevel.DANGER
            and candidate_level != RiskLevel.DANGER
            and current_state.resolution is None
        ):
            logger.warning(
                "sticky_danger_held",
                subject_id=str(subject_id),
                candidate_level=candidate_level.value,
            )
            candidate_level = RiskLevel.DANGER
            candidate_reason = current_state.reason

        checked_on = checked_on or datetime.now(UTC).date()
        current_state.streak_area = streak.area
        current_state.streak_length = streak.length
        current_state.reason = candidate_reason
        current_state.last_checked_date = checked_on
        current_state.target_entry_date = target_entry_date
        current_state.target_entry_id = target_entry_id
        current_state.risk_updated_at = datetime.now(UTC)

        if candidate_level == previous_level:
            logger.debug(
                "risk_state_refreshed",
                subject_id=str(subject_id),
                level=previous_level.value,
                streak_length=streak.length,
            )
            return ReconcileResult(
                new_state=current_state,
                transitioned=False,
                previous_level=previous_level,
            )

        current_state.level = candidate_level
        if candidate_level != RiskLevel.DANGER and current_state.resolution is not None:
            current_state.resolution = None

        logger.info(
            "risk_level_changed",
            subject_id=str(subject_id),
            previous_level=previous_level.value,
            new_level=candidate_level.value,
            entry_date=target_entry_date.isoformat(),
        )
        return ReconcileResult(
            new_state=current_state,
            transitioned=True,
            previous_level=previous_level,
        )

    @staticmethod
    def _validate_level(level: object) -> RiskLevel:
        if not isinstance(level, RiskLevel):
            raise InvalidRiskLevelError(level)
        return level


def create_risk_state_machine() -> RiskStateMachine:
    """Create a risk state machine."""
    return RiskStateMachine()
