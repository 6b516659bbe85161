"""Risk history ledger.

Records every risk level transition with its cause and keyword evidence,
and carries the supervisor actions that audit or resolve a subject's
state. Writes are staged on the session; committing them is the
caller's unit of work.
"""

from collections.abc import Sequence
from datetime import UTC, date, datetime
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from mindguard.core.exceptions import (
    HistoryRecordNotFoundError,
    RiskStateError,
    SubjectNotFoundError,
)
from mindguard.core.logging import get_logger
from mindguard.db.models.risk import RiskHistoryRecord
from mindguard.db.repositories.risk_history import RiskHistoryRepository
from mindguard.db.repositories.risk_state import RiskStateRepository
from mindguard.monitoring.types import (
    SYSTEM_ACTOR_ID,
    ResolutionInfo,
    RiskCause,
    RiskLevel,
    RiskState,
    StreakResult,
)

logger = get_logger(__name__)

AUTO_RESOLVED_REASON = "automatically resolved"


def derive_cause(keyword_evidence: Sequence[str] | None, new_level: RiskLevel) -> RiskCause:
    """Derive the cause tag of a transition.

    Keyword evidence takes precedence over the level-based causes.
    """
    if keyword_evidence:
        return RiskCause.KEYWORD_DETECTED
    if new_level == RiskLevel.DANGER:
        return RiskCause.CONTINUOUS_EXTREME_AREA
    if new_level == RiskLevel.CAUTION:
        return RiskCause.CONTINUOUS_SAME_AREA
    return RiskCause.RESOLVED


def is_auto_resolution(
    cause: RiskCause,
    previous_level: RiskLevel,
    new_level: RiskLevel,
) -> bool:
    """Whether a transition is an automatic recovery the system confirms itself."""
    return (
        cause == RiskCause.RESOLVED
        and previous_level in (RiskLevel.CAUTION, RiskLevel.DANGER)
        and new_level == RiskLevel.NORMAL
    )


class RiskHistoryLedger:
    """Append-only audit trail of risk transitions.

    Example:
        ledger = RiskHistoryLedger(session)
        record = await ledger.record(subject_id, RiskLevel.NORMAL, RiskLevel.DANGER,
                                     streak, reason, [], entry_date, entry_id)
        await session.commit()
    """

    def __init__(self, db: AsyncSession):
        """Initialize the ledger.

        Args:
            db: Async database session shared with the caller's unit of work
        """
        self.db = db
        self.history = RiskHistoryRepository(db)
        self.states = RiskStateRepository(db)

    async def record(
        self,
        subject_id: UUID,
        previous_level: RiskLevel,
        new_level: RiskLevel,
        streak: StreakResult,
        reason: str | None,
        keyword_evidence: Sequence[str] | None,
        target_entry_date: date | None,
        target_entry_id: UUID | None,
    ) -> RiskHistoryRecord:
        """Stage a history record for a detected transition.

        Automatic recoveries to normal are confirmed by the system
        immediately; every other record awaits a supervisor.

        Returns:
            The flushed (uncommitted) history record
        """
        cause = derive_cause(keyword_evidence, new_level)
        auto_resolved = is_auto_resolution(cause, previous_level, new_level)

        record = RiskHistoryRecord(
            subject_id=subject_id,
            previous_level=previous_level.value,
            new_level=new_level.value,
            cause=cause.value,
            reason=reason,
            streak_area=streak.area.value if streak.area else None,
            streak_length=streak.length,
            keyword_evidence=list(keyword_evidence or []),
            target_entry_date=target_entry_date,
            target_entry_id=target_entry_id,
            confirmed=False,
        )

        if auto_resolved:
            if not reason:
                record.reason = AUTO_RESOLVED_REASON
            record.confirmed = True
            record.confirmed_by = SYSTEM_ACTOR_ID
            record.confirmed_at = datetime.now(UTC)
            record.supervisor_memo = None

        await self.history.create(record, commit=False)

        logger.info(
            "risk_history_recorded",
            subject_id=str(subject_id),
            history_id=str(record.history_id),
            previous_level=previous_level.value,
            new_level=new_level.value,
            cause=cause.value,
            auto_confirmed=auto_resolved,
        )
        return record

    async def confirm(
        self,
        record_id: UUID,
        supervisor_id: UUID,
        memo: str | None = None,
    ) -> RiskHistoryRecord:
        """Stage a supervisor confirmation of a history record.

        Repeating a confirmation with the same supervisor and memo leaves
        the record untouched.

        Raises:
            HistoryRecordNotFoundError: If the record does not exist
        """
        record = await self.history.get(record_id)
        if record is None:
            raise HistoryRecordNotFoundError(record_id)

        if (
            record.confirmed
            and record.confirmed_by == supervisor_id
            and record.supervisor_memo == memo
        ):
            logger.debug("risk_history_already_confirmed", history_id=str(record_id))
            return record

        record.confirmed = True
        record.confirmed_by = supervisor_id
        record.confirmed_at = datetime.now(UTC)
        record.supervisor_memo = memo
        await self.history.update(record, commit=False)

        logger.info(
            "risk_history_confirmed",
            history_id=str(record_id),
            subject_id=str(record.subject_id),
            supervisor_id=str(supervisor_id),
        )
        return record

    async def resolve_danger(
        self,
        subject_id: UUID,
        supervisor_id: UUID,
        memo: str | None = None,
    ) -> RiskState:
        """Stage a supervisor resolution of a subject's danger state.

        The level itself is unchanged and no history record is written;
        the next reconciliation whose candidate drops below danger makes
        the transition and records it.

        Raises:
            SubjectNotFoundError: If the subject is not enrolled
            RiskStateError: If the subject is not currently in danger
        """
        status = await self.states.get_for_update(subject_id)
        if status is None:
            raise SubjectNotFoundError(subject_id)

        state = status.to_domain()
        if state.level != RiskLevel.DANGER:
            raise RiskStateError(
                "Only a danger state can be resolved",
                subject_id=subject_id,
                current_level=state.level.value,
            )

        state.resolution = ResolutionInfo(
            resolved_by=supervisor_id,
            resolved_at=datetime.now(UTC),
            memo=memo,
        )
        status.apply(state)
        await self.states.update(status, commit=False)

        logger.info(
            "danger_resolved",
            subject_id=str(subject_id),
            supervisor_id=str(supervisor_id),
        )
        return state

    async def list_history(
        self,
        *,
        subject_id: UUID | None = None,
        confirmed: bool | None = None,
        new_level: RiskLevel | None = None,
        created_from: datetime | None = None,
        created_to: datetime | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[RiskHistoryRecord]:
        """Query history records, newest first."""
        return await self.history.search(
            subject_id=subject_id,
            confirmed=confirmed,
            new_level=new_level,
            created_from=created_from,
            created_to=created_to,
            limit=limit,
            offset=offset,
        )

    async def subject_history(
        self,
        subject_id: UUID,
        *,
        limit: int | None = None,
    ) -> list[RiskHistoryRecord]:
        """A subject's full history, newest first."""
        return await self.history.get_by_subject(subject_id, limit=limit)

    async def pending_confirmations(self, *, limit: int = 100) -> list[RiskHistoryRecord]:
        """Records still awaiting a supervisor."""
        return await self.history.get_unconfirmed(limit=limit)
