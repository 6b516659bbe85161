"""Risk monitoring engine.

Runs after an entry has been classified:
- Self-tip decision for the entry's author.
- Risk pipeline for supervisors: classifier -> state machine -> ledger.

Both sides read the same timeline with different windows. The risk side
commits its state update and history record as one unit of work.
"""

from dataclasses import replace
from datetime import UTC, date, datetime
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from mindguard.config.settings import Settings, get_settings
from mindguard.core.exceptions import PersistenceFailureError, SubjectNotFoundError
from mindguard.core.logging import LogContext, get_logger
from mindguard.db.models.risk import RiskHistoryRecord, SubjectRiskStatus
from mindguard.db.repositories.risk_state import RiskStateRepository
from mindguard.monitoring.classifier import classify_risk
from mindguard.monitoring.ledger import RiskHistoryLedger
from mindguard.monitoring.protocol import AreaLookup, TimelineReader
from mindguard.monitoring.state_machine import RiskStateMachine
from mindguard.monitoring.streak import compute_streak
from mindguard.monitoring.tips import decide_tip
from mindguard.monitoring.types import (
    EntryAnalysis,
    RiskEvaluation,
    RiskHint,
    RiskLevel,
    RiskState,
    SubjectType,
    TimelineEntry,
    TipDecision,
)

logger = get_logger(__name__)

AT_RISK_LEVELS = [RiskLevel.DANGER, RiskLevel.CAUTION]


def at_risk_order(state: RiskState) -> tuple[int, float]:
    """Sort key placing danger first, then the most recently updated.

    SQLite returns naive timestamps; they are stored in UTC.
    """
    updated = state.risk_updated_at
    if updated is None:
        return (-state.level.rank, 0.0)
    if updated.tzinfo is None:
        updated = updated.replace(tzinfo=UTC)
    return (-state.level.rank, -updated.timestamp())


class RiskMonitoringEngine:
    """Entry point for the monitoring pipeline and supervisor actions.

    The engine does not lock; callers must serialize calls for the same
    subject. The ordering guard protects against older entries that still
    arrive out of order.

    Example:
        engine = RiskMonitoringEngine(session, timeline_reader, area_cache)
        await engine.enroll_subject(student_id)
        analysis = await engine.on_entry_classified(
            student_id, entry_date, entry_id,
            RiskHint(llm_level="caution", llm_reason="mentions feeling alone"),
        )
        if analysis.tip.show:
            ...
    """

    def __init__(
        self,
        session: AsyncSession,
        timeline_reader: TimelineReader,
        area_lookup: AreaLookup | None = None,
        settings: Settings | None = None,
        state_machine: RiskStateMachine | None = None,
    ):
        """Initialize the engine.

        Args:
            session: Async database session for state and history
            timeline_reader: Source of recent classified entries
            area_lookup: Resolves entries that carry only an emotion code
            settings: Application settings (defaults to cached settings)
            state_machine: Risk state machine (a default one is created)
        """
        self.session = session
        self.timeline_reader = timeline_reader
        self.area_lookup = area_lookup
        self.settings = settings or get_settings()
        self.thresholds = self.settings.monitoring
        self.state_machine = state_machine or RiskStateMachine()
        self.states = RiskStateRepository(session)
        self.ledger = RiskHistoryLedger(session)

    # -------------------------------------------------------------------------
    # Enrollment and queries
    # -------------------------------------------------------------------------

    async def enroll_subject(
        self,
        subject_id: UUID,
        subject_type: SubjectType = SubjectType.STUDENT,
    ) -> RiskState:
        """Create the initial normal risk state for a subject.

        Enrolling an already enrolled subject returns its current state.
        """
        existing = await self.states.get(subject_id)
        if existing is not None:
            return existing.to_domain()

        status = SubjectRiskStatus(
            subject_id=subject_id,
            subject_type=subject_type.value,
            risk_level=RiskLevel.NORMAL.value,
            streak_length=0,
        )
        await self._commit_unit("enroll_subject", self.states.create(status, commit=False))
        logger.info("subject_enrolled", subject_id=str(subject_id), subject_type=subject_type.value)
        return status.to_domain()

    async def get_risk_state(self, subject_id: UUID) -> RiskState:
        """Read-only snapshot of a subject's risk state.

        Raises:
            SubjectNotFoundError: If the subject is not enrolled
        """
        status = await self.states.get(subject_id)
        if status is None:
            raise SubjectNotFoundError(subject_id)
        return status.to_domain()

    async def list_at_risk_subjects(self, level: RiskLevel | None = None) -> list[RiskState]:
        """Subjects currently flagged, danger first, then most recently updated.

        Args:
            level: Restrict to caution or danger (both if None)
        """
        levels = AT_RISK_LEVELS if level is None else [level]
        rows = await self.states.list_by_levels(levels)
        return sorted((row.to_domain() for row in rows), key=at_risk_order)

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
        """Query the risk history ledger, newest first."""
        return await self.ledger.list_history(
            subject_id=subject_id,
            confirmed=confirmed,
            new_level=new_level,
            created_from=created_from,
            created_to=created_to,
            limit=limit,
            offset=offset,
        )

    # -------------------------------------------------------------------------
    # Pipeline
    # -------------------------------------------------------------------------

    async def decide_tip(self, subject_id: UUID, anchor_date: date) -> TipDecision:
        """Decide whether to show a self-care tip for the newest entry."""
        window = await self._read_window(
            subject_id, anchor_date, self.thresholds.tip_window_days
        )
        decision = decide_tip(window, self.thresholds)
        if decision.show:
            logger.debug(
                "self_tip_selected",
                subject_id=str(subject_id),
                tip_code=decision.tip_code,
                consecutive_days=decision.consecutive_days,
            )
        return decision

    async def evaluate_risk(
        self,
        subject_id: UUID,
        entry_date: date,
        entry_id: UUID | None = None,
        hint: RiskHint | None = None,
        checked_on: date | None = None,
    ) -> RiskEvaluation:
        """Run the risk pipeline for a newly classified entry.

        The state update and the history record are committed together;
        on failure both are rolled back.

        Raises:
            SubjectNotFoundError: If the subject is not enrolled
            InvalidRiskLevelError: If the classifier output is malformed
            PersistenceFailureError: If the unit of work cannot be committed
        """
        hint = hint or RiskHint()
        evaluation = RiskEvaluation(subject_id=subject_id, entry_date=entry_date)

        with LogContext(operation="evaluate_risk", subject_id=str(subject_id)):
            try:
                return await self._evaluate_locked(evaluation, entry_id, hint, checked_on)
            except SQLAlchemyError as e:
                await self.session.rollback()
                logger.error("risk_evaluation_failed", error=str(e))
                raise PersistenceFailureError(str(e), operation="evaluate_risk") from e
            except BaseException:
                # Releases the row lock taken by get_for_update
                await self.session.rollback()
                raise

    async def _evaluate_locked(
        self,
        evaluation: RiskEvaluation,
        entry_id: UUID | None,
        hint: RiskHint,
        checked_on: date | None,
    ) -> RiskEvaluation:
        subject_id = evaluation.subject_id
        entry_date = evaluation.entry_date

        status = await self.states.get_for_update(subject_id)
        if status is None:
            raise SubjectNotFoundError(subject_id)
        state = status.to_domain()

        if state.subject_type != SubjectType.STUDENT:
            logger.debug("risk_check_skipped", reason="not_a_student")
            return await self._skip(evaluation, state, "not_a_student")

        if state.target_entry_date is not None and entry_date < state.target_entry_date:
            logger.debug(
                "stale_entry_skipped",
                entry_date=entry_date.isoformat(),
                target_entry_date=state.target_entry_date.isoformat(),
            )
            return await self._skip(evaluation, state, "stale_entry")

        window = await self._read_window(subject_id, entry_date, self.thresholds.risk_window_days)
        streak = compute_streak(window)
        candidate = classify_risk(streak, hint.llm_level, hint.llm_reason, self.thresholds)

        result = self.state_machine.reconcile(
            subject_id,
            candidate,
            streak,
            state,
            entry_date,
            entry_id,
            checked_on=checked_on,
        )
        if result.stale:
            return await self._skip(evaluation, result.new_state, "stale_entry")

        evaluation.streak = streak
        evaluation.candidate = candidate
        evaluation.transitioned = result.transitioned
        evaluation.previous_level = result.previous_level

        status.apply(result.new_state)
        await self.states.update(status, commit=False)
        if result.transitioned:
            record = await self.ledger.record(
                subject_id,
                result.previous_level,
                result.new_state.level,
                streak,
                result.new_state.reason,
                hint.keyword_evidence,
                entry_date,
                entry_id,
            )
            evaluation.history_id = record.history_id
        await self.session.commit()

        evaluation.state = replace(result.new_state)
        return evaluation

    async def on_entry_classified(
        self,
        subject_id: UUID,
        entry_date: date,
        entry_id: UUID | None = None,
        hint: RiskHint | None = None,
    ) -> EntryAnalysis:
        """Run both the self-tip decision and the risk pipeline for an entry."""
        tip = await self.decide_tip(subject_id, entry_date)
        risk = await self.evaluate_risk(subject_id, entry_date, entry_id, hint)
        return EntryAnalysis(tip=tip, risk=risk)

    # -------------------------------------------------------------------------
    # Supervisor actions
    # -------------------------------------------------------------------------

    async def confirm_history(
        self,
        record_id: UUID,
        supervisor_id: UUID,
        memo: str | None = None,
    ) -> RiskHistoryRecord:
        """Confirm a history record on behalf of a supervisor."""
        return await self._commit_unit(
            "confirm_history", self.ledger.confirm(record_id, supervisor_id, memo)
        )

    async def resolve_danger(
        self,
        subject_id: UUID,
        supervisor_id: UUID,
        memo: str | None = None,
    ) -> RiskState:
        """Allow a subject's danger state to clear on its next evaluation."""
        return await self._commit_unit(
            "resolve_danger", self.ledger.resolve_danger(subject_id, supervisor_id, memo)
        )

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    async def _read_window(
        self,
        subject_id: UUID,
        anchor_date: date,
        max_count: int,
    ) -> list[TimelineEntry]:
        entries = await self.timeline_reader.get_recent_classified_entries(
            subject_id, anchor_date, max_count
        )
        return [await self._resolve_area(entry) for entry in entries[:max_count]]

    async def _resolve_area(self, entry: TimelineEntry) -> TimelineEntry:
        if entry.area is not None or self.area_lookup is None or not entry.emotion_code:
            return entry
        return replace(entry, area=await self.area_lookup.get_area(entry.emotion_code))

    async def _skip(
        self,
        evaluation: RiskEvaluation,
        state: RiskState,
        reason: str,
    ) -> RiskEvaluation:
        """Release the locked row unchanged and report a skipped evaluation."""
        await self.session.rollback()
        evaluation.skipped = True
        evaluation.skip_reason = reason
        evaluation.previous_level = state.level
        evaluation.state = replace(state)
        evaluation.evaluated_at = datetime.now(UTC)
        return evaluation

    async def _commit_unit(self, operation: str, pending):
        try:
            result = await pending
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("unit_of_work_failed", operation=operation, error=str(e))
            raise PersistenceFailureError(str(e), operation=operation) from e
        except BaseException:
            await self.session.rollback()
            raise
        return result


def create_risk_monitoring_engine(
    session: AsyncSession,
    timeline_reader: TimelineReader,
    area_lookup: AreaLookup | None = None,
    settings: Settings | None = None,
) -> RiskMonitoringEngine:
    """Create a risk monitoring engine.

    Args:
        session: Async database session
        timeline_reader: Source of recent classified entries
        area_lookup: Optional emotion code resolver
        settings: Optional settings override

    Returns:
        Configured RiskMonitoringEngine
    """
    return RiskMonitoringEngine(session, timeline_reader, area_lookup, settings)
