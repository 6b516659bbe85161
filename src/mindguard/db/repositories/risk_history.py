"""Repository for the risk history ledger."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import select

from mindguard.db.models.risk import RiskHistoryRecord
from mindguard.db.repositories.base import BaseRepository
from mindguard.monitoring.types import RiskLevel


class RiskHistoryRepository(BaseRepository[RiskHistoryRecord, UUID]):
    """Repository for RiskHistoryRecord model operations.

    Records are only ever inserted; the sole update is the confirmation
    sub-update performed by the ledger.
    """

    model = RiskHistoryRecord

    async def get_by_subject(
        self,
        subject_id: UUID,
        *,
        limit: int | None = None,
    ) -> list[RiskHistoryRecord]:
        """Get a subject's history, newest first.

        Args:
            subject_id: Subject to get history for
            limit: Maximum records to return (all if None)

        Returns:
            List of history records
        """
        stmt = (
            select(RiskHistoryRecord)
            .where(RiskHistoryRecord.subject_id == subject_id)
            .order_by(RiskHistoryRecord.created_at.desc(), RiskHistoryRecord.history_id.desc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)

        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_unconfirmed(self, *, limit: int = 100) -> list[RiskHistoryRecord]:
        """Get records awaiting supervisor confirmation, newest first."""
        return await self.search(confirmed=False, limit=limit)

    async def get_created_between(
        self,
        start: datetime,
        end: datetime,
        *,
        limit: int = 100,
    ) -> list[RiskHistoryRecord]:
        """Get records created within ``[start, end]``, newest first."""
        return await self.search(created_from=start, created_to=end, limit=limit)

    async def get_by_new_level(
        self,
        level: RiskLevel,
        *,
        limit: int = 100,
    ) -> list[RiskHistoryRecord]:
        """Get transitions into the given level, newest first."""
        return await self.search(new_level=level, limit=limit)

    async def search(
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
        """Search history records with optional filters.

        Args:
            subject_id: Restrict to one subject
            confirmed: Restrict to confirmed or unconfirmed records
            new_level: Restrict to transitions into this level
            created_from: Inclusive lower bound on creation time
            created_to: Inclusive upper bound on creation time
            limit: Maximum records to return
            offset: Number to skip

        Returns:
            Matching records, newest first
        """
        stmt = select(RiskHistoryRecord)

        if subject_id is not None:
            stmt = stmt.where(RiskHistoryRecord.subject_id == subject_id)
        if confirmed is not None:
            stmt = stmt.where(RiskHistoryRecord.confirmed == confirmed)
        if new_level is not None:
            stmt = stmt.where(RiskHistoryRecord.new_level == new_level.value)
        if created_from is not None:
            stmt = stmt.where(RiskHistoryRecord.created_at >= created_from)
        if created_to is not None:
            stmt = stmt.where(RiskHistoryRecord.created_at <= created_to)

        stmt = (
            stmt.order_by(
                RiskHistoryRecord.created_at.desc(), RiskHistoryRecord.history_id.desc()
            )
            .limit(limit)
            .offset(offset)
        )

        result = await self.db.execute(stmt)
        return list(result.scalars().all())
