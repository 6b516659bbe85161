"""Repository for per-subject risk states."""

from uuid import UUID

from sqlalchemy import select

from mindguard.db.models.risk import SubjectRiskStatus
from mindguard.db.repositories.base import BaseRepository
from mindguard.monitoring.types import RiskLevel


class RiskStateRepository(BaseRepository[SubjectRiskStatus, UUID]):
    """Repository for SubjectRiskStatus model operations."""

    model = SubjectRiskStatus

    async def get_for_update(self, subject_id: UUID) -> SubjectRiskStatus | None:
        """Load a subject's state row for modification.

        Uses ``SELECT ... FOR UPDATE`` where the backend supports it.

        Args:
            subject_id: Subject to load

        Returns:
            The state row or None if the subject is not enrolled
        """
        stmt = (
            select(SubjectRiskStatus)
            .where(SubjectRiskStatus.subject_id == subject_id)
            .with_for_update()
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def list_by_levels(self, levels: list[RiskLevel]) -> list[SubjectRiskStatus]:
        """List subjects currently at any of the given levels.

        Args:
            levels: Levels to include

        Returns:
            Matching state rows, most recently updated first
        """
        if not levels:
            return []

        stmt = (
            select(SubjectRiskStatus)
            .where(SubjectRiskStatus.risk_level.in_([level.value for level in levels]))
            .order_by(SubjectRiskStatus.risk_updated_at.desc())
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())
