"""Protocols for the collaborators the monitoring engine reads from."""

from datetime import date
from typing import Protocol, runtime_checkable
from uuid import UUID

from mindguard.monitoring.types import Area, TimelineEntry


@runtime_checkable
class TimelineReader(Protocol):
    """Reads a subject's recent classified journal entries.

    Implementations return at most ``max_count`` entries dated on or
    before ``anchor_date``, newest first, including the anchor entry and
    only entries that have been classified.
    """

    async def get_recent_classified_entries(
        self,
        subject_id: UUID,
        anchor_date: date,
        max_count: int,
    ) -> list[TimelineEntry]:
        """Return the most recent classified entries, newest first."""
        ...


@runtime_checkable
class AreaLookup(Protocol):
    """Resolves an emotion code to its mood-quadrant area."""

    async def get_area(self, emotion_code: str | None) -> Area | None:
        """Return the area for a code, or None if it cannot be resolved."""
        ...
