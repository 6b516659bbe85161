"""Tests for the streak calculator."""

from datetime import date, timedelta

from mindguard.monitoring.streak import compute_streak
from mindguard.monitoring.types import Area, StreakResult, TimelineEntry


def entry(day: date, area: Area | None) -> TimelineEntry:
    """Create a timeline entry."""
    return TimelineEntry(entry_date=day, area=area)


def consecutive(start: date, areas: list[Area | None]) -> list[TimelineEntry]:
    """Create a newest-first window of consecutive days ending at ``start``."""
    return [entry(start - timedelta(days=offset), area) for offset, area in enumerate(areas)]


class TestComputeStreak:
    """Tests for compute_streak."""

    def test_empty_window(self) -> None:
        """Test an empty window yields an empty streak."""
        assert compute_streak([]) == StreakResult(area=None, length=0)

    def test_unclassified_newest_entry(self) -> None:
        """Test an unclassified newest entry yields an empty streak."""
        window = consecutive(date(2025, 1, 5), [None, Area.RED, Area.RED])
        assert compute_streak(window) == StreakResult(area=None, length=0)

    def test_single_entry(self) -> None:
        """Test a single classified entry is a streak of one."""
        result = compute_streak([entry(date(2025, 1, 5), Area.GREEN)])
        assert result == StreakResult(area=Area.GREEN, length=1)

    def test_stops_at_date_gap(self) -> None:
        """Test the streak stops at a missing day."""
        window = [
            entry(date(2025, 1, 5), Area.RED),
            entry(date(2025, 1, 4), Area.RED),
            entry(date(2025, 1, 3), Area.RED),
            entry(date(2025, 1, 1), Area.RED),
        ]
        assert compute_streak(window) == StreakResult(area=Area.RED, length=3)

    def test_stops_at_area_change(self) -> None:
        """Test the streak stops at the first different area."""
        window = consecutive(date(2025, 1, 5), [Area.BLUE, Area.BLUE, Area.RED, Area.BLUE])
        assert compute_streak(window) == StreakResult(area=Area.BLUE, length=2)

    def test_stops_at_unclassified_entry(self) -> None:
        """Test an unclassified entry in the middle breaks the streak."""
        window = consecutive(date(2025, 1, 5), [Area.YELLOW, None, Area.YELLOW])
        assert compute_streak(window) == StreakResult(area=Area.YELLOW, length=1)

    def test_full_window(self) -> None:
        """Test a fully contiguous window counts every entry."""
        window = consecutive(date(2025, 3, 7), [Area.RED] * 7)
        assert compute_streak(window) == StreakResult(area=Area.RED, length=7)

    def test_duplicate_date_breaks_streak(self) -> None:
        """Test two entries on the same day are not date-adjacent."""
        window = [
            entry(date(2025, 1, 5), Area.RED),
            entry(date(2025, 1, 5), Area.RED),
        ]
        assert compute_streak(window).length == 1

    def test_input_order_is_authoritative(self) -> None:
        """Test the window is not re-sorted before scanning."""
        window = [
            entry(date(2025, 1, 3), Area.RED),
            entry(date(2025, 1, 4), Area.RED),
            entry(date(2025, 1, 5), Area.RED),
        ]
        assert compute_streak(window) == StreakResult(area=Area.RED, length=1)

    def test_deterministic(self) -> None:
        """Test repeated calls on the same window give identical results."""
        window = consecutive(date(2025, 2, 10), [Area.GREEN, Area.GREEN, Area.BLUE])
        first = compute_streak(window)
        second = compute_streak(window)
        assert first == second
        assert window == consecutive(date(2025, 2, 10), [Area.GREEN, Area.GREEN, Area.BLUE])
