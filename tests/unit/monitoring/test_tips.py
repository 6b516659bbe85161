"""Tests for the self-tip decision."""

from datetime import date, timedelta

import pytest

from mindguard.config.settings import MonitoringThresholds
from mindguard.monitoring.tips import decide_tip, tip_for_streak
from mindguard.monitoring.types import Area, StreakResult, TimelineEntry, TipDecision


def red_run(days: int, start: date = date(2025, 1, 10)) -> list[TimelineEntry]:
    """Create a newest-first run of red entries."""
    return [
        TimelineEntry(entry_date=start - timedelta(days=offset), area=Area.RED)
        for offset in range(days)
    ]


class TestDecideTip:
    """Tests for decide_tip."""

    def test_no_tip_below_threshold(self) -> None:
        """Test a two-day streak does not show a tip."""
        decision = decide_tip(red_run(2))
        assert decision == TipDecision(show=False, area=None, consecutive_days=None, tip_code=None)

    def test_first_tier(self) -> None:
        """Test a three-day streak shows the first tier."""
        decision = decide_tip(red_run(3))
        assert decision.show is True
        assert decision.area == Area.RED
        assert decision.consecutive_days == 3
        assert decision.tip_code == "RED_3"

    def test_four_days_stays_first_tier(self) -> None:
        """Test four days keeps the first tier code but the real length."""
        decision = decide_tip(red_run(4))
        assert decision.tip_code == "RED_3"
        assert decision.consecutive_days == 4

    def test_second_tier(self) -> None:
        """Test a five-day streak selects the second tier."""
        decision = decide_tip(red_run(5))
        assert decision.tip_code == "RED_5"
        assert decision.consecutive_days == 5

    def test_code_saturates_but_days_do_not(self) -> None:
        """Test the code saturates at tier 5 while the day count keeps growing."""
        decision = decide_tip(red_run(6))
        assert decision.tip_code == "RED_5"
        assert decision.consecutive_days == 6

    def test_window_limits_streak(self) -> None:
        """Test only the tip window is inspected."""
        decision = decide_tip(red_run(10))
        assert decision.consecutive_days == 7

    def test_empty_window(self) -> None:
        """Test an empty window never shows a tip."""
        assert decide_tip([]).show is False

    @pytest.mark.parametrize(
        ("area", "expected"),
        [
            (Area.YELLOW, "YELLOW_3"),
            (Area.BLUE, "BLUE_3"),
            (Area.GREEN, "GREEN_3"),
        ],
    )
    def test_code_uses_area(self, area: Area, expected: str) -> None:
        """Test the tip code is prefixed with the uppercased area."""
        assert tip_for_streak(StreakResult(area=area, length=3)).tip_code == expected

    def test_custom_thresholds(self) -> None:
        """Test thresholds come from configuration."""
        thresholds = MonitoringThresholds(tip_min_streak=2, tip_high_streak=4)
        decision = tip_for_streak(StreakResult(area=Area.BLUE, length=2), thresholds)
        assert decision.tip_code == "BLUE_2"

    def test_to_dict(self) -> None:
        """Test tip serialization."""
        data = decide_tip(red_run(3)).to_dict()
        assert data == {
            "show": True,
            "area": "red",
            "consecutive_days": 3,
            "tip_code": "RED_3",
        }
