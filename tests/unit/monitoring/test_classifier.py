"""Tests for the risk classifier."""

import pytest

from mindguard.core.exceptions import InvalidRiskLevelError
from mindguard.monitoring.classifier import classify_risk, describe_streak
from mindguard.monitoring.types import Area, RiskLevel, StreakResult


class TestPriority:
    """Tests for the classifier's priority order."""

    def test_text_danger_wins(self) -> None:
        """Test a danger text signal outranks everything."""
        result = classify_risk(StreakResult(Area.GREEN, 7), "danger", "self-harm wording")
        assert result.level == RiskLevel.DANGER
        assert result.reason == "self-harm wording"

    def test_extreme_streak_is_danger(self) -> None:
        """Test a seven-day red streak escalates to danger."""
        result = classify_risk(StreakResult(Area.RED, 7), None, None)
        assert result.level == RiskLevel.DANGER
        assert result.reason.startswith("7-day run of red area")
        assert "additional: " not in result.reason

    def test_extreme_streak_outranks_text_caution(self) -> None:
        """Test a blue streak upgrades past a caution text signal."""
        result = classify_risk(StreakResult(Area.BLUE, 7), "caution", "sounds tired")
        assert result.level == RiskLevel.DANGER
        assert result.reason.endswith("\nadditional: sounds tired")

    def test_same_area_streak_is_caution(self) -> None:
        """Test a long green streak is caution."""
        result = classify_risk(StreakResult(Area.GREEN, 8), None, None)
        assert result.level == RiskLevel.CAUTION
        assert result.reason == "8-day run of green area (peaceful emotions)"

    def test_same_area_streak_appends_text_reason(self) -> None:
        """Test the text reason is appended to a streak reason."""
        result = classify_risk(StreakResult(Area.YELLOW, 7), "caution", "restless")
        assert result.level == RiskLevel.CAUTION
        assert result.reason == (
            "7-day run of yellow area (lively emotions)\nadditional: restless"
        )

    def test_text_caution(self) -> None:
        """Test a caution text signal without a long streak."""
        result = classify_risk(StreakResult(Area.RED, 6), "caution", "withdrawn")
        assert result.level == RiskLevel.CAUTION
        assert result.reason == "withdrawn"

    def test_normal(self) -> None:
        """Test no signal and a short streak is normal with no reason."""
        result = classify_risk(StreakResult(Area.RED, 6), "normal", "fine")
        assert result.level == RiskLevel.NORMAL
        assert result.reason is None

    def test_empty_streak(self) -> None:
        """Test an empty streak with no signal is normal."""
        result = classify_risk(StreakResult.empty())
        assert result.level == RiskLevel.NORMAL


class TestLevelParsing:
    """Tests for text signal parsing."""

    @pytest.mark.parametrize("value", ["DANGER", "Danger", " danger "])
    def test_case_insensitive(self, value: str) -> None:
        """Test level tags are matched case-insensitively."""
        assert classify_risk(StreakResult.empty(), value, "x").level == RiskLevel.DANGER

    def test_accepts_enum(self) -> None:
        """Test an enum level is accepted as is."""
        result = classify_risk(StreakResult.empty(), RiskLevel.CAUTION, "x")
        assert result.level == RiskLevel.CAUTION

    def test_unknown_level_raises(self) -> None:
        """Test an unknown tag is rejected."""
        with pytest.raises(InvalidRiskLevelError):
            classify_risk(StreakResult.empty(), "critical", "x")


class TestDescribeStreak:
    """Tests for describe_streak."""

    def test_describes_area(self) -> None:
        """Test the sentence names the length, area and description."""
        assert describe_streak(StreakResult(Area.BLUE, 9)) == (
            "9-day run of blue area (subdued emotions)"
        )
