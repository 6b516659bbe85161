"""Risk classification from a streak and the upstream text signal.

Priority (first match wins):
1. Text signal ``danger``.
2. Streak at the threshold in an extreme area (red/blue) -> danger.
3. Streak at the threshold in any other area -> caution.
4. Text signal ``caution``.
5. Otherwise normal.
"""

from mindguard.config.settings import MonitoringThresholds
from mindguard.monitoring.types import RiskCandidate, RiskLevel, StreakResult

DEFAULT_THRESHOLDS = MonitoringThresholds()

ADDITIONAL_REASON_PREFIX = "additional: "


def describe_streak(streak: StreakResult) -> str:
    """Build the sentence describing a streak."""
    if streak.area is None:
        return f"{streak.length}-day run of unclassified entries"
    return f"{streak.length}-day run of {streak.area.value} area ({streak.area.description})"


def _merge_reason(base: str, llm_reason: str | None) -> str:
    if llm_reason:
        return f"{base}\n{ADDITIONAL_REASON_PREFIX}{llm_reason}"
    return base


def classify_risk(
    streak: StreakResult,
    llm_level: RiskLevel | str | None = None,
    llm_reason: str | None = None,
    thresholds: MonitoringThresholds = DEFAULT_THRESHOLDS,
) -> RiskCandidate:
    """Combine a streak with the text signal into a candidate risk level.

    Args:
        streak: Streak over the risk window.
        llm_level: Level suggested by the upstream classifier, if any.
        llm_reason: Reason given by the upstream classifier, if any.
        thresholds: Risk streak threshold.

    Returns:
        RiskCandidate with level and reason.

    Raises:
        InvalidRiskLevelError: If ``llm_level`` is not a known level.
    """
    text_level = RiskLevel.parse(llm_level) if llm_level is not None else None
    sustained = streak.area is not None and streak.length >= thresholds.risk_streak_threshold

    if text_level == RiskLevel.DANGER:
        return RiskCandidate(level=RiskLevel.DANGER, reason=llm_reason)

    if sustained and streak.area.is_extreme:
        reason = (
            f"{describe_streak(streak)}. "
            "High-intensity emotions have persisted and need attention."
        )
        return RiskCandidate(level=RiskLevel.DANGER, reason=_merge_reason(reason, llm_reason))

    if sustained:
        return RiskCandidate(
            level=RiskLevel.CAUTION,
            reason=_merge_reason(describe_streak(streak), llm_reason),
        )

    if text_level == RiskLevel.CAUTION:
        return RiskCandidate(level=RiskLevel.CAUTION, reason=llm_reason)

    return RiskCandidate(level=RiskLevel.NORMAL, reason=None)
