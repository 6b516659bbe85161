"""Self-care tip decision for the author of a new entry."""

from collections.abc import Sequence

from mindguard.config.settings import MonitoringThresholds
from mindguard.monitoring.streak import compute_streak
from mindguard.monitoring.types import StreakResult, TimelineEntry, TipDecision

DEFAULT_THRESHOLDS = MonitoringThresholds()


def tip_for_streak(
    streak: StreakResult,
    thresholds: MonitoringThresholds = DEFAULT_THRESHOLDS,
) -> TipDecision:
    """Map a streak to a tip decision.

    The tip code saturates at the higher tier while ``consecutive_days``
    keeps the real streak length.
    """
    if streak.area is None or streak.length < thresholds.tip_min_streak:
        return TipDecision.hidden()

    tier = (
        thresholds.tip_high_streak
        if streak.length >= thresholds.tip_high_streak
        else thresholds.tip_min_streak
    )
    return TipDecision(
        show=True,
        area=streak.area,
        consecutive_days=streak.length,
        tip_code=f"{streak.area.value.upper()}_{tier}",
    )


def decide_tip(
    window: Sequence[TimelineEntry],
    thresholds: MonitoringThresholds = DEFAULT_THRESHOLDS,
) -> TipDecision:
    """Decide whether the newest entry's author should see a self-care tip.

    Args:
        window: The most recent classified entries, newest first.
        thresholds: Tip window and tier thresholds.

    Returns:
        TipDecision for the newest entry.
    """
    return tip_for_streak(compute_streak(window[: thresholds.tip_window_days]), thresholds)
