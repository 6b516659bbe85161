"""Streak calculation over a newest-first timeline window."""

from collections.abc import Sequence
from datetime import timedelta

from mindguard.monitoring.types import StreakResult, TimelineEntry

ONE_DAY = timedelta(days=1)


def compute_streak(window: Sequence[TimelineEntry]) -> StreakResult:
    """Count the run of same-area, date-adjacent entries from the newest one.

    The window must be ordered newest first; the order is taken as given
    and never re-sorted. The run stops at the first date gap, the first
    unclassified entry, or the first entry in a different area.

    Args:
        window: Classified entries, newest first.

    Returns:
        The area of the newest entry and the length of its run, or an
        empty streak if the window is empty or the newest entry has no area.
    """
    if not window or window[0].area is None:
        return StreakResult.empty()

    base_area = window[0].area
    count = 1
    for previous, current in zip(window, window[1:]):
        if current.entry_date != previous.entry_date - ONE_DAY:
            break
        if current.area is None or current.area != base_area:
            break
        count += 1

    return StreakResult(area=base_area, length=count)
