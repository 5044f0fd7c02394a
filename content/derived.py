"""Derived display state: regulation countdowns and reading progress."""

import math
from datetime import date, datetime, timedelta

from config import REGULATION_WINDOW_MONTHS

_DAY = timedelta(days=1)
_MIN_PROGRESS = 0.05


def _as_datetime(value: date | datetime) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime(value.year, value.month, value.day)


def days_remaining(deadline: date | datetime | None, now: datetime | None = None) -> int | None:
    """Whole days until the deadline, rounded up, never negative."""
    if deadline is None:
        return None
    now = now or datetime.utcnow()
    diff = _as_datetime(deadline) - now
    return max(0, math.ceil(diff / _DAY))


def deadline_progress(
    deadline: date | datetime | None,
    now: datetime | None = None,
    months_before: int = REGULATION_WINDOW_MONTHS,
) -> float | None:
    """Fraction of the run-up window already elapsed, clamped to [0.05, 1.0].

    The window opens ``months_before`` 30-day months before the deadline.
    """
    if deadline is None:
        return None
    now = now or datetime.utcnow()
    end = _as_datetime(deadline)
    start = end - timedelta(days=30 * months_before)
    total = max(end - start, _DAY)
    fraction = (now - start) / total
    return min(1.0, max(_MIN_PROGRESS, fraction))


def reading_progress(scroll_y: float, document_height: float, viewport_height: float) -> float:
    """Percent of the article scrolled past, 0..100."""
    scrollable = document_height - viewport_height
    if scrollable <= 0:
        return 0.0
    return min(max(scroll_y / scrollable * 100, 0.0), 100.0)
