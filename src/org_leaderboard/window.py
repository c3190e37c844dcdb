"""Lookback window computation."""

from __future__ import annotations

import math
from datetime import datetime, time, timedelta, timezone

from .models import TimeWindow

AVG_DAYS_PER_MONTH = 30.4375


def compute_window(months: int, now: datetime | None = None) -> TimeWindow:
    """Return the window covering the last ``months`` months up to ``now``.

    The start is ``months * 30.4375`` days (rounded half up) before ``now``,
    truncated to midnight UTC.
    """
    if months < 0:
        raise ValueError("months must not be negative")
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    else:
        now = now.astimezone(timezone.utc)

    days = math.floor(months * AVG_DAYS_PER_MONTH + 0.5)
    start = (now - timedelta(days=days)).date()
    start_dt = datetime.combine(start, time.min, tzinfo=timezone.utc)
    return TimeWindow(start=start, end=now.date(), start_epoch=int(start_dt.timestamp()))
