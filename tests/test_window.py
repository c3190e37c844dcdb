"""Tests for the lookback window."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from org_leaderboard.window import compute_window


def test_six_month_window():
    now = datetime(2024, 7, 1, 15, 30, tzinfo=timezone.utc)
    window = compute_window(6, now)
    # round(6 * 30.4375) = 183 days
    assert window.start == date(2023, 12, 31)
    assert window.end == date(2024, 7, 1)
    assert window.start_epoch == int(datetime(2023, 12, 31, tzinfo=timezone.utc).timestamp())
    assert window.search_range == "2023-12-31..2024-07-01"


def test_half_day_rounds_up():
    now = datetime(2024, 7, 1, tzinfo=timezone.utc)
    # 8 * 30.4375 = 243.5 -> 244 days
    assert compute_window(8, now).start == (now - timedelta(days=244)).date()


def test_start_is_truncated_to_midnight_utc():
    now = datetime(2024, 3, 10, 23, 59, 59, tzinfo=timezone.utc)
    window = compute_window(1, now)
    assert window.start_epoch % 86400 == 0
    assert window.start <= window.end


def test_naive_now_treated_as_utc():
    assert compute_window(1, datetime(2024, 3, 10, 12)) == compute_window(
        1, datetime(2024, 3, 10, 12, tzinfo=timezone.utc)
    )


def test_non_utc_now_is_converted():
    tz = timezone(timedelta(hours=9))
    # 2024-03-11 02:00 at +09:00 is still 2024-03-10 in UTC
    window = compute_window(0, datetime(2024, 3, 11, 2, tzinfo=tz))
    assert window.start == window.end == date(2024, 3, 10)


def test_negative_months_rejected():
    with pytest.raises(ValueError):
        compute_window(-1)
