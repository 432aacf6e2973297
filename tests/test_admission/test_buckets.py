"""Tests for wall-clock bucket identifiers and reset timers."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from websyncer.admission.buckets import (
    daily_bucket,
    seconds_until_short_term_reset,
    seconds_until_utc_midnight,
    short_term_bucket,
)


def _utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


class TestShortTermBucket:
    @pytest.mark.parametrize(
        "minute, expected",
        [(0, "00"), (9, "00"), (10, "10"), (19, "10"), (42, "40"), (59, "50")],
    )
    def test_floors_minute_to_ten(self, minute, expected):
        assert short_term_bucket(_utc(2025, 3, 14, 15, minute)) == f"2025-03-14-15-{expected}"

    def test_constant_within_window(self):
        start = _utc(2025, 3, 14, 15, 40, 0)
        end = _utc(2025, 3, 14, 15, 49, 59, 999999)
        assert short_term_bucket(start) == short_term_bucket(end)

    def test_changes_at_boundary(self):
        before = _utc(2025, 3, 14, 15, 49, 59)
        after = before + timedelta(seconds=1)
        assert short_term_bucket(before) == "2025-03-14-15-40"
        assert short_term_bucket(after) == "2025-03-14-15-50"

    def test_naive_datetime_is_utc(self):
        assert short_term_bucket(datetime(2025, 1, 2, 3, 4)) == "2025-01-02-03-00"

    def test_aware_datetime_is_converted(self):
        plus_two = timezone(timedelta(hours=2))
        now = datetime(2025, 1, 2, 1, 15, tzinfo=plus_two)
        assert short_term_bucket(now) == "2025-01-01-23-10"

    def test_default_uses_current_time(self):
        assert len(short_term_bucket()) == len("YYYY-MM-DD-HH-MM")


class TestDailyBucket:
    def test_format(self):
        assert daily_bucket(_utc(2025, 3, 4, 23, 59)) == "2025-03-04"

    def test_changes_at_utc_midnight(self):
        before = _utc(2025, 12, 31, 23, 59, 59)
        assert daily_bucket(before) == "2025-12-31"
        assert daily_bucket(before + timedelta(seconds=1)) == "2026-01-01"


class TestResetTimers:
    def test_short_term_reset_mid_window(self):
        # 15:42:30 -> 15:50:00
        assert seconds_until_short_term_reset(_utc(2025, 3, 14, 15, 42, 30)) == 450

    def test_short_term_reset_at_window_start(self):
        assert seconds_until_short_term_reset(_utc(2025, 3, 14, 15, 40, 0)) == 600

    def test_short_term_reset_last_second(self):
        assert seconds_until_short_term_reset(_utc(2025, 3, 14, 15, 49, 59)) == 1

    def test_until_midnight(self):
        assert seconds_until_utc_midnight(_utc(2025, 3, 14, 23, 0, 0)) == 3600

    def test_until_midnight_truncates_fraction(self):
        assert seconds_until_utc_midnight(_utc(2025, 3, 14, 23, 59, 59, 500000)) == 0

    def test_until_midnight_at_midnight(self):
        assert seconds_until_utc_midnight(_utc(2025, 3, 14)) == 86400
