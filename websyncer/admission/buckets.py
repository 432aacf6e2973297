"""
Wall-clock aligned time buckets for counter keys.

Buckets are aligned to UTC wall-clock marks rather than to each client's
first request, so a client can spend a full quota at the end of one
bucket and another at the start of the next. That doubling at the
boundary is accepted in exchange for storing a single counter per bucket.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(now: Optional[datetime]) -> datetime:
    if now is None:
        return utc_now()
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc)


def short_term_bucket(now: Optional[datetime] = None, window_minutes: int = 10) -> str:
    """Return ``YYYY-MM-DD-HH-MM`` with the minute floored to the window."""
    now = _as_utc(now)
    floored = (now.minute // window_minutes) * window_minutes
    return f"{now:%Y-%m-%d-%H}-{floored:02d}"


def daily_bucket(now: Optional[datetime] = None) -> str:
    """Return the UTC calendar date as ``YYYY-MM-DD``."""
    return f"{_as_utc(now):%Y-%m-%d}"


def seconds_until_short_term_reset(now: Optional[datetime] = None, window_minutes: int = 10) -> int:
    """Whole seconds until the current short-term bucket rolls over."""
    now = _as_utc(now)
    minutes_into_window = now.minute % window_minutes
    return (window_minutes - minutes_into_window) * 60 - now.second


def seconds_until_utc_midnight(now: Optional[datetime] = None) -> int:
    """Whole seconds until the next UTC midnight."""
    now = _as_utc(now)
    midnight = (now + timedelta(days=1)).replace(hour=0, minute=0, second=0, microsecond=0)
    return int((midnight - now).total_seconds())
