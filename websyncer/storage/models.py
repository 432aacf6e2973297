"""
Row model for the counter store.

Plain dataclass, no ORM. Used by the operator CLI to list counters.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone


@dataclass(frozen=True)
class CounterEntry:
    """
    One rate counter as stored.

    Keys look like ``rl:short:{fingerprint}:{bucket}`` or
    ``rl:daily:{fingerprint}:{bucket}``; value is the decimal count of
    admitted requests in that bucket.
    """

    key: str
    value: str
    expires_at: float

    @property
    def scope(self) -> str:
        """The tier scope segment of the key ("short" or "daily")."""
        parts = self.key.split(":")
        return parts[1] if len(parts) > 1 else ""

    @property
    def expires_at_iso(self) -> str:
        return datetime.fromtimestamp(self.expires_at, tz=timezone.utc).isoformat()
