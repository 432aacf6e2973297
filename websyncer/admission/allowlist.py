"""Static address allow-list that selects the limit tier."""

from __future__ import annotations

from typing import Iterable, Optional

from websyncer.config.settings import LimitTier, RateLimitSettings


def parse_allowlist(raw: Optional[str]) -> tuple[str, ...]:
    """Split a comma-separated address list, trimming blanks. None gives ()."""
    if not raw:
        return ()
    return tuple(part.strip() for part in raw.split(",") if part.strip())


class AllowList:
    """
    Exact-match address allow-list.

    No prefix or CIDR matching: an address is privileged only if it is
    string-equal to an entry.
    """

    def __init__(
        self,
        addresses: Iterable[str] = (),
        standard: Optional[LimitTier] = None,
        whitelisted: Optional[LimitTier] = None,
    ) -> None:
        defaults = RateLimitSettings()
        self._addresses = frozenset(addresses)
        self._standard = standard or defaults.standard
        self._whitelisted = whitelisted or defaults.whitelisted

    @classmethod
    def from_settings(cls, settings: RateLimitSettings) -> "AllowList":
        return cls(settings.allowlist, settings.standard, settings.whitelisted)

    def is_whitelisted(self, address: str) -> bool:
        return address in self._addresses

    def limits_for(self, address: str) -> LimitTier:
        """Return the whitelisted tier for listed addresses, else the standard tier."""
        if self.is_whitelisted(address):
            return self._whitelisted
        return self._standard

    def __len__(self) -> int:
        return len(self._addresses)
