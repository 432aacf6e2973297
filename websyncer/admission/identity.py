"""Extraction of the request signals used for fingerprinting."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from websyncer.admission.fingerprint import create_fingerprint

UNKNOWN = "unknown"


@dataclass(frozen=True)
class ClientIdentity:
    """The four fingerprint signals of one request."""

    address: str = UNKNOWN
    user_agent: str = UNKNOWN
    accept_language: str = UNKNOWN
    accept_encoding: str = UNKNOWN

    @property
    def fingerprint(self) -> str:
        return create_fingerprint(
            self.address,
            self.user_agent,
            self.accept_language,
            self.accept_encoding,
        )


def _first_forwarded(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    first = value.split(",")[0].strip()
    return first or None


def identity_from_headers(headers: Mapping[str, str]) -> ClientIdentity:
    """
    Build a ClientIdentity from request headers.

    The address comes from the edge-injected CF-Connecting-IP header,
    then the first X-Forwarded-For entry, then "unknown". ``headers``
    must do case-insensitive lookups (Starlette's Headers does).
    """
    address = headers.get("cf-connecting-ip") or _first_forwarded(headers.get("x-forwarded-for"))
    return ClientIdentity(
        address=address or UNKNOWN,
        user_agent=headers.get("user-agent") or UNKNOWN,
        accept_language=headers.get("accept-language") or UNKNOWN,
        accept_encoding=headers.get("accept-encoding") or UNKNOWN,
    )
