"""Composite client fingerprint built from request signals."""

from __future__ import annotations

import hashlib

# Hex characters kept from the digest (64 bits)
FINGERPRINT_LENGTH = 16

_DELIMITER = "|"


def create_fingerprint(
    address: str,
    user_agent: str,
    accept_language: str,
    accept_encoding: str,
) -> str:
    """
    Derive a short, non-reversible identity token for a caller.

    Combines several low-entropy signals so that rotating the network
    address alone does not reset a caller's quota. Absent signals are
    passed in as the literal "unknown" by the caller, so this never fails.
    """
    data = _DELIMITER.join((address, user_agent, accept_language, accept_encoding))
    digest = hashlib.sha256(data.encode("utf-8")).hexdigest()
    return digest[:FINGERPRINT_LENGTH]
