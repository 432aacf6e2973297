"""Request admission: fingerprinting, time buckets, tiers and the controller."""

from websyncer.admission.allowlist import AllowList, parse_allowlist
from websyncer.admission.buckets import daily_bucket, short_term_bucket
from websyncer.admission.controller import (
    AdmissionController,
    AdmissionResult,
    Allowed,
    CounterUpdate,
    Denied,
    UsageSnapshot,
)
from websyncer.admission.fingerprint import create_fingerprint
from websyncer.admission.identity import ClientIdentity, identity_from_headers

__all__ = [
    "AdmissionController",
    "AdmissionResult",
    "AllowList",
    "Allowed",
    "ClientIdentity",
    "CounterUpdate",
    "Denied",
    "UsageSnapshot",
    "create_fingerprint",
    "daily_bucket",
    "identity_from_headers",
    "parse_allowlist",
    "short_term_bucket",
]
