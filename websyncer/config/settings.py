"""
Central configuration for the WebSyncer generation gate.

All tunables live here. Environment variables are read exactly once, in
Settings.from_env(); request-handling code receives a Settings object.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from functools import lru_cache
from pathlib import Path
from typing import Mapping, Optional


def _project_root() -> Path:
    """Walk up from this file to find the project root (where pyproject.toml lives)."""
    current = Path(__file__).resolve().parent
    while current != current.parent:
        if (current / "pyproject.toml").exists():
            return current
        current = current.parent
    # Fallback: two levels up from config/settings.py
    return Path(__file__).resolve().parent.parent.parent


@dataclass(frozen=True)
class ShortTermLimit:
    """Quota for the 10-minute wall-clock bucket."""

    max_requests: int = 10

    # Width of the bucket in minutes
    window_minutes: int = 10

    # 11 minutes: one minute of slack over the bucket width for boundary skew
    ttl_seconds: int = 660


@dataclass(frozen=True)
class DailyLimit:
    """Quota for the UTC calendar day bucket."""

    max_requests: int = 50
    ttl_seconds: int = 86400


@dataclass(frozen=True)
class LimitTier:
    """A named pair of short-term and daily quotas."""

    name: str = "standard"
    short_term: ShortTermLimit = field(default_factory=ShortTermLimit)
    daily: DailyLimit = field(default_factory=DailyLimit)


def _standard_tier() -> LimitTier:
    return LimitTier(name="standard")


def _whitelisted_tier() -> LimitTier:
    return LimitTier(
        name="whitelisted",
        short_term=ShortTermLimit(max_requests=30),
        daily=DailyLimit(max_requests=200),
    )


@dataclass(frozen=True)
class RateLimitSettings:
    """Settings for the admission controller."""

    standard: LimitTier = field(default_factory=_standard_tier)
    whitelisted: LimitTier = field(default_factory=_whitelisted_tier)

    # Exact-match network addresses that get the whitelisted tier
    allowlist: tuple[str, ...] = ()

    # Retry hints for short-term denials never go below this (seconds)
    min_retry_after: int = 60

    # Threads used for concurrent counter reads and detached writes
    executor_workers: int = 4


@dataclass(frozen=True)
class GenerationSettings:
    """Settings for the external image-generation provider."""

    api_key: Optional[str] = None

    endpoint: str = (
        "https://generativelanguage.googleapis.com/v1beta/models/"
        "imagen-4.0-generate-001:predict"
    )

    # Imagen 4.0 only accepts these aspect ratios
    supported_aspect_ratios: tuple[str, ...] = ("1:1", "3:4", "4:3", "9:16", "16:9")

    # Client-side timeout for the provider call (seconds)
    request_timeout: float = 60.0


@dataclass(frozen=True)
class StorageSettings:
    """Settings for the SQLite-backed counter store."""

    db_name: str = "websyncer.db"

    # SQLite journal mode
    journal_mode: str = "WAL"

    # How long to wait for a locked DB (milliseconds)
    busy_timeout_ms: int = 5000


@dataclass
class Settings:
    """
    Top-level settings container. Aggregates all subsystem settings.

    Usage:
        settings = get_settings()
        print(settings.rate_limit.standard.daily.max_requests)
        print(settings.generation.request_timeout)
    """

    project_root: Path = field(default_factory=_project_root)
    data_root: Optional[Path] = None
    rate_limit: RateLimitSettings = field(default_factory=RateLimitSettings)
    generation: GenerationSettings = field(default_factory=GenerationSettings)
    storage: StorageSettings = field(default_factory=StorageSettings)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from environment variables.

        Recognised variables:
            GEMINI_API_KEY              provider API key
            WHITELIST_IPS               comma-separated allow-list
            WEBSYNCER_DATA_DIR          directory for the DB and logs
            WEBSYNCER_PROVIDER_TIMEOUT  provider timeout in seconds
        """
        # Local import: allowlist imports LimitTier from this module
        from websyncer.admission.allowlist import parse_allowlist

        env = os.environ if environ is None else environ

        generation = GenerationSettings(api_key=env.get("GEMINI_API_KEY") or None)
        timeout = env.get("WEBSYNCER_PROVIDER_TIMEOUT")
        if timeout:
            generation = replace(generation, request_timeout=float(timeout))

        data_dir = env.get("WEBSYNCER_DATA_DIR")
        return cls(
            data_root=Path(data_dir) if data_dir else None,
            rate_limit=RateLimitSettings(allowlist=parse_allowlist(env.get("WHITELIST_IPS"))),
            generation=generation,
        )

    @property
    def data_dir(self) -> Path:
        """Root directory for all runtime data (DB, logs)."""
        return self.data_root or self.project_root / "data"

    @property
    def db_path(self) -> Path:
        """Full path to the SQLite database file."""
        return self.data_dir / "db" / self.storage.db_name

    @property
    def logs_dir(self) -> Path:
        """Root directory for log files."""
        return self.data_dir / "logs"

    def ensure_dirs(self) -> None:
        """Create all required data directories if they don't exist."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.logs_dir.mkdir(parents=True, exist_ok=True)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Returns the singleton Settings instance.

    Call this instead of constructing Settings() directly so the entire
    application shares one config object.
    """
    settings = Settings.from_env()
    settings.ensure_dirs()
    return settings
