"""FastAPI surface: generation routes, rate-limit status and health."""

from websyncer.api.app import create_app

__all__ = ["create_app"]
