"""Liveness routes."""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter(tags=["system"])


@router.get("/", response_class=PlainTextResponse)
def root() -> str:
    return "WebSyncer API is running!"


@router.get("/health")
def health() -> dict:
    """Simple liveness check."""
    return {"status": "ok"}
