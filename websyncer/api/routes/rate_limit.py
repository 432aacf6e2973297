"""Rate-limit status route. Read-only: never consumes quota."""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from websyncer.admission.identity import identity_from_headers
from websyncer.api.schemas import DailyUsage, RateLimitStatusResponse, ShortTermUsage

router = APIRouter(prefix="/api", tags=["rate-limit"])


@router.get("/rate-limit-status")
def rate_limit_status(request: Request) -> JSONResponse:
    """Report the caller's usage against its tier."""
    controller = request.app.state.admission_controller
    snapshot = controller.status(identity_from_headers(request.headers))
    tier = snapshot.tier

    body = RateLimitStatusResponse(
        short_term=ShortTermUsage(
            used=snapshot.short_term_used,
            limit=tier.short_term.max_requests,
            window_minutes=tier.short_term.window_minutes,
        ),
        daily=DailyUsage(used=snapshot.daily_used, limit=tier.daily.max_requests),
        whitelisted=snapshot.whitelisted,
        client_ip=snapshot.address,
    )
    return JSONResponse(body.model_dump(by_alias=True))
