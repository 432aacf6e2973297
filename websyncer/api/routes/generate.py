"""Image generation routes (campaign and branding)."""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from websyncer.admission.controller import Denied
from websyncer.admission.identity import identity_from_headers
from websyncer.api.schemas import (
    BrandingRequest,
    CampaignRequest,
    ErrorResponse,
    GenerateResponse,
    RemainingQuota,
)
from websyncer.generation.prompts import BrandingPrompt, CampaignPrompt
from websyncer.generation.proxy import GenerationFailure, PromptStrategy

router = APIRouter(prefix="/api", tags=["generation"])


def _json(model: BaseModel, status_code: int = 200) -> JSONResponse:
    return JSONResponse(model.model_dump(by_alias=True, exclude_none=True), status_code=status_code)


def _admit_and_generate(request: Request, strategy: PromptStrategy) -> JSONResponse:
    """Shared flow: config check, admission, provider call, response mapping."""
    proxy = request.app.state.generation_proxy
    controller = request.app.state.admission_controller

    misconfigured = proxy.check_configuration()
    if misconfigured is not None:
        return _json(ErrorResponse(error=misconfigured.error), misconfigured.status_code)

    decision = controller.admit(identity_from_headers(request.headers))
    if isinstance(decision, Denied):
        return _json(
            ErrorResponse(
                error=decision.message,
                retry_after=decision.retry_after_seconds,
                limit_type=decision.limit_type,
            ),
            429,
        )

    outcome = proxy.generate(strategy)
    if isinstance(outcome, GenerationFailure):
        return _json(ErrorResponse(error=outcome.error), outcome.status_code)

    return _json(
        GenerateResponse(
            prompt=outcome.prompt if strategy.echo_prompt else None,
            image_url=outcome.image_url,
            rate_limit=RemainingQuota(
                short_term_remaining=decision.short_term_remaining,
                daily_remaining=decision.daily_remaining,
            ),
        )
    )


@router.post("/generate")
def generate_campaign(request: Request, body: CampaignRequest) -> JSONResponse:
    """Generate a campaign image from structured form fields."""
    strategy = CampaignPrompt(
        person=body.person.model_dump(),
        foreground=body.foreground.model_dump(),
        background=body.background.model_dump(),
        branding=body.branding.model_dump(),
    )
    return _admit_and_generate(request, strategy)


@router.post("/branding/generate")
def generate_branding(request: Request, body: BrandingRequest) -> JSONResponse:
    """Generate a branding image from a client-built prompt."""
    if not body.prompt:
        return _json(ErrorResponse(error="Prompt is required"), 400)

    strategy = BrandingPrompt(
        prompt=body.prompt,
        requested_aspect_ratio=body.aspect_ratio,
        negative_prompt=body.negative_prompt,
    )
    return _admit_and_generate(request, strategy)
