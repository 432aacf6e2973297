"""Pydantic request/response models for the API.

Wire names are camelCase to match the browser client; Python attributes
are snake_case via aliases.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class PersonFields(_CamelModel):
    main_character: str = Field(alias="mainCharacter")
    action: str
    clothing_color: str = Field(alias="clothingColor")


class ForegroundFields(_CamelModel):
    custom_text: str = Field(alias="customText")
    color: str
    image_type: str = Field(alias="imageType")
    measurement: str


class BackgroundFields(_CamelModel):
    wall_text: str = Field(alias="wallText")
    mood: str
    motivational_text: str = Field(alias="motivationalText")
    slogan_location: str = Field(alias="sloganLocation")
    slogan_language: str = Field(alias="sloganLanguage")
    slogan_product: str = Field(alias="sloganProduct")


class BrandingFields(_CamelModel):
    logo_text: str = Field(alias="logoText")
    logo_text_color: str = Field(alias="logoTextColor")
    logo_bg_color: str = Field(alias="logoBgColor")
    logo_border_color: str = Field(alias="logoBorderColor")
    instagram_contact: str = Field(alias="instagramContact")


class CampaignRequest(BaseModel):
    """Body of POST /api/generate."""

    person: PersonFields
    foreground: ForegroundFields
    background: BackgroundFields
    branding: BrandingFields


class BrandingRequest(_CamelModel):
    """Body of POST /api/branding/generate. An empty prompt is rejected by the route."""

    prompt: Optional[str] = None
    negative_prompt: Optional[str] = Field(default=None, alias="negativePrompt")
    aspect_ratio: Optional[str] = Field(default=None, alias="aspectRatio")


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class RemainingQuota(_CamelModel):
    short_term_remaining: int = Field(serialization_alias="shortTermRemaining")
    daily_remaining: int = Field(serialization_alias="dailyRemaining")


class GenerateResponse(_CamelModel):
    """Successful generation. ``prompt`` is only set for campaign requests."""

    success: bool = True
    prompt: Optional[str] = None
    image_url: str = Field(serialization_alias="imageUrl")
    rate_limit: RemainingQuota = Field(serialization_alias="rateLimit")


class ErrorResponse(_CamelModel):
    """Standard failure envelope. 429 responses add retryAfter and limitType."""

    success: bool = False
    error: str
    retry_after: Optional[int] = Field(default=None, serialization_alias="retryAfter")
    limit_type: Optional[str] = Field(default=None, serialization_alias="limitType")


class ShortTermUsage(_CamelModel):
    used: int
    limit: int
    window_minutes: int = Field(serialization_alias="windowMinutes")


class DailyUsage(BaseModel):
    used: int
    limit: int


class RateLimitStatusResponse(_CamelModel):
    short_term: ShortTermUsage = Field(serialization_alias="shortTerm")
    daily: DailyUsage
    whitelisted: bool
    client_ip: str = Field(serialization_alias="clientIp")
