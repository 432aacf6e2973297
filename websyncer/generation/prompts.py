"""
Prompt-building strategies for the generation endpoints.

Two request shapes reach the provider:
    CampaignPrompt  structured campaign fields substituted into a fixed template
    BrandingPrompt  a prompt built by the client, passed through unchanged
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Optional, Sequence

DEFAULT_ASPECT_RATIO = "1:1"
SUPPORTED_ASPECT_RATIOS = ("1:1", "3:4", "4:3", "9:16", "16:9")

CAMPAIGN_TEMPLATE = """
Ultra Professional fitness shoe INSOLE photography - hyper personalised custom orthopedic inserts.

Scene: {person[main_character]} wearing {person[clothing_color]}, {person[action]}. in the foreground an emphasized personalised INSOLE ({foreground[custom_text]}, {foreground[color]}, image - for instance {foreground[image_type]} or other masculine image on it on it and measurement based on {foreground[measurement]}) . Modern, clean fitness studio background with Skyblue,

Black: #000000 (background)
White: #FFFFFF (text) brand accents.

Text on {background[slogan_location]} in {background[slogan_language]} emphasizing {background[wall_text]}

Mood: {background[mood]}

text - short {background[slogan_language]} language motivational, encouraging to try {background[motivational_text]} and {background[slogan_product]}

Style: High-quality lifestyle fitness photography, bright natural lighting, 1080x1080 square format for Instagram. Premium fitness brand aesthetic.
- Bottom left corner: "{branding[logo_text]}" (in one line the text, {branding[logo_text_color]} bold text on {branding[logo_bg_color]} rounded rectangle with {branding[logo_border_color]} border, font type Arial Black - heavy weight, all caps).
- Contact Info: "Instagram: {branding[instagram_contact]}" visible in a stylish small font.
"""


def resolve_aspect_ratio(
    requested: Optional[str],
    supported: Sequence[str] = SUPPORTED_ASPECT_RATIOS,
    default: str = DEFAULT_ASPECT_RATIO,
) -> str:
    """Return ``requested`` if the provider supports it, else ``default``."""
    return requested if requested in supported else default


@dataclass(frozen=True)
class CampaignPrompt:
    """Insole campaign prompt built from structured form sections."""

    person: Mapping[str, str]
    foreground: Mapping[str, str]
    background: Mapping[str, str]
    branding: Mapping[str, str]

    name = "campaign"
    safety_message = (
        "Generation blocked. The prompt triggered a safety filter (likely due to "
        "Age/Action combination). Try 'Young Athlete' instead of specific ages."
    )
    # The prompt is returned to the caller alongside the image
    echo_prompt = True

    def build(self) -> str:
        return CAMPAIGN_TEMPLATE.format(
            person=self.person,
            foreground=self.foreground,
            background=self.background,
            branding=self.branding,
        ).strip()

    def aspect_ratio(self, supported: Sequence[str] = SUPPORTED_ASPECT_RATIOS) -> str:
        return DEFAULT_ASPECT_RATIO


@dataclass(frozen=True)
class BrandingPrompt:
    """Pre-built prompt from the branding page, with an optional aspect ratio."""

    prompt: str
    requested_aspect_ratio: Optional[str] = None
    # Accepted for compatibility; Imagen 4.0 dropped negative prompts
    negative_prompt: Optional[str] = field(default=None, compare=False)

    name = "branding"
    safety_message = "Generation blocked by safety filter. Try modifying the prompt."
    echo_prompt = False

    def build(self) -> str:
        return self.prompt

    def aspect_ratio(self, supported: Sequence[str] = SUPPORTED_ASPECT_RATIOS) -> str:
        return resolve_aspect_ratio(self.requested_aspect_ratio, supported)
