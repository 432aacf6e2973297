"""Prompt building and the image-provider proxy."""

from websyncer.generation.prompts import BrandingPrompt, CampaignPrompt
from websyncer.generation.provider import ImagenClient, ProviderError
from websyncer.generation.proxy import GenerationFailure, GenerationProxy, GenerationSuccess

__all__ = [
    "BrandingPrompt",
    "CampaignPrompt",
    "GenerationFailure",
    "GenerationProxy",
    "GenerationSuccess",
    "ImagenClient",
    "ProviderError",
]
