"""
Generation proxy: one prompt in, one data URL out.

Maps every provider outcome onto the small client-facing contract. Only
the safety-filter case gets a specific message; everything else
collapses to a generic retry message, with details left in the logs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Protocol, Sequence, Union

from websyncer.config.settings import GenerationSettings
from websyncer.generation.provider import ImagenClient, ProviderError

logger = logging.getLogger(__name__)

GENERIC_FAILURE = "Failed to generate image. Please try again."
CONFIG_FAILURE = "API configuration error"
NO_IMAGE_DATA = "No image data returned from API"


class PromptStrategy(Protocol):
    name: str
    safety_message: str
    echo_prompt: bool

    def build(self) -> str:
        ...

    def aspect_ratio(self, supported: Sequence[str]) -> str:
        ...


@dataclass(frozen=True)
class GenerationSuccess:
    image_url: str
    prompt: str
    aspect_ratio: str

    success = True


@dataclass(frozen=True)
class GenerationFailure:
    error: str
    status_code: int = 500

    success = False


GenerationOutcome = Union[GenerationSuccess, GenerationFailure]


def extract_image(data: Any) -> Optional[str]:
    """Return ``predictions[0].bytesBase64Encoded`` if present."""
    if not isinstance(data, dict):
        return None
    predictions = data.get("predictions")
    if not predictions or not isinstance(predictions, list):
        return None
    first = predictions[0]
    if not isinstance(first, dict):
        return None
    return first.get("bytesBase64Encoded") or None


class GenerationProxy:
    """Calls the image provider for an admitted request."""

    def __init__(
        self,
        settings: GenerationSettings,
        client: Optional[ImagenClient] = None,
    ) -> None:
        self._settings = settings
        self._client = client or ImagenClient(settings)

    @property
    def configured(self) -> bool:
        return bool(self._settings.api_key)

    def check_configuration(self) -> Optional[GenerationFailure]:
        """Return a failure if generation cannot run at all, else None."""
        if self.configured:
            return None
        logger.error("GEMINI_API_KEY is not set; refusing generation request")
        return GenerationFailure(error=CONFIG_FAILURE)

    def generate(self, strategy: PromptStrategy) -> GenerationOutcome:
        misconfigured = self.check_configuration()
        if misconfigured is not None:
            return misconfigured

        prompt = strategy.build()
        aspect_ratio = strategy.aspect_ratio(self._settings.supported_aspect_ratios)

        try:
            data = self._client.predict(prompt, aspect_ratio)
        except ProviderError:
            logger.exception("%s generation failed", strategy.name.capitalize())
            return GenerationFailure(error=GENERIC_FAILURE)

        image = extract_image(data)
        if image:
            return GenerationSuccess(
                image_url=f"data:image/png;base64,{image}",
                prompt=prompt,
                aspect_ratio=aspect_ratio,
            )

        logger.error("Unexpected response format from provider: %s", data)
        if isinstance(data, dict) and not data:
            return GenerationFailure(error=strategy.safety_message)
        return GenerationFailure(error=NO_IMAGE_DATA)
