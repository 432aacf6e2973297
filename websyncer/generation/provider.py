"""HTTP client for the Imagen predict endpoint."""

from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from websyncer.config.settings import GenerationSettings

logger = logging.getLogger(__name__)


class ProviderError(RuntimeError):
    """The provider call did not produce a usable response."""


class ProviderHTTPError(ProviderError):
    """The provider answered with a non-2xx status."""

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(f"Image generation failed: {status_code}")
        self.status_code = status_code
        self.body = body


class ProviderUnavailableError(ProviderError):
    """The provider could not be reached or timed out."""


class ImagenClient:
    """Synchronous client for ``models/imagen-*:predict``. One image per call."""

    def __init__(
        self,
        settings: GenerationSettings,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._settings = settings
        self._session = session or requests.Session()
        self._session.headers.update({"Content-Type": "application/json"})

    def predict(self, prompt: str, aspect_ratio: str) -> dict[str, Any]:
        """
        Request a single image and return the decoded JSON body.

        Raises:
            ProviderHTTPError: non-2xx response. The body is logged here and
                kept on the exception; callers must not echo it to clients.
            ProviderUnavailableError: connection failure, timeout or a body
                that is not JSON.
        """
        payload = {
            "instances": [{"prompt": prompt}],
            "parameters": {"sampleCount": 1, "aspectRatio": aspect_ratio},
        }
        try:
            response = self._session.post(
                self._settings.endpoint,
                json=payload,
                headers={"x-goog-api-key": self._settings.api_key or ""},
                timeout=self._settings.request_timeout,
            )
        except requests.RequestException as exc:
            raise ProviderUnavailableError(f"Image provider unreachable: {exc}") from exc

        if not response.ok:
            logger.error("Imagen API error %d: %s", response.status_code, response.text)
            raise ProviderHTTPError(response.status_code, response.text)

        # An empty 2xx body is how the provider reports a safety-filter block
        if not response.content.strip():
            return {}
        try:
            return response.json()
        except ValueError as exc:
            raise ProviderUnavailableError("Image provider returned a non-JSON body") from exc
