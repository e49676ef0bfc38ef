"""Studio-side HTTP client for the logo relay.

Processing flow:
    1. Serialize a `GenerationRequest` to `{mode, userPrompt, base64Images}`.
    2. POST it to `<relay>/api/generate-logo`.
    3. Return the `image` data URI, or raise the matching `StudioError`.

Error handling strategy:
    - HTTP 429 -> `RateLimitError` with a wait-and-retry message.
    - Other non-2xx -> error class chosen by the body's `code`, message taken
      from the body (fallback: `Server error: <status>`).
    - 2xx without `image` -> `ExtractionFailedError`.
    - Relay unreachable or timed out -> `TransientUpstreamError`.
    No retry happens here; the relay already retries transient provider errors.
"""

import logging

import requests

from logo_studio.core.errors import (
    ERRORS_BY_CODE,
    ExtractionFailedError,
    RateLimitError,
    StudioError,
    TransientUpstreamError,
)
from logo_studio.core.types import GenerationRequest
from logo_studio.llm.provider_config import DEFAULT_RELAY_URL


logger = logging.getLogger(__name__)

GENERATE_PATH = "/api/generate-logo"
RATE_LIMIT_MESSAGE = "Global usage limit reached. Please wait 60 seconds."


class RelayClient:
    """Blocking client used by the studio controller (run off the event loop)."""

    def __init__(self, base_url: str = DEFAULT_RELAY_URL, timeout: float = 90.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def generate(self, request: GenerationRequest) -> str:
        """Send `request` to the relay and return the generated image data URI."""
        try:
            response = requests.post(
                f"{self.base_url}{GENERATE_PATH}",
                json=request.to_payload(),
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as exc:
            logger.error("Relay request failed: %s", exc)
            raise TransientUpstreamError(
                "Could not reach the logo relay. Please try again.",
                details=str(exc),
            ) from exc

        if response.status_code == 429:
            raise RateLimitError(RATE_LIMIT_MESSAGE, details=_body(response).get("details"))

        if not response.ok:
            data = _body(response)
            error_cls = ERRORS_BY_CODE.get(data.get("code"), StudioError)
            raise error_cls(
                data.get("message") or f"Server error: {response.status_code}",
                details=data.get("details"),
            )

        image = _body(response).get("image")
        if not image:
            raise ExtractionFailedError("No image data received from server.")
        return image


def _body(response: requests.Response) -> dict:
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}
