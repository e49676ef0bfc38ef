"""Relay pipeline: validated request -> provider payload -> image.

Architectural role:
    The single operation exposed by the relay service. It bridges request
    composition (`prompting`), transport (`llm.client`) and response parsing
    (`image.extractor`), and is called by the HTTP adapter.

Model call flow:
    validate -> `compose_generation_payload` -> `GeminiClient.generate_content`
    -> `extract_image`.

Failure scenarios:
    Every failure is a `StudioError` subclass raised to the caller. Only the
    transport layer retries; extraction failures are final.
"""

import logging

from logo_studio.core.types import GenerationRequest
from logo_studio.core.validation import validate_request
from logo_studio.image.extractor import extract_image
from logo_studio.llm.client import GeminiClient
from logo_studio.prompting.prompt_builder import compose_generation_payload


logger = logging.getLogger(__name__)

PROMPT_LOG_CHARS = 30


class LogoRelay:
    """Forwards generation requests to the provider and normalizes the answer."""

    def __init__(self, client: GeminiClient):
        self.client = client

    async def generate(self, request: GenerationRequest) -> str:
        """Return a data URI for the logo generated from `request`."""
        validate_request(request)

        logger.info(
            "New request: %s | Prompt: %r | Images: %d",
            request.mode.value,
            request.prompt_text[:PROMPT_LOG_CHARS],
            len(request.reference_images),
        )

        payload = compose_generation_payload(request)
        logger.info("Sending request to %s", self.client.settings.model)
        response = await self.client.generate_content(payload)
        logger.info("Received response from %s", self.client.settings.model)

        image = extract_image(response)
        logger.info("Generated %s", image[5:image.find(";")] or "image")
        return image
