"""Provider transport for Gemini REST calls.

Architectural role:
    Executes HTTP requests against the Gemini API and maps provider failures
    onto the studio error taxonomy. Request bodies are built by
    `logo_studio.prompting.prompt_builder`; responses are interpreted by
    `logo_studio.image.extractor`.

Retry behavior:
    Explicit bounded loop: one initial attempt plus at most
    `settings.max_retries` retries (default 1). Retried conditions:
        - connection-level transport errors (reset, refused, protocol errors),
          including connect and pool timeouts;
        - HTTP 500, 502, 503, 504.
    Never retried:
        - read and write timeouts (model latency already spent the budget);
        - HTTP 429, surfaced as `RateLimitError`;
        - other 4xx, surfaced as `UpstreamRequestError`.
    Exhausted retries surface `TransientUpstreamError`.

Timeout:
    `settings.timeout_seconds` per attempt (60 s by default), since image
    generation latency is high.

Security considerations:
    The API key travels in the `x-goog-api-key` header and is never logged.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

import httpx

from logo_studio.core.errors import (
    RateLimitError,
    TransientUpstreamError,
    UpstreamRequestError,
)
from logo_studio.llm.provider_config import RelaySettings


logger = logging.getLogger(__name__)

TRANSIENT_STATUS_CODES = (500, 502, 503, 504)
RATE_LIMIT_STATUSES = ("RESOURCE_EXHAUSTED",)


class GeminiClient:
    """Async Gemini REST client with a one-shot retry on transient failures."""

    def __init__(
        self,
        settings: RelaySettings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.settings = settings
        self._transport = transport
        self._sleep = sleep

    async def generate_content(self, payload: dict) -> dict:
        """POST a `generateContent` body and return the decoded JSON response."""
        return await self._request("POST", self.settings.generate_url, json_body=payload)

    async def list_models(self) -> list[str]:
        """Return model names that support `generateContent`.

        Follows `nextPageToken` pagination until the listing is exhausted.
        """
        names = []
        page_token = None

        while True:
            params = {"pageSize": 100}
            if page_token:
                params["pageToken"] = page_token

            data = await self._request("GET", self.settings.models_url, params=params)

            for model in data.get("models") or []:
                methods = model.get("supportedGenerationMethods") or []
                if "generateContent" in methods:
                    names.append(str(model.get("name", "")).replace("models/", "", 1))

            page_token = data.get("nextPageToken")
            if not page_token:
                return names

    async def _request(
        self,
        method: str,
        url: str,
        json_body: Optional[dict] = None,
        params: Optional[dict] = None,
    ) -> dict:
        attempts = 1 + max(0, self.settings.max_retries)
        headers = {
            "x-goog-api-key": self.settings.api_key,
            "Content-Type": "application/json",
        }

        for attempt in range(attempts):
            last_attempt = attempt == attempts - 1

            try:
                async with httpx.AsyncClient(
                    timeout=self.settings.timeout_seconds,
                    transport=self._transport,
                ) as client:
                    response = await client.request(
                        method,
                        url,
                        headers=headers,
                        json=json_body,
                        params=params,
                    )

            except (httpx.ReadTimeout, httpx.WriteTimeout) as exc:
                logger.error("Provider request timed out after %.0fs", self.settings.timeout_seconds)
                raise TransientUpstreamError(
                    "The design engine took too long to respond. Please try again.",
                    details=str(exc) or exc.__class__.__name__,
                ) from exc

            except httpx.TransportError as exc:
                if not last_attempt:
                    logger.warning(
                        "Transient transport error (%s), retrying (%d/%d)",
                        exc.__class__.__name__, attempt + 1, attempts - 1,
                    )
                    await self._sleep(self.settings.retry_backoff_seconds)
                    continue
                raise TransientUpstreamError(details=str(exc) or exc.__class__.__name__) from exc

            status_code = response.status_code

            if status_code in TRANSIENT_STATUS_CODES:
                if not last_attempt:
                    logger.warning(
                        "Provider returned HTTP %d, retrying (%d/%d)",
                        status_code, attempt + 1, attempts - 1,
                    )
                    await self._sleep(self.settings.retry_backoff_seconds)
                    continue
                raise TransientUpstreamError(details=_error_detail(response))

            if status_code == 429 or _error_status(response) in RATE_LIMIT_STATUSES:
                logger.warning("Provider rate limit reached (HTTP %d)", status_code)
                raise RateLimitError(details=_error_detail(response))

            if status_code >= 400:
                logger.error("Provider rejected request: HTTP %d", status_code)
                raise UpstreamRequestError(details=_error_detail(response))

            try:
                return response.json()
            except ValueError as exc:
                raise UpstreamRequestError(
                    "The design engine returned an unreadable response.",
                    details=response.text[:200],
                ) from exc

        raise TransientUpstreamError()


def _error_body(response: httpx.Response) -> dict:
    try:
        data = response.json()
    except ValueError:
        return {}
    if isinstance(data, dict) and isinstance(data.get("error"), dict):
        return data["error"]
    return {}


def _error_status(response: httpx.Response) -> Optional[str]:
    if response.status_code < 400:
        return None
    return _error_body(response).get("status")


def _error_detail(response: httpx.Response) -> str:
    """Build a short provider-labeled error description for `details`."""
    message = _error_body(response).get("message")
    if message:
        return f"HTTP {response.status_code}: {message}"
    return f"HTTP {response.status_code}"
