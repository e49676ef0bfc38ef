"""
HTTP relay adapter for Logo Studio.

Architectural role:
- Expose the relay's single generation endpoint to studio clients.
- Enforce adapter-level input validation and body-size limits.
- Delegate generation to `logo_studio.llm.service.LogoRelay`.
- Normalize results and failures to the response contract.

Endpoint responsibilities:
- `GET /health`: liveness plus configured model name.
- `POST /api/generate-logo`: validate, relay to the provider, return the image.

API request lifecycle (`POST /api/generate-logo`):
1. Reject bodies larger than `max_body_bytes` (413): checked from
   `Content-Length` when declared, otherwise by buffering the chunked body.
2. Parse JSON `{mode, userPrompt, base64Images}`; schema failures -> 400.
3. Apply mode rules (image required / image-or-prompt required) -> 400.
4. Compose, call the provider (one retry on transient failures), extract.
5. Return `{image}` or `{message, code, details?}` with a non-2xx status.

Error handling strategy:
- `StudioError` subclasses carry their own status code (429 for rate limits,
  422 for blocked content, 502 for upstream/extraction failures).
- Unexpected exceptions are logged with traceback and rendered as 500; the
  process keeps serving.

Side effects:
- Outbound HTTPS calls to the provider.
- Logs request mode and truncated prompt; never logs the API key.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from logo_studio.core.errors import InputValidationError, PayloadTooLargeError, StudioError
from logo_studio.core.types import GenerationRequest, Mode
from logo_studio.llm.client import GeminiClient
from logo_studio.llm.provider_config import RelaySettings
from logo_studio.llm.service import LogoRelay


logger = logging.getLogger(__name__)

VERSION = "1.0.0"
BODY_METHODS = ("POST", "PUT", "PATCH")


# ============================================================
# Request Schema
# ============================================================

class GenerateLogoRequest(BaseModel):
    """Wire body of `POST /api/generate-logo`."""

    mode: Mode
    userPrompt: str = ""
    base64Images: list[str] = Field(default_factory=list)

    def to_request(self) -> GenerationRequest:
        return GenerationRequest(
            mode=self.mode,
            prompt_text=self.userPrompt,
            reference_images=tuple(self.base64Images),
        )


def _error_response(error: StudioError) -> JSONResponse:
    return JSONResponse(status_code=error.status_code, content=error.to_payload())


# ============================================================
# Application Factory
# ============================================================

def create_app(settings: RelaySettings, client: Optional[GeminiClient] = None) -> FastAPI:
    """Build the relay application from explicit settings.

    Args:
        settings: Validated relay settings (see `provider_config.load_settings`).
        client: Optional pre-built provider client, mainly for tests.
    """
    app = FastAPI(title="Logo Studio Relay", version=VERSION)
    app.state.settings = settings
    app.state.relay = LogoRelay(client or GeminiClient(settings))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.allowed_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def limit_body_size(request: Request, call_next):
        """Reject oversized bodies, declared or streamed."""
        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit():
            size = int(content_length)
        elif request.method in BODY_METHODS:
            # Chunked upload: buffer it once; Starlette replays the cached body downstream.
            size = len(await request.body())
        else:
            size = 0

        if size > settings.max_body_bytes:
            logger.warning("Rejected request body of %d bytes", size)
            return _error_response(PayloadTooLargeError())
        return await call_next(request)

    @app.exception_handler(RequestValidationError)
    async def invalid_body(request: Request, exc: RequestValidationError):
        """Render schema failures with the relay's error contract."""
        details = "; ".join(
            f"{'.'.join(str(loc) for loc in err.get('loc', ()))}: {err.get('msg', '')}"
            for err in exc.errors()
        )
        return _error_response(InputValidationError("Invalid request body.", details=details))

    @app.get("/health")
    async def health_check():
        return {
            "status": "healthy",
            "model": settings.model,
            "version": VERSION,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    @app.post("/api/generate-logo")
    async def generate_logo(body: GenerateLogoRequest, request: Request):
        """Relay one generation request and return `{image}` on success."""
        relay: LogoRelay = request.app.state.relay

        try:
            image = await relay.generate(body.to_request())
        except InputValidationError as e:
            logger.warning("Invalid input: %s", e.message)
            return _error_response(e)
        except StudioError as e:
            logger.error("Generation failed [%s]: %s (%s)", e.code, e.message, e.details)
            return _error_response(e)
        except Exception as e:
            logger.exception("Unexpected relay error")
            return _error_response(StudioError("Error generating logo.", details=str(e)))

        return {"image": image}

    return app
