"""Runtime configuration for the relay and the studio client.

Architectural role:
    Centralizes provider selection, credential lookup and relay limits for
    `logo_studio.llm.client`, `logo_studio.api.http_api` and the entrypoints.

Resolution:
    Values come from the process environment, after `load_dotenv()` has merged
    a local `.env` file (existing variables win). Settings are resolved when
    `load_settings` is called, not at import time, so tests can pass an
    explicit mapping.

Failure behavior:
    A missing API key or an unparsable number raises `ConfigurationError`. The
    relay entrypoint treats that as fatal and refuses to start.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

from logo_studio.core.errors import ConfigurationError


GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MODEL = "gemini-2.5-flash-image"
DEFAULT_PORT = 3001
DEFAULT_RELAY_URL = "http://localhost:3001"

# Environment variables checked for the provider key, in priority order.
API_KEY_VARIABLES = ("API_KEY", "GEMINI_API_KEY")


@dataclass(frozen=True)
class RelaySettings:
    """Immutable relay configuration.

    Attributes:
        api_key: Provider credential (never logged).
        model: Provider model name used for `generateContent`.
        api_base: Provider REST base URL.
        host/port: Listen address of the relay.
        timeout_seconds: Per-attempt provider timeout.
        max_retries: Extra attempts after a transient failure.
        retry_backoff_seconds: Pause before each retry.
        max_body_bytes: Combined request-body ceiling.
        allowed_origins: CORS origins.
    """

    api_key: str
    model: str = DEFAULT_MODEL
    api_base: str = GEMINI_API_BASE
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    timeout_seconds: float = 60.0
    max_retries: int = 1
    retry_backoff_seconds: float = 0.5
    max_body_bytes: int = 50 * 1024 * 1024
    allowed_origins: tuple[str, ...] = ("*",)

    @property
    def generate_url(self) -> str:
        return f"{self.api_base.rstrip('/')}/models/{self.model}:generateContent"

    @property
    def models_url(self) -> str:
        return f"{self.api_base.rstrip('/')}/models"


def load_settings(environ: Optional[Mapping[str, str]] = None) -> RelaySettings:
    """Build `RelaySettings` from `environ` (defaults to `os.environ` + `.env`).

    Raises:
        ConfigurationError: No API key is configured or a numeric value is invalid.
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    api_key = ""
    for name in API_KEY_VARIABLES:
        api_key = (environ.get(name) or "").strip()
        if api_key:
            break

    if not api_key:
        raise ConfigurationError(
            "No model API key configured. Set API_KEY (or GEMINI_API_KEY) "
            "in the environment or in a .env file."
        )

    origins = tuple(
        origin.strip()
        for origin in environ.get("CORS_ORIGINS", "*").split(",")
        if origin.strip()
    )

    return RelaySettings(
        api_key=api_key,
        model=environ.get("GEMINI_MODEL", DEFAULT_MODEL).strip() or DEFAULT_MODEL,
        api_base=environ.get("GEMINI_API_BASE", GEMINI_API_BASE).strip() or GEMINI_API_BASE,
        host=environ.get("HOST", "0.0.0.0"),
        port=_number(environ, "PORT", DEFAULT_PORT, int),
        timeout_seconds=_number(environ, "RELAY_TIMEOUT_SECONDS", 60.0, float),
        max_retries=max(0, _number(environ, "RELAY_MAX_RETRIES", 1, int)),
        retry_backoff_seconds=_number(environ, "RELAY_RETRY_BACKOFF_SECONDS", 0.5, float),
        max_body_bytes=int(_number(environ, "RELAY_MAX_BODY_MB", 50.0, float) * 1024 * 1024),
        allowed_origins=origins or ("*",),
    )


def relay_url(environ: Optional[Mapping[str, str]] = None) -> str:
    """Return the relay base URL used by the studio client."""
    if environ is None:
        load_dotenv()
        environ = os.environ
    return (environ.get("RELAY_URL") or DEFAULT_RELAY_URL).rstrip("/")


def _number(environ, name, default, cast):
    raw = environ.get(name)
    if raw is None or not str(raw).strip():
        return default
    try:
        return cast(str(raw).strip())
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}")
