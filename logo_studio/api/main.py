"""
Relay service entrypoint.

Architectural role:
- Resolves settings from the environment / `.env` and fails fast when the
  provider key is missing, before any port is bound.
- Serves `logo_studio.api.http_api.create_app` with uvicorn.
- `--list-models` prints the provider models that support `generateContent`
  and exits, which helps pick a value for `GEMINI_MODEL`.

Side effects:
- Configures root logging (`LOG_LEVEL`, default INFO).
- Binds `HOST:PORT` (defaults `0.0.0.0:3001`).
"""

import argparse
import asyncio
import logging
import os
import sys
from typing import Optional

from logo_studio.core.errors import StudioError
from logo_studio.llm.client import GeminiClient
from logo_studio.llm.provider_config import load_settings


logger = logging.getLogger("logo_studio.relay")


def main(argv: Optional[list] = None) -> int:
    parser = argparse.ArgumentParser(description="Logo Studio relay service")
    parser.add_argument("--host", default=None, help="Listen address (default: $HOST)")
    parser.add_argument("--port", type=int, default=None, help="Listen port (default: $PORT or 3001)")
    parser.add_argument(
        "--list-models",
        action="store_true",
        help="List provider models supporting generateContent and exit",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        settings = load_settings()
    except StudioError as e:
        logger.error("Configuration error: %s", e.message)
        logger.error("Refusing to start the relay.")
        return 1

    logger.info("API key found: YES | Model: %s", settings.model)

    if args.list_models:
        return _list_models(GeminiClient(settings))

    import uvicorn

    from logo_studio.api.http_api import create_app

    host = args.host or settings.host
    port = args.port or settings.port
    logger.info("Relay listening on http://%s:%d", host, port)

    uvicorn.run(create_app(settings), host=host, port=port, log_level=os.getenv("LOG_LEVEL", "info").lower())
    return 0


def _list_models(client: GeminiClient) -> int:
    logger.info("Checking available models for the configured API key...")
    try:
        names = asyncio.run(client.list_models())
    except StudioError as e:
        logger.error("Error listing models: %s (%s)", e.message, e.details)
        return 1

    if not names:
        print("No models supporting generateContent were found.")
        return 1

    print("Available models:")
    for name in names:
        print(f" - {name}")
    print("\nSet GEMINI_MODEL to one of the names above.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
