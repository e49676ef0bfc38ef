"""Shared fixtures for the Logo Studio test suite.

Provider traffic is simulated with `httpx.MockTransport`; nothing here
touches the network.
"""

import httpx
import pytest

from helpers import png_bytes
from logo_studio.llm.client import GeminiClient
from logo_studio.llm.provider_config import RelaySettings


@pytest.fixture
def settings():
    return RelaySettings(api_key="test-key", retry_backoff_seconds=0.0)


@pytest.fixture
def make_client(settings):
    """Return a factory building a `GeminiClient` bound to a `ProviderStub`."""

    def _make(stub):
        return GeminiClient(settings, transport=httpx.MockTransport(stub))

    return _make


@pytest.fixture
def png_file(tmp_path):
    path = tmp_path / "logo.png"
    path.write_bytes(png_bytes())
    return path
