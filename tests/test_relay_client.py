"""Tests for the studio-side relay client."""

import pytest
import requests

from logo_studio.core.errors import (
    ExtractionFailedError,
    InputValidationError,
    RateLimitError,
    StudioError,
    TransientUpstreamError,
)
from logo_studio.core.types import GenerationRequest, Mode
from logo_studio.image import client as client_module
from logo_studio.image.client import RATE_LIMIT_MESSAGE, RelayClient


class FakeResponse:
    def __init__(self, status_code, body=None):
        self.status_code = status_code
        self._body = body

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._body is None:
            raise ValueError("no json")
        return self._body


@pytest.fixture
def post(monkeypatch):
    """Replace `requests.post` with a recorder returning a scripted outcome."""
    calls = []

    def install(outcome):
        def fake_post(url, json=None, timeout=None):
            calls.append({"url": url, "json": json, "timeout": timeout})
            if isinstance(outcome, Exception):
                raise outcome
            return outcome

        monkeypatch.setattr(client_module.requests, "post", fake_post)
        return calls

    return install


REQUEST = GenerationRequest(Mode.CREATE, "fox", ("data:image/png;base64,QUJD",))


def test_posts_wire_body(post):
    calls = post(FakeResponse(200, {"image": "data:image/png;base64,QUJD"}))
    image = RelayClient("http://relay:3001/").generate(REQUEST)

    assert image == "data:image/png;base64,QUJD"
    assert calls[0]["url"] == "http://relay:3001/api/generate-logo"
    assert calls[0]["json"] == {
        "mode": "create",
        "userPrompt": "fox",
        "base64Images": ["data:image/png;base64,QUJD"],
    }


def test_rate_limit_has_dedicated_message(post):
    post(FakeResponse(429, {"message": "Traffic limit", "code": "RATE_LIMITED"}))
    with pytest.raises(RateLimitError) as exc_info:
        RelayClient().generate(REQUEST)
    assert exc_info.value.message == RATE_LIMIT_MESSAGE


def test_error_code_selects_error_class(post):
    post(FakeResponse(400, {"message": "Need an image.", "code": "INVALID_INPUT"}))
    with pytest.raises(InputValidationError) as exc_info:
        RelayClient().generate(REQUEST)
    assert exc_info.value.message == "Need an image."


def test_unreadable_error_body_uses_status(post):
    post(FakeResponse(500))
    with pytest.raises(StudioError) as exc_info:
        RelayClient().generate(REQUEST)
    assert exc_info.value.message == "Server error: 500"


def test_missing_image_field(post):
    post(FakeResponse(200, {}))
    with pytest.raises(ExtractionFailedError):
        RelayClient().generate(REQUEST)


def test_unreachable_relay(post):
    post(requests.exceptions.ConnectionError("refused"))
    with pytest.raises(TransientUpstreamError):
        RelayClient().generate(REQUEST)
