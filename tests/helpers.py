"""Builders for provider responses and sample images used across tests."""

import base64
import io

import httpx
from PIL import Image


SVG_DOC = (
    '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 512 512">'
    '<circle cx="256" cy="256" r="200"/></svg>'
)


def png_bytes(color="red", size=(4, 4)):
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format="PNG")
    return buf.getvalue()


def png_data_uri(color="red"):
    return "data:image/png;base64," + base64.b64encode(png_bytes(color)).decode("ascii")


def text_response(text):
    """Build a `generateContent` response carrying only text."""
    return {"candidates": [{"content": {"parts": [{"text": text}]}, "finishReason": "STOP"}]}


def inline_response(data="aGVsbG8=", mime_type="image/png"):
    """Build a `generateContent` response carrying an inline image."""
    return {
        "candidates": [
            {
                "content": {"parts": [{"inlineData": {"mimeType": mime_type, "data": data}}]},
                "finishReason": "STOP",
            }
        ]
    }


class ProviderStub:
    """Scripted provider: each call pops the next response or exception."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        if isinstance(outcome, httpx.Response):
            return outcome
        return httpx.Response(200, json=outcome)

    @property
    def calls(self):
        return len(self.requests)
