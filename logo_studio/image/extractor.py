"""Turn a raw `generateContent` response into a displayable data URI.

Extraction order:
    1. First `inlineData` part of the first candidate: passed through with its
       declared mime type.
    2. Otherwise, text parts are joined and scanned for the first balanced
       `<svg ...>...</svg>` fragment. Prose and markdown fences around it are
       discarded and the fragment is re-encoded as `image/svg+xml`.
    3. Otherwise the request failed: `ContentBlockedError` when the provider
       reports a safety block, `ExtractionFailedError` in every other case.

SVG scanning policy:
    Best-effort heuristic, not an XML parser. Each `<svg` opening tag is tried
    in order as a fragment start; from there the scan tracks nesting depth
    across `<svg`/`</svg>` tags and stops when that element closes. A start
    that never balances is abandoned for the next opening tag. Only the first
    balanced fragment is used; later ones are ignored.

Failures are never retried; the upstream output format is not guaranteed.
"""

import logging
import re
from typing import Optional

from logo_studio.core.errors import ContentBlockedError, ExtractionFailedError
from logo_studio.image.encoder import SVG_MIME, build_data_uri


logger = logging.getLogger(__name__)

_SVG_TAG = re.compile(r"<(/?)svg\b[^>]*?(/?)>", re.IGNORECASE)

SAFETY_FINISH_REASONS = {
    "SAFETY",
    "PROHIBITED_CONTENT",
    "BLOCKLIST",
    "SPII",
    "IMAGE_SAFETY",
    "IMAGE_PROHIBITED_CONTENT",
}


def extract_svg_fragment(text: str) -> Optional[str]:
    """Return the first balanced `<svg>` element found in `text`, if any."""
    if not text:
        return None

    tags = list(_SVG_TAG.finditer(text))

    for index, opening in enumerate(tags):
        closing, self_closing = opening.group(1), opening.group(2)
        if closing:
            continue
        if self_closing:
            return text[opening.start():opening.end()]

        # Unbalanced candidates (a bare `<svg>` mentioned in prose) fall
        # through to the next opening tag.
        depth = 0
        for match in tags[index:]:
            if match.group(1):
                depth -= 1
                if depth == 0:
                    return text[opening.start():match.end()]
            elif not match.group(2):
                depth += 1

    return None


def _as_dict(value) -> dict:
    return value if isinstance(value, dict) else {}


def extract_image(response: dict) -> str:
    """Return a data URI for the image carried by a provider response.

    Malformed response shapes (non-object candidates or parts) are skipped
    and end in `ExtractionFailedError` like any other imageless answer.

    Raises:
        ContentBlockedError: The provider blocked the prompt or the output.
        ExtractionFailedError: No inline image and no SVG markup were found.
    """
    response = _as_dict(response)
    candidates = response.get("candidates")
    first = _as_dict(candidates[0]) if isinstance(candidates, list) and candidates else {}
    parts = _as_dict(first.get("content")).get("parts")
    if not isinstance(parts, list):
        parts = []

    texts = []
    for part in parts:
        if not isinstance(part, dict):
            continue
        inline = _as_dict(part.get("inlineData") or part.get("inline_data"))
        if inline.get("data"):
            mime_type = inline.get("mimeType") or inline.get("mime_type") or "image/png"
            return f"data:{mime_type};base64,{inline['data']}"
        if isinstance(part.get("text"), str):
            texts.append(part["text"])

    text = "\n".join(texts)
    fragment = extract_svg_fragment(text)
    if fragment is not None:
        return build_data_uri(SVG_MIME, fragment.encode("utf-8"))

    block_reason = _as_dict(response.get("promptFeedback")).get("blockReason")
    finish_reason = first.get("finishReason")
    if block_reason or finish_reason in SAFETY_FINISH_REASONS:
        raise ContentBlockedError(details=str(block_reason or finish_reason))

    logger.error("Model returned no image. Raw response preview: %r", text[:200])
    raise ExtractionFailedError(details=text[:200] or None)
