"""Reference-image encoding for generation requests.

Processing lifecycle:
1. Resolve the user-supplied path (`~` expansion, `file://` URLs).
2. Read the file into memory.
3. Identify the image type (Pillow for raster formats, root-tag sniffing for SVG).
4. Return a self-contained data URI (`data:<mime>;base64,<payload>`).

Error handling strategy:
- Unreadable or non-image files are skipped: `encode_image_file` returns `None`
  and logs at debug level. Batch encoding continues with the remaining files.
- `parse_data_uri` raises `ValueError` for malformed data URIs; callers decide
  whether to skip or fail.

Size validation:
- None here. The relay enforces a combined request-body ceiling.
"""

import base64
import binascii
import io
import logging
import os
import re
from typing import Iterable, Optional
from urllib.parse import unquote, urlparse

from PIL import Image, UnidentifiedImageError


logger = logging.getLogger(__name__)

SVG_MIME = "image/svg+xml"
DEFAULT_MIME = "image/png"

_DATA_URI_PATTERN = re.compile(
    r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?P<params>(?:;[\w.+-]+=[\w.+-]+)*);base64,(?P<data>.*)$",
    re.DOTALL,
)
_SVG_ROOT_PATTERN = re.compile(rb"<svg[\s>]", re.IGNORECASE)


# ============================================================
# DATA URI CODEC
# ============================================================

def build_data_uri(mime_type: str, raw: bytes) -> str:
    """Encode raw bytes as a base64 data URI with the given mime type."""
    encoded = base64.b64encode(raw).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def parse_data_uri(value: str) -> tuple[str, str]:
    """Split a base64 data URI into `(mime_type, base64_payload)`.

    A data URI without an explicit mime type is treated as `image/png`.

    Raises:
        ValueError: When `value` is not a base64 data URI or the payload is empty.
    """
    match = _DATA_URI_PATTERN.match((value or "").strip())
    if not match:
        raise ValueError("Not a base64 data URI")

    payload = match.group("data").strip()
    if not payload:
        raise ValueError("Data URI carries no payload")

    return match.group("mime") or DEFAULT_MIME, payload


def decode_data_uri(value: str) -> tuple[str, bytes]:
    """Return `(mime_type, raw_bytes)` for a base64 data URI."""
    mime_type, payload = parse_data_uri(value)
    try:
        return mime_type, base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValueError(f"Invalid base64 payload: {exc}") from exc


# ============================================================
# FILE ENCODING
# ============================================================

def encode_image_file(path: str) -> Optional[str]:
    """Encode one image file as a data URI, or return `None` to skip it."""
    resolved = _resolve_path(path)
    if not resolved:
        logger.debug("Skipping image reference %r: path does not resolve", path)
        return None

    try:
        with open(resolved, "rb") as f:
            raw = f.read()
    except OSError as exc:
        logger.debug("Skipping unreadable image %s: %s", resolved, exc)
        return None

    mime_type = _detect_mime_type(resolved, raw)
    if mime_type is None:
        logger.debug("Skipping %s: not a recognised image", resolved)
        return None

    return build_data_uri(mime_type, raw)


def encode_image_files(paths: Iterable[str]) -> list[str]:
    """Encode several files, silently dropping the ones that are not images."""
    encoded = []
    for path in paths:
        data_uri = encode_image_file(path)
        if data_uri is not None:
            encoded.append(data_uri)
    return encoded


def _resolve_path(path: str) -> Optional[str]:
    if not path:
        return None

    if path.startswith("file://"):
        parsed = urlparse(path)
        if parsed.netloc not in ("", "localhost"):
            return None
        path = unquote(parsed.path or "")

    normalized = os.path.realpath(os.path.expanduser(path))
    if not os.path.isfile(normalized):
        return None
    return normalized


def _detect_mime_type(path: str, raw: bytes) -> Optional[str]:
    """Return the image mime type for `raw`, or `None` when it is not an image."""
    _, ext = os.path.splitext(path)
    head = raw.lstrip()[:5].lower()
    if ext.lower() == ".svg" or head == b"<?xml" or head.startswith(b"<svg"):
        return SVG_MIME if _SVG_ROOT_PATTERN.search(raw[:4096]) else None

    try:
        with Image.open(io.BytesIO(raw)) as img:
            img.verify()
            image_format = img.format
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError):
        return None

    return Image.MIME.get(image_format or "")
