"""Saving generated logos to disk.

Filenames follow `<mode>-logo-<timestamp_ms>.<ext>`, where the extension
matches the data URI's actual encoding (vector vs raster).
"""

import os
from pathlib import Path

from logo_studio.core.types import Mode
from logo_studio.image.encoder import decode_data_uri, parse_data_uri


EXTENSIONS = {
    "image/svg+xml": "svg",
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/webp": "webp",
    "image/gif": "gif",
}


def extension_for(image_data: str) -> str:
    """Return the file extension for a data URI, defaulting to `png`."""
    try:
        mime_type, _ = parse_data_uri(image_data)
    except ValueError:
        return "png"
    return EXTENSIONS.get(mime_type.lower(), "png")


def download_filename(mode: Mode, created_at: float, image_data: str) -> str:
    mode_name = Mode(mode).value
    return f"{mode_name}-logo-{int(created_at * 1000)}.{extension_for(image_data)}"


def save_image(image_data: str, directory: str | os.PathLike, mode: Mode, created_at: float) -> Path:
    """Decode `image_data` and write it under `directory`.

    Returns:
        Path of the written file.

    Raises:
        ValueError: When `image_data` is not a valid base64 data URI.
    """
    _, raw = decode_data_uri(image_data)

    target_dir = Path(directory).expanduser()
    target_dir.mkdir(parents=True, exist_ok=True)

    target = target_dir / download_filename(mode, created_at, image_data)
    target.write_bytes(raw)
    return target
