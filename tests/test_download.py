"""Tests for saving generated logos."""

import pytest

from helpers import SVG_DOC, png_bytes, png_data_uri
from logo_studio.core.types import Mode
from logo_studio.image.download import download_filename, extension_for, save_image
from logo_studio.image.encoder import build_data_uri


SVG_URI = build_data_uri("image/svg+xml", SVG_DOC.encode("utf-8"))


@pytest.mark.parametrize(
    "image_data, expected",
    [
        (SVG_URI, "svg"),
        ("data:image/jpeg;base64,QUJD", "jpg"),
        ("data:image/webp;base64,QUJD", "webp"),
        ("data:application/octet-stream;base64,QUJD", "png"),
        ("garbage", "png"),
    ],
)
def test_extension_for(image_data, expected):
    assert extension_for(image_data) == expected


def test_filename_uses_mode_and_millis():
    assert download_filename(Mode.MODERNIZE, 1700000000.5, SVG_URI) == "modernize-logo-1700000000500.svg"


def test_save_raster(tmp_path):
    path = save_image(png_data_uri(), tmp_path / "out", Mode.CREATE, 2.0)
    assert path == tmp_path / "out" / "create-logo-2000.png"
    assert path.read_bytes() == png_bytes()


def test_save_vector(tmp_path):
    path = save_image(SVG_URI, tmp_path, Mode.CREATE, 2.0)
    assert path.suffix == ".svg"
    assert path.read_text(encoding="utf-8") == SVG_DOC


def test_save_rejects_bad_data(tmp_path):
    with pytest.raises(ValueError):
        save_image("data:image/png;base64,@@", tmp_path, Mode.CREATE, 1.0)
