"""
Shared fixtures: small images generated with Pillow in each format.
"""
import io
from pathlib import Path

import pytest
from PIL import Image

from image2jpg import ImageConverter
from image2jpg import worker


def make_image_bytes(fmt: str, mode: str = "RGB", size=(32, 24), color=(200, 40, 40)) -> bytes:
    """Encode a solid-colour image in the given Pillow format."""
    if mode == "P":
        img = Image.new("RGB", size, color).convert("P")
    else:
        img = Image.new(mode, size, color)
    buf = io.BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture
def converter() -> ImageConverter:
    return ImageConverter()


@pytest.fixture
def png_bytes() -> bytes:
    return make_image_bytes("PNG")


@pytest.fixture
def bmp_bytes() -> bytes:
    return make_image_bytes("BMP")


@pytest.fixture
def gif_bytes() -> bytes:
    return make_image_bytes("GIF", mode="P")


@pytest.fixture
def transparent_png_bytes() -> bytes:
    """Fully transparent RGBA image."""
    return make_image_bytes("PNG", mode="RGBA", color=(0, 0, 0, 0))


@pytest.fixture
def image_dir(tmp_path: Path, png_bytes, bmp_bytes, gif_bytes) -> Path:
    """Directory with one image per format plus a file that is not an image."""
    d = tmp_path / "images"
    d.mkdir()
    (d / "a.png").write_bytes(png_bytes)
    (d / "b.BMP").write_bytes(bmp_bytes)
    (d / "c.gif").write_bytes(gif_bytes)
    (d / "notes.txt").write_text("not an image", encoding="utf-8")
    return d


@pytest.fixture(autouse=True)
def clear_shutdown():
    """Each test starts without a pending shutdown request."""
    worker.reset_shutdown()
    yield
    worker.reset_shutdown()
