"""
Shared test helpers: in-memory test images and watermark assets.
"""

import io
import sys
from pathlib import Path

import numpy as np
import pytest
from PIL import Image

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))


def to_png(image: Image.Image, **save_kwargs) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format="PNG", **save_kwargs)
    return buffer.getvalue()


def solid_png(width: int, height: int, color=(255, 0, 0, 255)) -> bytes:
    """Encode a single-color image; RGB or RGBA depending on ``color``."""
    mode = "RGBA" if len(color) == 4 else "RGB"
    return to_png(Image.new(mode, (width, height), color))


def create_test_image(width: int = 320, height: int = 240) -> bytes:
    """Create a gradient RGB test image, PNG-encoded."""
    xs = np.linspace(0, 255, width, dtype=np.float64)
    ys = np.linspace(0, 255, height, dtype=np.float64)
    arr = np.zeros((height, width, 3), dtype=np.uint8)
    arr[:, :, 0] = xs[np.newaxis, :].astype(np.uint8)
    arr[:, :, 1] = ys[:, np.newaxis].astype(np.uint8)
    arr[:, :, 2] = 128
    return to_png(Image.fromarray(arr))


def decode(data: bytes) -> Image.Image:
    image = Image.open(io.BytesIO(data))
    image.load()
    return image


def cairosvg_available() -> bool:
    try:
        import cairosvg  # noqa: F401
    except (ImportError, OSError):
        return False
    return True


@pytest.fixture
def logo_png() -> bytes:
    """Opaque red 200x100 logo."""
    return solid_png(200, 100, (255, 0, 0, 255))


@pytest.fixture
def caption_png() -> bytes:
    """Opaque blue 200x20 caption strip."""
    return solid_png(200, 20, (0, 0, 255, 255))


@pytest.fixture
def asset_dir(tmp_path: Path) -> Path:
    """Asset directory laid out the way the watermark catalog expects."""
    directory = tmp_path / "assets"
    directory.mkdir()
    (directory / "olg-watermark-white.png").write_bytes(solid_png(60, 30, (255, 255, 255, 255)))
    (directory / "disclaimer-text.png").write_bytes(solid_png(200, 20, (255, 255, 255, 255)))
    (directory / "ol-logo-white.svg").write_text(
        '<svg xmlns="http://www.w3.org/2000/svg" width="120" height="40">'
        '<rect width="120" height="40" fill="white"/></svg>'
    )
    return directory
