"""
Raster Helpers
==============
Pillow/numpy building blocks shared by both compositing modes.

Technical Notes:
- All compositing happens in RGBA mode
- Alpha scaling works on the raw (H, W, 4) uint8 buffer and never touches RGB
- Rotation angles are clockwise-positive; Pillow's ``rotate`` is
  counter-clockwise, so the sign is flipped here and nowhere else
- Rounding is half up (``floor(v + 0.5)``) for pixel offsets and alpha bytes
"""

import io
import math
from typing import Tuple, Type

import numpy as np
from PIL import Image, UnidentifiedImageError

from .errors import DimensionError, WatermarkError

TRANSPARENT = (0, 0, 0, 0)

# Integer grayscale modes 16-bit PNGs decode to
_HIGH_BIT_DEPTH_MODES = ("I;16", "I;16L", "I;16B", "I")


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going toward +infinity."""
    return int(math.floor(value + 0.5))


def decode_image(
        data: bytes,
        label: str = "image",
        error_cls: Type[WatermarkError] = WatermarkError
) -> Image.Image:
    """
    Decode encoded image bytes into a fully loaded Pillow image.

    Args:
        data: Encoded image bytes (PNG, JPEG, WebP, ...).
        label: Human readable name used in the error message.
        error_cls: Exception class raised when decoding fails.

    Returns:
        Decoded Pillow image (mode as stored in the file).
    """
    if not data:
        raise error_cls(f"Could not decode {label}: no data")
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise error_cls(f"Could not decode {label}: {e}") from e
    return image


def image_size(image: Image.Image, label: str = "image") -> Tuple[int, int]:
    """Return (width, height), raising DimensionError when either is missing."""
    width, height = getattr(image, "size", (0, 0))
    if not width or not height:
        raise DimensionError(f"Could not determine {label} dimensions")
    return width, height


def reduce_bit_depth(image: Image.Image) -> Image.Image:
    """
    Scale 16/32-bit integer grayscale down to 8-bit "L".

    Pillow's own ``convert`` clips these modes at 255 instead of scaling,
    which turns a 16-bit PNG almost entirely white.
    """
    if image.mode not in _HIGH_BIT_DEPTH_MODES:
        return image
    pixels = np.array(image).astype(np.float64) / 257
    return Image.fromarray(np.clip(np.floor(pixels + 0.5), 0, 255).astype(np.uint8))


def ensure_rgba(image: Image.Image) -> Image.Image:
    if image.mode != "RGBA":
        return reduce_bit_depth(image).convert("RGBA")
    return image


def scale_alpha(image: Image.Image, opacity: float) -> Image.Image:
    """
    Multiply every alpha byte by ``opacity``.

    Each alpha value becomes ``floor(a * opacity + 0.5)`` clamped to
    [0, 255]. RGB channels are copied through unchanged.

    Args:
        image: Source image (converted to RGBA if needed).
        opacity: Scale factor for the alpha channel.

    Returns:
        New RGBA image with scaled alpha.
    """
    pixels = np.array(ensure_rgba(image), dtype=np.uint8)
    alpha = pixels[:, :, 3].astype(np.float64) * opacity
    pixels[:, :, 3] = np.clip(np.floor(alpha + 0.5), 0, 255).astype(np.uint8)
    return Image.fromarray(pixels)


def resize_to_width(image: Image.Image, width: int) -> Image.Image:
    """Resize to ``width`` pixels wide, keeping the aspect ratio."""
    src_w, src_h = image_size(image, "asset")
    height = max(1, round_half_up(src_h * width / src_w))
    return ensure_rgba(image).resize((width, height), Image.LANCZOS)


def rotate_clockwise(image: Image.Image, degrees: float) -> Image.Image:
    """
    Rotate clockwise by ``degrees`` on an expanded canvas.

    Corners exposed by the rotation are fully transparent.
    """
    return ensure_rgba(image).rotate(
        -degrees,
        resample=Image.BICUBIC,
        expand=True,
        fillcolor=TRANSPARENT
    )


def new_transparent(width: int, height: int) -> Image.Image:
    return Image.new("RGBA", (width, height), TRANSPARENT)


def composite_over(
        base: Image.Image,
        overlay: Image.Image,
        left: int = 0,
        top: int = 0
) -> Image.Image:
    """
    Source-over blend ``overlay`` onto ``base`` in place at (left, top).

    Offsets may be negative or push the overlay past the right/bottom
    edge; only the part that lands on ``base`` is blended.

    Args:
        base: RGBA destination image (modified in place).
        overlay: RGBA image to blend on top.
        left: X offset of the overlay's top-left corner.
        top: Y offset of the overlay's top-left corner.

    Returns:
        ``base``, for chaining.
    """
    src_left = max(0, -left)
    src_top = max(0, -top)
    dst_left = max(0, left)
    dst_top = max(0, top)
    width = min(overlay.width - src_left, base.width - dst_left)
    height = min(overlay.height - src_top, base.height - dst_top)

    if width <= 0 or height <= 0:
        return base

    base.alpha_composite(
        overlay,
        dest=(dst_left, dst_top),
        source=(src_left, src_top, src_left + width, src_top + height)
    )
    return base


def encode_png(image: Image.Image) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()
