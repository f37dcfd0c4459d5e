"""
Fixed-Position Compositor
=========================
Places one composed mark at a corner or the center of the target image.

Offsets are never clamped: with a mark larger than the image (or padding
larger than the free space) the offset goes negative and the mark is
cropped at the image edge.
"""

import logging
from typing import Tuple

from PIL import Image

from .assets import MarkAsset
from .config import PlacementConfig
from .raster import image_size, ensure_rgba, composite_over

logger = logging.getLogger(__name__)


def compute_placement(
        position: str,
        img_size: Tuple[int, int],
        mark_size: Tuple[int, int],
        padding: int
) -> Tuple[int, int]:
    """
    Compute the (left, top) offset of the mark for a named position.

    Unrecognized positions are treated as "southwest".

    Args:
        position: One of southeast, southwest, northeast, northwest, center.
        img_size: (width, height) of the target image.
        mark_size: (width, height) of the mark.
        padding: Distance in pixels from the image edges.

    Returns:
        Tuple of (left, top).
    """
    img_w, img_h = img_size
    mark_w, mark_h = mark_size

    if position == "southeast":
        return img_w - mark_w - padding, img_h - mark_h - padding
    if position == "northeast":
        return img_w - mark_w - padding, padding
    if position == "northwest":
        return padding, padding
    if position == "center":
        return (img_w - mark_w) // 2, (img_h - mark_h) // 2

    # southwest, and the fallback for anything else
    return padding, img_h - mark_h - padding


def composite_fixed(
        base_image: Image.Image,
        mark: MarkAsset,
        config: PlacementConfig
) -> Image.Image:
    """
    Blend the mark onto a copy of the target at the configured position.

    Args:
        base_image: Decoded target image.
        mark: Composed logo + caption mark.
        config: Placement settings.

    Returns:
        New RGBA image the same size as ``base_image``.
    """
    img_size = image_size(base_image, "image")
    mark_size = image_size(mark.image, "watermark")

    left, top = compute_placement(config.position, img_size, mark_size, config.padding)
    logger.debug(f"[WATERMARK] Placing mark at ({left},{top}) size={mark_size}")

    result = ensure_rgba(base_image).copy()
    return composite_over(result, mark.image, left, top)
