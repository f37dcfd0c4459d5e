"""
Step-and-Repeat Compositor
==========================
Tiles one faded mark across the whole image on a diagonal.

Technical Notes:
- Tiles are laid out on a square canvas 1.5x the image diagonal, so the
  rotated canvas always covers the image with no untiled border
- Odd rows shift right by half a tile pitch (brick pattern) to break up
  straight seams
- The tiled canvas is rotated by the tiling angle, then the centered
  image-sized window is cropped out and blended over the image
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Tuple

from PIL import Image

from .assets import MarkAsset
from .config import TileConfig
from .raster import (
    image_size, ensure_rgba, round_half_up, rotate_clockwise,
    new_transparent, composite_over
)

logger = logging.getLogger(__name__)

# Working canvas side as a multiple of the image diagonal
CANVAS_DIAGONAL_FACTOR = 1.5


@dataclass(frozen=True)
class TileLayout:
    """Tiling geometry for one image/tile/spacing combination."""
    tile_width: int
    tile_height: int
    canvas_size: int
    tiles_x: int
    tiles_y: int
    offset_x: float
    offset_y: float

    @property
    def tile_count(self) -> int:
        return self.tiles_x * self.tiles_y

    def positions(self) -> List[Tuple[int, int]]:
        """Top-left (left, top) of every tile, in row-major order."""
        result = []
        for y in range(self.tiles_y):
            row_offset = 0 if y % 2 == 0 else self.tile_width / 2
            top = round_half_up(self.offset_y + y * self.tile_height)
            for x in range(self.tiles_x):
                left = round_half_up(self.offset_x + x * self.tile_width + row_offset)
                result.append((left, top))
        return result


def compute_tile_layout(
        img_size: Tuple[int, int],
        tile_size: Tuple[int, int],
        spacing: int
) -> TileLayout:
    """
    Work out tile pitch, canvas size, tile counts and centering offsets.

    Args:
        img_size: (width, height) of the target image.
        tile_size: (width, height) of the counter-rotated tile.
        spacing: Gap between neighbouring tiles in pixels.

    Returns:
        TileLayout describing the pre-rotation canvas.
    """
    img_w, img_h = img_size
    tile_w, tile_h = tile_size

    pitch_x = tile_w + spacing
    pitch_y = tile_h + spacing

    diagonal = math.sqrt(img_w ** 2 + img_h ** 2)
    canvas_size = math.ceil(diagonal * CANVAS_DIAGONAL_FACTOR)

    tiles_x = math.ceil(canvas_size / pitch_x) + 1
    tiles_y = math.ceil(canvas_size / pitch_y) + 1

    return TileLayout(
        tile_width=pitch_x,
        tile_height=pitch_y,
        canvas_size=canvas_size,
        tiles_x=tiles_x,
        tiles_y=tiles_y,
        offset_x=(canvas_size - tiles_x * pitch_x) / 2,
        offset_y=(canvas_size - tiles_y * pitch_y) / 2
    )


def crop_origin(rotated_size: Tuple[int, int], img_size: Tuple[int, int]) -> Tuple[int, int]:
    """Top-left of the centered image-sized window, never below zero."""
    rot_w, rot_h = rotated_size
    img_w, img_h = img_size
    return max(0, (rot_w - img_w) // 2), max(0, (rot_h - img_h) // 2)


def build_tile_pattern(
        img_size: Tuple[int, int],
        tile: MarkAsset,
        config: TileConfig
) -> Image.Image:
    """
    Render the rotated, cropped pattern layer for an image of ``img_size``.

    Args:
        img_size: (width, height) of the target image.
        tile: Counter-rotated tile mark.
        config: Tiling settings (spacing, angle).

    Returns:
        RGBA overlay exactly ``img_size`` in size.
    """
    tile_size = image_size(tile.image, "tile")
    layout = compute_tile_layout(img_size, tile_size, config.spacing)

    canvas = new_transparent(layout.canvas_size, layout.canvas_size)
    for left, top in layout.positions():
        composite_over(canvas, tile.image, left, top)

    logger.debug(
        f"[WATERMARK] Tiled {layout.tile_count} times on "
        f"{layout.canvas_size}x{layout.canvas_size} canvas"
    )

    rotated = rotate_clockwise(canvas, config.angle)
    rotated_size = image_size(rotated, "rotated pattern")

    left, top = crop_origin(rotated_size, img_size)
    img_w, img_h = img_size
    return rotated.crop((left, top, left + img_w, top + img_h))


def composite_tiled(
        base_image: Image.Image,
        tile: MarkAsset,
        config: TileConfig
) -> Image.Image:
    """
    Blend the step-and-repeat pattern over a copy of the target image.

    Args:
        base_image: Decoded target image.
        tile: Counter-rotated tile mark.
        config: Tiling settings.

    Returns:
        New RGBA image the same size as ``base_image``.
    """
    img_size = image_size(base_image, "image")
    pattern = build_tile_pattern(img_size, tile, config)

    result = ensure_rgba(base_image).copy()
    return composite_over(result, pattern, 0, 0)
