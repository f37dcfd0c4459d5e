"""
Mark Asset Builder
==================
Produces the RGBA mark that gets overlaid, already sized and faded.

Two shapes of mark exist:
- Placement mark: resized logo with the pre-rendered caption strip
  underneath, left-aligned, separated by a fixed gap.
- Tile mark: resized logo, faded, then counter-rotated so it reads
  upright once the whole tiled canvas is rotated by the tiling angle.

Logo and caption sources are raster files or SVG documents (rasterized
with cairosvg). Nothing is cached; every call reads its sources again.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from PIL import Image

from .config import AssetSource, PlacementConfig, TileConfig
from .errors import AssetError, DimensionError
from .raster import (
    decode_image, image_size, ensure_rgba, scale_alpha,
    resize_to_width, rotate_clockwise, new_transparent, composite_over
)

logger = logging.getLogger(__name__)

_SVG_PREFIXES = (b"<svg", b"<?xml")


@dataclass(frozen=True)
class MarkAsset:
    """A fully composed watermark image, ready for placement."""
    image: Image.Image

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    @property
    def size(self):
        return self.image.size


def _is_svg(source: AssetSource, data: bytes) -> bool:
    if isinstance(source, (str, Path)) and Path(source).suffix.lower() == ".svg":
        return True
    return data.lstrip()[:16].lower().startswith(_SVG_PREFIXES)


def _rasterize_svg(data: bytes, label: str) -> bytes:
    import cairosvg

    try:
        return cairosvg.svg2png(bytestring=data)
    except Exception as e:
        raise AssetError(f"Could not render {label} SVG: {e}") from e


def read_asset_bytes(source: Optional[AssetSource], label: str) -> bytes:
    """
    Load the raw bytes of an asset source.

    Args:
        source: Path to the asset file, or its encoded bytes.
        label: Asset name for error messages ("logo", "caption").

    Returns:
        Encoded raster bytes. SVG sources come back rendered as PNG.

    Raises:
        AssetError: If no source is configured or the file can't be read.
    """
    if source is None:
        raise AssetError(f"No {label} asset configured")

    if isinstance(source, (bytes, bytearray)):
        data = bytes(source)
    else:
        path = Path(source)
        try:
            data = path.read_bytes()
        except OSError as e:
            raise AssetError(f"Could not read {label} asset {path}: {e}") from e

    if data and _is_svg(source, data):
        logger.debug(f"[WATERMARK] Rendering {label} SVG")
        data = _rasterize_svg(data, label)

    return data


def load_asset(source: Optional[AssetSource], label: str) -> Image.Image:
    """Read and decode an asset into RGBA, rejecting zero-sized results."""
    image = decode_image(read_asset_bytes(source, label), label, AssetError)
    try:
        image_size(image, label)
    except DimensionError as e:
        raise AssetError(str(e)) from e
    return ensure_rgba(image)


def _load_logo(source: Optional[AssetSource], logo_width: int) -> Image.Image:
    logo = resize_to_width(load_asset(source, "logo"), logo_width)
    logger.debug(f"[WATERMARK] Logo resized to ({logo.width}x{logo.height})")
    return logo


def build_placement_mark(config: PlacementConfig) -> MarkAsset:
    """
    Compose the logo and caption into one mark for fixed placement.

    The logo sits at the top-left, the caption below it after
    ``config.caption_gap`` pixels, both left-aligned on a transparent
    background. Alpha is only scaled when opacity is below 1.0.

    Args:
        config: Placement settings (logo/caption sources, width, opacity).

    Returns:
        MarkAsset sized max(logo_w, caption_w) x (logo_h + gap + caption_h).
    """
    logo = _load_logo(config.logo_source, config.logo_width)
    caption = load_asset(config.caption_source, "caption")

    if config.opacity < 1.0:
        logo = scale_alpha(logo, config.opacity)
        caption = scale_alpha(caption, config.opacity)

    width = max(logo.width, caption.width)
    height = logo.height + config.caption_gap + caption.height

    combined = new_transparent(width, height)
    composite_over(combined, logo, 0, 0)
    composite_over(combined, caption, 0, logo.height + config.caption_gap)

    logger.debug(f"[WATERMARK] Placement mark composed: ({width}x{height})")
    return MarkAsset(combined)


def build_tile_mark(config: TileConfig) -> MarkAsset:
    """
    Build the single tile repeated across the step-and-repeat canvas.

    Alpha scaling always runs here, even at opacity 1.0 where it leaves
    every byte unchanged. The tile is rotated by ``-config.angle`` so it
    ends up level after the canvas rotation.

    Args:
        config: Tiling settings (logo source, width, opacity, angle).

    Returns:
        MarkAsset whose size is the rotated bounding box of the logo.
    """
    logo = _load_logo(config.logo_source, config.logo_width)
    logo = scale_alpha(logo, config.opacity)
    tile = rotate_clockwise(logo, -config.angle)

    logger.debug(
        f"[WATERMARK] Tile counter-rotated by {-config.angle}°, "
        f"size=({tile.width}x{tile.height})"
    )
    return MarkAsset(tile)
