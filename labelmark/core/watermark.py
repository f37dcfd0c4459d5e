"""
Mockup Watermarker
==================
Public entry points for watermarking generated product mockups.

Two modes:
- Fixed position: logo + disclaimer caption at one corner or the center
- Step and repeat: faded logo tiled diagonally over the whole image

Both take encoded image bytes and return PNG bytes. Every call builds
its own assets and buffers, so calls can run concurrently. The ``_async``
variants push the blocking work onto a thread with ``asyncio.to_thread``.

Errors:
- AssetError / DimensionError are raised as-is
- Anything else is wrapped in WatermarkError (original in ``__cause__``)
"""

import asyncio
import base64
import binascii
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Optional, Union

from PIL import Image

from .assets import build_placement_mark, build_tile_mark
from .catalog import build_config
from .config import PlacementConfig, TileConfig
from .errors import WatermarkError
from .placement import composite_fixed
from .raster import decode_image, encode_png, image_size
from .tiling import composite_tiled

logger = logging.getLogger(__name__)


@contextmanager
def _pipeline(description: str):
    """Route every failure inside the block out as a WatermarkError."""
    try:
        yield
    except WatermarkError:
        logger.exception(f"[WATERMARK] {description} failed")
        raise
    except Exception as e:
        logger.exception(f"[WATERMARK] {description} failed")
        raise WatermarkError(f"Failed to add {description}: {e}") from e


def _restore_mode(result: Image.Image, original: Image.Image) -> Image.Image:
    # Inputs without any transparency (alpha band or tRNS) come back as RGB
    if "A" in original.getbands() or "transparency" in original.info:
        return result
    return result.convert("RGB")


def decode_base64_image(data: str) -> bytes:
    """
    Decode a base64 image payload, with or without a ``data:`` URI prefix.

    Raises:
        WatermarkError: If the payload is not valid base64.
    """
    if data.startswith("data:"):
        _, _, data = data.partition(",")
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise WatermarkError(f"Invalid base64 image data: {e}") from e


def watermark_fixed_image(image: Image.Image, config: PlacementConfig) -> Image.Image:
    """Apply the fixed-position watermark to a decoded Pillow image."""
    with _pipeline("watermark"):
        image_size(image, "image")
        mark = build_placement_mark(config)
        result = composite_fixed(image, mark, config)

    logger.info(
        f"[WATERMARK] Watermark with text applied at position: "
        f"{config.position} with opacity: {config.opacity}"
    )
    return _restore_mode(result, image)


def watermark_tiled_image(image: Image.Image, config: TileConfig) -> Image.Image:
    """Apply the step-and-repeat watermark to a decoded Pillow image."""
    with _pipeline("step and repeat watermark"):
        image_size(image, "image")
        tile = build_tile_mark(config)
        result = composite_tiled(image, tile, config)

    logger.info(f"[WATERMARK] Step and repeat watermark applied at {config.angle}° angle")
    return _restore_mode(result, image)


def apply_fixed_watermark(image: bytes, config: PlacementConfig) -> bytes:
    """
    Watermark encoded image bytes with a single logo + caption mark.

    Args:
        image: Encoded target image (the generated mockup).
        config: Placement settings, including the logo and caption sources.

    Returns:
        PNG-encoded watermarked image, same size as the input.
    """
    with _pipeline("watermark"):
        base = decode_image(image, "image")
    result = watermark_fixed_image(base, config)
    with _pipeline("watermark"):
        return encode_png(result)


def apply_tiled_watermark(image: bytes, config: TileConfig) -> bytes:
    """
    Watermark encoded image bytes with the step-and-repeat pattern.

    Args:
        image: Encoded target image (the generated mockup).
        config: Tiling settings, including the logo source.

    Returns:
        PNG-encoded watermarked image, same size as the input.
    """
    with _pipeline("step and repeat watermark"):
        base = decode_image(image, "image")
    result = watermark_tiled_image(base, config)
    with _pipeline("step and repeat watermark"):
        return encode_png(result)


async def apply_fixed_watermark_async(image: bytes, config: PlacementConfig) -> bytes:
    return await asyncio.to_thread(apply_fixed_watermark, image, config)


async def apply_tiled_watermark_async(image: bytes, config: TileConfig) -> bytes:
    return await asyncio.to_thread(apply_tiled_watermark, image, config)


def apply_watermark(image: bytes, config: Union[PlacementConfig, TileConfig]) -> bytes:
    """Dispatch to the compositor matching the config type."""
    if isinstance(config, TileConfig):
        return apply_tiled_watermark(image, config)
    return apply_fixed_watermark(image, config)


class MockupWatermarker:
    """
    Applies catalog watermark options to mockup images.

    Wraps option lookup, asset resolution and file I/O around the
    byte-level functions above. Holds only the asset directory, so one
    instance can be shared between threads.
    """

    def __init__(self, asset_dir: Union[str, Path]):
        """
        Initialize the MockupWatermarker.

        Args:
            asset_dir: Directory containing the watermark asset files.
        """
        self._asset_dir = Path(asset_dir)

    @property
    def asset_dir(self) -> Path:
        return self._asset_dir

    def config_for(self, option_id: str, **overrides) -> Union[PlacementConfig, TileConfig]:
        return build_config(option_id, self._asset_dir, **overrides)

    def process_bytes(self, image: bytes, option_id: str, **overrides) -> bytes:
        """Watermark encoded image bytes with a catalog option."""
        return apply_watermark(image, self.config_for(option_id, **overrides))

    def process_base64(self, image: str, option_id: str, **overrides) -> bytes:
        """Watermark a base64 payload as returned by the image generator."""
        return self.process_bytes(decode_base64_image(image), option_id, **overrides)

    def process_image_object(self, image: Image.Image, option_id: str, **overrides) -> Image.Image:
        """
        Watermark an existing PIL Image object.

        Useful for chaining with other processing steps.
        """
        config = self.config_for(option_id, **overrides)
        if isinstance(config, TileConfig):
            return watermark_tiled_image(image, config)
        return watermark_fixed_image(image, config)

    def process(
            self,
            image_path: Union[str, Path],
            option_id: str,
            output_path: Optional[Union[str, Path]] = None,
            **overrides
    ) -> Image.Image:
        """
        Watermark an image file.

        Args:
            image_path: Path to the source image file.
            option_id: Catalog option id.
            output_path: Optional path to save the result. If None, not saved.
            **overrides: Config overrides passed to the option's config.

        Returns:
            PIL Image object with watermark applied.

        Raises:
            FileNotFoundError: If the source image doesn't exist.
            WatermarkError: If watermarking fails.
        """
        image_path = Path(image_path)
        if not image_path.exists():
            raise FileNotFoundError(f"Image not found: {image_path}")

        with _pipeline("watermark"):
            base = decode_image(image_path.read_bytes(), image_path.name)
        result = self.process_image_object(base, option_id, **overrides)

        if output_path:
            output_path = Path(output_path)
            output_path.parent.mkdir(parents=True, exist_ok=True)

            suffix = output_path.suffix.lower()
            if suffix in [".jpg", ".jpeg"] and result.mode == "RGBA":
                # JPEG has no alpha; flatten onto white
                rgb_result = Image.new("RGB", result.size, (255, 255, 255))
                rgb_result.paste(result, mask=result.split()[3])
                rgb_result.save(output_path, quality=95)
            else:
                result.save(output_path)

        return result
