"""
Core Module - Pure Compositing Logic
====================================
This module contains no Qt dependencies.
All watermark compositing algorithms are implemented here.
"""

from .catalog import WATERMARK_OPTIONS, WatermarkOption, build_config, get_option
from .config import PlacementConfig, TileConfig, POSITIONS
from .errors import WatermarkError, AssetError, DimensionError
from .watermark import (
    MockupWatermarker,
    apply_fixed_watermark,
    apply_tiled_watermark,
    apply_fixed_watermark_async,
    apply_tiled_watermark_async,
    apply_watermark,
    decode_base64_image,
    watermark_fixed_image,
    watermark_tiled_image,
)

__all__ = [
    "MockupWatermarker",
    "apply_fixed_watermark",
    "apply_tiled_watermark",
    "apply_fixed_watermark_async",
    "apply_tiled_watermark_async",
    "apply_watermark",
    "decode_base64_image",
    "watermark_fixed_image",
    "watermark_tiled_image",
    "PlacementConfig",
    "TileConfig",
    "POSITIONS",
    "WatermarkOption",
    "WATERMARK_OPTIONS",
    "build_config",
    "get_option",
    "WatermarkError",
    "AssetError",
    "DimensionError",
]
