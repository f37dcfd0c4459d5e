"""
LabelMark Package
=================
Watermark compositing for AI-generated label mockups.

Modules:
    - core: Pure compositing logic (no Qt dependencies)
    - workers: QThread workers for batch processing
    - caption: Disclaimer caption rendering
    - settings: Environment-driven settings

Usage:
    from labelmark.core import PlacementConfig, apply_fixed_watermark
    from labelmark.workers import WatermarkWorker, WatermarkJobConfig
"""

__version__ = "1.0.0"
__app_name__ = "LabelMark"

# Core exports
from .core import (
    MockupWatermarker,
    PlacementConfig,
    TileConfig,
    apply_fixed_watermark,
    apply_tiled_watermark,
    WatermarkError,
    AssetError,
    DimensionError,
)

__all__ = [
    # Version info
    "__version__",
    "__app_name__",

    # Core
    "MockupWatermarker",
    "PlacementConfig",
    "TileConfig",
    "apply_fixed_watermark",
    "apply_tiled_watermark",
    "WatermarkError",
    "AssetError",
    "DimensionError",
]
