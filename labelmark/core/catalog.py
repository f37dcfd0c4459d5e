"""
Watermark Option Catalog
========================
The named watermark choices offered to end users, and how each one maps
onto a compositing mode and its asset files.

Asset file names are resolved against an asset directory supplied by
the caller (see ``labelmark.settings``).
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Union

from .config import PlacementConfig, TileConfig

MODE_FIXED = "fixed"
MODE_TILED = "tiled"


@dataclass(frozen=True)
class WatermarkOption:
    """One selectable watermark."""
    id: str
    name: str
    mode: str
    logo_file: str
    caption_file: Optional[str] = None


WATERMARK_OPTIONS: Dict[str, WatermarkOption] = {
    option.id: option for option in (
        WatermarkOption(
            id="ol-logo",
            name="OL Logo (White)",
            mode=MODE_FIXED,
            logo_file="ol-logo-white.svg",
            caption_file="disclaimer-text.png"
        ),
        WatermarkOption(
            id="olg-step-repeat",
            name="OLG Step & Repeat Pattern",
            mode=MODE_TILED,
            logo_file="olg-watermark-white.png"
        ),
    )
}

DEFAULT_OPTION_ID = "ol-logo"


def get_option(option_id: str) -> WatermarkOption:
    """
    Look up a watermark option by id.

    Raises:
        KeyError: If the id is unknown (message lists the valid ids).
    """
    try:
        return WATERMARK_OPTIONS[option_id]
    except KeyError:
        valid = ", ".join(sorted(WATERMARK_OPTIONS))
        raise KeyError(f"Unknown watermark option {option_id!r} (valid: {valid})") from None


def build_config(
        option_id: str,
        asset_dir: Union[str, Path],
        **overrides
) -> Union[PlacementConfig, TileConfig]:
    """
    Build the compositing config for a catalog option.

    Args:
        option_id: Catalog id, e.g. "ol-logo" or "olg-step-repeat".
        asset_dir: Directory holding the option's asset files.
        **overrides: Extra config fields (position, opacity, spacing, ...).
                     Fields that don't apply to the option's mode are
                     rejected by the dataclass constructor.

    Returns:
        PlacementConfig for fixed options, TileConfig for tiled ones.
    """
    option = get_option(option_id)
    asset_dir = Path(asset_dir)

    if option.mode == MODE_TILED:
        return TileConfig(logo_source=asset_dir / option.logo_file, **overrides)

    return PlacementConfig(
        logo_source=asset_dir / option.logo_file,
        caption_source=asset_dir / option.caption_file,
        **overrides
    )
