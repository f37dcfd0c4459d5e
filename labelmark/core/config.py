"""
Watermark Configuration
=======================
Immutable per-call settings for the two compositing modes.

Asset sources are either a filesystem path or the raw encoded bytes of
the asset. Nothing here points at a default location on disk; callers
resolve assets (see ``labelmark.core.catalog``) and pass them in.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

AssetSource = Union[str, Path, bytes]

POSITIONS = ("southeast", "southwest", "northeast", "northwest", "center")
DEFAULT_POSITION = "southwest"

# Vertical gap between the logo and the caption strip
CAPTION_GAP = 10


def _check_opacity(opacity: float):
    if not 0.0 < opacity <= 1.0:
        raise ValueError(f"Opacity must be in (0, 1], got {opacity}")


def _check_logo_width(logo_width: int):
    if logo_width <= 0:
        raise ValueError(f"Logo width must be positive, got {logo_width}")


@dataclass(frozen=True)
class PlacementConfig:
    """Configuration for a single fixed-position mark (logo + caption)."""
    logo_source: Optional[AssetSource] = None
    caption_source: Optional[AssetSource] = None
    position: str = DEFAULT_POSITION
    padding: int = 20
    opacity: float = 1.0
    logo_width: int = 300
    caption_gap: int = CAPTION_GAP

    def __post_init__(self):
        _check_opacity(self.opacity)
        _check_logo_width(self.logo_width)


@dataclass(frozen=True)
class TileConfig:
    """Configuration for the rotated step-and-repeat pattern."""
    logo_source: Optional[AssetSource] = None
    logo_width: int = 112
    opacity: float = 0.15
    spacing: int = 25
    angle: float = -30.0  # degrees, clockwise positive

    def __post_init__(self):
        _check_opacity(self.opacity)
        _check_logo_width(self.logo_width)
        if self.spacing < 0:
            raise ValueError(f"Spacing cannot be negative, got {self.spacing}")
