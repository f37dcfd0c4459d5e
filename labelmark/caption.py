"""
Disclaimer Caption Renderer
===========================
Renders the disclaimer text shown under the logo into a transparent PNG.

The fixed-position watermark reads this PNG as a plain raster asset, so
font rendering happens once here instead of on every watermark call.

Usage:
    python -m labelmark.caption assets/disclaimer-text.png
"""

import argparse
import logging
from pathlib import Path
from typing import Optional, Tuple, Union

from PIL import Image, ImageDraw, ImageFont

from .settings import load_settings

logger = logging.getLogger(__name__)

DISCLAIMER_TEXT = "This is a generated preview. Actual product may vary."
CAPTION_FONT_SIZE = 14
CAPTION_SIZE = (400, 24)

_FALLBACK_FONTS = (
    "arial.ttf",
    "/System/Library/Fonts/Helvetica.ttc",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
)


def load_font(size: int, font_path: Optional[str] = None):
    """
    Load a font for the caption.

    Tries ``font_path`` first, then a few common sans-serif system fonts,
    then Pillow's built-in default font.

    Args:
        size: Font size in pixels.
        font_path: Optional path to a TTF/TTC file.

    Returns:
        ImageFont object for drawing text.
    """
    candidates = ([font_path] if font_path else []) + list(_FALLBACK_FONTS)
    for candidate in candidates:
        try:
            return ImageFont.truetype(candidate, size)
        except OSError:
            continue

    logger.warning("[CAPTION] No TrueType font found, using Pillow default font")
    return ImageFont.load_default()


def render_caption(
        text: str = DISCLAIMER_TEXT,
        font_size: int = CAPTION_FONT_SIZE,
        size: Tuple[int, int] = CAPTION_SIZE,
        color: Tuple[int, int, int, int] = (255, 255, 255, 255),
        font_path: Optional[str] = None
) -> Image.Image:
    """
    Draw the caption text left-aligned on a transparent canvas.

    The text baseline sits at ``font_size + 2`` pixels from the top.

    Returns:
        RGBA image of exactly ``size``.
    """
    if not text or not text.strip():
        raise ValueError("Caption text cannot be empty")

    font = load_font(font_size, font_path)
    caption = Image.new("RGBA", size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(caption)

    if isinstance(font, ImageFont.FreeTypeFont):
        draw.text((0, font_size + 2), text, font=font, fill=color, anchor="ls")
    else:
        # Bitmap fonts don't support anchors
        draw.text((0, 2), text, font=font, fill=color)

    return caption


def save_caption(output_path: Union[str, Path], **kwargs) -> Path:
    """Render the caption and write it as PNG to ``output_path``."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    render_caption(**kwargs).save(output_path, format="PNG")
    logger.info(f"[CAPTION] Generated disclaimer PNG at: {output_path}")
    return output_path


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Render the disclaimer caption PNG")
    parser.add_argument("output", help="Destination PNG path")
    parser.add_argument("--text", default=DISCLAIMER_TEXT)
    parser.add_argument("--font", default=None, help="TTF font file (default: LABELMARK_CAPTION_FONT)")
    parser.add_argument("--font-size", type=int, default=CAPTION_FONT_SIZE)
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    font_path = args.font or load_settings().caption_font
    save_caption(args.output, text=args.text, font_size=args.font_size, font_path=font_path)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
