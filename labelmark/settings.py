"""
Process Settings
================
Environment-driven settings for the CLI and batch worker.

Values come from the process environment, after loading a ``.env`` file
if one exists. The compositing core never reads these; callers pass the
resolved paths in through the watermark configs.

Variables:
    LABELMARK_ASSET_DIR     Directory with logo/caption assets (default: ./assets)
    LABELMARK_OUTPUT_DIR    Where watermarked files go (default: ./output)
    LABELMARK_CAPTION_FONT  Optional TTF used when rendering the caption
    LABELMARK_LOG_LEVEL     Logging level name (default: INFO)
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    asset_dir: Path
    output_dir: Path
    caption_font: Optional[str] = None
    log_level: str = "INFO"


def load_settings(env_file: Optional[Union[str, Path]] = None) -> Settings:
    """
    Load settings from the environment.

    Args:
        env_file: Optional .env path. If None, python-dotenv looks for
                  a .env file itself. Existing variables are not overridden.

    Returns:
        Settings instance.
    """
    load_dotenv(env_file)

    return Settings(
        asset_dir=Path(os.environ.get("LABELMARK_ASSET_DIR", "assets")),
        output_dir=Path(os.environ.get("LABELMARK_OUTPUT_DIR", "output")),
        caption_font=os.environ.get("LABELMARK_CAPTION_FONT") or None,
        log_level=os.environ.get("LABELMARK_LOG_LEVEL", "INFO").upper()
    )
