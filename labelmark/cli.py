"""
LabelMark - Command Line Interface
==================================
Command line tool for watermarking generated label mockups.

Usage:
    labelmark mockup.png --option ol-logo
    labelmark a.png b.png --option olg-step-repeat --opacity 0.2
    python -m labelmark mockup.png --position center --output-dir out/

Architecture:
    - Model: labelmark/core/ (pure compositing)
    - Worker: labelmark/workers/ (QThread batch processing)
    - Controller: This module (signal/slot connections)
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from PyQt6.QtCore import QCoreApplication

from .core import POSITIONS, WATERMARK_OPTIONS
from .core.catalog import DEFAULT_OPTION_ID, MODE_TILED
from .settings import load_settings
from .workers import WatermarkWorker, WatermarkJobConfig, WatermarkResult


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Watermark AI-generated label mockups"
    )
    parser.add_argument("images", nargs="+", type=Path, help="Images to watermark")
    parser.add_argument(
        "--option",
        choices=sorted(WATERMARK_OPTIONS),
        default=DEFAULT_OPTION_ID,
        help="Watermark option from the catalog",
    )
    parser.add_argument("--output-dir", type=Path, default=None)
    parser.add_argument("--asset-dir", type=Path, default=None)
    parser.add_argument(
        "--position",
        choices=POSITIONS,
        default=None,
        help="Mark position (fixed options only)",
    )
    parser.add_argument("--padding", type=int, default=None, help="Edge padding (fixed options only)")
    parser.add_argument("--opacity", type=float, default=None)
    parser.add_argument("--logo-width", type=int, default=None)
    parser.add_argument("--spacing", type=int, default=None, help="Tile spacing (tiled options only)")
    parser.add_argument("--angle", type=float, default=None, help="Tile angle (tiled options only)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser.parse_args(argv)


def build_overrides(args: argparse.Namespace) -> dict:
    """Collect the config overrides that apply to the chosen option."""
    tiled = WATERMARK_OPTIONS[args.option].mode == MODE_TILED
    names = ["opacity", "logo_width"]
    names += ["spacing", "angle"] if tiled else ["position", "padding"]

    overrides = {}
    for name in names:
        value = getattr(args, name)
        if value is not None:
            overrides[name] = value
    return overrides


class BatchController:
    """
    Connects worker signals to console output.

    Responsibilities:
    - Create and start the worker thread
    - Report per-image progress and results
    - Stop the event loop when the batch is done
    """

    def __init__(self, app: QCoreApplication, config: WatermarkJobConfig):
        self.app = app
        self.results: List[WatermarkResult] = []

        self._worker = WatermarkWorker(config)
        self._worker.progress.connect(self._on_progress)
        self._worker.image_completed.connect(self._on_image_completed)
        self._worker.finished_all.connect(self._on_finished)
        self._worker.error.connect(self._on_error)

    def start(self):
        self._worker.start()

    def _on_progress(self, current: int, total: int, filename: str):
        print(f"Processing: {filename} ({current}/{total})")

    def _on_image_completed(self, result: WatermarkResult):
        if result.success:
            print(f"  -> {result.output_path}")
        else:
            print(f"  FAILED {result.source_path.name}: {result.error_message}")

    def _on_finished(self, results: list):
        self.results = results
        success_count = sum(1 for r in results if r.success)
        print(f"Done: {success_count}/{len(results)} images watermarked")

        self._worker.wait()
        self.app.quit()

    def _on_error(self, error_message: str):
        print(f"Error: {error_message}", file=sys.stderr)


def main(argv: Optional[List[str]] = None) -> int:
    """Application entry point."""
    args = parse_args(argv)
    settings = load_settings()

    level = logging.DEBUG if args.verbose else getattr(logging, settings.log_level, logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    config = WatermarkJobConfig(
        image_paths=args.images,
        output_dir=args.output_dir or settings.output_dir,
        asset_dir=args.asset_dir or settings.asset_dir,
        option_id=args.option,
        overrides=build_overrides(args)
    )

    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])
    app.setApplicationName("LabelMark")

    controller = BatchController(app, config)
    controller.start()
    app.exec()

    if not controller.results or not all(r.success for r in controller.results):
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
