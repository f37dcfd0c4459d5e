"""
Watermark Worker - Async Batch Watermarking
===========================================
QThread worker that watermarks a batch of mockup images off the caller's
thread.

Workflow:
1. For each image in the queue:
   a. Apply the selected catalog watermark option
   b. Save to the output directory as PNG
2. Emit progress signals during processing
3. Emit finished signal with results

A failure on one image is recorded in its result and the batch carries
on with the next image.

Naming Convention:
- filename_watermarked.png
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, List, Dict, Any

from PyQt6.QtCore import QThread, pyqtSignal

from labelmark.core.catalog import DEFAULT_OPTION_ID, get_option
from labelmark.core.watermark import MockupWatermarker

logger = logging.getLogger(__name__)


@dataclass
class WatermarkJobConfig:
    """Complete configuration for a batch watermark run."""
    image_paths: List[Path] = field(default_factory=list)
    output_dir: Path = field(default_factory=lambda: Path.cwd() / "output")
    asset_dir: Path = field(default_factory=lambda: Path.cwd() / "assets")
    option_id: str = DEFAULT_OPTION_ID

    # Extra PlacementConfig/TileConfig fields, e.g. {"position": "center"}
    overrides: Dict[str, Any] = field(default_factory=dict)


@dataclass
class WatermarkResult:
    """Result of watermarking a single image."""
    source_path: Path
    output_path: Optional[Path] = None
    success: bool = False
    error_message: str = ""


class WatermarkWorker(QThread):
    """
    Worker thread for watermarking a batch of images.

    Signals:
        progress(int, int, str): (current, total, current_file_name)
        image_completed(WatermarkResult): Emitted when each image is processed
        finished_all(list[WatermarkResult]): Emitted when all images are done
        error(str): Emitted on critical errors
    """

    # Signals
    progress = pyqtSignal(int, int, str)  # current, total, filename
    image_completed = pyqtSignal(object)  # WatermarkResult
    finished_all = pyqtSignal(list)  # List[WatermarkResult]
    error = pyqtSignal(str)  # Error message

    def __init__(self, config: WatermarkJobConfig, parent=None):
        """
        Initialize the watermark worker.

        Args:
            config: WatermarkJobConfig with images, option and directories.
            parent: Optional parent QObject.
        """
        super().__init__(parent)
        self.config = config
        self._is_cancelled = False
        self._watermarker: Optional[MockupWatermarker] = None

    def cancel(self):
        """Request cancellation; takes effect before the next image."""
        self._is_cancelled = True

    @staticmethod
    def output_filename(source_path: Path) -> str:
        return f"{Path(source_path).stem}_watermarked.png"

    def _process_single_image(self, image_path: Path) -> WatermarkResult:
        """
        Watermark one image and save it to the output directory.

        Args:
            image_path: Path to the source image.

        Returns:
            WatermarkResult with processing outcome.
        """
        image_path = Path(image_path)
        result = WatermarkResult(source_path=image_path)

        try:
            self.config.output_dir.mkdir(parents=True, exist_ok=True)
            output_path = self.config.output_dir / self.output_filename(image_path)

            watermarked = self._watermarker.process(
                image_path=image_path,
                option_id=self.config.option_id,
                output_path=output_path,
                **self.config.overrides
            )
            watermarked.close()

            result.output_path = output_path
            result.success = True

        except Exception as e:
            result.success = False
            result.error_message = str(e)
            logger.error(f"[WORKER] Failed to watermark {image_path.name}: {e}")

        return result

    def run(self):
        """
        Main worker execution.

        Processes all images in the config and emits progress signals.
        """
        results: List[WatermarkResult] = []
        total = len(self.config.image_paths)

        if total == 0:
            self.error.emit("No images to process")
            self.finished_all.emit(results)
            return

        try:
            get_option(self.config.option_id)
        except KeyError as e:
            self.error.emit(str(e.args[0]))
            self.finished_all.emit(results)
            return

        try:
            self._watermarker = MockupWatermarker(self.config.asset_dir)

            for idx, image_path in enumerate(self.config.image_paths):
                if self._is_cancelled:
                    logger.info(f"[WORKER] Cancelled after {idx}/{total} images")
                    break

                self.progress.emit(idx + 1, total, Path(image_path).name)

                result = self._process_single_image(image_path)
                results.append(result)

                self.image_completed.emit(result)

        except Exception as e:
            self.error.emit(f"Critical error: {str(e)}")
            logger.exception("[WORKER] Critical error")

        finally:
            self._watermarker = None

        self.finished_all.emit(results)
