"""
Workers Module - Async Thread Management
========================================
Contains QThread workers for non-blocking watermark operations.

Components:
- WatermarkWorker: Batch watermarking with progress tracking
"""

from .watermark_worker import WatermarkWorker, WatermarkJobConfig, WatermarkResult

__all__ = [
    "WatermarkWorker",
    "WatermarkJobConfig",
    "WatermarkResult",
]
