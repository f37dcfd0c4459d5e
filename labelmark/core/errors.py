"""
Watermark Errors
================
Exception hierarchy for the compositing pipeline.

Every failure leaves the pipeline as a WatermarkError. The two specific
kinds below are raised directly; anything else is wrapped with the
original exception attached as ``__cause__``.
"""


class WatermarkError(Exception):
    """A watermarking call failed at some pipeline stage."""


class AssetError(WatermarkError):
    """A logo or caption asset is missing, undecodable, or zero-sized."""


class DimensionError(WatermarkError):
    """An image's width or height could not be determined."""
