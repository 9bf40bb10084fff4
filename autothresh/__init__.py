# autothresh/__init__.py
"""
Global image binarization with histogram-driven threshold selection.
"""

from . import config
from .binarize import binarize
from .buffers import BinaryImage, Histogram, IntensityImage, PixelBuffer
from .errors import EmptyHistogram, ThresholdingError, UnsupportedPixelFormat
from .grayscale import convert_to_grayscale, is_canonical_grayscale, to_intensity
from .histogram import build_histogram
from .pipeline import PipelineResult, process_image, run_pipeline
from .thresholds import ThresholdMethod, select_all, select_threshold
from .cli import main as run_cli

__all__ = [
    "config",
    "BinaryImage",
    "Histogram",
    "IntensityImage",
    "PixelBuffer",
    "EmptyHistogram",
    "ThresholdingError",
    "UnsupportedPixelFormat",
    "binarize",
    "build_histogram",
    "convert_to_grayscale",
    "is_canonical_grayscale",
    "to_intensity",
    "PipelineResult",
    "process_image",
    "run_pipeline",
    "ThresholdMethod",
    "select_all",
    "select_threshold",
    "run_cli",
]

import logging
log = logging.getLogger(__name__)
log.info("autothresh package loaded")
