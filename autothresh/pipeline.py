"""
autothresh/pipeline.py
======================

Coordinator for a *single* image:  grayscale  →  histogram  →  thresholds  →
binarization, plus artefact I/O.

Every stage receives its input as an argument and returns a fresh result;
nothing is kept between calls.
"""

from __future__ import annotations

import logging
import pathlib
from dataclasses import dataclass
from typing import Dict, Optional, Union

from .binarize import binarize
from .buffers import BinaryImage, Histogram, IntensityImage, PixelBuffer
from .config import BINARY_FILENAME, DEFAULT_METHOD, GRAY_FILENAME, HISTOGRAM_WORKERS, OUT_DIR
from .grayscale import to_intensity
from .histogram import build_histogram
from .image_io import load_pixel_buffer, save_image
from .thresholds import ThresholdMethod, select_all

log = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    gray: IntensityImage
    histogram: Histogram
    thresholds: Dict[ThresholdMethod, int]   # mean, otsu, yen – in that order
    method: ThresholdMethod
    binary: BinaryImage
    gray_path: Optional[pathlib.Path] = None
    binary_path: Optional[pathlib.Path] = None

    @property
    def threshold(self) -> int:
        """Threshold the binary image was cut at."""
        return self.thresholds[self.method]


def run_pipeline(
    buf: PixelBuffer,
    method: Union[ThresholdMethod, str] = DEFAULT_METHOD,
    workers: int = HISTOGRAM_WORKERS,
) -> PipelineResult:
    """In-memory pipeline on a decoded buffer; nothing is written."""
    method = ThresholdMethod(method)

    gray = to_intensity(buf)
    histogram = build_histogram(gray, workers=workers)
    thresholds = select_all(histogram)
    log.info(
        "Thresholds: %s",
        ", ".join(f"{m.value}={t}" for m, t in thresholds.items()),
    )

    binary = binarize(gray, thresholds[method])
    return PipelineResult(
        gray=gray,
        histogram=histogram,
        thresholds=thresholds,
        method=method,
        binary=binary,
    )


def save_results(result: PipelineResult, out_dir: str | pathlib.Path = OUT_DIR) -> PipelineResult:
    """Write both images of *result* into *out_dir* and record their paths."""
    out_dir = pathlib.Path(out_dir)
    result.gray_path = save_image(out_dir / GRAY_FILENAME, result.gray)
    result.binary_path = save_image(out_dir / BINARY_FILENAME, result.binary)
    log.debug("Artefacts saved to %s", out_dir)
    return result


def process_image(
    image_path: str | pathlib.Path,
    out_dir: str | pathlib.Path = OUT_DIR,
    method: Union[ThresholdMethod, str] = DEFAULT_METHOD,
    workers: int = HISTOGRAM_WORKERS,
) -> PipelineResult:
    """
    Full pipeline for one image file.

    Writes the intensity image and the binary image into *out_dir* as
    GRAY_FILENAME and BINARY_FILENAME; their paths are set on the result.
    """
    path = pathlib.Path(image_path)
    log.info("Processing image: %s", path.name)

    buf = load_pixel_buffer(path)
    result = save_results(run_pipeline(buf, method=method, workers=workers), out_dir)
    log.info(
        "Binarized %s with %s threshold %d → %s",
        path.name, result.method.value, result.threshold, result.binary_path,
    )
    return result
