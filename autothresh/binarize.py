from __future__ import annotations

import logging

import numpy as np

from .buffers import BinaryImage, IntensityImage

log = logging.getLogger(__name__)


def binarize(image: IntensityImage, threshold: int) -> BinaryImage:
    """255 where a pixel is strictly brighter than *threshold*, 0 elsewhere."""
    if not 0 <= threshold <= 255:
        raise ValueError(f"threshold {threshold} outside [0, 255]")
    out = np.where(image.rows() > threshold, 255, 0).astype(np.uint8)
    log.debug(
        "Binarized at %d: %d of %d pixels set", threshold, int(np.count_nonzero(out)), out.size
    )
    return BinaryImage.from_array(out)
