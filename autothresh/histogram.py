"""
autothresh/histogram.py
-----------------------
256-bin intensity histogram, optionally accumulated on a thread pool.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Tuple

import numpy as np

from .buffers import LEVELS, Histogram, IntensityImage
from .config import HISTOGRAM_MIN_BAND_ROWS, HISTOGRAM_WORKERS

log = logging.getLogger(__name__)


def _split_rows(height: int, parts: int) -> List[Tuple[int, int]]:
    """Partition height into ~parts contiguous [start, end) row spans."""
    parts = max(1, int(parts))
    step = (height + parts - 1) // parts or 1
    return [(i, min(i + step, height)) for i in range(0, height, step)]


def _band_counts(rows: np.ndarray) -> np.ndarray:
    return np.bincount(rows.ravel(), minlength=LEVELS).astype(np.int64)


def build_histogram(image: IntensityImage, workers: int = HISTOGRAM_WORKERS) -> Histogram:
    """
    Count the pixels of *image* at each intensity level.

    With ``workers > 1`` the rows are cut into bands; every band fills its own
    local counts and the locals are summed afterwards, so no counter is ever
    shared between threads. Small images stay single-threaded.
    """
    rows = image.rows()
    if workers <= 1 or image.height < workers * HISTOGRAM_MIN_BAND_ROWS:
        counts = _band_counts(rows)
    else:
        bands = _split_rows(image.height, workers)
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = [pool.submit(_band_counts, rows[s:e]) for s, e in bands]
            counts = np.sum([f.result() for f in futures], axis=0, dtype=np.int64)
        log.debug("Histogram reduced from %d row bands", len(bands))

    hist = Histogram(counts)
    expected = image.width * image.height
    if hist.total != expected:
        raise RuntimeError(f"histogram holds {hist.total} pixels, expected {expected}")
    return hist
