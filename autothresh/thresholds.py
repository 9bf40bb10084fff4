"""
autothresh/thresholds.py
------------------------
Global threshold estimators over a 256-bin histogram.

Three interchangeable methods sit behind ``select_threshold``:

    • mean  – floor of the mean intensity
    • otsu  – split that maximises between-class variance
              (after M. Emre Celebi's Fourier library)
    • yen   – split that maximises Yen's correlation criterion

Each returns an int in [0, 255] and raises EmptyHistogram when the histogram
holds no pixels. Ties always resolve to the lowest level.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Dict, Sequence, Union

import numpy as np

from .buffers import LEVELS, Histogram
from .errors import EmptyHistogram

log = logging.getLogger(__name__)

HistogramLike = Union[Histogram, Sequence[int], np.ndarray]

# Yen criterion weights
YEN_SQ_WEIGHT = -0.61
YEN_P_WEIGHT = 2.0


class ThresholdMethod(str, Enum):
    MEAN = "mean"
    VARIANCE_MAX = "otsu"
    ENTROPY_MAX = "yen"


def _as_histogram(histogram: HistogramLike) -> Histogram:
    if isinstance(histogram, Histogram):
        return histogram
    return Histogram(np.asarray(histogram))


def _require_pixels(hist: Histogram) -> int:
    total = hist.total
    if total == 0:
        raise EmptyHistogram("histogram holds no pixels")
    return total


def _log_or_zero(x: np.ndarray) -> np.ndarray:
    """Natural log where x > 0, 0 elsewhere."""
    return np.log(x, out=np.zeros_like(x), where=x > 0.0)


# --------------------------------------------------------------------------- #
# estimators
# --------------------------------------------------------------------------- #
def mean_threshold(histogram: HistogramLike) -> int:
    """Integer part of the mean grey level."""
    hist = _as_histogram(histogram)
    total = _require_pixels(hist)
    return hist.weighted_sum // total


def variance_max_threshold(histogram: HistogramLike) -> int:
    """
    Otsu's method: the split y maximising wB * wF * (muB - muF)^2, where the
    background class is every level <= y.

    Only the occupied range [min, max] is swept. A single occupied level is
    returned as-is; two adjacent occupied levels return the lower one.
    Counts and weighted sums stay in int64, ratios in float64.
    """
    hist = _as_histogram(histogram)
    _require_pixels(hist)
    occupied = np.flatnonzero(hist.counts)
    min_value, max_value = int(occupied[0]), int(occupied[-1])

    if max_value == min_value:
        return max_value
    if max_value == min_value + 1:
        return min_value

    levels = np.arange(min_value, max_value + 1, dtype=np.int64)
    window = hist.counts[min_value : max_value + 1]
    amount = int(window.sum())
    integral = int(np.dot(levels, window))

    # running sums after adding level y, for y in [min_value, max_value - 1]
    pixel_back = np.cumsum(window)[:-1]
    integral_back = np.cumsum(window * levels)[:-1]
    pixel_fore = amount - pixel_back
    integral_fore = integral - integral_back

    omega_back = pixel_back / amount
    omega_fore = pixel_fore / amount
    mu_back = integral_back / pixel_back
    mu_fore = integral_fore / pixel_fore
    sigma = omega_back * omega_fore * (mu_back - mu_fore) ** 2

    # argmax keeps the first maximum, i.e. strict-greater replacement
    return min_value + int(np.argmax(sigma))


def entropy_max_threshold(histogram: HistogramLike) -> int:
    """
    Yen's method. With p the normalised histogram, P1 its running sum and
    P1Sq / P2Sq the running sums of p^2 at or below / strictly above each
    level, maximise

        -0.61 * log(P1Sq * P2Sq) + 2 * log(P1 * (1 - P1))

    where a log term whose argument is not positive contributes 0.
    """
    hist = _as_histogram(histogram)
    total = _require_pixels(hist)

    norm = hist.counts / total
    norm_sq = norm * norm
    p1 = np.cumsum(norm)
    p1_sq = np.cumsum(norm_sq)
    p2_sq = np.zeros(LEVELS, dtype=np.float64)
    p2_sq[:-1] = np.cumsum(norm_sq[::-1])[::-1][1:]

    crit = YEN_SQ_WEIGHT * _log_or_zero(p1_sq * p2_sq) + YEN_P_WEIGHT * _log_or_zero(
        p1 * (1.0 - p1)
    )
    return int(np.argmax(crit))


_SELECTORS: Dict[ThresholdMethod, Callable[[HistogramLike], int]] = {
    ThresholdMethod.MEAN: mean_threshold,
    ThresholdMethod.VARIANCE_MAX: variance_max_threshold,
    ThresholdMethod.ENTROPY_MAX: entropy_max_threshold,
}


# --------------------------------------------------------------------------- #
# public entry
# --------------------------------------------------------------------------- #
def select_threshold(
    histogram: HistogramLike, method: Union[ThresholdMethod, str]
) -> int:
    """Run one estimator; *method* may be the enum or its value ("otsu", ...)."""
    method = ThresholdMethod(method)
    threshold = _SELECTORS[method](histogram)
    log.debug("%s threshold = %d", method.value, threshold)
    return threshold


def select_all(histogram: HistogramLike) -> Dict[ThresholdMethod, int]:
    """Every estimator, in the order mean, otsu, yen."""
    hist = _as_histogram(histogram)
    return {method: select_threshold(hist, method) for method in ThresholdMethod}
