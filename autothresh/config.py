"""
autothresh/config.py  –  central configuration & logging

Every tunable the pipeline reads lives here as a typed module constant.
A few of them can be overridden from the environment:

    • AUTOTHRESH_OUT_DIR  – where process_image() writes its two PNGs
    • AUTOTHRESH_WORKERS  – thread count for histogram accumulation
    • LOG_LEVEL           – root log level (default INFO)

Output directories are created on first write, not on import.
"""

from __future__ import annotations

import logging
import os
import pathlib as _pl
from typing import Tuple

# --------------------------------------------------------------------------- #
# I/O paths – project root is the parent of the package directory
# --------------------------------------------------------------------------- #
ROOT = _pl.Path(__file__).resolve().parents[1]
OUT_DIR = _pl.Path(os.getenv("AUTOTHRESH_OUT_DIR", str(ROOT / "outputs")))

GRAY_FILENAME  : str = "complete.png"    # intensity image
BINARY_FILENAME: str = "complete2.png"   # two-level image

# --------------------------------------------------------------------------- #
# Constants / tunables
# --------------------------------------------------------------------------- #
# ---- Threshold selection ------------------------------------------------- #
DEFAULT_METHOD: str = "yen"     # estimator used for binarization

# ---- Grayscale conversion ------------------------------------------------ #
# byte offsets (from the pixel start) of the three channels that feed
# gray = (c0 + 2*c1 + c2) >> 2
GRAY_CHANNEL_OFFSETS: Tuple[int, int, int] = (0, 1, 2)

# ---- Histogram accumulation ---------------------------------------------- #
HISTOGRAM_WORKERS      : int = max(1, int(os.getenv("AUTOTHRESH_WORKERS", "1")))
HISTOGRAM_MIN_BAND_ROWS: int = 64    # below this many rows per band stay single-threaded


# --------------------------------------------------------------------------- #
# Logging
# --------------------------------------------------------------------------- #
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def setup_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL, logging.INFO),
        format="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
        datefmt="%H:%M:%S",
    )


setup_logging()
