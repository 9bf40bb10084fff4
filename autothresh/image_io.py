"""
autothresh/image_io.py
----------------------
OpenCV decode/encode at the edges of the pipeline.

Decoded images become PixelBuffers (1 byte per pixel for grayscale files,
3 bytes in B, G, R order otherwise); intensity and binary images are written
back as 8-bit single-channel files.
"""
from __future__ import annotations

import logging
import pathlib

import cv2
import numpy as np

from .buffers import IntensityImage, PixelBuffer
from .errors import ImageReadError, ImageWriteError, UnsupportedPixelFormat

log = logging.getLogger(__name__)


def load_pixel_buffer(path: str | pathlib.Path) -> PixelBuffer:
    path = pathlib.Path(path)
    img = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
    if img is None:
        raise ImageReadError(f"OpenCV failed to read image: {path}")

    if img.dtype != np.uint8:
        raise UnsupportedPixelFormat(
            f"{path.name}: only 8-bit channels are supported, got {img.dtype}"
        )
    if img.ndim == 3 and img.shape[2] == 4:
        img = cv2.cvtColor(img, cv2.COLOR_BGRA2BGR)
    elif img.ndim == 3 and img.shape[2] == 1:
        img = img[:, :, 0]
    elif img.ndim == 3 and img.shape[2] != 3:
        raise UnsupportedPixelFormat(f"{path.name}: {img.shape[2]} channels")

    buf = PixelBuffer.from_array(img)
    log.info(
        "Loaded %s: %dx%d, %d byte(s) per pixel",
        path.name, buf.width, buf.height, buf.bytes_per_pixel,
    )
    return buf


def save_image(path: str | pathlib.Path, image: IntensityImage) -> pathlib.Path:
    """Write *image* as an 8-bit grayscale file; the extension picks the codec."""
    path = pathlib.Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    try:
        ok = cv2.imwrite(str(path), image.to_array())
    except cv2.error as e:
        raise ImageWriteError(f"OpenCV failed to write image: {path}: {e}") from e
    if not ok:
        raise ImageWriteError(f"OpenCV failed to write image: {path}")
    log.debug("Wrote %s", path)
    return path
