"""
autothresh/grayscale.py
-----------------------
Truecolor -> intensity conversion.

The luminance approximation is the integer blend

    gray = (c0 + 2*c1 + c2) >> 2

which weights the middle channel double. Channels are taken in storage
order (B, G, R for OpenCV-decoded buffers).
"""
from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

from .buffers import IDENTITY_PALETTE, IntensityImage, PixelBuffer
from .config import GRAY_CHANNEL_OFFSETS
from .errors import UnsupportedPixelFormat

log = logging.getLogger(__name__)

TRUECOLOR_BPP = 3


def is_canonical_grayscale(buf: PixelBuffer) -> bool:
    """1 byte per pixel and an identity palette (or none at all)."""
    if buf.bytes_per_pixel != 1:
        return False
    if buf.palette is None:
        return True
    return bool(np.array_equal(buf.palette, IDENTITY_PALETTE))


def _pixel_starts(buf: PixelBuffer) -> np.ndarray:
    """(H, W) array of the storage offset of each pixel's first byte."""
    ys = np.arange(buf.height, dtype=np.intp)[:, None] * buf.stride
    xs = np.arange(buf.width, dtype=np.intp)[None, :] * buf.bytes_per_pixel
    return ys + xs


def expand_palette(buf: PixelBuffer) -> PixelBuffer:
    """Look an indexed buffer up through its palette into a 3-byte buffer."""
    if buf.bytes_per_pixel != 1:
        raise UnsupportedPixelFormat(
            f"palette expansion needs 1 byte per pixel, got {buf.bytes_per_pixel}"
        )
    palette = IDENTITY_PALETTE if buf.palette is None else buf.palette
    indices = buf.data[_pixel_starts(buf)]
    return PixelBuffer.from_array(palette[indices])


def convert_to_grayscale(
    buf: PixelBuffer, offsets: Sequence[int] = GRAY_CHANNEL_OFFSETS
) -> IntensityImage:
    """
    Blend a 3-byte-per-pixel buffer down to one intensity byte per pixel.

    Args:
        buf: Truecolor pixel buffer (stride may include padding).
        offsets: Byte offsets, from the start of each pixel, of the three
            samples fed to the blend. Bytes read past the end of storage
            count as 0.

    Returns:
        A newly allocated IntensityImage with the same width and height.
    """
    if buf.bytes_per_pixel != TRUECOLOR_BPP:
        raise UnsupportedPixelFormat(
            f"truecolor conversion needs {TRUECOLOR_BPP} bytes per pixel, "
            f"got {buf.bytes_per_pixel}"
        )
    if len(offsets) != 3 or min(offsets) < 0:
        raise ValueError(f"expected three non-negative channel offsets, got {offsets}")

    starts = _pixel_starts(buf)
    storage = buf.data
    if starts.size:
        needed = int(starts.max()) + max(offsets) + 1
        if needed > storage.size:
            storage = np.concatenate(
                [storage, np.zeros(needed - storage.size, dtype=np.uint8)]
            )

    c0, c1, c2 = (storage[starts + off].astype(np.uint16) for off in offsets)
    gray = ((c0 + (c1 << 1) + c2) >> 2).astype(np.uint8)
    log.debug("Converted %dx%d truecolor buffer to grayscale", buf.width, buf.height)
    return IntensityImage.from_array(gray)


def to_intensity(buf: PixelBuffer) -> IntensityImage:
    """
    Return the intensity image for any supported decoder buffer.

    Canonical grayscale input is wrapped as-is: the result shares the input's
    storage and no pixel is touched. Indexed input with any other palette is
    expanded first.
    """
    if is_canonical_grayscale(buf):
        log.debug("Input is canonical grayscale – conversion skipped")
        return IntensityImage(buf.width, buf.height, buf.stride, buf.data)
    if buf.bytes_per_pixel == 1:
        log.debug("Expanding indexed buffer through its palette")
        return convert_to_grayscale(expand_palette(buf))
    if buf.bytes_per_pixel == TRUECOLOR_BPP:
        return convert_to_grayscale(buf)
    raise UnsupportedPixelFormat(
        f"cannot interpret {buf.bytes_per_pixel} bytes per pixel"
    )
