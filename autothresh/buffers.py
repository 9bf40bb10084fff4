"""
autothresh/buffers.py
---------------------
Pixel storage shared by every stage of the pipeline.

All buffers own a flat ``uint8`` NumPy array plus explicit geometry
(width, height, row stride). Rows may carry padding bytes past
``width * bytes_per_pixel``; accessors never expose them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

U8Array = NDArray[np.uint8]
Palette = NDArray[np.uint8]  # (256, 3)

BytesLike = Union[bytes, bytearray, memoryview, np.ndarray]

LEVELS = 256
IDENTITY_PALETTE: Palette = np.repeat(
    np.arange(LEVELS, dtype=np.uint8)[:, None], 3, axis=1
)
IDENTITY_PALETTE.flags.writeable = False


def _as_storage(data: BytesLike) -> U8Array:
    """Flat uint8 view of *data*; bytes objects yield a read-only view."""
    if isinstance(data, (bytes, bytearray, memoryview)):
        return np.frombuffer(data, dtype=np.uint8)
    arr = np.asarray(data)
    if arr.dtype != np.uint8:
        raise ValueError(f"pixel storage must be uint8, got {arr.dtype}")
    return arr.reshape(-1)


def _check_geometry(width: int, height: int, stride: int, bpp: int, size: int) -> None:
    if width < 0 or height < 0:
        raise ValueError(f"negative dimensions {width}x{height}")
    if bpp < 1:
        raise ValueError(f"bytes_per_pixel must be >= 1, got {bpp}")
    if stride < width * bpp:
        raise ValueError(
            f"stride {stride} shorter than a row of {width} x {bpp}-byte pixels"
        )
    if size < stride * height:
        raise ValueError(
            f"storage holds {size} bytes, {stride * height} required for "
            f"{height} rows of stride {stride}"
        )


# --------------------------------------------------------------------------- #
# raw decoder output
# --------------------------------------------------------------------------- #
@dataclass(frozen=True, eq=False)
class PixelBuffer:
    """
    Read-only pixel data as handed over by the decoder.

    ``palette`` only applies to 1-byte-per-pixel (indexed) buffers; ``None``
    there means the implicit identity palette value -> (value, value, value).
    """

    width: int
    height: int
    stride: int
    bytes_per_pixel: int
    data: U8Array
    palette: Optional[Palette] = None

    def __post_init__(self) -> None:
        storage = _as_storage(self.data)
        _check_geometry(
            self.width, self.height, self.stride, self.bytes_per_pixel, storage.size
        )
        object.__setattr__(self, "data", storage)
        if self.palette is not None:
            pal = np.asarray(self.palette, dtype=np.uint8)
            if pal.shape != (LEVELS, 3):
                raise ValueError(f"palette must have shape (256, 3), got {pal.shape}")
            object.__setattr__(self, "palette", pal)

    @classmethod
    def from_array(cls, arr: np.ndarray, palette: Optional[Palette] = None) -> "PixelBuffer":
        """Wrap an (H, W) or (H, W, C) uint8 array without padding."""
        arr = np.ascontiguousarray(arr)
        if arr.ndim == 2:
            bpp = 1
        elif arr.ndim == 3:
            bpp = arr.shape[2]
        else:
            raise ValueError(f"expected a 2-D or 3-D array, got shape {arr.shape}")
        height, width = arr.shape[:2]
        return cls(width, height, width * bpp, bpp, arr, palette)

    def _offset(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height}")
        return y * self.stride + x * self.bytes_per_pixel

    def pixel(self, x: int, y: int) -> Tuple[int, ...]:
        """Channel bytes of pixel (x, y) in storage order."""
        off = self._offset(x, y)
        return tuple(int(b) for b in self.data[off : off + self.bytes_per_pixel])


# --------------------------------------------------------------------------- #
# single-channel images
# --------------------------------------------------------------------------- #
@dataclass(frozen=True, eq=False)
class IntensityImage:
    """8-bit single-channel image with a row stride."""

    width: int
    height: int
    stride: int
    data: U8Array

    def __post_init__(self) -> None:
        storage = _as_storage(self.data)
        _check_geometry(self.width, self.height, self.stride, 1, storage.size)
        object.__setattr__(self, "data", storage)

    @classmethod
    def blank(cls, width: int, height: int, stride: Optional[int] = None):
        stride = width if stride is None else stride
        return cls(width, height, stride, np.zeros(stride * height, dtype=np.uint8))

    @classmethod
    def from_array(cls, arr: np.ndarray):
        """Wrap a 2-D uint8 array; shares memory when it is already contiguous."""
        arr = np.ascontiguousarray(arr)
        if arr.ndim != 2:
            raise ValueError(f"expected a 2-D array, got shape {arr.shape}")
        height, width = arr.shape
        return cls(width, height, width, arr)

    def rows(self) -> U8Array:
        """(height, width) view of the pixels, padding excluded."""
        used = self.data[: self.stride * self.height]
        return used.reshape(self.height, self.stride)[:, : self.width]

    def to_array(self) -> U8Array:
        """Contiguous (height, width) copy, suitable for cv2.imwrite."""
        return np.ascontiguousarray(self.rows())

    def _offset(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height}")
        return y * self.stride + x

    def get(self, x: int, y: int) -> int:
        return int(self.data[self._offset(x, y)])

    def set(self, x: int, y: int, value: int) -> None:
        if not 0 <= value <= 255:
            raise ValueError(f"intensity {value} outside [0, 255]")
        self.data[self._offset(x, y)] = value


@dataclass(frozen=True, eq=False)
class BinaryImage(IntensityImage):
    """IntensityImage restricted to the two levels 0 and 255."""

    def __post_init__(self) -> None:
        super().__post_init__()
        rows = self.rows()
        if rows.size and not np.all((rows == 0) | (rows == 255)):
            raise ValueError("binary image may only hold 0 or 255")

    def set(self, x: int, y: int, value: int) -> None:
        if value not in (0, 255):
            raise ValueError(f"binary pixel must be 0 or 255, got {value}")
        super().set(x, y, value)


# --------------------------------------------------------------------------- #
# histogram
# --------------------------------------------------------------------------- #
@dataclass(frozen=True, eq=False)
class Histogram:
    """
    Per-level pixel counts of an intensity image.

    The counts array is copied on construction and made read-only, so one
    histogram can be fed to any number of threshold selectors.
    """

    counts: NDArray[np.int64]

    def __post_init__(self) -> None:
        arr = np.array(self.counts, dtype=np.int64)
        if arr.shape != (LEVELS,):
            raise ValueError(f"histogram needs {LEVELS} bins, got shape {arr.shape}")
        if (arr < 0).any():
            raise ValueError("histogram counts must be non-negative")
        arr.flags.writeable = False
        object.__setattr__(self, "counts", arr)

    @classmethod
    def from_counts(cls, counts: Sequence[int]) -> "Histogram":
        return cls(np.asarray(counts))

    @property
    def total(self) -> int:
        return int(self.counts.sum())

    @property
    def weighted_sum(self) -> int:
        return int(np.dot(np.arange(LEVELS, dtype=np.int64), self.counts))

    def __len__(self) -> int:
        return LEVELS

    def __getitem__(self, level: int) -> int:
        return int(self.counts[level])
