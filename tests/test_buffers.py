import numpy as np
import pytest

from autothresh.buffers import (
    IDENTITY_PALETTE,
    BinaryImage,
    Histogram,
    IntensityImage,
    PixelBuffer,
)


def _padded_truecolor():
    # 2x2 BGR pixels, 2 padding bytes (value 99) per row
    data = np.array(
        [1, 2, 3, 4, 5, 6, 99, 99,
         7, 8, 9, 10, 11, 12, 99, 99],
        dtype=np.uint8,
    )
    return PixelBuffer(width=2, height=2, stride=8, bytes_per_pixel=3, data=data)


def test_pixel_buffer_accessor_respects_stride():
    buf = _padded_truecolor()
    assert buf.pixel(0, 0) == (1, 2, 3)
    assert buf.pixel(1, 1) == (10, 11, 12)


def test_pixel_buffer_out_of_bounds():
    buf = _padded_truecolor()
    with pytest.raises(IndexError):
        buf.pixel(2, 0)
    with pytest.raises(IndexError):
        buf.pixel(0, -1)


def test_pixel_buffer_rejects_short_stride():
    with pytest.raises(ValueError):
        PixelBuffer(width=2, height=1, stride=5, bytes_per_pixel=3, data=bytes(6))


def test_pixel_buffer_rejects_short_storage():
    with pytest.raises(ValueError):
        PixelBuffer(width=2, height=2, stride=6, bytes_per_pixel=3, data=bytes(11))


def test_pixel_buffer_palette_shape_checked():
    with pytest.raises(ValueError):
        PixelBuffer(1, 1, 1, 1, bytes(1), palette=np.zeros((16, 3), dtype=np.uint8))


def test_pixel_buffer_from_array():
    arr = np.zeros((4, 5, 3), dtype=np.uint8)
    buf = PixelBuffer.from_array(arr)
    assert (buf.width, buf.height, buf.stride, buf.bytes_per_pixel) == (5, 4, 15, 3)


def test_intensity_get_set_and_rows_skip_padding():
    img = IntensityImage.blank(3, 2, stride=4)
    img.set(2, 1, 200)
    assert img.get(2, 1) == 200
    assert img.rows().shape == (2, 3)
    assert img.data[1 * 4 + 2] == 200
    with pytest.raises(IndexError):
        img.get(3, 0)
    with pytest.raises(ValueError):
        img.set(0, 0, 256)


def test_intensity_from_array_shares_memory():
    arr = np.arange(6, dtype=np.uint8).reshape(2, 3)
    img = IntensityImage.from_array(arr)
    assert np.shares_memory(img.data, arr)
    assert img.get(1, 1) == 4


def test_binary_image_two_levels_only():
    with pytest.raises(ValueError):
        BinaryImage.from_array(np.array([[0, 128]], dtype=np.uint8))
    img = BinaryImage.from_array(np.array([[0, 255]], dtype=np.uint8))
    with pytest.raises(ValueError):
        img.set(0, 0, 1)


def test_histogram_is_read_only():
    hist = Histogram.from_counts([1] * 256)
    with pytest.raises(ValueError):
        hist.counts[0] = 5
    assert hist.total == 256
    assert hist.weighted_sum == sum(range(256))
    assert hist[255] == 1


def test_histogram_validates_bins():
    with pytest.raises(ValueError):
        Histogram.from_counts([1] * 255)
    bad = [0] * 256
    bad[3] = -1
    with pytest.raises(ValueError):
        Histogram.from_counts(bad)


def test_identity_palette():
    assert IDENTITY_PALETTE.shape == (256, 3)
    assert tuple(IDENTITY_PALETTE[77]) == (77, 77, 77)
