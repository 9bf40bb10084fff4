import numpy as np

from autothresh.buffers import IntensityImage
from autothresh.histogram import _split_rows, build_histogram


def test_counts_sum_to_pixel_count():
    rng = np.random.default_rng(0)
    arr = rng.integers(0, 256, size=(37, 53), dtype=np.uint8)
    hist = build_histogram(IntensityImage.from_array(arr))
    assert hist.total == 37 * 53
    assert hist.counts.tolist() == np.bincount(arr.ravel(), minlength=256).tolist()


def test_row_padding_not_counted():
    data = np.full(2 * 5, 7, dtype=np.uint8)
    data[[0, 1, 2, 5, 6, 7]] = 0
    img = IntensityImage(width=3, height=2, stride=5, data=data)
    hist = build_histogram(img)
    assert hist[0] == 6
    assert hist[7] == 0
    assert hist.total == 6


def test_two_pixel_image():
    img = IntensityImage.from_array(np.array([[0, 255]], dtype=np.uint8))
    hist = build_histogram(img)
    assert hist[0] == 1 and hist[255] == 1
    assert hist.total == 2
    assert np.count_nonzero(hist.counts) == 2


def test_threaded_bands_match_single_pass():
    rng = np.random.default_rng(1)
    arr = rng.integers(0, 256, size=(300, 40), dtype=np.uint8)
    img = IntensityImage.from_array(arr)
    single = build_histogram(img, workers=1)
    threaded = build_histogram(img, workers=4)
    assert threaded.counts.tolist() == single.counts.tolist()
    assert threaded.total == 300 * 40


def test_empty_image():
    hist = build_histogram(IntensityImage.blank(0, 0))
    assert hist.total == 0


def test_split_rows_covers_height():
    spans = _split_rows(10, 3)
    assert spans[0][0] == 0 and spans[-1][1] == 10
    assert all(a[1] == b[0] for a, b in zip(spans, spans[1:]))
