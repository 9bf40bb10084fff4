"""
autothresh/errors.py
--------------------
Exceptions raised by the thresholding pipeline.

Missing or nonexistent input paths are not exceptions: the CLI reports them
and returns.
"""


class ThresholdingError(Exception):
    """Base class for every error raised by autothresh."""


class UnsupportedPixelFormat(ThresholdingError):
    """The pixel buffer's channel layout or bit depth cannot be interpreted."""


class EmptyHistogram(ThresholdingError):
    """A threshold was requested for a histogram whose total count is zero."""


class ImageReadError(ThresholdingError):
    """OpenCV could not decode the input file."""


class ImageWriteError(ThresholdingError):
    """OpenCV could not encode or write an output file."""
