"""Typed errors raised by the spiral cleaning pipeline."""

from __future__ import annotations


class SpiralCleanerError(Exception):
    """Base class for every failure surfaced by a cleaning pass."""

    code = "spiral_cleaner"

    def __init__(self, message: str, context: str = ""):
        super().__init__(message)
        self.context = context


class DegenerateGeometryError(SpiralCleanerError):
    """A point sits exactly on the spiral center, so its angle is undefined."""

    code = "degenerate_geometry"

    def __init__(self, message: str, indices=None, context: str = ""):
        super().__init__(message, context)
        self.indices = [] if indices is None else list(indices)


class ZeroWeightPeakError(SpiralCleanerError):
    """The window around a peak holds no weight, so it has no centroid."""

    code = "zero_weight_peak"

    def __init__(self, message: str, peak_bin: int, context: str = ""):
        super().__init__(message, context)
        self.peak_bin = peak_bin


class ConfigurationError(SpiralCleanerError, ValueError):
    code = "configuration"


class HoughSpaceError(SpiralCleanerError, ValueError):
    code = "hough_space"
