"""Peak finding and sub-bin refinement on 1D Hough profiles."""

from __future__ import annotations

from typing import List

import numpy as np
from scipy.signal import find_peaks

from .errors import ZeroWeightPeakError


def find_peak_locations(values: np.ndarray, num_peaks: int) -> List[int]:
    """Return up to ``num_peaks`` local-maximum positions, highest first.

    Equal heights keep their left-to-right order.
    """

    values = np.asarray(values, dtype=float)
    if values.ndim != 1:
        raise ValueError("values must be one-dimensional")
    if num_peaks <= 0:
        return []

    peaks, _ = find_peaks(values)
    order = np.argsort(-values[peaks], kind="stable")
    return [int(p) for p in peaks[order][:num_peaks]]


def center_of_gravity(values: np.ndarray, peak: int, half_width: int) -> float:
    """Weighted mean bin position in ``[peak - half_width, peak + half_width]``.

    The window is clipped to the array bounds.
    """

    values = np.asarray(values, dtype=float)
    first = max(peak - half_width, 0)
    last = min(peak + half_width, len(values) - 1)

    positions = np.arange(first, last + 1, dtype=float)
    weights = values[first:last + 1]
    total = weights.sum()
    if total == 0:
        raise ZeroWeightPeakError(
            f"window [{first}, {last}] around peak {peak} has zero weight",
            peak_bin=peak,
        )
    return float(positions @ weights / total)
