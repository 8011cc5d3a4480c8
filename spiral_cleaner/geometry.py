"""Coordinate transforms that unroll a spiral into (depth, arc length) space."""

from __future__ import annotations

from typing import Iterable

import numpy as np

from .errors import DegenerateGeometryError


def _as_xy(xy: np.ndarray) -> np.ndarray:
    xy = np.asarray(xy, dtype=float)
    if xy.ndim != 2 or xy.shape[1] < 2:
        raise ValueError("points array must have shape (N, 2) or wider")
    return xy[:, :2]


def center_offsets(xy: np.ndarray, center: Iterable[float]) -> np.ndarray:
    """Return ``(N, 2)`` offsets of each point from ``center``."""

    ctr = np.asarray(list(center), dtype=float)
    if ctr.shape != (2,):
        raise ValueError("center must be a 2-vector (cx, cy)")
    return _as_xy(xy) - ctr


def find_arc_length(xy: np.ndarray, center: Iterable[float]) -> np.ndarray:
    """Compute the arc length of each point about the spiral center.

    The angle is ``arctan(y / x)`` of the offset, so points mirrored through
    the center share an angle. Extra columns (e.g. z) are ignored.

    Raises
    ------
    DegenerateGeometryError
        If any point coincides with the center.
    """

    offsets = center_offsets(xy, center)
    if not np.all(np.isfinite(offsets)):
        raise ValueError("points and center must be finite")
    x_off = offsets[:, 0]
    y_off = offsets[:, 1]

    at_center = (x_off == 0) & (y_off == 0)
    if np.any(at_center):
        bad = np.flatnonzero(at_center)
        raise DegenerateGeometryError(
            f"{len(bad)} point(s) coincide with the spiral center; angle is undefined",
            indices=bad.tolist(),
        )

    rads = np.hypot(x_off, y_off)
    with np.errstate(divide="ignore"):
        thetas = np.arctan(y_off / x_off)
    return rads * thetas
