"""Hough accumulators over (angle, radius) space."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .errors import HoughSpaceError


@dataclass(slots=True)
class HoughSpace:
    """A square accumulator with angle bins along rows and radius bins along columns.

    Angle bin ``i`` stands for ``i * pi / B``. Radius bins split
    ``[-max_radius, max_radius]`` evenly.
    """

    data: np.ndarray
    max_radius: float

    def __post_init__(self) -> None:
        data = np.array(self.data, dtype=float)
        if data.ndim != 2 or data.shape[0] != data.shape[1] or data.shape[0] == 0:
            raise HoughSpaceError(f"Hough space must be a non-empty square array, got shape {data.shape}")
        if self.max_radius <= 0:
            raise HoughSpaceError("max_radius must be positive")
        data.setflags(write=False)
        self.data = data

    @property
    def num_bins(self) -> int:
        return self.data.shape[0]

    @property
    def radius_bin_width(self) -> float:
        return 2.0 * self.max_radius / self.num_bins

    def value_at_bin(self, angle_bin: int, radius_bin: int) -> float:
        return float(self.data[angle_bin, radius_bin])

    def angular_slice(self, start: int, width: int) -> np.ndarray:
        """Return a ``(width, B)`` copy of consecutive angle rows.

        A band that would run past either edge is shifted back inside the
        space, so the result always has ``width`` rows.
        """

        if not 1 <= width <= self.num_bins:
            raise HoughSpaceError(f"slice width must be in [1, {self.num_bins}], got {width}")
        first = min(max(int(start), 0), self.num_bins - width)
        return self.data[first:first + width].copy()

    def bin_to_angle(self, angle_bin):
        return np.asarray(angle_bin, dtype=float) * np.pi / self.num_bins

    def bin_to_radius(self, radius_bin):
        """Map a (possibly fractional) radius bin position to a radius."""

        return -self.max_radius + (np.asarray(radius_bin, dtype=float) + 0.5) * self.radius_bin_width

    def radius_to_bin(self, radius) -> np.ndarray:
        return np.floor_divide(np.asarray(radius, dtype=float) + self.max_radius, self.radius_bin_width).astype(int)


class _HoughTransform:
    def __init__(self, num_bins: int, max_radius: float):
        if num_bins < 1:
            raise HoughSpaceError("num_bins must be at least 1")
        if max_radius <= 0:
            raise HoughSpaceError("max_radius must be positive")
        self.num_bins = int(num_bins)
        self.max_radius = float(max_radius)

    def thetas(self) -> np.ndarray:
        return np.arange(self.num_bins) * np.pi / self.num_bins

    def _accumulate(self, rads: np.ndarray) -> HoughSpace:
        """Vote an ``(M, B)`` array of radii (one column per angle bin)."""

        space = np.zeros((self.num_bins, self.num_bins), dtype=float)
        if rads.size:
            bin_width = 2.0 * self.max_radius / self.num_bins
            with np.errstate(invalid="ignore"):
                finite = np.isfinite(rads)
                rad_bins = np.floor_divide(np.where(finite, rads, 0.0) + self.max_radius, bin_width)
            angle_bins = np.broadcast_to(np.arange(self.num_bins), rads.shape)
            valid = finite & (rad_bins >= 0) & (rad_bins < self.num_bins)
            np.add.at(space, (angle_bins[valid], rad_bins[valid].astype(int)), 1.0)
        return HoughSpace(space, self.max_radius)


class LinearHoughTransform(_HoughTransform):
    """Hough transform for straight lines ``x cos(t) + y sin(t) = r``."""

    def find_hough_space(self, data: np.ndarray) -> HoughSpace:
        data = np.asarray(data, dtype=float)
        if data.ndim != 2 or data.shape[1] != 2:
            raise HoughSpaceError("linear Hough input must have shape (N, 2)")

        thetas = self.thetas()
        rads = np.outer(data[:, 0], np.cos(thetas)) + np.outer(data[:, 1], np.sin(thetas))
        return self._accumulate(rads)


class CircularHoughTransform(_HoughTransform):
    """Hough transform locating the center of a circular arc in the xy plane.

    Each pair of points votes, for every angle bin, for the point on that ray
    that is equidistant from both, i.e. where the pair's perpendicular
    bisector crosses the ray. The true center collects votes from every pair.
    """

    def find_hough_space(self, xy: np.ndarray) -> HoughSpace:
        xy = np.asarray(xy, dtype=float)
        if xy.ndim != 2 or xy.shape[1] < 2:
            raise HoughSpaceError("circular Hough input must have shape (N, 2) or wider")
        xy = xy[:, :2]
        n_pts = len(xy)
        if n_pts < 2:
            raise HoughSpaceError("circular Hough transform needs at least two points")

        partner = (np.arange(n_pts) + n_pts // 2) % n_pts
        p0 = xy
        p1 = xy[partner]
        numer = np.sum(p1 ** 2, axis=1) - np.sum(p0 ** 2, axis=1)
        diff = p1 - p0

        thetas = self.thetas()
        denom = 2.0 * (np.outer(diff[:, 0], np.cos(thetas)) + np.outer(diff[:, 1], np.sin(thetas)))
        with np.errstate(divide="ignore", invalid="ignore"):
            rads = numer[:, np.newaxis] / denom
        return self._accumulate(rads)

    def find_center(self, xy: np.ndarray) -> np.ndarray:
        """Return the ``(cx, cy)`` with the most votes."""

        space = self.find_hough_space(xy)
        if not np.any(space.data):
            raise HoughSpaceError("circular Hough space is empty; no center found")
        angle_bin, radius_bin = np.unravel_index(np.argmax(space.data), space.data.shape)
        theta = float(space.bin_to_angle(angle_bin))
        rad = float(space.bin_to_radius(radius_bin))
        return np.array([rad * np.cos(theta), rad * np.sin(theta)])
