"""Hough-transform cleaning of spiral particle tracks."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

import numpy as np

from .config import HoughSpiralCleanerConfig
from .errors import ZeroWeightPeakError
from .geometry import find_arc_length
from .hough import CircularHoughTransform, HoughSpace, LinearHoughTransform
from .peaks import center_of_gravity, find_peak_locations

logger = logging.getLogger(__name__)

UNASSIGNED = -1
NUM_RADIUS_PEAKS = 2


def hough_line_arc_length(zs: np.ndarray, rad: float, theta: float) -> np.ndarray:
    """Solve ``z cos(theta) + s sin(theta) = rad`` for the arc length ``s``."""

    with np.errstate(divide="ignore", invalid="ignore"):
        return (rad - np.asarray(zs, dtype=float) * np.cos(theta)) / np.sin(theta)


def distance_to_line(zs: np.ndarray, arclens: np.ndarray, rad: float, theta: float) -> np.ndarray:
    """Arc-length gap between each point and the line ``(theta, rad)``."""

    with np.errstate(invalid="ignore"):
        return np.abs(hough_line_arc_length(zs, rad, theta) - np.asarray(arclens, dtype=float))


@dataclass(slots=True)
class HoughSpiralCleanerResult:
    """Per-point line labels and distances, plus per-line point counts.

    Build with :meth:`for_points` and change only through :meth:`assign`
    and :meth:`unassign` so the three arrays never drift apart.
    """

    labels: np.ndarray
    distances: np.ndarray
    points_per_line: np.ndarray

    @classmethod
    def for_points(cls, num_points: int, num_lines: int = 0) -> "HoughSpiralCleanerResult":
        return cls(
            labels=np.full(num_points, UNASSIGNED, dtype=int),
            distances=np.full(num_points, np.inf, dtype=float),
            points_per_line=np.zeros(num_lines, dtype=int),
        )

    @property
    def num_points(self) -> int:
        return len(self.labels)

    @property
    def num_lines(self) -> int:
        return len(self.points_per_line)

    def assign(self, mask: np.ndarray, line_idx: int, distances: np.ndarray) -> None:
        """Move the points in ``mask`` to ``line_idx`` with the given distances."""

        previous = self.labels[mask]
        np.subtract.at(self.points_per_line, previous[previous != UNASSIGNED], 1)
        self.points_per_line[line_idx] += int(np.count_nonzero(mask))
        self.labels[mask] = line_idx
        self.distances[mask] = distances[mask]

    def unassign(self, line_idx: int) -> int:
        """Send every point on ``line_idx`` back to unassigned.

        The line's count is left untouched. Returns the number of points reset.
        """

        members = self.labels == line_idx
        self.labels[members] = UNASSIGNED
        self.distances[members] = np.inf
        return int(np.count_nonzero(members))

    def line_mask(self, line_idx: int) -> np.ndarray:
        return self.labels == line_idx

    def assigned_mask(self) -> np.ndarray:
        return self.labels != UNASSIGNED


@dataclass(slots=True)
class SpiralCleaningOutcome:
    """Everything produced by one :meth:`HoughSpiralCleaner.clean` pass."""

    result: HoughSpiralCleanerResult
    arclens: np.ndarray
    hough_space: HoughSpace
    max_angle_bin: int
    max_angle: float
    radius_bins: List[float]
    radii: np.ndarray

    @property
    def surviving_lines(self) -> List[int]:
        return sorted(int(v) for v in np.unique(self.result.labels) if v != UNASSIGNED)


class HoughSpiralCleaner:
    """Find the straight lines a spiral track forms in (z, arc length) space."""

    def __init__(self, config: Optional[HoughSpiralCleanerConfig] = None):
        config = config or HoughSpiralCleanerConfig()
        config.validate()
        self.config = config
        self.lin_hough = LinearHoughTransform(config.linear_hough_num_bins, config.linear_hough_max_radius)
        self.circ_hough = CircularHoughTransform(config.circular_hough_num_bins, config.circular_hough_max_radius)

    def find_arc_length(self, xy: np.ndarray, center: Iterable[float]) -> np.ndarray:
        return find_arc_length(xy, center)

    def find_center(self, xyz: np.ndarray) -> np.ndarray:
        """Estimate the spiral center from the xy projection of the track."""

        center = self.circ_hough.find_center(np.asarray(xyz, dtype=float)[:, :2])
        logger.debug("Circular Hough center estimate: (%.3f, %.3f)", center[0], center[1])
        return center

    def find_hough_space(self, zs: np.ndarray, arclens: np.ndarray) -> HoughSpace:
        zs = np.asarray(zs, dtype=float)
        arclens = np.asarray(arclens, dtype=float)
        if zs.shape != arclens.shape or zs.ndim != 1:
            raise ValueError("zs and arclens must be 1D arrays of equal length")
        return self.lin_hough.find_hough_space(np.column_stack([zs, arclens]))

    def find_max_angle_bin(self, hough_space: HoughSpace) -> int:
        """Mean angle bin of the ``num_angle_bins_to_reduce`` heaviest bins."""

        num_bins = hough_space.num_bins
        count = min(self.config.num_angle_bins_to_reduce, num_bins * num_bins)

        flat_order = np.argsort(hough_space.data, axis=None, kind="stable")
        top = flat_order[-count:]
        angle_bins, radius_bins = np.unravel_index(top, hough_space.data.shape)

        mean_bin = np.floor_divide(np.array([angle_bins.sum(), radius_bins.sum()]), count)
        logger.debug("Dominant bin (angle, radius) = (%d, %d)", mean_bin[0], mean_bin[1])
        return int(mean_bin[0])

    def find_max_angle_slice(self, hough_space: HoughSpace, max_angle_bin: int) -> np.ndarray:
        half = self.config.hough_space_slice_size
        block = hough_space.angular_slice(max_angle_bin - half, 2 * half)
        return block.sum(axis=0)

    def find_peak_radius_bins(self, hough_slice: np.ndarray) -> List[float]:
        """Centroid-refined radius bin positions of the strongest peaks in a slice."""

        peak_ctrs: List[float] = []
        for pk_idx in find_peak_locations(hough_slice, NUM_RADIUS_PEAKS):
            try:
                peak_ctrs.append(center_of_gravity(hough_slice, pk_idx, self.config.peak_width))
            except ZeroWeightPeakError as exc:
                logger.warning("Dropping peak at bin %d: %s", exc.peak_bin, exc)
        return peak_ctrs

    def classify_points(
        self,
        xyz: np.ndarray,
        arclens: np.ndarray,
        max_angle: float,
        radii: Iterable[float],
    ) -> HoughSpiralCleanerResult:
        """Label each point with its nearest line, then drop thin lines.

        Lines are tried in order and a point only moves on a strictly smaller
        distance, so ties stay with the earlier line.
        """

        xyz = np.asarray(xyz, dtype=float)
        arclens = np.asarray(arclens, dtype=float)
        radii = np.asarray(list(radii), dtype=float)
        if xyz.ndim != 2 or xyz.shape[1] < 3:
            raise ValueError("xyz must have shape (N, 3)")
        if arclens.shape != (len(xyz),):
            raise ValueError("arclens must have one entry per point")

        result = HoughSpiralCleanerResult.for_points(len(xyz), len(radii))
        for line_idx, rad in enumerate(radii):
            dist = distance_to_line(xyz[:, 2], arclens, rad, max_angle)
            with np.errstate(invalid="ignore"):
                closer = dist < result.distances
            result.assign(closer, line_idx, dist)

        for line_idx in range(len(radii)):
            if result.points_per_line[line_idx] < self.config.min_points_per_line:
                n_reset = result.unassign(line_idx)
                logger.debug(
                    "Eliminated line %d (radius %.3f): %d points < %d",
                    line_idx, radii[line_idx], n_reset, self.config.min_points_per_line,
                )

        return result

    def clean(self, xyz: np.ndarray, center: Iterable[float]) -> SpiralCleaningOutcome:
        """Run one full cleaning pass over ``xyz`` about ``center``."""

        xyz = np.asarray(xyz, dtype=float)
        if xyz.ndim != 2 or xyz.shape[1] < 3:
            raise ValueError("xyz must have shape (N, 3)")

        arclens = self.find_arc_length(xyz[:, :2], center)
        hough_space = self.find_hough_space(xyz[:, 2], arclens)
        max_angle_bin = self.find_max_angle_bin(hough_space)
        max_angle = float(hough_space.bin_to_angle(max_angle_bin))
        hough_slice = self.find_max_angle_slice(hough_space, max_angle_bin)
        radius_bins = self.find_peak_radius_bins(hough_slice)
        radii = np.atleast_1d(hough_space.bin_to_radius(radius_bins))
        logger.debug("Angle %.4f rad (bin %d), radii %s", max_angle, max_angle_bin, radii)

        result = self.classify_points(xyz, arclens, max_angle, radii)
        outcome = SpiralCleaningOutcome(
            result=result,
            arclens=arclens,
            hough_space=hough_space,
            max_angle_bin=max_angle_bin,
            max_angle=max_angle,
            radius_bins=radius_bins,
            radii=radii,
        )
        logger.info(
            "Cleaned %d points: %d candidate line(s), %d kept, %d points assigned",
            result.num_points, len(radii), len(outcome.surviving_lines),
            int(np.count_nonzero(result.assigned_mask())),
        )
        return outcome
