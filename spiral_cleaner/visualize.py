"""Helpers for rendering cleaned tracks with Open3D."""

from __future__ import annotations

from typing import Optional

import numpy as np

try:  # pragma: no cover - import guard for optional dependency
    import open3d as o3d
except ModuleNotFoundError as exc:  # pragma: no cover - fallback for docs/tests
    raise RuntimeError(
        "open3d is required for spiral_cleaner.visualize; install it with the package dependencies"
    ) from exc

from .cleaner import UNASSIGNED
from .io import to_point_cloud

UNASSIGNED_COLOR = np.array([0.8, 0.8, 0.8], dtype=float)
_LINE_PALETTE = np.array(
    [
        [0.894, 0.102, 0.110],
        [0.215, 0.494, 0.721],
        [0.302, 0.686, 0.290],
        [0.596, 0.306, 0.639],
        [1.000, 0.498, 0.000],
        [0.651, 0.337, 0.157],
    ],
    dtype=float,
)


def labels_to_colors(labels: np.ndarray, show_unassigned: bool = True) -> np.ndarray:
    """Map line labels to RGB colors; unassigned points are grey or black."""

    labels = np.asarray(labels, dtype=int)
    colors = _LINE_PALETTE[np.mod(labels, len(_LINE_PALETTE))]
    hidden = UNASSIGNED_COLOR if show_unassigned else np.zeros(3)
    colors[labels == UNASSIGNED] = hidden
    return colors


def build_labeled_cloud(
    xyz: np.ndarray, labels: np.ndarray, show_unassigned: bool = True
) -> o3d.geometry.PointCloud:
    if len(xyz) != len(labels):
        raise ValueError("Label array must match number of points")
    cloud = to_point_cloud(xyz)
    cloud.colors = o3d.utility.Vector3dVector(labels_to_colors(labels, show_unassigned))
    return cloud


def open_viewer(
    cloud: o3d.geometry.PointCloud,
    *,
    window_name: str = "Spiral Cleaner",
    extra: Optional[list] = None,
) -> None:
    """Open an Open3D viewer window with the supplied geometries."""

    geometries: list[o3d.geometry.Geometry] = [cloud]
    if extra:
        geometries.extend(extra)
    o3d.visualization.draw_geometries(geometries, window_name=window_name)
