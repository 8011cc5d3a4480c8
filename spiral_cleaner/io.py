"""Loading detector hits as ``(N, 3)`` arrays."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import numpy as np

try:  # pragma: no cover - import guard for optional dependency
    import open3d as o3d
except ModuleNotFoundError as exc:  # pragma: no cover - fallback for docs/tests
    raise RuntimeError(
        "open3d is required for spiral_cleaner.io; install it with the package dependencies"
    ) from exc


SUPPORTED_EXTENSIONS = {".ply", ".pcd", ".xyz", ".txt", ".npy"}


@dataclass(slots=True)
class LoadedHits:
    """Hit coordinates and the file they came from."""

    xyz: np.ndarray
    path: Path

    @property
    def num_points(self) -> int:
        return len(self.xyz)


def _check_columns(data: np.ndarray, path: Path) -> np.ndarray:
    if data.ndim != 2 or data.shape[1] < 3:
        raise ValueError(f"File {path} must contain at least three columns for x,y,z coordinates")
    return np.ascontiguousarray(data[:, :3], dtype=float)


def load_hits(path: str | Path) -> LoadedHits:
    """Load hit positions from a point cloud or plain-text file.

    Parameters
    ----------
    path:
        A ``.ply``/``.pcd`` cloud, a whitespace-separated ``.xyz``/``.txt``
        table, or a ``.npy`` array. Columns past the third are ignored.

    Returns
    -------
    LoadedHits
        The ``(N, 3)`` coordinates and source path.
    """

    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(p)
    suffix = p.suffix.lower()
    if suffix not in SUPPORTED_EXTENSIONS:
        raise ValueError(f"Unsupported extension '{p.suffix}'. Supported: {sorted(SUPPORTED_EXTENSIONS)}")

    if suffix in {".xyz", ".txt"}:
        data = np.loadtxt(p, dtype=float, ndmin=2)
    elif suffix == ".npy":
        data = np.load(p)
    else:
        cloud = o3d.io.read_point_cloud(str(p))
        data = np.asarray(cloud.points)
    xyz = _check_columns(data, p)
    if len(xyz) == 0:
        raise ValueError(f"File {p} contains no points")
    return LoadedHits(xyz=xyz, path=p)


def to_point_cloud(xyz: np.ndarray) -> o3d.geometry.PointCloud:
    cloud = o3d.geometry.PointCloud()
    cloud.points = o3d.utility.Vector3dVector(np.asarray(xyz, dtype=float))
    return cloud
