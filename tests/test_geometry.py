"""Unit tests for the arc-length transform."""

from __future__ import annotations

import math

import pytest

np = pytest.importorskip("numpy")

from spiral_cleaner.errors import DegenerateGeometryError
from spiral_cleaner.geometry import center_offsets, find_arc_length


def test_arc_length_first_quadrant() -> None:
    arclens = find_arc_length(np.array([[1.0, 1.0], [2.0, 0.0]]), (0.0, 0.0))
    assert arclens[0] == pytest.approx(math.sqrt(2) * math.pi / 4)
    assert arclens[1] == pytest.approx(0.0)


def test_arc_length_uses_ratio_arctangent() -> None:
    pts = np.array([[1.0, 1.0], [-1.0, -1.0], [-1.0, 1.0]])
    arclens = find_arc_length(pts, (0.0, 0.0))
    # mirrored through the center -> same angle
    assert arclens[1] == pytest.approx(arclens[0])
    assert arclens[2] == pytest.approx(-arclens[0])


def test_arc_length_on_vertical_axis() -> None:
    arclens = find_arc_length(np.array([[3.0, 2.0], [3.0, -4.0]]), (3.0, 0.0))
    assert arclens[0] == pytest.approx(2.0 * math.pi / 2)
    assert arclens[1] == pytest.approx(-4.0 * math.pi / 2)


def test_arc_length_ignores_z_column() -> None:
    xyz = np.array([[1.0, 1.0, 50.0], [2.0, 1.0, -3.0]])
    assert np.allclose(find_arc_length(xyz, (0.0, 0.0)), find_arc_length(xyz[:, :2], (0.0, 0.0)))


def test_point_at_center_fails_explicitly() -> None:
    with pytest.raises(DegenerateGeometryError) as info:
        find_arc_length(np.array([[2.0, -1.0, 7.0]]), (2.0, -1.0))
    assert info.value.indices == [0]
    assert info.value.code == "degenerate_geometry"


def test_degenerate_indices_reported() -> None:
    pts = np.array([[1.0, 0.0], [0.0, 0.0], [0.0, 1.0], [0.0, 0.0]])
    with pytest.raises(DegenerateGeometryError) as info:
        find_arc_length(pts, (0.0, 0.0))
    assert info.value.indices == [1, 3]


def test_non_finite_input_rejected() -> None:
    with pytest.raises(ValueError):
        find_arc_length(np.array([[np.nan, 1.0]]), (0.0, 0.0))


def test_center_must_be_two_dimensional() -> None:
    with pytest.raises(ValueError):
        center_offsets(np.zeros((2, 2)), (0.0, 0.0, 0.0))
