"""Unit tests for the Hough accumulators."""

from __future__ import annotations

import math

import pytest

np = pytest.importorskip("numpy")

from spiral_cleaner.errors import HoughSpaceError
from spiral_cleaner.hough import CircularHoughTransform, HoughSpace, LinearHoughTransform


def line_points(theta: float, rad: float, n_points: int = 100) -> np.ndarray:
    xs = np.linspace(-10.0, 10.0, n_points)
    ys = (rad - xs * math.cos(theta)) / math.sin(theta)
    return np.column_stack([xs, ys])


def test_line_votes_collect_in_one_bin() -> None:
    transform = LinearHoughTransform(180, 20.0)
    space = transform.find_hough_space(line_points(math.pi / 4, 5.0))
    radius_bin = int(space.radius_to_bin(5.0))
    assert space.num_bins == 180
    assert radius_bin == 112
    assert space.value_at_bin(45, radius_bin) == 100
    assert space.data.max() == 100


def test_every_point_votes_once_per_angle_when_in_range() -> None:
    transform = LinearHoughTransform(36, 50.0)
    space = transform.find_hough_space(np.array([[1.0, 2.0], [-3.0, 0.5]]))
    assert np.all(space.data.sum(axis=1) == 2)


def test_votes_outside_radius_range_dropped() -> None:
    transform = LinearHoughTransform(36, 1.0)
    space = transform.find_hough_space(np.array([[100.0, 100.0]]))
    assert space.data.sum() < 36


def test_empty_input_gives_empty_space() -> None:
    space = LinearHoughTransform(10, 1.0).find_hough_space(np.zeros((0, 2)))
    assert space.data.shape == (10, 10)
    assert not np.any(space.data)


def test_linear_input_shape_checked() -> None:
    with pytest.raises(HoughSpaceError):
        LinearHoughTransform(10, 1.0).find_hough_space(np.zeros((4, 3)))


def test_space_is_read_only() -> None:
    space = HoughSpace(np.zeros((4, 4)), 1.0)
    with pytest.raises(ValueError):
        space.data[0, 0] = 1.0


def test_space_must_be_square() -> None:
    with pytest.raises(HoughSpaceError):
        HoughSpace(np.zeros((4, 5)), 1.0)


def test_angular_slice_inside_and_clamped() -> None:
    data = np.repeat(np.arange(10, dtype=float)[:, np.newaxis], 10, axis=1)
    space = HoughSpace(data, 1.0)

    block = space.angular_slice(3, 4)
    assert block.shape == (4, 10)
    assert list(block[:, 0]) == [3, 4, 5, 6]

    assert list(space.angular_slice(-3, 4)[:, 0]) == [0, 1, 2, 3]
    assert list(space.angular_slice(8, 4)[:, 0]) == [6, 7, 8, 9]


def test_angular_slice_is_a_copy() -> None:
    space = HoughSpace(np.ones((4, 4)), 1.0)
    block = space.angular_slice(0, 2)
    block[:] = 0.0
    assert space.value_at_bin(0, 0) == 1.0


def test_angular_slice_width_checked() -> None:
    space = HoughSpace(np.ones((4, 4)), 1.0)
    with pytest.raises(HoughSpaceError):
        space.angular_slice(0, 0)
    with pytest.raises(HoughSpaceError):
        space.angular_slice(0, 5)


def test_bin_mapping() -> None:
    space = HoughSpace(np.zeros((180, 180)), 20.0)
    assert space.bin_to_angle(45) == pytest.approx(math.pi / 4)
    assert space.bin_to_radius(112) == pytest.approx(5.0)
    assert space.bin_to_radius(0) == pytest.approx(-20.0 + 20.0 / 180)
    assert np.allclose(space.bin_to_radius([111.5, 112.5]), [4.8888889, 5.1111111])


def test_circular_hough_finds_center() -> None:
    center = np.array([3.1 * math.cos(math.pi / 4), 3.1 * math.sin(math.pi / 4)])
    phis = np.linspace(0.0, 1.5 * math.pi, 120)
    xy = center + 8.0 * np.column_stack([np.cos(phis), np.sin(phis)])

    transform = CircularHoughTransform(200, 20.0)
    space = transform.find_hough_space(xy)
    assert np.unravel_index(np.argmax(space.data), space.data.shape) == (50, 115)
    assert np.allclose(transform.find_center(xy), center, atol=1e-6)


def test_circular_hough_needs_two_points() -> None:
    with pytest.raises(HoughSpaceError):
        CircularHoughTransform(10, 5.0).find_center(np.array([[1.0, 2.0]]))


def test_circular_hough_empty_space_raises() -> None:
    xy = np.column_stack([np.linspace(10.0, 20.0, 10), np.zeros(10)])
    transform = CircularHoughTransform(50, 5.0)
    assert not np.any(transform.find_hough_space(xy).data)
    with pytest.raises(HoughSpaceError):
        transform.find_center(xy)
