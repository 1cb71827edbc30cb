"""Shared test fixtures."""

from __future__ import annotations

import math

import numpy as np
import pytest

from obstacle_detection.grid.occupancy import Grid, grid_from_rows

RESOLUTION = 0.05


def square_rows() -> list[list[int]]:
    """10x10 grid with a 4x4 block of occupied cells at rows/cols 3..6."""
    return [[100 if 3 <= r <= 6 and 3 <= c <= 6 else 0 for c in range(10)] for r in range(10)]


def disc_rows() -> list[list[int]]:
    """10x10 grid with the 13 cells within 2 cells of cell (5, 5)."""
    return [[100 if (r - 5) ** 2 + (c - 5) ** 2 <= 4 else 0 for c in range(10)] for r in range(10)]


def circle_points(center: tuple[float, float], radius: float, n: int = 36) -> np.ndarray:
    angles = np.linspace(0.0, 2 * math.pi, n, endpoint=False)
    return np.column_stack([center[0] + radius * np.cos(angles), center[1] + radius * np.sin(angles)])


def rectangle_points(
    center: tuple[float, float],
    width: float,
    length: float,
    rotation: float,
    spacing: float = 0.02,
) -> np.ndarray:
    """Points along the perimeter of a rotated rectangle.

    ``width`` lies along ``rotation``, ``length`` across it.
    """
    hw, hl = width / 2.0, length / 2.0
    corners = [(-hw, -hl), (hw, -hl), (hw, hl), (-hw, hl)]
    local = []
    for (x0, y0), (x1, y1) in zip(corners, corners[1:] + corners[:1]):
        steps = max(1, int(round(math.hypot(x1 - x0, y1 - y0) / spacing)))
        for t in np.arange(steps) / steps:
            local.append((x0 + (x1 - x0) * t, y0 + (y1 - y0) * t))
    local_arr = np.asarray(local)
    cos_t, sin_t = math.cos(rotation), math.sin(rotation)
    x = center[0] + local_arr[:, 0] * cos_t - local_arr[:, 1] * sin_t
    y = center[1] + local_arr[:, 0] * sin_t + local_arr[:, 1] * cos_t
    return np.column_stack([x, y])


@pytest.fixture
def square_grid() -> Grid:
    return grid_from_rows(square_rows(), RESOLUTION)


@pytest.fixture
def disc_grid() -> Grid:
    return grid_from_rows(disc_rows(), RESOLUTION)


@pytest.fixture
def empty_grid() -> Grid:
    return grid_from_rows([[0] * 10 for _ in range(10)], RESOLUTION)


@pytest.fixture
def scattered_grid() -> Grid:
    """Two blobs, a lone noisy cell and some unknown (-1) cells."""
    rows = [[0] * 12 for _ in range(12)]
    for r in range(1, 4):
        for c in range(1, 4):
            rows[r][c] = 90
    for r in range(7, 11):
        for c in range(6, 9):
            rows[r][c] = 100
    rows[0][11] = 75
    rows[5][5] = -1
    rows[11][0] = -1
    return grid_from_rows(rows, RESOLUTION)
