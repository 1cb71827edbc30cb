"""Cell index <-> plane coordinate conversion.

Plane coordinates are meters, centered on the grid origin:

    x = -((width/2 - col) * resolution)
    y =   (height/2 - row) * resolution
"""

from __future__ import annotations

from typing import Iterable

import numpy as np
from numpy.typing import NDArray

from obstacle_detection.grid.occupancy import CellIndex, Grid


def cell_to_plane(grid: Grid, cell: CellIndex) -> tuple[float, float]:
    row, col = cell
    x = -((grid.width / 2.0 - col) * grid.resolution)
    y = (grid.height / 2.0 - row) * grid.resolution
    return (x, y)


def cells_to_plane(grid: Grid, cells: Iterable[CellIndex]) -> NDArray[np.float64]:
    """Transform cell indices into an (N, 2) array of plane points.

    Order follows the iteration order of ``cells``.
    """
    idx = np.asarray(list(cells), dtype=np.float64).reshape(-1, 2)
    rows = idx[:, 0]
    cols = idx[:, 1]
    x = -((grid.width / 2.0 - cols) * grid.resolution)
    y = (grid.height / 2.0 - rows) * grid.resolution
    return np.column_stack([x, y])


def plane_to_cell(grid: Grid, point: tuple[float, float]) -> CellIndex:
    """Inverse of ``cell_to_plane``, rounding to the nearest cell."""
    x, y = point
    col = grid.width / 2.0 + x / grid.resolution
    row = grid.height / 2.0 - y / grid.resolution
    return (int(round(row)), int(round(col)))
