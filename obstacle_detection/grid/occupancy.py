"""Occupancy grid snapshot and cell filtering.

A grid arrives as a flat, row-major sequence of signed 8-bit values:
-1 = unknown, 0..100 = occupancy probability. Filtering turns that flat
array into a set of (row, col) indices so the rest of the engine can think
in terms of cells.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Sequence

import numpy as np
from numpy.typing import NDArray

logger = logging.getLogger(__name__)

CellIndex = tuple[int, int]
CellSet = set[CellIndex]

# A predicate maps an int8 array of cell values to a boolean mask.
CellPredicate = Callable[[NDArray[np.int8]], NDArray[np.bool_]]

CELL_MIN = -128
CELL_MAX = 127


class GridError(ValueError):
    """Raised for a malformed grid snapshot."""


@dataclass(frozen=True, eq=False)
class Grid:
    """Immutable occupancy grid snapshot."""

    width: int
    height: int
    resolution: float  # meters per cell
    data: NDArray[np.int8] = field(repr=False)

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise GridError(f"Grid dimensions must be non-negative, got {self.width}x{self.height}")
        if not self.resolution > 0:
            raise GridError(f"Grid resolution must be positive, got {self.resolution}")

        raw = np.asarray(self.data)
        if raw.ndim != 1:
            raw = raw.reshape(-1)
        if raw.size != self.width * self.height:
            raise GridError(
                f"Grid data has {raw.size} cells, expected {self.width}x{self.height}={self.width * self.height}"
            )
        if raw.size and (raw.min() < CELL_MIN or raw.max() > CELL_MAX):
            raise GridError(f"Grid values must lie in [{CELL_MIN}, {CELL_MAX}]")

        values = raw.astype(np.int8, copy=True)
        values.setflags(write=False)
        object.__setattr__(self, "data", values)

    @classmethod
    def from_message(cls, msg: Mapping[str, Any]) -> "Grid":
        """Build a grid from a transport message ``{width, height, resolution, data}``."""
        try:
            return cls(
                width=int(msg["width"]),
                height=int(msg["height"]),
                resolution=float(msg["resolution"]),
                data=np.asarray(msg["data"], dtype=np.int64),
            )
        except KeyError as e:
            raise GridError(f"Grid message missing field: {e.args[0]}") from e


@dataclass(frozen=True)
class Above:
    """Cells strictly above a threshold, e.g. ``Above(50)`` for occupied."""

    threshold: int

    def __call__(self, values: NDArray[np.int8]) -> NDArray[np.bool_]:
        return values.astype(np.int16) > self.threshold


@dataclass(frozen=True)
class Equals:
    """Cells holding exactly one value, e.g. ``Equals(-1)`` for unknown."""

    value: int

    def __call__(self, values: NDArray[np.int8]) -> NDArray[np.bool_]:
        return values.astype(np.int16) == self.value


def filter_cells(grid: Grid, predicate: CellPredicate) -> CellSet:
    """Return the (row, col) indices of every cell satisfying the predicate."""
    if grid.width == 0 or grid.height == 0:
        return set()

    mask = np.asarray(predicate(grid.data), dtype=bool)
    if mask.shape != grid.data.shape:
        raise ValueError(f"Predicate returned shape {mask.shape}, expected {grid.data.shape}")

    indices = np.flatnonzero(mask)
    rows = indices // grid.width
    cols = indices % grid.width

    cells = {(int(r), int(c)) for r, c in zip(rows, cols)}
    logger.debug("Filter kept %d of %d cells", len(cells), grid.data.size)
    return cells


def grid_from_rows(rows: Sequence[Sequence[int]], resolution: float) -> Grid:
    """Build a grid from a list of rows (row 0 first). Handy for fixtures."""
    arr = np.asarray(rows, dtype=np.int64)
    if arr.ndim != 2:
        raise GridError("Rows must form a 2-D array")
    height, width = arr.shape
    return Grid(width=width, height=height, resolution=resolution, data=arr.reshape(-1))
