"""Morphological operations on cell sets."""

from __future__ import annotations

import numpy as np
from scipy import ndimage

from obstacle_detection.grid.occupancy import CellSet

# 4-connected structuring element
_CROSS = ndimage.generate_binary_structure(2, 1)


def cells_to_mask(cells: CellSet) -> tuple[np.ndarray, int, int]:
    """Rasterize a cell set into its tight boolean mask.

    Returns (mask, row_offset, col_offset).
    """
    rows = np.fromiter((r for r, _ in cells), dtype=np.int64, count=len(cells))
    cols = np.fromiter((c for _, c in cells), dtype=np.int64, count=len(cells))
    r0, c0 = int(rows.min()), int(cols.min())
    mask = np.zeros((int(rows.max()) - r0 + 1, int(cols.max()) - c0 + 1), dtype=bool)
    mask[rows - r0, cols - c0] = True
    return mask, r0, c0


def boundary_cells(cells: CellSet) -> CellSet:
    """Cells of the set with at least one 4-neighbour outside it.

    A cell survives erosion only when all four neighbours are in the set;
    the boundary is whatever erosion removes.
    """
    if not cells:
        return set()

    mask, r0, c0 = cells_to_mask(cells)
    interior = ndimage.binary_erosion(mask, structure=_CROSS, border_value=0)
    edge = mask & ~interior

    rr, cc = np.nonzero(edge)
    return {(int(r) + r0, int(c) + c0) for r, c in zip(rr, cc)}
