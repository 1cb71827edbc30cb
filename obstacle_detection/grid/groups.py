"""Connected-component grouping of occupied cells.

A recursive flood fill blows the stack on large occupied regions, so this is
an iterative "pending / staging" fill:

* take a seed out of the pending set and push it onto the staging stack;
* pop a cell, add it to the current group, and move every pending cell in
  its kernel neighborhood from pending onto the staging stack;
* when staging is empty the group is complete; start the next one.

Each cell leaves the pending set exactly once, so total work is bounded by
the number of cells times the kernel area.

``kernel_size`` sets how far apart two occupied cells may be and still merge:
offsets range over ``0..kernel_size-1`` on each axis, in all four corner
directions. This tolerates gaps left by sparse laser returns.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from obstacle_detection.grid.occupancy import CellIndex, CellPredicate, CellSet, Grid, filter_cells

logger = logging.getLogger(__name__)

GroupTable = dict[int, CellSet]


def iter_neighbors(cell: CellIndex, kernel_size: int) -> Iterator[CellIndex]:
    """Yield kernel neighbors of ``cell`` (including itself), never negative."""
    row, col = cell
    for i in range(kernel_size):
        for j in range(kernel_size):
            for r in (row + i, row - i):
                if r < 0:
                    continue
                for c in (col + j, col - j):
                    if c < 0:
                        continue
                    yield (r, c)


def neighbors(cell: CellIndex, kernel_size: int) -> CellSet:
    """Return the set of kernel neighbors of a cell.

    Coordinates that would go negative are discarded rather than clamped to
    zero, so cells on row/col 0 never pick up phantom neighbors.
    """
    if kernel_size < 1:
        raise ValueError(f"kernel_size must be >= 1, got {kernel_size}")
    return set(iter_neighbors(cell, kernel_size))


def extract_groups(cells: Iterable[CellIndex], kernel_size: int) -> GroupTable:
    """Partition ``cells`` into groups of kernel-connected cells.

    Seeds are taken in ascending (row, col) order, so group ids are the same
    on every run for the same input.
    """
    if kernel_size < 1:
        raise ValueError(f"kernel_size must be >= 1, got {kernel_size}")

    pending: CellSet = set(cells)
    table: GroupTable = {}
    current_group = 0

    for seed in sorted(pending):
        if seed not in pending:
            continue
        pending.discard(seed)

        members: CellSet = set()
        staging: list[CellIndex] = [seed]
        while staging:
            cell = staging.pop()
            members.add(cell)
            found = pending.intersection(iter_neighbors(cell, kernel_size))
            pending.difference_update(found)
            staging.extend(found)

        table[current_group] = members
        current_group += 1

    logger.debug("Extracted %d groups (kernel_size=%d)", len(table), kernel_size)
    return table


def extract_groups_from_grid(grid: Grid, predicate: CellPredicate, kernel_size: int) -> GroupTable:
    """Filter the grid with ``predicate`` and group the surviving cells."""
    return extract_groups(filter_cells(grid, predicate), kernel_size)
