"""Tests for boundary cell extraction."""

from __future__ import annotations

from obstacle_detection.utils.morphology import boundary_cells, cells_to_mask


def _block(r0: int, c0: int, rows: int, cols: int) -> set[tuple[int, int]]:
    return {(r, c) for r in range(r0, r0 + rows) for c in range(c0, c0 + cols)}


def test_empty():
    assert boundary_cells(set()) == set()


def test_single_cell():
    assert boundary_cells({(7, 2)}) == {(7, 2)}


def test_block_interior_removed():
    block = _block(3, 3, 4, 4)
    outline = boundary_cells(block)
    assert len(outline) == 12
    assert outline == block - _block(4, 4, 2, 2)


def test_three_by_three():
    assert boundary_cells(_block(0, 0, 3, 3)) == _block(0, 0, 3, 3) - {(1, 1)}


def test_rounded_block_keeps_rim():
    disc = _block(3, 3, 4, 4) - {(3, 3), (3, 6), (6, 3), (6, 6)}
    assert boundary_cells(disc) == disc - _block(4, 4, 2, 2)


def test_thin_line():
    line = {(2, c) for c in range(5)}
    assert boundary_cells(line) == line


def test_subset_of_input():
    cells = _block(10, 20, 5, 3) | {(9, 21), (15, 22)}
    assert boundary_cells(cells) <= cells


def test_mask_offsets():
    mask, r0, c0 = cells_to_mask({(5, 8), (6, 10)})
    assert (r0, c0) == (5, 8)
    assert mask.shape == (2, 3)
    assert mask[0, 0] and mask[1, 2]
    assert mask.sum() == 2
