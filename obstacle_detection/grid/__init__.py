"""Occupancy grid snapshot, cell filtering, coordinates and grouping."""

from obstacle_detection.grid.groups import GroupTable, extract_groups, extract_groups_from_grid, neighbors
from obstacle_detection.grid.occupancy import Above, Equals, Grid, GridError, filter_cells, grid_from_rows
from obstacle_detection.grid.transform import cell_to_plane, cells_to_plane, plane_to_cell

__all__ = [
    "Above",
    "Equals",
    "Grid",
    "GridError",
    "GroupTable",
    "cell_to_plane",
    "cells_to_plane",
    "extract_groups",
    "extract_groups_from_grid",
    "filter_cells",
    "grid_from_rows",
    "neighbors",
    "plane_to_cell",
]
