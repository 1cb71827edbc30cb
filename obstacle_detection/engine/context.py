"""DetectionContext — the single mutable state object flowing through all stages.

Per-group results → GroupData (points, bbox, fit, features)
Grid-wide results → DetectionContext.* (occupied cells, group table)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import numpy as np
from numpy.typing import NDArray

from obstacle_detection.engine.config import DetectionConfig
from obstacle_detection.grid.groups import GroupTable
from obstacle_detection.grid.occupancy import Above, CellPredicate, CellSet, Grid
from obstacle_detection.shapes.results import FitResult
from obstacle_detection.utils.geometry import BoundingBox


@dataclass
class GroupData:
    """Data for a single group of contiguous occupied cells."""

    group_id: int
    cells: CellSet = field(default_factory=set)
    # Cell centers in plane coordinates: Nx2 array of (x, y), sorted by (row, col)
    points: NDArray[np.float64] = field(default_factory=lambda: np.empty((0, 2)))
    # Points sampled along the footprint outline; None until S1.03 runs
    boundary: NDArray[np.float64] | None = None
    bbox: BoundingBox | None = None
    # "noise", "oversized" or "empty" when the group is not classified
    rejected: str | None = None
    fit: FitResult | None = None
    error: str | None = None
    # Anything else stages want to record (keyed by feature name)
    features: dict[str, Any] = field(default_factory=dict)

    @property
    def size(self) -> int:
        return len(self.cells)

    @property
    def fit_points(self) -> NDArray[np.float64]:
        """Points the shape fit runs on: the outline if extracted, else every cell center."""
        if self.boundary is not None and len(self.boundary) > 0:
            return self.boundary
        return self.points

    @property
    def accepted(self) -> bool:
        return self.rejected is None and self.bbox is not None


@dataclass
class DetectionContext:
    """Shared state flowing through the entire pipeline."""

    grid: Grid
    config: DetectionConfig = field(default_factory=DetectionConfig)
    # Defaults to Above(config.occupancy_threshold)
    predicate: CellPredicate | None = None

    # --- Segmentation (layer 0) ---
    occupied: CellSet = field(default_factory=set)
    group_table: GroupTable = field(default_factory=dict)

    # --- Per-group state (layers 1-2) ---
    groups: list[GroupData] = field(default_factory=list)

    # --- Pipeline metadata ---
    completed_stages: set[str] = field(default_factory=set)
    errors: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.predicate is None:
            self.predicate = Above(self.config.occupancy_threshold)

    @property
    def num_groups(self) -> int:
        return len(self.group_table)

    @property
    def fits(self) -> dict[int, FitResult]:
        """Classified shape per group id."""
        return {g.group_id: g.fit for g in self.groups if g.fit is not None}
