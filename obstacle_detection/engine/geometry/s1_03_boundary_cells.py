"""S1.03 — Boundary Outline.

Replace each accepted group's fit points with its footprint outline. The
shape score measures distance from the superellipse curve, so interior
cells of a filled blob would otherwise outweigh its edge, and cell centers
sit half a cell inside the obstacle's true extent.
"""

from __future__ import annotations

from obstacle_detection.engine.context import DetectionContext
from obstacle_detection.engine.registry import Layer, stage
from obstacle_detection.grid.transform import cells_to_plane
from obstacle_detection.utils.geometry import footprint_outline
from obstacle_detection.utils.morphology import boundary_cells

OUTLINE_SAMPLES_PER_CELL = 4


@stage(
    id="S1.03",
    layer=Layer.GEOMETRY,
    dependencies=["S1.02"],
    description="Sample the footprint outline of accepted groups",
)
def boundary_extraction(ctx: DetectionContext) -> None:
    resolution = ctx.grid.resolution
    for group in ctx.groups:
        if not group.accepted:
            continue
        outline = sorted(boundary_cells(group.cells))
        group.boundary = footprint_outline(
            cells_to_plane(ctx.grid, outline),
            resolution,
            resolution / OUTLINE_SAMPLES_PER_CELL,
        )
        group.features["boundary_size"] = len(outline)
        group.features["outline_points"] = len(group.boundary)
