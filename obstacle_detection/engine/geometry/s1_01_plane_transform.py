"""S1.01 — Plane Transform.

Create one GroupData per group and convert its cells to plane coordinates.
"""

from __future__ import annotations

import logging

from obstacle_detection.engine.context import DetectionContext, GroupData
from obstacle_detection.engine.registry import Layer, stage
from obstacle_detection.grid.transform import cells_to_plane

logger = logging.getLogger(__name__)


@stage(
    id="S1.01",
    layer=Layer.GEOMETRY,
    dependencies=["S0.02"],
    description="Convert group cells to plane coordinates",
)
def plane_transform(ctx: DetectionContext) -> None:
    ctx.groups = []
    for group_id in sorted(ctx.group_table):
        cells = ctx.group_table[group_id]
        group = GroupData(group_id=group_id, cells=set(cells))
        if not cells:
            logger.warning("Group %d is empty, skipping", group_id)
            group.rejected = "empty"
        else:
            group.points = cells_to_plane(ctx.grid, sorted(cells))
        ctx.groups.append(group)
