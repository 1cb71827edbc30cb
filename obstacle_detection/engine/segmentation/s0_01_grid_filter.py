"""S0.01 — Grid Filter.

Select the cells of the snapshot that satisfy the context predicate
(occupied cells by default).
"""

from __future__ import annotations

import logging

from obstacle_detection.engine.context import DetectionContext
from obstacle_detection.engine.registry import Layer, stage
from obstacle_detection.grid.occupancy import filter_cells

logger = logging.getLogger(__name__)


@stage(
    id="S0.01",
    layer=Layer.SEGMENTATION,
    description="Select cells matching the occupancy predicate",
)
def grid_filter(ctx: DetectionContext) -> None:
    ctx.occupied = filter_cells(ctx.grid, ctx.predicate)
    logger.debug(
        "%d of %d cells pass %r",
        len(ctx.occupied),
        ctx.grid.width * ctx.grid.height,
        ctx.predicate,
    )
