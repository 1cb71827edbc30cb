"""S0.02 — Group Extraction.

Partition the filtered cells into spatially contiguous groups.
"""

from __future__ import annotations

import logging

from obstacle_detection.engine.context import DetectionContext
from obstacle_detection.engine.registry import Layer, stage
from obstacle_detection.grid.groups import extract_groups

logger = logging.getLogger(__name__)


@stage(
    id="S0.02",
    layer=Layer.SEGMENTATION,
    dependencies=["S0.01"],
    description="Flood-fill filtered cells into contiguous groups",
)
def group_extraction(ctx: DetectionContext) -> None:
    ctx.group_table = extract_groups(ctx.occupied, ctx.config.kernel_size)
    logger.info(
        "Extracted %d groups from %d cells (kernel %d)",
        len(ctx.group_table),
        len(ctx.occupied),
        ctx.config.kernel_size,
    )
