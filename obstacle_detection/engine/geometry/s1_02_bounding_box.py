"""S1.02 — Bounding Box Filter.

Compute each group's extremal points and reject groups that are too small
(sensor noise) or too large (map border, merged clutter) to be an obstacle.
"""

from __future__ import annotations

import logging

from obstacle_detection.engine.context import DetectionContext
from obstacle_detection.engine.registry import Layer, stage
from obstacle_detection.utils.geometry import bounding_box, rejection_reason

logger = logging.getLogger(__name__)


@stage(
    id="S1.02",
    layer=Layer.GEOMETRY,
    dependencies=["S1.01"],
    description="Bounding box and size-plausibility filter",
)
def bounding_box_filter(ctx: DetectionContext) -> None:
    config = ctx.config
    for group in ctx.groups:
        if group.rejected is not None:
            continue
        box = bounding_box(group.points)
        group.bbox = box
        group.features["bbox_edges"] = (box.a, box.b)
        group.features["bbox_diagonal"] = box.diagonal

        reason = rejection_reason(box, config.min_edge_length, config.max_diagonal)
        if reason is not None:
            group.rejected = reason
            logger.warning(
                "Group %d rejected as %s (a=%.3f b=%.3f diag=%.3f)",
                group.group_id,
                reason,
                box.a,
                box.b,
                box.diagonal,
            )
