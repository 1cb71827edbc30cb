"""S2.01 — Parameter Search.

Classify every accepted group as a circle or a rectangle with the quantized
superellipse search, seeded from the bounding box of its fit points.
"""

from __future__ import annotations

import logging

from obstacle_detection.engine.context import DetectionContext
from obstacle_detection.engine.registry import Layer, stage
from obstacle_detection.shapes import search
from obstacle_detection.shapes.results import NoCandidatesError
from obstacle_detection.utils.geometry import bounding_box

logger = logging.getLogger(__name__)


@stage(
    id="S2.01",
    layer=Layer.CLASSIFICATION,
    dependencies=["S1.02"],
    after=["S1.03"],
    description="Circle-first quantized superellipse search",
)
def parameter_search(ctx: DetectionContext) -> None:
    settings = ctx.config.search_settings()

    for group in ctx.groups:
        if not group.accepted:
            continue
        points = group.fit_points
        box = bounding_box(points)
        try:
            fit = search.classify(points, box.center, box.a, box.b, settings)
        except NoCandidatesError as e:
            group.error = str(e)
            logger.warning("Group %d not classified: %s", group.group_id, e)
            continue

        group.fit = fit
        group.features["fit_score"] = fit.score
        logger.info("Group %d (%d cells): %s", group.group_id, group.size, fit)
