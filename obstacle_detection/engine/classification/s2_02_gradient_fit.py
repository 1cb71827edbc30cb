"""S2.02 — Gradient Fit.

Alternative classifier: descend from the bounding-box seeds for both shape
families and keep whichever scores lower. Only runs when the config selects
``fit_method="gradient"``.
"""

from __future__ import annotations

import logging
import math

from obstacle_detection.engine.context import DetectionContext
from obstacle_detection.engine.registry import Layer, stage
from obstacle_detection.shapes.model import CIRCLE_SHARPNESS, RECTANGLE_SHARPNESS, ShapeParams
from obstacle_detection.utils.geometry import bounding_box

logger = logging.getLogger(__name__)


@stage(
    id="S2.02",
    layer=Layer.CLASSIFICATION,
    dependencies=["S1.02"],
    after=["S1.03"],
    description="Finite-difference gradient descent fit",
)
def gradient_fit(ctx: DetectionContext) -> None:
    fitter = ctx.config.gradient_fit()

    for group in ctx.groups:
        if not group.accepted:
            continue
        points = group.fit_points
        box = bounding_box(points)
        p, q = box.center
        radius = (box.a + box.b) / (2.0 * math.sqrt(2.0))

        circle_run = fitter.fit(points, ShapeParams(a=radius, b=radius, p=p, q=q, s=CIRCLE_SHARPNESS))
        rect_run = fitter.fit(points, ShapeParams(a=box.b / 2.0, b=box.a / 2.0, p=p, q=q, s=RECTANGLE_SHARPNESS))

        circle = circle_run.to_fit_result(points)
        rectangle = rect_run.to_fit_result(points)
        # circle wins ties
        if rectangle.score < circle.score:
            fit, run = rectangle, rect_run
        else:
            fit, run = circle, circle_run

        group.fit = fit
        group.features["fit_score"] = fit.score
        group.features["gradient_converged"] = run.converged
        group.features["gradient_iterations"] = run.iterations
        if not run.converged:
            logger.warning("Group %d: gradient fit did not converge, using last iterate", group.group_id)
        logger.info("Group %d (%d cells): %s via gradient", group.group_id, group.size, fit)
