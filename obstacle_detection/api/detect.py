"""POST /api/detect — segment a grid and classify its obstacles."""

from __future__ import annotations

import logging
import time

from fastapi import APIRouter, Depends, HTTPException

from obstacle_detection.config import Settings
from obstacle_detection.dependencies import get_settings
from obstacle_detection.engine.config import DetectionConfig
from obstacle_detection.engine.pipeline import detect_obstacles
from obstacle_detection.grid.occupancy import Grid, GridError
from obstacle_detection.models.requests import DetectRequest
from obstacle_detection.models.responses import DetectResponse, GroupResult, shape_from_fit

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/detect", response_model=DetectResponse)
def detect(request: DetectRequest, settings: Settings = Depends(get_settings)) -> DetectResponse:
    start = time.perf_counter()

    try:
        grid = Grid.from_message(request.grid.model_dump())
    except GridError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    overrides = request.config.model_dump(exclude_none=True)
    overrides.setdefault("fit_method", settings.default_fit_method)
    try:
        config = DetectionConfig().with_overrides(overrides)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    ctx = detect_obstacles(grid, config)

    groups = [
        GroupResult(
            group_id=g.group_id,
            size=g.size,
            cells=sorted(g.cells),
            rejected=g.rejected,
            shape=shape_from_fit(g.fit) if g.fit is not None else None,
            error=g.error,
        )
        for g in ctx.groups
    ]

    elapsed = (time.perf_counter() - start) * 1000
    logger.info("Detect: %d groups, %d shapes in %.0fms", len(groups), len(ctx.fits), elapsed)

    return DetectResponse(
        groups=groups,
        processing_time_ms=round(elapsed, 1),
        stages_completed=len(ctx.completed_stages),
        stages_failed=len(ctx.errors),
        errors=ctx.errors,
    )
