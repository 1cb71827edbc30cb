"""API response models."""

from __future__ import annotations

import math
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field

from obstacle_detection.shapes.results import Circle, FitResult


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    stages_registered: int = 0


class CircleShape(BaseModel):
    kind: Literal["circle"] = "circle"
    center: tuple[float, float]
    radius: float
    score: Optional[float] = None


class RectangleShape(BaseModel):
    kind: Literal["rectangle"] = "rectangle"
    center: tuple[float, float]
    width: float
    length: float
    rotation: float
    score: Optional[float] = None


Shape = Annotated[Union[CircleShape, RectangleShape], Field(discriminator="kind")]


def shape_from_fit(fit: FitResult) -> CircleShape | RectangleShape:
    # JSON has no infinity
    score = fit.score if math.isfinite(fit.score) else None
    if isinstance(fit, Circle):
        return CircleShape(center=fit.center, radius=fit.radius, score=score)
    return RectangleShape(
        center=fit.center,
        width=fit.width,
        length=fit.length,
        rotation=fit.rotation,
        score=score,
    )


class GroupResult(BaseModel):
    group_id: int
    size: int
    cells: list[tuple[int, int]] = Field(default_factory=list)
    rejected: Optional[str] = None
    shape: Optional[Shape] = None
    error: Optional[str] = None


class DetectResponse(BaseModel):
    groups: list[GroupResult] = Field(default_factory=list)
    processing_time_ms: float = 0.0
    stages_completed: int = 0
    stages_failed: int = 0
    errors: dict[str, str] = Field(default_factory=dict)
