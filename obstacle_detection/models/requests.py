"""API request models."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field


class GridMessage(BaseModel):
    width: int = Field(..., ge=0, description="Cells per row")
    height: int = Field(..., ge=0, description="Number of rows")
    resolution: float = Field(..., gt=0, description="Meters per cell")
    data: list[int] = Field(..., description="Row-major cell values (-1 unknown, 0..100 occupancy)")


class DetectionOptions(BaseModel):
    """Per-request overrides of DetectionConfig; unset fields keep their defaults."""

    occupancy_threshold: Optional[int] = None
    kernel_size: Optional[int] = Field(default=None, ge=1)
    min_edge_length: Optional[float] = None
    max_diagonal: Optional[float] = None
    circle_accept_score: Optional[float] = None
    search_step_ab: Optional[float] = Field(default=None, gt=0)
    search_step_pq: Optional[float] = Field(default=None, gt=0)
    search_step_theta: Optional[float] = Field(default=None, gt=0)
    circle_radius_window: Optional[float] = None
    circle_center_window: Optional[float] = None
    rectangle_size_window: Optional[float] = None
    rectangle_center_window: Optional[float] = None
    search_batch_size: Optional[int] = Field(default=None, ge=1)
    fit_method: Optional[Literal["search", "gradient"]] = None
    fit_boundary_only: Optional[bool] = None
    gradient_learning_rate: Optional[float] = None
    gradient_step: Optional[float] = None
    gradient_tolerance: Optional[float] = None
    gradient_max_iterations: Optional[int] = Field(default=None, ge=1)


class DetectRequest(BaseModel):
    grid: GridMessage = Field(..., description="Occupancy grid snapshot")
    config: DetectionOptions = Field(default_factory=DetectionOptions)
