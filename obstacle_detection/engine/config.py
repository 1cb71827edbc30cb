"""Detection configuration — every numeric threshold of the pipeline."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any

from obstacle_detection.shapes.gradient import GradientFit
from obstacle_detection.shapes.search import SearchSettings

FIT_METHODS = ("search", "gradient")


@dataclass
class DetectionConfig:
    """Controls filtering, grouping, rejection and shape fitting."""

    # Grid filter: cells with value > threshold are occupied
    occupancy_threshold: int = 50

    # Group extraction neighbourhood
    kernel_size: int = 3

    # Bounding-box rejection (meters)
    min_edge_length: float = 0.09
    max_diagonal: float = 1.5

    # Parameter search
    circle_accept_score: float = 0.03
    search_step_ab: float = 0.01
    search_step_pq: float = 0.01
    search_step_theta: float = 0.01  # radians
    circle_radius_window: float = 0.1
    circle_center_window: float = 0.3
    rectangle_size_window: float = 0.02
    rectangle_center_window: float = 0.02
    search_batch_size: int = 2048

    # "search" (quantized) or "gradient" (finite-difference descent)
    fit_method: str = "search"

    # Fit the sampled footprint outline of each group instead of every cell center
    fit_boundary_only: bool = True

    # Gradient fit
    gradient_learning_rate: float = 1e-3
    gradient_step: float = 1e-4
    gradient_tolerance: float = 5e-3
    gradient_max_iterations: int = 5000

    def __post_init__(self) -> None:
        if self.fit_method not in FIT_METHODS:
            raise ValueError(f"fit_method must be one of {FIT_METHODS}, got {self.fit_method!r}")
        if self.kernel_size < 1:
            raise ValueError(f"kernel_size must be >= 1, got {self.kernel_size}")

    def search_settings(self) -> SearchSettings:
        return SearchSettings(
            step_ab=self.search_step_ab,
            step_pq=self.search_step_pq,
            step_theta=self.search_step_theta,
            circle_radius_window=self.circle_radius_window,
            circle_center_window=self.circle_center_window,
            rectangle_size_window=self.rectangle_size_window,
            rectangle_center_window=self.rectangle_center_window,
            circle_accept_score=self.circle_accept_score,
            batch_size=self.search_batch_size,
        )

    def gradient_fit(self) -> GradientFit:
        return GradientFit(
            learning_rate=self.gradient_learning_rate,
            step=self.gradient_step,
            tolerance=self.gradient_tolerance,
            max_iterations=self.gradient_max_iterations,
        )

    def with_overrides(self, overrides: dict[str, Any]) -> "DetectionConfig":
        """Copy with the given fields replaced; ``None`` values are ignored."""
        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise ValueError(f"Unknown config fields: {sorted(unknown)}")
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})
