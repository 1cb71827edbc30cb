"""Obstacle detection stage engine."""

from obstacle_detection.engine.registry import stage, Layer, get_registry
from obstacle_detection.engine.config import DetectionConfig
from obstacle_detection.engine.context import DetectionContext, GroupData
from obstacle_detection.engine.pipeline import Pipeline, create_pipeline, detect_obstacles

__all__ = [
    "stage",
    "Layer",
    "get_registry",
    "DetectionConfig",
    "DetectionContext",
    "GroupData",
    "Pipeline",
    "create_pipeline",
    "detect_obstacles",
]
