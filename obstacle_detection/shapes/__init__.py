"""Superellipse shape model, quantized search and gradient fitting."""

from obstacle_detection.shapes.gradient import GradientFit, GradientFitResult
from obstacle_detection.shapes.model import ShapeParams, score, score_candidates
from obstacle_detection.shapes.results import Circle, FitResult, NoCandidatesError, Rectangle
from obstacle_detection.shapes.search import SearchSettings, classify, fit_circle, fit_rectangle

__all__ = [
    "Circle",
    "FitResult",
    "GradientFit",
    "GradientFitResult",
    "NoCandidatesError",
    "Rectangle",
    "SearchSettings",
    "ShapeParams",
    "classify",
    "fit_circle",
    "fit_rectangle",
    "score",
    "score_candidates",
]
