"""Fit results: a shape is either a Circle or a Rectangle."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Union


class NoCandidatesError(ValueError):
    """A parameter search had no finite-scoring candidate to minimize over."""


@dataclass(frozen=True)
class Circle:
    center: tuple[float, float]
    radius: float
    score: float = math.inf

    kind = "circle"


@dataclass(frozen=True)
class Rectangle:
    center: tuple[float, float]
    width: float  # along ``rotation``
    length: float  # across ``rotation``
    rotation: float  # radians, in [0, pi/2)
    score: float = math.inf

    kind = "rectangle"


FitResult = Union[Circle, Rectangle]
