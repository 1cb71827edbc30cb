"""Finite-difference gradient descent over the shape parameters.

Kept as an alternative to the quantized search. It works for circles started
near the answer, but the rectangle family's exponent is discrete
(2·round(s)), so the objective is not smooth there and the descent is not
reliable. ``search.classify`` is the primary classifier.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from obstacle_detection.shapes.model import ShapeParams, score, squared_loss
from obstacle_detection.shapes.results import Circle, FitResult, Rectangle

logger = logging.getLogger(__name__)

_QUARTER_TURN = math.pi / 2


@dataclass(frozen=True)
class GradientFitResult:
    params: ShapeParams
    loss: float
    iterations: int
    converged: bool
    gradient_norm: float

    def to_fit_result(self, points: NDArray[np.float64]) -> FitResult:
        """Convert the fitted parameters into a Circle or Rectangle."""
        params = self.params
        fit_score = score(points, params)
        center = (params.p, params.q)
        a, b = abs(params.a), abs(params.b)

        if params.order == 1:
            return Circle(center=center, radius=(a + b) / 2.0, score=fit_score)

        # bring rotation into [0, pi/2); an odd number of quarter turns swaps the edges
        turns = math.floor(params.theta / _QUARTER_TURN)
        rotation = params.theta - turns * _QUARTER_TURN
        if turns % 2:
            a, b = b, a
        return Rectangle(center=center, width=2.0 * a, length=2.0 * b, rotation=rotation, score=fit_score)


@dataclass(frozen=True)
class GradientFit:
    """Simultaneous update ``param -= learning_rate * gradient`` until the
    gradient norm drops below ``tolerance``."""

    learning_rate: float = 1e-3
    step: float = 1e-4
    tolerance: float = 5e-3
    max_iterations: int = 5000
    free_sharpness: bool = False

    def _free_indices(self) -> list[int]:
        # vector layout: a, b, p, q, theta, s
        return [0, 1, 2, 3, 4, 5] if self.free_sharpness else [0, 1, 2, 3, 4]

    def gradient(self, points: NDArray[np.float64], params: ShapeParams) -> NDArray[np.float64]:
        """Forward-difference gradient of Σ ½·M²; zero for fixed parameters."""
        base = params.as_vector()
        current = squared_loss(points, params)
        grad = np.zeros_like(base)
        for i in self._free_indices():
            shifted = base.copy()
            shifted[i] += self.step
            grad[i] = (squared_loss(points, ShapeParams.from_vector(shifted)) - current) / self.step
        return grad

    def fit(self, points: NDArray[np.float64], initial: ShapeParams) -> GradientFitResult:
        if len(points) == 0:
            raise ValueError("Cannot fit an empty point set")

        params = initial
        vec = params.as_vector()
        norm = math.inf

        for iteration in range(1, self.max_iterations + 1):
            grad = self.gradient(points, params)
            norm = float(np.linalg.norm(grad))
            if not math.isfinite(norm):
                logger.warning("Gradient fit diverged after %d iterations", iteration - 1)
                return GradientFitResult(params, squared_loss(points, params), iteration - 1, False, norm)
            if norm < self.tolerance:
                logger.debug("Gradient fit converged in %d iterations: %s", iteration - 1, params)
                return GradientFitResult(params, squared_loss(points, params), iteration - 1, True, norm)

            vec = vec - self.learning_rate * grad
            params = ShapeParams.from_vector(vec)

        logger.warning(
            "Gradient fit did not converge in %d iterations (|grad|=%.4g)",
            self.max_iterations,
            norm,
        )
        return GradientFitResult(params, squared_loss(points, params), self.max_iterations, False, norm)
