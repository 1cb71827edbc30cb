"""Hough-transform inspired parameter search.

Circles constrain a == b, which makes their parameter space much smaller, so
the circle family is searched first. If the best circle already explains the
points well enough the far more expensive rectangle search is skipped.

Every candidate is an independent evaluation of the shape score; the search
enumerates the quantized parameter grid in lexicographic order, scores it in
numpy batches, and keeps the first minimum. The result therefore does not
depend on the batch size.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Iterator

import numpy as np
from numpy.typing import ArrayLike, NDArray

from obstacle_detection.shapes.model import CIRCLE_SHARPNESS, RECTANGLE_SHARPNESS, score_candidates
from obstacle_detection.shapes.results import Circle, FitResult, NoCandidatesError, Rectangle

logger = logging.getLogger(__name__)

# A rectangle's orientation is only distinguishable modulo a quarter turn
# once width and length are free to swap.
THETA_SPAN = math.pi / 2


@dataclass(frozen=True)
class SearchSettings:
    """Windows, steps and acceptance threshold of the quantized search."""

    step_ab: float = 0.01
    step_pq: float = 0.01
    step_theta: float = 0.01
    circle_radius_window: float = 0.1
    circle_center_window: float = 0.3
    rectangle_size_window: float = 0.02
    rectangle_center_window: float = 0.02
    circle_accept_score: float = 0.03
    batch_size: int = 2048


def quantized_range(start: float, stop: float, step: float) -> NDArray[np.float64]:
    """Values ``start, start+step, ...`` strictly below ``stop``."""
    if step <= 0:
        raise ValueError(f"Quantization step must be positive, got {step}")
    count = int(math.ceil((stop - start) / step - 1e-9))
    if count <= 0:
        return np.empty(0, dtype=np.float64)
    return start + step * np.arange(count, dtype=np.float64)


def _window(name: str, center: float, half_width: float, step: float, positive: bool = False) -> NDArray[np.float64]:
    values = quantized_range(center - half_width, center + half_width, step)
    if positive:
        values = values[values > 0]
    if values.size == 0:
        raise NoCandidatesError(
            f"No {name} candidates in [{center - half_width:.4f}, {center + half_width:.4f}) at step {step}"
        )
    return values


ParamColumns = tuple[ArrayLike, ArrayLike, ArrayLike, ArrayLike, ArrayLike]


def _candidate_batches(
    axes: list[NDArray[np.float64]],
    batch_size: int,
) -> Iterator[tuple[int, list[NDArray[np.float64]]]]:
    """Yield (offset, columns) slices of the Cartesian product of ``axes``.

    Flat indices are unravelled in C order, so candidates come out in the
    same lexicographic order as ``itertools.product`` without ever holding
    more than one batch.
    """
    shape = tuple(len(axis) for axis in axes)
    total = math.prod(shape)
    batch_size = max(1, int(batch_size))
    for start in range(0, total, batch_size):
        index = np.unravel_index(np.arange(start, min(start + batch_size, total)), shape)
        yield start, [axis[i] for axis, i in zip(axes, index)]


def _argmin_grid(
    points: NDArray[np.float64],
    axes: list[NDArray[np.float64]],
    to_params: Callable[..., ParamColumns],
    s: int,
    batch_size: int,
) -> tuple[tuple[float, ...], float, int]:
    """Find the first minimum-score point of the Cartesian product of ``axes``.

    ``to_params`` maps the axis columns of a batch to (a, b, p, q, theta).
    Returns (candidate tuple, score, candidates evaluated).
    """
    shape = tuple(len(axis) for axis in axes)
    total = math.prod(shape)

    best_index = -1
    best_score = math.inf
    for start, chunk in _candidate_batches(axes, batch_size):
        scores = score_candidates(points, *to_params(*chunk), s=s)
        # np.argmin stops at the first NaN, so rank NaN last
        i = int(np.argmin(np.where(np.isnan(scores), np.inf, scores)))
        if scores[i] < best_score:
            best_score = float(scores[i])
            best_index = start + i

    if best_index < 0:
        raise NoCandidatesError(f"None of {total} candidates has a finite score")
    index = np.unravel_index(best_index, shape)
    candidate = tuple(float(axis[i]) for axis, i in zip(axes, index))
    return candidate, best_score, total


def fit_circle(
    points: NDArray[np.float64],
    center: tuple[float, float],
    radius: float,
    settings: SearchSettings | None = None,
) -> Circle:
    """Exhaustive search over radius and center with the ellipse family (s=1)."""
    settings = settings or SearchSettings()

    radii = _window("radius", radius, settings.circle_radius_window, settings.step_ab, positive=True)
    ps = _window("center x", center[0], settings.circle_center_window, settings.step_pq)
    qs = _window("center y", center[1], settings.circle_center_window, settings.step_pq)

    (r, p, q), best, evaluated = _argmin_grid(
        points,
        [radii, ps, qs],
        lambda rr, pp, qq: (rr, rr, pp, qq, 0.0),
        s=CIRCLE_SHARPNESS,
        batch_size=settings.batch_size,
    )

    circle = Circle(center=(p, q), radius=r, score=best)
    logger.debug("Best circle of %d candidates: %s", evaluated, circle)
    return circle


def fit_rectangle(
    points: NDArray[np.float64],
    center: tuple[float, float],
    a: float,
    b: float,
    settings: SearchSettings | None = None,
) -> Rectangle:
    """Exhaustive search over the near-rectangle family (s=6).

    ``a`` is the half-edge along ``theta``, ``b`` the half-edge across it.
    """
    settings = settings or SearchSettings()

    a_values = _window("a", a, settings.rectangle_size_window, settings.step_ab, positive=True)
    b_values = _window("b", b, settings.rectangle_size_window, settings.step_ab, positive=True)
    ps = _window("center x", center[0], settings.rectangle_center_window, settings.step_pq)
    qs = _window("center y", center[1], settings.rectangle_center_window, settings.step_pq)
    thetas = quantized_range(0.0, THETA_SPAN, settings.step_theta)
    if thetas.size == 0:
        raise NoCandidatesError(f"No theta candidates at step {settings.step_theta}")

    (aa, bb, p, q, t), best, evaluated = _argmin_grid(
        points,
        [a_values, b_values, ps, qs, thetas],
        lambda a_, b_, p_, q_, t_: (a_, b_, p_, q_, t_),
        s=RECTANGLE_SHARPNESS,
        batch_size=settings.batch_size,
    )

    rectangle = Rectangle(center=(p, q), width=2.0 * aa, length=2.0 * bb, rotation=t, score=best)
    logger.debug(
        "Best rectangle of %d candidates: %s (rot %.1f deg)",
        evaluated,
        rectangle,
        math.degrees(t),
    )
    return rectangle


def classify(
    points: NDArray[np.float64],
    center: tuple[float, float],
    edge_a: float,
    edge_b: float,
    settings: SearchSettings | None = None,
) -> FitResult:
    """Classify a point set as a Circle or Rectangle.

    ``edge_a`` and ``edge_b`` are the bounding-box edges from the lowest
    point to the leftmost and rightmost points. For a circle each equals
    radius·√2; for a rectangle they are its full edge lengths, and the
    lowest-to-rightmost edge is the one lying along theta in [0, π/2).
    """
    settings = settings or SearchSettings()
    logger.debug("Classifying %d points from %s, a=%.4f b=%.4f", len(points), center, edge_a, edge_b)

    circle = fit_circle(points, center, (edge_a + edge_b) / (2.0 * math.sqrt(2.0)), settings)
    if circle.score < settings.circle_accept_score:
        return circle

    rectangle = fit_rectangle(points, center, edge_b / 2.0, edge_a / 2.0, settings)
    if rectangle.score < circle.score:
        return rectangle
    return circle
