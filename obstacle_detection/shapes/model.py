"""Unified circle/rectangle model: a rotated superellipse.

For parameters (a, b, p, q, theta, s) and a point (x, y):

    f = x - p;  g = y - q
    R = f·cos(theta) + g·sin(theta)
    C = g·cos(theta) - f·sin(theta)
    X = (R/a)^(2n);  Y = (C/b)^(2n),  n = round(s)
    M = X + Y - 1

M is 0 on the curve. n = 1 gives the ellipse/circle family, larger n
approaches a rectangle with rounded corners (n = 6 is used for rectangles).

Per-point loss is M² / (X + Y), which keeps points near the center from
dominating. The score of a point set is Σ tanh(loss / n) / N: bounded per
point, so a handful of outliers cannot swamp it. Lower is better.
"""

from __future__ import annotations

from dataclasses import astuple, dataclass

import numpy as np
from numpy.typing import ArrayLike, NDArray

CIRCLE_SHARPNESS = 1
RECTANGLE_SHARPNESS = 6


@dataclass(frozen=True)
class ShapeParams:
    a: float
    b: float
    p: float
    q: float
    theta: float = 0.0
    s: float = CIRCLE_SHARPNESS

    @property
    def order(self) -> int:
        """Integer exponent control; the model uses ``2 * order``."""
        return sharpness_order(self.s)

    def as_vector(self) -> NDArray[np.float64]:
        return np.array(astuple(self), dtype=np.float64)

    @classmethod
    def from_vector(cls, vec: ArrayLike) -> "ShapeParams":
        a, b, p, q, theta, s = (float(v) for v in np.asarray(vec, dtype=np.float64))
        return cls(a=a, b=b, p=p, q=q, theta=theta, s=s)


def sharpness_order(s: float) -> int:
    return max(1, int(round(s)))


def implicit_terms(
    points: NDArray[np.float64],
    a: ArrayLike,
    b: ArrayLike,
    p: ArrayLike,
    q: ArrayLike,
    theta: ArrayLike,
    order: int,
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Compute (X, Y) for every candidate/point pair.

    Candidate arguments are 1-D arrays of equal length C (or scalars); the
    result has shape (C, N).
    """
    x = points[:, 0][np.newaxis, :]
    y = points[:, 1][np.newaxis, :]

    a = np.atleast_1d(np.asarray(a, dtype=np.float64))[:, np.newaxis]
    b = np.atleast_1d(np.asarray(b, dtype=np.float64))[:, np.newaxis]
    p = np.atleast_1d(np.asarray(p, dtype=np.float64))[:, np.newaxis]
    q = np.atleast_1d(np.asarray(q, dtype=np.float64))[:, np.newaxis]
    theta = np.atleast_1d(np.asarray(theta, dtype=np.float64))[:, np.newaxis]

    f = x - p
    g = y - q
    cos_t = np.cos(theta)
    sin_t = np.sin(theta)
    r = f * cos_t + g * sin_t
    c = g * cos_t - f * sin_t

    exponent = 2 * order
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        big_x = (r / a) ** exponent
        big_y = (c / b) ** exponent
    return big_x, big_y


def score_candidates(
    points: NDArray[np.float64],
    a: ArrayLike,
    b: ArrayLike,
    p: ArrayLike,
    q: ArrayLike,
    theta: ArrayLike,
    s: float,
) -> NDArray[np.float64]:
    """Score a batch of candidates against the same point set. Shape (C,)."""
    n = len(points)
    if n == 0:
        raise ValueError("Cannot score an empty point set")

    order = sharpness_order(s)
    big_x, big_y = implicit_terms(points, a, b, p, q, theta, order)
    total = big_x + big_y

    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        # X + Y == 0 (point on the center) and overflow both saturate to 1
        loss = np.where(np.isfinite(total), (total - 1.0) ** 2 / total, np.inf)

    return np.tanh(loss / order).sum(axis=1) / n


def score(points: NDArray[np.float64], params: ShapeParams) -> float:
    """Aggregate fit score of one parameter set. Lower is better."""
    result = score_candidates(points, params.a, params.b, params.p, params.q, params.theta, params.s)
    return float(result[0])


def residuals(points: NDArray[np.float64], params: ShapeParams) -> NDArray[np.float64]:
    """M = X + Y - 1 for each point."""
    big_x, big_y = implicit_terms(points, params.a, params.b, params.p, params.q, params.theta, params.order)
    return (big_x + big_y - 1.0)[0]


def squared_loss(points: NDArray[np.float64], params: ShapeParams) -> float:
    """Σ ½·M², the objective of the gradient fitter."""
    m = residuals(points, params)
    with np.errstate(over="ignore", invalid="ignore"):
        total = float(0.5 * np.sum(m**2))
    return total if np.isfinite(total) else float("inf")
