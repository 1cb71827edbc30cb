"""Leaf-node geometry helpers. No engine imports."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray
from scipy.spatial import ConvexHull

Point = tuple[float, float]


@dataclass(frozen=True)
class BoundingBox:
    """Extremal points of a plane point set and the edges derived from them.

    ``lower``/``upper`` are the min/max-y points, ``left``/``right`` the
    min/max-x points. For a rotated rectangle these are its corners, and the
    edges from ``lower`` to ``left`` and ``right`` are its two sides.
    """

    upper: Point
    lower: Point
    left: Point
    right: Point

    @property
    def a_vector(self) -> Point:
        return (self.left[0] - self.lower[0], self.left[1] - self.lower[1])

    @property
    def b_vector(self) -> Point:
        return (self.right[0] - self.lower[0], self.right[1] - self.lower[1])

    @property
    def a(self) -> float:
        return math.hypot(*self.a_vector)

    @property
    def b(self) -> float:
        return math.hypot(*self.b_vector)

    @property
    def diagonal(self) -> float:
        return math.hypot(self.upper[1] - self.lower[1], self.left[0] - self.right[0])

    @property
    def center(self) -> Point:
        """Initial center estimate: lower + (a_vector + b_vector) / 2."""
        ax, ay = self.a_vector
        bx, by = self.b_vector
        return (self.lower[0] + (ax + bx) / 2.0, self.lower[1] + (ay + by) / 2.0)


def bounding_box(points: NDArray[np.float64]) -> BoundingBox:
    """Find the four extremal points of an (N, 2) point array.

    Ties go to the corner an axis-aligned rectangle would have there:
    lowest -> leftmost of them, rightmost -> lowest, highest -> rightmost,
    leftmost -> highest.
    """
    if len(points) == 0:
        raise ValueError("Cannot bound an empty point set")

    x = points[:, 0]
    y = points[:, 1]

    # np.lexsort sorts by the last key first
    lower = np.lexsort((x, y))[0]
    right = np.lexsort((y, -x))[0]
    upper = np.lexsort((-x, -y))[0]
    left = np.lexsort((-y, x))[0]

    def _pt(i: int) -> Point:
        return (float(x[i]), float(y[i]))

    return BoundingBox(upper=_pt(upper), lower=_pt(lower), left=_pt(left), right=_pt(right))


def rejection_reason(box: BoundingBox, min_edge_length: float, max_diagonal: float) -> str | None:
    """Why a group should not be classified, or None if it is plausible.

    Edges shorter than ``min_edge_length`` are sensor noise; a diagonal longer
    than ``max_diagonal`` is the map border or merged clutter.
    """
    if box.a < min_edge_length or box.b < min_edge_length:
        return "noise"
    if box.diagonal > max_diagonal:
        return "oversized"
    return None


def footprint_outline(
    centers: NDArray[np.float64],
    cell_size: float,
    spacing: float,
) -> NDArray[np.float64]:
    """Sample the convex outline of the square cells centred at ``centers``.

    The hull runs through cell corners, so it traces the occupied footprint
    rather than the span of cell centers. Each hull edge is sampled from its
    start vertex at most ``spacing`` apart.
    """
    if len(centers) == 0:
        raise ValueError("Cannot outline an empty point set")
    if spacing <= 0:
        raise ValueError(f"Outline spacing must be positive, got {spacing}")

    h = cell_size / 2.0
    offsets = np.array([[-h, -h], [h, -h], [h, h], [-h, h]])
    corners = (centers[:, None, :] + offsets[None, :, :]).reshape(-1, 2)

    # In 2-D the hull vertices come back counter-clockwise
    vertices = corners[ConvexHull(corners).vertices]

    samples = []
    for start, end in zip(vertices, np.roll(vertices, -1, axis=0)):
        n = max(1, int(math.ceil(float(np.hypot(*(end - start))) / spacing - 1e-9)))
        t = np.arange(n, dtype=np.float64)[:, None] / n
        samples.append(start + t * (end - start))
    return np.vstack(samples)
