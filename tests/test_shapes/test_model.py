"""Tests for the superellipse shape model."""

from __future__ import annotations

import math

import numpy as np
import pytest

from obstacle_detection.shapes.model import ShapeParams, residuals, score, score_candidates, squared_loss
from tests.conftest import circle_points


def test_exact_circle_scores_zero():
    points = circle_points((0.3, -0.2), 0.5)
    assert score(points, ShapeParams(a=0.5, b=0.5, p=0.3, q=-0.2)) == pytest.approx(0.0, abs=1e-12)


def test_wrong_radius_scores_worse():
    points = circle_points((0.0, 0.0), 0.5)
    exact = score(points, ShapeParams(a=0.5, b=0.5, p=0.0, q=0.0))
    off = score(points, ShapeParams(a=0.4, b=0.4, p=0.0, q=0.0))
    assert off > exact


def test_center_point_saturates():
    points = np.array([[0.1, 0.2]])
    assert score(points, ShapeParams(a=0.5, b=0.5, p=0.1, q=0.2)) == pytest.approx(1.0)


def test_score_bounded():
    rng = np.random.default_rng(3)
    points = rng.uniform(-2, 2, size=(50, 2))
    value = score(points, ShapeParams(a=0.3, b=0.7, p=0.2, q=0.1, theta=0.4, s=6))
    assert 0.0 <= value <= 1.0


def test_empty_points_rejected():
    with pytest.raises(ValueError):
        score(np.empty((0, 2)), ShapeParams(a=1, b=1, p=0, q=0))


def test_batch_matches_single():
    points = circle_points((0.0, 0.0), 0.5, n=20)
    a = np.array([0.4, 0.5, 0.6])
    b = np.array([0.5, 0.5, 0.3])
    p = np.array([0.0, 0.1, -0.1])
    q = np.array([0.0, 0.0, 0.2])
    theta = np.array([0.0, 0.3, 1.2])
    batch = score_candidates(points, a, b, p, q, theta, s=6)
    for i in range(3):
        single = score(points, ShapeParams(a=a[i], b=b[i], p=p[i], q=q[i], theta=theta[i], s=6))
        assert batch[i] == pytest.approx(single)


def test_sharpness_is_rounded():
    points = circle_points((0.0, 0.0), 0.5, n=12)
    base = score(points, ShapeParams(a=0.45, b=0.45, p=0, q=0, s=6))
    assert score(points, ShapeParams(a=0.45, b=0.45, p=0, q=0, s=6.3)) == pytest.approx(base)


def test_rotation_quarter_turn_swaps_axes():
    points = np.array([[0.4, 0.0], [0.0, 0.2], [-0.4, 0.0], [0.0, -0.2]])
    aligned = ShapeParams(a=0.4, b=0.2, p=0, q=0, theta=0.0, s=1)
    turned = ShapeParams(a=0.2, b=0.4, p=0, q=0, theta=math.pi / 2, s=1)
    assert score(points, aligned) == pytest.approx(0.0, abs=1e-12)
    assert score(points, turned) == pytest.approx(0.0, abs=1e-9)


def test_residuals_and_loss():
    points = np.array([[1.0, 0.0], [2.0, 0.0]])
    params = ShapeParams(a=1.0, b=1.0, p=0.0, q=0.0)
    assert residuals(points, params).tolist() == pytest.approx([0.0, 3.0])
    assert squared_loss(points, params) == pytest.approx(4.5)


def test_vector_round_trip():
    params = ShapeParams(a=0.1, b=0.2, p=0.3, q=0.4, theta=0.5, s=6)
    assert ShapeParams.from_vector(params.as_vector()) == params
    assert params.order == 6
