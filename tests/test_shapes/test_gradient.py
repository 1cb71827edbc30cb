"""Tests for the finite-difference gradient fitter."""

from __future__ import annotations

import math

import numpy as np
import pytest

from obstacle_detection.shapes.gradient import GradientFit, GradientFitResult
from obstacle_detection.shapes.model import ShapeParams, squared_loss
from obstacle_detection.shapes.results import Circle, Rectangle
from tests.conftest import circle_points


def test_converges_on_circle():
    points = circle_points((0.0, 0.0), 0.5)
    result = GradientFit().fit(points, ShapeParams(a=0.45, b=0.45, p=0.02, q=-0.02))

    assert result.converged
    assert result.iterations < 5000
    assert result.gradient_norm < 5e-3
    fit = result.to_fit_result(points)
    assert isinstance(fit, Circle)
    assert fit.radius == pytest.approx(0.5, abs=0.01)
    assert fit.center == pytest.approx((0.0, 0.0), abs=0.01)


def test_loss_decreases():
    points = circle_points((0.0, 0.0), 0.5)
    start = ShapeParams(a=0.45, b=0.45, p=0.02, q=-0.02)
    fitter = GradientFit(max_iterations=10)

    result = fitter.fit(points, start)
    assert result.loss < squared_loss(points, start)


def test_reports_non_convergence(caplog):
    points = circle_points((0.0, 0.0), 0.5)
    with caplog.at_level("WARNING"):
        result = GradientFit(max_iterations=3).fit(points, ShapeParams(a=0.45, b=0.45, p=0.02, q=-0.02))
    assert not result.converged
    assert result.iterations == 3
    assert "did not converge" in caplog.text


def test_sharpness_fixed_by_default():
    points = circle_points((0.0, 0.0), 0.5, n=12)
    grad = GradientFit().gradient(points, ShapeParams(a=0.4, b=0.4, p=0.0, q=0.0, s=6))
    assert grad[5] == 0.0
    assert np.any(grad[:4] != 0.0)


def test_empty_points_rejected():
    with pytest.raises(ValueError):
        GradientFit().fit(np.empty((0, 2)), ShapeParams(a=1, b=1, p=0, q=0))


def test_rectangle_rotation_normalized():
    params = ShapeParams(a=0.3, b=0.1, p=0.0, q=0.0, theta=math.pi / 2 + 0.2, s=6)
    result = GradientFitResult(params=params, loss=0.0, iterations=0, converged=True, gradient_norm=0.0)
    points = circle_points((0.0, 0.0), 0.2, n=8)

    fit = result.to_fit_result(points)
    assert isinstance(fit, Rectangle)
    assert fit.rotation == pytest.approx(0.2)
    assert fit.width == pytest.approx(0.2)
    assert fit.length == pytest.approx(0.6)
