"""Tests for DetectionConfig."""

import pytest

from obstacle_detection.engine.config import DetectionConfig


def test_defaults():
    config = DetectionConfig()
    assert config.occupancy_threshold == 50
    assert config.kernel_size == 3
    assert config.min_edge_length == 0.09
    assert config.max_diagonal == 1.5
    assert config.fit_method == "search"


def test_unknown_fit_method():
    with pytest.raises(ValueError, match="fit_method"):
        DetectionConfig(fit_method="annealing")


def test_invalid_kernel():
    with pytest.raises(ValueError):
        DetectionConfig(kernel_size=0)


def test_with_overrides_ignores_none():
    config = DetectionConfig().with_overrides({"kernel_size": 5, "max_diagonal": None})
    assert config.kernel_size == 5
    assert config.max_diagonal == 1.5


def test_with_overrides_unknown_field():
    with pytest.raises(ValueError, match="Unknown"):
        DetectionConfig().with_overrides({"colour": "red"})


def test_search_settings_mapping():
    config = DetectionConfig(search_step_theta=0.02, circle_accept_score=0.01, search_batch_size=64)
    settings = config.search_settings()
    assert settings.step_theta == 0.02
    assert settings.circle_accept_score == 0.01
    assert settings.batch_size == 64


def test_gradient_fit_mapping():
    fitter = DetectionConfig(gradient_max_iterations=10, gradient_learning_rate=0.01).gradient_fit()
    assert fitter.max_iterations == 10
    assert fitter.learning_rate == 0.01
    assert not fitter.free_sharpness
