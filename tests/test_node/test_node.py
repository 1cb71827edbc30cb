"""Tests for the event-driven detector node."""

from __future__ import annotations

import asyncio

import pytest

from obstacle_detection.grid.occupancy import grid_from_rows
from obstacle_detection.node import DetectorNode, MapUpdate, Pose, PoseUpdate
from obstacle_detection.shapes.results import Rectangle


def _run(node: DetectorNode):
    return asyncio.run(node.run())


def test_waits_for_pose(square_grid):
    node = DetectorNode()
    node.publish(MapUpdate(square_grid))
    node.close()
    assert _run(node) == []


def test_detects_once_both_present(square_grid):
    seen = []
    node = DetectorNode(on_report=seen.append)
    node.publish(MapUpdate(square_grid))
    node.publish(PoseUpdate(Pose(1.0, 2.0, 0.5)))
    node.close()

    reports = _run(node)
    assert len(reports) == 1
    assert seen == reports
    assert reports[0].pose == Pose(1.0, 2.0, 0.5)
    assert isinstance(reports[0].fits[0], Rectangle)


def test_each_map_consumed_once(square_grid, disc_grid):
    node = DetectorNode()
    node.publish(PoseUpdate(Pose(0.0, 0.0)))
    node.publish(MapUpdate(square_grid))
    # pose alone does not re-run detection on a consumed map
    node.publish(PoseUpdate(Pose(0.5, 0.0)))
    node.publish(MapUpdate(disc_grid))
    node.close()

    reports = _run(node)
    assert [r.pose for r in reports] == [Pose(0.0, 0.0), Pose(0.5, 0.0)]
    assert reports[0].context.grid is square_grid
    assert reports[1].context.grid is disc_grid


def test_rejects_unknown_event():
    node = DetectorNode()
    with pytest.raises(TypeError):
        node.publish("map")


def test_keeps_only_recent_reports():
    seen = []
    node = DetectorNode(on_report=seen.append, max_reports=3)
    node.publish(PoseUpdate(Pose(0.0, 0.0)))
    grids = [grid_from_rows([[0] * 4 for _ in range(4)], 0.05) for _ in range(20)]
    for grid in grids:
        node.publish(MapUpdate(grid))
    node.close()

    reports = _run(node)
    assert len(seen) == 20
    assert len(node.reports) == 3
    assert [r.context.grid for r in reports] == grids[-3:]


def test_max_reports_must_be_positive():
    with pytest.raises(ValueError, match="max_reports"):
        DetectorNode(max_reports=0)
