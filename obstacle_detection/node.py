"""Event-driven detector node.

Map snapshots and robot poses arrive as events on a single asyncio queue
owned by the node. Detection runs when a map is available and a pose has
been seen; each map snapshot is consumed once, the latest pose is kept.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from dataclasses import dataclass
from typing import Callable, Optional, Union

from obstacle_detection.engine.config import DetectionConfig
from obstacle_detection.engine.context import DetectionContext
from obstacle_detection.engine.pipeline import detect_obstacles
from obstacle_detection.grid.occupancy import Grid
from obstacle_detection.shapes.results import FitResult

logger = logging.getLogger(__name__)

_SENTINEL = object()  # marks end of queue


@dataclass(frozen=True)
class Pose:
    x: float
    y: float
    theta: float = 0.0


@dataclass(frozen=True)
class MapUpdate:
    grid: Grid


@dataclass(frozen=True)
class PoseUpdate:
    pose: Pose


Event = Union[MapUpdate, PoseUpdate]


@dataclass(frozen=True)
class DetectionReport:
    """Result of one detection run, tagged with the pose it ran under."""

    pose: Pose
    context: DetectionContext

    @property
    def fits(self) -> dict[int, FitResult]:
        return self.context.fits


class DetectorNode:
    """Single owner of the latest map and pose.

    Only the most recent ``max_reports`` reports are retained; subscribe with
    ``on_report`` to see every one.
    """

    def __init__(
        self,
        config: DetectionConfig | None = None,
        on_report: Optional[Callable[[DetectionReport], None]] = None,
        max_reports: int = 16,
    ) -> None:
        if max_reports < 1:
            raise ValueError(f"max_reports must be >= 1, got {max_reports}")
        self.config = config or DetectionConfig()
        self.on_report = on_report
        self._inbox: asyncio.Queue = asyncio.Queue()
        self._map: Grid | None = None
        self._pose: Pose | None = None
        self.reports: deque[DetectionReport] = deque(maxlen=max_reports)

    def publish(self, event: Event) -> None:
        if not isinstance(event, (MapUpdate, PoseUpdate)):
            raise TypeError(f"Unsupported event type: {type(event).__name__}")
        self._inbox.put_nowait(event)

    def close(self) -> None:
        """Stop ``run`` once the events already queued are handled."""
        self._inbox.put_nowait(_SENTINEL)

    async def run(self) -> list[DetectionReport]:
        """Consume events until closed. Returns the retained reports, oldest first."""
        loop = asyncio.get_running_loop()

        while True:
            item = await self._inbox.get()
            if item is _SENTINEL:
                break

            if isinstance(item, MapUpdate):
                self._map = item.grid
                logger.debug("Map update %dx%d", item.grid.width, item.grid.height)
            else:
                self._pose = item.pose
                logger.debug("Pose update %s", item.pose)

            if self._map is None or self._pose is None:
                continue

            grid, pose = self._map, self._pose
            self._map = None
            # CPU-bound; keep the event loop free for incoming events
            ctx = await loop.run_in_executor(None, detect_obstacles, grid, self.config)
            report = DetectionReport(pose=pose, context=ctx)
            self.reports.append(report)
            logger.info("Detection at %s: %d shapes", pose, len(report.fits))
            if self.on_report is not None:
                self.on_report(report)

        return list(self.reports)
