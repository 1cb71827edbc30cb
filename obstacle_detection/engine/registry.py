"""Stage registry — every stage is a standalone function registered via decorator.

Usage:
    @stage(id="S2.01", layer=Layer.CLASSIFICATION, dependencies=["S1.02"], after=["S1.03"])
    def parameter_search(ctx: DetectionContext) -> None:
        ...

``dependencies`` must run first; a stage whose dependency is skipped is
skipped too. ``after`` only orders: when a listed stage runs, it runs
first, and when it is skipped nothing else changes.
"""

from __future__ import annotations

import enum
import heapq
import logging
from dataclasses import dataclass, field
from graphlib import CycleError, TopologicalSorter
from typing import TYPE_CHECKING, Callable, Iterable

if TYPE_CHECKING:
    from obstacle_detection.engine.context import DetectionContext

logger = logging.getLogger(__name__)


class Layer(enum.IntEnum):
    SEGMENTATION = 0
    GEOMETRY = 1
    CLASSIFICATION = 2


@dataclass
class StageSpec:
    id: str
    layer: Layer
    fn: Callable[["DetectionContext"], None]
    dependencies: list[str] = field(default_factory=list)
    after: list[str] = field(default_factory=list)
    description: str = ""


class StageRegistry:
    """Registry of pipeline stages."""

    def __init__(self) -> None:
        self._stages: dict[str, StageSpec] = {}

    def register(self, spec: StageSpec) -> None:
        if spec.id in self._stages:
            raise ValueError(f"Duplicate stage ID: {spec.id}")
        self._stages[spec.id] = spec
        logger.debug("Registered stage %s (%s)", spec.id, spec.layer.name)

    def get(self, stage_id: str) -> StageSpec:
        return self._stages[stage_id]

    def runnable(self, skip: Iterable[str] = ()) -> dict[str, StageSpec]:
        """Stages left once ``skip`` and everything requiring it are removed."""
        skipped = set(skip)
        pool = {sid: spec for sid, spec in self._stages.items() if sid not in skipped}
        changed = True
        while changed:
            changed = False
            for sid, spec in list(pool.items()):
                missing = [dep for dep in spec.dependencies if dep not in pool]
                if missing:
                    logger.debug("Stage %s dropped, missing %s", sid, missing)
                    del pool[sid]
                    changed = True
        return pool

    def resolve_order(self, skip: Iterable[str] = ()) -> list[StageSpec]:
        """Runnable stages in dependency order.

        Among stages that are ready at the same time, lower layers and then
        lower ids go first, so the order is stable across runs.
        """
        pool = self.runnable(skip)
        graph = {
            sid: [dep for dep in (*spec.dependencies, *spec.after) if dep in pool]
            for sid, spec in pool.items()
        }

        sorter = TopologicalSorter(graph)
        try:
            sorter.prepare()
        except CycleError as e:
            raise ValueError(f"Circular dependency detected among: {sorted(set(e.args[1]))}") from e

        ready: list[tuple[int, str]] = []
        ordered: list[StageSpec] = []
        while sorter.is_active():
            for sid in sorter.get_ready():
                heapq.heappush(ready, (pool[sid].layer, sid))
            _, sid = heapq.heappop(ready)
            ordered.append(pool[sid])
            sorter.done(sid)
        return ordered

    @property
    def count(self) -> int:
        return len(self._stages)


# Module-level singleton
_registry = StageRegistry()


def get_registry() -> StageRegistry:
    return _registry


def stage(
    *,
    id: str,
    layer: Layer,
    dependencies: list[str] | None = None,
    after: list[str] | None = None,
    description: str = "",
    registry: StageRegistry | None = None,
):
    """Decorator to register a stage function."""

    def decorator(fn: Callable[["DetectionContext"], None]):
        spec = StageSpec(
            id=id,
            layer=layer,
            fn=fn,
            dependencies=dependencies or [],
            after=after or [],
            description=description,
        )
        (registry or _registry).register(spec)
        return fn

    return decorator
