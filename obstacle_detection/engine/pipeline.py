"""Pipeline orchestrator — runs stages in dependency order with adaptive gating."""

from __future__ import annotations

import importlib
import logging
import pkgutil
import time

from obstacle_detection.engine.config import DetectionConfig
from obstacle_detection.engine.context import DetectionContext
from obstacle_detection.engine.registry import Layer, StageRegistry, get_registry
from obstacle_detection.grid.occupancy import CellPredicate, Grid

logger = logging.getLogger(__name__)

STAGE_PACKAGES = ["segmentation", "geometry", "classification"]


class Pipeline:
    """Orchestrates the detection pipeline."""

    def __init__(
        self,
        registry: StageRegistry | None = None,
        config: DetectionConfig | None = None,
    ) -> None:
        self.registry = registry or get_registry()
        self.config = config or DetectionConfig()

    def run(self, ctx: DetectionContext) -> DetectionContext:
        """Run the full pipeline on the given context."""
        start = time.perf_counter()

        skip_ids = self._adaptive_gate(ctx)
        ordered = self.registry.resolve_order(skip_ids)

        logger.info(
            "Pipeline: %d stages queued (%d skipped)",
            len(ordered),
            self.registry.count - len(ordered),
        )

        for spec in ordered:
            t0 = time.perf_counter()
            try:
                spec.fn(ctx)
                ctx.completed_stages.add(spec.id)
                elapsed = (time.perf_counter() - t0) * 1000
                logger.debug("  %s completed in %.1fms", spec.id, elapsed)
            except Exception as e:
                ctx.errors[spec.id] = str(e)
                logger.warning("  %s FAILED: %s", spec.id, e)

        total = (time.perf_counter() - start) * 1000
        logger.info(
            "Pipeline complete: %d/%d stages, %d groups, %d shapes in %.0fms",
            len(ctx.completed_stages),
            len(ordered),
            ctx.num_groups,
            len(ctx.fits),
            total,
        )
        return ctx

    def run_layer(self, ctx: DetectionContext, layer: Layer) -> DetectionContext:
        """Run only stages in a specific layer, still honouring the gate."""
        for spec in self.registry.resolve_order(self._adaptive_gate(ctx)):
            if spec.layer != layer:
                continue
            try:
                spec.fn(ctx)
                ctx.completed_stages.add(spec.id)
            except Exception as e:
                ctx.errors[spec.id] = str(e)
                logger.warning("  %s FAILED: %s", spec.id, e)
        return ctx

    def _adaptive_gate(self, ctx: DetectionContext) -> set[str]:
        """Determine which stages to skip based on the detection config.

        - Exactly one classifier runs: parameter search or gradient fit
        - Boundary extraction only runs when fits use the outline
        """
        skip: set[str] = set()
        config = ctx.config

        if config.fit_method == "gradient":
            skip.add("S2.01")  # Parameter search
        else:
            skip.add("S2.02")  # Gradient fit

        if not config.fit_boundary_only:
            skip.add("S1.03")  # Boundary cells

        return skip


def register_stages() -> None:
    """Import all stage modules so @stage decorators fire."""
    for package_name in STAGE_PACKAGES:
        full_name = f"obstacle_detection.engine.{package_name}"
        package = importlib.import_module(full_name)
        for _, module_name, _ in pkgutil.iter_modules(package.__path__):
            importlib.import_module(f"{full_name}.{module_name}")


def create_pipeline(config: DetectionConfig | None = None) -> Pipeline:
    """Factory function for creating a pipeline over the registered stages."""
    register_stages()
    return Pipeline(config=config)


def detect_obstacles(
    grid: Grid,
    config: DetectionConfig | None = None,
    predicate: CellPredicate | None = None,
) -> DetectionContext:
    """Segment a grid snapshot and classify every plausible group.

    Returns the finished context; ``ctx.group_table`` holds the partition and
    ``ctx.fits`` the shape per accepted group.
    """
    config = config or DetectionConfig()
    ctx = DetectionContext(grid=grid, config=config, predicate=predicate)
    return create_pipeline(config).run(ctx)
