"""Pipeline orchestrator — runs stages in dependency order, failing fast."""

from __future__ import annotations

import logging
import time

from chunkgrid.engine.config import PipelineConfig
from chunkgrid.engine.context import PipelineContext
from chunkgrid.engine.registry import Layer, StageRegistry, StageSpec, get_registry
from chunkgrid.errors import ChunkGridError, StageError
from chunkgrid.utils.hashing import HashFn

logger = logging.getLogger(__name__)


def register_stages() -> None:
    """Import all stage modules so @stage decorators fire."""
    import importlib
    import pkgutil

    package = importlib.import_module("chunkgrid.engine.stages")
    for module_name in sorted(m.name for m in pkgutil.iter_modules(package.__path__)):
        importlib.import_module(f"chunkgrid.engine.stages.{module_name}")


class Pipeline:
    """Orchestrates the stage pipeline."""

    def __init__(
        self,
        registry: StageRegistry | None = None,
        config: PipelineConfig | None = None,
    ) -> None:
        if registry is None:
            register_stages()
            registry = get_registry()
        self.registry = registry
        self.config = config or PipelineConfig()

    def new_context(self, hash_fn: HashFn | None = None) -> PipelineContext:
        return PipelineContext(config=self.config, hash_fn=hash_fn)

    def run(
        self,
        ctx: PipelineContext | None = None,
        stage_ids: set[str] | None = None,
    ) -> PipelineContext:
        """Run the requested stages (all by default) plus their dependencies."""
        ctx = ctx or self.new_context()
        start = time.perf_counter()
        ordered = self.registry.resolve_order(stage_ids)

        logger.info("Pipeline: %d stages queued", len(ordered))

        for spec in ordered:
            self._run_stage(ctx, spec)

        total = (time.perf_counter() - start) * 1000
        logger.info(
            "Pipeline complete: %d stages in %.0fms",
            len(ctx.completed_stages),
            total,
        )
        return ctx

    def run_layer(self, ctx: PipelineContext, layer: Layer) -> PipelineContext:
        """Run only stages in a specific layer."""
        for spec in self.registry.get_layer(layer):
            self._run_stage(ctx, spec)
        return ctx

    def _run_stage(self, ctx: PipelineContext, spec: StageSpec) -> None:
        logger.debug("  %s: %s", spec.id, spec.label)
        t0 = time.perf_counter()
        try:
            spec.fn(ctx)
        except ChunkGridError:
            raise
        except (ValueError, RuntimeError, KeyError) as e:
            raise StageError(spec.id, e) from e
        elapsed = (time.perf_counter() - t0) * 1000
        ctx.completed_stages.append(spec.id)
        ctx.timings_ms[spec.id] = elapsed
        logger.debug("  %s completed in %.1fms", spec.id, elapsed)


def create_pipeline(config: PipelineConfig | None = None) -> Pipeline:
    """Factory function for creating a pipeline instance."""
    return Pipeline(config=config)
