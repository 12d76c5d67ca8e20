"""Stage registry — maps stage ids to the functions that fill the pipeline context.

Stages run layer by layer (sampling, tree, classification, placement,
encoding) and by id within a layer. A stage may only depend on stages that
run before it in that order:

    @stage(id="S1.01", layer=Layer.TREE, dependencies=["S0.01"])
    def spanning_tree(ctx: PipelineContext) -> None:
        ctx.tree = build_spanning_tree(ctx.require("sample").coordinates)
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Iterable

if TYPE_CHECKING:
    from chunkgrid.engine.context import PipelineContext

logger = logging.getLogger(__name__)

StageFn = Callable[["PipelineContext"], None]


class Layer(enum.IntEnum):
    SAMPLING = 0
    TREE = 1
    CLASSIFICATION = 2
    PLACEMENT = 3
    ENCODING = 4


@dataclass
class StageSpec:
    id: str
    layer: Layer
    fn: StageFn
    dependencies: tuple[str, ...] = ()
    description: str = ""

    @property
    def label(self) -> str:
        return self.description or self.fn.__name__


def _run_position(spec: StageSpec) -> tuple[Layer, str]:
    return spec.layer, spec.id


class StageRegistry:
    """Pipeline stages keyed by id."""

    def __init__(self) -> None:
        self._stages: dict[str, StageSpec] = {}

    def __len__(self) -> int:
        return len(self._stages)

    def register(self, spec: StageSpec) -> None:
        if spec.id in self._stages:
            raise ValueError(f"Duplicate stage ID: {spec.id}")
        self._stages[spec.id] = spec
        logger.debug("Registered stage %s (%s): %s", spec.id, spec.layer.name, spec.label)

    def get(self, stage_id: str) -> StageSpec:
        return self._stages[stage_id]

    def get_layer(self, layer: Layer) -> list[StageSpec]:
        return sorted((s for s in self._stages.values() if s.layer == layer), key=_run_position)

    def with_dependencies(self, stage_ids: Iterable[str]) -> set[str]:
        """``stage_ids`` plus everything they need upstream."""
        needed: set[str] = set()
        pending = list(stage_ids)
        while pending:
            sid = pending.pop()
            if sid in needed:
                continue
            if sid not in self._stages:
                raise KeyError(f"Unknown stage: {sid}")
            needed.add(sid)
            pending.extend(self._stages[sid].dependencies)
        return needed

    def resolve_order(self, requested_ids: Iterable[str] | None = None) -> list[StageSpec]:
        """Stages to run, in run order. All of them when ``requested_ids`` is None.

        Raises KeyError for an unknown id or dependency and ValueError when a
        stage would run before one of its dependencies.
        """
        if requested_ids is None:
            ids: Iterable[str] = self._stages
        else:
            ids = self.with_dependencies(requested_ids)
        ordered = sorted((self._stages[sid] for sid in ids), key=_run_position)

        done: set[str] = set()
        for spec in ordered:
            for dep in spec.dependencies:
                if dep not in self._stages:
                    raise KeyError(f"Stage {spec.id} depends on unknown stage {dep}")
                if dep not in done:
                    raise ValueError(f"Stage {spec.id} would run before its dependency {dep}")
            done.add(spec.id)
        return ordered


_registry = StageRegistry()


def get_registry() -> StageRegistry:
    return _registry


def stage(
    *,
    id: str,
    layer: Layer,
    dependencies: Iterable[str] = (),
    description: str = "",
):
    """Register the decorated function as a pipeline stage."""

    def decorator(fn: StageFn) -> StageFn:
        _registry.register(
            StageSpec(
                id=id,
                layer=layer,
                fn=fn,
                dependencies=tuple(dependencies),
                description=description,
            )
        )
        return fn

    return decorator
