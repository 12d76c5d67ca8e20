"""S2.01 — Topology Classification."""

from __future__ import annotations

from chunkgrid.cluster.classifier import classify
from chunkgrid.engine.context import PipelineContext
from chunkgrid.engine.registry import Layer, stage


@stage(
    id="S2.01",
    layer=Layer.CLASSIFICATION,
    dependencies=["S1.01"],
    description="Mark tree edge paths as connectors and cluster chunks as anchors",
)
def topology(ctx: PipelineContext) -> None:
    ctx.classified = classify(ctx.require("tree"))
