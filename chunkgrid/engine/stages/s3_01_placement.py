"""S3.01 — Block Placement.

Planar runs put one block per classified chunk; volumetric runs lay
chunk-scale concrete pathways with chests at chunk borders.
"""

from __future__ import annotations

from chunkgrid.cluster.placement import place_blocks
from chunkgrid.engine.context import PipelineContext
from chunkgrid.engine.registry import Layer, stage
from chunkgrid.models.grid import GridCoordinate


@stage(
    id="S3.01",
    layer=Layer.PLACEMENT,
    dependencies=["S1.01", "S2.01"],
    description="Place blocks for classified chunks",
)
def placement(ctx: PipelineContext) -> None:
    cfg = ctx.config
    ctx.region = place_blocks(
        ctx.require("classified"),
        ctx.require("tree"),
        cfg.placement,
        origin=GridCoordinate(*cfg.offset),
        region_name=cfg.region_name,
        chunk_size=cfg.chunk_size,
    )
