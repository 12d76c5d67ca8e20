"""S2.02 — Raster.

Render the classified map over the scanned region as a grayscale grid.
"""

from __future__ import annotations

from chunkgrid.engine.context import PipelineContext
from chunkgrid.engine.registry import Layer, stage
from chunkgrid.utils.rasterizer import rasterize


@stage(
    id="S2.02",
    layer=Layer.CLASSIFICATION,
    dependencies=["S0.01", "S2.01"],
    description="Rasterize classified chunks over the scanned region",
)
def raster(ctx: PipelineContext) -> None:
    ctx.raster = rasterize(ctx.require("classified"), ctx.require("sample").region)
