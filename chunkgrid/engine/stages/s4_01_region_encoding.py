"""S4.01 — Region Encoding.

Palette-index the placed blocks and pack them into 64-bit words.
"""

from __future__ import annotations

from chunkgrid.engine.context import PipelineContext
from chunkgrid.engine.registry import Layer, stage
from chunkgrid.schematic.region import encode_region


@stage(
    id="S4.01",
    layer=Layer.ENCODING,
    dependencies=["S3.01"],
    description="Encode the placed region as a packed block state array",
)
def region_encoding(ctx: PipelineContext) -> None:
    ctx.encoded = encode_region(ctx.require("region"), ctx.config.width_mode)
