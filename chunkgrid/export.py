"""Write a finished pipeline run to disk: raster image and schematic."""

from __future__ import annotations

import logging
from pathlib import Path

from chunkgrid.engine.context import PipelineContext
from chunkgrid.models.grid import CellClass
from chunkgrid.models.schematic import RegionSummary, RunSummary, SchematicMetadata
from chunkgrid.schematic.serializer import Schematic, write_schematic
from chunkgrid.utils.rasterizer import save_png

logger = logging.getLogger(__name__)

RASTER_FILENAME = "chunks.png"
SCHEMATIC_FILENAME = "chunks.litematic"


def build_schematic(ctx: PipelineContext) -> Schematic:
    cfg = ctx.config
    schematic = Schematic(
        SchematicMetadata(
            name=cfg.schematic_name,
            author=cfg.author,
            description=cfg.description,
        )
    )
    schematic.add_region(ctx.require("encoded"))
    return schematic


def summarize(ctx: PipelineContext) -> RunSummary:
    sample = ctx.require("sample")
    classified = ctx.require("classified")
    regions = []
    if ctx.encoded is not None:
        enc = ctx.encoded
        regions.append(
            RegionSummary(
                name=enc.name,
                position=(enc.position.x, enc.position.y, enc.position.z),
                size=(enc.size.x, enc.size.y, enc.size.z),
                palette=[s.name for s in enc.palette],
                bit_width=enc.bit_width,
                block_count=enc.block_count,
            )
        )
    return RunSummary(
        cluster_size=len(sample),
        scanned_columns=sample.region.columns,
        scan_width=sample.region.width,
        tree_weight=ctx.require("tree").total_weight,
        classified_cells=len(classified),
        connector_cells=len(classified.of_class(CellClass.CONNECTOR)),
        anomalies=[(c.x, c.z) for c in classified.anomalies],
        regions=regions,
    )


def export_run(ctx: PipelineContext, out_dir: str | Path) -> RunSummary:
    """Write ``chunks.png`` and ``chunks.litematic`` under ``out_dir``."""
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    logger.info("Generating image...")
    raster_path = save_png(ctx.require("raster"), out_dir / RASTER_FILENAME)

    logger.info("Generating schematic...")
    schematic_path = write_schematic(build_schematic(ctx), out_dir / SCHEMATIC_FILENAME)

    summary = summarize(ctx)
    summary.raster_path = str(raster_path)
    summary.schematic_path = str(schematic_path)
    return summary
