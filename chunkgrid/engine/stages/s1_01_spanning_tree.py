"""S1.01 — Spanning Tree.

Connect the cluster chunks with a Manhattan-distance minimum spanning tree.
"""

from __future__ import annotations

import logging

from chunkgrid.cluster.spanning_tree import build_spanning_tree
from chunkgrid.engine.context import PipelineContext
from chunkgrid.engine.registry import Layer, stage

logger = logging.getLogger(__name__)


@stage(
    id="S1.01",
    layer=Layer.TREE,
    dependencies=["S0.01"],
    description="Build a minimum spanning tree over cluster chunks",
)
def spanning_tree(ctx: PipelineContext) -> None:
    logger.info("Generating tree...")
    ctx.tree = build_spanning_tree(ctx.require("sample").coordinates)
