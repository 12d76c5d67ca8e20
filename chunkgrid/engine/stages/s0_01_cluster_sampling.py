"""S0.01 — Cluster Sampling.

Scan columns of chunks until exactly ``cluster_size`` cluster chunks are accepted.
"""

from __future__ import annotations

from chunkgrid.cluster.sampler import sample_cluster
from chunkgrid.engine.context import PipelineContext
from chunkgrid.engine.registry import Layer, stage


@stage(
    id="S0.01",
    layer=Layer.SAMPLING,
    description="Find cluster chunks with a bounded incremental hash scan",
)
def cluster_sampling(ctx: PipelineContext) -> None:
    ctx.sample = sample_cluster(ctx.config, hash_fn=ctx.hash_fn)
