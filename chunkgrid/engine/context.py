"""PipelineContext — carries each stage's output to the stages after it.

Stages read earlier results and store a new value; they never modify a value
another stage produced.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from chunkgrid.engine.config import PipelineConfig

if TYPE_CHECKING:
    import numpy as np
    from numpy.typing import NDArray

    from chunkgrid.models.grid import ClassifiedMap, GridCoordinate, SampleResult, SpanningTree
    from chunkgrid.schematic.region import EncodedRegion, Region
    from chunkgrid.utils.hashing import HashFn


@dataclass
class PipelineContext:
    """State flowing through the whole pipeline."""

    config: PipelineConfig = field(default_factory=PipelineConfig)
    # Overrides the hash oracle; tests seed lookup tables through this
    hash_fn: HashFn | None = None

    # --- Layer 0: sampling ---
    sample: SampleResult | None = None

    # --- Layer 1: tree ---
    tree: SpanningTree | None = None

    # --- Layer 2: classification ---
    classified: ClassifiedMap | None = None
    raster: NDArray[np.uint8] | None = None

    # --- Layer 3: placement ---
    region: Region | None = None

    # --- Layer 4: encoding ---
    encoded: EncodedRegion | None = None

    # --- Pipeline metadata ---
    completed_stages: list[str] = field(default_factory=list)
    timings_ms: dict[str, float] = field(default_factory=dict)

    def require(self, name: str) -> Any:
        """Return an upstream result, failing clearly if its stage has not run."""
        value = getattr(self, name)
        if value is None:
            raise RuntimeError(f"Pipeline context has no '{name}' yet")
        return value

    @property
    def anomalies(self) -> list[GridCoordinate]:
        return list(self.classified.anomalies) if self.classified is not None else []
