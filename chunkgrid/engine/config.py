"""Pipeline configuration — the tunables of one chunk grid run."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from chunkgrid.errors import ConfigurationError
from chunkgrid.utils.hashing import is_power_of_two


class Placement(str, enum.Enum):
    """How classified cells become voxels."""

    PLANAR = "planar"  # one voxel per cell, 2-D
    VOLUMETRIC = "volumetric"  # chunk-scale pathways with markers, 3-D


class WidthMode(str, enum.Enum):
    """Bit width policy for packed block states."""

    EXACT = "exact"
    # Legacy writers capped fields at 2 bits, truncating indices >= 4.
    LEGACY_CLAMPED = "legacy"


@dataclass
class PipelineConfig:
    """Controls sampling, placement and encoding."""

    # Scan origin (x, z); columns grow along +x, each spans scan_width cells along +z
    offset: tuple[int, int] = (-20, 20)
    scan_width: int = 50

    # Number of cluster chunks to find
    cluster_size: int = 810
    # Hash values are masked to [0, hash_space_size)
    hash_space_size: int = 2048
    # Upper bound on scanned cells before giving up
    max_scan_area: int = 50 * 4096

    placement: Placement = Placement.VOLUMETRIC
    width_mode: WidthMode = WidthMode.EXACT
    # Blocks per chunk edge for volumetric placement
    chunk_size: int = 16

    region_name: str = "chests"
    schematic_name: str | None = "ChunkGrid"
    author: str | None = None
    description: str | None = None

    def __post_init__(self) -> None:
        self.placement = Placement(self.placement)
        self.width_mode = WidthMode(self.width_mode)
        self.offset = (int(self.offset[0]), int(self.offset[1]))

        size = self.hash_space_size
        if not is_power_of_two(size):
            raise ConfigurationError(f"hash_space_size must be a power of two, got {size}")
        if not 1 <= self.cluster_size <= size:
            raise ConfigurationError(
                f"cluster_size must be in [1, {size}], got {self.cluster_size}"
            )
        if self.scan_width < 1:
            raise ConfigurationError(f"scan_width must be positive, got {self.scan_width}")
        if self.max_scan_area < self.scan_width:
            raise ConfigurationError(
                f"max_scan_area must cover at least one column ({self.scan_width} cells), "
                f"got {self.max_scan_area}"
            )
        if self.chunk_size < 1:
            raise ConfigurationError(f"chunk_size must be positive, got {self.chunk_size}")
        if not self.region_name:
            raise ConfigurationError("region_name must not be empty")

    @property
    def admission_floor(self) -> int:
        """Lowest hash a cell may carry to be considered at all."""
        return self.hash_space_size - self.cluster_size
