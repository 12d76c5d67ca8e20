"""Cluster sampler — finds exactly K cluster chunks by growing a scan column by column.

Only cells whose hash is at least ``floor = hash_space_size - K`` are admitted
to the pending heap. The i-th accepted cell (0-based) must have a hash no
greater than ``floor + i``; while the heap minimum does not qualify, another
column is scanned. The scan area is capped so an unreachable K fails instead
of looping forever.
"""

from __future__ import annotations

import heapq
import logging

from chunkgrid.engine.config import PipelineConfig
from chunkgrid.errors import UnsatisfiableClusterError
from chunkgrid.models.grid import GridCoordinate, HashedCell, SampleResult, ScanRegion
from chunkgrid.utils.hashing import HashFn, make_hasher

logger = logging.getLogger(__name__)


class ClusterSampler:
    """Owned scan state: accepted cells, pending heap and the scan frontier."""

    def __init__(
        self,
        cluster_size: int,
        hash_space_size: int,
        offset: tuple[int, int] = (0, 0),
        scan_width: int = 1,
        max_scan_area: int | None = None,
        hash_fn: HashFn | None = None,
    ) -> None:
        self.cluster_size = cluster_size
        self.hash_space_size = hash_space_size
        self.offset = GridCoordinate(*offset)
        self.scan_width = scan_width
        self.max_scan_area = max_scan_area
        self.hash_fn = hash_fn or make_hasher(hash_space_size)

        self.floor = hash_space_size - cluster_size
        self.accepted: dict[GridCoordinate, HashedCell] = {}
        self.pending: list[HashedCell] = []
        self.columns = 0

    @classmethod
    def from_config(cls, config: PipelineConfig, hash_fn: HashFn | None = None) -> ClusterSampler:
        return cls(
            cluster_size=config.cluster_size,
            hash_space_size=config.hash_space_size,
            offset=config.offset,
            scan_width=config.scan_width,
            max_scan_area=config.max_scan_area,
            hash_fn=hash_fn,
        )

    @property
    def done(self) -> bool:
        return len(self.accepted) >= self.cluster_size

    @property
    def bound(self) -> int:
        """Largest hash the next accepted cell may carry."""
        return self.floor + len(self.accepted)

    @property
    def region(self) -> ScanRegion:
        return ScanRegion(offset=self.offset, columns=self.columns, width=self.scan_width)

    def advance(self) -> bool:
        """Accept one qualifying candidate, or scan one more column. Returns ``done``."""
        if self.done:
            return True

        if self.pending and self.pending[0].hash <= self.bound:
            cell = heapq.heappop(self.pending)
            self.accepted[cell.coord] = cell
        else:
            self._scan_column()
        return self.done

    def run(self) -> SampleResult:
        while not self.advance():
            pass
        logger.debug(
            "Accepted %d cells after %d columns (%d still pending)",
            len(self.accepted),
            self.columns,
            len(self.pending),
        )
        return SampleResult(
            cells=tuple(self.accepted.values()),
            region=self.region,
            admission_floor=self.floor,
        )

    def _scan_column(self) -> None:
        next_area = (self.columns + 1) * self.scan_width
        if self.max_scan_area is not None and next_area > self.max_scan_area:
            raise UnsatisfiableClusterError(
                self.cluster_size, len(self.accepted), self.max_scan_area
            )

        x = self.offset.x + self.columns
        for z in range(self.offset.z, self.offset.z + self.scan_width):
            h = self.hash_fn(x, z)
            if h >= self.floor:
                heapq.heappush(self.pending, HashedCell(h, GridCoordinate(x, z)))
        self.columns += 1


def sample_cluster(config: PipelineConfig, hash_fn: HashFn | None = None) -> SampleResult:
    """Run a sampler built from ``config`` to completion."""
    logger.info("Looking for %d cluster chunks...", config.cluster_size)
    result = ClusterSampler.from_config(config, hash_fn=hash_fn).run()
    logger.info(
        "Found %d cluster chunks in a %d x %d scan",
        len(result),
        result.region.columns,
        result.region.width,
    )
    return result
