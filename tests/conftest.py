"""Shared test fixtures."""

from __future__ import annotations

import pytest

from chunkgrid.engine.config import PipelineConfig, Placement


# Hash lookup table for hash space 8, K = 2, two cells per column from (0, 0).
# Column 0: (0,0) is below the floor of 6, (0,1) = 6 is accepted at once.
# Column 1: (1,0) = 7 is accepted as the second cell.
SEEDED_TABLE = {
    (0, 0): 3,
    (0, 1): 6,
    (1, 0): 7,
    (1, 1): 2,
    (2, 0): 6,
    (2, 1): 6,
}


def _table_hasher(table: dict[tuple[int, int], int], default: int = 0):
    def _hash(x: int, z: int) -> int:
        return table.get((x, z), default)

    return _hash


@pytest.fixture
def table_hasher():
    """Factory for hash functions backed by a lookup table."""
    return _table_hasher


@pytest.fixture
def seeded_hasher():
    return _table_hasher(SEEDED_TABLE)


@pytest.fixture
def small_config() -> PipelineConfig:
    """A quick live-hash configuration."""
    return PipelineConfig(
        offset=(-3, 5),
        scan_width=8,
        cluster_size=12,
        hash_space_size=64,
        max_scan_area=8 * 1000,
        placement=Placement.VOLUMETRIC,
        chunk_size=4,
    )


@pytest.fixture
def planar_config() -> PipelineConfig:
    return PipelineConfig(
        offset=(0, 0),
        scan_width=6,
        cluster_size=9,
        hash_space_size=32,
        max_scan_area=6 * 1000,
        placement=Placement.PLANAR,
    )
