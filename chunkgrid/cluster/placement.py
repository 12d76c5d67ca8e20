"""Placement pass — turn classified chunks into block placements."""

from __future__ import annotations

import logging

from chunkgrid.cluster.spanning_tree import manhattan
from chunkgrid.engine.config import Placement
from chunkgrid.models.grid import CellClass, ClassifiedMap, GridCoordinate, SpanningTree
from chunkgrid.schematic.blocks import CHEST, CONCRETE, BlockPos, BlockState
from chunkgrid.schematic.region import Region

logger = logging.getLogger(__name__)

_CELL_BLOCKS: dict[CellClass, BlockState] = {
    CellClass.CONNECTOR: CONCRETE,
    CellClass.ANCHOR: CHEST,
}

# Neighbour step (dx, dz) in visiting order.
_STEPS: tuple[tuple[int, int], ...] = ((1, 0), (-1, 0), (0, 1), (0, -1))


def place_planar(classified: ClassifiedMap, region_name: str) -> Region:
    """One block per classified cell on the y = 0 plane."""
    region = Region(region_name)
    for coord, cls in sorted(classified.cells.items()):
        region.set_block_state(BlockPos(coord.x, 0, coord.z), _CELL_BLOCKS[cls])
    return region


def _marker_offset(step: tuple[int, int], chunk_size: int) -> tuple[int, int]:
    """Local (x, z) of the border block facing ``step``."""
    centre = chunk_size // 2
    dx, dz = step
    x = chunk_size - 1 if dx > 0 else 0 if dx < 0 else centre
    z = chunk_size - 1 if dz > 0 else 0 if dz < 0 else centre
    return x, z


def place_volumetric(
    classified: ClassifiedMap,
    start: GridCoordinate,
    region_name: str,
    chunk_size: int = 16,
) -> Region:
    """Walk classified chunks breadth-first from ``start``, laying pathways.

    Every newly reached neighbour gets a concrete line at y = 0 from the
    current chunk centre to its own centre, and a chest at y = 1 on the
    current chunk's border facing it.
    """
    region = Region(region_name)
    centre = chunk_size // 2

    connected = {start}
    frontier = [start]
    while frontier:
        reached: list[GridCoordinate] = []
        for chunk in sorted(frontier):
            base_x = chunk.x * chunk_size
            base_z = chunk.z * chunk_size
            for step in _STEPS:
                pos = GridCoordinate(chunk.x + step[0], chunk.z + step[1])
                if pos not in classified or pos in connected:
                    continue
                region.fill(
                    BlockPos(base_x + centre, 0, base_z + centre),
                    BlockPos(pos.x * chunk_size + centre, 0, pos.z * chunk_size + centre),
                    CONCRETE,
                )
                mx, mz = _marker_offset(step, chunk_size)
                region.set_block_state(BlockPos(base_x + mx, 1, base_z + mz), CHEST)
                connected.add(pos)
                reached.append(pos)
        frontier = reached

    unreached = len(classified) - len(connected)
    if unreached:
        logger.warning("%d classified chunks not reachable from %s", unreached, start)
    return region


def start_chunk(tree: SpanningTree, origin: GridCoordinate) -> GridCoordinate:
    """The tree node closest to ``origin``; the first such node on ties."""
    return min(tree.nodes, key=lambda node: manhattan(node, origin))


def place_blocks(
    classified: ClassifiedMap,
    tree: SpanningTree,
    mode: Placement,
    origin: GridCoordinate,
    region_name: str = "chests",
    chunk_size: int = 16,
) -> Region:
    mode = Placement(mode)
    if mode is Placement.PLANAR:
        region = place_planar(classified, region_name)
    else:
        start = start_chunk(tree, origin)
        region = place_volumetric(classified, start, region_name, chunk_size)
    logger.info("Placed %d blocks (%s)", len(region), mode.value)
    return region
