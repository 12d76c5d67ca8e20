"""Voxel regions and their palette-indexed, bit-packed encoding."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray

from chunkgrid.engine.config import WidthMode
from chunkgrid.schematic.blocks import AIR, BlockPos, BlockState
from chunkgrid.utils.bitpack import bits_for_palette, empty_words, read_field, write_field

logger = logging.getLogger(__name__)

# Legacy writers never used more than this many bits per block.
LEGACY_MAX_BITS = 2


class Region:
    """A named, sparse set of block placements."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.blocks: dict[BlockPos, BlockState] = {}

    def __len__(self) -> int:
        return len(self.blocks)

    def set_block_state(self, pos: BlockPos, state: BlockState) -> None:
        self.blocks[pos] = state

    def fill(self, start: BlockPos, end: BlockPos, state: BlockState) -> None:
        """Set every block in the inclusive box spanned by ``start`` and ``end``."""
        lo = start.min(end)
        hi = start.max(end)
        for z in range(lo.z, hi.z + 1):
            for y in range(lo.y, hi.y + 1):
                for x in range(lo.x, hi.x + 1):
                    self.blocks[BlockPos(x, y, z)] = state

    def bounds(self) -> tuple[BlockPos, BlockPos]:
        """(position, size) of the tight bounding box; zero size when empty."""
        if not self.blocks:
            return BlockPos.zero(), BlockPos.zero()
        positions = iter(self.blocks)
        lo = hi = next(positions)
        for pos in positions:
            lo = lo.min(pos)
            hi = hi.max(pos)
        return lo, hi - lo + BlockPos.one()


class Palette:
    """Insertion-ordered block state → index map; index 0 is always air."""

    def __init__(self) -> None:
        self._index: dict[BlockState, int] = {AIR: 0}

    def __len__(self) -> int:
        return len(self._index)

    def add(self, state: BlockState) -> int:
        if state not in self._index:
            self._index[state] = len(self._index)
        return self._index[state]

    def index(self, state: BlockState) -> int:
        return self._index[state]

    def states(self) -> list[BlockState]:
        return list(self._index)


def field_width(palette_size: int, mode: WidthMode = WidthMode.EXACT) -> int:
    bits = bits_for_palette(palette_size)
    if WidthMode(mode) is WidthMode.LEGACY_CLAMPED:
        return min(bits, LEGACY_MAX_BITS)
    return bits


def linear_index(pos: BlockPos, size: BlockPos) -> int:
    """Row-major voxel index: y slowest, then z, x fastest."""
    return (pos.y * size.z + pos.z) * size.x + pos.x


@dataclass
class EncodedRegion:
    name: str
    position: BlockPos
    size: BlockPos
    palette: list[BlockState]
    bit_width: int
    block_states: NDArray[np.uint64] = field(repr=False)
    block_count: int = 0

    @property
    def volume(self) -> int:
        return self.size.volume

    def index_at(self, pos: BlockPos) -> int:
        """Palette index stored for ``pos`` relative to ``position``."""
        return read_field(self.block_states, self.bit_width, linear_index(pos, self.size))

    def state_at(self, pos: BlockPos) -> BlockState:
        return self.palette[self.index_at(pos)]


def encode_region(region: Region, width_mode: WidthMode = WidthMode.EXACT) -> EncodedRegion:
    """Palette-index and bit-pack ``region`` over its tight bounding box."""
    position, size = region.bounds()
    local = sorted(
        (linear_index(pos - position, size), state) for pos, state in region.blocks.items()
    )

    palette = Palette()
    for _, state in local:
        palette.add(state)

    bits = field_width(len(palette), width_mode)
    field_mask = (1 << bits) - 1
    words = empty_words(size.volume, bits)

    truncated = 0
    for idx, state in local:
        value = palette.index(state)
        if value > field_mask:
            truncated += 1
            value &= field_mask
        write_field(words, bits, idx, value)

    if truncated:
        logger.warning(
            "Region %s: %d block indices truncated to %d bits (palette of %d)",
            region.name,
            truncated,
            bits,
            len(palette),
        )

    logger.debug(
        "Encoded region %s: size %s, %d palette entries, %d bits, %d words",
        region.name,
        (size.x, size.y, size.z),
        len(palette),
        bits,
        len(words),
    )
    return EncodedRegion(
        name=region.name,
        position=position,
        size=size,
        palette=palette.states(),
        bit_width=bits,
        block_states=words,
        block_count=len(local),
    )
