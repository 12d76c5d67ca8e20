"""Write encoded regions as a gzip-compressed NBT schematic document."""

from __future__ import annotations

import gzip
import logging
from pathlib import Path

import nbtlib

from chunkgrid.models.schematic import SchematicMetadata
from chunkgrid.schematic.blocks import BlockPos
from chunkgrid.schematic.region import EncodedRegion
from chunkgrid.utils.bitpack import to_signed_words

logger = logging.getLogger(__name__)

SCHEMATIC_VERSION = 4


def region_to_tag(region: EncodedRegion) -> nbtlib.Compound:
    return nbtlib.Compound(
        {
            "Position": region.position.to_tag(),
            "Size": region.size.to_tag(),
            "BlockStatePalette": nbtlib.List[nbtlib.Compound](
                [state.to_tag() for state in region.palette]
            ),
            "BlockStates": nbtlib.LongArray(to_signed_words(region.block_states)),
            "Entities": nbtlib.List[nbtlib.Compound](),
            "TileEntities": nbtlib.List[nbtlib.Compound](),
            "PendingBlockTicks": nbtlib.List[nbtlib.Compound](),
        }
    )


class Schematic:
    """A multi-region schematic document."""

    def __init__(self, metadata: SchematicMetadata | None = None) -> None:
        self.metadata = metadata or SchematicMetadata()
        self.regions: list[EncodedRegion] = []

    def add_region(self, region: EncodedRegion) -> None:
        if any(r.name == region.name for r in self.regions):
            raise ValueError(f"Duplicate region name: {region.name}")
        self.regions.append(region)

    @property
    def total_blocks(self) -> int:
        return sum(r.block_count for r in self.regions)

    @property
    def total_volume(self) -> int:
        return sum(r.volume for r in self.regions)

    def enclosing_size(self) -> BlockPos:
        populated = [r for r in self.regions if r.volume]
        if not populated:
            return BlockPos.zero()
        lo = populated[0].position
        hi = populated[0].position + populated[0].size
        for r in populated[1:]:
            lo = lo.min(r.position)
            hi = hi.max(r.position + r.size)
        return hi - lo

    def metadata_tag(self) -> nbtlib.Compound:
        tag = nbtlib.Compound()
        meta = self.metadata
        if meta.name is not None:
            tag["Name"] = nbtlib.String(meta.name)
        if meta.author is not None:
            tag["Author"] = nbtlib.String(meta.author)
        if meta.description is not None:
            tag["Description"] = nbtlib.String(meta.description)
        tag["RegionCount"] = nbtlib.Int(len(self.regions))
        tag["TotalBlocks"] = nbtlib.Int(self.total_blocks)
        tag["TotalVolume"] = nbtlib.Int(self.total_volume)
        tag["EnclosingSize"] = self.enclosing_size().to_tag()
        return tag

    def to_tag(self) -> nbtlib.Compound:
        return nbtlib.Compound(
            {
                "Metadata": self.metadata_tag(),
                "Regions": nbtlib.Compound({r.name: region_to_tag(r) for r in self.regions}),
                "Version": nbtlib.Int(SCHEMATIC_VERSION),
            }
        )


def write_schematic(schematic: Schematic, path: str | Path) -> Path:
    """Serialize ``schematic`` to ``path``.

    The gzip header carries no timestamp or file name, so identical documents
    produce identical bytes.
    """
    path = Path(path)
    document = nbtlib.File(schematic.to_tag())
    with open(path, "wb") as raw, gzip.GzipFile(
        filename="", mode="wb", fileobj=raw, mtime=0
    ) as fileobj:
        document.write(fileobj)
    logger.info("Wrote schematic %s (%d regions)", path, len(schematic.regions))
    return path
