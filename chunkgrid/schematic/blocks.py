"""Voxel positions and block states."""

from __future__ import annotations

from dataclasses import dataclass

import nbtlib


@dataclass(frozen=True, order=True)
class BlockPos:
    x: int
    y: int
    z: int

    @classmethod
    def zero(cls) -> BlockPos:
        return cls(0, 0, 0)

    @classmethod
    def one(cls) -> BlockPos:
        return cls(1, 1, 1)

    def min(self, other: BlockPos) -> BlockPos:
        return BlockPos(min(self.x, other.x), min(self.y, other.y), min(self.z, other.z))

    def max(self, other: BlockPos) -> BlockPos:
        return BlockPos(max(self.x, other.x), max(self.y, other.y), max(self.z, other.z))

    def __add__(self, other: BlockPos) -> BlockPos:
        return BlockPos(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: BlockPos) -> BlockPos:
        return BlockPos(self.x - other.x, self.y - other.y, self.z - other.z)

    @property
    def volume(self) -> int:
        return self.x * self.y * self.z

    def to_tag(self) -> nbtlib.Compound:
        return nbtlib.Compound(
            {"x": nbtlib.Int(self.x), "y": nbtlib.Int(self.y), "z": nbtlib.Int(self.z)}
        )


@dataclass(frozen=True)
class BlockState:
    """An opaque block identifier such as ``minecraft:chest``."""

    name: str

    def to_tag(self) -> nbtlib.Compound:
        return nbtlib.Compound({"Name": nbtlib.String(self.name)})


AIR = BlockState("minecraft:air")
CONCRETE = BlockState("minecraft:concrete")
CHEST = BlockState("minecraft:chest")
