"""Grid-level value types shared by the sampler, tree builder and classifier."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field


@dataclass(frozen=True, order=True)
class GridCoordinate:
    """A chunk position on the horizontal grid."""

    x: int
    z: int


@dataclass(frozen=True, order=True)
class HashedCell:
    """A coordinate with its hash; orders by hash, then coordinate."""

    hash: int
    coord: GridCoordinate


@dataclass(frozen=True)
class ScanRegion:
    """The rectangle a sampler has scanned.

    Columns run along +x starting at ``offset.x``; each column covers
    ``width`` cells along +z starting at ``offset.z``.
    """

    offset: GridCoordinate
    columns: int
    width: int

    @property
    def shape(self) -> tuple[int, int]:
        """Raster shape (rows, cols) = (width, columns)."""
        return (self.width, self.columns)

    def contains(self, coord: GridCoordinate) -> bool:
        dx = coord.x - self.offset.x
        dz = coord.z - self.offset.z
        return 0 <= dx < self.columns and 0 <= dz < self.width


@dataclass(frozen=True)
class SampleResult:
    """Exactly K accepted cells, in acceptance order, plus the scanned area."""

    cells: tuple[HashedCell, ...]
    region: ScanRegion
    admission_floor: int

    @property
    def coordinates(self) -> list[GridCoordinate]:
        return [c.coord for c in self.cells]

    def __len__(self) -> int:
        return len(self.cells)


@dataclass(frozen=True)
class TreeEdge:
    """Edge between node indices; ``a`` was already connected when ``b`` joined."""

    a: int
    b: int
    weight: int


@dataclass(frozen=True)
class SpanningTree:
    nodes: tuple[GridCoordinate, ...]
    edges: tuple[TreeEdge, ...]

    @property
    def total_weight(self) -> int:
        return sum(e.weight for e in self.edges)

    def endpoints(self, edge: TreeEdge) -> tuple[GridCoordinate, GridCoordinate]:
        return self.nodes[edge.a], self.nodes[edge.b]


class CellClass(enum.IntEnum):
    CONNECTOR = 1
    ANCHOR = 2


@dataclass
class ClassifiedMap:
    """Coordinate → classification, plus consistency anomalies found while building it."""

    cells: dict[GridCoordinate, CellClass] = field(default_factory=dict)
    anomalies: list[GridCoordinate] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.cells)

    def __contains__(self, coord: object) -> bool:
        return coord in self.cells

    def get(self, coord: GridCoordinate) -> CellClass | None:
        return self.cells.get(coord)

    def of_class(self, cls: CellClass) -> list[GridCoordinate]:
        return sorted(c for c, v in self.cells.items() if v == cls)

    @property
    def anchors(self) -> list[GridCoordinate]:
        return self.of_class(CellClass.ANCHOR)

    @property
    def connectors(self) -> list[GridCoordinate]:
        return self.of_class(CellClass.CONNECTOR)
