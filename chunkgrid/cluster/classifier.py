"""Topology classifier — rasterize spanning-tree edges onto the chunk grid."""

from __future__ import annotations

import logging
from collections.abc import Iterator

from chunkgrid.models.grid import CellClass, ClassifiedMap, GridCoordinate, SpanningTree

logger = logging.getLogger(__name__)


def edge_path(a: GridCoordinate, b: GridCoordinate) -> Iterator[GridCoordinate]:
    """Cells of the L-shaped path from ``a`` to ``b``.

    Runs along ``z = a.z`` to the corner ``(b.x, a.z)``, then along ``x = b.x``.
    The corner is yielded twice.
    """
    for x in range(min(a.x, b.x), max(a.x, b.x) + 1):
        yield GridCoordinate(x, a.z)
    for z in range(min(a.z, b.z), max(a.z, b.z) + 1):
        yield GridCoordinate(b.x, z)


def classify(tree: SpanningTree) -> ClassifiedMap:
    """Mark edge paths as connectors, then every tree node as an anchor.

    In a tree with edges, a node that never received a connector mark is
    recorded as an anomaly. Anomalies are not fatal.
    """
    classified = ClassifiedMap()
    cells = classified.cells

    for edge in tree.edges:
        a, b = tree.endpoints(edge)
        for coord in edge_path(a, b):
            cells[coord] = CellClass.CONNECTOR

    # With any edges at all, every node should already lie on some edge path.
    expect_connector = bool(tree.edges)
    for node in tree.nodes:
        previous = cells.get(node)
        cells[node] = CellClass.ANCHOR
        if expect_connector and previous is None:
            logger.warning("Missing edge at %s", (node.x, node.z))
            classified.anomalies.append(node)

    logger.info(
        "Classified %d chunks (%d anchors, %d connectors)",
        len(cells),
        len(tree.nodes),
        len(cells) - len(tree.nodes),
    )
    return classified
