"""Minimum spanning tree over cluster chunks by Manhattan distance.

Prim-style nearest-fragment growth: every unconnected node remembers its
distance to the closest connected node, the globally closest one joins next.
O(K^2) time, fine for K in the hundreds.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

import numpy as np

from chunkgrid.models.grid import GridCoordinate, SpanningTree, TreeEdge

logger = logging.getLogger(__name__)


def manhattan(a: GridCoordinate, b: GridCoordinate) -> int:
    return abs(a.x - b.x) + abs(a.z - b.z)


def build_spanning_tree(coords: Iterable[GridCoordinate]) -> SpanningTree:
    """Connect ``coords`` with a minimum-weight spanning tree.

    Nodes are kept in sorted coordinate order; the first one seeds the tree.
    Ties go to the lowest node index, so the result is deterministic.
    """
    nodes = tuple(sorted(set(coords)))
    n = len(nodes)
    if n == 0:
        raise ValueError("cannot build a spanning tree over zero nodes")

    xs = np.fromiter((c.x for c in nodes), dtype=np.int64, count=n)
    zs = np.fromiter((c.z for c in nodes), dtype=np.int64, count=n)

    connected = np.zeros(n, dtype=bool)
    best = np.full(n, np.iinfo(np.int64).max, dtype=np.int64)
    parent = np.full(n, -1, dtype=np.int64)

    edges: list[TreeEdge] = []
    current = 0
    connected[current] = True

    for _ in range(n - 1):
        # Relax distances against the node that just joined.
        dist = np.abs(xs - xs[current]) + np.abs(zs - zs[current])
        closer = ~connected & (dist < best)
        best[closer] = dist[closer]
        parent[closer] = current

        candidates = np.where(connected, np.iinfo(np.int64).max, best)
        current = int(np.argmin(candidates))
        connected[current] = True
        edges.append(TreeEdge(a=int(parent[current]), b=current, weight=int(best[current])))

    tree = SpanningTree(nodes=nodes, edges=tuple(edges))
    logger.debug("Spanning tree: %d nodes, %d edges, weight %d", n, len(edges), tree.total_weight)
    return tree
