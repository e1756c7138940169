"""Minimum spanning tree over the distinct colors (Prim's algorithm)."""
import logging
from typing import List, Tuple

import numpy as np

from mstquant.colors import distances_from
from mstquant.types import SpanningTree

logger = logging.getLogger(__name__)


def build_mst(colors: np.ndarray) -> SpanningTree:
    """
    Build a minimum spanning tree over the complete color graph.

    The graph is never materialized: edge weights are Euclidean RGB
    distances computed on the fly. Color id 0 is the root. Each step picks
    the cheapest unexplored color (lowest id on ties) and relaxes the
    remaining colors against it, so the whole build is O(D^2).

    Args:
        colors: (D, 3) array of distinct colors

    Returns:
        SpanningTree with parent ids and edge costs per color id
    """
    colors = np.asarray(colors)
    n = colors.shape[0]

    parents = np.zeros(n, dtype=np.int64)
    costs = np.full(n, np.inf, dtype=np.float64)
    explored = np.zeros(n, dtype=bool)

    if n == 0:
        return SpanningTree(parents=parents, costs=costs)

    costs[0] = 0.0

    # D-1 steps; the last color's cost is final once all others are explored
    for _ in range(n - 1):
        # argmin returns the first minimum, i.e. the lowest id
        idx = int(np.argmin(np.where(explored, np.inf, costs)))
        explored[idx] = True

        dist = distances_from(colors, idx)
        closer = ~explored & (dist < costs)
        parents[closer] = idx
        costs[closer] = dist[closer]

    tree = SpanningTree(parents=parents, costs=costs)
    logger.debug(f"MST over {n} colors: {tree.edge_count} edges, weight {tree.total_weight:.4f}")
    return tree


def mst_edges(tree: SpanningTree) -> List[Tuple[int, int, float]]:
    """List the tree edges as ``(child, parent, weight)``, root excluded."""
    return [
        (child, int(tree.parents[child]), float(tree.costs[child]))
        for child in range(1, tree.size)
    ]
