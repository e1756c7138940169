"""Split the color MST into clusters by cutting its heaviest edges."""
import logging
import numbers
from typing import List

import numpy as np

from mstquant.types import (
    ClusterAssignment,
    ImpossiblePartitionError,
    InvalidConfigurationError,
    SpanningTree,
)

logger = logging.getLogger(__name__)


def is_valid_palette_size(n_clusters) -> bool:
    """True for an integer K >= 1; bools and floats are rejected."""
    if isinstance(n_clusters, bool) or not isinstance(n_clusters, numbers.Integral):
        return False
    return n_clusters >= 1


def cut_heaviest_edges(tree: SpanningTree, n_clusters: int) -> np.ndarray:
    """
    Select the K-1 heaviest tree edges for removal.

    Every edge is identified by its child color id. Edges are removed one at
    a time, always the heaviest remaining one; among equal weights the
    lowest child id goes first.

    Args:
        tree: Spanning tree over the distinct colors
        n_clusters: Requested number of clusters (K)

    Returns:
        Array of the K-1 cut child ids, in removal order

    Raises:
        ImpossiblePartitionError: If the tree has fewer than K-1 edges
    """
    n_cuts = n_clusters - 1
    if n_cuts < 0 or n_cuts > tree.edge_count:
        raise ImpossiblePartitionError(n_clusters, tree.size)

    weights = tree.costs.astype(np.float64).copy()
    if tree.size > 0:
        weights[0] = -np.inf  # the root has no edge

    cut = np.empty(n_cuts, dtype=np.int64)
    for i in range(n_cuts):
        child = int(np.argmax(weights))
        cut[i] = child
        weights[child] = -np.inf

    return cut


def label_components(parents: np.ndarray, cut: np.ndarray) -> ClusterAssignment:
    """
    Label the connected components of a forest given as parent pointers.

    Colors in ``cut`` are detached from their parent. Components are
    numbered in order of their lowest color id; the traversal uses an
    explicit stack so deep trees do not hit the recursion limit.

    Args:
        parents: (D,) parent id per color id, the root is its own parent
        cut: Child ids whose parent edge was removed

    Returns:
        ClusterAssignment with per-color labels and per-cluster members
    """
    n = len(parents)
    detached = np.zeros(n, dtype=bool)
    detached[np.asarray(cut, dtype=np.int64)] = True

    adjacency: List[List[int]] = [[] for _ in range(n)]
    for child in range(n):
        parent = int(parents[child])
        if parent == child or detached[child]:
            continue
        adjacency[child].append(parent)
        adjacency[parent].append(child)

    labels = np.full(n, -1, dtype=np.int64)
    members: List[List[int]] = []

    for start in range(n):
        if labels[start] >= 0:
            continue

        cluster_id = len(members)
        group = []
        labels[start] = cluster_id
        stack = [start]
        while stack:
            node = stack.pop()
            group.append(node)
            for neighbor in adjacency[node]:
                if labels[neighbor] < 0:
                    labels[neighbor] = cluster_id
                    stack.append(neighbor)

        members.append(group)

    return ClusterAssignment(labels=labels, members=members)


def cluster_colors(tree: SpanningTree, n_clusters: int) -> ClusterAssignment:
    """
    Partition the distinct colors into exactly ``n_clusters`` clusters.

    Args:
        tree: Spanning tree over the distinct colors
        n_clusters: Requested number of clusters (K)

    Returns:
        ClusterAssignment with exactly K clusters

    Raises:
        InvalidConfigurationError: If K is not an integer >= 1
        ImpossiblePartitionError: If there are fewer colors than clusters
    """
    if not is_valid_palette_size(n_clusters):
        raise InvalidConfigurationError(n_clusters)
    n_clusters = int(n_clusters)

    if tree.size < n_clusters:
        raise ImpossiblePartitionError(n_clusters, tree.size)

    cut = cut_heaviest_edges(tree, n_clusters)
    assignment = label_components(tree.parents, cut)

    if assignment.n_clusters != n_clusters:
        raise ImpossiblePartitionError(
            n_clusters,
            tree.size,
            f"Cutting {len(cut)} edges produced {assignment.n_clusters} "
            f"clusters instead of {n_clusters}"
        )

    logger.debug(f"Split {tree.size} colors into {assignment.n_clusters} clusters")
    return assignment
