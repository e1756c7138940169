"""Palette synthesis from color clusters."""
import numpy as np

from mstquant.types import ClusterAssignment


def synthesize_palette(colors: np.ndarray, assignment: ClusterAssignment) -> np.ndarray:
    """
    Compute the centroid color of every cluster.

    Each channel is the mean over the cluster's distinct colors (not
    weighted by pixel count), rounded half up. This deliberately differs
    from plain truncation, so a mean of 0.5 becomes 1 rather than 0.

    Args:
        colors: (D, 3) distinct colors
        assignment: Cluster assignment over the color ids

    Returns:
        (K, 3) uint8 palette indexed by cluster id
    """
    palette = np.zeros((assignment.n_clusters, 3), dtype=np.uint8)
    channels = np.asarray(colors, dtype=np.float64)

    for cluster_id, ids in enumerate(assignment.members):
        mean = channels[ids].mean(axis=0)
        palette[cluster_id] = np.clip(np.floor(mean + 0.5), 0, 255).astype(np.uint8)

    return palette
