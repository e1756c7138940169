"""Rewrite image pixels with their cluster's palette color."""
import logging

import numpy as np

from mstquant.colors import pack_colors, unpack_keys
from mstquant.types import (
    ClusterAssignment,
    DistinctColors,
    ImageArray,
    RemapError,
    RemapTable,
)

logger = logging.getLogger(__name__)


def build_remap_table(
    distinct: DistinctColors,
    assignment: ClusterAssignment,
    palette: np.ndarray
) -> RemapTable:
    """
    Map the packed key of every distinct color to its palette color.

    The table holds one entry per distinct color, sorted by key so lookups
    can use binary search.

    Args:
        distinct: Distinct colors of the image
        assignment: Cluster of every color id
        palette: (K, 3) palette indexed by cluster id

    Returns:
        RemapTable covering every distinct color

    Raises:
        RemapError: If a color id has no cluster
    """
    n = len(distinct)
    replacement = np.zeros((n, 3), dtype=np.uint8)
    covered = np.zeros(n, dtype=bool)

    for cluster_id, ids in enumerate(assignment.members):
        replacement[ids] = palette[cluster_id]
        covered[ids] = True

    if not np.all(covered):
        missing = np.flatnonzero(~covered)
        raise RemapError(f"{len(missing)} colors have no cluster, first is id {int(missing[0])}")

    order = np.argsort(distinct.keys, kind='stable')
    return RemapTable(keys=distinct.keys[order], colors=replacement[order])


def remap_pixels(image: ImageArray, table: RemapTable) -> ImageArray:
    """
    Replace every pixel by its entry in the remap table.

    Args:
        image: (H, W, 3) uint8 image
        table: Remap table covering every color of the image

    Returns:
        New (H, W, 3) uint8 image; the input is left untouched

    Raises:
        RemapError: If a pixel color is missing from the table
    """
    image = np.asarray(image)
    if image.size == 0:
        return image.copy()

    keys = pack_colors(image.reshape(-1, 3))
    if len(table) == 0:
        raise RemapError("Remap table is empty")

    positions = np.searchsorted(table.keys, keys)
    positions = np.minimum(positions, len(table) - 1)
    found = table.keys[positions] == keys
    if not np.all(found):
        missing = unpack_keys(keys[~found][0])
        raise RemapError(f"Pixel color {tuple(int(c) for c in missing)} is not in the remap table")

    return table.colors[positions].reshape(image.shape)
