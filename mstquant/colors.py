"""Distinct color extraction and RGB distance."""
import logging
from typing import Sequence, Union

import numpy as np

from mstquant.types import DistinctColors, ImageArray

logger = logging.getLogger(__name__)


def pack_colors(colors: np.ndarray) -> np.ndarray:
    """
    Pack RGB triples into 24-bit integer keys (``r << 16 | g << 8 | b``).

    Args:
        colors: Array of shape (..., 3) with uint8 channel values

    Returns:
        Integer array of shape (...) with the packed keys
    """
    colors = np.asarray(colors).astype(np.uint32)
    return (colors[..., 0] << 16) | (colors[..., 1] << 8) | colors[..., 2]


def unpack_keys(keys: np.ndarray) -> np.ndarray:
    """Inverse of :func:`pack_colors`."""
    keys = np.asarray(keys).astype(np.uint32)
    return np.stack(
        [(keys >> 16) & 0xFF, (keys >> 8) & 0xFF, keys & 0xFF],
        axis=-1
    ).astype(np.uint8)


def extract_distinct_colors(image: ImageArray) -> DistinctColors:
    """
    Collect the distinct colors of an image.

    Colors are returned in the order they are first met when scanning the
    image row by row, so the first pixel is always color id 0.

    Args:
        image: Image as (H, W, 3) uint8 array

    Returns:
        DistinctColors with (D, 3) colors and their packed keys
    """
    pixels = np.asarray(image).reshape(-1, 3)
    if pixels.shape[0] == 0:
        return DistinctColors(
            colors=np.zeros((0, 3), dtype=np.uint8),
            keys=np.zeros(0, dtype=np.uint32)
        )

    keys = pack_colors(pixels)
    unique_keys, first_index = np.unique(keys, return_index=True)

    # np.unique sorts by key; restore scan order
    order = np.argsort(first_index, kind='stable')
    first_index = first_index[order]

    distinct = DistinctColors(
        colors=pixels[first_index].astype(np.uint8),
        keys=unique_keys[order]
    )
    logger.debug(f"Extracted {len(distinct)} distinct colors from {pixels.shape[0]} pixels")
    return distinct


def color_distance(
    a: Union[Sequence[int], np.ndarray],
    b: Union[Sequence[int], np.ndarray]
) -> float:
    """Euclidean distance between two colors in RGB space."""
    diff = np.asarray(a, dtype=np.int64) - np.asarray(b, dtype=np.int64)
    return float(np.sqrt(np.sum(diff * diff)))


def distances_from(colors: np.ndarray, index: int) -> np.ndarray:
    """
    Distance from one color to every color of a color list.

    Args:
        colors: (D, 3) color array
        index: Id of the reference color

    Returns:
        (D,) float64 array of Euclidean RGB distances
    """
    diff = colors.astype(np.int64) - colors[index].astype(np.int64)
    return np.sqrt(np.sum(diff * diff, axis=1).astype(np.float64))
