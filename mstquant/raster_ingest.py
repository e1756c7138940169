"""Raster image loading and saving."""
import logging
from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image
from PIL import ImageOps

from mstquant.types import ImageArray, QuantizationError

logger = logging.getLogger(__name__)


def as_rgb_array(image: np.ndarray) -> ImageArray:
    """
    Coerce an in-memory image to an (H, W, 3) uint8 array.

    Grayscale input is repeated across channels and a fourth (alpha)
    channel is dropped.

    Args:
        image: Array of shape (H, W), (H, W, 3) or (H, W, 4)

    Returns:
        (H, W, 3) uint8 array

    Raises:
        ValueError: If the shape or value range is not an 8-bit image
    """
    image = np.asarray(image)

    if image.ndim == 2:
        image = np.stack([image] * 3, axis=-1)

    if image.ndim != 3:
        raise ValueError(f"Expected 2D or 3D array, got {image.ndim}D")

    if image.shape[2] == 4:
        image = image[..., :3]
    elif image.shape[2] != 3:
        raise ValueError(f"Expected 3 or 4 channels, got {image.shape[2]}")

    if image.dtype == np.uint8:
        return image

    if not np.issubdtype(image.dtype, np.integer):
        raise ValueError(f"Expected integer pixel values, got dtype {image.dtype}")

    if image.size and (image.min() < 0 or image.max() > 255):
        raise ValueError("Pixel values must be in range [0, 255]")

    return image.astype(np.uint8)


def load_image(path: Union[str, Path]) -> ImageArray:
    """
    Load an image file as an RGB array.

    Args:
        path: Path to image file

    Returns:
        (H, W, 3) uint8 array

    Raises:
        FileNotFoundError: If file doesn't exist
        QuantizationError: If file cannot be decoded
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Image file not found: {path}")

    if not path.is_file():
        raise QuantizationError(f"Path is not a file: {path}")

    try:
        with Image.open(path) as img:
            # Apply EXIF orientation transformation to handle rotation
            img = ImageOps.exif_transpose(img)

            if img.mode != 'RGB':
                logger.debug(f"Converting {path.name} from {img.mode} to RGB")
                img = img.convert('RGB')

            return np.array(img, dtype=np.uint8)

    except (IOError, OSError) as e:
        raise QuantizationError(f"Failed to load image {path}: {e}") from e


def save_image(image: ImageArray, path: Union[str, Path]) -> Path:
    """
    Save an RGB array to an image file.

    Args:
        image: (H, W, 3) uint8 array
        path: Destination; the format follows the file extension

    Returns:
        The path written
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    try:
        Image.fromarray(as_rgb_array(image)).save(path)
    except (IOError, OSError) as e:
        raise QuantizationError(f"Failed to save image {path}: {e}") from e

    return path
