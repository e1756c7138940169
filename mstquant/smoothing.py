"""Separable Gaussian pre-smoothing."""
import numpy as np
from scipy.ndimage import correlate1d

from mstquant.types import ImageArray


def gaussian_kernel(filter_size: int, sigma: float) -> np.ndarray:
    """
    Build a normalized 1D Gaussian kernel.

    Args:
        filter_size: Kernel length, rounded up to the next odd number
        sigma: Gaussian standard deviation

    Returns:
        1D float64 kernel summing to 1
    """
    if filter_size < 1:
        raise ValueError(f"filter_size must be >= 1, got {filter_size}")
    if sigma <= 0:
        raise ValueError(f"sigma must be > 0, got {sigma}")

    if filter_size % 2 == 0:
        filter_size += 1

    half = filter_size // 2
    offsets = np.arange(-half, half + 1, dtype=np.float64)
    kernel = np.exp(-(offsets * offsets) / (2.0 * sigma * sigma))
    return kernel / kernel.sum()


def gaussian_smooth(image: ImageArray, filter_size: int = 5, sigma: float = 1.0) -> ImageArray:
    """
    Smooth an RGB image with a separable Gaussian filter.

    The image is filtered vertically, then horizontally. Taps falling
    outside the image count as black, so borders darken slightly. The
    result is truncated to uint8.

    Args:
        image: (H, W, 3) uint8 image
        filter_size: Kernel length (odd; even sizes are bumped by one)
        sigma: Gaussian standard deviation

    Returns:
        Smoothed (H, W, 3) uint8 image
    """
    kernel = gaussian_kernel(filter_size, sigma)
    image = np.asarray(image)
    if image.size == 0:
        return image.copy()

    data = image.astype(np.float64)
    vertical = correlate1d(data, kernel, axis=0, mode='constant', cval=0.0)
    filtered = correlate1d(vertical, kernel, axis=1, mode='constant', cval=0.0)

    # Tolerance keeps exact sums like 254.9999999 from truncating down
    return np.clip(np.floor(filtered + 1e-6), 0, 255).astype(np.uint8)
