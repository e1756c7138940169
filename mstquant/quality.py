"""Quality metrics comparing a quantized image with its source."""
from typing import Dict, Optional

import numpy as np
from skimage.metrics import mean_squared_error, peak_signal_noise_ratio
from skimage.metrics import structural_similarity as ssim

from mstquant.types import ImageArray, QuantizationError

# Default SSIM window is 7x7
SSIM_MIN_SIDE = 7


def compute_ssim(image1: ImageArray, image2: ImageArray) -> Optional[float]:
    """
    Compute Structural Similarity Index (SSIM) between two RGB images.

    Args:
        image1: First image (H, W, 3) uint8
        image2: Second image (H, W, 3) uint8

    Returns:
        SSIM score in range [-1, 1] (1 = identical), or None if the images
        are smaller than the SSIM window
    """
    if image1.shape != image2.shape:
        raise QuantizationError(f"Shape mismatch: {image1.shape} vs {image2.shape}")

    if min(image1.shape[:2]) < SSIM_MIN_SIDE:
        return None

    score = ssim(image1, image2, channel_axis=2, data_range=255)
    return float(score)


def compare_images(original: ImageArray, quantized: ImageArray) -> Dict[str, Optional[float]]:
    """
    Measure how far the quantized image is from the original.

    Returns:
        Dict with ``mse``, ``psnr`` (inf for identical images) and ``ssim``
    """
    original = np.asarray(original)
    quantized = np.asarray(quantized)
    if original.shape != quantized.shape:
        raise QuantizationError(f"Shape mismatch: {original.shape} vs {quantized.shape}")

    if original.size == 0:
        return {'mse': 0.0, 'psnr': float('inf'), 'ssim': None}

    mse = float(mean_squared_error(original, quantized))
    if mse == 0.0:
        psnr = float('inf')
    else:
        psnr = float(peak_signal_noise_ratio(original, quantized, data_range=255))

    return {
        'mse': mse,
        'psnr': psnr,
        'ssim': compute_ssim(original, quantized),
    }
