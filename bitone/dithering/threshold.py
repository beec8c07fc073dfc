"""
Flat threshold binarization without dithering.
"""

import numpy as np

DEFAULT_THRESHOLD = 128


def apply_threshold_dithering(grid, threshold=DEFAULT_THRESHOLD):
    """
    Binarize a grid against a single threshold.

    Args:
        grid: 2D uint8 numpy array of grayscale samples
        threshold: Samples strictly greater than this become 255 (default: 128)

    Returns:
        New 2D uint8 numpy array containing only 0 and 255

    Raises:
        ValueError: If the threshold is outside 0-255
    """
    if not 0 <= threshold <= 255:
        raise ValueError(f"Threshold must be between 0 and 255, got {threshold}")

    return np.where(grid > threshold, 255, 0).astype(np.uint8)
