"""
Ordered dithering using a 4x4 threshold matrix.
"""

import numpy as np

# 4x4 Bayer pattern scaled to the 0-255 range
THRESHOLD_MATRIX = np.array(
    [
        [15, 135, 45, 165],
        [195, 75, 225, 105],
        [60, 180, 30, 150],
        [240, 120, 210, 90],
    ],
    dtype=np.uint8,
)
THRESHOLD_MATRIX.setflags(write=False)


def threshold_map(height, width):
    """
    Tile the threshold matrix over an image of the given size.

    Returns:
        2D uint8 array where entry [y, x] is THRESHOLD_MATRIX[y % 4, x % 4]
    """
    rows = np.arange(height) % 4
    cols = np.arange(width) % 4
    return THRESHOLD_MATRIX[rows[:, np.newaxis], cols[np.newaxis, :]]


def apply_ordered_dithering(grid):
    """
    Apply ordered dithering.

    Each pixel is compared against the matrix entry at (y mod 4, x mod 4);
    pixels strictly brighter than their threshold become white.

    Args:
        grid: 2D uint8 numpy array of grayscale samples, indexed [y, x]

    Returns:
        New 2D uint8 numpy array containing only 0 and 255
    """
    height, width = grid.shape
    thresholds = threshold_map(height, width)
    return np.where(grid > thresholds, 255, 0).astype(np.uint8)
