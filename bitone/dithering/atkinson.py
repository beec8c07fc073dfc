"""
Atkinson dithering implementation.
"""

import numpy as np

# Every neighbor receives the same reduced error, 6/8 of it in total
ATKINSON_NEIGHBORS = (
    (1, 0),
    (2, 0),
    (-1, 1),
    (0, 1),
    (1, 1),
    (0, 2),
)


def atkinson_error(old_pixel, new_pixel):
    """Return the reduced Atkinson error, divided by 8 and truncated toward zero."""
    return int((old_pixel - new_pixel) / 8)


def apply_atkinson_dithering(grid):
    """
    Apply Atkinson error-diffusion dithering.

    Args:
        grid: 2D uint8 numpy array of grayscale samples, indexed [y, x]

    Returns:
        New 2D uint8 numpy array containing only 0 and 255
    """
    height, width = grid.shape
    pixels = np.array(grid, dtype=np.int16)

    for y in range(height):
        for x in range(width):
            old_pixel = int(pixels[y, x])
            new_pixel = 0 if old_pixel < 128 else 255
            error = atkinson_error(old_pixel, new_pixel)
            pixels[y, x] = new_pixel

            for dx, dy in ATKINSON_NEIGHBORS:
                nx = x + dx
                ny = y + dy
                if 0 <= nx < width and 0 <= ny < height:
                    pixels[ny, nx] = min(max(int(pixels[ny, nx]) + error, 0), 255)

    return pixels.astype(np.uint8)
