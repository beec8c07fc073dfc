"""
Floyd-Steinberg dithering implementation.
"""

import numpy as np

# (dx, dy, fraction of the quantization error)
FLOYD_STEINBERG_KERNEL = (
    (1, 0, 7 / 16),
    (-1, 1, 3 / 16),
    (0, 1, 5 / 16),
    (1, 1, 1 / 16),
)


def apply_floyd_steinberg_dithering(grid):
    """
    Apply Floyd-Steinberg error-diffusion dithering.

    Pixels are visited in raster order and the working buffer is mutated in
    place, so every pixel is binarized after the error from its upper and
    left neighbors has already been added to it.

    Args:
        grid: 2D uint8 numpy array of grayscale samples, indexed [y, x]

    Returns:
        New 2D uint8 numpy array containing only 0 and 255
    """
    height, width = grid.shape

    # Work on a private copy, the caller's grid is never touched
    pixels = np.array(grid, dtype=np.int16)

    for y in range(height):
        for x in range(width):
            old_pixel = int(pixels[y, x])
            new_pixel = 0 if old_pixel < 128 else 255
            error = old_pixel - new_pixel
            pixels[y, x] = new_pixel

            for dx, dy, fraction in FLOYD_STEINBERG_KERNEL:
                nx = x + dx
                ny = y + dy
                if 0 <= nx < width and 0 <= ny < height:
                    value = pixels[ny, nx] + error * fraction
                    # Clamp first, then truncate toward zero
                    pixels[ny, nx] = int(min(max(value, 0.0), 255.0))

    return pixels.astype(np.uint8)
