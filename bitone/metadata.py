"""
Metadata handling for dithered images.
"""

import datetime
import json
import logging
import os

import numpy as np

logger = logging.getLogger("bitone.metadata")


def count_levels(grid):
    """
    Count black and white samples in a dithered grid.

    Returns:
        Tuple of (black_pixels, white_pixels)
    """
    black = int(np.count_nonzero(grid == 0))
    white = int(np.count_nonzero(grid == 255))
    return black, white


def create_metadata(
    width,
    height,
    algorithm_name,
    processing_time,
    grid=None,
    threshold=None,
    original_image_path=None,
    output_image_path=None,
    image_format=None,
):
    """
    Create metadata for a dithered image.

    Args:
        width: Width of the image
        height: Height of the image
        algorithm_name: Identifier of the dithering algorithm applied
        processing_time: Time taken to dither in seconds
        grid: Dithered grid, used for the black/white pixel counts (optional)
        threshold: Threshold value, only recorded for threshold dithering (optional)
        original_image_path: Path to the original image (optional)
        output_image_path: Path to the output image (optional)
        image_format: Output format name (optional)

    Returns:
        Dictionary containing the metadata
    """
    metadata = {
        "dimensions": {"width": width, "height": height},
        "algorithm": algorithm_name,
        "processing_time_seconds": processing_time,
        "timestamp": datetime.datetime.now().isoformat(),
    }

    if original_image_path:
        metadata["original_image"] = os.path.basename(original_image_path)
    if output_image_path:
        metadata["output_image"] = os.path.basename(output_image_path)
    if image_format:
        metadata["format"] = image_format
    if threshold is not None:
        metadata["threshold"] = threshold

    if grid is not None:
        black, white = count_levels(grid)
        metadata["pixels"] = {"black": black, "white": white}

    return metadata


def save_metadata_json(metadata, image_path):
    """
    Save metadata next to an image as '<image name>.json'.

    Args:
        metadata: Metadata dictionary
        image_path: Path of the image the metadata describes

    Returns:
        Path of the JSON file
    """
    base_path = os.path.splitext(image_path)[0]
    json_path = f"{base_path}.json"

    with open(json_path, "w") as f:
        json.dump(metadata, f, indent=2)

    logger.info(f"Saved metadata as: {json_path}")
    return json_path


def load_metadata_json(json_path):
    """Load a metadata JSON file."""
    with open(json_path, "r") as f:
        return json.load(f)
