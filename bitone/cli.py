"""
Command-line interface for Bitone.

This module provides different operating modes:
- convert (default): Dither a single image file and save the result
- api: A FastAPI-based API server for programmatic access
"""

import argparse
import logging
import os
import sys
import time

from bitone.dithering import (
    ALGORITHMS,
    DEFAULT_THRESHOLD,
    DitherAlgorithm,
    apply_dithering,
    resolve_algorithm,
)
from bitone.image_ops import load_image, save_dithered_image, to_grayscale
from bitone.metadata import create_metadata, save_metadata_json

logger = logging.getLogger("bitone.cli")


def convert_image(
    input_path,
    output_path=None,
    algorithm_name=DitherAlgorithm.get_default().value,
    threshold=DEFAULT_THRESHOLD,
    image_format=None,
    write_metadata=False,
):
    """
    Dither one image file and save the result.

    Args:
        input_path: Path to the source image
        output_path: Destination path, or None for ./out/dithered/...
        algorithm_name: Algorithm identifier; unknown values use threshold dithering
        threshold: Threshold for threshold dithering
        image_format: Output format, inferred from output_path when omitted
        write_metadata: Also write a JSON metadata sidecar next to the image

    Returns:
        Path of the saved image
    """
    algorithm = resolve_algorithm(algorithm_name)

    grid = to_grayscale(load_image(input_path))
    height, width = grid.shape
    logger.info(
        f"Applying {ALGORITHMS[algorithm]['name']} dithering to {width}x{height} image"
    )

    start_time = time.time()
    dithered = apply_dithering(grid, algorithm, threshold)
    processing_time = time.time() - start_time

    saved_path = save_dithered_image(
        dithered,
        input_path,
        algorithm.value,
        output_path=output_path,
        image_format=image_format,
    )

    if write_metadata:
        metadata = create_metadata(
            width=width,
            height=height,
            algorithm_name=algorithm.value,
            processing_time=processing_time,
            grid=dithered,
            threshold=threshold if algorithm is DitherAlgorithm.THRESHOLD else None,
            original_image_path=input_path,
            output_image_path=saved_path,
            image_format=os.path.splitext(saved_path)[1].lstrip("."),
        )
        save_metadata_json(metadata, saved_path)

    logger.info(f"Processing took {processing_time:.2f} seconds")
    return saved_path


def run_api_server(host=None, port=None):
    """
    Start the Bitone API server.

    This function starts a FastAPI server for programmatic access to Bitone.
    """
    # Import and run the API server
    from bitone.api.main import start_api

    start_api(host=host, port=port)


def build_parser():
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        description="Bitone black and white image dithering"
    )

    parser.add_argument(
        "--mode",
        choices=["convert", "api"],
        default="convert",
        help="Operating mode: convert (default, one file) or api (server)",
    )

    parser.add_argument("--input", "-i", help="Path to the image to dither")
    parser.add_argument(
        "--output",
        "-o",
        default=None,
        help="Output path (default: ./out/dithered/<name>_<algorithm>_<timestamp>.<ext>)",
    )

    parser.add_argument(
        "--algorithm",
        "-a",
        default=DitherAlgorithm.get_default().value,
        help="Dithering algorithm: "
        + ", ".join(algorithm.value for algorithm in DitherAlgorithm)
        + " (unknown values fall back to threshold)",
    )

    parser.add_argument(
        "--threshold",
        "-t",
        type=int,
        default=DEFAULT_THRESHOLD,
        help="Threshold for threshold dithering (0-255, default: 128)",
    )

    parser.add_argument(
        "--format",
        "-f",
        dest="image_format",
        default=None,
        help="Output format (png, bmp, gif, tiff, webp)",
    )

    parser.add_argument(
        "--metadata",
        action="store_true",
        help="Also write a JSON metadata file next to the output image",
    )

    parser.add_argument(
        "--host",
        default=None,
        help="Host to bind the API server to (API mode only, default: "
        "$BITONE_API_HOST or 0.0.0.0)",
    )

    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to bind the API server to (API mode only, default: "
        "$BITONE_API_PORT or 8000)",
    )

    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error", "critical"],
        default="info",
        help="Logging level",
    )

    return parser


def main(argv=None):
    """
    Main entry point for Bitone with command-line argument parsing.

    Returns:
        Process exit status
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    # Configure logging
    numeric_level = getattr(logging, args.log_level.upper(), None)
    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.mode == "api":
        run_api_server(host=args.host, port=args.port)
        return 0

    if not args.input:
        parser.error("--input is required in convert mode")

    if not 0 <= args.threshold <= 255:
        parser.error("--threshold must be between 0 and 255")

    try:
        output_path = convert_image(
            args.input,
            output_path=args.output,
            algorithm_name=args.algorithm,
            threshold=args.threshold,
            image_format=args.image_format,
            write_metadata=args.metadata,
        )
    except (OSError, ValueError) as e:
        logger.error(f"Error dithering image: {e}")
        return 1

    print(f"Success! Dithered image saved to: {output_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
