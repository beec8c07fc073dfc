"""
Dithering algorithm implementations.
"""

import logging
from enum import Enum

from bitone.dithering.atkinson import apply_atkinson_dithering
from bitone.dithering.floyd_steinberg import apply_floyd_steinberg_dithering
from bitone.dithering.ordered_dither import THRESHOLD_MATRIX, apply_ordered_dithering
from bitone.dithering.threshold import DEFAULT_THRESHOLD, apply_threshold_dithering

__all__ = [
    "ALGORITHMS",
    "DEFAULT_THRESHOLD",
    "DitherAlgorithm",
    "THRESHOLD_MATRIX",
    "apply_atkinson_dithering",
    "apply_dithering",
    "apply_floyd_steinberg_dithering",
    "apply_ordered_dithering",
    "apply_threshold_dithering",
    "get_algorithm_by_name",
    "resolve_algorithm",
]

logger = logging.getLogger("bitone.dithering")


class DitherAlgorithm(str, Enum):
    """Supported dithering algorithms."""

    FLOYD_STEINBERG = "floyd-steinberg"
    ATKINSON = "atkinson"
    ORDERED = "ordered"
    THRESHOLD = "threshold"

    @classmethod
    def get_default(cls) -> "DitherAlgorithm":
        """Return the default dithering algorithm."""
        return cls.FLOYD_STEINBERG

    @classmethod
    def get_fallback(cls) -> "DitherAlgorithm":
        """Return the algorithm used for unrecognized identifiers."""
        return cls.THRESHOLD


# Dictionary of available dithering algorithms
ALGORITHMS = {
    DitherAlgorithm.FLOYD_STEINBERG: {
        "name": "Floyd-Steinberg",
        "function": apply_floyd_steinberg_dithering,
        "description": "Error diffusion to four neighbors with 7/16, 3/16, 5/16 and 1/16 weights",
    },
    DitherAlgorithm.ATKINSON: {
        "name": "Atkinson",
        "function": apply_atkinson_dithering,
        "description": "Error diffusion of 1/8 of the error to six neighbors (6/8 in total)",
    },
    DitherAlgorithm.ORDERED: {
        "name": "Ordered Dithering",
        "function": apply_ordered_dithering,
        "description": "Per-pixel comparison against a repeating 4x4 threshold matrix",
    },
    DitherAlgorithm.THRESHOLD: {
        "name": "Threshold",
        "function": apply_threshold_dithering,
        "description": "Flat binarization against a single threshold (default 128)",
    },
}


def resolve_algorithm(algorithm_name):
    """
    Map an algorithm identifier to a DitherAlgorithm.

    Identifiers are matched case-insensitively and underscores are accepted
    in place of hyphens. Anything unrecognized resolves to threshold
    dithering instead of raising.

    Args:
        algorithm_name: Identifier string, DitherAlgorithm member or None

    Returns:
        The matching DitherAlgorithm, or DitherAlgorithm.THRESHOLD
    """
    if isinstance(algorithm_name, DitherAlgorithm):
        return algorithm_name

    normalized = str(algorithm_name or "").strip().lower().replace("_", "-")
    try:
        return DitherAlgorithm(normalized)
    except ValueError:
        logger.debug(
            f"Unknown dithering algorithm '{algorithm_name}', falling back to threshold"
        )
        return DitherAlgorithm.get_fallback()


def get_algorithm_by_name(algorithm_name):
    """
    Get a dithering algorithm by its name.

    Args:
        algorithm_name: Name/key of the algorithm

    Returns:
        Tuple of (algorithm_function, DitherAlgorithm); unknown names give the
        threshold function
    """
    algorithm = resolve_algorithm(algorithm_name)
    return ALGORITHMS[algorithm]["function"], algorithm


def apply_dithering(grid, algorithm_name, threshold=DEFAULT_THRESHOLD):
    """
    Dither a grayscale grid with the selected algorithm.

    Args:
        grid: 2D uint8 numpy array of grayscale samples, indexed [y, x]
        algorithm_name: Algorithm identifier; unknown values use threshold dithering
        threshold: Threshold for threshold dithering, ignored by the other algorithms

    Returns:
        New 2D uint8 numpy array containing only 0 and 255
    """
    algorithm = resolve_algorithm(algorithm_name)

    if algorithm is DitherAlgorithm.FLOYD_STEINBERG:
        return apply_floyd_steinberg_dithering(grid)
    elif algorithm is DitherAlgorithm.ATKINSON:
        return apply_atkinson_dithering(grid)
    elif algorithm is DitherAlgorithm.ORDERED:
        return apply_ordered_dithering(grid)
    else:
        # THRESHOLD and every unrecognized identifier
        return apply_threshold_dithering(grid, threshold)
