"""
API Configuration settings.
"""

import os

from bitone import __version__
from bitone.dithering import DEFAULT_THRESHOLD, DitherAlgorithm

# Maximum allowed upload size in bytes (default 20MB)
MAX_FILE_SIZE = int(os.environ.get("BITONE_MAX_FILE_SIZE", 20 * 1024 * 1024))

# Maximum number of pixels accepted for a single image
MAX_PIXELS = int(os.environ.get("BITONE_MAX_PIXELS", 25_000_000))

# Images above this size are logged as large
LARGE_IMAGE_PIXELS = 1_000_000

DEFAULT_ALGORITHM = DitherAlgorithm.get_default().value
DEFAULT_OUTPUT_FORMAT = "png"

API_VERSION = __version__
