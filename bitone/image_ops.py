"""
Basic image operations module.

Decoding and encoding are delegated to Pillow; everything past this module
works on grids (2D uint8 numpy arrays indexed [y, x]).
"""

import datetime
import io
import logging
import os

import numpy as np
from PIL import Image

logger = logging.getLogger("bitone.image_ops")

# Output format name -> (Pillow format, MIME type, file extension)
OUTPUT_FORMATS = {
    "png": ("PNG", "image/png", ".png"),
    "bmp": ("BMP", "image/bmp", ".bmp"),
    "gif": ("GIF", "image/gif", ".gif"),
    "tiff": ("TIFF", "image/tiff", ".tiff"),
    "webp": ("WEBP", "image/webp", ".webp"),
}

DEFAULT_OUTPUT_DIR = "./out/dithered"

# Rec. 709 luma weights in units of 1/LUMA_DIVISOR
LUMA_WEIGHTS = (2126, 7152, 722)
LUMA_DIVISOR = 10000

# Grayscale modes with more than 8 bits per sample
HIGH_DEPTH_MODES = ("I;16", "I;16L", "I;16B", "I;16N", "I", "F")


def normalize_format(image_format):
    """
    Validate an output format name.

    Args:
        image_format: Format name such as "png" or ".PNG"

    Returns:
        Lower-case format key of OUTPUT_FORMATS

    Raises:
        ValueError: If the format is not supported
    """
    key = str(image_format or "").strip().lower().lstrip(".")
    if key in ("tif",):
        key = "tiff"
    if key not in OUTPUT_FORMATS:
        raise ValueError(
            f"Unsupported output format: {image_format}. Expected one of: {sorted(OUTPUT_FORMATS)}"
        )
    return key


def media_type_for(image_format):
    """Return the MIME type for an output format."""
    return OUTPUT_FORMATS[normalize_format(image_format)][1]


def extension_for(image_format):
    """Return the file extension (with dot) for an output format."""
    return OUTPUT_FORMATS[normalize_format(image_format)][2]


def _high_depth_to_8bit(img):
    """Scale a 16-bit integer or float grayscale image down to 8 bits."""
    if img.mode == "F":
        # Float samples are expected in the 0.0-1.0 range
        samples = np.clip(np.array(img, dtype=np.float64), 0.0, 1.0)
        return np.rint(samples * 255).astype(np.uint8)

    samples = np.clip(np.array(img, dtype=np.int64), 0, 65535)
    return ((samples + 128) // 257).astype(np.uint8)


def to_grayscale(img):
    """
    Convert an image to an 8-bit grayscale grid.

    Color images use Rec. 709 luma weights (0.2126 R + 0.7152 G + 0.0722 B),
    truncated to an integer. 16-bit and float grayscale images are scaled
    down to 8 bits. Transparent pixels are composited over white first.

    Args:
        img: PIL Image object in any mode

    Returns:
        2D uint8 numpy array with the same width and height as the image
    """
    if img.mode in HIGH_DEPTH_MODES:
        return _high_depth_to_8bit(img)

    if img.mode == "L":
        return np.array(img, dtype=np.uint8)

    if img.mode in ("RGBA", "LA", "PA") or (
        img.mode == "P" and "transparency" in img.info
    ):
        rgba = img.convert("RGBA")
        background = Image.new("RGBA", rgba.size, (255, 255, 255, 255))
        img = Image.alpha_composite(background, rgba)

    rgb = np.array(img.convert("RGB"), dtype=np.uint32)
    red_weight, green_weight, blue_weight = LUMA_WEIGHTS
    luma = (
        rgb[..., 0] * red_weight
        + rgb[..., 1] * green_weight
        + rgb[..., 2] * blue_weight
    ) // LUMA_DIVISOR
    return luma.astype(np.uint8)


def decode_image(data, max_pixels=None):
    """
    Decode raw image bytes.

    The pixel limit is checked against the size in the image header, before
    any pixel data is decoded.

    Args:
        data: Encoded image bytes (PNG, JPEG, ...)
        max_pixels: Reject images with more pixels than this (optional)

    Returns:
        Fully loaded PIL Image object

    Raises:
        ValueError: If the data is empty, cannot be decoded or is too large
    """
    if not data:
        raise ValueError("Empty image data")

    try:
        img = Image.open(io.BytesIO(data))
    except Exception as e:
        raise ValueError(f"Invalid image file: {e}") from e

    width, height = img.size
    if max_pixels is not None and width * height > max_pixels:
        raise ValueError(
            f"Image dimensions too large: {width}x{height} exceeds {max_pixels} pixels"
        )

    try:
        img.load()
    except Exception as e:
        raise ValueError(f"Invalid image file: {e}") from e

    return img


def decode_grid(data, max_pixels=None):
    """Decode raw image bytes straight into a grayscale grid."""
    return to_grayscale(decode_image(data, max_pixels=max_pixels))


def grid_to_image(grid):
    """Wrap a grid in an 8-bit grayscale PIL Image."""
    return Image.fromarray(np.ascontiguousarray(grid, dtype=np.uint8))


def encode_grid(grid, image_format="png"):
    """
    Encode a grid as image bytes.

    Args:
        grid: 2D uint8 numpy array
        image_format: Output format name (default: "png")

    Returns:
        Encoded image bytes

    Raises:
        ValueError: If the format is not supported
        OSError: If the encoder fails
    """
    pil_format = OUTPUT_FORMATS[normalize_format(image_format)][0]

    buffer = io.BytesIO()
    grid_to_image(grid).save(buffer, format=pil_format)
    return buffer.getvalue()


def load_image(image_path):
    """
    Load an image from the given path.

    Args:
        image_path: Path to the image file

    Returns:
        Fully loaded PIL Image object

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not a decodable image
    """
    with open(image_path, "rb") as f:
        data = f.read()
    return decode_image(data)


def build_output_path(original_path, algorithm_name, image_format, output_dir=None):
    """Build '<dir>/<name>_<algorithm>_<timestamp><ext>' for a dithered image."""
    timestamp = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
    filename = os.path.basename(original_path)
    name, _ = os.path.splitext(filename)

    output_dir = output_dir or DEFAULT_OUTPUT_DIR
    return os.path.join(
        output_dir, f"{name}_{algorithm_name}_{timestamp}{extension_for(image_format)}"
    )


def save_dithered_image(
    grid, original_path, algorithm_name, output_path=None, image_format=None
):
    """
    Save a dithered grid to disk.

    Args:
        grid: Dithered 2D uint8 numpy array
        original_path: Original image path (used for the default filename)
        algorithm_name: Name of the dithering algorithm used
        output_path: Explicit destination, or None for ./out/dithered/...
        image_format: Output format; inferred from output_path when omitted

    Returns:
        Path of the saved image
    """
    if image_format is None:
        if output_path:
            image_format = os.path.splitext(output_path)[1] or "png"
        else:
            image_format = "png"
    image_format = normalize_format(image_format)

    if output_path is None:
        output_path = build_output_path(original_path, algorithm_name, image_format)

    directory = os.path.dirname(output_path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    data = encode_grid(grid, image_format)
    with open(output_path, "wb") as f:
        f.write(data)

    logger.info(f"Saved dithered image as: {output_path}")
    return output_path
