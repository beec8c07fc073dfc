import io

import numpy as np
import pytest
from PIL import Image


def encode_png(array, mode=None):
    """Encode a numpy array as PNG bytes."""
    img = Image.fromarray(np.asarray(array, dtype=np.uint8))
    if mode:
        img = img.convert(mode)
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


def decode_to_array(data):
    """Decode image bytes into a grayscale numpy array."""
    return np.array(Image.open(io.BytesIO(data)).convert("L"))


@pytest.fixture
def gradient_grid():
    """A 16x24 horizontal gradient covering the full 0-255 range."""
    row = np.linspace(0, 255, 24).astype(np.uint8)
    return np.tile(row, (16, 1))


@pytest.fixture
def random_grid():
    rng = np.random.default_rng(1234)
    return rng.integers(0, 256, size=(13, 17), dtype=np.uint8)
