import numpy as np
import pytest

from skinsim.buffer import PixelBuffer

SKIN = (200, 150, 120)
DARK_SKIN = (150, 100, 80)
GRAY = (128, 128, 128)


def solid(width, height, rgb, alpha=255):
    rgba = np.zeros((height, width, 4), dtype=np.uint8)
    rgba[..., :3] = rgb
    rgba[..., 3] = alpha
    return rgba


def make_buffer(rgba):
    return PixelBuffer.from_array(rgba)


@pytest.fixture
def skin_image():
    return make_buffer(solid(9, 9, SKIN))


@pytest.fixture
def mixed_image():
    """Random noise around skin tones with non-skin patches and transparent pixels."""
    rng = np.random.default_rng(7)
    rgba = solid(24, 18, SKIN)
    rgba[..., :3] = np.clip(
        rgba[..., :3].astype(np.int16) + rng.integers(-40, 41, size=(18, 24, 3)), 0, 255
    ).astype(np.uint8)
    rgba[2:6, 3:9, :3] = GRAY
    rgba[10:14, 15:20, :3] = (20, 40, 200)
    rgba[0, :, 3] = 0
    return make_buffer(rgba)
