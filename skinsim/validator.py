from __future__ import annotations

import numpy as np

from .buffer import CHANNELS, PixelBuffer
from .color import skin_mask
from .models import FrameValidation, PointModel

CROP_SIZE = 20
MIN_SKIN_RATIO = 0.3


def _center_crop(buffer: PixelBuffer) -> np.ndarray:
    # Pixels outside the image read as transparent black, like a canvas read.
    crop = np.zeros((CROP_SIZE, CROP_SIZE, CHANNELS), dtype=np.uint8)
    x0 = buffer.width // 2 - CROP_SIZE // 2
    y0 = buffer.height // 2 - CROP_SIZE // 2
    sx0, sy0 = max(0, x0), max(0, y0)
    sx1 = min(buffer.width, x0 + CROP_SIZE)
    sy1 = min(buffer.height, y0 + CROP_SIZE)
    if sx1 > sx0 and sy1 > sy0:
        crop[sy0 - y0 : sy1 - y0, sx0 - x0 : sx1 - x0] = buffer.pixels()[sy0:sy1, sx0:sx1]
    return crop


def validate_frame(buffer: PixelBuffer) -> FrameValidation:
    """Advisory check that a face fills the center of a capture frame."""
    crop = _center_crop(buffer)
    ratio = np.count_nonzero(skin_mask(crop)) / (CROP_SIZE * CROP_SIZE)
    aligned = bool(ratio > MIN_SKIN_RATIO)
    return FrameValidation(
        aligned=aligned,
        status="OK" if aligned else "WARNING",
        message="Perfect" if aligned else "Align Face",
        centerPoint=PointModel(x=buffer.width / 2, y=buffer.height / 2),
    )
