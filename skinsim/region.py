from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import numpy as np

from .buffer import CHANNELS, PixelBuffer, sample_chunks
from .color import skin_mask

logger = logging.getLogger(__name__)

DEFAULT_STRIDE = 4
RADIUS_SCALE = 0.6


@dataclass(frozen=True)
class FaceRegion:
    center_x: float
    center_y: float
    radius: float


def estimate_face_region(buffer: PixelBuffer, stride: int = DEFAULT_STRIDE) -> FaceRegion:
    """Estimate face center and size from the centroid of sampled skin pixels.

    Every ``stride``-th pixel (in flat row-major order) is sampled; fully
    transparent pixels are ignored. With no skin the image center is used.
    """
    if stride < 1:
        raise ValueError(f"Sampling stride must be >= 1, got {stride}")
    w, h = buffer.width, buffer.height
    flat = buffer.data.reshape(-1, CHANNELS)
    count = sum_x = sum_y = 0
    for start, stop in sample_chunks(w * h, stride):
        indices = np.arange(start, stop, stride, dtype=np.int64)
        sampled = flat[start:stop:stride]
        skin_idx = indices[skin_mask(sampled) & (sampled[:, 3] != 0)]
        count += int(skin_idx.size)
        sum_x += int(np.sum(skin_idx % w))
        sum_y += int(np.sum(skin_idx // w))

    if count:
        center_x = sum_x / count
        center_y = sum_y / count
    else:
        center_x = w / 2
        center_y = h / 2
    radius = math.sqrt(count * stride) * RADIUS_SCALE

    logger.debug(
        f"Face region: center=({center_x:.1f}, {center_y:.1f}) radius={radius:.1f} samples={count}"
    )
    return FaceRegion(center_x=center_x, center_y=center_y, radius=radius)
