from __future__ import annotations

import logging
import math

import numpy as np

from .buffer import PixelBuffer, row_bands

logger = logging.getLogger(__name__)

BLUR_RADIUS_RATIO = 0.005
MIN_BLUR_RADIUS = 2


def blur_radius_for_width(width: int) -> int:
    """Blur radius used by the simulator: 0.5% of the image width, at least 2."""
    return max(MIN_BLUR_RADIUS, int(math.floor(width * BLUR_RADIUS_RATIO)))


def _axis_slice(axis: int, start: int, stop: int):
    index = [slice(None)] * 3
    index[axis] = slice(start, stop)
    return tuple(index)


def _window_mean(padded: np.ndarray, radius: int, axis: int) -> np.ndarray:
    # padded carries `radius` replicated samples on both sides of `axis`.
    size = 2 * radius + 1
    n = padded.shape[axis] - 2 * radius
    sums = np.cumsum(padded, axis=axis, dtype=np.int32)
    window = sums[_axis_slice(axis, size - 1, size - 1 + n)].copy()
    window[_axis_slice(axis, 1, n)] -= sums[_axis_slice(axis, 0, n - 1)]
    del sums
    # round(s / size); size is odd so no sum lands on a .5 tie
    window *= 2
    window += size
    window //= 2 * size
    return window.astype(np.uint8)


def box_blur_array(rgba: np.ndarray, radius: int) -> np.ndarray:
    """Two-pass box blur of an (H, W, 4) uint8 array; alpha is passed through.

    The horizontal pass is quantised to uint8 before the vertical pass runs,
    so the result differs from a single 2-D mean near edges. Both passes run
    over row bands, so besides the output only one uint8 RGB intermediate
    is held for the whole image.
    """
    if radius < 0:
        raise ValueError(f"Blur radius must be >= 0, got {radius}")
    out = rgba.copy()
    if radius == 0 or rgba.size == 0:
        return out
    h, w = rgba.shape[:2]

    horizontal = np.empty((h, w, 3), dtype=np.uint8)
    cols = np.clip(np.arange(-radius, w + radius), 0, w - 1)
    for y0, y1 in row_bands(h, w):
        horizontal[y0:y1] = _window_mean(rgba[y0:y1, cols, :3], radius, axis=1)

    for y0, y1 in row_bands(h, w):
        rows = np.clip(np.arange(y0 - radius, y1 + radius), 0, h - 1)
        out[y0:y1, :, :3] = _window_mean(horizontal[rows], radius, axis=0)
    return out


def box_blur(buffer: PixelBuffer, radius: int) -> PixelBuffer:
    logger.debug(f"Box blur {buffer.width}x{buffer.height} radius={radius}")
    blurred = box_blur_array(buffer.pixels(), radius)
    return PixelBuffer(data=blurred, width=buffer.width, height=buffer.height)
