from __future__ import annotations

from typing import Tuple

import numpy as np

SKIN_Y_MIN = 40
SKIN_CB_MIN = 80
SKIN_CB_MAX = 125
SKIN_CR_MIN = 135
SKIN_CR_MAX = 170


def rgb_to_ycbcr(r: float, g: float, b: float) -> Tuple[float, float, float]:
    y = 0.299 * r + 0.587 * g + 0.114 * b
    cb = 128 - 0.168736 * r - 0.331264 * g + 0.5 * b
    cr = 128 + 0.5 * r - 0.418688 * g - 0.081312 * b
    return y, cb, cr


def is_skin_pixel(r: float, g: float, b: float) -> bool:
    y, cb, cr = rgb_to_ycbcr(float(r), float(g), float(b))
    return (
        SKIN_CB_MIN < cb < SKIN_CB_MAX
        and SKIN_CR_MIN < cr < SKIN_CR_MAX
        and y > SKIN_Y_MIN
    )


def luma(r: np.ndarray, g: np.ndarray, b: np.ndarray) -> np.ndarray:
    return 0.299 * r + 0.587 * g + 0.114 * b


def skin_mask(rgb: np.ndarray) -> np.ndarray:
    """Vectorised skin predicate over the last axis (R, G, B[, A]).

    Uses the same float64 expression order as ``is_skin_pixel`` so both
    classify every pixel identically.
    """
    channels = rgb[..., :3].astype(np.float64)
    r = channels[..., 0]
    g = channels[..., 1]
    b = channels[..., 2]
    y, cb, cr = rgb_to_ycbcr(r, g, b)
    return (
        (cb > SKIN_CB_MIN)
        & (cb < SKIN_CB_MAX)
        & (cr > SKIN_CR_MIN)
        & (cr < SKIN_CR_MAX)
        & (y > SKIN_Y_MIN)
    )
