from __future__ import annotations

import logging
from typing import Callable, Dict

import numpy as np

from .buffer import PixelBuffer, ensure_same_shape, row_bands, store_channel
from .color import luma, skin_mask
from .models import ConcernType
from .region import FaceRegion

logger = logging.getLogger(__name__)

REDNESS_SPIKE_THRESHOLD = 10.0
REDNESS_SPIKE_SCALE = 20.0
BLEMISH_RED_REDUCTION = 5.0
BLEMISH_GREEN_BOOST = 2.0
GLOBAL_REDNESS_PULL = 0.3

TEXTURE_EDGE_VARIANCE = 30.0

EYE_BAND_HEIGHT = 0.5
EYE_BAND_HALF_WIDTH = 0.7
SHADOW_LUMA_MAX = 140.0
SHADOW_BOOST = 40.0
SHADOW_BLUE_RATIO = 0.8


def _split(pixels: np.ndarray):
    channels = pixels.astype(np.float64)
    return channels[..., 0], channels[..., 1], channels[..., 2]


def _write(out: np.ndarray, channel: int, where: np.ndarray, values: np.ndarray) -> None:
    out[..., channel] = np.where(where, values, out[..., channel])


def _spot_heal(
    src: np.ndarray,
    blurred: np.ndarray,
    out: np.ndarray,
    active: np.ndarray,
    intensity: float,
    desaturate: bool,
    global_pull: bool,
) -> None:
    r, g, b = _split(src)
    br, bg, bb = _split(blurred)
    spike = (r - br) - (g - bg)
    spot = active & (spike > REDNESS_SPIKE_THRESHOLD)

    heal = np.minimum(1.0, intensity * (spike / REDNESS_SPIKE_SCALE))
    healed_r = store_channel(r * (1 - heal) + br * heal)
    healed_g = store_channel(g * (1 - heal) + bg * heal)
    healed_b = store_channel(b * (1 - heal) + bb * heal)
    if desaturate:
        healed_r = store_channel(healed_r.astype(np.float64) - BLEMISH_RED_REDUCTION * heal)
        healed_g = store_channel(healed_g.astype(np.float64) + BLEMISH_GREEN_BOOST * heal)
    _write(out, 0, spot, healed_r)
    _write(out, 1, spot, healed_g)
    _write(out, 2, spot, healed_b)

    if global_pull:
        # Outside localized spots: pull red toward green, never the other way.
        diffuse = active & ~spot & (r > g)
        pulled = store_channel(r - (r - g) * GLOBAL_REDNESS_PULL * intensity)
        _write(out, 0, diffuse, pulled)


def correct_active_blemish(
    src: np.ndarray,
    blurred: np.ndarray,
    out: np.ndarray,
    active: np.ndarray,
    region: FaceRegion,
    intensity: float,
    origin_y: int = 0,
) -> None:
    _spot_heal(src, blurred, out, active, intensity, desaturate=True, global_pull=False)


def correct_redness(
    src: np.ndarray,
    blurred: np.ndarray,
    out: np.ndarray,
    active: np.ndarray,
    region: FaceRegion,
    intensity: float,
    origin_y: int = 0,
) -> None:
    _spot_heal(src, blurred, out, active, intensity, desaturate=False, global_pull=True)


def _edge_aware_smooth(
    src: np.ndarray,
    blurred: np.ndarray,
    out: np.ndarray,
    active: np.ndarray,
    intensity: float,
    force_dark_spots: bool,
) -> None:
    r, g, b = _split(src)
    br, bg, bb = _split(blurred)
    variance = np.abs(r - br) + np.abs(g - bg) + np.abs(b - bb)
    mask = 1 - np.minimum(1.0, variance / TEXTURE_EDGE_VARIANCE)
    if force_dark_spots:
        darker = (r + g + b) / 3 < (br + bg + bb) / 3
        mask = np.where(darker, 1.0, mask)

    blend = mask * intensity
    selected = active & (blend > 0)
    _write(out, 0, selected, store_channel(r + (br - r) * blend))
    _write(out, 1, selected, store_channel(g + (bg - g) * blend))
    _write(out, 2, selected, store_channel(b + (bb - b) * blend))


def correct_texture(
    src: np.ndarray,
    blurred: np.ndarray,
    out: np.ndarray,
    active: np.ndarray,
    region: FaceRegion,
    intensity: float,
    origin_y: int = 0,
) -> None:
    _edge_aware_smooth(src, blurred, out, active, intensity, force_dark_spots=False)


def correct_pigmentation(
    src: np.ndarray,
    blurred: np.ndarray,
    out: np.ndarray,
    active: np.ndarray,
    region: FaceRegion,
    intensity: float,
    origin_y: int = 0,
) -> None:
    _edge_aware_smooth(src, blurred, out, active, intensity, force_dark_spots=True)


def eye_band_mask(shape, region: FaceRegion, origin_y: int = 0) -> np.ndarray:
    """Rectangle just above the face centroid approximating the under-eye area.

    ``shape`` is the (rows, cols) of the area being tested; its first row sits
    at image row ``origin_y``.
    """
    h, w = shape
    rel_y = np.arange(origin_y, origin_y + h, dtype=np.float64)[:, None] - region.center_y
    rel_x = np.arange(w, dtype=np.float64)[None, :] - region.center_x
    in_band = (rel_y < 0) & (rel_y > -region.radius * EYE_BAND_HEIGHT)
    in_width = np.abs(rel_x) < region.radius * EYE_BAND_HALF_WIDTH
    return in_band & in_width


def correct_dark_circle(
    src: np.ndarray,
    blurred: np.ndarray,
    out: np.ndarray,
    active: np.ndarray,
    region: FaceRegion,
    intensity: float,
    origin_y: int = 0,
) -> None:
    r, g, b = _split(src)
    shadow = active & eye_band_mask(src.shape[:2], region, origin_y) & (luma(r, g, b) < SHADOW_LUMA_MAX)
    boost = SHADOW_BOOST * intensity
    _write(out, 0, shadow, store_channel(np.minimum(255, r + boost)))
    _write(out, 1, shadow, store_channel(np.minimum(255, g + boost)))
    _write(out, 2, shadow, store_channel(np.minimum(255, b + boost * SHADOW_BLUE_RATIO)))


CorrectionFn = Callable[..., None]

CORRECTIONS: Dict[ConcernType, CorrectionFn] = {
    ConcernType.ACTIVE_BLEMISH: correct_active_blemish,
    ConcernType.REDNESS: correct_redness,
    ConcernType.TEXTURE: correct_texture,
    ConcernType.PIGMENTATION: correct_pigmentation,
    ConcernType.DARK_CIRCLE: correct_dark_circle,
}


def apply_correction(
    source: PixelBuffer,
    blurred: PixelBuffer,
    region: FaceRegion,
    concern: ConcernType,
    intensity: float,
) -> PixelBuffer:
    """Return a corrected copy of ``source``.

    Only non-transparent skin pixels are modified; the source is never mutated.
    Work runs over row bands so per-pixel float temporaries stay small.
    """
    ensure_same_shape(source, blurred)
    concern = ConcernType(concern)
    result = source.copy()
    if intensity <= 0 or source.is_empty:
        return result

    correct = CORRECTIONS[concern]
    src_pixels = source.pixels()
    blurred_pixels = blurred.pixels()
    out_pixels = result.pixels()
    skin_pixels = 0
    for y0, y1 in row_bands(source.height, source.width):
        src = src_pixels[y0:y1]
        active = (src[..., 3] != 0) & skin_mask(src)
        count = int(np.count_nonzero(active))
        if not count:
            continue
        skin_pixels += count
        correct(src, blurred_pixels[y0:y1], out_pixels[y0:y1], active, region, intensity, y0)

    logger.debug(f"Applied {concern.value} over {skin_pixels} skin pixels")
    return result
