from __future__ import annotations

import numpy as np

from .buffer import CHANNELS, PixelBuffer, sample_chunks
from .color import skin_mask
from .models import SkinMetrics

SAMPLE_STRIDE = 4
NEUTRAL_RED_GREEN_RATIO = 1.2


def _clamp_score(value: float) -> float:
    return float(min(99.0, max(10.0, value)))


def analyze_skin_frame(buffer: PixelBuffer) -> SkinMetrics:
    """Fast deterministic skin scores from the red/green balance of skin pixels.

    This is a local preview heuristic, not a diagnosis.
    """
    flat = buffer.data.reshape(-1, CHANNELS)
    count = r_sum = g_sum = 0
    for start, stop in sample_chunks(flat.shape[0], SAMPLE_STRIDE):
        sampled = flat[start:stop:SAMPLE_STRIDE]
        skin = sampled[skin_mask(sampled)]
        count += int(skin.shape[0])
        r_sum += int(np.sum(skin[:, 0], dtype=np.int64))
        g_sum += int(np.sum(skin[:, 1], dtype=np.int64))

    ratio = NEUTRAL_RED_GREEN_RATIO
    if count and g_sum:
        ratio = (r_sum / count) / (g_sum / count)

    score = 70 + (count % 20)
    return SkinMetrics(
        overallScore=score,
        acneActive=_clamp_score(100 - (ratio - 1.1) * 100),
        acneScars=score - 5,
        poreSize=score + 2,
        blackheads=score + 5,
        wrinkleFine=score,
        wrinkleDeep=score + 5,
        sagging=85,
        pigmentation=score - 2,
        redness=_clamp_score(100 - (ratio - 1.1) * 80),
        texture=score,
        hydration=score - 10,
        oiliness=60,
        darkCircles=score - 5,
    )
