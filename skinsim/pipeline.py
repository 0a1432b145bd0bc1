from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .blur import blur_radius_for_width, box_blur
from .buffer import PixelBuffer
from .codec import decode_image, encode_image, to_data_url
from .config import Settings
from .corrections import apply_correction
from .metrics import analyze_skin_frame
from .models import ConcernType, CorrectionRequest, FaceRegionModel, FrameValidation, SkinMetrics
from .region import FaceRegion, estimate_face_region
from .validator import validate_frame

logger = logging.getLogger(__name__)


@dataclass
class SimulationResult:
    buffer: PixelBuffer
    image: bytes
    region: Optional[FaceRegion] = None

    def region_model(self) -> Optional[FaceRegionModel]:
        if self.region is None:
            return None
        return FaceRegionModel(
            centerX=self.region.center_x,
            centerY=self.region.center_y,
            radius=self.region.radius,
        )


class SkinSimulationPipeline:
    """Blur, region estimate and per-concern correction over one RGBA buffer.

    Stateless: every call works on its own copies, so one instance can be
    shared between concurrent requests.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or Settings()

    def correct(self, buffer: PixelBuffer, concern: ConcernType, intensity: float) -> SimulationResult:
        concern = ConcernType(concern)
        if buffer.is_empty:
            return SimulationResult(buffer=buffer.copy(), image=b"")
        if intensity <= 0:
            return SimulationResult(buffer=buffer.copy(), image=self._encode(buffer))

        radius = blur_radius_for_width(buffer.width)
        blurred = box_blur(buffer, radius)
        region = estimate_face_region(buffer, stride=self.settings.region_stride)
        logger.debug(
            f"Simulating {concern.value} at intensity {intensity:.2f} "
            f"on {buffer.width}x{buffer.height} (blur radius {radius})"
        )
        corrected = apply_correction(buffer, blurred, region, concern, intensity)
        return SimulationResult(buffer=corrected, image=self._encode(corrected), region=region)

    def apply(self, buffer: PixelBuffer, request: CorrectionRequest) -> SimulationResult:
        return self.correct(buffer, request.concernType, request.intensity)

    def simulate(self, image_bytes: bytes, concern: ConcernType, intensity: float) -> SimulationResult:
        return self.correct(decode_image(image_bytes), concern, intensity)

    def validate_frame(self, buffer: PixelBuffer) -> FrameValidation:
        return validate_frame(buffer)

    def analyze(self, buffer: PixelBuffer) -> SkinMetrics:
        return analyze_skin_frame(buffer)

    def _encode(self, buffer: PixelBuffer) -> bytes:
        return encode_image(buffer, quality=self.settings.jpeg_quality)

    @staticmethod
    def encode_image(image: bytes) -> str:
        return to_data_url(image)
