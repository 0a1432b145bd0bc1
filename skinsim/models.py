from __future__ import annotations

from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, Field


class ConcernType(str, Enum):
    ACTIVE_BLEMISH = "acneActive"
    DARK_CIRCLE = "darkCircles"
    TEXTURE = "texture"
    REDNESS = "redness"
    PIGMENTATION = "pigmentation"


class CorrectionRequest(BaseModel):
    concernType: ConcernType
    intensity: float = Field(ge=0, le=1, description="Correction strength from 0 to 1")


class PointModel(BaseModel):
    x: float
    y: float


class FaceRegionModel(BaseModel):
    centerX: float
    centerY: float
    radius: float


class FrameValidation(BaseModel):
    aligned: bool
    status: Literal["OK", "WARNING"]
    message: str
    centerPoint: PointModel


class SkinMetrics(BaseModel):
    overallScore: float
    acneActive: float
    acneScars: float
    poreSize: float
    blackheads: float
    wrinkleFine: float
    wrinkleDeep: float
    sagging: float
    pigmentation: float
    redness: float
    texture: float
    hydration: float
    oiliness: float
    darkCircles: float


class SimulationResponse(BaseModel):
    image: str
    faceRegion: Optional[FaceRegionModel] = None
