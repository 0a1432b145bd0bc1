from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware

from .buffer import PixelBuffer
from .codec import decode_image
from .config import get_settings
from .errors import ImageDecodeError
from .models import ConcernType, CorrectionRequest, FrameValidation, SimulationResponse, SkinMetrics
from .pipeline import SkinSimulationPipeline

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Skin Simulation Backend", version="1.0.0")
pipeline = SkinSimulationPipeline(settings)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health() -> dict[str, Any]:
    return {"status": "ok"}


async def _load_image(upload: UploadFile) -> PixelBuffer:
    """Load image from UploadFile and decode it to an RGBA buffer."""
    try:
        data = await upload.read()
        return await run_in_threadpool(decode_image, data)
    except ImageDecodeError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except Exception as exc:
        logger.error(f"Error loading image: {exc}", exc_info=True)
        raise HTTPException(status_code=400, detail=f"Failed to load image: {str(exc)}") from exc


@app.post("/api/simulate", response_model=SimulationResponse)
async def simulate(
    image: UploadFile = File(...),
    concernType: ConcernType = Form(...),
    intensity: float = Form(..., ge=0, le=1),
) -> SimulationResponse:
    """Preview the skin after the requested concern improves."""
    buffer = await _load_image(image)
    try:
        request = CorrectionRequest(concernType=concernType, intensity=intensity)
        # Pixel work is CPU bound; keep it off the event loop.
        result = await run_in_threadpool(pipeline.apply, buffer, request)
        return SimulationResponse(
            image=pipeline.encode_image(result.image),
            faceRegion=result.region_model(),
        )
    except Exception as exc:
        logger.error(f"Error simulating {concernType.value}: {exc}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to simulate correction: {str(exc)}") from exc


@app.post("/api/validate-frame", response_model=FrameValidation)
async def validate_frame(image: UploadFile = File(...)) -> FrameValidation:
    """Check that a face fills the center of a capture frame."""
    buffer = await _load_image(image)
    try:
        return await run_in_threadpool(pipeline.validate_frame, buffer)
    except Exception as exc:
        logger.error(f"Error validating frame: {exc}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to validate frame: {str(exc)}") from exc


@app.post("/api/analyze", response_model=SkinMetrics)
async def analyze(image: UploadFile = File(...)) -> SkinMetrics:
    """Quick heuristic skin scores for local feedback."""
    buffer = await _load_image(image)
    try:
        return await run_in_threadpool(pipeline.analyze, buffer)
    except Exception as exc:
        logger.error(f"Error analyzing frame: {exc}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to analyze frame: {str(exc)}") from exc
