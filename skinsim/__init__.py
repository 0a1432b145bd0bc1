"""Skin simulation image pipeline."""

from .buffer import PixelBuffer
from .errors import DimensionMismatchError, ImageDecodeError, ImageEncodeError, SkinSimError
from .models import ConcernType
from .pipeline import SimulationResult, SkinSimulationPipeline

__all__ = [
    "ConcernType",
    "DimensionMismatchError",
    "ImageDecodeError",
    "ImageEncodeError",
    "PixelBuffer",
    "SimulationResult",
    "SkinSimError",
    "SkinSimulationPipeline",
]

__version__ = "1.0.0"
