from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

import numpy as np

from .errors import DimensionMismatchError

CHANNELS = 4

# Pixels processed per band; bounds the float temporaries of per-pixel math.
BAND_PIXELS = 1 << 14


@dataclass(eq=False)
class PixelBuffer:
    """Interleaved RGBA samples, row major, four uint8 channels per pixel."""

    data: np.ndarray
    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError(f"Invalid dimensions {self.width}x{self.height}")
        if isinstance(self.data, (bytes, bytearray, memoryview)):
            flat = np.frombuffer(self.data, dtype=np.uint8).copy()
        else:
            flat = np.ascontiguousarray(self.data, dtype=np.uint8).reshape(-1)
        if flat.size != self.width * self.height * CHANNELS:
            raise DimensionMismatchError(flat.size, self.width, self.height)
        self.data = flat

    @classmethod
    def from_array(cls, rgba: np.ndarray) -> "PixelBuffer":
        if rgba.ndim != 3 or rgba.shape[2] != CHANNELS:
            raise ValueError(f"Expected an (H, W, 4) array, got shape {rgba.shape}")
        h, w = rgba.shape[:2]
        return cls(data=rgba.copy(), width=w, height=h)

    def __len__(self) -> int:
        return int(self.data.size)

    @property
    def is_empty(self) -> bool:
        return self.data.size == 0

    def pixels(self) -> np.ndarray:
        """(height, width, 4) view sharing memory with ``data``."""
        return self.data.reshape(self.height, self.width, CHANNELS)

    def copy(self) -> "PixelBuffer":
        return PixelBuffer(data=self.data.copy(), width=self.width, height=self.height)

    def tobytes(self) -> bytes:
        return self.data.tobytes()


def ensure_same_shape(a: PixelBuffer, b: PixelBuffer) -> None:
    if a.width != b.width or a.height != b.height:
        raise DimensionMismatchError(len(b), a.width, a.height)


def store_channel(values: np.ndarray) -> np.ndarray:
    # Clamped 8-bit storage: round to nearest, ties to even, then saturate.
    return np.clip(np.rint(values), 0, 255).astype(np.uint8)


def row_bands(height: int, width: int, band_pixels: Optional[int] = None) -> Iterator[Tuple[int, int]]:
    """Yield ``(y0, y1)`` row ranges of roughly ``band_pixels`` pixels each."""
    if band_pixels is None:
        band_pixels = BAND_PIXELS
    rows = max(1, band_pixels // max(1, width))
    for y0 in range(0, height, rows):
        yield y0, min(height, y0 + rows)


def sample_chunks(total: int, stride: int) -> Iterator[Tuple[int, int]]:
    """Yield flat ``(start, stop)`` pixel ranges whose starts stay on the stride grid."""
    chunk = max(1, BAND_PIXELS) * stride
    for start in range(0, total, chunk):
        yield start, min(total, start + chunk)
