from __future__ import annotations

import base64

import cv2
import numpy as np

from .buffer import PixelBuffer
from .errors import ImageDecodeError, ImageEncodeError

DEFAULT_JPEG_QUALITY = 90


def decode_image(data: bytes) -> PixelBuffer:
    """Decode compressed image bytes into an opaque RGBA buffer."""
    if not data:
        raise ImageDecodeError("Empty image payload")
    array = np.frombuffer(data, np.uint8)
    image = cv2.imdecode(array, cv2.IMREAD_COLOR)
    if image is None:
        raise ImageDecodeError("Unsupported image format")
    rgba = cv2.cvtColor(image, cv2.COLOR_BGR2RGBA)
    return PixelBuffer.from_array(rgba)


def encode_image(buffer: PixelBuffer, quality: int = DEFAULT_JPEG_QUALITY) -> bytes:
    if buffer.is_empty:
        raise ImageEncodeError("Cannot encode an empty image")
    bgr = cv2.cvtColor(buffer.pixels(), cv2.COLOR_RGBA2BGR)
    success, encoded = cv2.imencode(".jpg", bgr, [int(cv2.IMWRITE_JPEG_QUALITY), int(quality)])
    if not success:
        raise ImageEncodeError("Failed to encode image")
    return encoded.tobytes()


def to_data_url(jpeg: bytes) -> str:
    return "data:image/jpeg;base64," + base64.b64encode(jpeg).decode("utf-8")
