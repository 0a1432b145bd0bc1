from __future__ import annotations


class SkinSimError(Exception):
    """Base error for the skin simulation pipeline."""


class DimensionMismatchError(SkinSimError, ValueError):
    def __init__(self, length: int, width: int, height: int) -> None:
        self.length = length
        self.width = width
        self.height = height
        super().__init__(
            f"Buffer length {length} does not match {width}x{height}x4 = {width * height * 4}"
        )


class ImageDecodeError(SkinSimError, ValueError):
    pass


class ImageEncodeError(SkinSimError):
    pass
