"""Pixel format conversion."""

from __future__ import annotations

import numpy as np

_RED = np.uint32(0x00FF0000)
_GREEN = np.uint32(0x0000FF00)
_BLUE = np.uint32(0x000000FF)
_ALPHA = np.uint32(0xFF000000)


def _swap(pixels: np.ndarray) -> np.ndarray:
    return (
        ((pixels & _RED) >> np.uint32(16))
        | (pixels & _GREEN)
        | ((pixels & _BLUE) << np.uint32(16))
        | (pixels & _ALPHA)
    )


def bgra_to_rgba(pixels):
    """Convert 8-bit BGRA pixels to 8-bit RGBA.

    Bytes-like input is read as packed little-endian pixels and bytes are
    returned; otherwise an array of 32-bit pixel values is returned.
    """
    if isinstance(pixels, (bytes, bytearray, memoryview)):
        raw = bytes(pixels)
        if len(raw) % 4:
            raise ValueError("pixel data length must be a multiple of 4")
        arr = np.frombuffer(raw, dtype="<u4")
        return _swap(arr.astype(np.uint32)).astype("<u4").tobytes()
    arr = np.asarray(pixels)
    if arr.dtype.kind not in "ui":
        raise TypeError("pixels must be integers")
    return _swap(arr.astype(np.uint32))