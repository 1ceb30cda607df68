"""Render sinks.

A raster surface is addressed in physical pixels and exposes an RGBA buffer
plus a flush primitive. The canvases write into ``rgba`` and call ``flush``
once per paint. A surface may be resized at any time; the canvas notices by
comparing its cached size with the current one.
"""

from typing import Protocol

import numpy as np
import numpy.typing as npt
from PIL import Image

UInt8Array = npt.NDArray[np.uint8]


class RasterSurface(Protocol):
    @property
    def width(self) -> int: ...

    @property
    def height(self) -> int: ...

    @property
    def rgba(self) -> UInt8Array: ...

    def reset(self) -> None: ...

    def flush(self) -> None: ...


class ImageSurface:
    """In-memory RGBA surface backed by a ``(height, width, 4)`` array."""

    def __init__(self, width: int, height: int):
        self._rgba: UInt8Array = np.zeros((height, width, 4), dtype=np.uint8)
        self.flush_count = 0

    @property
    def width(self) -> int:
        return int(self._rgba.shape[1])

    @property
    def height(self) -> int:
        return int(self._rgba.shape[0])

    @property
    def rgba(self) -> UInt8Array:
        return self._rgba

    def reset(self) -> None:
        """Make every physical pixel fully transparent."""
        self._rgba[...] = 0

    def resize_physical(self, width: int, height: int) -> None:
        """Change the physical size; contents are discarded."""
        self._rgba = np.zeros((height, width, 4), dtype=np.uint8)

    def flush(self) -> None:
        self.flush_count += 1

    def to_image(self) -> Image.Image:
        return Image.fromarray(self._rgba.copy())
