"""Minimal color helpers.

Full validation lives with the caller; the core only needs to recognise
``"#RRGGBB"`` strings, normalise their case and turn them into RGB tuples for
the raster.
"""

import re
from typing import Optional, Tuple

HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")

RGB = Tuple[int, int, int]


def is_valid(color: object) -> bool:
    return isinstance(color, str) and HEX_COLOR.match(color) is not None


def sanitize(color: Optional[str]) -> Optional[str]:
    """Upper-case a valid color; ``None`` and invalid values become ``None``."""
    if color is None or not is_valid(color):
        return None
    return color.upper()


def to_rgb(color: str) -> RGB:
    """Convert ``"#RRGGBB"`` to an ``(r, g, b)`` tuple."""
    value = int(color[1:], 16)
    return (value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF
