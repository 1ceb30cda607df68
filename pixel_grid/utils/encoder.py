"""Coordinate <-> scalar encoding.

Maps a coordinate inside ``dimensions`` to a single integer key in row-major
order. Out-of-range coordinates are not rejected; callers that need a
bijection must bounds-check first.
"""

from pixel_grid.frame import Dimensions, Position


def encode(position: Position, dimensions: Dimensions) -> int:
    """Return the row-major scalar for ``position``."""
    return position.y * dimensions.width + position.x


def decode(scalar: int, dimensions: Dimensions) -> Position:
    """Inverse of :func:`encode` for in-range coordinates."""
    y, x = divmod(scalar, dimensions.width)
    return Position(x, y)
