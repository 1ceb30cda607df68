"""Frame value types.

A :class:`Frame` is a rectangular window onto the grid: an ``origin`` plus
``dimensions``. The model builder, the viewport and the canvases each embed
one by value and replace it when they move or resize; nothing inherits from
it.

Coordinates inside a frame are *frame-relative*: absolute ``origin`` maps to
``(0, 0)``.
"""

from dataclasses import dataclass, replace
from typing import Any, Mapping


@dataclass(frozen=True)
class Position:
    """Grid coordinate.

    Attributes:
        x: Column index (0 at left).
        y: Row index (0 at top).
    """

    x: int
    y: int

    def __add__(self, other: "Position") -> "Position":
        return Position(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Position") -> "Position":
        return Position(self.x - other.x, self.y - other.y)

    def to_dict(self) -> dict[str, int]:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, value: Mapping[str, Any]) -> "Position":
        return cls(int(value["x"]), int(value["y"]))


ORIGIN = Position(0, 0)


@dataclass(frozen=True)
class Dimensions:
    """Width and height in grid cells."""

    width: int
    height: int

    def to_dict(self) -> dict[str, int]:
        return {"width": self.width, "height": self.height}

    @classmethod
    def from_dict(cls, value: Mapping[str, Any]) -> "Dimensions":
        return cls(int(value["width"]), int(value["height"]))


@dataclass(frozen=True)
class Frame:
    """Rectangular window ``[origin, origin + dimensions)``.

    Attributes:
        dimensions: Size of the window.
        origin: Absolute coordinate of the top-left cell.
    """

    dimensions: Dimensions
    origin: Position = ORIGIN

    def move(self, offset: Position, absolute: bool = False) -> "Frame":
        """Return a frame moved by ``offset``, or placed at it if ``absolute``."""
        if absolute:
            return replace(self, origin=offset)
        return replace(self, origin=self.origin + offset)

    def resize(self, dimensions: Dimensions) -> "Frame":
        return replace(self, dimensions=dimensions)

    def contains(self, position: Position) -> bool:
        """Return True if the absolute ``position`` lies inside the frame."""
        return (
            self.origin.x <= position.x < self.origin.x + self.dimensions.width
            and self.origin.y <= position.y < self.origin.y + self.dimensions.height
        )

    def in_bounds(self, x: int, y: int) -> bool:
        """Return True if the frame-relative ``(x, y)`` lies inside the frame."""
        return 0 <= x < self.dimensions.width and 0 <= y < self.dimensions.height
