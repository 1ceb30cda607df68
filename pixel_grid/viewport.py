"""Movable window onto a world of actors.

A :class:`Viewport` embeds a :class:`~pixel_grid.frame.Frame` and draws the
pixels of whatever is rendered through it onto a
:class:`~pixel_grid.renderer.layered_canvas.LayeredCanvas`, translated so the
frame origin lands at canvas ``(0, 0)``.

A frame is drawn by calling :meth:`Viewport.render` with no argument: the
registered render handlers get a chance to draw their actors (by calling
``render(actor)`` back), then the canvas is painted.
"""

from typing import Callable, Iterable, List, Protocol

from pixel_grid.frame import ORIGIN, Dimensions, Frame, Position
from pixel_grid.renderer.layered_canvas import LayeredCanvas
from pixel_grid.renderer.pixel_canvas import FrameDiff
from pixel_grid.renderer.surface import RasterSurface
from pixel_grid.types import Color, Element


class Actor(Protocol):
    """Anything drawable: absolute pixels on one layer."""

    def pixels(self) -> Iterable[Element]: ...

    def layer(self) -> int: ...


RenderHandler = Callable[["Viewport"], None]


class Viewport:
    def __init__(
        self,
        dimensions: Dimensions,
        surface: RasterSurface,
        origin: Position = ORIGIN,
        background_color: Color = None,
    ):
        self._frame = Frame(dimensions, origin)
        self.canvas = LayeredCanvas(dimensions, surface, background_color)
        self._render_handlers: List[RenderHandler] = []

    @property
    def frame(self) -> Frame:
        return self._frame

    @property
    def origin(self) -> Position:
        return self._frame.origin

    @property
    def dimensions(self) -> Dimensions:
        return self._frame.dimensions

    def center(self) -> Position:
        """Absolute cell at the middle of the viewport (rounded down)."""
        return self.origin + Position(
            self.dimensions.width // 2, self.dimensions.height // 2
        )

    def move(self, offset: Position, absolute: bool = False) -> None:
        self._frame = self._frame.move(offset, absolute)

    def add_render_handler(self, handler: RenderHandler) -> None:
        self._render_handlers.append(handler)

    def remove_render_handler(self, handler: RenderHandler) -> None:
        self._render_handlers.remove(handler)

    def render(self, actor: Actor | None = None) -> FrameDiff | None:
        """Draw ``actor`` into the current frame, or finish the frame.

        Arguments:
            actor: Drawn at its absolute pixel coordinates minus the viewport
                origin, on its own layer. When omitted, every render handler
                is called and the canvas is painted.

        Returns:
            FrameDiff | None: The painted diff when the frame was finished.
        """
        if actor is None:
            for handler in list(self._render_handlers):
                handler(self)
            return self.canvas.paint()

        layer = actor.layer()
        for pixel in actor.pixels():
            self.canvas.set_pixel(
                pixel.x - self.origin.x, pixel.y - self.origin.y, pixel.color, layer
            )
        return None

    def render_background(self, background: Actor) -> None:
        """Draw ``background`` in canvas coordinates, ignoring the origin."""
        layer = background.layer()
        for pixel in background.pixels():
            self.canvas.set_pixel(pixel.x, pixel.y, pixel.color, layer)
