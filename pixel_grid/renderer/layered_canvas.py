"""Layer compositing on top of :class:`PixelCanvas`.

Pixels are drawn on integer layers; on paint each touched cell resolves to
its highest layer that carries a color, and only that color reaches the
pixel canvas. Layers are emptied after every paint, so owners redraw every
visible thing each frame.
"""

from typing import Dict

from pixel_grid.frame import Dimensions, Frame, Position
from pixel_grid.renderer.pixel_canvas import FrameDiff, PixelCanvas
from pixel_grid.renderer.surface import RasterSurface
from pixel_grid.types import Color
from pixel_grid.utils.encoder import decode, encode


def top_color(layers: Dict[int, Color]) -> Color:
    """Color of the highest layer with a color, ``None`` if none has one."""
    for layer in sorted(layers, reverse=True):
        if layers[layer] is not None:
            return layers[layer]
    return None


class LayeredCanvas:
    def __init__(
        self,
        dimensions: Dimensions,
        surface: RasterSurface,
        background_color: Color = None,
    ):
        self._frame = Frame(dimensions)
        self.layers: Dict[int, Dict[int, Color]] = {}
        self.pixel_canvas = PixelCanvas(dimensions, surface, background_color)

    @property
    def dimensions(self) -> Dimensions:
        return self._frame.dimensions

    def set_pixel(self, x: int, y: int, color: Color, layer: int) -> None:
        if not self._frame.in_bounds(x, y):
            return
        key = encode(Position(x, y), self.dimensions)
        self.layers.setdefault(key, {})[layer] = color

    def paint(self) -> FrameDiff:
        layers, self.layers = self.layers, {}
        for key, stack in layers.items():
            position = decode(key, self.dimensions)
            self.pixel_canvas.set_pixel(position.x, position.y, top_color(stack))
        return self.pixel_canvas.paint()
