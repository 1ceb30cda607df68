"""Double-buffered, diff-based pixel renderer.

The canvas keeps two buffers of grid colors indexed ``[x, y]``:

* ``present``: what is being drawn this frame (``set_pixel`` writes here);
* ``past``: what was painted last frame.

:meth:`PixelCanvas.paint` compares them, writes only the changed cells into
the surface as blocks of ``pixel_size`` physical pixels, then swaps the
buffers and resets ``present`` to the background color. Painting cost is
therefore proportional to what changed, not to the grid area.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import numpy as np
import numpy.typing as npt

from pixel_grid.frame import Dimensions, Frame
from pixel_grid.renderer.surface import RasterSurface
from pixel_grid.types import Color
from pixel_grid.utils.color import sanitize, to_rgb

TRANSPARENT = "transparent"

ObjectArray = npt.NDArray[np.object_]
Cell = Tuple[int, int]
FrameDiff = Dict[str, List[Cell]]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScreenParams:
    """Placement of the grid on the surface.

    Attributes:
        pixel_size: Side of one grid cell in physical pixels.
        x_offset: Physical x of the left-most cell (centers the grid).
        y_offset: Physical y of the top-most cell (centers the grid).
    """

    pixel_size: int
    x_offset: int
    y_offset: int


def make_pixel_grid(dimensions: Dimensions, color: Color) -> ObjectArray:
    grid: ObjectArray = np.empty((dimensions.width, dimensions.height), dtype=object)
    grid.fill(color)
    return grid


def diff_frames(present: ObjectArray, past: Optional[ObjectArray] = None) -> FrameDiff:
    """Group the cells whose color changed between ``past`` and ``present``.

    Arguments:
        present: Current buffer.
        past: Previous buffer. ``None`` compares against an empty grid, so every
            cell is reported.

    Returns:
        FrameDiff: Color (or ``TRANSPARENT``) to the changed ``(x, y)`` cells.
    """
    if past is None:
        changed = np.ones(present.shape, dtype=bool)
    else:
        changed = np.asarray(present != past, dtype=bool)

    diff: FrameDiff = defaultdict(list)
    for x, y in zip(*np.nonzero(changed)):
        color = present[x, y] or TRANSPARENT
        diff[color].append((int(x), int(y)))
    return dict(diff)


def compute_screen_params(
    dimensions: Dimensions, physical_width: int, physical_height: int
) -> ScreenParams:
    """Largest square cell size that fits, with the grid centered."""
    pixel_size = min(
        physical_width // dimensions.width, physical_height // dimensions.height
    )
    return ScreenParams(
        pixel_size=pixel_size,
        x_offset=(physical_width - pixel_size * dimensions.width) // 2,
        y_offset=(physical_height - pixel_size * dimensions.height) // 2,
    )


class PixelCanvas:
    def __init__(
        self,
        dimensions: Dimensions,
        surface: RasterSurface,
        background_color: Color = None,
    ):
        self.surface = surface
        self.background_color: Color = sanitize(background_color)
        self._frame = Frame(dimensions)
        self._cached_surface_size = (surface.width, surface.height)
        self._cached_screen_params: Optional[ScreenParams] = None
        self.present: ObjectArray = make_pixel_grid(dimensions, self.background_color)
        self.past: ObjectArray = make_pixel_grid(dimensions, None)

    @property
    def dimensions(self) -> Dimensions:
        return self._frame.dimensions

    def resize(self, dimensions: Dimensions) -> None:
        """Change the grid size; both buffers and the surface start over."""
        self._frame = self._frame.resize(dimensions)
        self.present = make_pixel_grid(dimensions, self.background_color)
        self.past = make_pixel_grid(dimensions, None)
        self.surface.reset()
        self._cached_screen_params = None

    def clear(self, clear_buffer: bool = False) -> None:
        """Forget what was painted so the next paint redraws every drawn cell.

        Arguments:
            clear_buffer: Also drop what was drawn into ``present`` this frame.
        """
        self.surface.reset()
        self.past = make_pixel_grid(self.dimensions, None)
        if clear_buffer:
            self.present = make_pixel_grid(self.dimensions, self.background_color)

    def set_background_color(self, color: Color) -> None:
        self.background_color = sanitize(color)
        self.resize(self.dimensions)

    def set_pixel(self, x: int, y: int, color: Color) -> None:
        """Draw ``color`` at grid cell ``(x, y)``; out-of-range cells are ignored."""
        if not self._frame.in_bounds(x, y):
            return
        self.present[x, y] = sanitize(color)

    def get_pixel(self, x: int, y: int) -> Color:
        """Color last painted at ``(x, y)``, ``None`` if transparent or out of range."""
        if not self._frame.in_bounds(x, y):
            return None
        return self.past[x, y]

    def screen_params(self) -> ScreenParams:
        if self._cached_screen_params is None:
            self._cached_screen_params = compute_screen_params(
                self.dimensions, self.surface.width, self.surface.height
            )
        return self._cached_screen_params

    def paint(self) -> FrameDiff:
        """Write the changed cells to the surface and start a new frame.

        Returns:
            FrameDiff: The cells that were written, grouped by color.
        """
        surface_size = (self.surface.width, self.surface.height)
        if surface_size != self._cached_surface_size:
            logger.debug(
                "Surface resized %s -> %s, repainting everything",
                self._cached_surface_size,
                surface_size,
            )
            self._cached_surface_size = surface_size
            self._cached_screen_params = None
            self.clear()

        diff = diff_frames(self.present, self.past)
        params = self.screen_params()
        for color, cells in diff.items():
            for cell in cells:
                self._paint_cell(cell, color, params)
        self.surface.flush()

        self.past, self.present = self.present, self.past
        self.present.fill(self.background_color)
        return diff

    def _paint_cell(self, cell: Cell, color: str, params: ScreenParams) -> None:
        x, y = cell
        x0 = x * params.pixel_size + params.x_offset
        y0 = y * params.pixel_size + params.y_offset
        block = self.surface.rgba[y0 : y0 + params.pixel_size, x0 : x0 + params.pixel_size]
        if color == TRANSPARENT:
            block[..., 3] = 0
        else:
            block[..., :3] = to_rgb(color)
            block[..., 3] = 255
