"""Editor defaults and wiring.

:func:`build_editor` assembles a model, a raster surface, a diff canvas, the
observable editor values and a :class:`~pixel_grid.builder.GridModelBuilder`
from an :class:`EditorConfig`.
"""

from dataclasses import dataclass, field
from typing import Optional

from pixel_grid.builder import GridModelBuilder
from pixel_grid.converters import Converter, IdentityConverter
from pixel_grid.frame import Dimensions
from pixel_grid.model import GridModel
from pixel_grid.renderer.pixel_canvas import PixelCanvas
from pixel_grid.renderer.surface import ImageSurface
from pixel_grid.types import Element
from pixel_grid.value import (
    Value,
    boolean_validator,
    dimensions_validator,
    element_validator,
)

DEFAULT_DIMENSIONS = Dimensions(16, 16)
DEFAULT_BACKGROUND_COLOR = "#FFFFFF"
DEFAULT_ELEMENT_COLOR = DEFAULT_BACKGROUND_COLOR
DEFAULT_CURRENT_COLOR = "#000000"
DEFAULT_RESOLUTION = 640


@dataclass(frozen=True)
class EditorConfig:
    """Initial editor state.

    Attributes:
        dimensions: Configured size of the editable area in cells.
        default_color: Color of unpainted cells (also the canvas background);
            ``None`` leaves them transparent.
        current_color: Color painted by ``SET`` and ``FILL``.
        resolution: Physical width and height of the raster surface.
    """

    dimensions: Dimensions = DEFAULT_DIMENSIONS
    default_color: Optional[str] = DEFAULT_ELEMENT_COLOR
    current_color: str = DEFAULT_CURRENT_COLOR
    resolution: int = DEFAULT_RESOLUTION
    converter: Converter = field(default_factory=IdentityConverter)


@dataclass(frozen=True)
class Editor:
    builder: GridModelBuilder
    model: GridModel
    canvas: PixelCanvas
    surface: ImageSurface
    default_element: Value[Element]
    current_element: Value[Element]
    dimensions: Value[Dimensions]
    zoomed: Value[bool]


def build_editor(config: EditorConfig = EditorConfig()) -> Editor:
    default_element = Value(Element(color=config.default_color), element_validator)
    current_element = Value(Element(color=config.current_color), element_validator)
    dimensions = Value(config.dimensions, dimensions_validator)
    zoomed = Value(False, boolean_validator)

    model = GridModel()
    surface = ImageSurface(config.resolution, config.resolution)
    canvas = PixelCanvas(
        dimensions.get_value(), surface, default_element.get_value().color
    )
    builder = GridModelBuilder(
        model,
        canvas,
        default_element,
        current_element,
        dimensions,
        zoomed,
        config.converter,
    )
    return Editor(
        builder=builder,
        model=model,
        canvas=canvas,
        surface=surface,
        default_element=default_element,
        current_element=current_element,
        dimensions=dimensions,
        zoomed=zoomed,
    )
