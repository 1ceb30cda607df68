from typing import Iterable, Optional, Set, Tuple

from pixel_grid.builder import GridModelBuilder
from pixel_grid.config import Editor, EditorConfig, build_editor
from pixel_grid.frame import Dimensions, Position
from pixel_grid.types import ControllerAction, Element

BLACK = "#000000"
WHITE = "#FFFFFF"
RED = "#FF0000"

Cell = Tuple[int, int, Optional[str]]


def make_editor(width: int = 3, height: int = 3, resolution: int = 30) -> Editor:
    """3x3 editor: white default element, black current element."""
    return build_editor(
        EditorConfig(
            dimensions=Dimensions(width, height),
            default_color=WHITE,
            current_color=BLACK,
            resolution=resolution,
        )
    )


def cells(elements: Iterable[Element]) -> Set[Cell]:
    """Order-free view of elements for comparisons."""
    return {(e.x, e.y, e.color) for e in elements}


def visible(editor: Editor) -> Set[Cell]:
    return cells(editor.model.get_elements(editor.builder.frame))


def stroke(
    builder: GridModelBuilder,
    action: ControllerAction,
    *points: Tuple[int, int],
    commit: bool = True,
) -> None:
    """Run one gesture through the builder."""
    builder.set_action(action)
    for x, y in points:
        builder.add_location_to_current_change(Position(x, y))
    if commit:
        builder.commit_current_change()


def make_edits(editor: Editor) -> None:
    """Three commits: a black stroke, a red dot at (0, 0), clearing (1, 1)."""
    builder = editor.builder
    editor.current_element.set_value(Element(color=BLACK))
    stroke(builder, ControllerAction.SET, (0, 1), (1, 0), (1, 1))

    editor.current_element.set_value(Element(color=RED))
    stroke(builder, ControllerAction.SET, (0, 0))

    stroke(builder, ControllerAction.CLEAR, (1, 1))
