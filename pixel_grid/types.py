"""Core value types and action enumerations.

``Element`` is the unit stored in the grid model and ``Change`` is the only
way the model is mutated. Two action vocabularies exist:

* :class:`ModelAction` is what :class:`grid model <pixel_grid.model.GridModel>`
  understands.
* :class:`ControllerAction` is the richer set of editing tools of the
  :class:`model builder <pixel_grid.builder.GridModelBuilder>`. The builder
  translates controller actions into model actions before applying them.
"""

from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Any, Dict, Iterable, Mapping, Optional

from pyrsistent import pmap, pvector
from pyrsistent.typing import PMap, PVector

from pixel_grid.frame import ORIGIN, Dimensions, Position

Color = Optional[str]


class ModelAction(StrEnum):
    """Mutations understood by the grid model."""

    SET = "set"
    CLEAR = "clear"
    CLEAR_ALL = "clear all"


class ControllerAction(StrEnum):
    """Editing tools of the model builder.

    ``SET``, ``CLEAR`` and ``CLEAR_ALL`` share their values with
    :class:`ModelAction` so a committed ``SET`` reads the same in both.
    """

    CLEAR = ModelAction.CLEAR.value
    CLEAR_ALL = ModelAction.CLEAR_ALL.value
    FILL = "fill"
    GET = "get"
    NONE = "none"
    POSITION = "position"
    SET = ModelAction.SET.value
    SHIFT = "shift"
    ZOOM = "zoom"


Action = ModelAction | ControllerAction

_ELEMENT_FIELDS = ("x", "y", "color")


@dataclass(frozen=True)
class Element:
    """A painted cell.

    Attributes:
        x: Column.
        y: Row.
        color: ``"#RRGGBB"`` string, or ``None`` for unpainted.
        data: Any extra fields carried along with the element.
    """

    x: int = 0
    y: int = 0
    color: Color = None
    data: PMap[str, Any] = field(default_factory=pmap)

    @property
    def position(self) -> Position:
        return Position(self.x, self.y)

    def at(self, position: Position) -> "Element":
        """Return a copy of this element placed at ``position``."""
        return replace(self, x=position.x, y=position.y)

    def offset(self, offset: Position) -> "Element":
        return replace(self, x=self.x + offset.x, y=self.y + offset.y)

    def attributes(self) -> Dict[str, Any]:
        """Coordinate-free dict (used for the default and current element)."""
        return {"color": self.color, **self.data}

    def to_dict(self) -> Dict[str, Any]:
        return {"x": self.x, "y": self.y, **self.attributes()}

    @classmethod
    def from_dict(cls, value: Mapping[str, Any]) -> "Element":
        """Build an element from its dict form; missing coordinates default to 0."""
        data = {k: v for k, v in value.items() if k not in _ELEMENT_FIELDS}
        return cls(
            x=int(value.get("x", 0)),
            y=int(value.get("y", 0)),
            color=value.get("color"),
            data=pmap(data),
        )


@dataclass(frozen=True)
class Change:
    """One unit of mutation.

    Attributes:
        action: What to do with ``elements``.
        elements: Elements to apply, relative to ``origin``.
        origin: Offset added to every element coordinate before applying.
        dimensions: Frame dimensions for ``ZOOM`` changes.
        zoomed: Zoom flag for ``ZOOM`` changes.
    """

    action: Action
    elements: PVector[Element] = pvector()
    origin: Position = ORIGIN
    dimensions: Optional[Dimensions] = None
    zoomed: bool = False

    def with_element(self, element: Element) -> "Change":
        return replace(self, elements=self.elements.append(element))


def make_change(
    action: Action,
    elements: Iterable[Element] = (),
    origin: Position = ORIGIN,
) -> Change:
    """Convenience constructor accepting any iterable of elements."""
    return Change(action=action, elements=pvector(elements), origin=origin)
