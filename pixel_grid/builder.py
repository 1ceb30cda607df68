"""Edit controller for the grid model.

:class:`GridModelBuilder` turns pointer gestures into committed model changes
and keeps the undo/redo history. It owns a :class:`~pixel_grid.frame.Frame`
(the region being viewed and edited) and paints the model, including any
in-progress change, onto an editable canvas.

Gesture protocol:

1. The caller picks a tool with :meth:`GridModelBuilder.set_action`.
2. Every pointer sample calls :meth:`GridModelBuilder.add_location_to_current_change`
   with a frame-relative location. Depending on the tool this grows, replaces
   or live-applies the *current change* and repaints a preview.
3. Pointer-up calls :meth:`GridModelBuilder.commit_current_change`, which
   applies the current change and pushes it onto the undo stack.

History stores the controller change-lists as committed, not model deltas.
:meth:`GridModelBuilder.undo` rebuilds the model by clearing it and replaying
everything still on the undo stack, so no tool needs an inverse. ``SHIFT``
changes are applied to the model directly (they move every element) and
``ZOOM`` changes only move the builder's frame; neither reaches the model as
an element change.
"""

import json
import logging
from dataclasses import replace
from typing import Any, Iterable, List, Optional, Protocol, Sequence, Tuple

from pyrsistent import pvector

from pixel_grid.converters import Converter, IdentityConverter
from pixel_grid.frame import ORIGIN, Dimensions, Frame, Position
from pixel_grid.model import GridModel
from pixel_grid.types import (
    Action,
    Change,
    Color,
    ControllerAction,
    Element,
    ModelAction,
    make_change,
)
from pixel_grid.utils.color import sanitize
from pixel_grid.utils.fill import fill_area
from pixel_grid.value import Value, boolean_validator

ChangeList = Tuple[Change, ...]

logger = logging.getLogger(__name__)


class EditableCanvas(Protocol):
    """Drawing surface the builder paints onto (see ``PixelCanvas``)."""

    def set_pixel(self, x: int, y: int, color: Color) -> Any: ...

    def paint(self) -> Any: ...

    def resize(self, dimensions: Dimensions) -> None: ...

    def clear(self, clear_buffer: bool = False) -> None: ...

    def set_background_color(self, color: Color) -> None: ...


class GridModelBuilder:
    """Builds a :class:`GridModel` from gestures, with undo/redo and zoom.

    Arguments:
        model: Model being edited.
        canvas: Canvas the visible frame is painted onto.
        default_element: Element reported for unpainted cells; its color is
            the canvas background.
        current_element: Element painted by ``SET``/``FILL`` strokes.
        dimensions: Configured (un-zoomed) dimensions of the editable area.
        zoomed: Set to True while the frame is zoomed in. Optional.
        converter: Maps exported/imported documents to an external schema.
    """

    def __init__(
        self,
        model: GridModel,
        canvas: EditableCanvas,
        default_element: Value[Element],
        current_element: Value[Element],
        dimensions: Value[Dimensions],
        zoomed: Optional[Value[bool]] = None,
        converter: Optional[Converter] = None,
    ):
        self._action: ControllerAction = ControllerAction.SET
        self._converter: Converter = converter or IdentityConverter()
        self._current_change: Optional[Change] = None
        self._current_element = current_element
        self._default_element = default_element
        self._dimensions = dimensions
        self._zoomed = zoomed or Value(False, boolean_validator)
        self._model = model
        self._canvas = canvas
        self._undo_stack: List[ChangeList] = []
        self._redo_stack: List[ChangeList] = []
        self._frame = Frame(dimensions.get_value())

        self._dimensions.add_value_change_handler(self._on_dimension_change)
        self._default_element.add_value_change_handler(self._on_default_element_change)

    # -------- Frame --------

    @property
    def frame(self) -> Frame:
        return self._frame

    @property
    def origin(self) -> Position:
        return self._frame.origin

    @property
    def dimensions(self) -> Dimensions:
        return self._frame.dimensions

    @property
    def action(self) -> ControllerAction:
        return self._action

    @property
    def current_change(self) -> Optional[Change]:
        return self._current_change

    def move(self, offset: Position, absolute: bool = False) -> None:
        self._frame = self._frame.move(offset, absolute)
        self.paint()

    def resize(self, dimensions: Dimensions) -> None:
        """Resize the frame and canvas; the configured dimensions are untouched."""
        self._frame = self._frame.resize(dimensions)
        self._canvas.resize(dimensions)
        self.paint()

    # -------- Gestures --------

    def set_action(self, action: str) -> None:
        """Select the tool used by subsequent gestures; unknown names are ignored."""
        try:
            self._action = ControllerAction(action)
        except ValueError:
            logger.warning("Ignoring unknown controller action %r", action)

    def add_location_to_current_change(self, loc: Position) -> None:
        """Feed one frame-relative pointer sample to the current tool."""
        action = self._action

        if action == ControllerAction.NONE:
            self._current_change = None

        elif action == ControllerAction.GET:
            self._current_change = None
            element = next(
                (
                    e
                    for e in self._model.get_elements(self._frame)
                    if e.x == loc.x and e.y == loc.y
                ),
                self._default_element.get_value(),
            )
            self._current_element.set_value(element)

        elif action in (ControllerAction.SET, ControllerAction.CLEAR):
            element = self._current_element.get_value().at(loc)
            if self._current_change is None:
                self._current_change = make_change(action, [element], self._frame.origin)
            else:
                self._current_change = self._current_change.with_element(element)
            self.paint()

        elif action == ControllerAction.FILL:
            self._current_change = Change(
                action=action,
                elements=pvector([self._current_element.get_value().at(loc)]),
                origin=self._frame.origin,
                dimensions=self._frame.dimensions,
            )
            self.paint()

        elif action == ControllerAction.SHIFT:
            self._add_shift_location(loc)

    def _add_shift_location(self, loc: Position) -> None:
        marker = Element().at(loc)
        if self._current_change is None:
            # Anchor and terminator start together: a zero shift.
            self._current_change = make_change(
                ControllerAction.SHIFT, [marker, marker], self._frame.origin
            )
            return

        terminator = self._current_change.elements[1]
        offset = loc - terminator.position
        if offset == ORIGIN:
            return
        self._current_change = replace(
            self._current_change, elements=self._current_change.elements.set(1, marker)
        )
        self._model.shift_elements(offset)
        self.paint()

    def commit_current_change(self) -> None:
        """Commit the in-progress change, if any.

        A ``SHIFT`` was already applied sample by sample, so it is only
        recorded here.
        """
        if self._current_change is None:
            return
        self._commit_changes(
            (self._current_change,), preserve_redo=False, apply_shifts=False
        )
        self._current_change = None

    def commit_changes(self, changes: Iterable[Change], preserve_redo: bool = False) -> None:
        """Commit an explicit change-list as one undo entry."""
        self._commit_changes(tuple(changes), preserve_redo=preserve_redo)
        self.paint()

    def _commit_changes(
        self,
        changes: ChangeList,
        preserve_redo: bool = False,
        apply_shifts: bool = True,
    ) -> None:
        model_changes = self._preprocess_changes(changes, process_shifts=apply_shifts)
        self._model.apply_changes(model_changes)
        if not preserve_redo:
            self._redo_stack = []
        self._undo_stack.append(changes)
        logger.debug(
            "Committed %s (undo=%d, redo=%d)",
            [c.action.value for c in changes],
            len(self._undo_stack),
            len(self._redo_stack),
        )

    # -------- Translation --------

    def _preprocess_changes(
        self, changes: Sequence[Change], process_shifts: bool = False
    ) -> List[Change]:
        """Translate controller changes into model changes.

        ``FILL`` becomes a ``SET`` of the filled cells, computed against the
        model as it stands after the preceding changes of the same list.
        ``SHIFT`` is applied to the model directly when ``process_shifts``;
        ``ZOOM`` moves the frame. Neither is returned.

        Raises:
            ValueError: For any action the builder does not know.
        """
        memo: List[Change] = []
        for change in changes:
            action: Action = change.action
            if action == ControllerAction.SET:
                memo.append(replace(change, action=ModelAction.SET))
            elif action == ControllerAction.CLEAR:
                memo.append(replace(change, action=ModelAction.CLEAR))
            elif action == ControllerAction.CLEAR_ALL:
                memo.append(replace(change, action=ModelAction.CLEAR_ALL))
            elif action == ControllerAction.FILL:
                memo.append(self._fill_change(change, memo))
            elif action == ControllerAction.SHIFT:
                if process_shifts:
                    anchor, terminator = change.elements[0], change.elements[1]
                    self._model.shift_elements(terminator.position - anchor.position)
            elif action == ControllerAction.ZOOM:
                self._apply_zoom(change)
            else:
                raise ValueError(f"Bad controller action, cannot process change: {action!r}")
        return memo

    def _fill_change(self, change: Change, preceding: Sequence[Change]) -> Change:
        frame = Frame(change.dimensions or self._frame.dimensions, change.origin)
        elements = self._model.get_elements(frame, preceding)
        filled = fill_area(elements, change.elements[0], frame.dimensions)
        return make_change(ModelAction.SET, filled, change.origin)

    def _apply_zoom(self, change: Change) -> None:
        dimensions = change.dimensions or self._dimensions.get_value()
        self._frame = Frame(dimensions, change.origin)
        self._canvas.resize(dimensions)
        self._zoomed.set_value(change.zoomed)

    # -------- History --------

    def has_undos(self) -> bool:
        return len(self._undo_stack) > 0

    def has_redos(self) -> bool:
        return len(self._redo_stack) > 0

    def undo(self) -> None:
        """Drop the latest commit by replaying every earlier one from scratch."""
        if not self._undo_stack:
            return
        self._redo_stack.append(self._undo_stack.pop())
        self._current_change = None

        # The default state has no zoom; replayed ZOOM changes restore it.
        self._frame = Frame(self._dimensions.get_value())
        self._canvas.resize(self._frame.dimensions)
        self._zoomed.set_value(False)

        self._model.apply_changes([Change(action=ModelAction.CLEAR_ALL)])
        for changes in self._undo_stack:
            self._model.apply_changes(
                self._preprocess_changes(changes, process_shifts=True)
            )
        logger.debug(
            "Undo (undo=%d, redo=%d)", len(self._undo_stack), len(self._redo_stack)
        )

        self._canvas.clear(True)
        self.paint()

    def redo(self) -> None:
        """Re-commit the latest undone change-list, keeping the rest of the redo stack."""
        if not self._redo_stack:
            return
        changes = self._redo_stack.pop()
        self._commit_changes(changes, preserve_redo=True)
        self._canvas.clear(True)
        self.paint()

    # -------- Whole-model edits --------

    def clear(self) -> None:
        """Remove every element from the model (undoable)."""
        self._commit_changes((Change(action=ControllerAction.CLEAR_ALL),))
        self.paint()

    def zoom_in(self, origin: Position, dimensions: Dimensions) -> None:
        """Narrow the frame to ``origin``/``dimensions`` (undoable)."""
        self._commit_changes(
            (
                Change(
                    action=ControllerAction.ZOOM,
                    origin=origin,
                    dimensions=dimensions,
                    zoomed=True,
                ),
            )
        )
        self.paint()

    def zoom_out(self) -> None:
        """Restore the full configured frame at the absolute origin (undoable)."""
        self._commit_changes(
            (
                Change(
                    action=ControllerAction.ZOOM,
                    origin=ORIGIN,
                    dimensions=self._dimensions.get_value(),
                    zoomed=False,
                ),
            )
        )
        self.paint()

    # -------- Rendering --------

    def get_model_elements(self) -> List[Element]:
        """Elements visible in the frame, including the in-progress change."""
        changes = [self._current_change] if self._current_change else []
        return self._model.get_elements(self._frame, self._preprocess_changes(changes))

    def paint(self) -> None:
        for element in self.get_model_elements():
            self._canvas.set_pixel(element.x, element.y, element.color)
        self._canvas.paint()

    # -------- Import / export --------

    def export_model(self) -> str:
        """Serialize the visible frame to JSON (through the converter).

        The frame's dimensions are exported, which differ from the configured
        dimensions while zoomed.
        """
        elements = sorted(self._model.get_elements(self._frame), key=lambda e: (e.y, e.x))
        document = {
            "defaultElement": self._default_element.get_value().attributes(),
            "currentElement": self._current_element.get_value().attributes(),
            "dimensions": self._frame.dimensions.to_dict(),
            "elements": [e.to_dict() for e in elements],
        }
        return json.dumps(self._converter.from_common_model_format(document))

    def import_model(self, text: str) -> None:
        """Load a document produced by :meth:`export_model`.

        Invalid ``defaultElement``, ``currentElement`` or ``dimensions`` keep
        their previous values. The elements replace the model in a single
        undoable commit.
        """
        try:
            raw = json.loads(text)
        except json.JSONDecodeError as exc:
            logger.warning("Ignoring model import, invalid JSON: %s", exc)
            return

        document = self._converter.to_common_model_format(raw)
        if document is None:
            logger.warning("Ignoring model import, converter rejected the document")
            return

        self._default_element.set_value(document.get("defaultElement"))
        self._current_element.set_value(document.get("currentElement"))
        self._dimensions.set_value(document.get("dimensions"))

        elements = parse_elements(document.get("elements") or [])
        self._commit_changes(
            (
                Change(action=ControllerAction.CLEAR_ALL),
                make_change(ControllerAction.SET, elements),
            )
        )

        # Drop anything painted before the import.
        self._canvas.clear(True)
        self.paint()

    # -------- Value handlers --------

    def _on_dimension_change(self, dimensions: Dimensions) -> None:
        self._frame = Frame(dimensions)
        self._zoomed.set_value(False)
        self._canvas.resize(dimensions)
        self._canvas.clear(True)
        self.paint()

    def _on_default_element_change(self, element: Element) -> None:
        self._canvas.set_background_color(element.color)
        self.paint()


def is_integral(value: Any) -> bool:
    """True for ints and whole floats; bools are not coordinates."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and value.is_integer()


def parse_elements(items: Iterable[Any]) -> List[Element]:
    """Parse imported element dicts, skipping malformed entries.

    A ``None`` color is kept (unpainted element).
    """
    elements: List[Element] = []
    for item in items:
        if not isinstance(item, dict) or "x" not in item or "y" not in item:
            logger.warning("Skipping malformed element %r", item)
            continue
        if not (is_integral(item["x"]) and is_integral(item["y"])):
            logger.warning("Skipping element with bad coordinates %r", item)
            continue
        element = Element.from_dict(item)
        color = element.color
        if color is not None:
            color = sanitize(color)
            if color is None:
                logger.warning("Skipping element with bad color %r", item)
                continue
        elements.append(replace(element, color=color))
    return elements
