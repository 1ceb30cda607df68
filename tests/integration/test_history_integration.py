# tests/integration/test_history_integration.py

import pytest

from pixel_grid.frame import Dimensions, Frame, Position
from pixel_grid.types import ControllerAction, Element
from tests.test_utils import BLACK, RED, make_editor, make_edits, stroke, visible


def test_undo_and_redo_on_empty_stacks_do_nothing() -> None:
    editor = make_editor()
    assert not editor.builder.has_undos()
    assert not editor.builder.has_redos()
    editor.builder.undo()
    editor.builder.redo()
    assert visible(editor) == set()


def test_undo_drops_last_commit() -> None:
    editor = make_editor()
    make_edits(editor)
    editor.builder.undo()
    assert visible(editor) == {(0, 0, RED), (0, 1, BLACK), (1, 0, BLACK), (1, 1, BLACK)}


def test_redo_replays_in_order_including_shift() -> None:
    editor = make_editor()
    builder = editor.builder
    make_edits(editor)
    assert not builder.has_redos()

    stroke(builder, ControllerAction.SHIFT, (0, 0), (1, 1))
    for _ in range(3):
        builder.undo()
    assert builder.has_redos()

    expected = {(0, 0, RED), (0, 1, BLACK), (1, 0, BLACK), (1, 1, BLACK)}
    builder.redo()
    assert visible(editor) == expected

    expected.discard((1, 1, BLACK))
    builder.redo()
    assert visible(editor) == expected

    builder.redo()
    assert not builder.has_redos()
    assert visible(editor) == {(x + 1, y + 1, color) for x, y, color in expected}


def test_undo_all_then_redo_all_restores_state() -> None:
    editor = make_editor()
    builder = editor.builder
    make_edits(editor)
    stroke(builder, ControllerAction.SHIFT, (1, 1), (0, 1))
    editor.current_element.set_value(Element(color=RED))
    stroke(builder, ControllerAction.FILL, (2, 2))
    final = visible(editor)

    while builder.has_undos():
        builder.undo()
    assert visible(editor) == set()

    while builder.has_redos():
        builder.redo()
    assert visible(editor) == final


def test_new_commit_clears_redo_stack() -> None:
    editor = make_editor()
    make_edits(editor)
    editor.builder.undo()
    assert editor.builder.has_redos()

    stroke(editor.builder, ControllerAction.SET, (2, 2))
    assert not editor.builder.has_redos()


def test_undo_discards_gesture_in_progress() -> None:
    editor = make_editor()
    make_edits(editor)
    stroke(editor.builder, ControllerAction.SET, (2, 2), commit=False)

    editor.builder.undo()

    assert editor.builder.current_change is None
    assert (2, 2, RED) not in {(e.x, e.y, e.color) for e in editor.builder.get_model_elements()}


def test_zoom_in_moves_frame_only() -> None:
    editor = make_editor()
    editor.builder.zoom_in(Position(1, 2), Dimensions(2, 1))

    assert editor.builder.origin == Position(1, 2)
    assert editor.builder.dimensions == Dimensions(2, 1)
    assert editor.canvas.dimensions == Dimensions(2, 1)
    assert editor.dimensions.get_value() == Dimensions(3, 3)
    assert editor.zoomed.get_value() is True


def test_zoom_in_is_undoable() -> None:
    editor = make_editor()
    editor.builder.zoom_in(Position(1, 2), Dimensions(2, 1))
    editor.builder.undo()

    assert editor.builder.origin == Position(0, 0)
    assert editor.builder.dimensions == Dimensions(3, 3)
    assert editor.canvas.dimensions == Dimensions(3, 3)
    assert editor.zoomed.get_value() is False


def test_zoom_out_restores_configured_frame() -> None:
    editor = make_editor()
    editor.builder.zoom_in(Position(1, 2), Dimensions(2, 1))
    editor.builder.zoom_out()

    assert editor.builder.origin == Position(0, 0)
    assert editor.builder.dimensions == Dimensions(3, 3)
    assert editor.canvas.dimensions == Dimensions(3, 3)
    assert editor.zoomed.get_value() is False


def test_zoom_out_is_undoable() -> None:
    editor = make_editor()
    editor.builder.zoom_in(Position(1, 2), Dimensions(2, 1))
    editor.builder.zoom_out()
    editor.builder.undo()

    assert editor.builder.origin == Position(1, 2)
    assert editor.builder.dimensions == Dimensions(2, 1)
    assert editor.canvas.dimensions == Dimensions(2, 1)
    assert editor.zoomed.get_value() is True


def test_edits_while_zoomed_land_at_absolute_positions() -> None:
    editor = make_editor(5, 5)
    editor.builder.zoom_in(Position(2, 2), Dimensions(2, 2))
    stroke(editor.builder, ControllerAction.SET, (0, 0), (1, 1))

    assert editor.model.get_element(Position(2, 2)) == Element(2, 2, BLACK)
    assert editor.model.get_element(Position(3, 3)) == Element(3, 3, BLACK)

    editor.builder.zoom_out()
    assert visible(editor) == {(2, 2, BLACK), (3, 3, BLACK)}


def test_fill_while_zoomed_is_bounded_by_zoomed_frame() -> None:
    editor = make_editor(5, 5)
    editor.builder.zoom_in(Position(1, 1), Dimensions(2, 2))
    stroke(editor.builder, ControllerAction.FILL, (0, 0))
    editor.builder.zoom_out()

    assert {(x, y) for x, y, _ in visible(editor)} == {(1, 1), (2, 1), (1, 2), (2, 2)}

    # Replaying the history reproduces the same fill.
    editor.builder.undo()
    editor.builder.redo()
    assert {(x, y) for x, y, _ in visible(editor)} == {(1, 1), (2, 1), (1, 2), (2, 2)}


@pytest.mark.parametrize("k", [1, 2, 3])
def test_undo_then_redo_restores_frame_and_zoom(k: int) -> None:
    editor = make_editor(5, 5)
    builder = editor.builder
    stroke(builder, ControllerAction.SET, (0, 0))
    builder.zoom_in(Position(1, 1), Dimensions(3, 3))
    editor.current_element.set_value(Element(color=RED))
    stroke(builder, ControllerAction.SET, (1, 1))

    def snapshot() -> tuple:
        return visible(editor), builder.frame, editor.zoomed.get_value()

    before = snapshot()
    assert before[1] == Frame(Dimensions(3, 3), Position(1, 1))
    assert before[2] is True

    for _ in range(k):
        builder.undo()
    for _ in range(k):
        builder.redo()

    assert snapshot() == before
    assert editor.canvas.dimensions == Dimensions(3, 3)
    assert not builder.has_redos()
