# tests/integration/test_import_export_integration.py

import json
import logging
from typing import Any, Dict, List, Optional

import pytest

from pixel_grid.config import EditorConfig, build_editor
from pixel_grid.frame import Dimensions, Position
from pixel_grid.types import Element
from tests.test_utils import BLACK, RED, WHITE, make_editor, make_edits, visible


class RecordingConverter:
    """Identity converter that remembers what it was given."""

    def __init__(self) -> None:
        self.exported: List[Dict[str, Any]] = []
        self.imported: List[Any] = []

    def to_common_model_format(self, document: Any) -> Optional[Dict[str, Any]]:
        self.imported.append(document)
        return document if isinstance(document, dict) else None

    def from_common_model_format(self, document: Dict[str, Any]) -> Any:
        self.exported.append(document)
        return {"format": "recorded", **document}


def test_export_runs_through_converter() -> None:
    converter = RecordingConverter()
    editor = build_editor(
        EditorConfig(dimensions=Dimensions(3, 3), default_color=WHITE, current_color=BLACK, converter=converter)
    )
    make_edits(editor)

    exported = json.loads(editor.builder.export_model())

    assert len(converter.exported) == 1
    assert exported["format"] == "recorded"
    assert exported["defaultElement"] == {"color": WHITE}
    assert exported["currentElement"] == {"color": RED}
    assert exported["dimensions"] == {"width": 3, "height": 3}
    assert exported["elements"] == [
        {"x": 0, "y": 0, "color": RED},
        {"x": 1, "y": 0, "color": BLACK},
        {"x": 0, "y": 1, "color": BLACK},
    ]


def test_export_uses_visible_frame_when_zoomed() -> None:
    editor = make_editor()
    make_edits(editor)
    editor.builder.zoom_in(Position(0, 0), Dimensions(2, 1))

    exported = json.loads(editor.builder.export_model())

    assert exported["dimensions"] == {"width": 2, "height": 1}
    assert editor.dimensions.get_value() == Dimensions(3, 3)
    assert {(e["x"], e["y"]) for e in exported["elements"]} == {(0, 0), (1, 0)}


def test_import_replaces_model_and_values() -> None:
    editor = make_editor()
    make_edits(editor)
    document = {
        "defaultElement": {"color": "#777777"},
        "currentElement": {"color": "#AAAAAA"},
        "dimensions": {"width": 10, "height": 10},
        "elements": [
            {"x": 0, "y": 0, "color": "#FFFFFF"},
            {"x": 5, "y": 5, "color": "#00FF00"},
            {"x": 9, "y": 9, "color": "#0000FF"},
        ],
    }

    editor.builder.import_model(json.dumps(document))

    assert visible(editor) == {(0, 0, "#FFFFFF"), (5, 5, "#00FF00"), (9, 9, "#0000FF")}
    assert editor.default_element.get_value() == Element(color="#777777")
    assert editor.current_element.get_value() == Element(color="#AAAAAA")
    assert editor.dimensions.get_value() == Dimensions(10, 10)
    assert editor.builder.dimensions == Dimensions(10, 10)
    assert editor.canvas.get_pixel(5, 5) == "#00FF00"
    assert editor.canvas.get_pixel(1, 1) == "#777777"


def test_import_keeps_previous_values_for_bad_fields(caplog: pytest.LogCaptureFixture) -> None:
    editor = make_editor()
    document = {
        "defaultElement": None,
        "currentElement": {"color": "#this is not a color"},
        "dimensions": {"width": None, "height": "hi!"},
        "elements": [
            {"x": 0, "y": 0, "color": "#FFFFFF"},
            {"x": 1, "y": 1, "color": "#00FF00"},
            {"x": 2, "y": 2, "color": "#0000FF"},
        ],
    }

    with caplog.at_level(logging.WARNING):
        editor.builder.import_model(json.dumps(document))

    assert visible(editor) == {(0, 0, "#FFFFFF"), (1, 1, "#00FF00"), (2, 2, "#0000FF")}
    assert editor.default_element.get_value() == Element(color=WHITE)
    assert editor.current_element.get_value() == Element(color=BLACK)
    assert editor.dimensions.get_value() == Dimensions(3, 3)
    assert caplog.text.count("Rejected value") == 3


def test_import_skips_malformed_elements(caplog: pytest.LogCaptureFixture) -> None:
    editor = make_editor()
    document = {
        "elements": [
            {"x": "left", "y": 0, "color": RED},
            "not an element",
            {"y": 1, "color": RED},
            {"x": 1, "y": 1, "color": "nope"},
            {"x": 1.5, "y": 0, "color": RED},
            {"x": True, "y": 0, "color": RED},
            {"x": 2, "y": 2, "color": "#00ff00"},
        ],
    }

    with caplog.at_level(logging.WARNING, logger="pixel_grid.builder"):
        editor.builder.import_model(json.dumps(document))

    assert visible(editor) == {(2, 2, "#00FF00")}
    assert caplog.text.count("Skipping") == 6


@pytest.mark.parametrize("text", ["[1, 2, 3]", "{not json", '"just a string"'])
def test_import_rejects_non_documents(text: str, caplog: pytest.LogCaptureFixture) -> None:
    editor = make_editor()
    make_edits(editor)
    before = visible(editor)

    with caplog.at_level(logging.WARNING, logger="pixel_grid.builder"):
        editor.builder.import_model(text)

    assert visible(editor) == before
    assert "Ignoring model import" in caplog.text
    assert not editor.builder.has_redos()


def test_import_is_a_single_undo_entry() -> None:
    editor = make_editor()
    make_edits(editor)
    before = visible(editor)
    editor.builder.import_model(json.dumps({"elements": [{"x": 2, "y": 2, "color": RED}]}))
    assert visible(editor) == {(2, 2, RED)}

    editor.builder.undo()
    assert visible(editor) == before


def test_exported_document_imports_into_fresh_editor() -> None:
    source = make_editor()
    make_edits(source)
    text = source.builder.export_model()

    target = make_editor(5, 5)
    target.builder.import_model(text)

    assert target.dimensions.get_value() == Dimensions(3, 3)
    assert visible(target) == visible(source)
    assert target.current_element.get_value() == source.current_element.get_value()


def test_import_keeps_no_color_default_and_elements() -> None:
    editor = make_editor()
    document = {
        "defaultElement": {"color": None},
        "elements": [
            {"x": 0, "y": 0, "color": None},
            {"x": 1.0, "y": 1, "color": RED},
        ],
    }

    editor.builder.import_model(json.dumps(document))

    assert editor.default_element.get_value() == Element()
    assert editor.canvas.background_color is None
    assert visible(editor) == {(0, 0, None), (1, 1, RED)}
    assert editor.canvas.get_pixel(2, 2) is None


def test_import_while_zoomed_resets_zoom() -> None:
    editor = make_editor(5, 5)
    editor.builder.zoom_in(Position(1, 1), Dimensions(2, 2))

    editor.builder.import_model(json.dumps({"dimensions": {"width": 5, "height": 5}, "elements": []}))

    assert editor.builder.frame.dimensions == Dimensions(5, 5)
    assert editor.builder.origin == Position(0, 0)
    assert editor.zoomed.get_value() is False
