import logging

import numpy as np
import pytest
from PIL import Image

from arspaint import Editor
from arspaint.api.selection import rect_mask
from arspaint.constants import BLACK, DEFAULT_PALETTE, WHITE, ToolKind
from arspaint.tools import BrushTool, RectangleTool, ToolInput, TransformTool

from .utils import pixel

logger = logging.getLogger(__name__)


def _drag(editor, points, secondary=False):
    for point in points:
        editor.dispatch(ToolInput(point, pressed=True), secondary)
    return editor.dispatch(ToolInput(points[-1], released=True), secondary)


@pytest.fixture
def editor():
    return Editor(100, 100)


def test_defaults(editor):
    assert editor.document.size == (100, 100)
    assert editor.primary_color == BLACK
    assert editor.secondary_color == WHITE
    assert editor.palette == list(DEFAULT_PALETTE)
    assert isinstance(editor.tool, BrushTool)
    assert repr(editor)


def test_dispatch_pushes_command(editor):
    command = _drag(editor, [(10, 10), (20, 20)])
    assert command is not None
    assert editor.history.can_undo()
    assert editor.history.undo_name() == "Brush Stroke"
    assert pixel(editor.document, 15, 15) == BLACK


def test_dispatch_secondary_color(editor):
    editor.set_color((255, 0, 0, 255), secondary=True)
    _drag(editor, [(10, 10)], secondary=True)
    assert pixel(editor.document, 10, 10) == (255, 0, 0, 255)


def test_undo_redo(editor):
    _drag(editor, [(10, 10)])
    editor.undo()
    assert pixel(editor.document, 10, 10) == WHITE
    editor.redo()
    assert pixel(editor.document, 10, 10) == BLACK


def test_select_tool_abandons_gesture(editor):
    editor.dispatch(ToolInput((10, 10), pressed=True))
    tool = editor.select_tool("rectangle")
    assert isinstance(tool, RectangleTool)
    assert editor.tool_kind == ToolKind.RECTANGLE
    assert not editor.history.can_undo()
    assert pixel(editor.document, 10, 10) == WHITE


def test_select_tool_unknown(editor):
    with pytest.raises(ValueError):
        editor.select_tool("smudge")
    assert isinstance(editor.tool, BrushTool)


def test_select_tool_puts_floating_back(editor):
    editor.new_layer()
    editor.document.active_buffer()[20:30, 20:30] = (0, 255, 0, 255)
    original = editor.document.active_buffer().copy()
    editor.document.set_selection(rect_mask(100, 100, (20, 20, 30, 30)))
    editor.select_tool("transform")
    _drag(editor, [(25, 25), (60, 60)])
    editor.select_tool("brush")
    assert np.array_equal(editor.document.active_buffer(), original)


def test_confirm_transform(editor):
    editor.document.active_buffer()[20:50, 20:50] = BLACK
    editor.document.set_selection(rect_mask(100, 100, (20, 20, 50, 50)))
    editor.select_tool(ToolKind.TRANSFORM)
    _drag(editor, [(35, 35), (75, 35)])
    command = editor.confirm_transform()
    assert command.name == "Transform"
    assert isinstance(editor.tool, TransformTool)
    assert pixel(editor.document, 65, 25) == BLACK
    assert pixel(editor.document, 25, 25) == (0, 0, 0, 0)
    editor.undo()
    assert pixel(editor.document, 25, 25) == BLACK
    assert pixel(editor.document, 65, 25) == WHITE


def test_confirm_transform_other_tool(editor):
    assert editor.confirm_transform() is None


def test_deselect(editor):
    editor.select_tool("rect_selection")
    _drag(editor, [(0, 0), (10, 10)])
    assert editor.document.selection is not None
    editor.deselect()
    assert editor.document.selection is None


def test_open(editor, tmp_path):
    _drag(editor, [(10, 10)])
    path = tmp_path / "photo.png"
    Image.new("RGB", (30, 20), (1, 2, 3)).save(path)
    editor.open(path)
    assert editor.document.size == (30, 20)
    assert not editor.history.can_undo()
    assert editor.tool.layer.shape == (20, 30, 4)


def test_open_failure_keeps_session(editor, tmp_path):
    _drag(editor, [(10, 10)])
    document = editor.document
    with pytest.raises(OSError):
        editor.open(tmp_path / "missing.png")
    assert editor.document is document
    assert editor.history.can_undo()


def test_save(editor, tmp_path):
    _drag(editor, [(10, 10)])
    path = tmp_path / "out.png"
    editor.save(path)
    with Image.open(path) as image:
        assert image.getpixel((10, 10)) == BLACK
        assert image.getpixel((90, 90)) == WHITE


def test_save_failure(editor, tmp_path):
    with pytest.raises(OSError):
        editor.save(tmp_path / "missing" / "out.png")


def test_new_layer(editor):
    assert editor.new_layer() == 1
    assert editor.document[1].name == "Layer 2"
    assert editor.new_layer("Ink") == 2
    assert editor.document.active_layer == 2


def test_resize(editor):
    editor.resize(40, 30)
    assert editor.document.size == (40, 30)
    _drag(editor, [(35, 25)])
    assert editor.tool.layer.shape == (30, 40, 4)


def test_colors(editor):
    editor.swap_colors()
    assert editor.primary_color == WHITE
    with pytest.raises(ValueError):
        editor.set_color((0, 0, 300, 255))
    with pytest.raises(ValueError):
        editor.set_color((0, 0, 0))


def test_palette(editor):
    editor.set_color((1, 2, 3, 255))
    editor.add_to_palette()
    assert editor.palette[-1] == (1, 2, 3, 255)
    editor.add_to_palette((4, 5, 6, 7))
    assert editor.palette[-1] == (4, 5, 6, 7)
    editor.pick_from_palette(2, secondary=True)
    assert editor.secondary_color == DEFAULT_PALETTE[2]
    editor.replace_palette_entry(0)
    assert editor.palette[0] == (1, 2, 3, 255)


def test_configure(editor):
    editor.configure(brush_size=12.0)
    assert editor.settings.brush_size == 12.0


def test_preview(editor):
    composite, temp, overlay = editor.preview()
    assert composite.shape == (100, 100, 4)
    assert temp is None and overlay is None
    editor.dispatch(ToolInput((10, 10), pressed=True))
    editor.document.set_selection(rect_mask(100, 100, (0, 0, 5, 5)))
    composite, temp, overlay = editor.preview()
    assert temp is not None
    assert overlay.shape == (100, 100, 4)


def test_mixed_gestures_round_trip(editor):
    gestures = [
        (ToolKind.BRUSH, [(10, 10), (60, 40), (90, 15)]),
        (ToolKind.RECTANGLE, [(20, 5), (70, 55)]),
        (ToolKind.ERASER, [(15, 12), (65, 45)]),
        (ToolKind.ELLIPSE, [(30, 20), (85, 80)]),
        (ToolKind.LINE, [(5, 90), (95, 10)]),
        (ToolKind.BRUSH, [(50, 50), (52, 70)]),
        (ToolKind.ERASER, [(40, 30), (40, 80)]),
    ]
    editor.configure(brush_size=4.0, line_width=3.0)
    editor.set_color((200, 30, 30, 255))
    initial = editor.document.active_buffer().copy()
    for kind, points in gestures:
        editor.select_tool(kind)
        assert _drag(editor, points) is not None
    final = editor.document.active_buffer().copy()
    assert not np.array_equal(initial, final)
    assert len(editor.history) == len(gestures)

    for _ in gestures:
        editor.undo()
    assert np.array_equal(editor.document.active_buffer(), initial)
    assert not editor.history.can_undo()

    for _ in gestures:
        editor.redo()
    assert np.array_equal(editor.document.active_buffer(), final)
    assert not editor.history.can_redo()
