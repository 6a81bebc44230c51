import logging

import numpy as np
import pytest

from arspaint.api.document import Document
from arspaint.api.layers import Layer, get_buffer
from arspaint.constants import BLACK, RED, WHITE, CursorKind, GestureState
from arspaint.history import CommandStack, PatchCommand
from arspaint.tools import BrushTool, EraserTool, ToolInput, ToolSettings
from arspaint.tools.paint import draw_circle, draw_texture, segment_points

from ..utils import layer_pixel, pixel, stroke

logger = logging.getLogger(__name__)

TRANSPARENT = (0, 0, 0, 0)


def test_segment_points():
    points = list(segment_points((0, 0), (10, 0)))
    assert len(points) == 11
    assert points[0] == (0, 0) and points[-1] == (10, 0)
    assert list(segment_points((3, 3), (3, 3))) == [(3, 3), (3, 3)]
    assert len(list(segment_points((0, 0), (10, 0), step=5.0))) == 3


def test_draw_circle():
    layer = np.zeros((20, 20, 4), dtype=np.uint8)
    assert draw_circle(layer, (10.7, 10.2), BLACK, 2.9) == (8, 8, 13, 13)
    assert tuple(layer[10, 12]) == BLACK
    assert tuple(layer[8, 8]) == TRANSPARENT
    assert np.count_nonzero(layer[:, :, 3]) == 13


def test_draw_circle_clamped():
    layer = np.zeros((20, 20, 4), dtype=np.uint8)
    assert draw_circle(layer, (0, 0), BLACK, 3) == (0, 0, 4, 4)
    assert draw_circle(layer, (-10, -10), BLACK, 3) is None


def test_draw_texture_keeps_max_alpha():
    layer = np.zeros((20, 20, 4), dtype=np.uint8)
    texture = np.zeros((2, 2, 4), dtype=np.uint8)
    texture[:, :, 3] = 255
    assert draw_texture(layer, texture, (10, 10), BLACK, 2.0) == (8, 8, 12, 12)
    assert np.all(layer[8:12, 8:12] == BLACK)
    assert not layer[12:, 12:].any()
    draw_texture(layer, texture, (10, 10), (255, 0, 0, 100), 2.0)
    assert np.all(layer[8:12, 8:12] == BLACK)


def test_scenario_a_brush_stroke_and_undo(document, settings):
    tool = BrushTool(100, 100)
    stack = CommandStack()
    command = stroke(tool, document, [(40, 40), (50, 50)], settings)
    assert command.name == "Brush Stroke"
    stack.push(command)
    assert pixel(document, 45, 45) == BLACK
    stack.undo(document)
    assert pixel(document, 45, 45) == WHITE


def test_brush_patch_is_clamped_dirty_rect(document, settings):
    tool = BrushTool(100, 100)
    command = stroke(tool, document, [(2, 2)], settings)
    assert isinstance(command, PatchCommand)
    assert (command.x, command.y) == (0, 0)
    assert command.bbox == (0, 0, 8, 8)
    assert command.before.shape == (8, 8, 4)


def test_brush_temp_layer(document, settings):
    tool = BrushTool(100, 100)
    assert tool.get_temp_layer() is None
    tool.update(document, settings, ToolInput((10, 10), pressed=True), BLACK)
    assert tool.state == GestureState.DRAWING
    temp = tool.get_temp_layer()
    assert temp.shape == (100, 100, 4)
    assert tuple(temp[10, 10]) == BLACK
    tool.update(document, settings, ToolInput((10, 10), released=True), BLACK)
    assert tool.get_temp_layer() is None
    assert not tool.layer.any()
    assert tool.state == GestureState.IDLE


def test_brush_stabilization(document):
    settings = ToolSettings(brush_size=1.0, brush_stabilization=0.5)
    tool = BrushTool(100, 100)
    stroke(tool, document, [(10, 50), (30, 50)], settings)
    # The second sample only reaches halfway.
    assert pixel(document, 20, 50) == BLACK
    assert pixel(document, 25, 50) == WHITE


def test_brush_without_stabilization(document):
    settings = ToolSettings(brush_size=1.0, brush_stabilization=0.0)
    stroke(BrushTool(100, 100), document, [(10, 50), (30, 50)], settings)
    assert pixel(document, 30, 50) == BLACK


def test_brush_texture(document, settings):
    tool = BrushTool(100, 100)
    texture = np.zeros((4, 4, 4), dtype=np.uint8)
    texture[:, :, 3] = 255
    tool.configure(settings, texture=texture, brush_size=3.0)
    assert settings.brush_size == 3.0
    command = stroke(tool, document, [(10, 10)], settings, RED)
    assert command.bbox == (7, 7, 13, 13)
    assert pixel(document, 7, 7) == RED


def test_brush_texture_invalid(settings):
    with pytest.raises(ValueError):
        BrushTool().configure(settings, texture=np.zeros((4, 4), dtype=np.uint8))


def test_configure_unknown_setting(settings):
    with pytest.raises(ValueError):
        BrushTool().configure(settings, hardness=1.0)


def test_settings_validated():
    with pytest.raises(ValueError):
        ToolSettings(brush_stabilization=1.5)
    settings = ToolSettings()
    with pytest.raises(ValueError):
        settings.eraser_size = 0.0


@pytest.mark.parametrize("stabilization", [0.99, 1.0])
def test_brush_stabilization_clamped(stabilization):
    expected = Document.new((100, 100))
    settings = ToolSettings(brush_size=1.0, brush_stabilization=0.95)
    stroke(BrushTool(100, 100), expected, [(10, 50), (30, 50)], settings)

    document = Document.new((100, 100))
    settings = ToolSettings(brush_size=1.0, brush_stabilization=stabilization)
    stroke(BrushTool(100, 100), document, [(10, 50), (30, 50)], settings)
    # Full weight would pin the stroke to its first sample.
    assert pixel(document, 11, 50) == BLACK
    assert pixel(document, 20, 50) == WHITE
    assert np.array_equal(document.composite(), expected.composite())


def test_brush_load_texture(tmp_path):
    from PIL import Image

    path = tmp_path / "tip.png"
    Image.new("LA", (3, 2), (0, 255)).save(path)
    tool = BrushTool()
    tool.load_texture(path)
    assert tool.texture.shape == (2, 3, 4)


def test_brush_alpha_lock(document, settings):
    index = document.add_layer(Layer.new_raster(100, 100, "Ink"))
    get_buffer(document[index])[20:25, 20:25] = (255, 0, 0, 200)
    document.set_alpha_locked(index, True)
    stroke(BrushTool(100, 100), document, [(22, 22)], settings)
    assert layer_pixel(document[index], 21, 21) == (0, 0, 0, 200)
    assert layer_pixel(document[index], 26, 22) == TRANSPARENT


def test_brush_on_vector_layer(document, settings):
    document.add_layer(Layer.new_vector("Shapes"))
    tool = BrushTool(100, 100)
    assert stroke(tool, document, [(10, 10), (20, 20)], settings) is None
    assert tool.get_temp_layer() is None
    assert not tool.layer.any()
    assert pixel(document, 10, 10) == WHITE


def test_brush_offcanvas_stroke(document, settings):
    tool = BrushTool(100, 100)
    assert stroke(tool, document, [(-50, -50), (-40, -60)], settings) is None


def test_brush_release_without_press(document, settings):
    tool = BrushTool(100, 100)
    assert tool.update(document, settings, ToolInput(None, released=True), BLACK) is None


def test_brush_scratch_follows_canvas_size(document, settings):
    tool = BrushTool(100, 100)
    tool.update(document, settings, ToolInput((10, 10), pressed=True), BLACK)
    document.resize(50, 40)
    command = stroke(tool, document, [(30, 30)], settings)
    assert tool.layer.shape == (40, 50, 4)
    assert command.bbox == (25, 25, 36, 36)
    assert pixel(document, 10, 10) == WHITE


def test_brush_abandon(document, settings):
    tool = BrushTool(100, 100)
    tool.update(document, settings, ToolInput((10, 10), pressed=True), BLACK)
    tool.abandon(document)
    assert tool.get_temp_layer() is None
    assert not tool.layer.any()
    assert pixel(document, 10, 10) == WHITE


def test_brush_cursor(settings):
    hint = BrushTool().draw_cursor(settings, (3, 4))
    assert hint.kind == CursorKind.CIRCLE
    assert hint.radius == settings.brush_size
    assert hint.points == ((3, 4),)


def test_eraser(document, settings):
    tool = EraserTool(100, 100)
    command = stroke(tool, document, [(50, 50), (60, 50)], settings)
    assert command.name == "Erase"
    assert pixel(document, 55, 50) == TRANSPARENT
    assert pixel(document, 50, 70) == WHITE
    command.undo(document)
    document.mark_dirty()
    assert pixel(document, 55, 50) == WHITE


def test_eraser_ignores_alpha_lock(document, settings):
    document.set_alpha_locked(0, True)
    stroke(EraserTool(100, 100), document, [(50, 50)], settings)
    assert pixel(document, 50, 50) == TRANSPARENT


def test_eraser_cursor(settings):
    hint = EraserTool().draw_cursor(settings, (0, 0))
    assert hint.radius == settings.eraser_size
    assert hint.color == RED
