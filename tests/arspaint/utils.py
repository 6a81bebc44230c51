from typing import Optional, Sequence

import numpy as np

from arspaint.api.document import Document
from arspaint.api.layers import Color, Layer, Point, get_buffer
from arspaint.constants import BLACK
from arspaint.history import Command
from arspaint.tools import Tool, ToolInput, ToolSettings


def stroke(
    tool: Tool,
    document: Document,
    points: Sequence[Point],
    settings: Optional[ToolSettings] = None,
    color: Color = BLACK,
) -> Optional[Command]:
    """Send one pressed sample per point, then a release."""
    settings = settings or ToolSettings()
    for point in points:
        assert tool.update(document, settings, ToolInput(point, pressed=True), color) is None
    return tool.update(document, settings, ToolInput(points[-1], released=True), color)


def pixel(document: Document, x: int, y: int) -> tuple[int, ...]:
    return tuple(int(v) for v in document.composite()[y, x])


def layer_pixel(layer: Layer, x: int, y: int) -> tuple[int, ...]:
    return tuple(int(v) for v in get_buffer(layer)[y, x])


def random_buffer(
    rng: np.random.Generator, width: int, height: int, opaque: bool = False
) -> np.ndarray:
    buffer = rng.integers(0, 256, size=(height, width, 4), dtype=np.uint8)
    if opaque:
        buffer[:, :, 3] = 255
    return buffer
