"""
Rubber-band shape tools.

The shape is anchored at the first pressed sample. Every later pressed
sample wipes the previous preview from the scratch buffer and redraws the
whole outline, stamping discs of radius ``line_width`` at 1px steps.
"""

import logging
from typing import Iterator, Optional

from arspaint.api.document import Document
from arspaint.api.layers import Color, Point
from arspaint.constants import WHITE, CursorKind, GestureState
from arspaint.history import Command
from arspaint.tools import paint
from arspaint.tools.base import CursorHint, StrokeTool, ToolInput, ToolSettings

logger = logging.getLogger(__name__)


class ShapeTool(StrokeTool):
    """Base class of the two-point shape tools."""

    def __init__(self, width: int = 0, height: int = 0) -> None:
        super().__init__(width, height)
        self.start: Optional[Point] = None
        self.current: Optional[Point] = None

    def outline(self, start: Point, end: Point) -> Iterator[Point]:
        """Stamp centers of the outline between two corner points."""
        raise NotImplementedError

    def _reset(self) -> None:
        super()._reset()
        self.start = None
        self.current = None

    def _redraw(self, color: Color, size: float) -> None:
        self._clear_preview()
        for position in self.outline(self.start, self.current):
            self._stamp(position, color, size)

    def update(
        self,
        document: Document,
        settings: ToolSettings,
        event: ToolInput,
        color: Color,
    ) -> Optional[Command]:
        self._ensure_scratch(document)
        if event.pressed:
            if self.start is None:
                self.start = event.position
            if event.position is not None:
                self.current = event.position
                if self.start is not None:
                    self._redraw(color, settings.line_width)
                    self.state = GestureState.DRAWING

        if event.released:
            if self.start is None or self.current is None:
                self._clear_preview()
                self._reset()
                return None
            return self.commit(document)
        return None


class LineTool(ShapeTool):
    name = "Line"
    command_name = "Line"

    def outline(self, start: Point, end: Point) -> Iterator[Point]:
        return paint.segment_points(start, end)

    def draw_cursor(self, settings: ToolSettings, position: Point) -> CursorHint:
        return CursorHint(CursorKind.DOT, (position,), settings.line_width, WHITE)


class RectangleTool(ShapeTool):
    """Axis-aligned rectangle outline spanned by the two points."""

    name = "Rectangle"
    command_name = "Rectangle"

    def outline(self, start: Point, end: Point) -> Iterator[Point]:
        left, right = min(start[0], end[0]), max(start[0], end[0])
        top, bottom = min(start[1], end[1]), max(start[1], end[1])
        corners = [(left, top), (right, top), (right, bottom), (left, bottom)]
        for index, corner in enumerate(corners):
            yield from paint.segment_points(corner, corners[(index + 1) % 4])

    def draw_cursor(self, settings: ToolSettings, position: Point) -> CursorHint:
        return CursorHint(CursorKind.CIRCLE, (position,), settings.line_width, WHITE)


class EllipseTool(ShapeTool):
    """Ellipse outline inscribed in the box spanned by the two points."""

    name = "Ellipse"
    command_name = "Ellipse"

    def outline(self, start: Point, end: Point) -> Iterator[Point]:
        return paint.ellipse_points(start, end)

    def draw_cursor(self, settings: ToolSettings, position: Point) -> CursorHint:
        return CursorHint(CursorKind.DOT, (position,), 2.0, WHITE)
