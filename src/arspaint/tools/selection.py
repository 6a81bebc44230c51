"""
Selection tools.

Selection tools never paint and never produce commands. A finished gesture
replaces the document selection.
"""

import logging
from typing import Optional

from arspaint.api import selection
from arspaint.api.document import Document
from arspaint.api.layers import Color, Point
from arspaint.constants import LIGHT_BLUE, CursorKind, GestureState
from arspaint.history import Command
from arspaint.tools.base import CursorHint, Tool, ToolInput, ToolSettings

logger = logging.getLogger(__name__)


class RectSelectionTool(Tool):
    """
    Rectangular marquee.

    The selected pixels form the half-open box between the truncated drag
    corners, clamped to the canvas. A box without area clears the selection.
    """

    name = "Rect Selection"

    def __init__(self) -> None:
        super().__init__()
        self.start: Optional[Point] = None
        self.current: Optional[Point] = None

    def update(
        self,
        document: Document,
        settings: ToolSettings,
        event: ToolInput,
        color: Color,
    ) -> Optional[Command]:
        if event.pressed:
            if self.start is None:
                self.start = event.position
            self.current = event.position
            if self.start is not None:
                self.state = GestureState.DRAWING

        if event.released:
            if self.start is not None and self.current is not None:
                (sx, sy), (cx, cy) = self.start, self.current
                bbox = (
                    max(int(min(sx, cx)), 0),
                    max(int(min(sy, cy)), 0),
                    max(int(max(sx, cx)), 0),
                    max(int(max(sy, cy)), 0),
                )
                mask = selection.rect_mask(document.width, document.height, bbox)
                if mask is None:
                    logger.debug("Empty rectangle %s clears the selection" % (bbox,))
                document.set_selection(mask)
            self.abandon(document)
        return None

    def abandon(self, document: Document) -> None:
        super().abandon(document)
        self.start = None
        self.current = None

    def draw_cursor(self, settings: ToolSettings, position: Point) -> CursorHint:
        if self.start is None:
            return CursorHint(CursorKind.DOT, (position,), 2.0, LIGHT_BLUE)
        (sx, sy), (px, py) = self.start, position
        corners = ((sx, sy), (px, sy), (px, py), (sx, py))
        return CursorHint(CursorKind.RECT, corners, 2.0, LIGHT_BLUE)


class LassoSelectionTool(Tool):
    """
    Free-form selection.

    Pressed samples collect polygon vertices. On release a polygon of at
    least three vertices becomes the selection, rasterized with the even-odd
    rule; fewer vertices keep the previous selection.
    """

    name = "Lasso Selection"

    def __init__(self) -> None:
        super().__init__()
        self.points: list[Point] = []

    def update(
        self,
        document: Document,
        settings: ToolSettings,
        event: ToolInput,
        color: Color,
    ) -> Optional[Command]:
        if event.pressed and event.position is not None:
            self.points.append(event.position)
            self.state = GestureState.DRAWING

        if event.released and self.points:
            if len(self.points) > 2:
                document.set_selection(
                    selection.polygon_mask(document.width, document.height, self.points)
                )
            else:
                logger.debug("Ignore lasso with %d points" % len(self.points))
            self.abandon(document)
        return None

    def abandon(self, document: Document) -> None:
        super().abandon(document)
        self.points = []

    def draw_cursor(self, settings: ToolSettings, position: Point) -> CursorHint:
        if len(self.points) < 2:
            return CursorHint(CursorKind.DOT, (position,), 2.0, LIGHT_BLUE)
        return CursorHint(
            CursorKind.POLYLINE, tuple(self.points) + (position,), 2.0, LIGHT_BLUE
        )
