"""
Transform tool.

Picks up the selected pixels of the active layer into a floating buffer,
lets the pointer move the buffer or drag its corners, and drops it back
into the layer when a commit is requested::

    tool = TransformTool()
    tool.update(document, settings, ToolInput((10, 10)), color)  # pick-up
    tool.update(document, settings, ToolInput((15, 15), pressed=True), color)
    tool.update(document, settings, ToolInput((30, 30), pressed=True), color)
    tool.request_commit()
    command = tool.update(document, settings, ToolInput(), color)

The commit patch covers the whole layer, with the snapshot taken at
pick-up time as its ``before`` block.
"""

import logging
import math
from typing import Any, Optional

import numpy as np

from arspaint.api import pil_io
from arspaint.api import selection as selection_api
from arspaint.api.document import Document
from arspaint.api.layers import Color, Point, get_buffer, new_buffer
from arspaint.composite.utils import paste
from arspaint.constants import (
    TRANSFORM_HANDLE_SIZE,
    WHITE,
    CursorKind,
    GestureState,
    Handle,
)
from arspaint.history import Command, PatchCommand
from arspaint.tools.base import CursorHint, Tool, ToolInput, ToolSettings

logger = logging.getLogger(__name__)

Rect = tuple[float, float, float, float]


class TransformTool(Tool):
    """
    Cut, move and resize the selection.

    .. py:attribute:: floating

        Picked-up pixels, sized to the selection bounding box, or `None`.

    .. py:attribute:: source_rect

        Bounding box the floating pixels were cut from.

    .. py:attribute:: current_rect

        Placement ``(left, top, right, bottom)`` of the floating pixels.
        Corner drags may leave it inverted or empty.
    """

    name = "Transform"

    def __init__(self) -> None:
        super().__init__()
        self.floating: Optional[np.ndarray] = None
        self.snapshot: Optional[np.ndarray] = None
        self.layer_index = 0
        self.source_rect: Optional[Rect] = None
        self.current_rect: Optional[Rect] = None
        self.handle: Optional[Handle] = None
        self.offset: Point = (0.0, 0.0)
        self.commit_pending = False

    @property
    def dragging(self) -> bool:
        return self.handle is not None

    def request_commit(self) -> None:
        """Drop the floating pixels on the next :py:meth:`update`."""
        if self.floating is None:
            logger.debug("Nothing to commit")
            return
        self.commit_pending = True

    def configure(self, settings: ToolSettings, **options: Any) -> None:
        if options.pop("confirm", False):
            self.request_commit()
        super().configure(settings, **options)

    def update(
        self,
        document: Document,
        settings: ToolSettings,
        event: ToolInput,
        color: Color,
    ) -> Optional[Command]:
        if self.snapshot is not None and self.snapshot.shape[:2] != (
            document.height,
            document.width,
        ):
            logger.warning("Canvas resized, dropping floating selection")
            self._reset()

        if self.commit_pending:
            command = self.commit(document)
            if command is not None:
                return command

        if self.floating is None and not self.commit_pending:
            self.pick_up(document)

        if self.current_rect is not None:
            if event.pressed:
                if event.position is not None:
                    if not self.dragging:
                        self.handle = self._grab(event.position)
                        if self.dragging:
                            self.state = GestureState.DRAGGING
                    else:
                        self._drag(event.position)
            else:
                self.handle = None
                if self.floating is not None:
                    self.state = GestureState.FLOATING
        return None

    def pick_up(self, document: Document) -> None:
        """Cut the selected pixels of the active layer into the floating buffer."""
        if document.selection is None:
            return
        bbox = selection_api.bbox(document.selection)
        if bbox is None:
            return
        target = document.active_buffer()
        if target is None:
            logger.debug("Active layer has no pixels to pick up")
            return

        x0, y0, x1, y1 = bbox
        self.layer_index = document.active_layer
        self.snapshot = target.copy()
        selected = document.selection[y0:y1, x0:x1] > 0
        region = target[y0:y1, x0:x1]
        self.floating = new_buffer(x1 - x0, y1 - y0)
        self.floating[selected] = region[selected]
        region[selected] = 0
        document.mark_dirty()

        self.source_rect = (float(x0), float(y0), float(x1), float(y1))
        self.current_rect = self.source_rect
        self.state = GestureState.FLOATING
        logger.debug("Picked up %s from layer %d" % (bbox, self.layer_index))

    def _grab(self, position: Point) -> Optional[Handle]:
        left, top, right, bottom = self.current_rect
        corners = (
            (Handle.TOP_LEFT, (left, top)),
            (Handle.TOP_RIGHT, (right, top)),
            (Handle.BOTTOM_LEFT, (left, bottom)),
            (Handle.BOTTOM_RIGHT, (right, bottom)),
        )
        for handle, corner in corners:
            distance = math.hypot(position[0] - corner[0], position[1] - corner[1])
            if distance < TRANSFORM_HANDLE_SIZE:
                return handle
        if left <= position[0] <= right and top <= position[1] <= bottom:
            self.offset = (position[0] - left, position[1] - top)
            return Handle.CENTER
        return None

    def _drag(self, position: Point) -> None:
        left, top, right, bottom = self.current_rect
        x, y = position
        if self.handle == Handle.CENTER:
            new_left, new_top = x - self.offset[0], y - self.offset[1]
            self.current_rect = (
                new_left,
                new_top,
                new_left + (right - left),
                new_top + (bottom - top),
            )
        elif self.handle == Handle.TOP_LEFT:
            self.current_rect = (x, y, right, bottom)
        elif self.handle == Handle.TOP_RIGHT:
            self.current_rect = (left, y, x, bottom)
        elif self.handle == Handle.BOTTOM_LEFT:
            self.current_rect = (x, top, right, y)
        elif self.handle == Handle.BOTTOM_RIGHT:
            self.current_rect = (left, top, x, y)

    def _placed(self) -> tuple[np.ndarray, int, int]:
        left, top, right, bottom = self.current_rect
        width = int(max(right - left, 1.0))
        height = int(max(bottom - top, 1.0))
        resized = pil_io.resize_nearest(self.floating, width, height)
        return resized, int(left), int(top)

    def commit(self, document: Document) -> Optional[PatchCommand]:
        """
        Stamp the floating pixels at the current rectangle.

        :return: the whole-layer patch command, or `None` if nothing floats.
        """
        self.commit_pending = False
        if self.floating is None or self.current_rect is None:
            return None
        layer = document.get_layer(self.layer_index)
        target = None if layer is None else get_buffer(layer)
        if target is None:
            logger.warning("Transform target layer %d is gone" % self.layer_index)
            self._reset()
            return None

        resized, x, y = self._placed()
        placed = np.zeros_like(target)
        paste(placed, resized, x, y)
        index = placed[:, :, 3] > 0
        target[index] = placed[index]
        document.mark_dirty()

        command = PatchCommand(
            self.name, self.layer_index, 0, 0, self.snapshot, target.copy()
        )
        logger.debug("Dropped floating pixels at %s" % (self.current_rect,))
        self._reset()
        return command

    def get_temp_layer(self) -> Optional[np.ndarray]:
        if self.floating is None or self.snapshot is None:
            return None
        resized, x, y = self._placed()
        preview = np.zeros_like(self.snapshot)
        paste(preview, resized, x, y)
        return preview

    def draw_cursor(self, settings: ToolSettings, position: Point) -> CursorHint:
        if self.current_rect is None:
            return CursorHint(CursorKind.DOT, (position,), 2.0, WHITE)
        left, top, right, bottom = self.current_rect
        corners = ((left, top), (right, top), (right, bottom), (left, bottom))
        return CursorHint(CursorKind.RECT, corners, 4.0, WHITE, handles=True)

    def abandon(self, document: Document) -> None:
        """Put the floating pixels back where they were picked up."""
        if self.floating is not None and self.snapshot is not None:
            layer = document.get_layer(self.layer_index)
            target = None if layer is None else get_buffer(layer)
            if target is not None and target.shape == self.snapshot.shape:
                target[:] = self.snapshot
                document.mark_dirty()
                logger.debug("Restored layer %d" % self.layer_index)
        self._reset()

    def _reset(self) -> None:
        self.floating = None
        self.snapshot = None
        self.source_rect = None
        self.current_rect = None
        self.handle = None
        self.commit_pending = False
        self.state = GestureState.IDLE
