"""
Tool protocol and shared stroke capture.

All tools share one per-tick interaction protocol: the host builds a
:py:class:`ToolInput` and calls :py:meth:`Tool.update`, which may return a
single :py:class:`~arspaint.history.Command` for the host to push.

Stroke-capture tools accumulate pixels into a private canvas-sized scratch
buffer, track the bounding dirty box of everything touched, and on release
write the scratch pixels into the active layer as one minimal patch.
"""

import logging
from typing import Any, Optional

import numpy as np
from attrs import define, field

from arspaint.api.document import Document
from arspaint.api.layers import Color, Point, new_buffer
from arspaint.composite.utils import BBox, intersect, is_empty, union
from arspaint.constants import (
    DEFAULT_BRUSH_SIZE,
    DEFAULT_BRUSH_SPACING,
    DEFAULT_BRUSH_STABILIZATION,
    DEFAULT_ERASER_SIZE,
    DEFAULT_LINE_WIDTH,
    WHITE,
    CursorKind,
    GestureState,
)
from arspaint.history import Command, PatchCommand
from arspaint.tools import paint
from arspaint.validators import range_

logger = logging.getLogger(__name__)


@define(frozen=True)
class ToolInput:
    """
    One tick of pointer input in image space.

    .. py:attribute:: position

        ``(x, y)`` of the pointer, or `None` when it is off the canvas.

    .. py:attribute:: pressed

        The drawing button is held.

    .. py:attribute:: released

        The drawing button was released during this tick.
    """

    position: Optional[Point] = None
    pressed: bool = False
    released: bool = False


@define
class ToolSettings:
    """Tool parameters shared by every tool of a session."""

    brush_size: float = field(default=DEFAULT_BRUSH_SIZE, validator=range_(1.0, 500.0))
    brush_stabilization: float = field(
        default=DEFAULT_BRUSH_STABILIZATION, validator=range_(0.0, 1.0)
    )
    brush_spacing: float = field(default=DEFAULT_BRUSH_SPACING, validator=range_(0.01, 2.0))
    eraser_size: float = field(default=DEFAULT_ERASER_SIZE, validator=range_(1.0, 100.0))
    line_width: float = field(default=DEFAULT_LINE_WIDTH, validator=range_(1.0, 20.0))


@define(frozen=True)
class CursorHint:
    """
    Overlay the host draws at the pointer position.

    ``points`` holds the circle center for circles and dots, the four
    corners for rectangles, and the vertices for polylines.
    """

    kind: CursorKind
    points: tuple[Point, ...]
    radius: float = 0.0
    color: Color = WHITE
    handles: bool = False


class Tool(object):
    """
    Base class of all tools.

    Subclasses override :py:meth:`update` and whichever optional hooks they
    support.
    """

    name = "Tool"

    def __init__(self) -> None:
        self.state = GestureState.IDLE

    def update(
        self,
        document: Document,
        settings: ToolSettings,
        event: ToolInput,
        color: Color,
    ) -> Optional[Command]:
        raise NotImplementedError

    def get_temp_layer(self) -> Optional[np.ndarray]:
        """Live preview buffer, canvas-sized, or `None`."""
        return None

    def draw_cursor(self, settings: ToolSettings, position: Point) -> CursorHint:
        return CursorHint(CursorKind.DOT, (position,), 2.0)

    def configure(self, settings: ToolSettings, **options: Any) -> None:
        """Update the settings this tool uses."""
        for key, value in options.items():
            if not hasattr(settings, key):
                raise ValueError("%s has no setting %r" % (self.name, key))
            setattr(settings, key, value)

    def abandon(self, document: Document) -> None:
        """Drop any in-flight gesture. Called when the host switches tools."""
        self.state = GestureState.IDLE

    def __repr__(self) -> str:
        return "%s(state=%s)" % (self.__class__.__name__, self.state.value)


class StrokeTool(Tool):
    """
    Shared scratch buffer, dirty box and commit of the painting tools.
    """

    command_name = "Stroke"
    erase = False

    def __init__(self, width: int = 0, height: int = 0) -> None:
        super().__init__()
        self.layer = new_buffer(width, height)
        self.dirty: Optional[BBox] = None

    def _ensure_scratch(self, document: Document) -> None:
        if self.layer.shape[:2] != (document.height, document.width):
            if self.dirty is not None:
                logger.debug("Canvas resized, dropping in-flight stroke")
            self.layer = new_buffer(document.width, document.height)
            self.dirty = None
            self._reset()

    def _expand(self, bbox: Optional[BBox]) -> None:
        if bbox is not None:
            self.dirty = union(self.dirty, bbox)

    def _stamp(self, position: Point, color: Color, size: float) -> None:
        self._expand(paint.draw_circle(self.layer, position, color, size))

    def _segment(
        self, start: Point, end: Point, color: Color, size: float, step: float = 1.0
    ) -> None:
        for position in paint.segment_points(start, end, step):
            self._stamp(position, color, size)

    def _clear_preview(self) -> None:
        if self.dirty is not None:
            bbox = intersect(self.dirty, (0, 0, self.layer.shape[1], self.layer.shape[0]))
            self.layer[bbox[1] : bbox[3], bbox[0] : bbox[2]] = 0
            self.dirty = None

    def _reset(self) -> None:
        """Clear gesture-local points."""
        self.state = GestureState.IDLE

    def get_temp_layer(self) -> Optional[np.ndarray]:
        if self.dirty is None:
            return None
        return self.layer

    def abandon(self, document: Document) -> None:
        self._clear_preview()
        self._reset()

    def commit(self, document: Document) -> Optional[PatchCommand]:
        """
        Write the scratch pixels into the active layer.

        :return: the patch command, or `None` when nothing was painted or the
            active layer has no pixels.
        """
        dirty, self.dirty = self.dirty, None
        self._reset()
        if is_empty(dirty):
            return None
        x0, y0, x1, y1 = intersect(dirty, (0, 0, document.width, document.height))
        if x0 >= x1 or y0 >= y1:
            return None

        stroke = self.layer[y0:y1, x0:x1]
        painted = stroke[:, :, 3] > 0
        target = document.active_buffer()
        if target is None:
            logger.debug("Discard %s stroke on vector layer" % self.name)
            stroke[painted] = 0
            return None

        layer_index = document.active_layer
        region = target[y0:y1, x0:x1]
        before = region.copy()
        if self.erase:
            region[painted] = 0
        elif document[layer_index].alpha_locked:
            index = painted & (region[:, :, 3] > 0)
            pixels = stroke.copy()
            pixels[:, :, 3] = region[:, :, 3]
            region[index] = pixels[index]
        else:
            region[painted] = stroke[painted]
        stroke[painted] = 0
        after = region.copy()
        document.mark_dirty()

        logger.debug("Commit %s at %s" % (self.name, (x0, y0, x1, y1)))
        return PatchCommand(self.command_name, layer_index, x0, y0, before, after)
