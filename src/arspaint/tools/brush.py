"""
Freehand painting tools.
"""

import logging
import os
from typing import Any, Optional, Union

import numpy as np

from arspaint.api import pil_io
from arspaint.api.document import Document
from arspaint.api.layers import Color, Point
from arspaint.constants import (
    ERASER_MARK,
    MAX_STABILIZATION,
    RED,
    WHITE,
    CursorKind,
    GestureState,
)
from arspaint.history import Command
from arspaint.tools import paint
from arspaint.tools.base import CursorHint, StrokeTool, ToolInput, ToolSettings

logger = logging.getLogger(__name__)


class BrushTool(StrokeTool):
    """
    Stabilized brush.

    Each pressed sample is smoothed towards the previous stabilized point by
    ``brush_stabilization`` and connected to it with stamps spaced
    ``brush_size * brush_spacing`` pixels apart. Stamps are round discs, or
    :py:attr:`texture` tinted with the paint color when one is set.

    .. py:attribute:: texture

        Optional RGBA ``uint8`` array used as the brush tip.
    """

    name = "Brush"
    command_name = "Brush Stroke"

    def __init__(self, width: int = 0, height: int = 0) -> None:
        super().__init__(width, height)
        self.texture: Optional[np.ndarray] = None
        self.last: Optional[Point] = None
        self.stabilized: Optional[Point] = None

    def load_texture(self, fp: Union[str, bytes, os.PathLike]) -> None:
        """
        Load a brush tip from an image file.

        :raises OSError: if the image cannot be read.
        """
        self.texture = pil_io.read(fp)
        logger.debug("Loaded %dx%d brush texture" % self.texture.shape[1::-1])

    def configure(self, settings: ToolSettings, **options: Any) -> None:
        if "texture" in options:
            texture = options.pop("texture")
            if texture is not None and (texture.ndim != 3 or texture.shape[2] != 4):
                raise ValueError("Expected an RGBA texture, got shape %s" % (texture.shape,))
            self.texture = texture
        super().configure(settings, **options)

    def draw_cursor(self, settings: ToolSettings, position: Point) -> CursorHint:
        return CursorHint(CursorKind.CIRCLE, (position,), settings.brush_size, WHITE)

    def _stamp(self, position: Point, color: Color, size: float) -> None:
        if self.texture is None:
            super()._stamp(position, color, size)
        else:
            self._expand(paint.draw_texture(self.layer, self.texture, position, color, size))

    def _reset(self) -> None:
        super()._reset()
        self.last = None
        self.stabilized = None

    def _stabilize(self, target: Point, stabilization: float) -> Point:
        if self.stabilized is None:
            return target
        weight = min(max(stabilization, 0.0), MAX_STABILIZATION)
        return (
            self.stabilized[0] * weight + target[0] * (1.0 - weight),
            self.stabilized[1] * weight + target[1] * (1.0 - weight),
        )

    def update(
        self,
        document: Document,
        settings: ToolSettings,
        event: ToolInput,
        color: Color,
    ) -> Optional[Command]:
        self._ensure_scratch(document)
        size = settings.brush_size
        if event.pressed:
            if event.position is not None:
                position = self._stabilize(event.position, settings.brush_stabilization)
                if self.last is None:
                    self._stamp(position, color, size)
                else:
                    step = max(size * settings.brush_spacing, 1.0)
                    self._segment(self.last, position, color, size, step)
                self.last = position
                self.stabilized = position
                self.state = GestureState.DRAWING
        else:
            self.last = None
            self.stabilized = None

        if event.released:
            return self.commit(document)
        return None


class EraserTool(StrokeTool):
    """
    Eraser.

    The scratch buffer only marks the erased footprint. On release every
    marked pixel of the active layer becomes fully transparent, alpha-locked
    or not.
    """

    name = "Eraser"
    command_name = "Erase"
    erase = True

    def __init__(self, width: int = 0, height: int = 0) -> None:
        super().__init__(width, height)
        self.last: Optional[Point] = None

    def draw_cursor(self, settings: ToolSettings, position: Point) -> CursorHint:
        return CursorHint(CursorKind.CIRCLE, (position,), settings.eraser_size, RED)

    def _reset(self) -> None:
        super()._reset()
        self.last = None

    def update(
        self,
        document: Document,
        settings: ToolSettings,
        event: ToolInput,
        color: Color,
    ) -> Optional[Command]:
        self._ensure_scratch(document)
        size = settings.eraser_size
        if event.pressed:
            if event.position is not None:
                if self.last is None:
                    self._stamp(event.position, ERASER_MARK, size)
                else:
                    self._segment(self.last, event.position, ERASER_MARK, size)
                self.last = event.position
                self.state = GestureState.DRAWING
        else:
            self.last = None

        if event.released:
            return self.commit(document)
        return None
