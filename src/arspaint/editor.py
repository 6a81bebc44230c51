"""
Editing session.

:py:class:`Editor` is the explicit context of one editing session: the
document, its undo history, the active tool and the paint colors. A host
creates one editor and feeds it one :py:class:`~arspaint.tools.ToolInput`
per tick.

Example::

    from arspaint import Editor
    from arspaint.tools import ToolInput

    editor = Editor(200, 100)
    editor.select_tool("rectangle")
    editor.dispatch(ToolInput((10, 10), pressed=True))
    editor.dispatch(ToolInput((60, 40), pressed=True))
    editor.dispatch(ToolInput((60, 40), released=True))
    composite, preview, overlay = editor.preview()
"""

import logging
import os
from typing import Any, Optional, Sequence, Union

import numpy as np

from arspaint.api.document import Document
from arspaint.api.layers import Color, Layer
from arspaint.api.selection import selection_overlay
from arspaint.constants import (
    BLACK,
    DEFAULT_CANVAS_SIZE,
    DEFAULT_PALETTE,
    WHITE,
    ToolKind,
)
from arspaint.history import Command, CommandStack
from arspaint.tools import Tool, ToolInput, ToolSettings, TransformTool, new_tool

logger = logging.getLogger(__name__)

PathLike = Union[str, bytes, os.PathLike]


def to_color(value: Sequence[int]) -> Color:
    """
    Validate an RGBA color.

    :raises ValueError: if the value is not four integers in [0, 255].
    """
    try:
        color = tuple(int(v) for v in value)
    except TypeError:
        raise ValueError("Invalid RGBA color: %r" % (value,))
    if len(color) != 4 or any(not 0 <= v <= 255 for v in color):
        raise ValueError("Invalid RGBA color: %r" % (value,))
    return color  # type: ignore[return-value]


class Editor(object):
    """
    Per-session editing context.

    :param width: canvas width of the initial blank document.
    :param height: canvas height of the initial blank document.
    :param document: start from this document instead of a blank canvas.
    :param settings: tool settings, defaults otherwise.
    """

    def __init__(
        self,
        width: int = DEFAULT_CANVAS_SIZE[0],
        height: int = DEFAULT_CANVAS_SIZE[1],
        document: Optional[Document] = None,
        settings: Optional[ToolSettings] = None,
    ):
        if document is None:
            document = Document.new((width, height))
        self.document = document
        self.history = CommandStack()
        self.settings = settings or ToolSettings()
        self.primary_color: Color = BLACK
        self.secondary_color: Color = WHITE
        self.palette: list[Color] = list(DEFAULT_PALETTE)
        self.tool_kind = ToolKind.BRUSH
        self.tool: Tool = new_tool(self.tool_kind, self.document.width, self.document.height)

    def __repr__(self) -> str:
        return "%s(%r tool=%s history=%d/%d)" % (
            self.__class__.__name__,
            self.document,
            self.tool_kind.value,
            self.history.cursor,
            len(self.history),
        )

    def dispatch(self, event: ToolInput, secondary: bool = False) -> Optional[Command]:
        """
        Route one tick of input to the active tool.

        :param secondary: paint with the secondary color.
        :return: the command pushed to the history, if any.
        """
        color = self.secondary_color if secondary else self.primary_color
        command = self.tool.update(self.document, self.settings, event, color)
        if command is not None:
            logger.debug("Push %r" % command)
            self.history.push(command)
        return command

    def select_tool(self, kind: Union[str, ToolKind]) -> Tool:
        """
        Switch tools. The in-flight gesture of the current tool is abandoned.

        :raises ValueError: if the kind is unknown.
        """
        kind = ToolKind(kind)
        self.tool.abandon(self.document)
        self.tool_kind = kind
        self.tool = new_tool(kind, self.document.width, self.document.height)
        return self.tool

    def configure(self, **options: Any) -> None:
        """Forward options to the active tool, see :py:meth:`Tool.configure`."""
        self.tool.configure(self.settings, **options)

    def undo(self) -> None:
        self.tool.abandon(self.document)
        self.history.undo(self.document)

    def redo(self) -> None:
        self.tool.abandon(self.document)
        self.history.redo(self.document)

    def deselect(self) -> None:
        self.document.deselect()

    def confirm_transform(self) -> Optional[Command]:
        """Drop the floating pixels of the transform tool."""
        if not isinstance(self.tool, TransformTool):
            logger.debug("No transform in progress")
            return None
        self.tool.request_commit()
        return self.dispatch(ToolInput())

    def open(self, fp: PathLike) -> None:
        """
        Replace the document with an image file.

        :raises OSError: if the file cannot be decoded. The session is left
            unchanged in that case.
        """
        document = Document.open(fp)
        self.tool.abandon(self.document)
        self.document = document
        self.history.clear()
        self.tool = new_tool(self.tool_kind, document.width, document.height)
        logger.debug("Opened %r" % document)

    def save(self, fp: PathLike, format: Optional[str] = None) -> None:
        """
        Export the flattened composite.

        :raises OSError: if the file cannot be written.
        """
        self.document.save(fp, format=format)

    def new_layer(self, name: Optional[str] = None) -> int:
        """Add a transparent raster layer on top and make it active."""
        if name is None:
            name = "Layer %d" % (len(self.document) + 1)
        layer = Layer.new_raster(self.document.width, self.document.height, name)
        return self.document.add_layer(layer)

    def resize(self, width: int, height: int) -> None:
        """Resize the canvas. The in-flight gesture is abandoned first."""
        self.tool.abandon(self.document)
        self.document.resize(width, height)

    def set_color(self, color: Sequence[int], secondary: bool = False) -> None:
        if secondary:
            self.secondary_color = to_color(color)
        else:
            self.primary_color = to_color(color)

    def swap_colors(self) -> None:
        self.primary_color, self.secondary_color = (
            self.secondary_color,
            self.primary_color,
        )

    def add_to_palette(self, color: Optional[Sequence[int]] = None) -> None:
        """Append a color, the primary color by default."""
        self.palette.append(self.primary_color if color is None else to_color(color))

    def pick_from_palette(self, index: int, secondary: bool = False) -> None:
        """Make a palette entry the primary or secondary color."""
        self.set_color(self.palette[index], secondary)

    def replace_palette_entry(self, index: int) -> None:
        """Overwrite a palette entry with the primary color."""
        self.palette[index] = self.primary_color

    def preview(
        self,
    ) -> tuple[np.ndarray, Optional[np.ndarray], Optional[np.ndarray]]:
        """
        Buffers a host draws each frame, bottom to top.

        :return: ``(composite, temp_layer, selection_overlay)``; the last two
            are `None` when there is nothing to show.
        """
        return (
            self.document.composite(),
            self.tool.get_temp_layer(),
            selection_overlay(self.document.selection),
        )
