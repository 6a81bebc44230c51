"""
Interactive tools.

Every tool follows the protocol of :py:class:`~arspaint.tools.base.Tool`.
Use :py:func:`new_tool` to create a tool from its
:py:class:`~arspaint.constants.ToolKind`::

    from arspaint.tools import ToolInput, ToolSettings, new_tool

    tool = new_tool("brush", document.width, document.height)
    command = tool.update(document, ToolSettings(), ToolInput((5, 5), True), color)
"""

import logging
from typing import Union

from arspaint.constants import ToolKind
from arspaint.tools.base import CursorHint, StrokeTool, Tool, ToolInput, ToolSettings
from arspaint.tools.brush import BrushTool, EraserTool
from arspaint.tools.selection import LassoSelectionTool, RectSelectionTool
from arspaint.tools.shapes import EllipseTool, LineTool, RectangleTool
from arspaint.tools.transform import TransformTool

logger = logging.getLogger(__name__)

TOOL_TYPES = {
    ToolKind.BRUSH: BrushTool,
    ToolKind.ERASER: EraserTool,
    ToolKind.LINE: LineTool,
    ToolKind.RECTANGLE: RectangleTool,
    ToolKind.ELLIPSE: EllipseTool,
    ToolKind.RECT_SELECTION: RectSelectionTool,
    ToolKind.LASSO_SELECTION: LassoSelectionTool,
    ToolKind.TRANSFORM: TransformTool,
}


def new_tool(kind: Union[str, ToolKind], width: int = 0, height: int = 0) -> Tool:
    """
    Create a tool.

    :param kind: :py:class:`~arspaint.constants.ToolKind` or its value.
    :param width: canvas width for the scratch buffer of stroke tools.
    :param height: canvas height for the scratch buffer of stroke tools.
    :raises ValueError: if the kind is unknown.
    """
    kind = ToolKind(kind)
    cls = TOOL_TYPES[kind]
    logger.debug("Creating %s" % cls.__name__)
    if issubclass(cls, StrokeTool):
        return cls(width, height)
    return cls()


__all__ = [
    "BrushTool",
    "CursorHint",
    "EllipseTool",
    "EraserTool",
    "LassoSelectionTool",
    "LineTool",
    "RectSelectionTool",
    "RectangleTool",
    "StrokeTool",
    "Tool",
    "ToolInput",
    "ToolSettings",
    "TransformTool",
    "new_tool",
]
