"""
arspaint: editing core of a layered raster image editor.

This package provides the document model, compositing engine, undo log and
interactive tools of a small paint program, without any windowing code. A
host application feeds one :py:class:`~arspaint.tools.base.ToolInput` per
tick and pulls buffers back for display.

Basic usage::

    from arspaint import Editor
    from arspaint.tools import ToolInput

    editor = Editor(100, 100)
    editor.dispatch(ToolInput((40, 40), pressed=True))
    editor.dispatch(ToolInput((50, 50), pressed=True))
    editor.dispatch(ToolInput(None, released=True))
    editor.undo()

    editor.save('output.png')

Architecture:

- :py:mod:`arspaint.api`: Layers, document (layer stack) and image I/O
- :py:mod:`arspaint.composite`: Layer blending engine
- :py:mod:`arspaint.history`: Patch commands and the undo/redo stack
- :py:mod:`arspaint.tools`: Brush, shape, selection and transform tools
- :py:mod:`arspaint.editor`: Per-session context tying everything together
"""

from arspaint.api.document import Document
from arspaint.editor import Editor
from arspaint.version import __version__

__all__ = ["Document", "Editor", "__version__"]
