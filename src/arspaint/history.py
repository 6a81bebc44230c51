"""
Undo/redo history.

Commands are rectangular before/after pixel patches anchored to a layer
index. The :py:class:`CommandStack` keeps a linear log with a cursor;
pushing a command after undoing discards the undone entries, so history
never branches.

Example::

    stack = CommandStack()
    command = tool.update(document, settings, event, color)
    if command is not None:
        stack.push(command)
    stack.undo(document)
    stack.redo(document)
"""

import logging
from typing import Optional, Protocol, runtime_checkable

import numpy as np
from attrs import field, frozen

from arspaint.api.document import Document
from arspaint.api.layers import get_buffer
from arspaint.composite.utils import paste

logger = logging.getLogger(__name__)


@runtime_checkable
class Command(Protocol):
    """Interface of undoable commands."""

    @property
    def name(self) -> str:
        """Display name."""
        ...

    def undo(self, document: Document) -> None:
        ...

    def redo(self, document: Document) -> None:
        ...


def _readonly(array: np.ndarray) -> np.ndarray:
    array = np.array(array, dtype=np.uint8)
    array.flags.writeable = False
    return array


@frozen(eq=False)
class PatchCommand:
    """
    Before/after pixel blocks of a rectangle of one layer.

    .. py:attribute:: name

        Display name, e.g. ``"Brush Stroke"``.

    .. py:attribute:: layer_index

        Index of the target layer at creation time.

    .. py:attribute:: x
    .. py:attribute:: y

        Top-left corner of the patch in layer coordinates.

    .. py:attribute:: before
    .. py:attribute:: after

        Read-only RGBA blocks of identical shape.
    """

    name: str
    layer_index: int
    x: int
    y: int
    before: np.ndarray = field(converter=_readonly)
    after: np.ndarray = field(converter=_readonly)

    @after.validator
    def _validate_shape(self, attribute, value):
        if value.shape != self.before.shape:
            raise ValueError(
                "Patch shapes differ: %s != %s" % (self.before.shape, value.shape)
            )

    @property
    def width(self) -> int:
        return self.before.shape[1]

    @property
    def height(self) -> int:
        return self.before.shape[0]

    @property
    def bbox(self) -> tuple[int, int, int, int]:
        return (self.x, self.y, self.x + self.width, self.y + self.height)

    def undo(self, document: Document) -> None:
        self._apply(document, self.before)

    def redo(self, document: Document) -> None:
        self._apply(document, self.after)

    def _apply(self, document: Document, patch: np.ndarray) -> None:
        layer = document.get_layer(self.layer_index)
        if layer is None:
            logger.warning(
                "Ignore %r on missing layer %d" % (self.name, self.layer_index)
            )
            return
        buffer = get_buffer(layer)
        if buffer is None:
            # Vector data is not covered by patches.
            logger.debug("Ignore %r on vector layer %r" % (self.name, layer.name))
            return
        paste(buffer, patch, self.x, self.y)

    def __repr__(self) -> str:
        return "%s(%r layer=%d bbox=%s)" % (
            self.__class__.__name__,
            self.name,
            self.layer_index,
            self.bbox,
        )


class CommandStack(object):
    """Linear undo/redo log."""

    def __init__(self) -> None:
        self._commands: list[Command] = []
        self._cursor = 0

    @property
    def cursor(self) -> int:
        """Number of commands currently applied."""
        return self._cursor

    def __len__(self) -> int:
        return len(self._commands)

    def push(self, command: Command) -> None:
        """Append a command, dropping every undone command first."""
        if self._cursor < len(self._commands):
            logger.debug("Discard %d redo entries" % (len(self._commands) - self._cursor))
            del self._commands[self._cursor :]
        self._commands.append(command)
        self._cursor += 1

    def undo(self, document: Document) -> None:
        if self._cursor == 0:
            return
        self._cursor -= 1
        command = self._commands[self._cursor]
        logger.debug("Undo %r" % command)
        command.undo(document)
        document.mark_dirty()

    def redo(self, document: Document) -> None:
        if self._cursor == len(self._commands):
            return
        command = self._commands[self._cursor]
        logger.debug("Redo %r" % command)
        command.redo(document)
        self._cursor += 1
        document.mark_dirty()

    def can_undo(self) -> bool:
        return self._cursor > 0

    def can_redo(self) -> bool:
        return self._cursor < len(self._commands)

    def undo_name(self) -> Optional[str]:
        """Name of the command :py:meth:`undo` would revert."""
        if not self.can_undo():
            return None
        return self._commands[self._cursor - 1].name

    def redo_name(self) -> Optional[str]:
        """Name of the command :py:meth:`redo` would reapply."""
        if not self.can_redo():
            return None
        return self._commands[self._cursor].name

    def clear(self) -> None:
        self._commands.clear()
        self._cursor = 0
