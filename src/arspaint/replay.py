"""
Scripted gesture replay.

A replay script is a JSON list of single-key action objects applied in
order to an :py:class:`~arspaint.editor.Editor`::

    [
        {"tool": "brush"},
        {"color": [255, 0, 0, 255]},
        {"settings": {"brush_size": 3}},
        {"stroke": [[10, 10], [40, 25], [70, 10]]},
        {"add_layer": "Shapes"},
        {"tool": "rect_selection"},
        {"stroke": [[5, 5], [50, 50]]},
        {"tool": "transform"},
        {"stroke": [[20, 20], [40, 30]]},
        {"confirm": true},
        {"undo": 1}
    ]

A ``stroke`` sends one pressed sample per point, then a release at the last
point. Pass ``{"points": [...], "secondary": true}`` instead of a bare list
to paint with the secondary color.
"""

import json
import logging
import os
from typing import Any, Callable, Iterable, Union

from arspaint.constants import BlendMode
from arspaint.editor import Editor
from arspaint.tools import ToolInput

logger = logging.getLogger(__name__)

Action = dict[str, Any]


def load(fp: Union[str, bytes, os.PathLike]) -> list[Action]:
    """
    Read a replay script.

    :raises OSError: if the file cannot be read.
    :raises ValueError: if the file is not a JSON list.
    """
    with open(fp, "rb") as f:
        actions = json.load(f)
    if not isinstance(actions, list):
        raise ValueError("Replay script must be a list, got %s" % type(actions).__name__)
    return actions


def replay(editor: Editor, actions: Iterable[Action]) -> int:
    """
    Apply actions to an editor.

    :return: number of actions applied.
    :raises ValueError: on an unknown or malformed action.
    """
    count = 0
    for action in actions:
        if not isinstance(action, dict) or len(action) != 1:
            raise ValueError("Invalid action: %r" % (action,))
        ((key, value),) = action.items()
        handler = ACTIONS.get(key)
        if handler is None:
            raise ValueError("Unknown action: %r" % key)
        logger.debug("Replay %s: %r" % (key, value))
        try:
            handler(editor, value)
        except (KeyError, IndexError, TypeError) as e:
            raise ValueError("Invalid action: %r" % (action,)) from e
        count += 1
    return count


def _stroke(editor: Editor, value: Any) -> None:
    secondary = False
    if isinstance(value, dict):
        secondary = bool(value.get("secondary", False))
        value = value["points"]
    points = [(float(x), float(y)) for x, y in value]
    if not points:
        return
    for point in points:
        editor.dispatch(ToolInput(point, pressed=True), secondary)
    editor.dispatch(ToolInput(points[-1], released=True), secondary)


def _settings(editor: Editor, value: dict[str, Any]) -> None:
    editor.configure(**value)


def _repeat(method: Callable[[], Any]) -> Callable[[Editor, Any], None]:
    def handler(editor: Editor, value: Any) -> None:
        for _ in range(int(value)):
            method(editor)

    return handler


LAYER_SETTERS = {
    "visible": "set_visible",
    "locked": "set_locked",
    "alpha_locked": "set_alpha_locked",
    "clipped": "set_clipped",
    "opacity": "set_opacity",
    "blend_mode": "set_blend_mode",
    "name": "rename_layer",
}


def _layer(editor: Editor, value: dict[str, Any]) -> None:
    if not isinstance(value, dict):
        raise ValueError("Layer properties must be an object, got %r" % (value,))
    document = editor.document
    for key, item in value.items():
        setter = LAYER_SETTERS.get(key)
        if setter is None:
            raise ValueError("Unknown layer property: %r" % key)
        if key == "blend_mode":
            item = BlendMode(item)
        getattr(document, setter)(document.active_layer, item)


def _confirm(editor: Editor, value: Any) -> None:
    if value:
        editor.confirm_transform()


def _deselect(editor: Editor, value: Any) -> None:
    if value:
        editor.deselect()


ACTIONS: dict[str, Callable[[Editor, Any], None]] = {
    "tool": lambda editor, value: editor.select_tool(value),
    "color": lambda editor, value: editor.set_color(value),
    "secondary_color": lambda editor, value: editor.set_color(value, secondary=True),
    "settings": _settings,
    "stroke": _stroke,
    "undo": _repeat(Editor.undo),
    "redo": _repeat(Editor.redo),
    "deselect": _deselect,
    "confirm": _confirm,
    "add_layer": lambda editor, value: editor.new_layer(value),
    "active_layer": lambda editor, value: editor.document.set_active_layer(int(value)),
    "layer": _layer,
    "resize": lambda editor, value: editor.resize(int(value[0]), int(value[1])),
}
