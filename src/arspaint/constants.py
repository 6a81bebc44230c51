"""
Various constants for arspaint
"""
from enum import Enum


class BlendMode(Enum):
    """
    Blend modes.
    """
    NORMAL = "normal"
    MULTIPLY = "multiply"
    ADD = "add"
    SCREEN = "screen"


class ToolKind(Enum):
    """
    Tool kinds a host can switch between.
    """
    BRUSH = "brush"
    ERASER = "eraser"
    LINE = "line"
    RECTANGLE = "rectangle"
    ELLIPSE = "ellipse"
    RECT_SELECTION = "rect_selection"
    LASSO_SELECTION = "lasso_selection"
    TRANSFORM = "transform"


class GestureState(Enum):
    """
    Interaction state of a tool between two ticks.
    """
    IDLE = "idle"
    DRAWING = "drawing"
    FLOATING = "floating"
    DRAGGING = "dragging"


class Handle(Enum):
    """
    Grab handles of the transform rectangle.
    """
    CENTER = "center"
    TOP_LEFT = "top_left"
    TOP_RIGHT = "top_right"
    BOTTOM_LEFT = "bottom_left"
    BOTTOM_RIGHT = "bottom_right"


class CursorKind(Enum):
    """
    Overlay shapes a host draws under the pointer.
    """
    CIRCLE = "circle"
    DOT = "dot"
    RECT = "rect"
    POLYLINE = "polyline"


TRANSPARENT = (0, 0, 0, 0)
BLACK = (0, 0, 0, 255)
WHITE = (255, 255, 255, 255)
RED = (255, 0, 0, 255)
LIGHT_BLUE = (173, 216, 230, 255)

ERASER_MARK = (255, 255, 255, 128)

SELECTED = 255
UNSELECTED = 0
SELECTION_TINT = (0, 100, 255, 50)

DEFAULT_CANVAS_SIZE = (800, 600)
DEFAULT_BRUSH_SIZE = 5.0
DEFAULT_BRUSH_STABILIZATION = 0.5
DEFAULT_BRUSH_SPACING = 0.1
DEFAULT_ERASER_SIZE = 10.0
DEFAULT_LINE_WIDTH = 2.0
MAX_STABILIZATION = 0.95

TRANSFORM_HANDLE_SIZE = 12.0
ELLIPSE_MIN_STEPS = 10

DEFAULT_PALETTE = (
    (0, 0, 0, 255),
    (255, 255, 255, 255),
    (255, 0, 0, 255),
    (0, 255, 0, 255),
    (0, 0, 255, 255),
    (255, 255, 0, 255),
    (0, 255, 255, 255),
    (255, 0, 255, 255),
)
