"""
Layer module.

This module implements the layer model of arspaint. A :py:class:`Layer`
holds the per-layer compositing properties and wraps exactly one kind of
payload:

- :py:class:`RasterData`: a canvas-sized RGBA pixel buffer
- :py:class:`VectorData`: an ordered list of vector shape records
- :py:class:`ToneData`: a canvas-sized RGBA buffer plus halftone parameters

Pixel buffers are ``numpy.uint8`` arrays of shape ``(height, width, 4)``
holding straight (non-premultiplied) RGBA values.

Layers are created through the factories and owned by a
:py:class:`~arspaint.api.document.Document`::

    from arspaint.api.layers import Layer

    layer = Layer.new_raster(640, 480, "Sketch")
    layer.opacity = 0.5
    buffer = get_buffer(layer)  # numpy array, or None for vector layers

Vector and tone payloads are structural only: vector shapes are neither
composited nor covered by patch undo, and the tone ``frequency`` and
``density`` parameters are not consulted when compositing.
"""

import logging
from typing import Optional, Union

import numpy as np
from attrs import define, field

from arspaint.constants import BlendMode
from arspaint.validators import range_, rgba

logger = logging.getLogger(__name__)


Color = tuple[int, int, int, int]
Point = tuple[float, float]


def new_buffer(
    width: int, height: int, color: Color = (0, 0, 0, 0)
) -> np.ndarray:
    """Allocate an RGBA buffer filled with ``color``."""
    buffer = np.empty((height, width, 4), dtype=np.uint8)
    buffer[:, :] = color
    return buffer


@define(eq=False)
class LineShape:
    """Straight line between two points."""

    start: Point
    end: Point
    color: Color = field(validator=rgba)
    width: float = 1.0


@define(eq=False)
class RectangleShape:
    """Axis-aligned rectangle given as ``(left, top, right, bottom)``."""

    rect: tuple[float, float, float, float]
    color: Color = field(validator=rgba)
    width: float = 1.0
    fill: bool = False


@define(eq=False)
class EllipseShape:
    """Ellipse inscribed in ``(left, top, right, bottom)``."""

    rect: tuple[float, float, float, float]
    color: Color = field(validator=rgba)
    width: float = 1.0
    fill: bool = False


VectorShape = Union[LineShape, RectangleShape, EllipseShape]


@define(eq=False)
class RasterData:
    buffer: np.ndarray


@define(eq=False)
class VectorData:
    shapes: list[VectorShape] = field(factory=list)


@define(eq=False)
class ToneData:
    """
    Raster buffer with halftone screen parameters.

    .. py:attribute:: frequency

        Dots per unit.

    .. py:attribute:: density

        Dot coverage in [0, 1].
    """

    buffer: np.ndarray
    frequency: float = 10.0
    density: float = field(default=0.5, validator=range_(0.0, 1.0))


LayerData = Union[RasterData, VectorData, ToneData]


@define(eq=False)
class Layer:
    """
    A single layer of a document.

    .. py:attribute:: name

        Layer name.

    .. py:attribute:: visible

        Hidden layers are skipped when compositing.

    .. py:attribute:: locked

        Lock flag, stored for the host. Tools do not consult it.

    .. py:attribute:: alpha_locked

        Restrict painting to pixels that already have nonzero alpha.

    .. py:attribute:: clipped

        Clip to the alpha of the layer directly below.

    .. py:attribute:: opacity

        Opacity in [0.0, 1.0]. Writable, validated.

    .. py:attribute:: blend_mode

        :py:class:`~arspaint.constants.BlendMode`.

    .. py:attribute:: data

        One of :py:class:`RasterData`, :py:class:`VectorData` or
        :py:class:`ToneData`.
    """

    name: str
    data: LayerData
    visible: bool = True
    locked: bool = False
    alpha_locked: bool = False
    clipped: bool = False
    opacity: float = field(default=1.0, converter=float, validator=range_(0.0, 1.0))
    blend_mode: BlendMode = field(default=BlendMode.NORMAL, converter=BlendMode)

    @classmethod
    def new_raster(
        cls, width: int, height: int, name: str, color: Color = (0, 0, 0, 0)
    ) -> "Layer":
        """Create a raster layer filled with ``color``, transparent by default."""
        return cls(name=name, data=RasterData(new_buffer(width, height, color)))

    @classmethod
    def new_vector(cls, name: str) -> "Layer":
        """Create an empty vector layer."""
        return cls(name=name, data=VectorData())

    @classmethod
    def new_tone(
        cls,
        width: int,
        height: int,
        name: str,
        frequency: float = 10.0,
        density: float = 0.5,
    ) -> "Layer":
        """Create a transparent tone layer."""
        return cls(
            name=name,
            data=ToneData(new_buffer(width, height), frequency, density),
        )

    @property
    def kind(self) -> str:
        """
        Kind of this layer: raster, vector or tone.

        :return: `str`
        """
        return self.data.__class__.__name__.lower().replace("data", "")

    def __repr__(self) -> str:
        return "%s(%r kind=%s visible=%s opacity=%.2f blend=%s)" % (
            self.__class__.__name__,
            self.name,
            self.kind,
            self.visible,
            self.opacity,
            self.blend_mode.value,
        )


def get_buffer(layer: Layer) -> Optional[np.ndarray]:
    """
    Pixel buffer of a layer.

    :return: the RGBA buffer for raster and tone layers, `None` for vector
        layers whose pixels are not applicable.
    """
    data = layer.data
    if isinstance(data, (RasterData, ToneData)):
        return data.buffer
    elif isinstance(data, VectorData):
        return None
    raise TypeError("Unknown layer data: %s" % type(data).__name__)


def set_buffer(layer: Layer, buffer: np.ndarray) -> None:
    """Replace the pixel buffer of a raster or tone layer."""
    data = layer.data
    if isinstance(data, (RasterData, ToneData)):
        data.buffer = buffer
    elif isinstance(data, VectorData):
        logger.debug("Ignore buffer replacement for vector layer %r" % layer.name)
    else:
        raise TypeError("Unknown layer data: %s" % type(data).__name__)
