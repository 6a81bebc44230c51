"""
Document module.

A :py:class:`Document` is the layer stack of one canvas: the ordered
layers (index 0 is the bottom), the active layer index, the optional
selection mask, and a lazily recomputed composite.

Example::

    from arspaint import Document
    from arspaint.api.layers import Layer
    from arspaint.constants import BlendMode

    document = Document.new((640, 480))
    index = document.add_layer(Layer.new_raster(640, 480, "Ink"))
    document.set_blend_mode(index, BlendMode.MULTIPLY)
    document.composite()  # recomputed once, then cached
    document.save("flat.png")

Every mutator that takes a layer index ignores an out-of-range index
instead of raising. Code that writes into layer buffers directly must call
:py:meth:`Document.mark_dirty` afterwards.
"""

import logging
import os
from typing import BinaryIO, Iterator, Optional, Union

import numpy as np
from PIL import Image

from arspaint.api import pil_io
from arspaint.api.layers import Color, Layer, RasterData, get_buffer, set_buffer
from arspaint.composite import composite
from arspaint.composite.utils import resized
from arspaint.constants import WHITE, BlendMode

logger = logging.getLogger(__name__)


class Document(object):
    """
    Layer stack of a single canvas.

    Use :py:meth:`new`, :py:meth:`frombuffer`, :py:meth:`frompil` or
    :py:meth:`open` to create one.
    """

    def __init__(self, width: int, height: int, layers: list[Layer]):
        if width < 1 or height < 1:
            raise ValueError("Invalid canvas size: %dx%d" % (width, height))
        if not layers:
            raise ValueError("A document needs at least one layer")
        self._width = width
        self._height = height
        self._layers = layers
        self._active_layer = len(layers) - 1
        self.selection: Optional[np.ndarray] = None
        self._composite: Optional[np.ndarray] = None
        self._dirty = True

    @classmethod
    def new(cls, size: tuple[int, int], color: Color = WHITE) -> "Document":
        """
        Create a new document with a single background layer.

        :param size: A tuple containing (width, height) in pixels.
        :param color: Background fill color. Default is opaque white.
        """
        width, height = size
        return cls(width, height, [Layer.new_raster(width, height, "Background", color)])

    @classmethod
    def frombuffer(cls, array: np.ndarray, name: str = "Background") -> "Document":
        """Create a document whose single layer holds a copy of ``array``."""
        if array.ndim != 3 or array.shape[2] != 4:
            raise ValueError("Expected an RGBA array, got shape %s" % (array.shape,))
        buffer = np.array(array, dtype=np.uint8)
        layer = Layer(name=name, data=RasterData(buffer))
        return cls(buffer.shape[1], buffer.shape[0], [layer])

    @classmethod
    def frompil(cls, image: Image.Image) -> "Document":
        """Create a document from a PIL Image."""
        return cls.frombuffer(pil_io.frompil(image))

    @classmethod
    def open(cls, fp: Union[BinaryIO, str, bytes, os.PathLike]) -> "Document":
        """
        Open an image file as a single-layer document.

        :param fp: filename or file-like object.
        :raises OSError: if the image cannot be read or decoded.
        """
        if isinstance(fp, (str, bytes, os.PathLike)):
            array = pil_io.read(fp)
        else:
            array = pil_io.decode(fp.read())
        return cls.frombuffer(array)

    def save(
        self, fp: Union[str, bytes, os.PathLike], format: Optional[str] = None
    ) -> None:
        """
        Save the flattened composite.

        :param fp: filename.
        :param format: Pillow format name, guessed from the extension by default.
        """
        pil_io.encode(self.composite(), fp, format=format)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def size(self) -> tuple[int, int]:
        """(width, height) tuple."""
        return self._width, self._height

    @property
    def layers(self) -> tuple[Layer, ...]:
        """Layers from bottom to top. Use the mutators to change the stack."""
        return tuple(self._layers)

    @property
    def active_layer(self) -> int:
        """Index of the layer tools paint on."""
        return self._active_layer

    def __len__(self) -> int:
        return self._layers.__len__()

    def __iter__(self) -> Iterator[Layer]:
        return self._layers.__iter__()

    def __getitem__(self, key: int) -> Layer:
        return self._layers.__getitem__(key)

    def __repr__(self) -> str:
        return "%s(size=%dx%d layers=%d active=%d)" % (
            self.__class__.__name__,
            self._width,
            self._height,
            len(self._layers),
            self._active_layer,
        )

    def is_dirty(self) -> bool:
        """Whether the composite must be recomputed before the next read."""
        return self._dirty

    def mark_dirty(self) -> None:
        """Invalidate the composite cache."""
        self._dirty = True

    def composite(self) -> np.ndarray:
        """
        Flattened RGBA framebuffer, recomputed only when dirty.

        The returned array is read-only and owned by the document.
        """
        if self._dirty or self._composite is None:
            logger.debug("Recompositing %s" % self)
            result = composite(self.size, self._layers)
            result.flags.writeable = False
            self._composite = result
            self._dirty = False
        return self._composite

    def get_layer(self, index: int) -> Optional[Layer]:
        """Layer at ``index``, or `None` if the index is out of range."""
        if 0 <= index < len(self._layers):
            return self._layers[index]
        return None

    def active(self) -> Optional[Layer]:
        return self.get_layer(self._active_layer)

    def active_buffer(self) -> Optional[np.ndarray]:
        """Buffer of the active layer, `None` when it is a vector layer."""
        layer = self.active()
        if layer is None:
            return None
        return get_buffer(layer)

    def add_layer(self, layer: Layer) -> int:
        """
        Add a layer on top of the stack and make it active.

        :return: index of the new layer.
        """
        self.insert_layer(len(self._layers), layer)
        return self._active_layer

    def insert_layer(self, index: int, layer: Layer) -> None:
        """
        Insert a layer at ``index`` and make it active.

        :raises TypeError: If the provided object is not a Layer instance.
        """
        if not isinstance(layer, Layer):
            raise TypeError(f"Expected Layer instance, got {type(layer).__name__}")
        if any(item is layer for item in self._layers):
            raise ValueError(f"Layer {layer} is already in {self}")
        buffer = get_buffer(layer)
        if buffer is not None and buffer.shape[:2] != (self._height, self._width):
            logger.debug("Reallocating %s to %dx%d" % (layer, self._width, self._height))
            set_buffer(layer, resized(buffer, self._width, self._height))
        index = max(0, min(index, len(self._layers)))
        self._layers.insert(index, layer)
        self._active_layer = index
        self.mark_dirty()

    def move_layer(self, index: int, new_index: int) -> None:
        """Move the layer at ``index`` to ``new_index``. The active layer follows it."""
        layer = self.get_layer(index)
        if layer is None or not (0 <= new_index < len(self._layers)):
            logger.warning("Ignore invalid layer move %d -> %d" % (index, new_index))
            return
        active = self._layers[self._active_layer]
        self._layers.insert(new_index, self._layers.pop(index))
        self._active_layer = self._layers.index(active)
        self.mark_dirty()

    def set_active_layer(self, index: int) -> None:
        if self.get_layer(index) is None:
            logger.warning("Ignore invalid active layer %d" % index)
            return
        self._active_layer = index

    def _edit(self, index: int, name: str, value: object) -> None:
        layer = self.get_layer(index)
        if layer is None:
            logger.warning("Ignore %s change on invalid layer %d" % (name, index))
            return
        setattr(layer, name, value)
        self.mark_dirty()

    def set_visible(self, index: int, value: bool) -> None:
        self._edit(index, "visible", bool(value))

    def set_locked(self, index: int, value: bool) -> None:
        self._edit(index, "locked", bool(value))

    def set_alpha_locked(self, index: int, value: bool) -> None:
        self._edit(index, "alpha_locked", bool(value))

    def set_clipped(self, index: int, value: bool) -> None:
        self._edit(index, "clipped", bool(value))

    def set_opacity(self, index: int, value: float) -> None:
        """
        :raises ValueError: If the opacity is out of [0.0, 1.0].
        """
        self._edit(index, "opacity", value)

    def set_blend_mode(self, index: int, value: Union[str, BlendMode]) -> None:
        self._edit(index, "blend_mode", BlendMode(value))

    def rename_layer(self, index: int, name: str) -> None:
        self._edit(index, "name", str(name))

    def set_selection(self, mask: Optional[np.ndarray]) -> None:
        """Replace the selection. `None` deselects."""
        if mask is not None and mask.shape != (self._height, self._width):
            raise ValueError(
                "Selection shape %s does not match the canvas %dx%d"
                % (mask.shape, self._width, self._height)
            )
        self.selection = mask

    def deselect(self) -> None:
        self.selection = None

    def resize(self, width: int, height: int) -> None:
        """
        Resize the canvas, keeping the top-left region of every layer.

        New area is transparent. The selection is cropped or padded the same
        way.
        """
        if width < 1 or height < 1:
            raise ValueError("Invalid canvas size: %dx%d" % (width, height))
        if (width, height) == self.size:
            return
        logger.debug("Resizing %s to %dx%d" % (self, width, height))
        for layer in self._layers:
            buffer = get_buffer(layer)
            if buffer is not None:
                set_buffer(layer, resized(buffer, width, height))
        if self.selection is not None:
            self.selection = resized(self.selection, width, height)
        self._width = width
        self._height = height
        self.mark_dirty()
