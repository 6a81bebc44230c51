"""Composite implementation for layer rendering and blending."""

import logging
from typing import Optional, Sequence

import numpy as np

from arspaint.api.layers import Layer, get_buffer
from arspaint.composite import utils
from arspaint.composite.blend import BLEND_FUNC, normal
from arspaint.constants import BlendMode

logger = logging.getLogger(__name__)


def composite(size: tuple[int, int], layers: Sequence[Layer]) -> np.ndarray:
    """
    Composite layers and return an RGBA framebuffer.

    Layers are blended bottom (index 0) to top into an all-transparent
    accumulator of the given size.

    Args:
        size: Canvas size as ``(width, height)``
        layers: Ordered layers, bottom first

    Returns:
        ``uint8`` array of shape ``(height, width, 4)``

    Note:
        - Hidden layers are skipped
        - Vector layers are not rendered
        - Tone layers are blended as plain raster layers
        - A clipped layer is masked by the alpha of the layer directly
          below it, unless that layer is a vector layer
    """
    width, height = size
    compositor = Compositor(width, height)
    for index, layer in enumerate(layers):
        compositor.apply(layer, layers[index - 1] if index > 0 else None)
    return compositor.finish()


def blend(
    dest: np.ndarray,
    src: np.ndarray,
    opacity: float,
    blend_mode: BlendMode,
    mask: Optional[np.ndarray] = None,
) -> None:
    """
    Blend ``src`` over ``dest`` in place.

    The effective source alpha is ``src.a * opacity * mask.a``. Only the
    region common to all given buffers is touched, and destination pixels
    whose effective alpha is zero are left unchanged.

    Args:
        dest: RGBA ``uint8`` backdrop, modified in place
        src: RGBA ``uint8`` source
        opacity: Layer opacity in [0.0, 1.0]
        blend_mode: :py:class:`~arspaint.constants.BlendMode`
        mask: Optional RGBA ``uint8`` buffer whose alpha gates the source
    """
    height = min(dest.shape[0], src.shape[0])
    width = min(dest.shape[1], src.shape[1])
    if mask is not None:
        height = min(height, mask.shape[0])
        width = min(width, mask.shape[1])
    if width <= 0 or height <= 0:
        return

    view = dest[:height, :width]
    color_b = view[:, :, :3].astype(np.float64)
    alpha_b = view[:, :, 3:4].astype(np.float64) / 255.0
    color_s = src[:height, :width, :3].astype(np.float64)
    alpha_s = src[:height, :width, 3:4].astype(np.float64) / 255.0 * opacity
    if mask is not None:
        alpha_s = alpha_s * (mask[:height, :width, 3:4].astype(np.float64) / 255.0)

    blend_fn = BLEND_FUNC.get(blend_mode, normal)
    color_t = blend_fn(color_b, color_s)

    alpha = alpha_s + alpha_b * (1.0 - alpha_s)
    color = utils.clip(
        utils.divide(color_t * alpha_s + color_b * alpha_b * (1.0 - alpha_s), alpha)
    )

    index = alpha_s[:, :, 0] > 0.0
    result = np.concatenate((color, utils.clip(alpha * 255.0)), axis=2)
    view[index] = result[index].astype(np.uint8)


class Compositor(object):
    """Composite context.

    Example::

        compositor = Compositor(width, height)
        for index, layer in enumerate(layers):
            compositor.apply(layer, layers[index - 1] if index else None)
        framebuffer = compositor.finish()
    """

    def __init__(self, width: int, height: int):
        self._buffer = np.zeros((height, width, 4), dtype=np.uint8)

    @property
    def width(self) -> int:
        return self._buffer.shape[1]

    @property
    def height(self) -> int:
        return self._buffer.shape[0]

    def apply(self, layer: Layer, below: Optional[Layer] = None) -> None:
        logger.debug("Compositing %s" % layer)

        if not layer.visible:
            logger.debug("Ignore hidden %s" % layer)
            return
        source = get_buffer(layer)
        if source is None:
            logger.debug("Ignore vector %s" % layer)
            return

        mask = None
        if layer.clipped and below is not None:
            mask = get_buffer(below)
        blend(self._buffer, source, layer.opacity, layer.blend_mode, mask)

    def finish(self) -> np.ndarray:
        return self._buffer
