"""
PIL IO module.

Image codec adapter: every buffer entering or leaving arspaint goes through
Pillow here and is normalized to straight RGBA ``uint8`` arrays.
"""

import io
import logging
import os
from typing import Optional, Union

import numpy as np
from PIL import Image

logger = logging.getLogger(__name__)

PathLike = Union[str, bytes, os.PathLike]


def frompil(image: Image.Image) -> np.ndarray:
    """Convert a PIL Image of any mode into an RGBA ``uint8`` array."""
    if not isinstance(image, Image.Image):
        raise TypeError(f"Expected PIL Image, got {type(image).__name__}")
    if image.mode != "RGBA":
        logger.debug("Converting %s image to RGBA" % image.mode)
        image = image.convert("RGBA")
    return np.array(image, dtype=np.uint8)


def topil(array: np.ndarray) -> Image.Image:
    """Convert an RGBA ``uint8`` array, or a 2D selection mask, into a PIL Image.

    The PIL mode is ``RGBA`` for 3D arrays and ``L`` for 2D arrays.
    """
    return Image.fromarray(np.ascontiguousarray(array, dtype=np.uint8))


def decode(data: bytes) -> np.ndarray:
    """
    Decode encoded image bytes.

    :raises PIL.UnidentifiedImageError: if the data is not a known format.
    :return: RGBA array of shape ``(height, width, 4)``.
    """
    with Image.open(io.BytesIO(data)) as image:
        image.load()
        return frompil(image)


def read(fp: PathLike) -> np.ndarray:
    """
    Read and decode an image file.

    :raises OSError: if the file cannot be read or decoded.
    :return: RGBA array of shape ``(height, width, 4)``.
    """
    with Image.open(fp) as image:
        image.load()
        logger.debug("Read %s image %dx%d" % (image.format, image.width, image.height))
        return frompil(image)


def encode(array: np.ndarray, fp: PathLike, format: Optional[str] = None) -> None:
    """
    Encode an RGBA array to a file.

    Formats without alpha support (JPEG, BMP) receive the RGB channels.

    :param format: Pillow format name. Default is guessed from the file name.
    :raises OSError: if the file cannot be written.
    :raises ValueError: if the format cannot be determined.
    """
    image = topil(array)
    target = format or Image.registered_extensions().get(
        os.path.splitext(os.fsdecode(fp))[1].lower()
    )
    if target in ("JPEG", "BMP"):
        image = image.convert("RGB")
    image.save(fp, format=format)
    logger.debug("Wrote %s image to %s" % (target, os.fsdecode(fp)))


def resize_nearest(array: np.ndarray, width: int, height: int) -> np.ndarray:
    """Resample an RGBA array to ``(width, height)`` with nearest neighbor."""
    if array.shape[1] == width and array.shape[0] == height:
        return array.copy()
    image = topil(array).resize((width, height), Image.Resampling.NEAREST)
    return np.array(image, dtype=np.uint8)
