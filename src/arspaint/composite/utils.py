"""Utility functions for composite operations."""

from typing import Optional

import numpy as np
from numpy.typing import NDArray

BBox = tuple[int, int, int, int]

EMPTY_BBOX: BBox = (0, 0, 0, 0)


def divide(a: NDArray[np.floating], b: NDArray[np.floating]) -> NDArray[np.floating]:
    """Safe division for color ops."""
    with np.errstate(divide="ignore", invalid="ignore"):
        c = np.true_divide(a, b)
        c[~np.isfinite(c)] = 0.0
    return c


def clip(x: NDArray[np.floating]) -> NDArray[np.floating]:
    """Clip between [0, 255]."""
    return np.clip(x, 0.0, 255.0)


def intersect(a: BBox, b: BBox) -> BBox:
    """Calculate intersection of two bounding boxes."""
    inter = (max(a[0], b[0]), max(a[1], b[1]), min(a[2], b[2]), min(a[3], b[3]))
    if inter[0] >= inter[2] or inter[1] >= inter[3]:
        return EMPTY_BBOX
    return inter


def union(a: Optional[BBox], b: BBox) -> BBox:
    """Smallest bounding box containing both boxes. ``None`` is the empty box."""
    if a is None:
        return b
    return (min(a[0], b[0]), min(a[1], b[1]), max(a[2], b[2]), max(a[3], b[3]))


def is_empty(bbox: Optional[BBox]) -> bool:
    return bbox is None or bbox[0] >= bbox[2] or bbox[1] >= bbox[3]


def canvas_bbox(array: np.ndarray) -> BBox:
    """Bounding box covering a whole buffer."""
    return (0, 0, array.shape[1], array.shape[0])


def paste(target: np.ndarray, values: np.ndarray, x: int, y: int) -> BBox:
    """Copy ``values`` into ``target`` at ``(x, y)``, clipped to the target.

    Pixels falling outside the target are silently dropped.

    :return: the bounding box actually written, in target coordinates.
    """
    bbox = (x, y, x + values.shape[1], y + values.shape[0])
    inter = intersect(canvas_bbox(target), bbox)
    if inter == EMPTY_BBOX:
        return inter
    v = (inter[0] - x, inter[1] - y, inter[2] - x, inter[3] - y)
    target[inter[1] : inter[3], inter[0] : inter[2]] = values[v[1] : v[3], v[0] : v[2]]
    return inter


def resized(values: np.ndarray, width: int, height: int) -> np.ndarray:
    """Crop or pad an array to ``(height, width)`` keeping the top-left corner.

    New area is filled with zeros.
    """
    shape = (height, width) + values.shape[2:]
    view = np.zeros(shape, dtype=values.dtype)
    paste(view, values, 0, 0)
    return view
