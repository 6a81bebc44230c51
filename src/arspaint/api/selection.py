"""
Selection mask module.

A selection is an optional single-channel ``uint8`` array of shape
``(height, width)`` where 255 marks selected pixels and 0 the rest. No
intermediate values are produced.
"""

import logging
from typing import Optional, Sequence

import numpy as np

from arspaint.composite.utils import BBox, intersect
from arspaint.constants import SELECTED, SELECTION_TINT

logger = logging.getLogger(__name__)


def new_mask(width: int, height: int) -> np.ndarray:
    """Empty mask with nothing selected."""
    return np.zeros((height, width), dtype=np.uint8)


def rect_mask(width: int, height: int, bbox: BBox) -> Optional[np.ndarray]:
    """
    Mask selecting the pixels of ``bbox`` clamped to the canvas.

    :return: the mask, or `None` when the clamped box has no area.
    """
    inter = intersect((0, 0, width, height), bbox)
    if inter[0] >= inter[2] or inter[1] >= inter[3]:
        return None
    mask = new_mask(width, height)
    mask[inter[1] : inter[3], inter[0] : inter[2]] = SELECTED
    return mask


def polygon_mask(
    width: int, height: int, points: Sequence[tuple[float, float]]
) -> np.ndarray:
    """
    Rasterize the interior of a polygon with the even-odd rule.

    Every pixel ``(x, y)`` of the polygon bounding box, clamped to the
    canvas, is tested with a ray cast towards +x. The box end coordinates are
    exclusive.
    """
    mask = new_mask(width, height)
    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    start_x, end_x = max(int(min(xs)), 0), min(max(int(max(xs)), 0), width)
    start_y, end_y = max(int(min(ys)), 0), min(max(int(max(ys)), 0), height)
    if start_x >= end_x or start_y >= end_y:
        return mask

    px, py = np.meshgrid(
        np.arange(start_x, end_x, dtype=np.float64),
        np.arange(start_y, end_y, dtype=np.float64),
    )
    inside = np.zeros(px.shape, dtype=bool)
    j = len(points) - 1
    for i in range(len(points)):
        xi, yi = points[i]
        xj, yj = points[j]
        crosses = (yi > py) != (yj > py)
        if yj != yi:
            with np.errstate(divide="ignore", invalid="ignore"):
                edge_x = (xj - xi) * (py - yi) / (yj - yi) + xi
            inside ^= crosses & (px < edge_x)
        j = i
    mask[start_y:end_y, start_x:end_x][inside] = SELECTED
    return mask


def bbox(mask: np.ndarray) -> Optional[BBox]:
    """
    Tight bounding box of the selected pixels.

    :return: ``(left, top, right, bottom)``, or `None` if nothing is selected.
    """
    rows = np.flatnonzero(mask.any(axis=1))
    if rows.size == 0:
        return None
    cols = np.flatnonzero(mask.any(axis=0))
    return (int(cols[0]), int(rows[0]), int(cols[-1]) + 1, int(rows[-1]) + 1)


def selection_overlay(mask: Optional[np.ndarray]) -> Optional[np.ndarray]:
    """RGBA tint a host draws over selected pixels."""
    if mask is None:
        return None
    overlay = np.zeros(mask.shape + (4,), dtype=np.uint8)
    overlay[mask > 0] = SELECTION_TINT
    return overlay
