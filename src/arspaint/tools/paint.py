"""
Raster stamping primitives used by the stroke tools.

Positions are truncated toward zero before rasterizing. Every primitive
returns the bounding box it touched, or `None` when nothing was touched.
Texture boxes may extend past the buffer edges.
"""

import math
from typing import Iterator, Optional

import numpy as np

from arspaint.api.layers import Color, Point
from arspaint.composite.utils import BBox


def segment_points(start: Point, end: Point, step: float = 1.0) -> Iterator[Point]:
    """
    Evenly spaced points from ``start`` to ``end``, both ends included.

    The segment is split into ``max(distance / step, 1)`` intervals.
    """
    distance = math.hypot(end[0] - start[0], end[1] - start[1])
    steps = int(max(distance / step, 1.0))
    for i in range(steps + 1):
        t = i / steps
        yield (
            start[0] + (end[0] - start[0]) * t,
            start[1] + (end[1] - start[1]) * t,
        )


def ellipse_points(start: Point, end: Point) -> Iterator[Point]:
    """Points around the ellipse inscribed in the box of two corners."""
    cx = (start[0] + end[0]) / 2.0
    cy = (start[1] + end[1]) / 2.0
    rx = abs(end[0] - start[0]) / 2.0
    ry = abs(end[1] - start[1]) / 2.0
    # 2 pi sqrt((a^2 + b^2) / 2) approximates the circumference.
    circumference = 2.0 * math.pi * math.sqrt((rx * rx + ry * ry) / 2.0)
    steps = int(max(circumference, 10.0))
    for i in range(steps + 1):
        t = i / steps * 2.0 * math.pi
        yield (cx + rx * math.cos(t), cy + ry * math.sin(t))


def draw_circle(
    layer: np.ndarray, position: Point, color: Color, size: float
) -> Optional[BBox]:
    """
    Fill a disc of radius ``int(size)`` centered at ``position``.

    A pixel ``(cx, cy)`` is covered when its squared distance to the
    truncated center is at most ``r * r``.
    """
    height, width = layer.shape[:2]
    x, y, r = int(position[0]), int(position[1]), int(size)
    min_x, max_x = max(x - r, 0), min(x + r, width - 1)
    min_y, max_y = max(y - r, 0), min(y + r, height - 1)
    if min_x > max_x or min_y > max_y:
        return None

    dy, dx = np.ogrid[min_y - y : max_y - y + 1, min_x - x : max_x - x + 1]
    disc = dx * dx + dy * dy <= r * r
    layer[min_y : max_y + 1, min_x : max_x + 1][disc] = color
    return (min_x, min_y, max_x + 1, max_y + 1)


def draw_texture(
    layer: np.ndarray,
    texture: np.ndarray,
    position: Point,
    color: Color,
    size: float,
) -> Optional[BBox]:
    """
    Stamp ``texture`` tinted with ``color`` into a ``2 * size`` square.

    The texture is sampled with nearest neighbor. Stamp alpha is the product
    of the texture alpha and the color alpha, and a pixel is only written
    when the stamp alpha exceeds the alpha already there, so overlapping
    stamps keep their maximum.
    """
    height, width = layer.shape[:2]
    th, tw = texture.shape[:2]
    extent = int(size * 2.0)
    start_x = int(position[0] - size)
    start_y = int(position[1] - size)
    bbox = (
        start_x,
        start_y,
        start_x + int(math.ceil(size * 2.0)),
        start_y + int(math.ceil(size * 2.0)),
    )
    if extent <= 0:
        return bbox

    scale_x = size * 2.0 / tw
    scale_y = size * 2.0 / th
    offsets = np.arange(extent)
    tx = (offsets / scale_x).astype(np.int64)
    ty = (offsets / scale_y).astype(np.int64)
    cols = start_x + offsets
    rows = start_y + offsets
    sx = np.flatnonzero((tx < tw) & (cols >= 0) & (cols < width))
    sy = np.flatnonzero((ty < th) & (rows >= 0) & (rows < height))
    if sx.size == 0 or sy.size == 0:
        return bbox

    # Target columns and rows are contiguous once clamped.
    x0, x1 = start_x + sx[0], start_x + sx[-1] + 1
    y0, y1 = start_y + sy[0], start_y + sy[-1] + 1
    tex_alpha = texture[ty[sy]][:, tx[sx], 3].astype(np.float64) / 255.0
    alpha = tex_alpha * (color[3] / 255.0)

    region = layer[y0:y1, x0:x1]
    index = (alpha > 0.0) & (alpha > region[:, :, 3] / 255.0)
    stamp = np.empty(region.shape, dtype=np.uint8)
    stamp[:, :, :3] = color[:3]
    stamp[:, :, 3] = (alpha * 255.0).astype(np.uint8)
    region[index] = stamp[index]
    return bbox
