"""Marching-squares extraction of the zero set of ``g(x, y)``."""

from __future__ import annotations

import logging
import math
from typing import Callable, List, Optional

import numpy as np

from graphtotex import config
from graphtotex.curve import Point, Segment, clamp_samples
from graphtotex.viewport import Viewport

logger = logging.getLogger(__name__)

FieldFunction = Callable[[float, float], Optional[float]]


def contour_resolution(samples: float) -> int:
    """Cells per axis: ``clamp(round(sqrt(max(1, samples)) * 2.2), 30, 180)``."""

    return clamp_samples(
        math.sqrt(max(1.0, samples)) * config.CONTOUR_RESOLUTION_FACTOR,
        config.MIN_CONTOUR_RESOLUTION,
        config.MAX_CONTOUR_RESOLUTION,
    )


def sample_field(evaluator: FieldFunction, viewport: Viewport, resolution: int,
                 max_abs_value: float = config.CONTOUR_MAX_ABS_VALUE) -> np.ndarray:
    """Evaluate ``g`` on the ``(r+1) x (r+1)`` vertex grid, rows indexed by y.

    Undefined vertices (``None``, non-finite, or beyond ``max_abs_value``)
    hold ``NaN``.
    """

    dx = (viewport.x_max - viewport.x_min) / resolution
    dy = (viewport.y_max - viewport.y_min) / resolution
    values = np.full((resolution + 1, resolution + 1), np.nan)

    for iy in range(resolution + 1):
        y = viewport.y_min + iy * dy
        for ix in range(resolution + 1):
            x = viewport.x_min + ix * dx
            value = evaluator(x, y)
            if value is not None and math.isfinite(value) and abs(value) <= max_abs_value:
                values[iy, ix] = value

    return values


def edge_intersection(p1: Point, v1: float, p2: Point, v2: float) -> Optional[Point]:
    """Zero crossing on the edge ``p1 -> p2`` given the field values at its ends."""

    if not math.isfinite(v1) or not math.isfinite(v2):
        return None

    tol = config.ZERO_TOLERANCE
    if abs(v1) < tol and abs(v2) < tol:
        return None
    if abs(v1) < tol:
        return p1
    if abs(v2) < tol:
        return p2

    if (v1 > 0 and v2 > 0) or (v1 < 0 and v2 < 0):
        return None

    t = v1 / (v1 - v2)
    if not math.isfinite(t) or t < 0 or t > 1:
        return None

    return Point(p1.x + t * (p2.x - p1.x), p1.y + t * (p2.y - p1.y))


def sample_implicit_contours(evaluator: FieldFunction, viewport: Viewport, samples: float,
                             max_abs_value: float = config.CONTOUR_MAX_ABS_VALUE) -> List[Segment]:
    """Approximate ``g(x, y) = 0`` over the viewport by 2-point segments.

    Each cell's edges are visited bottom, right, top, left.  Two crossings
    give one segment.  Four crossings (a saddle) are resolved by the sign
    of ``g`` at the cell centre: positive joins crossings (0, 3) and (1, 2),
    otherwise (0, 1) and (2, 3); an undefined centre leaves the cell empty.
    """

    resolution = contour_resolution(samples)
    values = sample_field(evaluator, viewport, resolution, max_abs_value)
    dx = (viewport.x_max - viewport.x_min) / resolution
    dy = (viewport.y_max - viewport.y_min) / resolution

    segments: List[Segment] = []

    for iy in range(resolution):
        y0 = viewport.y_min + iy * dy
        y1 = y0 + dy

        for ix in range(resolution):
            x0 = viewport.x_min + ix * dx
            x1 = x0 + dx

            v00 = float(values[iy, ix])
            v10 = float(values[iy, ix + 1])
            v11 = float(values[iy + 1, ix + 1])
            v01 = float(values[iy + 1, ix])

            crossings = [
                edge_intersection(Point(x0, y0), v00, Point(x1, y0), v10),  # bottom
                edge_intersection(Point(x1, y0), v10, Point(x1, y1), v11),  # right
                edge_intersection(Point(x1, y1), v11, Point(x0, y1), v01),  # top
                edge_intersection(Point(x0, y1), v01, Point(x0, y0), v00),  # left
            ]
            points = [p for p in crossings if p is not None]

            if len(points) == 2:
                segments.append([points[0], points[1]])
            elif len(points) == 4:
                center = evaluator((x0 + x1) / 2, (y0 + y1) / 2)
                if center is None or not math.isfinite(center):
                    continue
                if center > 0:
                    segments.append([points[0], points[3]])
                    segments.append([points[1], points[2]])
                else:
                    segments.append([points[0], points[1]])
                    segments.append([points[2], points[3]])

    logger.debug("contour grid %dx%d produced %d segment(s)", resolution, resolution, len(segments))
    return segments


__all__ = [
    "contour_resolution",
    "sample_field",
    "edge_intersection",
    "sample_implicit_contours",
]
