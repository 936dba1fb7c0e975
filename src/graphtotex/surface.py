"""Height-field sampling of surfaces ``z = f(x, y)``."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Tuple

import numpy as np

from graphtotex import config
from graphtotex.curve import clamp_samples

logger = logging.getLogger(__name__)

Vec3 = Tuple[float, float, float]
Range = Tuple[float, float]
SurfaceFunction = Callable[[float, float], Optional[float]]


def surface_resolution(samples: float, k: float = config.SURFACE_RESOLUTION_FACTOR) -> int:
    """Cells per axis: ``clamp(round(sqrt(samples) * k), 12, 80)``."""

    return clamp_samples(
        math.sqrt(max(0.0, samples)) * k,
        config.MIN_SURFACE_RESOLUTION,
        config.MAX_SURFACE_RESOLUTION,
    )


@dataclass(frozen=True, eq=False)
class SurfaceMesh:
    """A sampled height field.

    ``z[yi, xi]`` is the height over ``(xs[xi], ys[yi])`` or ``NaN`` where
    the surface is undefined or outside the z-bounds.
    """

    xs: np.ndarray
    ys: np.ndarray
    z: np.ndarray

    @property
    def resolution(self) -> int:
        return len(self.xs) - 1

    def vertex(self, yi: int, xi: int) -> Optional[Vec3]:
        value = self.z[yi, xi]
        if np.isnan(value):
            return None
        return float(self.xs[xi]), float(self.ys[yi]), float(value)

    def defined_count(self) -> int:
        return int(np.count_nonzero(~np.isnan(self.z)))

    def faces(self) -> Iterator[Tuple[Vec3, Vec3, Vec3, Vec3]]:
        """Quads ``(p00, p10, p11, p01)`` whose four corners are all defined."""

        n = self.resolution
        for yi in range(n):
            for xi in range(n):
                p00 = self.vertex(yi, xi)
                p10 = self.vertex(yi, xi + 1)
                p11 = self.vertex(yi + 1, xi + 1)
                p01 = self.vertex(yi + 1, xi)
                if p00 and p10 and p11 and p01:
                    yield p00, p10, p11, p01

    def edges(self) -> Iterator[Tuple[Vec3, Vec3]]:
        """Wireframe edges along x (row by row) then along y (column by column)."""

        n = self.resolution
        for yi in range(n + 1):
            for xi in range(n):
                a = self.vertex(yi, xi)
                b = self.vertex(yi, xi + 1)
                if a and b:
                    yield a, b

        for xi in range(n + 1):
            for yi in range(n):
                a = self.vertex(yi, xi)
                b = self.vertex(yi + 1, xi)
                if a and b:
                    yield a, b

    def rows(self) -> Iterator[List[Tuple[float, float, Optional[float]]]]:
        """Grid rows (constant y) as ``(x, y, z or None)`` triples."""

        for yi, y in enumerate(self.ys):
            row = []
            for xi, x in enumerate(self.xs):
                value = self.z[yi, xi]
                row.append((float(x), float(y), None if np.isnan(value) else float(value)))
            yield row


def sample_surface(evaluator: SurfaceFunction, x_range: Range, y_range: Range,
                   resolution: int, z_range: Range,
                   max_abs_z: float = config.SURFACE_MAX_ABS_Z) -> SurfaceMesh:
    """Evaluate ``f`` on an ``(r+1) x (r+1)`` grid spanning the given ranges."""

    x_min, x_max = x_range
    y_min, y_max = y_range
    z_min, z_max = z_range

    x_step = (x_max - x_min) / resolution
    y_step = (y_max - y_min) / resolution
    xs = np.array([x_min + i * x_step for i in range(resolution + 1)])
    ys = np.array([y_min + i * y_step for i in range(resolution + 1)])
    z = np.full((resolution + 1, resolution + 1), np.nan)

    for yi, y in enumerate(ys):
        for xi, x in enumerate(xs):
            value = evaluator(float(x), float(y))
            if value is None or not math.isfinite(value) or abs(value) > max_abs_z:
                continue
            if value < z_min or value > z_max:
                continue
            z[yi, xi] = value

    mesh = SurfaceMesh(xs=xs, ys=ys, z=z)
    logger.debug("surface grid %dx%d, %d defined vertices", resolution, resolution, mesh.defined_count())
    return mesh


__all__ = [
    "SurfaceMesh",
    "surface_resolution",
    "sample_surface",
]
