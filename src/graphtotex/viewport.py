"""Immutable 2D viewport and the pure transforms used for pan, zoom and ticks."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Tuple

from graphtotex import config


@dataclass(frozen=True)
class Viewport:
    """Visible world rectangle, ``x_min < x_max`` and ``y_min < y_max``."""

    x_min: float = -config.DEFAULT_BOUND
    x_max: float = config.DEFAULT_BOUND
    y_min: float = -config.DEFAULT_BOUND
    y_max: float = config.DEFAULT_BOUND

    @property
    def x_span(self) -> float:
        return self.x_max - self.x_min

    @property
    def y_span(self) -> float:
        return self.y_max - self.y_min


DEFAULT_VIEWPORT = Viewport()


def sanitize_axis(lo: float, hi: float) -> Tuple[float, float]:
    """Return a valid ``(min, max)`` pair with the span clamped about its centre."""

    if not math.isfinite(lo) or not math.isfinite(hi):
        return -config.DEFAULT_BOUND, config.DEFAULT_BOUND

    span = abs(hi - lo)
    center = (lo + hi) / 2
    span = min(config.MAX_SPAN, max(config.MIN_SPAN, span))
    return center - span / 2, center + span / 2


def clamp_viewport(viewport: Viewport) -> Viewport:
    x_min, x_max = sanitize_axis(viewport.x_min, viewport.x_max)
    y_min, y_max = sanitize_axis(viewport.y_min, viewport.y_max)
    return Viewport(x_min, x_max, y_min, y_max)


def screen_to_world(px: float, py: float, width: float, height: float,
                    viewport: Viewport) -> Tuple[float, float]:
    """Map pixel coordinates (origin top-left, y down) to world coordinates."""

    x = viewport.x_min + (px / width) * viewport.x_span
    y = viewport.y_max - (py / height) * viewport.y_span
    return x, y


def world_to_screen(x: float, y: float, width: float, height: float,
                    viewport: Viewport) -> Tuple[float, float]:
    """Map world coordinates to pixel coordinates (origin top-left, y down)."""

    px = (x - viewport.x_min) / viewport.x_span * width
    py = (viewport.y_max - y) / viewport.y_span * height
    return px, py


def pan_by_pixels(viewport: Viewport, dx: float, dy: float,
                  width: float, height: float) -> Viewport:
    """Shift the viewport so the content follows a drag of ``(dx, dy)`` pixels."""

    x_shift = dx / width * viewport.x_span
    y_shift = dy / height * viewport.y_span
    return clamp_viewport(Viewport(
        viewport.x_min - x_shift,
        viewport.x_max - x_shift,
        viewport.y_min + y_shift,
        viewport.y_max + y_shift,
    ))


def zoom_at(viewport: Viewport, world_x: float, world_y: float,
            zoom_factor: float) -> Viewport:
    """Scale the viewport about a fixed world point (factor < 1 zooms in)."""

    return zoom_at_by_axis(viewport, world_x, world_y, zoom_factor, zoom_factor)


def zoom_at_by_axis(viewport: Viewport, world_x: float, world_y: float,
                    zoom_factor_x: float, zoom_factor_y: float) -> Viewport:
    return clamp_viewport(Viewport(
        world_x + (viewport.x_min - world_x) * zoom_factor_x,
        world_x + (viewport.x_max - world_x) * zoom_factor_x,
        world_y + (viewport.y_min - world_y) * zoom_factor_y,
        world_y + (viewport.y_max - world_y) * zoom_factor_y,
    ))


def get_nice_tick_step(value_range: float, max_ticks: int) -> float:
    """Return a 1/2/5 x 10^n step giving at most about ``max_ticks`` ticks."""

    if not math.isfinite(value_range) or value_range <= 0 or max_ticks <= 0:
        return 1.0

    rough = value_range / max_ticks
    pow10 = 10 ** math.floor(math.log10(rough))
    normalized = rough / pow10

    if normalized <= 1:
        return pow10
    if normalized <= 2:
        return 2 * pow10
    if normalized <= 5:
        return 5 * pow10
    return 10 * pow10


def build_ticks(lo: float, hi: float, max_ticks: int) -> List[float]:
    """Tick positions at multiples of the nice step within ``[lo, hi]``."""

    step = get_nice_tick_step(hi - lo, max_ticks)
    ticks = []
    t = math.ceil(lo / step) * step
    while t <= hi + step * 0.5:
        ticks.append(round(t, 10))
        t += step
    return ticks


__all__ = [
    "Viewport",
    "DEFAULT_VIEWPORT",
    "clamp_viewport",
    "screen_to_world",
    "world_to_screen",
    "pan_by_pixels",
    "zoom_at",
    "zoom_at_by_axis",
    "get_nice_tick_step",
    "build_ticks",
]
