"""Tuning constants, display settings and environment configuration."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

# --- Curve sampling ---
MIN_CURVE_SAMPLES = 32
MAX_CURVE_SAMPLES = 5000
DEFAULT_SAMPLES = 500
CURVE_MAX_ABS_Y = 1e6
# A jump larger than this many viewport heights splits a curve
JUMP_FACTOR = 8.0
MIN_Y_SPAN = 1e-6

# --- Implicit contours ---
MIN_CONTOUR_RESOLUTION = 30
MAX_CONTOUR_RESOLUTION = 180
CONTOUR_RESOLUTION_FACTOR = 2.2
CONTOUR_MAX_ABS_VALUE = 1e8
ZERO_TOLERANCE = 1e-12

# --- Surfaces ---
MIN_SURFACE_RESOLUTION = 12
MAX_SURFACE_RESOLUTION = 80
SURFACE_RESOLUTION_FACTOR = 1.35
SURFACE_MAX_ABS_Z = 1e7

# --- Viewports ---
DEFAULT_BOUND = 10.0
MIN_SPAN = 1e-3
MAX_SPAN = 1e6
MIN_DISTANCE = 1.35
MAX_DISTANCE = 18.0
MIN_PITCH = -1.45
MAX_PITCH = 1.45
DEFAULT_YAW = 0.95
DEFAULT_PITCH = -0.55
DEFAULT_DISTANCE = 3.35
NEAR_PLANE = 0.08
PROJECTION_SCALE = 0.45

# --- Export ---
MIN_EXPORT_SAMPLES = 40
MAX_EXPORT_SAMPLES = 1200
MAX_EXPORT_POINTS = 800
EXPORT_SURFACE_DENSITY = 15
EXPORT_MAX_ELEVATION = 85.0

# --- Entries ---
DEFAULT_LINE_WIDTH = 2.5
PALETTE = (
    "#0f766e",
    "#ef4444",
    "#2563eb",
    "#d97706",
    "#7c3aed",
    "#0891b2",
    "#dc2626",
)

LOG_LEVEL_ENV = "GRAPHTOTEX_LOG_LEVEL"


@dataclass(frozen=True)
class GraphSettings:
    """Display toggles for the 2D graph."""

    show_grid: bool = True
    show_axes: bool = True
    show_ticks: bool = True


@dataclass(frozen=True)
class GraphSettings3D:
    """Display toggles for the 3D graph."""

    show_grid: bool = True
    show_axes: bool = True
    show_box: bool = True


def log_level_from_env(default: int = logging.WARNING) -> int:
    """Return the log level named by ``GRAPHTOTEX_LOG_LEVEL``.

    Accepts level names (``debug``, ``INFO``) or numbers; unknown values
    fall back to ``default``.
    """

    raw = os.environ.get(LOG_LEVEL_ENV, "").strip()
    if not raw:
        return default
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw.upper())
    return level if isinstance(level, int) else default


__all__ = [
    "GraphSettings",
    "GraphSettings3D",
    "log_level_from_env",
    "PALETTE",
]
