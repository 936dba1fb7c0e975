"""World box and orbit camera for the 3D view."""

from __future__ import annotations

import dataclasses
import math
from dataclasses import dataclass

from graphtotex import config
from graphtotex.viewport import sanitize_axis


@dataclass(frozen=True)
class Viewport3D:
    """World bounds plus camera yaw/pitch (radians) and orbit distance."""

    x_min: float = -config.DEFAULT_BOUND
    x_max: float = config.DEFAULT_BOUND
    y_min: float = -config.DEFAULT_BOUND
    y_max: float = config.DEFAULT_BOUND
    z_min: float = -config.DEFAULT_BOUND
    z_max: float = config.DEFAULT_BOUND
    yaw: float = config.DEFAULT_YAW
    pitch: float = config.DEFAULT_PITCH
    distance: float = config.DEFAULT_DISTANCE


DEFAULT_VIEWPORT_3D = Viewport3D()


def _finite_or(value: float, fallback: float) -> float:
    return value if math.isfinite(value) else fallback


def clamp_viewport_3d(viewport: Viewport3D) -> Viewport3D:
    x_min, x_max = sanitize_axis(viewport.x_min, viewport.x_max)
    y_min, y_max = sanitize_axis(viewport.y_min, viewport.y_max)
    z_min, z_max = sanitize_axis(viewport.z_min, viewport.z_max)

    yaw = _finite_or(viewport.yaw, config.DEFAULT_YAW)
    pitch = _finite_or(viewport.pitch, config.DEFAULT_PITCH)
    distance = _finite_or(viewport.distance, config.DEFAULT_DISTANCE)

    return Viewport3D(
        x_min, x_max, y_min, y_max, z_min, z_max,
        yaw=yaw,
        pitch=max(config.MIN_PITCH, min(config.MAX_PITCH, pitch)),
        distance=max(config.MIN_DISTANCE, min(config.MAX_DISTANCE, distance)),
    )


def rotate_viewport_3d(viewport: Viewport3D, delta_yaw: float, delta_pitch: float) -> Viewport3D:
    return clamp_viewport_3d(dataclasses.replace(
        viewport,
        yaw=viewport.yaw + delta_yaw,
        pitch=viewport.pitch + delta_pitch,
    ))


def zoom_camera_3d(viewport: Viewport3D, zoom_factor: float) -> Viewport3D:
    return clamp_viewport_3d(dataclasses.replace(viewport, distance=viewport.distance * zoom_factor))


def scale_bounds_3d(viewport: Viewport3D, zoom_factor: float,
                    x: bool = False, y: bool = False, z: bool = False) -> Viewport3D:
    """Scale the selected world axes about their centres."""

    changes = {}
    for axis, selected in (("x", x), ("y", y), ("z", z)):
        if not selected:
            continue
        lo = getattr(viewport, f"{axis}_min")
        hi = getattr(viewport, f"{axis}_max")
        center = (lo + hi) / 2
        half = (hi - lo) * zoom_factor / 2
        changes[f"{axis}_min"] = center - half
        changes[f"{axis}_max"] = center + half

    return clamp_viewport_3d(dataclasses.replace(viewport, **changes))


__all__ = [
    "Viewport3D",
    "DEFAULT_VIEWPORT_3D",
    "clamp_viewport_3d",
    "rotate_viewport_3d",
    "zoom_camera_3d",
    "scale_bounds_3d",
]
