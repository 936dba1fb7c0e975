"""Perspective camera projection and painter's-algorithm depth ordering."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Callable, List, NamedTuple, Optional, Tuple

from graphtotex import config
from graphtotex.viewport3d import Viewport3D

Vec3 = Tuple[float, float, float]


class ScreenPoint(NamedTuple):
    px: float
    py: float
    depth: float


@dataclass(frozen=True)
class SegmentStyle:
    color: str
    width: float
    dashed: bool = False
    layer: str = "CURVES"


@dataclass(frozen=True)
class RenderSegment:
    a: ScreenPoint
    b: ScreenPoint
    depth: float
    style: SegmentStyle


@dataclass(frozen=True)
class RenderFace:
    points: Tuple[ScreenPoint, ScreenPoint, ScreenPoint, ScreenPoint]
    depth: float
    fill: str                                  # hex colour
    alpha: float = 1.0


Projector = Callable[[float, float, float], Optional[ScreenPoint]]


def create_projector(viewport: Viewport3D, width: float, height: float) -> Projector:
    """Return a function mapping world ``(x, y, z)`` to a :class:`ScreenPoint`.

    The view box is centred and scaled to ``[-1, 1]`` along its longest
    side, rotated by yaw about z then by pitch about x, and divided by the
    distance from the camera.  Points within the near plane (``0.08``)
    project to ``None``.  ``depth`` grows towards the camera.
    """

    x_center = (viewport.x_min + viewport.x_max) / 2
    y_center = (viewport.y_min + viewport.y_max) / 2
    z_center = (viewport.z_min + viewport.z_max) / 2

    x_span = max(1e-9, viewport.x_max - viewport.x_min)
    y_span = max(1e-9, viewport.y_max - viewport.y_min)
    z_span = max(1e-9, viewport.z_max - viewport.z_min)
    normalize = 2 / max(x_span, y_span, z_span)

    cos_yaw, sin_yaw = math.cos(viewport.yaw), math.sin(viewport.yaw)
    cos_pitch, sin_pitch = math.cos(viewport.pitch), math.sin(viewport.pitch)

    cx = width / 2
    cy = height / 2
    scale = min(width, height) * config.PROJECTION_SCALE

    def project(x: float, y: float, z: float) -> Optional[ScreenPoint]:
        nx = (x - x_center) * normalize
        ny = (y - y_center) * normalize
        nz = (z - z_center) * normalize

        x_yaw = nx * cos_yaw - ny * sin_yaw
        y_yaw = nx * sin_yaw + ny * cos_yaw
        z_yaw = nz

        y_rot = y_yaw * cos_pitch - z_yaw * sin_pitch
        z_rot = y_yaw * sin_pitch + z_yaw * cos_pitch

        distance = viewport.distance - z_rot
        if not distance > config.NEAR_PLANE:
            return None

        perspective = 1 / distance
        px = cx + x_yaw * perspective * scale
        py = cy - y_rot * perspective * scale
        if not (math.isfinite(px) and math.isfinite(py)):
            return None
        return ScreenPoint(px, py, z_rot)

    return project


@dataclass
class SceneBuilder3D:
    """Collects projected faces and segments for one frame.

    Primitives with any vertex behind the near plane are dropped whole.
    """

    project: Projector
    faces: List[RenderFace] = field(default_factory=list)
    segments: List[RenderSegment] = field(default_factory=list)

    def add_segment(self, a: Vec3, b: Vec3, style: SegmentStyle) -> bool:
        pa = self.project(*a)
        pb = self.project(*b)
        if pa is None or pb is None:
            return False
        self.segments.append(RenderSegment(pa, pb, (pa.depth + pb.depth) * 0.5, style))
        return True

    def add_face(self, corners: Tuple[Vec3, Vec3, Vec3, Vec3], fill: str, alpha: float = 1.0) -> bool:
        projected = [self.project(*corner) for corner in corners]
        if any(p is None for p in projected):
            return False
        depth = sum(p.depth for p in projected) * 0.25
        self.faces.append(RenderFace(tuple(projected), depth, fill, alpha))
        return True

    def ordered(self) -> Tuple[List[RenderFace], List[RenderSegment]]:
        """Faces then segments, each far-to-near (ascending depth, stable)."""
        faces = sorted(self.faces, key=lambda f: f.depth)
        segments = sorted(self.segments, key=lambda s: s.depth)
        return faces, segments


__all__ = [
    "ScreenPoint",
    "SegmentStyle",
    "RenderSegment",
    "RenderFace",
    "create_projector",
    "SceneBuilder3D",
]
