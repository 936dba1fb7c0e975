"""Scene assembly: turns prepared entries into styled drawing primitives.

A 2D scene holds polylines in world units; a 3D scene holds projected,
depth-ordered faces and segments in screen pixels.  Either is handed to
a :class:`~graphtotex.drawable.Drawable` with :func:`draw_scene`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple, Union

from graphtotex.config import GraphSettings, GraphSettings3D
from graphtotex.contour import sample_implicit_contours
from graphtotex.curve import Point, clamp_domain_to_viewport, sample_expression
from graphtotex.entries import PreparedEntry, PreparedEntry3D
from graphtotex.expr.prepare import IMPLICIT, parse_domain_bounds
from graphtotex.projection import (
    RenderFace,
    RenderSegment,
    SceneBuilder3D,
    ScreenPoint,
    SegmentStyle,
    create_projector,
)
from graphtotex.surface import sample_surface, surface_resolution
from graphtotex.tikz_export3d import surface_domain
from graphtotex.viewport import Viewport, build_ticks, world_to_screen
from graphtotex.viewport3d import Viewport3D

logger = logging.getLogger(__name__)

LAYER_GRID = "GRID"
LAYER_AXES = "AXES"
LAYER_CURVES = "CURVES"
LAYER_SURFACES = "SURFACES"
LAYERS = (LAYER_GRID, LAYER_AXES, LAYER_CURVES, LAYER_SURFACES)

GRID_STYLE = SegmentStyle("#d9e3ec", 1.0, layer=LAYER_GRID)
AXIS_STYLE = SegmentStyle("#1f2937", 2.0, layer=LAYER_AXES)
TICK_STYLE = SegmentStyle("#111827", 1.0, layer=LAYER_AXES)
LABEL_COLOR = "#111827"

GRID_STYLE_3D = SegmentStyle("#d6deea", 1.0, layer=LAYER_GRID)
BOX_STYLE_3D = SegmentStyle("#b5c4d8", 1.0, dashed=True, layer=LAYER_GRID)
AXIS_COLORS_3D = ("#d94646", "#2563eb", "#0f766e")
AXIS_WIDTH_3D = 1.8

SURFACE_ALPHA = 0.24
DASHED_SURFACE_ALPHA = 0.14

# Screen-pixel offsets used for tick marks and labels
TICK_HALF_LENGTH = 6.0
LABEL_OFFSET = 4.0
LABEL_HEIGHT = 12.0


@dataclass(frozen=True)
class Polyline:
    points: Tuple[Point, ...]
    style: SegmentStyle


@dataclass(frozen=True)
class Label:
    text: str
    position: Tuple[float, float]
    layer: str = LAYER_AXES
    color: str = LABEL_COLOR
    height: float = LABEL_HEIGHT               # drawing units


@dataclass
class Scene2D:
    """World-space primitives for one 2D frame."""

    viewport: Viewport
    width: float
    height: float
    polylines: List[Polyline] = field(default_factory=list)
    labels: List[Label] = field(default_factory=list)

    def to_screen(self, point: Tuple[float, float]) -> Tuple[float, float]:
        return world_to_screen(point[0], point[1], self.width, self.height, self.viewport)

    def screen_polylines(self) -> List[Tuple[List[Tuple[float, float]], SegmentStyle]]:
        return [([self.to_screen(p) for p in line.points], line.style) for line in self.polylines]


@dataclass
class Scene3D:
    """Projected primitives for one 3D frame, already depth ordered."""

    viewport: Viewport3D
    width: float
    height: float
    faces: List[RenderFace] = field(default_factory=list)
    segments: List[RenderSegment] = field(default_factory=list)
    labels: List[Label] = field(default_factory=list)


Scene = Union[Scene2D, Scene3D]


def _tick_label(value: float) -> str:
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def _pixel_size(scene: Scene2D) -> Tuple[float, float]:
    return scene.viewport.x_span / scene.width, scene.viewport.y_span / scene.height


def _add_grid_2d(scene: Scene2D) -> None:
    vp = scene.viewport
    for x in build_ticks(vp.x_min, vp.x_max, 16):
        scene.polylines.append(Polyline((Point(x, vp.y_min), Point(x, vp.y_max)), GRID_STYLE))
    for y in build_ticks(vp.y_min, vp.y_max, 12):
        scene.polylines.append(Polyline((Point(vp.x_min, y), Point(vp.x_max, y)), GRID_STYLE))


def _add_axes_2d(scene: Scene2D, settings: GraphSettings) -> None:
    vp = scene.viewport
    y_zero_visible = vp.y_min <= 0 <= vp.y_max
    x_zero_visible = vp.x_min <= 0 <= vp.x_max

    if y_zero_visible:
        scene.polylines.append(Polyline((Point(vp.x_min, 0.0), Point(vp.x_max, 0.0)), AXIS_STYLE))
    if x_zero_visible:
        scene.polylines.append(Polyline((Point(0.0, vp.y_min), Point(0.0, vp.y_max)), AXIS_STYLE))

    if not (settings.show_ticks and x_zero_visible and y_zero_visible):
        return

    px, py = _pixel_size(scene)
    for x in build_ticks(vp.x_min, vp.x_max, 16):
        if abs(x) < 1e-9:
            continue
        tick = TICK_HALF_LENGTH * py
        scene.polylines.append(Polyline((Point(x, -tick), Point(x, tick)), TICK_STYLE))
        scene.labels.append(Label(_tick_label(x), (x + 3 * px, -20 * py), height=LABEL_HEIGHT * py))

    for y in build_ticks(vp.y_min, vp.y_max, 12):
        if abs(y) < 1e-9:
            continue
        tick = TICK_HALF_LENGTH * px
        scene.polylines.append(Polyline((Point(-tick, y), Point(tick, y)), TICK_STYLE))
        scene.labels.append(Label(_tick_label(y), (8 * px, y + 6 * py), height=LABEL_HEIGHT * py))


def _entry_segments(item: PreparedEntry, viewport: Viewport) -> List[List[Point]]:
    entry, prepared = item.entry, item.math

    if prepared.mode == IMPLICIT and prepared.implicit_evaluator is not None:
        return sample_implicit_contours(prepared.implicit_evaluator, viewport, entry.samples)

    if prepared.evaluator is None:
        return []

    x_min, x_max = parse_domain_bounds(entry.domain_min, entry.domain_max, viewport)
    domain = clamp_domain_to_viewport(x_min, x_max, viewport)
    if domain is None:
        return []
    return sample_expression(prepared.evaluator, domain[0], domain[1], entry.samples, viewport)


def build_scene_2d(entries: Sequence[PreparedEntry], viewport: Viewport,
                   settings: GraphSettings = GraphSettings(),
                   width: float = 800, height: float = 800) -> Scene2D:
    """Grid, axes and ticks, then one polyline per curve segment."""

    if width <= 0 or height <= 0:
        raise ValueError(f"bad scene size {width}x{height}")

    scene = Scene2D(viewport, width, height)
    if settings.show_grid:
        _add_grid_2d(scene)
    if settings.show_axes:
        _add_axes_2d(scene, settings)

    for item in entries:
        if not item.drawable:
            continue
        entry = item.entry
        style = SegmentStyle(entry.color, entry.line_width, entry.dashed, LAYER_CURVES)
        for segment in _entry_segments(item, viewport):
            if len(segment) >= 2:
                scene.polylines.append(Polyline(tuple(segment), style))

    logger.debug("2D scene: %d polylines, %d labels", len(scene.polylines), len(scene.labels))
    return scene


def _add_box_3d(builder: SceneBuilder3D, vp: Viewport3D) -> None:
    x0, x1, y0, y1 = vp.x_min, vp.x_max, vp.y_min, vp.y_max
    for z in (vp.z_min, vp.z_max):
        builder.add_segment((x0, y0, z), (x1, y0, z), BOX_STYLE_3D)
        builder.add_segment((x1, y0, z), (x1, y1, z), BOX_STYLE_3D)
        builder.add_segment((x1, y1, z), (x0, y1, z), BOX_STYLE_3D)
        builder.add_segment((x0, y1, z), (x0, y0, z), BOX_STYLE_3D)
    for x, y in ((x0, y0), (x1, y0), (x1, y1), (x0, y1)):
        builder.add_segment((x, y, vp.z_min), (x, y, vp.z_max), BOX_STYLE_3D)


def _add_axes_3d(builder: SceneBuilder3D, vp: Viewport3D) -> None:
    x_color, y_color, z_color = AXIS_COLORS_3D
    builder.add_segment((vp.x_min, 0, 0), (vp.x_max, 0, 0),
                        SegmentStyle(x_color, AXIS_WIDTH_3D, layer=LAYER_AXES))
    builder.add_segment((0, vp.y_min, 0), (0, vp.y_max, 0),
                        SegmentStyle(y_color, AXIS_WIDTH_3D, layer=LAYER_AXES))
    builder.add_segment((0, 0, vp.z_min), (0, 0, vp.z_max),
                        SegmentStyle(z_color, AXIS_WIDTH_3D, layer=LAYER_AXES))


def _add_surface_3d(builder: SceneBuilder3D, item: PreparedEntry3D, vp: Viewport3D) -> None:
    entry = item.entry
    domain = surface_domain(item, vp)
    if domain is None:
        return

    resolution = surface_resolution(entry.samples)
    mesh = sample_surface(item.math.evaluator, domain[0], domain[1], resolution, (vp.z_min, vp.z_max))

    alpha = DASHED_SURFACE_ALPHA if entry.dashed else SURFACE_ALPHA
    for corners in mesh.faces():
        builder.add_face(corners, entry.color, alpha)

    style = SegmentStyle(entry.color, entry.line_width, entry.dashed, LAYER_SURFACES)
    for a, b in mesh.edges():
        builder.add_segment(a, b, style)


def build_scene_3d(entries: Sequence[PreparedEntry3D], viewport: Viewport3D,
                   settings: GraphSettings3D = GraphSettings3D(),
                   width: float = 800, height: float = 800) -> Scene3D:
    """Ground grid, box and axes, then surface faces and wireframes.

    Primitives with a vertex behind the camera are dropped; the rest are
    returned far-to-near for painter's-algorithm drawing.
    """

    if width <= 0 or height <= 0:
        raise ValueError(f"bad scene size {width}x{height}")

    project = create_projector(viewport, width, height)
    builder = SceneBuilder3D(project)
    vp = viewport

    if settings.show_grid:
        for x in build_ticks(vp.x_min, vp.x_max, 10):
            builder.add_segment((x, vp.y_min, 0), (x, vp.y_max, 0), GRID_STYLE_3D)
        for y in build_ticks(vp.y_min, vp.y_max, 10):
            builder.add_segment((vp.x_min, y, 0), (vp.x_max, y, 0), GRID_STYLE_3D)

    if settings.show_box:
        _add_box_3d(builder, vp)

    if settings.show_axes:
        _add_axes_3d(builder, vp)

    for item in entries:
        if item.drawable:
            _add_surface_3d(builder, item, vp)

    faces, segments = builder.ordered()
    scene = Scene3D(viewport, width, height, faces, segments)

    if settings.show_axes:
        for text, point in (("x", (vp.x_max, 0, 0)), ("y", (0, vp.y_max, 0)), ("z", (0, 0, vp.z_max))):
            projected = project(*point)
            if projected is not None:
                scene.labels.append(Label(text, (projected.px + LABEL_OFFSET, projected.py + LABEL_OFFSET)))

    logger.debug("3D scene: %d faces, %d segments", len(faces), len(segments))
    return scene


def _apply_style(drawable, style: SegmentStyle) -> None:
    drawable.layer = style.layer
    drawable.linecolor = style.color
    drawable.linewidth = style.width
    drawable.dashed = style.dashed


def draw_scene(scene: Scene, drawable) -> None:
    """Send every primitive of ``scene`` to ``drawable``.

    2D scenes are drawn in world units with y up.  3D scenes are drawn in
    screen pixels with y flipped so the picture is upright.
    """

    if isinstance(scene, Scene2D):
        for line in scene.polylines:
            _apply_style(drawable, line.style)
            drawable.draw_polyline([(p.x, p.y) for p in line.points])
        labels = [(label, label.position) for label in scene.labels]

    elif isinstance(scene, Scene3D):
        def flip(p: ScreenPoint) -> Tuple[float, float]:
            return p.px, scene.height - p.py

        for face in scene.faces:
            drawable.layer = LAYER_SURFACES
            drawable.fillcolor = face.fill
            drawable.fillalpha = face.alpha
            drawable.draw_polygon([flip(p) for p in face.points])

        for segment in scene.segments:
            _apply_style(drawable, segment.style)
            drawable.draw_line(flip(segment.a), flip(segment.b))

        labels = [(label, (label.position[0], scene.height - label.position[1])) for label in scene.labels]

    else:
        raise ValueError(f"bad argument to draw_scene(): {scene!r}")

    drawable.dashed = False
    for label, position in labels:
        drawable.layer = label.layer
        drawable.draw_text(label.text, position, attr={"color": label.color, "height": label.height})


__all__ = [
    "LAYERS",
    "Polyline",
    "Label",
    "Scene2D",
    "Scene3D",
    "build_scene_2d",
    "build_scene_3d",
    "draw_scene",
]
