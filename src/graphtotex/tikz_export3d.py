"""pgfplots ``axis`` export of 3D surfaces."""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence, Tuple

from graphtotex import config
from graphtotex.config import GraphSettings3D
from graphtotex.entries import PreparedEntry3D
from graphtotex.expr.prepare import parse_surface_domain_bounds
from graphtotex.formatting import format_number as fmt, tikz_color, to_fixed
from graphtotex.surface import sample_surface
from graphtotex.tikz_expr import convert_ast_to_tikz_3d
from graphtotex.viewport3d import Viewport3D

logger = logging.getLogger(__name__)

EMPTY_BODY = "% No visible valid surfaces to export."


def surface_domain(item: PreparedEntry3D,
                   viewport: Viewport3D) -> Optional[Tuple[Tuple[float, float], Tuple[float, float]]]:
    """Declared x/y domains intersected with the view box, or None if empty."""

    entry = item.entry
    x_lo, x_hi = parse_surface_domain_bounds(entry.domain_x_min, entry.domain_x_max,
                                             viewport.x_min, viewport.x_max)
    y_lo, y_hi = parse_surface_domain_bounds(entry.domain_y_min, entry.domain_y_max,
                                             viewport.y_min, viewport.y_max)

    x_min, x_max = max(x_lo, viewport.x_min), min(x_hi, viewport.x_max)
    y_min, y_max = max(y_lo, viewport.y_min), min(y_hi, viewport.y_max)
    if x_max <= x_min or y_max <= y_min:
        return None
    return (x_min, x_max), (y_min, y_max)


def view_angles(viewport: Viewport3D) -> Tuple[float, float]:
    """pgfplots ``view={azimuth}{elevation}`` in degrees."""

    azimuth = (math.degrees(viewport.yaw) + 360) % 360
    elevation = max(-config.EXPORT_MAX_ELEVATION,
                    min(config.EXPORT_MAX_ELEVATION, math.degrees(viewport.pitch)))
    return azimuth, elevation


def surface_to_tikz(item: PreparedEntry3D, viewport: Viewport3D) -> List[str]:
    entry, prepared = item.entry, item.math
    if not item.drawable:
        return []

    domain = surface_domain(item, viewport)
    if domain is None:
        return [f"% Skipped {entry.raw}: domain is outside viewport."]
    (x_min, x_max), (y_min, y_max) = domain

    color = tikz_color(entry.color)
    dash = ", dashed" if entry.dashed else ""
    density = config.EXPORT_SURFACE_DENSITY
    symbolic = convert_ast_to_tikz_3d(prepared.node)

    if symbolic.ok:
        return [
            f"% Surface: z = {entry.raw}",
            f"\\addplot3[surf, shader=faceted interp, fill opacity=0.58, draw opacity=0.82, "
            f"draw={color}, fill={color}, line width={to_fixed(entry.line_width * 0.5)}pt{dash}, "
            f"domain={fmt(x_min)}:{fmt(x_max)}, y domain={fmt(y_min)}:{fmt(y_max)}, "
            f"samples={density}, samples y={density}]",
            f"{{{symbolic.expression}}};",
        ]

    mesh = sample_surface(prepared.evaluator, (x_min, x_max), (y_min, y_max), density,
                          (viewport.z_min, viewport.z_max))
    data: List[str] = []
    for row in mesh.rows():
        for x, y, z in row:
            data.append(f"{fmt(x)} {fmt(y)} {'nan' if z is None else fmt(z)}")
        data.append("")

    return [
        f"% Surface: z = {entry.raw} (sampled fallback: {symbolic.reason or 'conversion unavailable'})",
        f"\\addplot3[surf, shader=faceted interp, fill opacity=0.55, draw opacity=0.8, "
        f"draw={color}, fill={color}, line width={to_fixed(entry.line_width * 0.45)}pt{dash}, "
        f"mesh/rows={density + 1}, mesh/cols={density + 1}, unbounded coords=jump]",
        "table[row sep=\\\\] {",
        *[f"  {line}\\\\" for line in data],
        "};",
    ]


def generate_tikz_export_3d(entries: Sequence[PreparedEntry3D], viewport: Viewport3D,
                            settings: GraphSettings3D = GraphSettings3D()) -> str:
    """Build a pgfplots document fragment for the given surfaces."""

    azimuth, elevation = view_angles(viewport)
    axis_lines = "middle" if settings.show_axes else "none"
    grid = "both" if settings.show_grid else "none"
    box_style = ", axis line style={draw opacity=0.5}" if settings.show_box else ""

    header = [
        "% GraphToTeX 3D export (pgfplots)",
        "% Required packages: \\usepackage{pgfplots} and \\pgfplotsset{compat=1.18}",
        "% Tip: rotate with view={azimuth}{elevation}",
        "\\begin{center}",
        "\\resizebox{0.88\\linewidth}{!}{%",
        "\\begin{tikzpicture}",
        f"\\begin{{axis}}[view={{{fmt(azimuth)}}}{{{fmt(elevation)}}}, grid={grid}, "
        f"axis lines={axis_lines}{box_style}, z buffer=sort,",
        f"  xmin={fmt(viewport.x_min)}, xmax={fmt(viewport.x_max)},",
        f"  ymin={fmt(viewport.y_min)}, ymax={fmt(viewport.y_max)},",
        f"  zmin={fmt(viewport.z_min)}, zmax={fmt(viewport.z_max)},",
        "  width=0.92\\linewidth, height=0.62\\linewidth, scale only axis,",
        "  colormap/viridis]",
    ]

    body: List[str] = []
    for item in entries:
        body.extend(surface_to_tikz(item, viewport))
    if not body:
        body.append(EMPTY_BODY)

    footer = ["\\end{axis}", "\\end{tikzpicture}", "}", "\\end{center}"]
    logger.debug("pgfplots export: %d entries, view {%s}{%s}", len(entries), azimuth, elevation)
    return "\n".join(header + body + footer)


__all__ = [
    "surface_domain",
    "view_angles",
    "surface_to_tikz",
    "generate_tikz_export_3d",
]
