"""TikZ ``tikzpicture`` export of 2D graphs."""

from __future__ import annotations

import logging
from typing import List, Sequence, TypeVar

from graphtotex import config
from graphtotex.config import GraphSettings
from graphtotex.contour import sample_implicit_contours
from graphtotex.curve import Segment, clamp_domain_to_viewport, clamp_samples, sample_expression
from graphtotex.entries import PreparedEntry, RawEntry
from graphtotex.expr.prepare import IMPLICIT, parse_domain_bounds
from graphtotex.formatting import format_number as fmt, tikz_color, to_fixed
from graphtotex.tikz_expr import convert_ast_to_tikz
from graphtotex.viewport import Viewport, build_ticks, get_nice_tick_step

logger = logging.getLogger(__name__)

T = TypeVar("T")

WATERMARK = "Made using GraphToTeX"


def line_style(entry: RawEntry) -> str:
    parts = [f"line width={to_fixed(entry.line_width)}pt", f"draw={tikz_color(entry.color)}"]
    if entry.dashed:
        parts.append("dash pattern=on 5pt off 3pt")
    return ", ".join(parts)


def downsample(items: Sequence[T], max_points: int) -> List[T]:
    """Keep at most ``max_points`` evenly spread items, always including both ends."""

    if len(items) <= max_points:
        return list(items)
    step = (len(items) - 1) / (max_points - 1)
    return [items[int(i * step + 0.5)] for i in range(max_points)]


def _coordinates(segment: Segment) -> str:
    return " ".join(f"({fmt(p.x)},{fmt(p.y)})" for p in downsample(segment, config.MAX_EXPORT_POINTS))


def build_grid_and_axes(viewport: Viewport, settings: GraphSettings) -> List[str]:
    lines: List[str] = []
    x_range = viewport.x_max - viewport.x_min
    y_range = viewport.y_max - viewport.y_min

    if settings.show_grid:
        x_step = get_nice_tick_step(x_range, 16)
        y_step = get_nice_tick_step(y_range, 12)
        lines.append(f"% Grid ({fmt(x_step)} x {fmt(y_step)})")
        lines.append(
            f"\\draw[step={fmt(x_step)}, gray!25, very thin] "
            f"({fmt(viewport.x_min)},{fmt(viewport.y_min)}) grid ({fmt(viewport.x_max)},{fmt(viewport.y_max)});"
        )

    if settings.show_axes:
        y_in_view = viewport.y_min <= 0 <= viewport.y_max
        x_in_view = viewport.x_min <= 0 <= viewport.x_max

        if y_in_view:
            lines.append(
                f"\\draw[->, semithick] ({fmt(viewport.x_min)},0) -- ({fmt(viewport.x_max)},0) node[right] {{$x$}};"
            )
        if x_in_view:
            lines.append(
                f"\\draw[->, semithick] (0,{fmt(viewport.y_min)}) -- (0,{fmt(viewport.y_max)}) node[above] {{$y$}};"
            )

        if settings.show_ticks and x_in_view and y_in_view:
            tick = min(x_range, y_range) * 0.008
            for t in build_ticks(viewport.x_min, viewport.x_max, 16):
                if abs(t) < 1e-9:
                    continue
                lines.append(
                    f"\\draw ({fmt(t)},{fmt(-tick)}) -- ({fmt(t)},{fmt(tick)}) node[below] {{\\tiny {fmt(t)}}};"
                )
            for t in build_ticks(viewport.y_min, viewport.y_max, 12):
                if abs(t) < 1e-9:
                    continue
                lines.append(
                    f"\\draw ({fmt(-tick)},{fmt(t)}) -- ({fmt(tick)},{fmt(t)}) node[left] {{\\tiny {fmt(t)}}};"
                )

    return lines


def build_frame_and_watermark(viewport: Viewport) -> List[str]:
    x_range = max(1e-9, viewport.x_max - viewport.x_min)
    y_range = max(1e-9, viewport.y_max - viewport.y_min)
    inset = min(x_range, y_range) * 0.0025
    x_inset = min(inset, x_range * 0.25)
    y_inset = min(inset, y_range * 0.25)
    pad_x = x_range * 0.015
    pad_y = y_range * 0.015

    return [
        "% Frame border",
        f"\\draw[gray!65, line width=0.35pt] ({fmt(viewport.x_min + x_inset)},{fmt(viewport.y_min + y_inset)}) "
        f"rectangle ({fmt(viewport.x_max - x_inset)},{fmt(viewport.y_max - y_inset)});",
        "% Watermark",
        f"\\node[anchor=south east, text=gray!60, font=\\scriptsize] at "
        f"({fmt(viewport.x_max - pad_x)},{fmt(viewport.y_min + pad_y)}) {{{WATERMARK}}};",
    ]


def _implicit_to_tikz(item: PreparedEntry, viewport: Viewport) -> List[str]:
    entry = item.entry
    style = line_style(entry)
    segments = sample_implicit_contours(item.math.implicit_evaluator, viewport, entry.samples)
    lines = [f"% {entry.raw} exported as coordinates (implicit relation)."]
    lines.extend(f"\\draw[{style}] plot coordinates {{{_coordinates(s)}}};" for s in segments)
    return lines


def expression_to_tikz(item: PreparedEntry, viewport: Viewport) -> List[str]:
    """TikZ lines for one entry; empty when hidden or invalid."""

    entry, prepared = item.entry, item.math
    if not item.drawable:
        return []

    if prepared.mode == IMPLICIT:
        return _implicit_to_tikz(item, viewport)

    x_min, x_max = parse_domain_bounds(entry.domain_min, entry.domain_max, viewport)
    domain = clamp_domain_to_viewport(x_min, x_max, viewport)
    if domain is None:
        return [f"% Skipped {entry.raw}: domain is outside viewport."]
    lo, hi = domain

    style = line_style(entry)
    symbolic = convert_ast_to_tikz(prepared.node)

    if symbolic.ok:
        count = clamp_samples(entry.samples, config.MIN_EXPORT_SAMPLES, config.MAX_EXPORT_SAMPLES)
        return [
            f"\\draw[{style}, domain={fmt(lo)}:{fmt(hi)}, samples={count}, smooth, variable=\\x]",
            f"  plot ({{\\x}},{{{symbolic.expression}}});",
        ]

    segments = sample_expression(prepared.evaluator, lo, hi, entry.samples, viewport)
    lines = [f"% {entry.raw} exported as coordinates ({symbolic.reason or 'fallback'})."]
    lines.extend(f"\\draw[{style}] plot coordinates {{{_coordinates(s)}}};" for s in segments)
    return lines


def generate_tikz_export(entries: Sequence[PreparedEntry], viewport: Viewport,
                         settings: GraphSettings = GraphSettings()) -> str:
    """Build a complete ``tikzpicture`` for the given entries."""

    header = [
        "% GraphToTeX export",
        "% Scale tip: add scale=<value> in tikzpicture options, e.g. \\begin{tikzpicture}[scale=0.8, ...]",
        "% Required packages: \\usepackage{tikz} and \\usetikzlibrary{arrows.meta}",
        "% Note: trig/inverse trig expressions are exported as sampled coordinates to preserve radian behavior.",
        "\\begin{tikzpicture}[line cap=round, line join=round, >=Stealth]",
        f"\\clip ({fmt(viewport.x_min)},{fmt(viewport.y_min)}) rectangle ({fmt(viewport.x_max)},{fmt(viewport.y_max)});",
    ]

    body = build_grid_and_axes(viewport, settings)
    for item in entries:
        body.extend(expression_to_tikz(item, viewport))
    body.extend(build_frame_and_watermark(viewport))

    logger.debug("tikz export: %d entries, %d body lines", len(entries), len(body))
    return "\n".join(header + body + ["\\end{tikzpicture}"])


__all__ = [
    "line_style",
    "downsample",
    "expression_to_tikz",
    "generate_tikz_export",
]
