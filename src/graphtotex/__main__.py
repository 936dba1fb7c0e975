#!/usr/bin/env python3
"""
Command-line front end for GraphToTeX.

Usage:
    python -m graphtotex check EXPR... [--3d]
    python -m graphtotex tikz EXPR... [--xmin X --xmax X --ymin Y --ymax Y] [-o FILE]
    python -m graphtotex tikz3d EXPR... [--zmin Z --zmax Z --yaw A --pitch A] [-o FILE]
    python -m graphtotex dxf EXPR... -o FILE [--3d]

Examples:
    # Validate and typeset
    python -m graphtotex check "x^2 - 2x" "x^2 + y^2 = 4"

    # TikZ picture of a named example set
    python -m graphtotex tikz --example sine -o sine.tex

    # pgfplots surface
    python -m graphtotex tikz3d "sin(x)*cos(y)" --zmin -2 --zmax 2

    # DXF drawing of a surface, seen from above
    python -m graphtotex dxf "x^2 - y^2" --3d --pitch -1.4 -o saddle.dxf
"""

import argparse
import logging
import math
import sys
from pathlib import Path

from graphtotex import __version__
from graphtotex.config import GraphSettings, GraphSettings3D, log_level_from_env
from graphtotex.entries import EXAMPLES, EntryFactory, prepare_entries, prepare_entries_3d
from graphtotex.expr.prepare import prepare_math, prepare_math_3d
from graphtotex.logging_config import setup_logging
from graphtotex.viewport import Viewport, clamp_viewport
from graphtotex.viewport3d import Viewport3D, clamp_viewport_3d

logger = logging.getLogger("graphtotex.cli")


def _expressions(args) -> list:
    """Expressions from the command line, or from --example."""
    if args.expressions:
        return list(args.expressions)
    if args.example:
        return list(EXAMPLES[args.example])
    raise SystemExit("error: no expressions given (pass EXPR... or --example NAME)")


def _entry_fields(args) -> dict:
    fields = {}
    if args.samples is not None:
        fields['samples'] = args.samples
    if args.dashed:
        fields['dashed'] = True
    return fields


def _viewport(args) -> Viewport:
    return clamp_viewport(Viewport(args.xmin, args.xmax, args.ymin, args.ymax))


def _viewport_3d(args) -> Viewport3D:
    return clamp_viewport_3d(Viewport3D(
        args.xmin, args.xmax, args.ymin, args.ymax, args.zmin, args.zmax,
        yaw=args.yaw, pitch=args.pitch, distance=args.distance,
    ))


def _write(text: str, output) -> None:
    if output:
        Path(output).write_text(text + "\n", encoding="utf-8")
        logger.info("wrote %s", output)
    else:
        print(text)


def _prepared_2d(args):
    factory = EntryFactory()
    fields = _entry_fields(args)
    return prepare_entries(factory.create(raw, **fields) for raw in _expressions(args))


def _prepared_3d(args):
    factory = EntryFactory()
    fields = _entry_fields(args)
    return prepare_entries_3d(factory.create_3d(raw, **fields) for raw in _expressions(args))


def _report_invalid(prepared) -> None:
    for item in prepared:
        if item.math.error:
            print(f"Warning: skipping {item.entry.raw!r}: {item.math.error}", file=sys.stderr)


def cmd_check(args):
    """Validate expressions and print their LaTeX or the error."""
    failures = 0
    for raw in _expressions(args):
        if args.three_d:
            result = prepare_math_3d(raw)
            mode = "surface"
        else:
            result = prepare_math(raw)
            mode = result.mode

        if result.error:
            failures += 1
            print(f"{raw}: error: {result.error}")
        elif result.latex is None:
            print(f"{raw}: (empty)")
        else:
            print(f"{raw}: {mode}: {result.latex}")

    return 1 if failures else 0


def cmd_tikz(args):
    """Export 2D entries as a TikZ picture."""
    from graphtotex.tikz_export import generate_tikz_export

    prepared = _prepared_2d(args)
    _report_invalid(prepared)
    settings = GraphSettings(show_grid=not args.no_grid, show_axes=not args.no_axes,
                             show_ticks=not args.no_ticks)
    _write(generate_tikz_export(prepared, _viewport(args), settings), args.output)
    return 0


def cmd_tikz3d(args):
    """Export surfaces as a pgfplots axis."""
    from graphtotex.tikz_export3d import generate_tikz_export_3d

    prepared = _prepared_3d(args)
    _report_invalid(prepared)
    settings = GraphSettings3D(show_grid=not args.no_grid, show_axes=not args.no_axes,
                               show_box=not args.no_box)
    _write(generate_tikz_export_3d(prepared, _viewport_3d(args), settings), args.output)
    return 0


def cmd_dxf(args):
    """Render a 2D graph or 3D scene into a DXF drawing."""
    from graphtotex.ezdxf_drawable import ezdxfDraw
    from graphtotex.scene import build_scene_2d, build_scene_3d

    if args.three_d:
        prepared = _prepared_3d(args)
        settings = GraphSettings3D(show_grid=not args.no_grid, show_axes=not args.no_axes,
                                   show_box=not args.no_box)
        scene = build_scene_3d(prepared, _viewport_3d(args), settings, args.width, args.height)
    else:
        prepared = _prepared_2d(args)
        settings = GraphSettings(show_grid=not args.no_grid, show_axes=not args.no_axes,
                                 show_ticks=not args.no_ticks)
        scene = build_scene_2d(prepared, _viewport(args), settings, args.width, args.height)
    _report_invalid(prepared)

    dd = ezdxfDraw()
    output = Path(args.output)
    dd.filename = str(output.with_suffix('')) if output.suffix.lower() == '.dxf' else str(output)
    dd.draw(scene)
    path = dd.display()
    print(f"Wrote {path}")
    return 0


def _positive_float(text):
    """argparse type for canvas sizes: a finite number above zero."""
    try:
        value = float(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: {text!r}")
    if not (math.isfinite(value) and value > 0):
        raise argparse.ArgumentTypeError(f"must be a positive number: {text!r}")
    return value


def _add_entry_arguments(p):
    p.add_argument('expressions', nargs='*', metavar='EXPR', help='Expressions to plot')
    p.add_argument('--example', choices=sorted(EXAMPLES), help='Use a built-in example set')
    p.add_argument('--samples', type=int, help='Sample density hint for every entry')
    p.add_argument('--dashed', action='store_true', help='Draw every entry dashed')
    p.add_argument('--no-grid', action='store_true', help='Hide the grid')
    p.add_argument('--no-axes', action='store_true', help='Hide the axes')


def _add_bounds_arguments(p, three_d=False):
    defaults = Viewport3D() if three_d else Viewport()
    for name in ('xmin', 'xmax', 'ymin', 'ymax'):
        p.add_argument(f'--{name}', type=float, default=getattr(defaults, f'{name[0]}_{name[1:]}'))
    if three_d:
        p.add_argument('--zmin', type=float, default=defaults.z_min)
        p.add_argument('--zmax', type=float, default=defaults.z_max)
        p.add_argument('--yaw', type=float, default=defaults.yaw, help='Camera yaw (radians)')
        p.add_argument('--pitch', type=float, default=defaults.pitch, help='Camera pitch (radians)')
        p.add_argument('--distance', type=float, default=defaults.distance, help='Camera distance')
        p.add_argument('--no-box', action='store_true', help='Hide the bounding box')


def build_parser():
    parser = argparse.ArgumentParser(
        prog='python -m graphtotex',
        description='Validate expressions and export graphs to TikZ, pgfplots and DXF',
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')

    subparsers = parser.add_subparsers(dest='action', required=True)

    # check command
    check_parser = subparsers.add_parser('check', help='Validate and typeset expressions')
    check_parser.add_argument('expressions', nargs='*', metavar='EXPR')
    check_parser.add_argument('--example', choices=sorted(EXAMPLES))
    check_parser.add_argument('--3d', dest='three_d', action='store_true',
                              help='Check as surfaces z = f(x, y)')

    # tikz command
    tikz_parser = subparsers.add_parser('tikz', help='Export a 2D TikZ picture')
    _add_entry_arguments(tikz_parser)
    _add_bounds_arguments(tikz_parser)
    tikz_parser.add_argument('--no-ticks', action='store_true', help='Hide tick marks')
    tikz_parser.add_argument('-o', '--output', metavar='FILE', help='Output file (default stdout)')

    # tikz3d command
    tikz3d_parser = subparsers.add_parser('tikz3d', help='Export a pgfplots surface plot')
    _add_entry_arguments(tikz3d_parser)
    _add_bounds_arguments(tikz3d_parser, three_d=True)
    tikz3d_parser.add_argument('-o', '--output', metavar='FILE', help='Output file (default stdout)')

    # dxf command
    dxf_parser = subparsers.add_parser('dxf', help='Write a DXF drawing')
    _add_entry_arguments(dxf_parser)
    _add_bounds_arguments(dxf_parser, three_d=True)
    dxf_parser.add_argument('--3d', dest='three_d', action='store_true', help='Draw surfaces')
    dxf_parser.add_argument('--no-ticks', action='store_true', help='Hide tick marks')
    dxf_parser.add_argument('--width', type=_positive_float, default=800.0, help='Canvas width in pixels')
    dxf_parser.add_argument('--height', type=_positive_float, default=800.0, help='Canvas height in pixels')
    dxf_parser.add_argument('-o', '--output', metavar='FILE', required=True,
                            help='Output DXF file')

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    level = logging.DEBUG if args.verbose else log_level_from_env()
    setup_logging(level)

    if args.action == 'check':
        return cmd_check(args)
    elif args.action == 'tikz':
        return cmd_tikz(args)
    elif args.action == 'tikz3d':
        return cmd_tikz3d(args)
    elif args.action == 'dxf':
        return cmd_dxf(args)
    else:
        parser.print_help()
        return 1


if __name__ == '__main__':
    sys.exit(main())
