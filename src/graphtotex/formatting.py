"""Number and colour formatting shared by the exporters and drawables."""

from __future__ import annotations

import math
import re
from typing import Tuple

_HEX_COLOR = re.compile(r"^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


def _to_exponential(value: float, digits: int = 2) -> str:
    mantissa, exponent = f"{value:.{digits}e}".split("e")
    return f"{mantissa}e{int(exponent):+d}"


def format_number(value: float) -> str:
    """Compact decimal for coordinates in exported documents.

    Exponential notation with two decimals when ``|v| >= 1e4`` or
    ``0 < |v| < 1e-3``; otherwise at most four decimals with trailing
    zeros dropped (``2.5``, ``-3``, ``0.1235``).
    """

    magnitude = abs(value)
    if magnitude >= 10000 or 0 < magnitude < 0.001:
        return _to_exponential(value)

    text = f"{value:.4f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text in ("-0", ""):
        return "0"
    return text


def is_hex_color(text: str) -> bool:
    return isinstance(text, str) and _HEX_COLOR.match(text) is not None


def hex_to_rgb(color: str) -> Tuple[int, int, int]:
    """``#rgb`` or ``#rrggbb`` to an ``(r, g, b)`` tuple of 0-255 ints."""

    match = _HEX_COLOR.match(color) if isinstance(color, str) else None
    if match is None:
        raise ValueError(f"invalid hex color: {color!r}")

    digits = match.group(1)
    if len(digits) == 3:
        digits = "".join(c + c for c in digits)
    return int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16)


def tikz_color(color: str) -> str:
    r, g, b = hex_to_rgb(color)
    return f"{{rgb,255:red,{r};green,{g};blue,{b}}}"


def rgba_from_hex(color: str, alpha: float) -> Tuple[int, int, int, float]:
    r, g, b = hex_to_rgb(color)
    return r, g, b, alpha


def to_fixed(value: float, digits: int = 2) -> str:
    """Fixed-point text with exactly ``digits`` decimals."""

    if not math.isfinite(value):
        raise ValueError(f"cannot format non-finite value {value!r}")
    return f"{value:.{digits}f}"


__all__ = [
    "format_number",
    "is_hex_color",
    "hex_to_rgb",
    "tikz_color",
    "rgba_from_hex",
    "to_fixed",
]
