"""User-facing expression entries and their prepared counterparts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Tuple

from graphtotex import config
from graphtotex.expr.prepare import (
    PreparedMath,
    PreparedSurfaceMath,
    prepare_math,
    prepare_math_3d,
)

EXAMPLES: Dict[str, Tuple[str, ...]] = {
    "parabola": ("x^2 - 2*x - 3", "0.5*x + 2"),
    "sine": ("sin(x)", "cos(x)"),
    "crra": ("(x^(1-1/10.5))/(1-(1/10.5))",),
    "mixed": ("1/(x-1)", "exp(0.2*x)"),
}
DEFAULT_EXAMPLE = ("x^2", "sin(x)")


@dataclass(frozen=True)
class RawEntry:
    """One 2D expression row as typed by the user."""

    id: str
    raw: str = ""
    visible: bool = True
    color: str = config.PALETTE[0]
    line_width: float = config.DEFAULT_LINE_WIDTH
    dashed: bool = False
    samples: int = config.DEFAULT_SAMPLES
    domain_min: str = ""
    domain_max: str = ""


@dataclass(frozen=True)
class RawEntry3D:
    """One surface row; domains are per axis."""

    id: str
    raw: str = ""
    visible: bool = True
    color: str = config.PALETTE[0]
    line_width: float = config.DEFAULT_LINE_WIDTH
    dashed: bool = False
    samples: int = config.DEFAULT_SAMPLES
    domain_x_min: str = ""
    domain_x_max: str = ""
    domain_y_min: str = ""
    domain_y_max: str = ""


@dataclass(frozen=True)
class PreparedEntry:
    entry: RawEntry
    math: PreparedMath

    @property
    def drawable(self) -> bool:
        """Visible and successfully prepared."""
        return self.entry.visible and self.math.is_valid


@dataclass(frozen=True)
class PreparedEntry3D:
    entry: RawEntry3D
    math: PreparedSurfaceMath

    @property
    def drawable(self) -> bool:
        return self.entry.visible and self.math.is_valid


class EntryFactory:
    """Creates entries with sequential ids (``expr-1``, ``expr-2``, ...)
    and colours cycled from the palette."""

    def __init__(self, palette: Tuple[str, ...] = config.PALETTE, start: int = 0):
        if not palette:
            raise ValueError("palette must not be empty")
        self._palette = tuple(palette)
        self._counter = start

    @property
    def counter(self) -> int:
        return self._counter

    def _next(self) -> Tuple[str, str]:
        self._counter += 1
        return f"expr-{self._counter}", self._palette[self._counter % len(self._palette)]

    def create(self, raw: str = "", **fields) -> RawEntry:
        entry_id, color = self._next()
        fields.setdefault("color", color)
        return RawEntry(id=entry_id, raw=raw, **fields)

    def create_3d(self, raw: str = "", **fields) -> RawEntry3D:
        entry_id, color = self._next()
        fields.setdefault("color", color)
        return RawEntry3D(id=entry_id, raw=raw, **fields)

    def example(self, key: str) -> List[RawEntry]:
        """Entries for a named example set; unknown keys give the default pair."""
        return [self.create(raw) for raw in EXAMPLES.get(key, DEFAULT_EXAMPLE)]


def prepare_entries(entries: Iterable[RawEntry]) -> List[PreparedEntry]:
    return [PreparedEntry(entry, prepare_math(entry.raw)) for entry in entries]


def prepare_entries_3d(entries: Iterable[RawEntry3D]) -> List[PreparedEntry3D]:
    return [PreparedEntry3D(entry, prepare_math_3d(entry.raw)) for entry in entries]


__all__ = [
    "RawEntry",
    "RawEntry3D",
    "PreparedEntry",
    "PreparedEntry3D",
    "EntryFactory",
    "EXAMPLES",
    "prepare_entries",
    "prepare_entries_3d",
]
