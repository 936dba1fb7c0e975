"""
Turn raw user text into a prepared, evaluable expression.

Preparation is a single pass: normalize the text, classify it as an
explicit curve ``y = f(x)`` or an implicit relation ``g(x, y) = 0``,
parse, validate against the safe subset and compile.  Any failure is
captured as the ``error`` string of the result; nothing is raised.

Results are memoized per input text and are immutable, so repeated
preparation of the same text is cheap and yields equal results.
"""

import logging
import math
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Sequence, Tuple

from .ast import Expression
from .errors import (
    ExpressionError,
    error_empty_equation_side,
    error_too_many_equals,
    error_equals_in_surface,
    error_nesting_too_deep,
)
from .evaluator import Evaluator, compile_expression
from .parser import parse_expression
from .typeset import to_tex
from .validator import ensure_valid, EXPLICIT_SYMBOLS, IMPLICIT_SYMBOLS, SURFACE_SYMBOLS

logger = logging.getLogger(__name__)

EXPLICIT = "explicit"
IMPLICIT = "implicit"

_LN_CALL = re.compile(r"\bln\s*\(")
_Y_WORD = re.compile(r"\by\b")
_FLOAT_PREFIX = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")

# Added to the upper bound of a domain whose bounds are equal or reversed
DEGENERATE_DOMAIN_PAD = 1e-6


@dataclass(frozen=True)
class PreparedMath:
    """Outcome of preparing one 2D entry."""
    normalized_input: str
    mode: str = EXPLICIT
    latex: Optional[str] = None
    error: Optional[str] = None
    evaluator: Optional[Evaluator] = None           # f(x), explicit mode
    implicit_evaluator: Optional[Evaluator] = None  # g(x, y), implicit mode
    node: Optional[Expression] = None

    @property
    def is_valid(self) -> bool:
        return self.error is None and (self.evaluator is not None
                                       or self.implicit_evaluator is not None)


@dataclass(frozen=True)
class PreparedSurfaceMath:
    """Outcome of preparing one 3D surface entry ``z = f(x, y)``."""
    normalized_input: str
    latex: Optional[str] = None
    error: Optional[str] = None
    evaluator: Optional[Evaluator] = None
    node: Optional[Expression] = None

    @property
    def is_valid(self) -> bool:
        return self.error is None and self.evaluator is not None


def normalize_input(raw: str) -> str:
    """Trim, rewrite ``**`` as ``^`` and ``ln(`` as ``log(``."""
    text = raw.strip().replace("**", "^")
    return _LN_CALL.sub("log(", text)


def _compile_checked(text: str, allowed: Sequence[str],
                     variables: Sequence[str]) -> Tuple[Expression, Evaluator]:
    """Parse, validate and compile ``text``.

    Raises:
        ExpressionError: Syntax error, disallowed construct or a tree
            too deep to compile
    """
    try:
        node = parse_expression(text)
        ensure_valid(node, allowed)
        return node, compile_expression(node, variables)
    except RecursionError:
        raise error_nesting_too_deep(source_line=text) from None


def _typeset_checked(node: Expression, text: str) -> str:
    try:
        return to_tex(node)
    except RecursionError:
        raise error_nesting_too_deep(source_line=text) from None


@lru_cache(maxsize=256)
def _prepare_explicit(text: str) -> PreparedMath:
    try:
        node, evaluator = _compile_checked(text, EXPLICIT_SYMBOLS, ("x",))
        latex = _typeset_checked(node, text)
    except ExpressionError as exc:
        logger.debug("explicit %r rejected: %s", text, exc)
        return PreparedMath(normalized_input=text, mode=EXPLICIT, error=str(exc))

    return PreparedMath(
        normalized_input=text,
        mode=EXPLICIT,
        latex=latex,
        evaluator=evaluator,
        node=node,
    )


@lru_cache(maxsize=256)
def _prepare_implicit(text: str, left: str, right: str) -> PreparedMath:
    try:
        node, evaluator = _compile_checked(f"({left}) - ({right})", IMPLICIT_SYMBOLS, ("x", "y"))
    except ExpressionError as exc:
        logger.debug("implicit %r rejected: %s", text, exc)
        return PreparedMath(normalized_input=text, mode=IMPLICIT, latex=text, error=str(exc))

    return PreparedMath(
        normalized_input=text,
        mode=IMPLICIT,
        latex=text,
        implicit_evaluator=evaluator,
        node=node,
    )


@lru_cache(maxsize=256)
def prepare_math(raw: str) -> PreparedMath:
    """
    Prepare a 2D entry.

    ``y = f(x)`` and ``f(x) = y`` (with no other ``y``) are explicit curves
    and are prepared exactly like ``f(x)``.  Any other equation is an
    implicit relation ``left - right = 0``.  Blank input yields an empty
    result with no error.
    """
    text = normalize_input(raw)
    if not text:
        return PreparedMath(normalized_input=text)

    parts = text.split("=")

    if len(parts) == 2:
        left, right = parts[0].strip(), parts[1].strip()
        if not left or not right:
            return PreparedMath(normalized_input=text, mode=IMPLICIT, latex=text,
                                error=str(error_empty_equation_side(text)))

        if left == "y" and not _Y_WORD.search(right):
            return _prepare_explicit(right)
        if right == "y" and not _Y_WORD.search(left):
            return _prepare_explicit(left)

        return _prepare_implicit(text, left, right)

    if len(parts) > 2:
        return PreparedMath(normalized_input=text, mode=IMPLICIT, latex=text,
                            error=str(error_too_many_equals(text)))

    return _prepare_explicit(text)


@lru_cache(maxsize=256)
def prepare_math_3d(raw: str) -> PreparedSurfaceMath:
    """Prepare a surface ``z = f(x, y)``, entered as ``f(x, y)``."""
    text = normalize_input(raw)
    if not text:
        return PreparedSurfaceMath(normalized_input=text)

    if "=" in text:
        return PreparedSurfaceMath(normalized_input=text, latex=text,
                                   error=str(error_equals_in_surface(text)))

    try:
        node, evaluator = _compile_checked(text, SURFACE_SYMBOLS, ("x", "y"))
        latex = _typeset_checked(node, text)
    except ExpressionError as exc:
        logger.debug("surface %r rejected: %s", text, exc)
        return PreparedSurfaceMath(normalized_input=text, error=str(exc))

    return PreparedSurfaceMath(
        normalized_input=text,
        latex=f"z = {latex}",
        evaluator=evaluator,
        node=node,
    )


def parse_float_prefix(text: Optional[str]) -> Optional[float]:
    """Parse the leading decimal number of ``text`` ("2.5abc" -> 2.5)."""
    if not text:
        return None
    match = _FLOAT_PREFIX.match(text)
    if match is None:
        return None
    value = float(match.group(1))
    return value if math.isfinite(value) else None


def _ordered_bounds(lo: float, hi: float) -> Tuple[float, float]:
    if hi <= lo:
        return min(lo, hi), max(lo, hi) + DEGENERATE_DOMAIN_PAD
    return lo, hi


def parse_domain_bounds(min_text: Optional[str], max_text: Optional[str],
                        viewport) -> Tuple[float, float]:
    """Declared x-domain of a 2D entry, defaulting to the viewport's x range."""
    lo = parse_float_prefix(min_text)
    hi = parse_float_prefix(max_text)
    return _ordered_bounds(
        viewport.x_min if lo is None else lo,
        viewport.x_max if hi is None else hi,
    )


def parse_surface_domain_bounds(min_text: Optional[str], max_text: Optional[str],
                                fallback_min: float, fallback_max: float) -> Tuple[float, float]:
    """Declared domain along one axis of a surface entry."""
    lo = parse_float_prefix(min_text)
    hi = parse_float_prefix(max_text)
    return _ordered_bounds(
        fallback_min if lo is None else lo,
        fallback_max if hi is None else hi,
    )
