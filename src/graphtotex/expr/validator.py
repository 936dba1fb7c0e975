"""
Safety validator for parsed math expressions.

Walks the AST in pre-order and stops at the first construct that is not
plain arithmetic over the allowed symbols.  The accepted language is:

- numeric constants
- symbols from the caller's allowed set (function-name positions excluded)
- parentheses
- unary ``-`` and ``+``
- binary ``+ - * / ^ %``
- calls of the whitelisted functions below

Everything else (assignment, function definition, indexing, member
access, ranges, array/object literals, blocks, comparisons) is rejected.
"""

from typing import Optional, Sequence

from .ast import (
    AstNode, Constant, Symbol, Group, UnaryOp, BinaryOp, Call, walk,
)
from .tokens import TokenType, ARITHMETIC_OPERATORS, operator_symbol
from .errors import (
    Diagnostic,
    ValidationError,
    error_unsupported_feature,
    error_unsupported_function,
    error_unknown_symbol,
    error_unsupported_operator,
)


ALLOWED_FUNCTIONS = frozenset({
    "sin", "cos", "tan",
    "asin", "acos", "atan",
    "sqrt", "abs",
    "log", "log10", "exp",
})

EXPLICIT_SYMBOLS = ("x", "pi", "e")
IMPLICIT_SYMBOLS = ("x", "y", "pi", "e")
SURFACE_SYMBOLS = IMPLICIT_SYMBOLS

_UNARY_OPERATORS = frozenset({TokenType.MINUS, TokenType.PLUS})

_EVALUABLE_NODES = (Constant, Symbol, Group, UnaryOp, BinaryOp, Call)


def _first_violation(node: AstNode, allowed_symbols: Sequence[str]) -> Optional[ValidationError]:
    for item in walk(node):
        if not isinstance(item, _EVALUABLE_NODES):
            return error_unsupported_feature(item.kind, item.span)

        if isinstance(item, UnaryOp) and item.operator not in _UNARY_OPERATORS:
            return error_unsupported_operator(operator_symbol(item.operator), item.span)

        if isinstance(item, BinaryOp) and item.operator not in ARITHMETIC_OPERATORS:
            return error_unsupported_operator(operator_symbol(item.operator), item.span)

        if isinstance(item, Call) and item.name not in ALLOWED_FUNCTIONS:
            return error_unsupported_function(item.name, item.span)

        if isinstance(item, Symbol) and item.name not in allowed_symbols:
            return error_unknown_symbol(item.name, list(allowed_symbols), item.span)

    return None


def validate(node: AstNode, allowed_symbols: Sequence[str]) -> Optional[str]:
    """
    Check that ``node`` only uses safe arithmetic.

    Args:
        node: Root of the parsed expression
        allowed_symbols: Symbol names that may be referenced, in the order
            they should be listed in the error message

    Returns:
        None if the expression is acceptable, otherwise a message naming
        the first offending construct.
    """
    error = _first_violation(node, allowed_symbols)
    return None if error is None else str(error)


def check(node: AstNode, allowed_symbols: Sequence[str]) -> Optional[Diagnostic]:
    """Like :func:`validate` but return the coded diagnostic (E2xx)."""
    error = _first_violation(node, allowed_symbols)
    return None if error is None else error.diagnostic


def ensure_valid(node: AstNode, allowed_symbols: Sequence[str]) -> None:
    """Raise the first violation as a :class:`ValidationError`."""
    error = _first_violation(node, allowed_symbols)
    if error is not None:
        raise error
