"""
Transpile validated expression trees into pgfmath syntax.

pgfmath (used by TikZ ``plot`` and pgfplots ``\\addplot3``) differs from
the plotting evaluator in two ways that matter here: trigonometric
functions work in degrees, and ``^`` is not reliable inside plot
expressions, so powers are written as ``pow(a,b)``.  Every operand is
parenthesized so no precedence information is lost.

Conversion never raises.  A construct that cannot be expressed safely
yields ``TikzExprResult(ok=False, reason=...)`` and the exporter falls
back to sampled coordinates.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional

from graphtotex.expr.ast import AstNode, Constant, Symbol, Group, UnaryOp, BinaryOp, Call
from graphtotex.expr.tokens import TokenType, operator_symbol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TikzExprResult:
    ok: bool
    expression: Optional[str] = None
    reason: Optional[str] = None


def _fail(reason: str) -> TikzExprResult:
    return TikzExprResult(ok=False, reason=reason)


def _success(expression: str) -> TikzExprResult:
    return TikzExprResult(ok=True, expression=expression)


_WRAPPED_OPERATORS = {
    TokenType.PLUS: "+",
    TokenType.MINUS: "-",
    TokenType.STAR: "*",
    TokenType.SLASH: "/",
}

_NAMED_CONSTANTS = {
    "pi": "pi",
    "e": "exp(1)",
}

# Trig functions take radians when plotted but degrees in pgfmath
UNSUPPORTED_TRIG_2D = frozenset({"sin", "cos", "tan", "asin", "acos", "atan"})
SUPPORTED_FUNCTIONS_2D = frozenset({"sqrt", "abs", "exp", "log", "ln"})


class _Converter:
    """Shared tree walk; subclasses decide how variables and calls are spelled."""

    variables: Dict[str, str] = {}

    def convert(self, node: AstNode) -> TikzExprResult:
        if isinstance(node, Group):
            return self.convert(node.inner)

        if isinstance(node, Constant):
            return _success(node.lexeme)

        if isinstance(node, Symbol):
            if node.name in self.variables:
                return _success(self.variables[node.name])
            if node.name in _NAMED_CONSTANTS:
                return _success(_NAMED_CONSTANTS[node.name])
            return _fail(f"Unsupported symbol {node.name}")

        if isinstance(node, UnaryOp):
            if node.operator != TokenType.MINUS:
                return _fail("Only binary operators are supported.")
            arg = self.convert(node.operand)
            if not arg.ok:
                return arg
            return _success(f"-({arg.expression})")

        if isinstance(node, BinaryOp):
            left = self.convert(node.left)
            if not left.ok:
                return left
            right = self.convert(node.right)
            if not right.ok:
                return right

            if node.operator in _WRAPPED_OPERATORS:
                op = _WRAPPED_OPERATORS[node.operator]
                return _success(f"({left.expression}){op}({right.expression})")
            if node.operator == TokenType.CARET:
                return _success(f"pow({left.expression},{right.expression})")
            return _fail(f"Unsupported operator {operator_symbol(node.operator)}")

        if isinstance(node, Call):
            return self.convert_call(node)

        return _fail(f"Unsupported node type {node.kind}")

    def convert_call(self, node: Call) -> TikzExprResult:
        raise NotImplementedError


class _Converter2D(_Converter):
    variables = {"x": "\\x"}

    def convert_call(self, node: Call) -> TikzExprResult:
        name = node.name
        if name in UNSUPPORTED_TRIG_2D:
            return _fail(f"Trig/inverse trig export is emitted as coordinates for safety ({name}).")
        if name not in SUPPORTED_FUNCTIONS_2D:
            return _fail(f"Unsupported function {name}")
        if len(node.arguments) != 1:
            return _fail(f"{name} with multiple arguments is unsupported.")

        arg = self.convert(node.arguments[0])
        if not arg.ok:
            return arg
        if name in ("log", "ln"):
            return _success(f"ln({arg.expression})")
        return _success(f"{name}({arg.expression})")


class _Converter3D(_Converter):
    variables = {"x": "x", "y": "y"}

    def convert_call(self, node: Call) -> TikzExprResult:
        name = node.name
        if len(node.arguments) != 1:
            return _fail(f"{name} with multiple arguments is unsupported.")

        arg = self.convert(node.arguments[0])
        if not arg.ok:
            return arg
        a = arg.expression

        if name in ("sin", "cos", "tan"):
            return _success(f"{name}(deg({a}))")
        if name in ("asin", "acos", "atan"):
            return _success(f"({name}({a}))*pi/180")
        if name in ("sqrt", "abs", "exp"):
            return _success(f"{name}({a})")
        if name == "log":
            return _success(f"ln({a})")
        if name == "log10":
            return _success(f"(ln({a})/ln(10))")
        return _fail(f"Unsupported function {name}")


def convert_ast_to_tikz(node: Optional[AstNode]) -> TikzExprResult:
    """Convert a 2D curve ``y = f(x)`` to a TikZ ``plot`` expression in ``\\x``."""

    if node is None:
        return _fail("No parsed expression.")
    result = _Converter2D().convert(node)
    if not result.ok:
        logger.debug("2D transpile fallback: %s", result.reason)
    return result


def convert_ast_to_tikz_3d(node: Optional[AstNode]) -> TikzExprResult:
    """Convert a surface ``z = f(x, y)`` to a pgfplots expression in ``x`` and ``y``."""

    if node is None:
        return _fail("No parsed expression.")
    result = _Converter3D().convert(node)
    if not result.ok:
        logger.debug("3D transpile fallback: %s", result.reason)
    return result


__all__ = [
    "TikzExprResult",
    "convert_ast_to_tikz",
    "convert_ast_to_tikz_3d",
]
