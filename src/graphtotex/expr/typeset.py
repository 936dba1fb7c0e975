"""
LaTeX rendering of expression trees, used for the typeset preview string.
"""

from .ast import AstNode, Constant, Symbol, Group, UnaryOp, BinaryOp, Call
from .tokens import TokenType
from .errors import error_unsupported_feature


_SYMBOLS = {
    "pi": r"\pi",
}

_NAMED_FUNCTIONS = {
    "sin": r"\sin",
    "cos": r"\cos",
    "tan": r"\tan",
    "asin": r"\arcsin",
    "acos": r"\arccos",
    "atan": r"\arctan",
    "exp": r"\exp",
}

_BINARY = {
    TokenType.PLUS: "+",
    TokenType.MINUS: "-",
    TokenType.STAR: r"\cdot ",
    TokenType.PERCENT: r"\bmod ",
    TokenType.LT: "<",
    TokenType.GT: ">",
    TokenType.LE: r"\leq ",
    TokenType.GE: r"\geq ",
    TokenType.EQ: "=",
    TokenType.NE: r"\neq ",
}


def _strip_group(node: AstNode) -> AstNode:
    while isinstance(node, Group):
        node = node.inner
    return node


def _paren(text: str) -> str:
    return rf"\left({text}\right)"


def to_tex(node: AstNode) -> str:
    """Render an evaluable expression tree as a LaTeX math string."""
    if isinstance(node, Constant):
        return node.lexeme

    elif isinstance(node, Symbol):
        if node.name in _SYMBOLS:
            return _SYMBOLS[node.name]
        if len(node.name) == 1:
            return node.name
        return rf"\mathrm{{{node.name}}}"

    elif isinstance(node, Group):
        return _paren(to_tex(node.inner))

    elif isinstance(node, UnaryOp):
        sign = "-" if node.operator == TokenType.MINUS else "+"
        return f"{sign}{to_tex(node.operand)}"

    elif isinstance(node, BinaryOp):
        if node.operator == TokenType.SLASH:
            num = to_tex(_strip_group(node.left))
            den = to_tex(_strip_group(node.right))
            return rf"\frac{{{num}}}{{{den}}}"
        if node.operator == TokenType.CARET:
            return f"{{{to_tex(node.left)}}}^{{{to_tex(_strip_group(node.right))}}}"
        return f"{to_tex(node.left)}{_BINARY[node.operator]}{to_tex(node.right)}"

    elif isinstance(node, Call):
        args = [to_tex(_strip_group(arg)) for arg in node.arguments]
        if node.name == "sqrt" and len(args) == 1:
            return rf"\sqrt{{{args[0]}}}"
        if node.name == "abs" and len(args) == 1:
            return rf"\left|{args[0]}\right|"
        if node.name == "log" and len(args) == 1:
            return r"\ln" + _paren(args[0])
        if node.name == "log" and len(args) == 2:
            return rf"\log_{{{args[1]}}}" + _paren(args[0])
        if node.name == "log10" and len(args) == 1:
            return r"\log_{10}" + _paren(args[0])
        name = _NAMED_FUNCTIONS.get(node.name, rf"\mathrm{{{node.name}}}")
        return name + _paren(",".join(args))

    raise error_unsupported_feature(node.kind, node.span)
