"""
Token types for the graphtotex expression lexer.

The lexer recognises a superset of the plottable language so that the
parser can build (and the validator can reject by name) constructs such
as assignment, indexing, ranges and array/object literals.

Error code ranges:
- E0xx: Lexer errors
- E1xx: Parser errors
- E2xx: Validation errors
- E3xx: Equation form errors
- E4xx: Evaluation errors (never surfaced to users)
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Any, Optional


class TokenType(Enum):
    """All token types recognized by the expression lexer."""

    # --- Literals ---
    NUMBER = auto()             # 42, 3.14, .5, 1e-9

    # --- Identifiers ---
    IDENTIFIER = auto()         # x, y, pi, sin, ...

    # --- Arithmetic operators ---
    PLUS = auto()               # +
    MINUS = auto()              # -
    STAR = auto()               # *
    SLASH = auto()              # /
    PERCENT = auto()            # % (modulo)
    CARET = auto()              # ^ (power)
    DOUBLE_STAR = auto()        # ** (power, normally rewritten to ^)

    # --- Comparison operators ---
    LT = auto()                 # <
    GT = auto()                 # >
    LE = auto()                 # <=
    GE = auto()                 # >=
    EQ = auto()                 # ==
    NE = auto()                 # !=

    # --- Assignment ---
    ASSIGN = auto()             # =

    # --- Delimiters ---
    LPAREN = auto()             # (
    RPAREN = auto()             # )
    LBRACKET = auto()           # [
    RBRACKET = auto()           # ]
    LBRACE = auto()             # {
    RBRACE = auto()             # }
    COMMA = auto()              # ,
    COLON = auto()              # : (range)
    SEMICOLON = auto()          # ; (statement separator)
    DOT = auto()                # . (member access)
    NEWLINE = auto()            # statement separator outside brackets

    # --- Special ---
    EOF = auto()                # end of input


@dataclass(frozen=True)
class SourceLocation:
    """Represents a position in source text."""
    line: int           # 1-indexed line number
    column: int         # 1-indexed column number
    offset: int         # 0-indexed character offset from start

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


@dataclass(frozen=True)
class SourceSpan:
    """Represents a range in source text."""
    start: SourceLocation
    end: SourceLocation

    def __str__(self) -> str:
        return f"{self.start.line}:{self.start.column}-{self.end.line}:{self.end.column}"


@dataclass(frozen=True)
class Token:
    """A single token from the lexer."""
    type: TokenType
    value: Any              # float for NUMBER, str otherwise
    lexeme: str             # The original source text
    span: SourceSpan        # Location in source

    def __str__(self) -> str:
        if self.type in (TokenType.NUMBER, TokenType.IDENTIFIER):
            return f"{self.type.name}({self.value!r})"
        return self.type.name


# Printable operator symbols, used in diagnostics and typesetting
OPERATOR_SYMBOLS: dict[TokenType, str] = {
    TokenType.PLUS: "+",
    TokenType.MINUS: "-",
    TokenType.STAR: "*",
    TokenType.SLASH: "/",
    TokenType.PERCENT: "%",
    TokenType.CARET: "^",
    TokenType.DOUBLE_STAR: "^",
    TokenType.LT: "<",
    TokenType.GT: ">",
    TokenType.LE: "<=",
    TokenType.GE: ">=",
    TokenType.EQ: "==",
    TokenType.NE: "!=",
}

ARITHMETIC_OPERATORS = frozenset({
    TokenType.PLUS,
    TokenType.MINUS,
    TokenType.STAR,
    TokenType.SLASH,
    TokenType.PERCENT,
    TokenType.CARET,
})

COMPARISON_OPERATORS = frozenset({
    TokenType.LT,
    TokenType.GT,
    TokenType.LE,
    TokenType.GE,
    TokenType.EQ,
    TokenType.NE,
})


def operator_symbol(token_type: TokenType) -> str:
    """Return the printable symbol for an operator token type."""
    return OPERATOR_SYMBOLS.get(token_type, token_type.name)
