"""
Abstract Syntax Tree (AST) node definitions for graphtotex math expressions.

The tree is closed: every node the parser can produce is declared here.
Only Constant, Symbol, Group, UnaryOp, BinaryOp and Call ever reach the
evaluator; the remaining node kinds exist so the validator can reject
them by name.
"""

from dataclasses import dataclass, field
from typing import Optional, List, Tuple, Iterator
from abc import ABC
from .tokens import SourceSpan, TokenType


# =============================================================================
# Base Classes
# =============================================================================

@dataclass
class AstNode(ABC):
    """Base class for all AST nodes."""
    span: SourceSpan  # Source location for error reporting

    @property
    def kind(self) -> str:
        """Node kind name, as shown in diagnostics."""
        return self.__class__.__name__


@dataclass
class Expression(AstNode):
    """Base class for all expressions."""
    pass


# =============================================================================
# Evaluable Nodes
# =============================================================================

@dataclass
class Constant(Expression):
    """A numeric literal. ``lexeme`` keeps the source spelling."""
    value: float
    lexeme: str


@dataclass
class Symbol(Expression):
    """A variable or named constant reference (x, y, pi, e)."""
    name: str


@dataclass
class Group(Expression):
    """A parenthesized expression."""
    inner: Expression


@dataclass
class UnaryOp(Expression):
    """A prefix operation (-x, +x)."""
    operator: TokenType
    operand: Expression


@dataclass
class BinaryOp(Expression):
    """A binary operation (x + 1, x ^ 2, x < 1)."""
    left: Expression
    operator: TokenType
    right: Expression


@dataclass
class Call(Expression):
    """A call of a named function, e.g. sin(x)."""
    name: str
    arguments: List[Expression]


# =============================================================================
# Structural Nodes (never evaluated)
# =============================================================================

@dataclass
class Assignment(Expression):
    """Variable assignment, e.g. a = 2."""
    target: Expression
    value: Expression


@dataclass
class FunctionDef(Expression):
    """Function definition, e.g. f(t) = t^2."""
    name: str
    params: List[str]
    body: Expression


@dataclass
class IndexAccess(Expression):
    """Indexing, e.g. x[0]."""
    target: Expression
    indices: List[Expression]


@dataclass
class MemberAccess(Expression):
    """Member access, e.g. a.b."""
    target: Expression
    member: str


@dataclass
class RangeExpr(Expression):
    """Range, e.g. 1:10 or 1:2:10."""
    start: Expression
    end: Expression
    step: Optional[Expression] = None


@dataclass
class ArrayLiteral(Expression):
    """Array literal, e.g. [1, 2]."""
    elements: List[Expression]


@dataclass
class ObjectLiteral(Expression):
    """Object literal, e.g. {a: 1}."""
    entries: List[Tuple[str, Expression]] = field(default_factory=list)


@dataclass
class Block(Expression):
    """Several expressions separated by ';' or newlines."""
    statements: List[Expression]


# =============================================================================
# Traversal Helpers
# =============================================================================

def iter_children(node: AstNode) -> Iterator[AstNode]:
    """Yield the direct child nodes of ``node`` in source order."""
    for name, value in node.__dict__.items():
        if name == "span":
            continue
        if isinstance(value, AstNode):
            yield value
        elif isinstance(value, list):
            for item in value:
                if isinstance(item, AstNode):
                    yield item
                elif isinstance(item, tuple):
                    for part in item:
                        if isinstance(part, AstNode):
                            yield part


def walk(node: AstNode) -> Iterator[AstNode]:
    """Pre-order traversal of ``node`` and all its descendants."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(list(iter_children(current))))


def depth(node: AstNode) -> int:
    """Number of nodes on the longest root-to-leaf path of ``node``."""
    deepest = 0
    stack = [(node, 1)]
    while stack:
        current, level = stack.pop()
        deepest = max(deepest, level)
        stack.extend((child, level + 1) for child in iter_children(current))
    return deepest
