"""
Numeric evaluation of validated expressions.

An expression tree is compiled once into nested closures (no ``eval``),
wrapped in an immutable :class:`Evaluator`.  Evaluation is real-valued
where possible and falls back to complex arithmetic (``cmath``) for
negative square roots, logarithms of negative numbers and the like; a
complex result with a negligible imaginary part is accepted as real.

Evaluation never raises to the caller.  Any failure (undefined value,
overflow, division by zero, wrong arity) is reported as a failed
:class:`EvalResult`, which samplers treat as a gap in the geometry.
"""

import cmath
import math
import operator
from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Optional, Sequence, Tuple, Union

from .ast import AstNode, Constant, Symbol, Group, UnaryOp, BinaryOp, Call
from .tokens import TokenType
from .errors import EvaluationError, error_evaluation, error_unsupported_feature


Number = Union[float, complex]
Environment = Mapping[str, float]
Compiled = Callable[[Environment], Number]

# Imaginary parts below this are treated as rounding noise
COMPLEX_TOLERANCE = 1e-10

CONSTANTS: Dict[str, float] = {
    "pi": math.pi,
    "e": math.e,
}


@dataclass(frozen=True)
class EvalResult:
    """Outcome of one evaluation: a finite real value or an error string."""
    value: Optional[float] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.value is not None


def to_finite_number(value) -> Optional[float]:
    """
    Coerce an evaluation result to a finite real number.

    Finite reals pass through; complex values with a finite real part and
    ``|imag| < 1e-10`` become their real part; anything else is None.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, complex):
        if abs(value.imag) < COMPLEX_TOLERANCE and math.isfinite(value.real):
            return value.real
        return None
    if isinstance(value, (int, float)):
        value = float(value)
        return value if math.isfinite(value) else None
    return None


# =============================================================================
# Function Table
# =============================================================================

def _real_or_complex(real_fn: Callable, complex_fn: Callable) -> Callable[[Number], Number]:
    """Prefer the real function, retrying in the complex plane on domain errors."""
    def fn(value: Number) -> Number:
        if isinstance(value, complex):
            return complex_fn(value)
        try:
            return real_fn(value)
        except ValueError:
            return complex_fn(value)
    return fn


_ln = _real_or_complex(math.log, cmath.log)


def _log(value: Number, base: Optional[Number] = None) -> Number:
    if base is None:
        return _ln(value)
    return _ln(value) / _ln(base)


def _exp(value: Number) -> Number:
    if isinstance(value, complex):
        return cmath.exp(value)
    return math.exp(value)


def _power(base: Number, exponent: Number) -> Number:
    # float ** float already yields a complex for negative bases
    return base ** exponent


def _modulo(left: Number, right: Number) -> Number:
    if isinstance(left, complex) or isinstance(right, complex):
        raise error_evaluation("Modulo is undefined for complex values")
    return left % right


# name -> (implementation, accepted argument counts)
FUNCTIONS: Dict[str, Tuple[Callable[..., Number], Tuple[int, ...]]] = {
    "sin": (_real_or_complex(math.sin, cmath.sin), (1,)),
    "cos": (_real_or_complex(math.cos, cmath.cos), (1,)),
    "tan": (_real_or_complex(math.tan, cmath.tan), (1,)),
    "asin": (_real_or_complex(math.asin, cmath.asin), (1,)),
    "acos": (_real_or_complex(math.acos, cmath.acos), (1,)),
    "atan": (_real_or_complex(math.atan, cmath.atan), (1,)),
    "sqrt": (_real_or_complex(math.sqrt, cmath.sqrt), (1,)),
    "abs": (abs, (1,)),
    "log": (_log, (1, 2)),
    "log10": (_real_or_complex(math.log10, cmath.log10), (1,)),
    "exp": (_exp, (1,)),
}

BINARY_OPERATORS: Dict[TokenType, Callable[[Number, Number], Number]] = {
    TokenType.PLUS: operator.add,
    TokenType.MINUS: operator.sub,
    TokenType.STAR: operator.mul,
    TokenType.SLASH: operator.truediv,
    TokenType.PERCENT: _modulo,
    TokenType.CARET: _power,
}


# =============================================================================
# Compilation
# =============================================================================

def _compile(node: AstNode, variables: Sequence[str]) -> Compiled:
    """Compile an AST node to a closure over the evaluation environment."""
    if isinstance(node, Constant):
        value = float(node.value)
        return lambda env: value

    elif isinstance(node, Symbol):
        name = node.name
        if name in variables:
            return lambda env: env[name]
        if name in CONSTANTS:
            value = CONSTANTS[name]
            return lambda env: value

        def undefined(env: Environment) -> Number:
            raise error_evaluation(f"Undefined symbol: {name}")
        return undefined

    elif isinstance(node, Group):
        return _compile(node.inner, variables)

    elif isinstance(node, UnaryOp):
        operand = _compile(node.operand, variables)
        if node.operator == TokenType.MINUS:
            return lambda env: -operand(env)
        if node.operator == TokenType.PLUS:
            return operand

        def unsupported_unary(env: Environment) -> Number:
            raise error_evaluation(f"Unsupported unary operator: {node.operator.name}")
        return unsupported_unary

    elif isinstance(node, BinaryOp):
        left = _compile(node.left, variables)
        right = _compile(node.right, variables)
        op = BINARY_OPERATORS.get(node.operator)
        if op is None:
            def unsupported_binary(env: Environment) -> Number:
                raise error_evaluation(f"Unsupported operator: {node.operator.name}")
            return unsupported_binary
        return lambda env: op(left(env), right(env))

    elif isinstance(node, Call):
        entry = FUNCTIONS.get(node.name)
        name = node.name
        if entry is None:
            def unknown_function(env: Environment) -> Number:
                raise error_evaluation(f"Undefined function: {name}")
            return unknown_function

        fn, arities = entry
        if len(node.arguments) not in arities:
            count = len(node.arguments)

            def wrong_arity(env: Environment) -> Number:
                raise error_evaluation(f"Wrong number of arguments for {name}: {count}")
            return wrong_arity

        args = [_compile(arg, variables) for arg in node.arguments]
        if len(args) == 1:
            only = args[0]
            return lambda env: fn(only(env))
        return lambda env: fn(*[arg(env) for arg in args])

    raise error_unsupported_feature(node.kind, node.span)


class Evaluator:
    """
    A compiled expression bound to an ordered list of variables.

    Usage:
        f = compile_expression(parse_expression("x^2 + y"), ("x", "y"))
        f.evaluate({"x": 2.0, "y": 1.0})   # EvalResult(value=5.0)
        f(2.0, 1.0)                          # 5.0
    """

    def __init__(self, node: AstNode, variables: Sequence[str]):
        self._node = node
        self._variables = tuple(variables)
        self._compiled = _compile(node, self._variables)

    @property
    def node(self) -> AstNode:
        return self._node

    @property
    def variables(self) -> Tuple[str, ...]:
        return self._variables

    @property
    def arity(self) -> int:
        return len(self._variables)

    def evaluate(self, bindings: Environment) -> EvalResult:
        """Evaluate with named variable bindings."""
        try:
            raw = self._compiled(bindings)
        except KeyError as exc:
            return EvalResult(error=f"Missing binding for {exc.args[0]}")
        except (EvaluationError, ArithmeticError, ValueError, TypeError, RecursionError) as exc:
            return EvalResult(error=str(exc) or exc.__class__.__name__)

        value = to_finite_number(raw)
        if value is None:
            return EvalResult(error=f"Non-finite or non-real result: {raw!r}")
        return EvalResult(value=value)

    def __call__(self, *args: float) -> Optional[float]:
        """Positional shorthand; returns the value or None on failure."""
        if len(args) != len(self._variables):
            raise TypeError(
                f"expected {len(self._variables)} argument(s), got {len(args)}"
            )
        return self.evaluate(dict(zip(self._variables, args))).value

    def __eq__(self, other) -> bool:
        if not isinstance(other, Evaluator):
            return NotImplemented
        return self._variables == other._variables and self._node == other._node

    def __hash__(self) -> int:
        return hash(self._variables)

    def __repr__(self) -> str:
        return f"Evaluator(variables={self._variables!r})"


def compile_expression(node: AstNode, variables: Sequence[str]) -> Evaluator:
    """
    Compile a validated expression tree.

    Args:
        node: Expression tree (normally already accepted by the validator)
        variables: Names bound positionally when the evaluator is called

    Raises:
        ValidationError: If the tree contains a structural node
    """
    return Evaluator(node, variables)
