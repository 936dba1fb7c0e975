"""
graphtotex math expression front end.

This module provides:
- Lexer: Tokenizes expression text
- Parser: Builds an AST from tokens
- Validator: Rejects anything but safe arithmetic
- Evaluator: Compiles a validated AST into a numeric function
- Typeset: Renders an AST as LaTeX
- Prepare: The normalize / classify / validate / compile pipeline

Usage:
    from graphtotex.expr import prepare_math, parse_expression, compile_expression

    prepared = prepare_math("y = sin(x) / x")
    if prepared.error is None:
        print(prepared.latex, prepared.evaluator(1.0))

    # Or step by step
    tree = parse_expression("x^2 + y^2 - 1")
    f = compile_expression(tree, ("x", "y"))
    print(f(1.0, 0.0))
"""

from .tokens import (
    Token,
    TokenType,
    SourceLocation,
    SourceSpan,
)

from .lexer import (
    Lexer,
    tokenize,
)

from .parser import (
    Parser,
    parse,
    parse_expression,
)

from .ast import (
    # Base
    AstNode,
    Expression,
    # Evaluable
    Constant,
    Symbol,
    Group,
    UnaryOp,
    BinaryOp,
    Call,
    # Structural
    Assignment,
    FunctionDef,
    IndexAccess,
    MemberAccess,
    RangeExpr,
    ArrayLiteral,
    ObjectLiteral,
    Block,
    # Helpers
    walk,
    depth,
)

from .errors import (
    ErrorSeverity,
    Diagnostic,
    ExpressionError,
    LexerError,
    ParserError,
    ValidationError,
    FormError,
    EvaluationError,
)

from .validator import (
    ALLOWED_FUNCTIONS,
    EXPLICIT_SYMBOLS,
    IMPLICIT_SYMBOLS,
    SURFACE_SYMBOLS,
    validate,
    check,
)

from .evaluator import (
    EvalResult,
    Evaluator,
    compile_expression,
    to_finite_number,
)

from .typeset import to_tex

from .prepare import (
    EXPLICIT,
    IMPLICIT,
    PreparedMath,
    PreparedSurfaceMath,
    normalize_input,
    prepare_math,
    prepare_math_3d,
    parse_domain_bounds,
    parse_surface_domain_bounds,
)

__all__ = [
    # Tokens
    "Token",
    "TokenType",
    "SourceLocation",
    "SourceSpan",
    # Lexer
    "Lexer",
    "tokenize",
    # Parser
    "Parser",
    "parse",
    "parse_expression",
    # AST
    "AstNode",
    "Expression",
    "Constant",
    "Symbol",
    "Group",
    "UnaryOp",
    "BinaryOp",
    "Call",
    "Assignment",
    "FunctionDef",
    "IndexAccess",
    "MemberAccess",
    "RangeExpr",
    "ArrayLiteral",
    "ObjectLiteral",
    "Block",
    "walk",
    "depth",
    # Errors
    "ErrorSeverity",
    "Diagnostic",
    "ExpressionError",
    "LexerError",
    "ParserError",
    "ValidationError",
    "FormError",
    "EvaluationError",
    # Validation
    "ALLOWED_FUNCTIONS",
    "EXPLICIT_SYMBOLS",
    "IMPLICIT_SYMBOLS",
    "SURFACE_SYMBOLS",
    "validate",
    "check",
    # Evaluation
    "EvalResult",
    "Evaluator",
    "compile_expression",
    "to_finite_number",
    # Typesetting
    "to_tex",
    # Preparation
    "EXPLICIT",
    "IMPLICIT",
    "PreparedMath",
    "PreparedSurfaceMath",
    "normalize_input",
    "prepare_math",
    "prepare_math_3d",
    "parse_domain_bounds",
    "parse_surface_domain_bounds",
]
