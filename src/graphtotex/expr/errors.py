"""
Expression-specific exceptions and diagnostics.

Error code ranges:
- E0xx: Lexer errors
- E1xx: Parser errors
- E2xx: Validation errors
- E3xx: Equation form errors
- E4xx: Evaluation errors
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List
from .tokens import SourceSpan


class ErrorSeverity(Enum):
    """Severity levels for diagnostics."""
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass
class Diagnostic:
    """A single diagnostic message (error, warning, etc.)."""
    code: str                       # E001, E101, etc.
    message: str                    # Human-readable message
    severity: ErrorSeverity
    span: Optional[SourceSpan] = None
    source_line: Optional[str] = None   # The expression text
    hints: List[str] = field(default_factory=list)

    def format(self, show_source: bool = True) -> str:
        """Format the diagnostic for display."""
        parts = []

        loc = f"{self.span.start}: " if self.span is not None else ""
        parts.append(f"{loc}{self.severity.value}[{self.code}]: {self.message}")

        # Source line with caret
        if show_source and self.source_line is not None and self.span is not None:
            parts.append(f"  | {self.source_line}")
            col = self.span.start.column
            end_col = self.span.end.column if self.span.start.line == self.span.end.line else len(self.source_line) + 1
            underline_len = max(1, end_col - col)
            parts.append(f"  | {' ' * (col - 1)}{'^' * underline_len}")

        for hint in self.hints:
            parts.append(f"  = hint: {hint}")

        return "\n".join(parts)

    def to_json(self) -> dict:
        """Convert to JSON-serializable dict for tooling integration."""
        result = {
            "code": self.code,
            "message": self.message,
            "severity": self.severity.value,
            "hints": self.hints,
        }
        if self.span is not None:
            result["range"] = {
                "start": {"column": self.span.start.column, "offset": self.span.start.offset},
                "end": {"column": self.span.end.column, "offset": self.span.end.offset},
            }
        return result


class ExpressionError(Exception):
    """Base exception for expression errors.

    ``str(error)`` is the bare message, which is what gets surfaced as the
    per-entry error string; use ``error.diagnostic.format()`` for the
    annotated form.
    """

    def __init__(self, diagnostic: Diagnostic):
        self.diagnostic = diagnostic
        super().__init__(diagnostic.message)

    def __str__(self) -> str:
        return self.diagnostic.message


class LexerError(ExpressionError):
    """Error during lexical analysis (E0xx)."""
    pass


class ParserError(ExpressionError):
    """Error during parsing (E1xx)."""
    pass


class ValidationError(ExpressionError):
    """Parsed expression uses a disallowed construct (E2xx)."""
    pass


class FormError(ExpressionError):
    """Equation has the wrong shape for the plotting mode (E3xx)."""
    pass


class EvaluationError(ExpressionError):
    """A single evaluation failed (E4xx).

    Only raised inside the evaluator; callers receive it as a failed
    ``EvalResult`` instead.
    """
    pass


# --- Lexer error codes ---

def error_unexpected_character(char: str, span: SourceSpan, source_line: str = None) -> LexerError:
    """E001: Unexpected character."""
    diag = Diagnostic(
        code="E001",
        message=f"Unexpected character '{char}' at position {span.start.offset}",
        severity=ErrorSeverity.ERROR,
        span=span,
        source_line=source_line,
    )
    return LexerError(diag)


def error_invalid_number_literal(text: str, span: SourceSpan, source_line: str = None) -> LexerError:
    """E002: Invalid number literal."""
    diag = Diagnostic(
        code="E002",
        message=f"Invalid number '{text}' at position {span.start.offset}",
        severity=ErrorSeverity.ERROR,
        span=span,
        source_line=source_line,
        hints=["exponents need digits: 1e3, 2.5e-4"],
    )
    return LexerError(diag)


# --- Parser error codes ---

def error_unexpected_token(expected: str, found: str, span: SourceSpan,
                           source_line: str = None) -> ParserError:
    """E101: Unexpected token."""
    diag = Diagnostic(
        code="E101",
        message=f"Expected {expected}, found '{found}' at position {span.start.offset}",
        severity=ErrorSeverity.ERROR,
        span=span,
        source_line=source_line,
    )
    return ParserError(diag)


def error_unexpected_end(expected: str, span: SourceSpan, source_line: str = None) -> ParserError:
    """E102: Unexpected end of expression."""
    diag = Diagnostic(
        code="E102",
        message=f"Unexpected end of expression, expected {expected}",
        severity=ErrorSeverity.ERROR,
        span=span,
        source_line=source_line,
    )
    return ParserError(diag)


def error_invalid_assignment_target(span: SourceSpan, source_line: str = None) -> ParserError:
    """E103: Left side of '=' cannot be assigned to."""
    diag = Diagnostic(
        code="E103",
        message=f"Invalid left hand side of assignment at position {span.start.offset}",
        severity=ErrorSeverity.ERROR,
        span=span,
        source_line=source_line,
    )
    return ParserError(diag)


def error_nesting_too_deep(span: SourceSpan = None, source_line: str = None) -> ParserError:
    """E104: Expression tree deeper than the evaluator accepts."""
    diag = Diagnostic(
        code="E104",
        message="Expression is nested too deeply.",
        severity=ErrorSeverity.ERROR,
        span=span,
        source_line=source_line,
    )
    return ParserError(diag)


# --- Validation error codes ---

def error_unsupported_feature(kind: str, span: SourceSpan = None) -> ValidationError:
    """E201: Structural construct that is never evaluated."""
    diag = Diagnostic(
        code="E201",
        message=f"Unsupported expression feature: {kind}",
        severity=ErrorSeverity.ERROR,
        span=span,
    )
    return ValidationError(diag)


def error_unsupported_function(name: str, span: SourceSpan = None) -> ValidationError:
    """E202: Function outside the whitelist."""
    diag = Diagnostic(
        code="E202",
        message=f'Unsupported function "{name}".',
        severity=ErrorSeverity.ERROR,
        span=span,
    )
    return ValidationError(diag)


def error_unknown_symbol(name: str, allowed: List[str], span: SourceSpan = None) -> ValidationError:
    """E203: Symbol outside the allowed set."""
    diag = Diagnostic(
        code="E203",
        message=f'Unknown symbol "{name}". Use {", ".join(allowed)} as symbols.',
        severity=ErrorSeverity.ERROR,
        span=span,
    )
    return ValidationError(diag)


def error_unsupported_operator(symbol: str, span: SourceSpan = None) -> ValidationError:
    """E204: Non-arithmetic operator."""
    diag = Diagnostic(
        code="E204",
        message=f'Unsupported operator "{symbol}".',
        severity=ErrorSeverity.ERROR,
        span=span,
    )
    return ValidationError(diag)


# --- Equation form error codes ---

def error_empty_equation_side(source_line: str = None) -> FormError:
    """E301: One side of an equation is blank."""
    diag = Diagnostic(
        code="E301",
        message="Both sides of the equation must be non-empty.",
        severity=ErrorSeverity.ERROR,
        source_line=source_line,
    )
    return FormError(diag)


def error_too_many_equals(source_line: str = None) -> FormError:
    """E302: More than one '=' in an equation."""
    diag = Diagnostic(
        code="E302",
        message="Use exactly one equals sign in an equation.",
        severity=ErrorSeverity.ERROR,
        source_line=source_line,
    )
    return FormError(diag)


def error_equals_in_surface(source_line: str = None) -> FormError:
    """E303: Surfaces are entered without '='."""
    diag = Diagnostic(
        code="E303",
        message="3D mode expects z = f(x, y) entered as f(x, y) without an equals sign.",
        severity=ErrorSeverity.ERROR,
        source_line=source_line,
        hints=["type x^2 + y^2 instead of z = x^2 + y^2"],
    )
    return FormError(diag)


# --- Evaluation error codes ---

def error_evaluation(message: str) -> EvaluationError:
    """E401: A single evaluation failed."""
    diag = Diagnostic(
        code="E401",
        message=message,
        severity=ErrorSeverity.ERROR,
    )
    return EvaluationError(diag)
