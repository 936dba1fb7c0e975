"""
Recursive descent parser for graphtotex math expressions.

Converts a token stream into an Abstract Syntax Tree (AST).  The grammar
accepts more than the plotter can evaluate (assignments, ranges, arrays,
objects, indexing, blocks) so that the validator can report exactly which
construct was used.
"""

from typing import List, Optional
from .tokens import Token, TokenType, SourceSpan
from .lexer import tokenize
from .ast import (
    Expression, Constant, Symbol, Group, UnaryOp, BinaryOp, Call,
    Assignment, FunctionDef, IndexAccess, MemberAccess, RangeExpr,
    ArrayLiteral, ObjectLiteral, Block, depth,
)
from .errors import (
    ParserError,
    error_unexpected_token,
    error_unexpected_end,
    error_invalid_assignment_target,
    error_nesting_too_deep,
)


class Parser:
    """
    Recursive descent parser for math expressions.

    Usage:
        parser = Parser(tokens, source)
        tree = parser.parse()

    Precedence, lowest to highest:
        Lowest:  ; newline   (block separators)
                 =           (assignment, right-associative)
                 :           (range)
                 == != < > <= >=
                 + -
                 * / %  and implicit multiplication (2x, 3(x+1))
                 unary - +
                 ^ **        (power, right-associative)
        Highest: calls, indexing, member access
    """

    # Operator precedence levels for binary operators (higher = tighter binding)
    PRECEDENCE = {
        TokenType.EQ: 1,
        TokenType.NE: 1,
        TokenType.LT: 1,
        TokenType.GT: 1,
        TokenType.LE: 1,
        TokenType.GE: 1,
        TokenType.PLUS: 2,
        TokenType.MINUS: 2,
        TokenType.STAR: 3,
        TokenType.SLASH: 3,
        TokenType.PERCENT: 3,
    }

    MULTIPLICATIVE = 3

    # Power binds tighter than unary minus, so -x^2 is -(x^2)
    RIGHT_ASSOCIATIVE = {TokenType.CARET, TokenType.DOUBLE_STAR}

    # Tokens that start an implicit multiplication operand
    IMPLICIT_MULTIPLICATION = {TokenType.NUMBER, TokenType.IDENTIFIER, TokenType.LPAREN}

    SEPARATORS = (TokenType.SEMICOLON, TokenType.NEWLINE)

    # Signs, groups, exponents and assignments open one level each
    MAX_NESTING_DEPTH = 48

    # Longest root-to-leaf path accepted; compiling, typesetting and
    # evaluating recurse once per level
    MAX_TREE_DEPTH = 256

    def __init__(self, tokens: List[Token], source: Optional[str] = None):
        self.tokens = tokens
        self.source = source  # Original text, attached to diagnostics
        self.pos = 0
        self.nesting = 0

    # =========================================================================
    # Token Navigation
    # =========================================================================

    def _current(self) -> Token:
        """Get current token."""
        if self.pos >= len(self.tokens):
            return self.tokens[-1]  # EOF
        return self.tokens[self.pos]

    def _peek(self, offset: int = 0) -> Token:
        """Peek at token at current position + offset."""
        idx = self.pos + offset
        if idx >= len(self.tokens):
            return self.tokens[-1]  # EOF
        return self.tokens[idx]

    def _is_at_end(self) -> bool:
        """Check if at end of tokens."""
        return self._current().type == TokenType.EOF

    def _check(self, token_type: TokenType) -> bool:
        """Check if current token is of given type."""
        return self._current().type == token_type

    def _check_any(self, *token_types: TokenType) -> bool:
        """Check if current token is any of given types."""
        return self._current().type in token_types

    def _advance(self) -> Token:
        """Consume and return current token."""
        token = self._current()
        if not self._is_at_end():
            self.pos += 1
        return token

    def _consume(self, token_type: TokenType, expected: str) -> Token:
        """Consume token of expected type, or raise error."""
        if self._check(token_type):
            return self._advance()
        self._error(expected)

    def _match(self, *token_types: TokenType) -> Optional[Token]:
        """Consume token if it matches any of the given types."""
        if self._current().type in token_types:
            return self._advance()
        return None

    def _error(self, expected: str) -> None:
        """Raise a parser error."""
        token = self._current()
        if token.type == TokenType.EOF:
            raise error_unexpected_end(expected, token.span, self.source)
        raise error_unexpected_token(expected, token.lexeme, token.span, self.source)

    def _span_from(self, start: Token) -> SourceSpan:
        """Create a span from start token to current position."""
        prev_pos = max(0, self.pos - 1)
        end_token = self.tokens[prev_pos]
        return SourceSpan(start.span.start, end_token.span.end)

    def _enter(self) -> None:
        """Open one nesting level, or raise E104 past the limit."""
        self.nesting += 1
        if self.nesting > self.MAX_NESTING_DEPTH:
            raise error_nesting_too_deep(self._current().span, self.source)

    def _leave(self) -> None:
        self.nesting -= 1

    # =========================================================================
    # Blocks and Assignment
    # =========================================================================

    def parse(self) -> Expression:
        """Parse the whole token stream into a single expression tree."""
        start = self._current()
        while self._match(*self.SEPARATORS):
            pass

        statements = [self._parse_assignment()]
        separated = False
        while self._check_any(*self.SEPARATORS):
            separated = True
            while self._match(*self.SEPARATORS):
                pass
            if self._is_at_end():
                break
            statements.append(self._parse_assignment())

        if not self._is_at_end():
            self._error("operator or end of expression")

        if not separated:
            tree = statements[0]
        else:
            tree = Block(span=self._span_from(start), statements=statements)

        if depth(tree) > self.MAX_TREE_DEPTH:
            raise error_nesting_too_deep(tree.span, self.source)
        return tree

    def _parse_assignment(self) -> Expression:
        """Parse ``target = value`` (right-associative) or a plain expression."""
        start = self._current()
        target = self._parse_range()

        if not self._match(TokenType.ASSIGN):
            return target

        self._enter()
        try:
            value = self._parse_assignment()
        finally:
            self._leave()
        span = self._span_from(start)

        if isinstance(target, Call) and all(isinstance(a, Symbol) for a in target.arguments):
            return FunctionDef(
                span=span,
                name=target.name,
                params=[a.name for a in target.arguments],
                body=value,
            )
        if isinstance(target, (Symbol, IndexAccess, MemberAccess)):
            return Assignment(span=span, target=target, value=value)

        raise error_invalid_assignment_target(target.span, self.source)

    def _parse_range(self) -> Expression:
        """Parse ``start:end`` or ``start:step:end``."""
        start = self._current()
        first = self._parse_binary_expr(0)

        if not self._match(TokenType.COLON):
            return first

        second = self._parse_binary_expr(0)
        if self._match(TokenType.COLON):
            third = self._parse_binary_expr(0)
            return RangeExpr(span=self._span_from(start), start=first, end=third, step=second)
        return RangeExpr(span=self._span_from(start), start=first, end=second)

    # =========================================================================
    # Operators
    # =========================================================================

    def _parse_binary_expr(self, min_precedence: int) -> Expression:
        """Parse binary expressions with precedence climbing."""
        left = self._parse_unary_expr()

        while True:
            op_token = self._current()
            precedence = self.PRECEDENCE.get(op_token.type)

            if precedence is None:
                # Juxtaposition: 2x, 3(x + 1), x y
                if (op_token.type in self.IMPLICIT_MULTIPLICATION
                        and min_precedence <= self.MULTIPLICATIVE):
                    right = self._parse_power_expr()
                    left = BinaryOp(
                        span=SourceSpan(left.span.start, right.span.end),
                        left=left,
                        operator=TokenType.STAR,
                        right=right
                    )
                    continue
                break

            if precedence < min_precedence:
                break

            self._advance()  # consume operator
            right = self._parse_binary_expr(precedence + 1)

            left = BinaryOp(
                span=SourceSpan(left.span.start, right.span.end),
                left=left,
                operator=op_token.type,
                right=right
            )

        return left

    def _parse_unary_expr(self) -> Expression:
        """Parse unary expressions (-, +)."""
        self._enter()
        try:
            if self._check_any(TokenType.MINUS, TokenType.PLUS):
                op = self._advance()
                operand = self._parse_unary_expr()
                return UnaryOp(
                    span=SourceSpan(op.span.start, operand.span.end),
                    operator=op.type,
                    operand=operand
                )

            return self._parse_power_expr()
        finally:
            self._leave()

    def _parse_power_expr(self) -> Expression:
        """Parse ``base ^ exponent``; the exponent may carry its own sign."""
        base = self._parse_postfix_expr()

        if self._check_any(*self.RIGHT_ASSOCIATIVE):
            self._advance()
            exponent = self._parse_unary_expr()
            return BinaryOp(
                span=SourceSpan(base.span.start, exponent.span.end),
                left=base,
                operator=TokenType.CARET,
                right=exponent
            )

        return base

    def _parse_postfix_expr(self) -> Expression:
        """Parse postfix expressions (calls, member access, indexing)."""
        start = self._current()
        expr = self._parse_primary_expr()

        while True:
            if self._check(TokenType.LPAREN) and isinstance(expr, Symbol):
                args = self._parse_arguments()
                expr = Call(span=self._span_from(start), name=expr.name, arguments=args)
            elif self._check(TokenType.LBRACKET):
                self._advance()  # consume '['
                indices = self._parse_comma_list(TokenType.RBRACKET)
                self._consume(TokenType.RBRACKET, "']'")
                expr = IndexAccess(span=self._span_from(start), target=expr, indices=indices)
            elif self._check(TokenType.DOT):
                self._advance()  # consume '.'
                member = self._consume(TokenType.IDENTIFIER, "identifier").value
                expr = MemberAccess(span=self._span_from(start), target=expr, member=member)
            else:
                break

        return expr

    def _parse_arguments(self) -> List[Expression]:
        """Parse a parenthesized argument list."""
        self._consume(TokenType.LPAREN, "'('")
        args = self._parse_comma_list(TokenType.RPAREN)
        self._consume(TokenType.RPAREN, "')'")
        return args

    def _parse_comma_list(self, closing: TokenType) -> List[Expression]:
        """Parse zero or more comma-separated expressions up to ``closing``."""
        items = []
        if self._check(closing):
            return items
        items.append(self._parse_range())
        while self._match(TokenType.COMMA):
            items.append(self._parse_range())
        return items

    # =========================================================================
    # Primary Expressions
    # =========================================================================

    def _parse_primary_expr(self) -> Expression:
        """Parse primary expressions (numbers, names, groups, literals)."""
        token = self._current()

        if token.type == TokenType.NUMBER:
            self._advance()
            return Constant(span=token.span, value=token.value, lexeme=token.lexeme)

        if token.type == TokenType.IDENTIFIER:
            self._advance()
            return Symbol(span=token.span, name=token.value)

        if token.type == TokenType.LPAREN:
            self._advance()
            inner = self._parse_assignment()
            self._consume(TokenType.RPAREN, "')'")
            return Group(span=self._span_from(token), inner=inner)

        if token.type == TokenType.LBRACKET:
            self._advance()
            elements = self._parse_comma_list(TokenType.RBRACKET)
            self._consume(TokenType.RBRACKET, "']'")
            return ArrayLiteral(span=self._span_from(token), elements=elements)

        if token.type == TokenType.LBRACE:
            return self._parse_object_literal()

        self._error("expression")

    def _parse_object_literal(self) -> ObjectLiteral:
        """Parse ``{key: value, ...}``."""
        start = self._consume(TokenType.LBRACE, "'{'")
        entries = []

        if not self._check(TokenType.RBRACE):
            while True:
                key = self._consume(TokenType.IDENTIFIER, "property name").value
                self._consume(TokenType.COLON, "':'")
                entries.append((key, self._parse_binary_expr(0)))
                if not self._match(TokenType.COMMA):
                    break

        self._consume(TokenType.RBRACE, "'}'")
        return ObjectLiteral(span=self._span_from(start), entries=entries)


def parse(tokens: List[Token], source: Optional[str] = None) -> Expression:
    """
    Convenience function to parse tokens into an expression tree.

    Args:
        tokens: List of tokens from the lexer
        source: Optional original text for diagnostics

    Returns:
        Root Expression node

    Raises:
        ParserError: If parsing fails
    """
    return Parser(tokens, source).parse()


def parse_expression(text: str) -> Expression:
    """
    Tokenize and parse expression text.

    Raises:
        LexerError: On characters outside the expression alphabet
        ParserError: On malformed input
    """
    return parse(tokenize(text), text)
