"""
Tokenizer for graphtotex expression text.

Handles decimal literals (``1``, ``2.5``, ``.5``, ``1e-3``), identifiers,
arithmetic, comparison and assignment operators, and the bracket and
separator punctuation of the statement grammar.  Newlines are only
significant outside brackets.
"""

from typing import List, Iterator
from .tokens import Token, TokenType, SourceLocation, SourceSpan
from .errors import (
    LexerError,
    error_unexpected_character,
    error_invalid_number_literal,
)


# Operators spelled with two characters, checked before the one-character table
_DOUBLE_OPERATORS = {
    '**': TokenType.DOUBLE_STAR,
    '==': TokenType.EQ,
    '!=': TokenType.NE,
    '<=': TokenType.LE,
    '>=': TokenType.GE,
}

_SINGLE_OPERATORS = {
    '+': TokenType.PLUS,
    '-': TokenType.MINUS,
    '*': TokenType.STAR,
    '/': TokenType.SLASH,
    '%': TokenType.PERCENT,
    '^': TokenType.CARET,
    '<': TokenType.LT,
    '>': TokenType.GT,
    '=': TokenType.ASSIGN,
    '(': TokenType.LPAREN,
    ')': TokenType.RPAREN,
    '[': TokenType.LBRACKET,
    ']': TokenType.RBRACKET,
    '{': TokenType.LBRACE,
    '}': TokenType.RBRACE,
    ',': TokenType.COMMA,
    ':': TokenType.COLON,
    ';': TokenType.SEMICOLON,
    '.': TokenType.DOT,
}

_OPENERS = '([{'
_CLOSERS = ')]}'


class Lexer:
    """
    Character scanner producing :class:`Token` values.

        Lexer("x^2 + 1").tokenize()     # whole list, EOF last
        for token in Lexer(text): ...   # lazily
    """

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1
        # newlines are dropped while this is positive
        self.bracket_depth = 0

    def _location(self) -> SourceLocation:
        return SourceLocation(self.line, self.column, self.pos)

    def _span(self, start: SourceLocation) -> SourceSpan:
        return SourceSpan(start, self._location())

    def _peek(self, offset: int = 0) -> str:
        """Character ``offset`` ahead, or NUL past the end."""
        idx = self.pos + offset
        return self.source[idx] if idx < len(self.source) else '\0'

    def _advance(self) -> str:
        if self._is_at_end():
            return '\0'
        ch = self.source[self.pos]
        self.pos += 1
        if ch == '\n':
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return ch

    def _is_at_end(self) -> bool:
        return self.pos >= len(self.source)

    def _skip_blanks(self) -> None:
        while self._peek() in ' \t\r':
            self._advance()

    def _skip_digits(self) -> None:
        while self._peek().isdigit():
            self._advance()

    def _make_token(self, token_type: TokenType, value, start: SourceLocation,
                    lexeme: str = None) -> Token:
        if lexeme is None:
            lexeme = self.source[start.offset:self.pos]
        return Token(token_type, value, lexeme, self._span(start))

    def _has_exponent(self) -> bool:
        # "2e" is 2 times the constant e; "2e3" and "2e-3" are exponents
        if self._peek() not in 'eE':
            return False
        nxt = self._peek(1)
        return nxt.isdigit() or (nxt in '+-' and self._peek(2).isdigit())

    def _scan_number(self) -> Token:
        """Integer part, optional fraction, optional exponent."""
        start = self._location()

        self._skip_digits()
        if self._peek() == '.' and self._peek(1).isdigit():
            self._advance()
            self._skip_digits()

        if self._has_exponent():
            self._advance()
            if self._peek() in '+-':
                self._advance()
            self._skip_digits()

        lexeme = self.source[start.offset:self.pos]

        if self._peek() == '.' and self._peek(1).isdigit():
            # 1.2.3
            while self._peek().isdigit() or self._peek() == '.':
                self._advance()
            bad = self.source[start.offset:self.pos]
            raise error_invalid_number_literal(bad, self._span(start), self.source)

        try:
            value = float(lexeme)
        except ValueError:
            raise error_invalid_number_literal(lexeme, self._span(start), self.source)
        return self._make_token(TokenType.NUMBER, value, start, lexeme)

    def _scan_identifier(self) -> Token:
        start = self._location()
        while self._peek().isalnum() or self._peek() == '_':
            self._advance()
        name = self.source[start.offset:self.pos]
        return self._make_token(TokenType.IDENTIFIER, name, start, name)

    def _scan_token(self) -> Token:
        self._skip_blanks()

        if self._peek() == '\n':
            start = self._location()
            self._advance()
            if self.bracket_depth > 0:
                return self._scan_token()
            return self._make_token(TokenType.NEWLINE, None, start, "\\n")

        start = self._location()
        if self._is_at_end():
            return self._make_token(TokenType.EOF, None, start, "")

        ch = self._peek()
        if ch.isdigit() or (ch == '.' and self._peek(1).isdigit()):
            return self._scan_number()
        if ch.isalpha() or ch == '_':
            return self._scan_identifier()

        pair = ch + self._peek(1)
        if pair in _DOUBLE_OPERATORS:
            self._advance()
            self._advance()
            return self._make_token(_DOUBLE_OPERATORS[pair], pair, start)

        self._advance()
        if ch in _OPENERS:
            self.bracket_depth += 1
        elif ch in _CLOSERS:
            self.bracket_depth = max(0, self.bracket_depth - 1)

        if ch in _SINGLE_OPERATORS:
            return self._make_token(_SINGLE_OPERATORS[ch], ch, start)

        raise error_unexpected_character(ch, self._span(start), self.source)

    def __iter__(self) -> Iterator[Token]:
        while True:
            token = self._scan_token()
            yield token
            if token.type == TokenType.EOF:
                return

    def tokenize(self) -> List[Token]:
        """All tokens of the source; the last one is always EOF."""
        return list(self)


def tokenize(source: str) -> List[Token]:
    """
    Tokenize expression text.

    Raises:
        LexerError: On an unexpected character or a malformed number
    """
    return Lexer(source).tokenize()
