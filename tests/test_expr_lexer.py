"""
Unit tests for the graphtotex expression lexer.
"""

import pytest
from graphtotex.expr import tokenize, Lexer, TokenType, LexerError


class TestLexerBasics:
    """Test basic lexer functionality."""

    def test_empty_source(self):
        """Empty source produces only EOF."""
        tokens = tokenize("")
        assert len(tokens) == 1
        assert tokens[0].type == TokenType.EOF

    def test_whitespace_only(self):
        """Spaces and tabs produce no tokens."""
        tokens = tokenize("   \t  ")
        assert [t.type for t in tokens] == [TokenType.EOF]

    def test_simple_expression(self):
        """Basic arithmetic tokenization."""
        tokens = tokenize("x^2 + 1")
        types = [t.type for t in tokens]
        assert types == [
            TokenType.IDENTIFIER,
            TokenType.CARET,
            TokenType.NUMBER,
            TokenType.PLUS,
            TokenType.NUMBER,
            TokenType.EOF,
        ]

    def test_identifier_value(self):
        """Identifier token has correct value."""
        tokens = tokenize("log10")
        assert tokens[0].type == TokenType.IDENTIFIER
        assert tokens[0].value == "log10"

    def test_position_tracking(self):
        """Token positions are tracked correctly."""
        tokens = tokenize("sin(x)")
        assert tokens[0].span.start.column == 1
        assert tokens[1].span.start.column == 4
        assert tokens[2].span.start.offset == 4

    def test_iteration(self):
        """The lexer can be consumed as an iterator."""
        types = [t.type for t in Lexer("x*y")]
        assert types == [TokenType.IDENTIFIER, TokenType.STAR, TokenType.IDENTIFIER, TokenType.EOF]


class TestNumbers:
    """Test numeric literal scanning."""

    @pytest.mark.parametrize("text,value", [
        ("42", 42.0),
        ("3.14", 3.14),
        (".5", 0.5),
        ("1e3", 1000.0),
        ("2.5e-4", 2.5e-4),
        ("1E+2", 100.0),
    ])
    def test_number_values(self, text, value):
        tokens = tokenize(text)
        assert tokens[0].type == TokenType.NUMBER
        assert tokens[0].value == pytest.approx(value)
        assert tokens[0].lexeme == text

    def test_bare_e_after_number_is_constant(self):
        """'2e' is the number 2 followed by the symbol e."""
        tokens = tokenize("2e")
        assert [t.type for t in tokens] == [TokenType.NUMBER, TokenType.IDENTIFIER, TokenType.EOF]
        assert tokens[1].value == "e"

    def test_double_fraction_rejected(self):
        with pytest.raises(LexerError) as excinfo:
            tokenize("1.2.3")
        assert excinfo.value.diagnostic.code == "E002"


class TestOperators:
    """Test operator scanning."""

    def test_double_star(self):
        tokens = tokenize("x**2")
        assert tokens[1].type == TokenType.DOUBLE_STAR

    @pytest.mark.parametrize("text,token_type", [
        ("==", TokenType.EQ),
        ("!=", TokenType.NE),
        ("<=", TokenType.LE),
        (">=", TokenType.GE),
        ("<", TokenType.LT),
        (">", TokenType.GT),
        ("=", TokenType.ASSIGN),
        ("%", TokenType.PERCENT),
    ])
    def test_comparison_and_assignment(self, text, token_type):
        assert tokenize(text)[0].type == token_type

    def test_delimiters(self):
        types = [t.type for t in tokenize("([{,:;.}])")]
        assert types[:-1] == [
            TokenType.LPAREN, TokenType.LBRACKET, TokenType.LBRACE,
            TokenType.COMMA, TokenType.COLON, TokenType.SEMICOLON, TokenType.DOT,
            TokenType.RBRACE, TokenType.RBRACKET, TokenType.RPAREN,
        ]


class TestNewlines:
    """Newlines separate statements only outside brackets."""

    def test_newline_at_top_level(self):
        types = [t.type for t in tokenize("x\n1")]
        assert TokenType.NEWLINE in types

    def test_newline_inside_parens_is_skipped(self):
        types = [t.type for t in tokenize("(x\n+ 1)")]
        assert TokenType.NEWLINE not in types


class TestErrors:
    """Test lexer diagnostics."""

    def test_unexpected_character(self):
        with pytest.raises(LexerError) as excinfo:
            tokenize("x $ 1")
        diag = excinfo.value.diagnostic
        assert diag.code == "E001"
        assert diag.span.start.offset == 2
        assert "'$'" in str(excinfo.value)

    def test_diagnostic_format_points_at_column(self):
        with pytest.raises(LexerError) as excinfo:
            tokenize("x # 1")
        text = excinfo.value.diagnostic.format()
        assert "error[E001]" in text
        assert "  |   ^" in text
