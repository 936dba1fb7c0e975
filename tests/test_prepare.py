"""
Unit tests for entry preparation: normalization, mode selection,
validation, compilation and domain parsing.
"""

import pytest
from graphtotex.expr import (
    prepare_math, prepare_math_3d, normalize_input,
    parse_domain_bounds, parse_surface_domain_bounds, EXPLICIT, IMPLICIT,
)
from graphtotex.expr.prepare import parse_float_prefix
from graphtotex.viewport import Viewport


class TestNormalize:
    """Input normalization."""

    def test_trims_and_rewrites_power(self):
        assert normalize_input("  x**2 ") == "x^2"

    def test_rewrites_ln(self):
        assert normalize_input("ln(x) + ln (2)") == "log(x) + log(2)"

    def test_ln_inside_word_untouched(self):
        assert normalize_input("sinln(x)") == "sinln(x)"


class TestExplicit:
    """Curves y = f(x)."""

    def test_plain_expression(self):
        prepared = prepare_math("x^2")
        assert prepared.mode == EXPLICIT
        assert prepared.error is None
        assert prepared.is_valid
        assert prepared.latex == "{x}^{2}"
        assert prepared.evaluator(3.0) == pytest.approx(9.0)

    def test_y_equals_form(self):
        prepared = prepare_math("y = 2x")
        assert prepared.mode == EXPLICIT
        assert prepared.evaluator(2.0) == pytest.approx(4.0)

    def test_equals_y_form(self):
        prepared = prepare_math("sin(x) = y")
        assert prepared.mode == EXPLICIT
        assert prepared.implicit_evaluator is None

    def test_ln_alias(self):
        prepared = prepare_math("ln(x)")
        assert prepared.error is None
        assert prepared.latex == r"\ln\left(x\right)"

    def test_blank_input_has_no_error(self):
        prepared = prepare_math("   ")
        assert prepared.error is None
        assert prepared.evaluator is None
        assert not prepared.is_valid

    def test_unknown_symbol_error(self):
        prepared = prepare_math("x + t")
        assert prepared.error == 'Unknown symbol "t". Use x, pi, e as symbols.'
        assert not prepared.is_valid

    def test_syntax_error(self):
        prepared = prepare_math("x +")
        assert prepared.error.startswith("Unexpected end of expression")

    def test_result_is_cached(self):
        assert prepare_math("x^3") is prepare_math("x^3")


class TestImplicit:
    """Relations g(x, y) = 0."""

    def test_circle(self):
        prepared = prepare_math("x^2 + y^2 = 4")
        assert prepared.mode == IMPLICIT
        assert prepared.error is None
        assert prepared.latex == "x^2 + y^2 = 4"
        g = prepared.implicit_evaluator
        assert g(2.0, 0.0) == pytest.approx(0.0)
        assert g(0.0, 0.0) == pytest.approx(-4.0)

    def test_y_on_both_sides(self):
        prepared = prepare_math("y = y^2 + x")
        assert prepared.mode == IMPLICIT

    def test_vertical_line(self):
        prepared = prepare_math("x = 1")
        assert prepared.mode == IMPLICIT
        assert prepared.implicit_evaluator(1.0, 5.0) == pytest.approx(0.0)

    def test_empty_side(self):
        prepared = prepare_math("x^2 =")
        assert prepared.mode == IMPLICIT
        assert prepared.error == "Both sides of the equation must be non-empty."

    def test_too_many_equals(self):
        prepared = prepare_math("x = y = 1")
        assert prepared.error == "Use exactly one equals sign in an equation."

    def test_invalid_relation(self):
        prepared = prepare_math("x^2 + z = 1")
        assert prepared.mode == IMPLICIT
        assert prepared.error == 'Unknown symbol "z". Use x, y, pi, e as symbols.'


class TestSurface:
    """Surfaces z = f(x, y)."""

    def test_surface(self):
        prepared = prepare_math_3d("x^2 - y^2")
        assert prepared.error is None
        assert prepared.latex == "z = {x}^{2}-{y}^{2}"
        assert prepared.evaluator(2.0, 1.0) == pytest.approx(3.0)

    def test_equals_rejected(self):
        prepared = prepare_math_3d("z = x + y")
        assert prepared.error.startswith("3D mode expects z = f(x, y)")
        assert not prepared.is_valid

    def test_blank(self):
        prepared = prepare_math_3d("")
        assert prepared.error is None
        assert not prepared.is_valid

    def test_unknown_symbol(self):
        prepared = prepare_math_3d("x + z")
        assert prepared.error == 'Unknown symbol "z". Use x, y, pi, e as symbols.'


class TestDomains:
    """Domain text parsing."""

    @pytest.mark.parametrize("text,value", [
        ("2.5abc", 2.5),
        ("-3", -3.0),
        (" .5", 0.5),
        ("1e2", 100.0),
        ("abc", None),
        ("", None),
        (None, None),
    ])
    def test_float_prefix(self, text, value):
        assert parse_float_prefix(text) == value

    def test_defaults_to_viewport(self):
        assert parse_domain_bounds("", "", Viewport(-5, 5, -1, 1)) == (-5, 5)

    def test_partial_domain(self):
        assert parse_domain_bounds("0", "", Viewport(-5, 5, -1, 1)) == (0.0, 5)

    def test_reversed_domain_is_ordered_and_padded(self):
        lo, hi = parse_domain_bounds("3", "1", Viewport())
        assert lo == 1.0
        assert hi == pytest.approx(3.0 + 1e-6)

    def test_equal_bounds_padded(self):
        lo, hi = parse_surface_domain_bounds("2", "2", -10, 10)
        assert lo == 2.0
        assert hi > lo


class TestDeepInput:
    """Pathological nesting becomes an entry error instead of an exception."""

    NESTED = "Expression is nested too deeply."

    @pytest.mark.parametrize("raw", [
        "+".join(["x"] * 3000),
        "(" * 300 + "x" + ")" * 300,
        "-" * 1500 + "x",
    ])
    def test_explicit(self, raw):
        prepared = prepare_math(raw)
        assert prepared.error == self.NESTED
        assert not prepared.is_valid

    def test_implicit(self):
        prepared = prepare_math("+".join(["x"] * 3000) + " = y^2")
        assert prepared.mode == IMPLICIT
        assert prepared.error == self.NESTED

    @pytest.mark.parametrize("raw", [
        "+".join(["x*y"] * 3000),
        "(" * 300 + "x" + ")" * 300,
        "-" * 1500 + "y",
    ])
    def test_surface(self, raw):
        prepared = prepare_math_3d(raw)
        assert prepared.error == self.NESTED

    def test_long_sum_still_evaluates(self):
        prepared = prepare_math("+".join(["x"] * 200))
        assert prepared.error is None
        assert prepared.evaluator(0.5) == pytest.approx(100.0)
