"""
Tests for number and colour formatting.
"""

import math

import pytest
from graphtotex.formatting import (
    format_number, hex_to_rgb, is_hex_color, rgba_from_hex, tikz_color, to_fixed,
)


class TestFormatNumber:

    @pytest.mark.parametrize("value,text", [
        (0, "0"),
        (-0.0, "0"),
        (2.5, "2.5"),
        (-3, "-3"),
        (0.123456, "0.1235"),
        (10, "10"),
        (9999.5, "9999.5"),
        (12345, "1.23e+4"),
        (-12345, "-1.23e+4"),
        (0.0005, "5.00e-4"),
        (0.001, "0.001"),
        (-0.00001, "-1.00e-5"),
    ])
    def test_format(self, value, text):
        assert format_number(value) == text


class TestColors:

    def test_long_hex(self):
        assert hex_to_rgb("#0f766e") == (15, 118, 110)

    def test_short_hex(self):
        assert hex_to_rgb("#f00") == (255, 0, 0)

    def test_without_hash(self):
        assert hex_to_rgb("2563eb") == (37, 99, 235)

    @pytest.mark.parametrize("bad", ["#12345", "red", "", None, "#ggg"])
    def test_invalid(self, bad):
        assert not is_hex_color(bad)
        with pytest.raises(ValueError):
            hex_to_rgb(bad)

    def test_tikz_color(self):
        assert tikz_color("#ef4444") == "{rgb,255:red,239;green,68;blue,68}"

    def test_rgba(self):
        assert rgba_from_hex("#000", 0.24) == (0, 0, 0, 0.24)


class TestToFixed:

    def test_two_digits(self):
        assert to_fixed(2.5) == "2.50"
        assert to_fixed(1.125, 1) == "1.1"

    def test_non_finite(self):
        with pytest.raises(ValueError):
            to_fixed(math.nan)
