"""
Tests for the value model.
"""

import pytest

from backend.flooph.values import (
    add_or_subtract,
    compare,
    format_value,
    is_number,
    is_truthy,
    normalize_number,
    parse_number,
)


class TestNumbers:
    """Tests for number parsing and normalization."""

    def test_booleans_are_not_numbers(self):
        """Test that bool is excluded even though it subclasses int."""
        assert is_number(3) is True
        assert is_number(2.5) is True
        assert is_number(True) is False
        assert is_number("3") is False

    def test_parse_integer(self):
        """Test integer literals."""
        assert parse_number("17") == 17
        assert parse_number("-3") == -3

    def test_parse_decimal(self):
        """Test decimal literals."""
        assert parse_number("3.1415") == 3.1415
        assert parse_number("-1.3431") == -1.3431

    def test_integral_decimal_becomes_int(self):
        """Test that 17.0 is treated as 17."""
        value = parse_number("17.0")
        assert value == 17
        assert isinstance(value, int)

    def test_normalize_keeps_non_integral(self):
        """Test that fractional floats are left alone."""
        assert normalize_number(1.5) == 1.5
        assert isinstance(normalize_number(2.0), int)


class TestFormatValue:
    """Tests for display formatting."""

    def test_integer(self):
        """Test integers print without a decimal point."""
        assert format_value(17) == "17"

    def test_integral_float(self):
        """Test integral floats print without a decimal point."""
        assert format_value(17.0) == "17"

    def test_decimal(self):
        """Test non-integral numbers keep their digits."""
        assert format_value(1.5) == "1.5"
        assert format_value(-1.3431) == "-1.3431"

    def test_absent_is_empty(self):
        """Test unset values render as nothing."""
        assert format_value(None) == ""

    def test_booleans(self):
        """Test booleans render as words."""
        assert format_value(True) == "true"
        assert format_value(False) == "false"

    def test_string_verbatim(self):
        """Test strings render as-is."""
        assert format_value("Old Barn") == "Old Barn"


class TestTruthiness:
    """Tests for variable truthiness."""

    @pytest.mark.parametrize("value", [True, 0, "", 17, "no", []])
    def test_truthy(self, value):
        """Test that anything set and not False is truthy."""
        assert is_truthy(value) is True

    @pytest.mark.parametrize("value", [None, False])
    def test_falsy(self, value):
        """Test absent and False are falsy."""
        assert is_truthy(value) is False


class TestCompare:
    """Tests for comparisons."""

    @pytest.mark.parametrize("op,expected", [
        ("<", True), (">", False), ("=", False), ("==", False),
        ("≤", True), ("<=", True), ("≥", False), (">=", False),
        ("≠", True), ("!=", True),
    ])
    def test_numeric_operators(self, op, expected):
        """Test every operator spelling on numbers."""
        assert compare(1, op, 2) is expected

    def test_mixed_int_and_float(self):
        """Test ints and floats compare numerically."""
        assert compare(42, "<", 100.1) is True
        assert compare(2, "=", 2.0) is True

    def test_strings_compare_lexically(self):
        """Test string ordering."""
        assert compare("Phrogz", "<", "ZZZ") is True
        assert compare("Phrogz", ">", "AAA") is True
        assert compare("Phrogz", "=", "Phrogz") is True

    def test_absent_operand_is_false(self):
        """Test that a missing value never compares true."""
        assert compare(None, "=", 3) is False
        assert compare(None, "!=", 3) is False
        assert compare(3, "<", None) is False
        assert compare(None, "=", None) is False

    def test_incompatible_types_are_false(self):
        """Test number against string is always false."""
        assert compare("x", ">", 42) is False
        assert compare("x", "!=", 42) is False
        assert compare(1, "=", True) is False

    def test_boolean_equality(self):
        """Test booleans support equality only."""
        assert compare(True, "=", True) is True
        assert compare(True, "≠", False) is True
        assert compare(True, ">", False) is False
        assert compare(False, "<=", True) is False

    def test_unknown_operator(self):
        """Test an operator outside the grammar is rejected."""
        with pytest.raises(ValueError):
            compare(1, "<>", 2)


class TestArithmetic:
    """Tests for addition and subtraction."""

    def test_add(self):
        """Test addition."""
        assert add_or_subtract(17, "+", 1) == 18

    def test_subtract(self):
        """Test subtraction."""
        assert add_or_subtract(10, "-", 8) == 2

    def test_integral_result_is_int(self):
        """Test that 0.5 + 0.5 prints as 1."""
        result = add_or_subtract(0.5, "+", 0.5)
        assert result == 1
        assert isinstance(result, int)

    def test_absent_operand(self):
        """Test that a missing operand gives an absent result."""
        assert add_or_subtract(None, "+", 1) is None
        assert add_or_subtract(1, "-", None) is None

    def test_string_concatenation(self):
        """Test that adding two strings joins them."""
        assert add_or_subtract("Old ", "+", "Barn") == "Old Barn"
        assert add_or_subtract("", "+", "") == ""

    def test_string_subtraction(self):
        """Test that subtracting strings gives an absent result."""
        assert add_or_subtract("ab", "-", "b") is None

    def test_mixed_and_boolean_operands(self):
        """Test that other non-number pairings give an absent result."""
        assert add_or_subtract("a", "+", 1) is None
        assert add_or_subtract(1, "+", "a") is None
        assert add_or_subtract(True, "+", 1) is None
        assert add_or_subtract(True, "+", False) is None
        assert add_or_subtract("a", "+", None) is None
