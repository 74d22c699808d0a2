"""Unit tests for literal recognition and checked integer arithmetic."""

import pytest

from tacopt.compiler.operators import (
    INT_MAX,
    INT_MIN,
    IntegerOverflow,
    apply_operator,
    is_identifier,
    is_literal,
    literal_value,
)
from tacopt.compiler.statements import Operator


class TestLiterals:
    """Tests for the literal and identifier tests."""

    @pytest.mark.parametrize("text", ["0", "42", "-7", "007", "-2147483648"])
    def test_literals(self, text):
        assert is_literal(text)

    @pytest.mark.parametrize("text", ["", "-", "+5", "1.5", "x1", "1x", "--1"])
    def test_non_literals(self, text):
        assert not is_literal(text)

    @pytest.mark.parametrize("text", ["x", "_tmp", "t10", "Total"])
    def test_identifiers(self, text):
        assert is_identifier(text)

    @pytest.mark.parametrize("text", ["1x", "-x", "a-b", ""])
    def test_non_identifiers(self, text):
        assert not is_identifier(text)

    def test_literal_value(self):
        assert literal_value("-15") == -15

    def test_literal_value_rejects_names(self):
        with pytest.raises(ValueError):
            literal_value("x")

    def test_literal_value_range(self):
        assert literal_value(str(INT_MAX)) == INT_MAX
        with pytest.raises(IntegerOverflow) as exc_info:
            literal_value(str(INT_MAX + 1))
        assert exc_info.value.value == INT_MAX + 1


class TestApplyOperator:
    """Tests for 32-bit arithmetic."""

    @pytest.mark.parametrize(
        "op, left, right, expected",
        [
            (Operator.ADD, 2, 3, 5),
            (Operator.SUB, 2, 3, -1),
            (Operator.MUL, -4, 6, -24),
            (Operator.DIV, 16, 4, 4),
            (Operator.DIV, 7, 2, 3),
        ],
    )
    def test_basic_arithmetic(self, op, left, right, expected):
        assert apply_operator(op, left, right) == expected

    @pytest.mark.parametrize(
        "left, right, expected",
        [(-7, 2, -3), (7, -2, -3), (-7, -2, 3), (1, 3, 0), (-1, 3, 0)],
    )
    def test_division_truncates_toward_zero(self, left, right, expected):
        """Division follows C semantics, not Python floor division."""
        assert apply_operator(Operator.DIV, left, right) == expected

    def test_division_by_zero(self):
        with pytest.raises(ZeroDivisionError):
            apply_operator(Operator.DIV, 5, 0)

    def test_addition_overflow(self):
        with pytest.raises(IntegerOverflow) as exc_info:
            apply_operator(Operator.ADD, INT_MAX, 1)
        assert exc_info.value.value == INT_MAX + 1

    def test_subtraction_underflow(self):
        with pytest.raises(IntegerOverflow):
            apply_operator(Operator.SUB, INT_MIN, 1)

    def test_multiplication_overflow(self):
        with pytest.raises(IntegerOverflow):
            apply_operator(Operator.MUL, 65536, 65536)

    def test_min_int_divided_by_minus_one(self):
        with pytest.raises(IntegerOverflow):
            apply_operator(Operator.DIV, INT_MIN, -1)

    def test_integer_overflow_is_overflow_error(self):
        assert issubclass(IntegerOverflow, OverflowError)
