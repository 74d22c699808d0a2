"""
Literal recognition and checked integer arithmetic.

Values are 32-bit signed integers. Division truncates toward zero, and
any result outside the representable range raises ``IntegerOverflow``
instead of wrapping.
"""

import re

from tacopt.compiler.statements import Operator

INT_MIN = -(2**31)
INT_MAX = 2**31 - 1

_LITERAL_RE = re.compile(r"-?[0-9]+")
_IDENTIFIER_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


class IntegerOverflow(OverflowError):
    """An arithmetic result or literal outside ``[INT_MIN, INT_MAX]``."""

    def __init__(self, message: str, value: int) -> None:
        self.value = value
        super().__init__(message)


def is_literal(text: str) -> bool:
    """Check for an optional leading ``-`` followed by one or more digits."""
    return _LITERAL_RE.fullmatch(text) is not None


def is_identifier(text: str) -> bool:
    """Check whether ``text`` can name a variable."""
    return _IDENTIFIER_RE.fullmatch(text) is not None


def in_range(value: int) -> bool:
    return INT_MIN <= value <= INT_MAX


def literal_value(text: str) -> int:
    """
    Convert literal text to its integer value.

    Raises:
        ValueError: If ``text`` is not a literal
        IntegerOverflow: If the value does not fit in 32 bits
    """
    if not is_literal(text):
        raise ValueError(f"not an integer literal: {text!r}")
    value = int(text)
    if not in_range(value):
        raise IntegerOverflow(f"integer literal {text} out of range [{INT_MIN}, {INT_MAX}]", value)
    return value


def _truncating_div(left: int, right: int) -> int:
    quotient = abs(left) // abs(right)
    return -quotient if (left < 0) != (right < 0) else quotient


def apply_operator(op: Operator, left: int, right: int) -> int:
    """
    Evaluate ``left op right`` in 32-bit integer arithmetic.

    Raises:
        ZeroDivisionError: For division by zero
        IntegerOverflow: If the result does not fit in 32 bits
    """
    if op is Operator.ADD:
        result = left + right
    elif op is Operator.SUB:
        result = left - right
    elif op is Operator.MUL:
        result = left * right
    elif op is Operator.DIV:
        if right == 0:
            raise ZeroDivisionError(f"division by zero: {left} / {right}")
        result = _truncating_div(left, right)
    else:
        raise ValueError(f"unknown operator: {op!r}")

    if not in_range(result):
        raise IntegerOverflow(f"{left} {op} {right} = {result} overflows 32-bit integer", result)
    return result
