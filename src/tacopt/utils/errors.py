"""
Error types for the tacopt parser and optimizer passes.

Every error can point at a program position two ways: a ``SourceLocation``
for the line and column of a token, and a ``statement_index`` for the
statement a pass was working on. Parse errors only have the location,
because the statement does not exist yet.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """
    A line and 1-indexed column in a program file.

    Rendered as ``file:line:col``, or ``line:col`` without a filename.
    """

    line: int
    column: int = 1
    filename: Optional[str] = None

    def __str__(self) -> str:
        position = f"{self.line}:{self.column}"
        return f"{self.filename}:{position}" if self.filename else position


class TacError(Exception):
    """
    Base exception for all tacopt errors.

    ``str()`` gives a compiler-style report::

        prog.tac:2:7: invalid operator '%', expected one of + - * /
            b = a % 2
                  ^

    Pass errors append the index of the statement being optimized to the
    first line.
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        statement_index: Optional[int] = None,
    ) -> None:
        self.message = message
        self.location = location
        self.source_line = source_line
        self.statement_index = statement_index
        super().__init__(self.report())

    def report(self) -> str:
        """Format the message, the offending statement and a caret."""
        header = f"{self.location}: {self.message}" if self.location else self.message
        if self.statement_index is not None:
            header += f" (statement {self.statement_index})"
        if not (self.source_line and self.location):
            return header
        caret = " " * (self.location.column - 1) + "^"
        return f"{header}\n    {self.source_line}\n    {caret}"


class ParserError(TacError):
    """Raised when a line does not match `target = operand [op operand]`."""


class InvalidOperatorError(ParserError):
    """Raised when the token in operator position is not one of + - * /."""

    def __init__(
        self,
        operator: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        self.operator = operator
        self.suggestion = suggestion
        message = f"invalid operator {operator!r}, expected one of + - * /"
        if suggestion:
            message = f"{message} (did you mean {suggestion!r}?)"
        super().__init__(message, location, source_line)


class NumericOverflowError(TacError):
    """
    Raised when a literal or a folded value leaves the 32-bit signed range.

    ``statement_index`` is set when the overflow happens while folding.
    """

    def __init__(
        self,
        message: str,
        value: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        statement_index: Optional[int] = None,
    ) -> None:
        self.value = value
        super().__init__(message, location, source_line, statement_index)


class OptimizationError(TacError):
    """Raised when an optimization pass cannot process a statement."""

    def __init__(
        self,
        message: str,
        statement_index: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ) -> None:
        super().__init__(message, location, source_line, statement_index)


class DivisionByZeroError(OptimizationError):
    """Raised when constant folding meets a literal division by zero."""
