"""
Parser for straight-line three-address code.

Each non-blank line holds exactly one statement in one of two shapes::

    target = operand
    target = operand op operand

Tokens are separated by whitespace. Operands are identifiers or integer
literals (optional leading ``-``), and ``op`` is one of ``+ - * /``.
Anything else is rejected with a ``ParserError`` that points at the
offending token.
"""

from __future__ import annotations

import re
from typing import Optional

from tacopt.compiler.operators import IntegerOverflow, is_identifier, is_literal, literal_value
from tacopt.compiler.statements import Operator, Statement
from tacopt.utils.errors import (
    InvalidOperatorError,
    NumericOverflowError,
    ParserError,
    SourceLocation,
)

_TOKEN_RE = re.compile(r"\S+")
_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")

# Look-alikes people type for the four operators.
_OPERATOR_HINTS: dict[str, str] = {
    "x": "*",
    "X": "*",
    "×": "*",
    "·": "*",
    "**": "*",
    "÷": "/",
    "//": "/",
    "−": "-",
    "--": "-",
    "++": "+",
}


def split_lines(source: str) -> list[str]:
    """
    Split a document into lines on LF, CRLF and CR only.

    Unlike ``str.splitlines()``, form feeds and Unicode separators stay
    inside the line, so line numbers agree with editors and LSP clients.
    """
    return _LINE_BREAK_RE.split(source)


class Parser:
    """
    Parses lines of three-address code into ``Statement`` objects.

    Example:
        parser = Parser(filename="prog.tac")
        stmt = parser.parse_line("y = x * 1", line_number=2)
        statements = parser.parse(source)
    """

    def __init__(self, filename: Optional[str] = None) -> None:
        self.filename = filename
        self._line = ""
        self._line_number = 1

    def parse(self, source: str) -> list[Statement]:
        """
        Parse a whole document, one statement per non-blank line.

        Raises:
            ParserError: On the first malformed line
        """
        statements: list[Statement] = []
        for number, line in enumerate(split_lines(source), start=1):
            if not line.strip():
                continue
            statements.append(self.parse_line(line, line_number=number))
        return statements

    def parse_line(self, line: str, line_number: Optional[int] = None) -> Statement:
        """
        Parse a single ``target = operand [op operand]`` line.

        Args:
            line: The statement text
            line_number: 1-indexed line number used in error locations

        Returns:
            The parsed statement

        Raises:
            ParserError: If the line has the wrong shape
            InvalidOperatorError: If the operator is not one of + - * /
            NumericOverflowError: If a literal does not fit in 32 bits
        """
        self._line = line
        self._line_number = line_number if line_number is not None else 1
        tokens = [(m.group(), m.start()) for m in _TOKEN_RE.finditer(line)]

        if not tokens:
            raise self._error("empty statement", 0)

        if len(tokens) < 2 or tokens[1][0] != "=":
            column = tokens[1][1] if len(tokens) > 1 else len(line.rstrip())
            raise self._error("expected '=' after assignment target", column)

        if len(tokens) == 2:
            raise self._error("missing value after '='", len(line.rstrip()))

        if len(tokens) == 4:
            raise self._error(
                f"missing operand after operator {tokens[3][0]!r}", len(line.rstrip())
            )

        if len(tokens) > 5:
            text, column = tokens[5]
            raise self._error(f"unexpected token {text!r} after expression", column)

        target, target_col = tokens[0]
        if not is_identifier(target):
            raise self._error(f"invalid assignment target {target!r}", target_col)

        operand1 = self._operand(*tokens[2])
        operator: Optional[Operator] = None
        operand2: Optional[str] = None

        if len(tokens) == 5:
            operator = self._operator(*tokens[3])
            operand2 = self._operand(*tokens[4])

        return Statement(
            target=target,
            operand1=operand1,
            operator=operator,
            operand2=operand2,
            source=" ".join(text for text, _ in tokens),
            line=line_number,
        )

    def _operand(self, text: str, column: int) -> str:
        if is_literal(text):
            try:
                literal_value(text)
            except IntegerOverflow as exc:
                raise NumericOverflowError(
                    str(exc),
                    exc.value,
                    location=self._location(column),
                    source_line=self._line,
                ) from None
            return text
        if is_identifier(text):
            return text
        raise self._error(f"invalid operand {text!r}", column)

    def _operator(self, text: str, column: int) -> Operator:
        op = Operator.from_symbol(text)
        if op is None:
            raise InvalidOperatorError(
                text,
                location=self._location(column),
                source_line=self._line,
                suggestion=_OPERATOR_HINTS.get(text),
            )
        return op

    def _location(self, column: int) -> SourceLocation:
        return SourceLocation(
            line=self._line_number,
            column=column + 1,
            filename=self.filename,
        )

    def _error(self, message: str, column: int) -> ParserError:
        return ParserError(message, self._location(column), self._line)


def parse_statement(line: str, line_number: Optional[int] = None) -> Statement:
    """Convenience function to parse one line."""
    return Parser().parse_line(line, line_number)


def parse_source(source: str, filename: Optional[str] = None) -> list[Statement]:
    """Convenience function to parse a multi-line document."""
    return Parser(filename).parse(source)
