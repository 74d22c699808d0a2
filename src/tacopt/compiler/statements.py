"""
Statement model for straight-line three-address code.

A program is an ordered list of flat statements of the form::

    target = operand1
    target = operand1 op operand2

Statements are mutable: the optimizer passes rewrite them in place and
flag them as constant or dead. The text they were parsed from is kept in
``source`` so the original program can still be rendered afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Operator(Enum):
    """Binary arithmetic operators supported by the intermediate code."""

    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"

    @classmethod
    def from_symbol(cls, symbol: str) -> Optional["Operator"]:
        """Return the operator spelled ``symbol``, or None if unknown."""
        try:
            return cls(symbol)
        except ValueError:
            return None

    def __str__(self) -> str:
        return self.value


@dataclass
class Statement:
    """
    A single straight-line operation.

    Attributes:
        target: Assignment destination; the same name may be reassigned later
        operand1: Variable name or integer literal text
        operator: Binary operator, or None for a simple assignment
        operand2: Second operand, present iff ``operator`` is present
        is_constant: True once the value has been folded to a literal
        constant_value: The folded value, valid only when ``is_constant``
        is_dead: True once dead-code elimination finds ``target`` unread
        source: The statement text as it was parsed
        line: 1-indexed source line, when known
    """

    target: str
    operand1: str
    operator: Optional[Operator] = None
    operand2: Optional[str] = None
    is_constant: bool = False
    constant_value: Optional[int] = None
    is_dead: bool = False
    source: str = ""
    line: Optional[int] = None

    def __post_init__(self) -> None:
        if (self.operator is None) != (self.operand2 is None):
            raise ValueError("operator and operand2 must be given together")
        if not self.source:
            self.source = self.render()

    @property
    def is_assignment(self) -> bool:
        """True for ``target = operand1`` (no operator)."""
        return self.operator is None

    def operands(self) -> tuple[str, ...]:
        """The operands read by this statement, in order."""
        if self.operand2 is None:
            return (self.operand1,)
        return (self.operand1, self.operand2)

    def make_assignment(self, operand: str) -> None:
        """Reduce the statement to ``target = operand``."""
        self.operand1 = operand
        self.operator = None
        self.operand2 = None

    def make_constant(self, value: int) -> None:
        """Reduce the statement to ``target = value`` and mark it folded."""
        self.make_assignment(str(value))
        self.is_constant = True
        self.constant_value = value

    def render(self) -> str:
        """Render the current form of the statement."""
        if self.is_constant:
            return f"{self.target} = {self.constant_value}"
        if self.operator is None:
            return f"{self.target} = {self.operand1}"
        return f"{self.target} = {self.operand1} {self.operator} {self.operand2}"

    def __str__(self) -> str:
        return self.render()
