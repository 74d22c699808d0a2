"""
Multi-pass optimizer for straight-line three-address code.

This module provides four optimizations that run, in this fixed order,
exactly once per ``CodeOptimizer.optimize()`` call:

- Constant Folding: evaluate ``lit op lit`` at compile time
- Strength Reduction: rewrite algebraic identities (``x * 1``, ``x + 0``, ...)
- Copy Propagation: substitute simple ``a = b`` copies forward
- Dead Code Elimination: flag statements whose target is never read

All passes mutate the shared statement list and the ``constant_values`` /
``variable_used`` maps in place. The analyses are flow-insensitive: every
definition of a name shares one slot in each map. None of the passes
iterates to a fixpoint, so a second ``optimize()`` call may still find
something to simplify.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional

from tacopt.compiler.operators import (
    IntegerOverflow,
    apply_operator,
    is_literal,
    literal_value,
)
from tacopt.compiler.parser import Parser
from tacopt.compiler.statements import Operator, Statement
from tacopt.utils.errors import (
    DivisionByZeroError,
    NumericOverflowError,
    SourceLocation,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Shared Pass State
# =============================================================================


@dataclass(frozen=True)
class OptimizationRecord:
    """One transformation applied by a pass."""

    pass_name: str
    kind: str
    statement_index: int
    message: str

    def __str__(self) -> str:
        return f"[{self.pass_name}] {self.message}"


@dataclass
class OptimizationState:
    """
    The program and auxiliary maps threaded through every pass.

    Attributes:
        statements: The program, in evaluation order
        constant_values: Folded value per variable name
        variable_used: Whether each name is read anywhere in the program
        trace: Transformations applied so far
    """

    statements: list[Statement]
    constant_values: dict[str, int] = field(default_factory=dict)
    variable_used: dict[str, bool] = field(default_factory=dict)
    trace: list[OptimizationRecord] = field(default_factory=list)

    def record(self, pass_name: str, kind: str, index: int, message: str) -> None:
        self.trace.append(OptimizationRecord(pass_name, kind, index, message))
        logger.debug("%s: %s", pass_name, message)


def _statement_location(stmt: Statement, index: int) -> SourceLocation:
    return SourceLocation(line=stmt.line if stmt.line is not None else index + 1, column=1)


# =============================================================================
# Optimizer Pass Interface
# =============================================================================


class OptimizerPass(ABC):
    """
    Abstract base class for optimization passes.

    Each pass rewrites the statements of an ``OptimizationState`` in place
    and returns the number of transformations it applied.
    """

    @abstractmethod
    def optimize(self, state: OptimizationState) -> int:
        """
        Apply the optimization pass once.

        Args:
            state: The program and maps shared between passes

        Returns:
            Number of transformations applied
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name of the optimization pass."""
        pass


# =============================================================================
# 1. Constant Folder
# =============================================================================


class ConstantFolder(OptimizerPass):
    """
    Fold expressions whose two operands are both integer literals.

    Examples:
        x = 2 * 8   ->  x = 16
        y = 7 / -2  ->  y = -3

    Simple assignments are never folded, and a folded value is not fed
    into later statements during the same pass.
    """

    @property
    def name(self) -> str:
        return "Constant Folding"

    def optimize(self, state: OptimizationState) -> int:
        folded = 0
        for index, stmt in enumerate(state.statements):
            if stmt.is_constant:
                # Folded by an earlier optimize() call
                state.constant_values[stmt.target] = stmt.constant_value
                continue
            if stmt.operator is None:
                continue
            if not (is_literal(stmt.operand1) and is_literal(stmt.operand2)):
                continue

            expression = stmt.render()
            result = self._evaluate(stmt, index)
            stmt.make_constant(result)
            state.constant_values[stmt.target] = result
            state.record(
                self.name,
                "folded",
                index,
                f"Computed: {expression} => {stmt.target} = {result}",
            )
            folded += 1
        return folded

    def _evaluate(self, stmt: Statement, index: int) -> int:
        """Compute the folded value without touching the statement."""
        location = _statement_location(stmt, index)
        try:
            left = literal_value(stmt.operand1)
            right = literal_value(stmt.operand2)
            return apply_operator(stmt.operator, left, right)
        except ZeroDivisionError:
            raise DivisionByZeroError(
                f"division by zero: {stmt.render()}",
                statement_index=index,
                location=location,
                source_line=stmt.source,
            ) from None
        except IntegerOverflow as exc:
            raise NumericOverflowError(
                str(exc),
                exc.value,
                location=location,
                source_line=stmt.source,
                statement_index=index,
            ) from None


# =============================================================================
# 2. Strength Reducer
# =============================================================================


class StrengthReducer(OptimizerPass):
    """
    Rewrite algebraic identities into simple assignments.

    Reductions applied (the right operand is checked first):
    - x * 1, 1 * x -> x
    - x * 0, 0 * x -> 0 (marked constant)
    - x + 0, 0 + x -> x
    - x - 0 -> x
    - x / 1 -> x

    Statements already constant or already simple assignments are skipped.
    Only one identity is applied per statement.
    """

    @property
    def name(self) -> str:
        return "Strength Reduction"

    def optimize(self, state: OptimizationState) -> int:
        reduced = 0
        for index, stmt in enumerate(state.statements):
            if stmt.is_constant or stmt.operator is None:
                continue

            before = stmt.render()
            if not self._reduce(stmt, state):
                continue
            state.record(
                self.name,
                "simplified",
                index,
                f"Simplified: {before} => {stmt.render()}",
            )
            reduced += 1
        return reduced

    def _reduce(self, stmt: Statement, state: OptimizationState) -> bool:
        """Apply the first matching identity. Returns True if one applied."""
        left, op, right = stmt.operand1, stmt.operator, stmt.operand2

        if op is Operator.MUL:
            if self._is_int_value(right, 1):
                stmt.make_assignment(left)
                return True
            if self._is_int_value(left, 1):
                stmt.make_assignment(right)
                return True
            if self._is_int_value(right, 0) or self._is_int_value(left, 0):
                stmt.make_constant(0)
                state.constant_values[stmt.target] = 0
                return True

        elif op is Operator.ADD:
            if self._is_int_value(right, 0):
                stmt.make_assignment(left)
                return True
            if self._is_int_value(left, 0):
                stmt.make_assignment(right)
                return True

        elif op is Operator.SUB:
            if self._is_int_value(right, 0):
                stmt.make_assignment(left)
                return True

        elif op is Operator.DIV:
            if self._is_int_value(right, 1):
                stmt.make_assignment(left)
                return True

        return False

    def _is_int_value(self, operand: Optional[str], value: int) -> bool:
        """Check if an operand is a literal with a specific value."""
        return operand is not None and is_literal(operand) and int(operand) == value


# =============================================================================
# 3. Copy Propagator
# =============================================================================


class CopyPropagator(OptimizerPass):
    """
    Propagate simple variable copies forward.

    A non-constant statement ``b = a`` where ``a`` is a name records the
    alias ``b -> a``; the last definition of ``b`` wins. Every statement
    whose first operand is an aliased name then has it replaced.

    Only ``operand1`` is substituted; ``operand2`` is left alone. The
    substitution is applied once and is not transitive: with ``b -> a``
    and ``a -> x``, a use of ``b`` becomes ``a``.
    """

    @property
    def name(self) -> str:
        return "Copy Propagation"

    def optimize(self, state: OptimizationState) -> int:
        aliases = self._collect_aliases(state)

        substituted = 0
        for index, stmt in enumerate(state.statements):
            if stmt.is_constant:
                continue
            replacement = aliases.get(stmt.operand1)
            if replacement is None or replacement == stmt.operand1:
                continue
            original = stmt.operand1
            stmt.operand1 = replacement
            state.record(
                self.name,
                "substituted",
                index,
                f"Substituted: {original} -> {replacement} in {stmt.target}",
            )
            substituted += 1
        return substituted

    def _collect_aliases(self, state: OptimizationState) -> dict[str, str]:
        aliases: dict[str, str] = {}
        for index, stmt in enumerate(state.statements):
            if stmt.operator is not None or stmt.is_constant or is_literal(stmt.operand1):
                continue
            aliases[stmt.target] = stmt.operand1
            state.record(
                self.name,
                "copy-detected",
                index,
                f"Copy detected: {stmt.target} = {stmt.operand1}",
            )
        return aliases


# =============================================================================
# 4. Dead Code Eliminator
# =============================================================================


class DeadCodeEliminator(OptimizerPass):
    """
    Flag statements whose target is never read.

    Every name read as an operand anywhere in the program is live, and the
    target of the last statement is treated as the program's output.
    Dead statements stay in the program with ``is_dead`` set and are left
    out of the optimized code.

    The usage set is flow-insensitive: a definition overwritten by a later
    redefinition before any read is not detected as dead.
    """

    @property
    def name(self) -> str:
        return "Dead Code Elimination"

    def optimize(self, state: OptimizationState) -> int:
        used = state.variable_used
        used.clear()

        for stmt in state.statements:
            used[stmt.target] = False

        for stmt in state.statements:
            for operand in stmt.operands():
                if not is_literal(operand):
                    used[operand] = True

        if state.statements:
            used[state.statements[-1].target] = True

        dead = 0
        for index, stmt in enumerate(state.statements):
            stmt.is_dead = not used[stmt.target]
            if stmt.is_dead:
                state.record(
                    self.name,
                    "dead",
                    index,
                    f"Dead code detected: {stmt.target} is never used",
                )
                dead += 1
        return dead


# =============================================================================
# Summary
# =============================================================================


# Summary label per pass, in report order.
APPLIED_LABELS: dict[str, str] = {
    "Constant Folding": "Redundant computations eliminated",
    "Strength Reduction": "Strength reduction applied",
    "Copy Propagation": "Copy propagation performed",
    "Dead Code Elimination": "Dead code detected and removed",
}


@dataclass(frozen=True)
class OptimizationSummary:
    """Statement counts after ``optimize()``."""

    total_statements: int
    folded_count: int
    dead_count: int
    applied: tuple[str, ...] = ()

    @property
    def non_folded_count(self) -> int:
        return self.total_statements - self.folded_count

    @property
    def final_statements(self) -> int:
        return self.total_statements - self.dead_count

    def to_dict(self) -> dict[str, object]:
        return {
            "total_statements": self.total_statements,
            "folded": self.folded_count,
            "non_folded": self.non_folded_count,
            "dead": self.dead_count,
            "final_statements": self.final_statements,
            "applied": list(self.applied),
        }


# =============================================================================
# Main Optimizer
# =============================================================================


class CodeOptimizer:
    """
    Accumulates a program and runs the optimization passes over it.

    The pass order is fixed: Constant Folding, Strength Reduction, Copy
    Propagation, Dead Code Elimination. Individual passes can be disabled.

    Example:
        optimizer = CodeOptimizer()
        optimizer.add_statement("x = 2 * 8")
        optimizer.add_statement("y = x * 1")
        optimizer.optimize()
        optimizer.optimized_code()  # ["x = 16", "y = x"]
    """

    def __init__(
        self,
        fold_constants: bool = True,
        reduce_strength: bool = True,
        propagate_copies: bool = True,
        eliminate_dead_code: bool = True,
        filename: Optional[str] = None,
    ) -> None:
        """
        Initialize the optimizer with configurable passes.

        Args:
            fold_constants: Enable constant folding
            reduce_strength: Enable strength reduction
            propagate_copies: Enable copy propagation
            eliminate_dead_code: Enable dead code elimination
            filename: Source name used in parse error locations
        """
        self.statements: list[Statement] = []
        self.constant_values: dict[str, int] = {}
        self.variable_used: dict[str, bool] = {}
        self.trace: list[OptimizationRecord] = []
        self._parser = Parser(filename)

        self.passes: list[OptimizerPass] = []
        if fold_constants:
            self.passes.append(ConstantFolder())
        if reduce_strength:
            self.passes.append(StrengthReducer())
        if propagate_copies:
            self.passes.append(CopyPropagator())
        if eliminate_dead_code:
            self.passes.append(DeadCodeEliminator())

    def add_statement(self, line: str, line_number: Optional[int] = None) -> None:
        """
        Parse one line and append it to the program.

        Raises:
            ParserError: If the line is malformed; nothing is appended
        """
        self.statements.append(self._parser.parse_line(line, line_number))

    def add_source(self, source: str) -> None:
        """
        Parse a multi-line document and append all of its statements.

        Raises:
            ParserError: On the first malformed line; nothing is appended
        """
        self.statements.extend(self._parser.parse(source))

    def optimize(self) -> None:
        """
        Run every enabled pass once, in order.

        Raises:
            DivisionByZeroError: If folding meets a literal ``/ 0``
            NumericOverflowError: If a folded value leaves the 32-bit range
        """
        self.constant_values.clear()
        self.variable_used.clear()
        self.trace.clear()

        state = OptimizationState(
            statements=self.statements,
            constant_values=self.constant_values,
            variable_used=self.variable_used,
            trace=self.trace,
        )
        for pass_ in self.passes:
            count = pass_.optimize(state)
            logger.debug("%s applied %d transformation(s)", pass_.name, count)

    def original_code(self) -> list[str]:
        """The program as it was parsed."""
        return [stmt.source for stmt in self.statements]

    def optimized_code(self) -> list[str]:
        """The current program without dead statements."""
        return [stmt.render() for stmt in self.statements if not stmt.is_dead]

    def summary(self) -> OptimizationSummary:
        fired = {record.pass_name for record in self.trace if record.kind != "copy-detected"}
        return OptimizationSummary(
            total_statements=len(self.statements),
            folded_count=sum(1 for stmt in self.statements if stmt.is_constant),
            dead_count=sum(1 for stmt in self.statements if stmt.is_dead),
            applied=tuple(label for name, label in APPLIED_LABELS.items() if name in fired),
        )

    def pass_names(self) -> list[str]:
        """Get the names of all enabled optimization passes."""
        return [pass_.name for pass_ in self.passes]


# =============================================================================
# Convenience Functions
# =============================================================================


def _run_single(pass_: OptimizerPass, statements: list[Statement]) -> OptimizationState:
    state = OptimizationState(statements=statements)
    pass_.optimize(state)
    return state


def fold_constants(statements: list[Statement]) -> OptimizationState:
    """Run constant folding alone over ``statements``."""
    return _run_single(ConstantFolder(), statements)


def reduce_strength(statements: list[Statement]) -> OptimizationState:
    """Run strength reduction alone over ``statements``."""
    return _run_single(StrengthReducer(), statements)


def propagate_copies(statements: list[Statement]) -> OptimizationState:
    """Run copy propagation alone over ``statements``."""
    return _run_single(CopyPropagator(), statements)


def eliminate_dead_code(statements: list[Statement]) -> OptimizationState:
    """Run dead code elimination alone over ``statements``."""
    return _run_single(DeadCodeEliminator(), statements)


__all__ = [
    # Core classes
    "OptimizerPass",
    "ConstantFolder",
    "StrengthReducer",
    "CopyPropagator",
    "DeadCodeEliminator",
    "CodeOptimizer",
    # Helper classes
    "OptimizationState",
    "OptimizationRecord",
    "OptimizationSummary",
    "APPLIED_LABELS",
    # Convenience functions
    "fold_constants",
    "reduce_strength",
    "propagate_copies",
    "eliminate_dead_code",
]
