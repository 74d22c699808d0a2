"""
tacopt Compiler Package.

This package contains the optimizer components:
- Statements: the straight-line intermediate code model
- Parser: turns `target = operand [op operand]` lines into statements
- Operators: literal recognition and checked 32-bit arithmetic
- Optimizer: constant folding, strength reduction, copy propagation and
  dead code elimination, orchestrated by CodeOptimizer
- Report: text and JSON views of an optimized program
"""

from __future__ import annotations

from pathlib import Path
from typing import Union

from tacopt.compiler.operators import INT_MAX, INT_MIN, apply_operator, is_literal
from tacopt.compiler.optimizer import (
    CodeOptimizer,
    ConstantFolder,
    CopyPropagator,
    DeadCodeEliminator,
    OptimizationRecord,
    OptimizationState,
    OptimizationSummary,
    OptimizerPass,
    StrengthReducer,
    eliminate_dead_code,
    fold_constants,
    propagate_copies,
    reduce_strength,
)
from tacopt.compiler.parser import Parser, parse_source, parse_statement, split_lines
from tacopt.compiler.statements import Operator, Statement


def optimize_source(source: str, filename: str | None = None, **flags: bool) -> CodeOptimizer:
    """
    Parse and optimize a three-address program.

    Args:
        source: Program text, one statement per line
        filename: Name used in parse error locations
        **flags: Pass toggles forwarded to CodeOptimizer

    Returns:
        The optimizer, after optimize() has run
    """
    optimizer = CodeOptimizer(filename=filename, **flags)
    optimizer.add_source(source)
    optimizer.optimize()
    return optimizer


def optimize_file(path: Union[str, Path], **flags: bool) -> CodeOptimizer:
    """Read, parse and optimize a program file."""
    path = Path(path)
    return optimize_source(path.read_text(encoding="utf-8"), filename=str(path), **flags)


__all__ = [
    "Statement",
    "Operator",
    "Parser",
    "parse_statement",
    "parse_source",
    "split_lines",
    "INT_MIN",
    "INT_MAX",
    "apply_operator",
    "is_literal",
    "OptimizerPass",
    "ConstantFolder",
    "StrengthReducer",
    "CopyPropagator",
    "DeadCodeEliminator",
    "CodeOptimizer",
    "OptimizationState",
    "OptimizationRecord",
    "OptimizationSummary",
    "fold_constants",
    "reduce_strength",
    "propagate_copies",
    "eliminate_dead_code",
    "optimize_source",
    "optimize_file",
]
