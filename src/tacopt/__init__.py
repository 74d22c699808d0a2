"""
tacopt - A teaching optimizer for straight-line three-address code.

Programs are flat sequences of `target = operand [op operand]` statements.
The optimizer runs constant folding, strength reduction, copy propagation
and dead code elimination once each, and reports what changed.
"""

from tacopt.compiler import optimize_file, optimize_source
from tacopt.compiler.optimizer import CodeOptimizer
from tacopt.compiler.parser import Parser
from tacopt.compiler.statements import Statement

__version__ = "0.1.0"
__all__ = [
    "optimize_source",
    "optimize_file",
    "CodeOptimizer",
    "Parser",
    "Statement",
]
