"""
tacopt Utilities Package.

Error types and source locations shared by the parser, the optimizer
passes, the CLI and the language server.
"""

from tacopt.utils.errors import (
    DivisionByZeroError,
    InvalidOperatorError,
    NumericOverflowError,
    OptimizationError,
    ParserError,
    SourceLocation,
    TacError,
)

__all__ = [
    "TacError",
    "ParserError",
    "InvalidOperatorError",
    "NumericOverflowError",
    "OptimizationError",
    "DivisionByZeroError",
    "SourceLocation",
]
