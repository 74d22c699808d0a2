"""
tacopt Language Server Protocol (LSP) implementation.

This package provides an LSP server for three-address code files,
enabling IDE features such as:
- Error diagnostics, dead-code warnings and folding hints
- Hover information with the optimized form of each definition
- Go-to-definition
- Find references
- Document outline

Usage:
    # Start the LSP server (stdio mode)
    tacopt-lsp

    # Or run as a module
    python -m tacopt.lsp
"""

from tacopt.lsp.server import TacLanguageServer, main

__all__ = [
    "TacLanguageServer",
    "main",
]
