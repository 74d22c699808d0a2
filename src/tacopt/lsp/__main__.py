"""
Entry point for running the tacopt LSP server as a module.

Usage:
    python -m tacopt.lsp
    python -m tacopt.lsp --tcp --port 2088
"""

from tacopt.lsp.server import main

if __name__ == "__main__":
    main()
