"""
tacopt Language Server Protocol (LSP) Server.

This module implements an LSP server for three-address code files using
pygls. It provides:

- Document synchronization (open, change, save, close)
- Diagnostics (syntax errors, division by zero, dead code, foldable code)
- Hover information (definitions, optimized form, constant value)
- Go-to-definition
- Find references
- Document symbols (outline)

Usage:
    # Start the server in stdio mode (for IDE integration)
    tacopt-lsp

    # Start in TCP mode (for debugging)
    tacopt-lsp --tcp --port 2088
"""

import logging

from lsprotocol import types
from pygls.lsp.server import LanguageServer

from tacopt import __version__
from tacopt.lsp.analyzer import DocumentAnalyzer

logger = logging.getLogger("tacopt-lsp")


class TacLanguageServer(LanguageServer):
    """
    Language Server Protocol implementation for three-address code.

    Each document is analyzed with its own optimizer, so no state is
    shared between documents. The latest analysis per URI is cached for
    position queries.
    """

    def __init__(self) -> None:
        """Initialize the tacopt language server."""
        super().__init__(
            name="tacopt-lsp",
            version=f"v{__version__}",
        )

        # Document analyzers cache (uri -> analyzer)
        self.analyzers: dict[str, DocumentAnalyzer] = {}

    def get_analyzer(self, uri: str) -> DocumentAnalyzer | None:
        """Get the cached analyzer for a document."""
        return self.analyzers.get(uri)

    def analyze_document(self, uri: str, text: str) -> DocumentAnalyzer:
        """Analyze a document and cache the result."""
        analyzer = DocumentAnalyzer(text, uri)
        analyzer.analyze()
        self.analyzers[uri] = analyzer
        return analyzer

    def publish(self, uri: str, diagnostics: list[types.Diagnostic]) -> None:
        """Publish diagnostics to the client."""
        self.text_document_publish_diagnostics(
            types.PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
        )

    def reanalyze(self, uri: str) -> None:
        """Re-analyze the workspace copy of a document and publish the result."""
        doc = self.workspace.get_text_document(uri)
        if doc is None:
            return
        analyzer = self.analyze_document(uri, doc.source)
        self.publish(uri, analyzer.diagnostics)


# =============================================================================
# Document Synchronization
# =============================================================================


def did_open(ls: TacLanguageServer, params: types.DidOpenTextDocumentParams) -> None:
    """Handle document open notification."""
    document = params.text_document
    logger.info("Document opened: %s", document.uri)

    analyzer = ls.analyze_document(document.uri, document.text)
    ls.publish(document.uri, analyzer.diagnostics)


def did_change(ls: TacLanguageServer, params: types.DidChangeTextDocumentParams) -> None:
    """Handle document change notification."""
    logger.debug("Document changed: %s", params.text_document.uri)
    ls.reanalyze(params.text_document.uri)


def did_save(ls: TacLanguageServer, params: types.DidSaveTextDocumentParams) -> None:
    """Handle document save notification."""
    logger.info("Document saved: %s", params.text_document.uri)
    ls.reanalyze(params.text_document.uri)


def did_close(ls: TacLanguageServer, params: types.DidCloseTextDocumentParams) -> None:
    """Handle document close notification."""
    uri = params.text_document.uri
    logger.info("Document closed: %s", uri)

    ls.analyzers.pop(uri, None)
    ls.publish(uri, [])


# =============================================================================
# Language Features
# =============================================================================


def hover(ls: TacLanguageServer, params: types.HoverParams) -> types.Hover | None:
    """Handle hover request."""
    analyzer = ls.get_analyzer(params.text_document.uri)
    if analyzer is None:
        return None
    return analyzer.get_hover(params.position.line, params.position.character)


def definition(ls: TacLanguageServer, params: types.DefinitionParams) -> types.Location | None:
    """Handle go-to-definition request."""
    analyzer = ls.get_analyzer(params.text_document.uri)
    if analyzer is None:
        return None
    return analyzer.get_definition(params.position.line, params.position.character)


def references(ls: TacLanguageServer, params: types.ReferenceParams) -> list[types.Location] | None:
    """Handle find-references request."""
    analyzer = ls.get_analyzer(params.text_document.uri)
    if analyzer is None:
        return None
    return analyzer.get_references(
        params.position.line,
        params.position.character,
        params.context.include_declaration,
    )


def document_symbol(
    ls: TacLanguageServer, params: types.DocumentSymbolParams
) -> list[types.DocumentSymbol] | None:
    """Handle document symbols request (for outline view)."""
    analyzer = ls.get_analyzer(params.text_document.uri)
    if analyzer is None:
        return None
    return analyzer.get_document_symbols()


# Feature name -> handler, registered on every server instance.
FEATURES = {
    types.TEXT_DOCUMENT_DID_OPEN: did_open,
    types.TEXT_DOCUMENT_DID_CHANGE: did_change,
    types.TEXT_DOCUMENT_DID_SAVE: did_save,
    types.TEXT_DOCUMENT_DID_CLOSE: did_close,
    types.TEXT_DOCUMENT_HOVER: hover,
    types.TEXT_DOCUMENT_DEFINITION: definition,
    types.TEXT_DOCUMENT_REFERENCES: references,
    types.TEXT_DOCUMENT_DOCUMENT_SYMBOL: document_symbol,
}


# =============================================================================
# Server Creation and Main Entry Point
# =============================================================================


def create_server() -> TacLanguageServer:
    """Create a tacopt language server with every feature registered."""
    server = TacLanguageServer()
    for feature_name, handler in FEATURES.items():
        server.feature(feature_name)(handler)
    return server


def main() -> None:
    """
    Main entry point for the tacopt language server.

    Starts the server in stdio mode for IDE integration.
    """
    import argparse

    parser = argparse.ArgumentParser(
        description="tacopt Language Server",
        prog="tacopt-lsp",
    )
    parser.add_argument(
        "--tcp",
        action="store_true",
        help="Start server in TCP mode instead of stdio",
    )
    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host to bind to in TCP mode (default: 127.0.0.1)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=2088,
        help="Port to listen on in TCP mode (default: 2088)",
    )
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error"],
        default="info",
        help="Logging level (default: info)",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    server = create_server()

    if args.tcp:
        logger.info("Starting tacopt LSP in TCP mode on %s:%s", args.host, args.port)
        server.start_tcp(args.host, args.port)
    else:
        logger.info("Starting tacopt LSP in stdio mode")
        server.start_io()


if __name__ == "__main__":
    main()
