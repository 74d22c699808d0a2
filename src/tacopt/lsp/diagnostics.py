"""
Diagnostic generation for the tacopt language server.

This module converts parse errors, optimization errors and optimizer
findings (dead statements, foldable expressions) into LSP diagnostics.
"""

from __future__ import annotations

from lsprotocol import types

from tacopt.compiler.optimizer import CodeOptimizer
from tacopt.compiler.parser import Parser, split_lines
from tacopt.compiler.statements import Statement
from tacopt.utils.errors import TacError

# Trace kinds reported as hints on the rewritten statement.
HINT_KINDS = ("folded", "simplified")


class DiagnosticProvider:
    """
    Generates LSP diagnostics from three-address source code.

    Every line is parsed independently so that all syntax errors are
    reported at once. When the document parses cleanly the optimizer is
    run and its findings are added as warnings and hints.
    """

    def __init__(self, source: str, uri: str) -> None:
        """
        Initialize the diagnostic provider.

        Args:
            source: The document text
            uri: The document URI for location information
        """
        self.source = source
        self.uri = uri
        self.lines = split_lines(source)
        self.statements: list[Statement] = []
        self.optimizer: CodeOptimizer | None = None
        self._diagnostics: list[types.Diagnostic] = []

    def get_diagnostics(self) -> list[types.Diagnostic]:
        """
        Get all diagnostics for the document.

        Returns:
            List of LSP diagnostic objects
        """
        self._diagnostics = []
        self.statements = []
        self.optimizer = None

        # Phase 1: Parse errors
        parser = Parser(filename=self.uri)
        has_errors = False
        for number, line in enumerate(self.lines, start=1):
            if not line.strip():
                continue
            try:
                self.statements.append(parser.parse_line(line, line_number=number))
            except TacError as e:
                self._add_tac_error(e, number - 1)
                has_errors = True

        if has_errors:
            return self._diagnostics

        # Phase 2: Optimization errors and findings
        optimizer = CodeOptimizer(filename=self.uri)
        optimizer.statements.extend(self.statements)
        try:
            optimizer.optimize()
        except TacError as e:
            line = e.location.line - 1 if e.location else 0
            self._add_tac_error(e, line, whole_line=True)
            return self._diagnostics

        self.optimizer = optimizer
        self._add_optimizer_findings(optimizer)
        return self._diagnostics

    def _add_tac_error(self, error: TacError, line: int, whole_line: bool = False) -> None:
        """
        Add a tacopt error as an LSP diagnostic.

        Args:
            error: The parse or optimization error
            line: 0-indexed line the error belongs to
            whole_line: Underline the whole statement instead of one token
        """
        line_text = self.lines[line] if 0 <= line < len(self.lines) else ""
        if whole_line or error.location is None:
            start, end = self._statement_span(line_text)
        else:
            start = max(0, error.location.column - 1)
            # Underline the offending token
            end = start + 1
            rest_of_line = line_text[start:]
            for i, c in enumerate(rest_of_line):
                if c.isspace():
                    end = start + max(1, i)
                    break
            else:
                end = start + max(1, len(rest_of_line))

        self._diagnostics.append(
            types.Diagnostic(
                range=types.Range(
                    start=types.Position(line=line, character=start),
                    end=types.Position(line=line, character=end),
                ),
                message=error.message,
                severity=types.DiagnosticSeverity.Error,
                source="tacopt",
                code=type(error).__name__,
            )
        )

    def _add_optimizer_findings(self, optimizer: CodeOptimizer) -> None:
        """Report dead statements and rewritten expressions."""
        for stmt in optimizer.statements:
            if stmt.is_dead:
                self._add_statement_diagnostic(
                    stmt,
                    f"'{stmt.target}' is assigned but never used",
                    types.DiagnosticSeverity.Warning,
                    code="dead-code",
                    tags=[types.DiagnosticTag.Unnecessary],
                )

        for record in optimizer.trace:
            if record.kind not in HINT_KINDS:
                continue
            stmt = optimizer.statements[record.statement_index]
            self._add_statement_diagnostic(
                stmt,
                record.message,
                types.DiagnosticSeverity.Hint,
                code=record.kind,
            )

    def _add_statement_diagnostic(
        self,
        stmt: Statement,
        message: str,
        severity: types.DiagnosticSeverity,
        code: str,
        tags: list[types.DiagnosticTag] | None = None,
    ) -> None:
        line = (stmt.line or 1) - 1
        line_text = self.lines[line] if 0 <= line < len(self.lines) else ""
        start, end = self._statement_span(line_text)
        self._diagnostics.append(
            types.Diagnostic(
                range=types.Range(
                    start=types.Position(line=line, character=start),
                    end=types.Position(line=line, character=end),
                ),
                message=message,
                severity=severity,
                source="tacopt",
                code=code,
                tags=tags,
            )
        )

    @staticmethod
    def _statement_span(line_text: str) -> tuple[int, int]:
        """Columns of the first and past-the-last non-blank characters."""
        stripped = line_text.strip()
        if not stripped:
            return 0, 1
        start = line_text.index(stripped)
        return start, start + len(stripped)


def get_diagnostics_for_document(source: str, uri: str) -> list[types.Diagnostic]:
    """
    Convenience function to get diagnostics for a document.

    Args:
        source: The document text
        uri: The document URI

    Returns:
        List of LSP diagnostics
    """
    provider = DiagnosticProvider(source, uri)
    return provider.get_diagnostics()
