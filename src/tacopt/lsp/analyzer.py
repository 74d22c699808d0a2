"""
Document analysis for the tacopt language server.

This module parses and optimizes a document once and answers
position-based queries (hover, go-to-definition, references, outline)
from the result.
"""

from __future__ import annotations

import re

from lsprotocol import types

from tacopt.compiler.operators import is_identifier
from tacopt.compiler.parser import split_lines
from tacopt.lsp.diagnostics import DiagnosticProvider
from tacopt.lsp.symbols import Location, Symbol, SymbolKind, SymbolTable

_TOKEN_RE = re.compile(r"\S+")


class DocumentAnalyzer:
    """
    Analyzes a three-address code document for LSP features.

    Example:
        analyzer = DocumentAnalyzer("a = 5\\nb = a + 1", "file:///prog.tac")
        analyzer.analyze()
        analyzer.get_hover(1, 4)
    """

    def __init__(self, source: str, uri: str) -> None:
        """
        Initialize the analyzer with source code.

        Args:
            source: The document text
            uri: The document URI
        """
        self.source = source
        self.uri = uri
        self.lines = split_lines(source)

        self.symbols = SymbolTable()
        self.diagnostics: list[types.Diagnostic] = []
        self._provider = DiagnosticProvider(source, uri)

    @property
    def optimized(self) -> bool:
        """True when the document parsed and optimized without errors."""
        return self._provider.optimizer is not None

    def analyze(self) -> None:
        """Parse, optimize, collect symbols and generate diagnostics."""
        self.symbols.clear()
        self.diagnostics = self._provider.get_diagnostics()
        self._collect_symbols()

    def _collect_symbols(self) -> None:
        optimized = self.optimized
        for index, stmt in enumerate(self._provider.statements):
            line = (stmt.line or index + 1) - 1
            line_text = self.lines[line] if 0 <= line < len(self.lines) else ""
            start = max(0, line_text.find(stmt.target))
            kind = SymbolKind.CONSTANT if stmt.is_constant else SymbolKind.VARIABLE
            self.symbols.add_symbol(
                Symbol(
                    name=stmt.target,
                    kind=kind,
                    location=Location(
                        uri=self.uri,
                        line=line,
                        character=start,
                        end_character=start + len(stmt.target),
                    ),
                    statement_index=index,
                    source=stmt.source,
                    optimized=stmt.render() if optimized else None,
                    constant_value=stmt.constant_value if stmt.is_constant else None,
                    is_dead=stmt.is_dead,
                )
            )

    def get_hover(self, line: int, character: int) -> types.Hover | None:
        """
        Get hover information at a position.

        Args:
            line: 0-indexed line number
            character: 0-indexed character position

        Returns:
            Hover information or None
        """
        word, word_range = self._get_word_at_position(line, character)
        if not word or not is_identifier(word):
            return None

        definitions = self.symbols.lookup_all(word)
        if not definitions:
            return types.Hover(
                contents=types.MarkupContent(
                    kind=types.MarkupKind.Markdown,
                    value=f"```tac\n(input) {word}\n```\n\nNever assigned in this program.",
                ),
                range=word_range,
            )

        return self._create_hover_for_symbols(definitions, word_range)

    def _create_hover_for_symbols(
        self, definitions: list[Symbol], range_: types.Range | None
    ) -> types.Hover:
        """Create hover content listing every definition of a name."""
        first = definitions[0]
        kind_name = "constant" if all(d.kind is SymbolKind.CONSTANT for d in definitions) else "variable"
        parts = [f"```tac\n({kind_name}) {first.name}\n```"]

        for definition in definitions:
            entry = f"line {definition.location.line + 1}: `{definition.source}`"
            if definition.optimized is not None and definition.optimized != definition.source:
                entry += f" → `{definition.optimized}`"
            if definition.is_dead:
                entry += " (dead)"
            parts.append(entry)

        if self.optimized:
            value = self._provider.optimizer.constant_values.get(first.name)
            if value is not None:
                parts.append(f"constant value: `{value}`")
            used = self._provider.optimizer.variable_used.get(first.name, False)
            parts.append("live" if used else "never read")

        return types.Hover(
            contents=types.MarkupContent(
                kind=types.MarkupKind.Markdown,
                value="\n\n".join(parts),
            ),
            range=range_,
        )

    def get_definition(self, line: int, character: int) -> types.Location | None:
        """
        Get the definition location for a name at a position.

        The latest assignment at or above ``line`` is preferred.

        Args:
            line: 0-indexed line number
            character: 0-indexed character position

        Returns:
            Definition location or None
        """
        word, _ = self._get_word_at_position(line, character)
        if not word:
            return None

        symbol = self.symbols.lookup(word, line)
        if symbol is None:
            return None
        return symbol.location.to_lsp_location()

    def get_references(
        self, line: int, character: int, include_declaration: bool = True
    ) -> list[types.Location]:
        """
        Get every occurrence of the name at a position.

        Args:
            line: 0-indexed line number
            character: 0-indexed character position
            include_declaration: Whether to include assignment targets

        Returns:
            List of reference locations
        """
        word, _ = self._get_word_at_position(line, character)
        if not word or not is_identifier(word):
            return []

        references: list[types.Location] = []
        for i, line_text in enumerate(self.lines):
            for position, match in enumerate(_TOKEN_RE.finditer(line_text)):
                if match.group() != word:
                    continue
                if position == 0 and not include_declaration:
                    continue
                references.append(
                    types.Location(
                        uri=self.uri,
                        range=types.Range(
                            start=types.Position(line=i, character=match.start()),
                            end=types.Position(line=i, character=match.end()),
                        ),
                    )
                )
        return references

    def get_document_symbols(self) -> list[types.DocumentSymbol]:
        """
        Get all definitions for the outline view.

        Returns:
            One document symbol per assignment, in program order
        """
        return [symbol.to_document_symbol() for symbol in self.symbols.get_all_symbols()]

    def _get_word_at_position(
        self, line: int, character: int
    ) -> tuple[str, types.Range | None]:
        """
        Get the word at a position.

        Args:
            line: 0-indexed line number
            character: 0-indexed character position

        Returns:
            Tuple of (word, range) or ("", None) if no word found
        """
        if line < 0 or line >= len(self.lines):
            return "", None

        line_text = self.lines[line]
        if character < 0 or character > len(line_text):
            return "", None

        # Find word boundaries
        start = character
        while start > 0 and (line_text[start - 1].isalnum() or line_text[start - 1] == "_"):
            start -= 1

        end = character
        while end < len(line_text) and (line_text[end].isalnum() or line_text[end] == "_"):
            end += 1

        if start == end:
            return "", None

        word = line_text[start:end]
        range_ = types.Range(
            start=types.Position(line=line, character=start),
            end=types.Position(line=line, character=end),
        )

        return word, range_
