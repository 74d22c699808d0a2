"""
Symbol table for the tacopt language server.

Three-address code has a single flat scope, so the table is a mapping
from variable name to every statement that defines it, in program order.
"""

from dataclasses import dataclass, field
from enum import Enum, auto

from lsprotocol import types


class SymbolKind(Enum):
    """Kind of definition in a three-address program."""

    VARIABLE = auto()
    CONSTANT = auto()


SYMBOL_KIND_TO_LSP: dict[SymbolKind, types.SymbolKind] = {
    SymbolKind.VARIABLE: types.SymbolKind.Variable,
    SymbolKind.CONSTANT: types.SymbolKind.Constant,
}


@dataclass
class Location:
    """Source location information for a symbol."""

    uri: str
    line: int  # 0-indexed
    character: int  # 0-indexed
    end_character: int | None = None

    def to_lsp_range(self) -> types.Range:
        """Convert to LSP Range type."""
        end = self.end_character if self.end_character is not None else self.character + 1
        return types.Range(
            start=types.Position(line=self.line, character=self.character),
            end=types.Position(line=self.line, character=end),
        )

    def to_lsp_location(self) -> types.Location:
        """Convert to LSP Location type."""
        return types.Location(uri=self.uri, range=self.to_lsp_range())


@dataclass
class Symbol:
    """
    One definition of a variable.

    Attributes:
        name: The assigned variable
        kind: CONSTANT once the statement folded to a literal
        location: Where the target name appears
        statement_index: Position of the defining statement in the program
        source: The statement as written
        optimized: The statement after optimization, or None if not optimized
        constant_value: The folded value, if any
        is_dead: Whether dead code elimination flagged the statement
    """

    name: str
    kind: SymbolKind
    location: Location
    statement_index: int
    source: str
    optimized: str | None = None
    constant_value: int | None = None
    is_dead: bool = False

    def to_lsp_symbol_kind(self) -> types.SymbolKind:
        """Get the LSP symbol kind."""
        return SYMBOL_KIND_TO_LSP.get(self.kind, types.SymbolKind.Variable)

    def to_document_symbol(self) -> types.DocumentSymbol:
        """Convert to LSP DocumentSymbol."""
        range_ = self.location.to_lsp_range()
        return types.DocumentSymbol(
            name=self.name,
            kind=self.to_lsp_symbol_kind(),
            range=range_,
            selection_range=range_,
            detail=self.optimized or self.source,
        )


@dataclass
class SymbolTable:
    """Definitions by name, each list in program order."""

    symbols: dict[str, list[Symbol]] = field(default_factory=dict)

    def add_symbol(self, symbol: Symbol) -> None:
        self.symbols.setdefault(symbol.name, []).append(symbol)

    def lookup_all(self, name: str) -> list[Symbol]:
        """Get every definition of ``name``."""
        return self.symbols.get(name, [])

    def lookup(self, name: str, line: int | None = None) -> Symbol | None:
        """
        Find the definition of ``name`` visible at ``line``.

        Args:
            name: The variable name
            line: 0-indexed line; the latest definition at or above it wins

        Returns:
            The matching definition, the first one if none precedes ``line``,
            or None if ``name`` is never assigned
        """
        definitions = self.lookup_all(name)
        if not definitions:
            return None
        if line is not None:
            preceding = [sym for sym in definitions if sym.location.line <= line]
            if preceding:
                return preceding[-1]
        return definitions[0]

    def get_all_symbols(self) -> list[Symbol]:
        """Get all definitions in program order."""
        result = [sym for symbols in self.symbols.values() for sym in symbols]
        return sorted(result, key=lambda sym: sym.statement_index)

    def clear(self) -> None:
        self.symbols.clear()
