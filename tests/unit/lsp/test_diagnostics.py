"""Tests for the tacopt LSP diagnostics provider."""

from lsprotocol.types import DiagnosticSeverity, DiagnosticTag

from tacopt.lsp.diagnostics import DiagnosticProvider, get_diagnostics_for_document

URI = "test://prog.tac"


class TestParseDiagnostics:
    """Tests for syntax errors reported as diagnostics."""

    def test_valid_code_no_errors(self) -> None:
        """Test that valid code produces no error diagnostics."""
        diagnostics = get_diagnostics_for_document("a = 5\nb = a + 1", URI)

        errors = [d for d in diagnostics if d.severity == DiagnosticSeverity.Error]
        assert errors == []

    def test_every_bad_line_reported(self) -> None:
        """Test that each malformed line gets its own error."""
        source = "a = 1\nb = a ?? 2\nc = ="
        diagnostics = get_diagnostics_for_document(source, URI)

        assert [d.range.start.line for d in diagnostics] == [1, 2]
        assert all(d.severity == DiagnosticSeverity.Error for d in diagnostics)

    def test_invalid_operator_range(self) -> None:
        """Test that the offending operator token is underlined."""
        diagnostics = get_diagnostics_for_document("b = a ?? 2", URI)

        assert len(diagnostics) == 1
        diagnostic = diagnostics[0]
        assert diagnostic.code == "InvalidOperatorError"
        assert diagnostic.range.start.character == 6
        assert diagnostic.range.end.character == 8
        assert "??" in diagnostic.message

    def test_overflow_literal(self) -> None:
        diagnostics = get_diagnostics_for_document("x = 9999999999", URI)

        assert len(diagnostics) == 1
        assert diagnostics[0].code == "NumericOverflowError"

    def test_form_feed_stays_on_its_line(self) -> None:
        """Test that errors land on the editor line when a form feed is present."""
        diagnostics = get_diagnostics_for_document("a = 1\x0cb = %\nc = a", URI)

        assert len(diagnostics) == 1
        assert diagnostics[0].range.start.line == 0
        assert "unexpected token" in diagnostics[0].message

    def test_crlf_line_numbers(self) -> None:
        diagnostics = get_diagnostics_for_document("a = 1\r\nb = ?\r\n", URI)

        assert len(diagnostics) == 1
        assert diagnostics[0].range.start.line == 1
        assert diagnostics[0].range.start.character == 4

    def test_blank_lines_ignored(self) -> None:
        diagnostics = get_diagnostics_for_document("\n\na = 1\n\n", URI)
        assert diagnostics == []

    def test_no_findings_when_parse_fails(self) -> None:
        """Test that the optimizer is not run on a broken document."""
        provider = DiagnosticProvider("a = 5\nb = 3\nc = a +", URI)
        diagnostics = provider.get_diagnostics()

        assert len(diagnostics) == 1
        assert provider.optimizer is None
        assert len(provider.statements) == 2


class TestOptimizerDiagnostics:
    """Tests for findings produced by running the optimizer."""

    def test_division_by_zero(self) -> None:
        """Test that a literal division by zero is an error over the statement."""
        diagnostics = get_diagnostics_for_document("a = 1\nb = 4 / 0", URI)

        assert len(diagnostics) == 1
        diagnostic = diagnostics[0]
        assert diagnostic.severity == DiagnosticSeverity.Error
        assert diagnostic.code == "DivisionByZeroError"
        assert diagnostic.range.start.line == 1
        assert diagnostic.range.start.character == 0
        assert diagnostic.range.end.character == 9

    def test_dead_code_warning(self) -> None:
        """Test that an unread assignment is flagged as unnecessary."""
        diagnostics = get_diagnostics_for_document("a = 5\nb = 3\nc = a + 1", URI)

        warnings = [d for d in diagnostics if d.severity == DiagnosticSeverity.Warning]
        assert len(warnings) == 1
        warning = warnings[0]
        assert warning.range.start.line == 1
        assert warning.message == "'b' is assigned but never used"
        assert warning.code == "dead-code"
        assert warning.tags == [DiagnosticTag.Unnecessary]

    def test_rewrite_hints(self) -> None:
        """Test that folded and simplified statements get hints."""
        diagnostics = get_diagnostics_for_document("x = 2 * 8\ny = x * 1\nz = y + 0", URI)

        hints = [d for d in diagnostics if d.severity == DiagnosticSeverity.Hint]
        assert [(h.range.start.line, h.code) for h in hints] == [
            (0, "folded"),
            (1, "simplified"),
            (2, "simplified"),
        ]
        assert hints[0].message == "Computed: x = 2 * 8 => x = 16"

    def test_hint_range_skips_indentation(self) -> None:
        diagnostics = get_diagnostics_for_document("   x = 2 * 8", URI)

        assert len(diagnostics) == 1
        assert diagnostics[0].range.start.character == 3
        assert diagnostics[0].range.end.character == 12

    def test_clean_program_has_no_diagnostics(self) -> None:
        assert get_diagnostics_for_document("a = b + c", URI) == []

    def test_provider_keeps_optimizer(self) -> None:
        provider = DiagnosticProvider("x = 2 * 8", URI)
        provider.get_diagnostics()

        assert provider.optimizer is not None
        assert provider.optimizer.optimized_code() == ["x = 16"]
