"""
End-to-end tests: source text or files through parsing, every pass and
the reports.
"""

import pytest

from tacopt import CodeOptimizer, optimize_file, optimize_source
from tacopt.compiler.optimizer import eliminate_dead_code
from tacopt.compiler.parser import parse_source
from tacopt.compiler.report import format_report
from tacopt.utils.errors import DivisionByZeroError, InvalidOperatorError, TacError


class TestSamplePrograms:
    """Programs with known optimized output."""

    def test_classic_sample(self):
        """Test folding, identities, copy propagation and DCE together."""
        optimizer = optimize_source("x = 2 * 8\ny = x * 1\nz = y + 0\n")

        assert optimizer.optimized_code() == ["x = 16", "z = x"]
        assert optimizer.summary().final_statements == 2

    def test_classic_sample_dce_alone(self):
        """Test that the unoptimized sample has no dead code."""
        statements = parse_source("x = 2 * 8\ny = x * 1\nz = y + 0\n")
        eliminate_dead_code(statements)

        assert not any(stmt.is_dead for stmt in statements)

    def test_temporaries_program(self):
        """Test a longer program in the style of compiler temporaries."""
        source = """
t1 = 4 * 2
t2 = t1
t3 = t2 + 0
t4 = a * 1
t5 = t4 - 0
t6 = 0 * b
t7 = 10 / 3
result = t3 + t5
"""
        optimizer = optimize_source(source)

        assert optimizer.constant_values == {"t1": 8, "t6": 0, "t7": 3}
        assert optimizer.optimized_code() == [
            "t1 = 8",
            "t2 = t1",
            "t5 = a",
            "result = t2 + t5",
        ]
        dead = [stmt.target for stmt in optimizer.statements if stmt.is_dead]
        assert dead == ["t3", "t4", "t6", "t7"]

    def test_redefinition_uses_last_copy(self):
        """Test that a use is rewritten to the last copy, leaving both copies dead."""
        optimizer = optimize_source("v = p\nv = q\nw = v * 2")

        assert optimizer.optimized_code() == ["w = q * 2"]

    def test_all_passes_disabled(self):
        """Test that disabling every pass leaves the program as written."""
        source = "x = 2 * 8\ny = x * 1"
        optimizer = optimize_source(
            source,
            fold_constants=False,
            reduce_strength=False,
            propagate_copies=False,
            eliminate_dead_code=False,
        )

        assert optimizer.optimized_code() == ["x = 2 * 8", "y = x * 1"]
        assert optimizer.trace == []

    def test_incremental_program(self):
        """Test building a program one line at a time."""
        optimizer = CodeOptimizer()
        for line in ["a = 3 + 4", "b = a * 1", "c = b - 0"]:
            optimizer.add_statement(line)
        optimizer.optimize()

        assert optimizer.optimized_code() == ["a = 7", "c = a"]


class TestFiles:
    """Tests for optimize_file."""

    def test_optimize_file(self, tac_file):
        path = tac_file("a = 5\nb = 3\nc = a + 1\n")
        optimizer = optimize_file(path)

        assert optimizer.optimized_code() == ["a = 5", "c = a + 1"]
        assert "Dead code removed: 1" in format_report(optimizer)

    def test_error_location_names_file(self, tac_file):
        path = tac_file("a = 1\nb = a % 2\n", name="bad.tac")

        with pytest.raises(InvalidOperatorError) as exc_info:
            optimize_file(path)

        assert exc_info.value.location.filename == str(path)
        assert exc_info.value.location.line == 2

    def test_division_by_zero_in_file(self, tac_file):
        path = tac_file("a = 8 / 0\n")

        with pytest.raises(DivisionByZeroError):
            optimize_file(path)

    def test_all_errors_share_base_class(self, tac_file):
        """Test that callers can catch every failure as TacError."""
        for source in ["a = 1 ^ 2", "a = 99999999999", "a = 1 / 0", "a ="]:
            with pytest.raises(TacError):
                optimize_file(tac_file(source))
