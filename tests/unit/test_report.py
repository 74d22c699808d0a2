"""Unit tests for the text and JSON report views."""

import json

from tacopt.compiler.report import (
    RULE,
    format_original,
    format_optimized,
    format_report,
    format_section,
    format_summary,
    format_trace,
    report_to_dict,
)

SAMPLE = "x = 2 * 8\ny = x * 1\nz = y + 0"


class TestSections:
    """Tests for the individual report sections."""

    def test_format_section(self):
        text = format_section("Title", ["one", "two"])
        assert text == f"{RULE}\nTitle\n{RULE}\none\ntwo"

    def test_empty_section(self):
        assert format_section("Title", []) == f"{RULE}\nTitle\n{RULE}"

    def test_original_and_optimized(self, optimize):
        optimizer = optimize(SAMPLE)

        assert format_original(optimizer).splitlines()[3:] == [
            "x = 2 * 8",
            "y = x * 1",
            "z = y + 0",
        ]
        assert format_optimized(optimizer).splitlines()[3:] == ["x = 16", "z = x"]

    def test_summary(self, optimize):
        """Test the summary counts and the applied list."""
        lines = format_summary(optimize(SAMPLE)).splitlines()

        assert lines[1] == "Optimization Summary"
        assert lines[3:7] == [
            "Total statements: 3",
            "Constants folded: 1",
            "Dead code removed: 1",
            "Final statements: 2",
        ]
        assert "Optimizations Applied:" in lines
        assert "  - Strength reduction applied" in lines

    def test_summary_without_applied(self, optimizer_factory):
        """Test that an unoptimized program has no applied list."""
        text = format_summary(optimizer_factory("a = 1"))
        assert "Optimizations Applied:" not in text

    def test_trace(self, optimize):
        """Test the per-pass transformation log."""
        lines = format_trace(optimize(SAMPLE)).splitlines()

        assert lines[3:] == [
            "--- Step 1: Constant Folding ---",
            "Computed: x = 2 * 8 => x = 16",
            "--- Step 2: Strength Reduction ---",
            "Simplified: y = x * 1 => y = x",
            "Simplified: z = y + 0 => z = y",
            "--- Step 3: Copy Propagation ---",
            "Copy detected: y = x",
            "Copy detected: z = y",
            "Substituted: y -> x in z",
            "--- Step 4: Dead Code Elimination ---",
            "Dead code detected: y is never used",
        ]

    def test_trace_no_changes(self, optimize):
        text = format_trace(optimize("a = b + c"))
        assert text.count("(no changes)") == 4


class TestFullReport:
    """Tests for format_report and report_to_dict."""

    def test_section_order(self, optimize):
        text = format_report(optimize(SAMPLE))

        assert text.index("Original Code:") < text.index("Optimized Code:")
        assert text.index("Optimized Code:") < text.index("Optimization Summary")
        assert "Code Optimization Process" not in text

    def test_trace_included(self, optimize):
        text = format_report(optimize(SAMPLE), include_trace=True)

        assert text.index("Original Code:") < text.index("Code Optimization Process")
        assert text.index("Code Optimization Process") < text.index("Optimized Code:")

    def test_report_to_dict(self, optimize):
        """Test the machine-readable report."""
        data = report_to_dict(optimize(SAMPLE))

        assert data["original"] == ["x = 2 * 8", "y = x * 1", "z = y + 0"]
        assert data["optimized"] == ["x = 16", "z = x"]
        assert data["constant_values"] == {"x": 16}
        assert data["summary"]["dead"] == 1
        assert data["statements"][1] == {
            "index": 1,
            "line": 2,
            "source": "y = x * 1",
            "optimized": "y = x",
            "constant": False,
            "dead": True,
        }
        assert data["trace"][0] == {
            "pass": "Constant Folding",
            "kind": "folded",
            "statement": 0,
            "message": "Computed: x = 2 * 8 => x = 16",
        }

    def test_report_is_json_serializable(self, optimize):
        data = report_to_dict(optimize(SAMPLE))
        assert json.loads(json.dumps(data)) == data
