"""
Text reports over an optimized program.

Everything here is a read-only view of ``CodeOptimizer`` state after
``optimize()``; nothing in this module changes the program.
"""

from __future__ import annotations

from typing import Any

from tacopt.compiler.optimizer import CodeOptimizer

RULE = "=" * 40


def format_section(title: str, lines: list[str]) -> str:
    """Render a titled block framed by rule lines."""
    body = "\n".join(lines)
    return f"{RULE}\n{title}\n{RULE}\n{body}" if body else f"{RULE}\n{title}\n{RULE}"


def format_original(optimizer: CodeOptimizer) -> str:
    return format_section("Original Code:", optimizer.original_code())


def format_optimized(optimizer: CodeOptimizer) -> str:
    return format_section("Optimized Code:", optimizer.optimized_code())


def format_summary(optimizer: CodeOptimizer) -> str:
    summary = optimizer.summary()
    lines = [
        f"Total statements: {summary.total_statements}",
        f"Constants folded: {summary.folded_count}",
        f"Dead code removed: {summary.dead_count}",
        f"Final statements: {summary.final_statements}",
    ]
    if summary.applied:
        lines.append("")
        lines.append("Optimizations Applied:")
        lines.extend(f"  - {label}" for label in summary.applied)
    return format_section("Optimization Summary", lines)


def format_trace(optimizer: CodeOptimizer) -> str:
    """Render the transformations grouped by pass, in pass order."""
    lines: list[str] = []
    for step, name in enumerate(optimizer.pass_names(), start=1):
        lines.append(f"--- Step {step}: {name} ---")
        records = [record for record in optimizer.trace if record.pass_name == name]
        if records:
            lines.extend(record.message for record in records)
        else:
            lines.append("(no changes)")
    return format_section("Code Optimization Process", lines)


def format_report(optimizer: CodeOptimizer, include_trace: bool = False) -> str:
    """Render the full report: original, optional trace, optimized, summary."""
    sections = [format_original(optimizer)]
    if include_trace:
        sections.append(format_trace(optimizer))
    sections.append(format_optimized(optimizer))
    sections.append(format_summary(optimizer))
    return "\n\n".join(sections)


def report_to_dict(optimizer: CodeOptimizer) -> dict[str, Any]:
    """Build a JSON-serializable view of the optimized program."""
    return {
        "original": optimizer.original_code(),
        "optimized": optimizer.optimized_code(),
        "passes": optimizer.pass_names(),
        "constant_values": dict(optimizer.constant_values),
        "statements": [
            {
                "index": index,
                "line": stmt.line,
                "source": stmt.source,
                "optimized": stmt.render(),
                "constant": stmt.is_constant,
                "dead": stmt.is_dead,
            }
            for index, stmt in enumerate(optimizer.statements)
        ],
        "summary": optimizer.summary().to_dict(),
        "trace": [
            {
                "pass": record.pass_name,
                "kind": record.kind,
                "statement": record.statement_index,
                "message": record.message,
            }
            for record in optimizer.trace
        ],
    }
