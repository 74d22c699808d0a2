"""
tacopt Command-Line Interface.

Provides commands to check and optimize three-address code files.

Usage:
    tacopt optimize input.tac            # Print original, optimized, summary
    tacopt optimize input.tac --trace    # Also show every transformation
    tacopt optimize - --json < input.tac # Machine-readable report from stdin
    tacopt check input.tac               # Parse only
    tacopt demo                          # Optimize the built-in sample
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Optional

from tacopt import __version__
from tacopt.compiler import optimize_source
from tacopt.compiler.optimizer import CodeOptimizer
from tacopt.compiler.parser import Parser
from tacopt.compiler.report import (
    format_optimized,
    format_original,
    format_report,
    format_summary,
    format_trace,
    report_to_dict,
)
from tacopt.utils.errors import TacError

logger = logging.getLogger(__name__)

DEMO_PROGRAM = """\
x = 2 * 8
y = x * 1
z = y + 0
"""


# =============================================================================
# ANSI Color Codes for Terminal Output
# =============================================================================


class Colors:
    """ANSI escape codes for colored terminal output."""

    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    CYAN = "\033[96m"
    GRAY = "\033[90m"

    BOLD = "\033[1m"
    RESET = "\033[0m"

    @classmethod
    def disable(cls) -> None:
        """Disable all colors (for non-TTY output)."""
        cls.RED = ""
        cls.GREEN = ""
        cls.YELLOW = ""
        cls.CYAN = ""
        cls.GRAY = ""
        cls.BOLD = ""
        cls.RESET = ""


def _init_colors() -> None:
    """Initialize colors based on terminal capabilities."""
    if not sys.stdout.isatty() or os.environ.get("NO_COLOR"):
        Colors.disable()


_init_colors()


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="tacopt",
        description="tacopt - optimizer for straight-line three-address code",
    )

    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error"],
        default="warning",
        help="Logging level (default: warning)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Optimize command
    optimize_parser = subparsers.add_parser(
        "optimize",
        aliases=["o"],
        help="Optimize a three-address code file",
    )
    optimize_parser.add_argument(
        "input",
        help="Input file, or '-' to read from stdin",
    )
    optimize_parser.add_argument(
        "--trace",
        action="store_true",
        help="Show every transformation applied by each pass",
    )
    optimize_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the report as JSON",
    )
    optimize_parser.add_argument(
        "--no-fold",
        action="store_true",
        help="Disable constant folding",
    )
    optimize_parser.add_argument(
        "--no-strength",
        action="store_true",
        help="Disable strength reduction",
    )
    optimize_parser.add_argument(
        "--no-copy",
        action="store_true",
        help="Disable copy propagation",
    )
    optimize_parser.add_argument(
        "--no-dce",
        action="store_true",
        help="Disable dead code elimination",
    )

    # Check command (syntax validation)
    check_parser = subparsers.add_parser(
        "check",
        help="Check a file for syntax errors without optimizing",
    )
    check_parser.add_argument(
        "input",
        help="Input file, or '-' to read from stdin",
    )

    # Demo command
    demo_parser = subparsers.add_parser(
        "demo",
        help="Optimize the built-in sample program",
    )
    demo_parser.add_argument(
        "--trace",
        action="store_true",
        help="Show every transformation applied by each pass",
    )

    return parser


def _read_input(name: str) -> tuple[str, str]:
    """Return (display name, text) for a path or '-'."""
    if name == "-":
        return "<stdin>", sys.stdin.read()
    path = Path(name)
    return str(path), path.read_text(encoding="utf-8")


def _print_report(optimizer: CodeOptimizer, trace: bool) -> None:
    """Print the report with section titles highlighted."""
    if not Colors.BOLD:
        print(format_report(optimizer, include_trace=trace))
        return

    sections = [format_original(optimizer)]
    if trace:
        sections.append(format_trace(optimizer))
    sections.append(format_optimized(optimizer))
    sections.append(format_summary(optimizer))
    for i, section in enumerate(sections):
        if i:
            print()
        rule, title, rest = section.split("\n", 2)
        print(f"{Colors.GRAY}{rule}{Colors.RESET}")
        print(f"{Colors.BOLD}{title}{Colors.RESET}")
        print(rest)


def cmd_optimize(args: argparse.Namespace) -> int:
    """Handle the optimize command."""
    try:
        filename, source = _read_input(args.input)
    except OSError as e:
        print(f"{Colors.RED}Error:{Colors.RESET} cannot read {args.input}: {e}", file=sys.stderr)
        return 1

    try:
        optimizer = optimize_source(
            source,
            filename=filename,
            fold_constants=not args.no_fold,
            reduce_strength=not args.no_strength,
            propagate_copies=not args.no_copy,
            eliminate_dead_code=not args.no_dce,
        )
    except TacError as e:
        print(f"{Colors.RED}Error:{Colors.RESET} {e}", file=sys.stderr)
        return 1
    except Exception as e:
        logger.exception("unexpected failure while optimizing %s", filename)
        print(f"{Colors.RED}Internal error:{Colors.RESET} {e}", file=sys.stderr)
        return 1

    if args.json:
        result = report_to_dict(optimizer)
        result["file"] = filename
        print(json.dumps(result, indent=2))
    else:
        _print_report(optimizer, args.trace)
    return 0


def cmd_check(args: argparse.Namespace) -> int:
    """Handle the check command."""
    try:
        filename, source = _read_input(args.input)
    except OSError as e:
        print(f"{Colors.RED}Error:{Colors.RESET} cannot read {args.input}: {e}", file=sys.stderr)
        return 1

    try:
        statements = Parser(filename).parse(source)
    except TacError as e:
        print(f"{Colors.RED}Error:{Colors.RESET} {e}", file=sys.stderr)
        return 1

    print(f"{Colors.GREEN}OK:{Colors.RESET} {filename} ({len(statements)} statements)")
    return 0


def cmd_demo(args: argparse.Namespace) -> int:
    """Handle the demo command."""
    print(f"{Colors.CYAN}Input Code:{Colors.RESET}")
    print(DEMO_PROGRAM)
    optimizer = optimize_source(DEMO_PROGRAM, filename="<demo>")
    _print_report(optimizer, args.trace)
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 0

    command_handlers = {
        "optimize": cmd_optimize,
        "o": cmd_optimize,
        "check": cmd_check,
        "demo": cmd_demo,
    }

    handler = command_handlers.get(args.command)
    if handler:
        return handler(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
