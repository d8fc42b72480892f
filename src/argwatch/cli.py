"""
Command-line interface for argwatch
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from rich.console import Console
from rich.markup import escape as rich_escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from argwatch.analyzer import ArgumentAnalyzer
from argwatch.constants import (
    CONSISTENCY_HEALTHY_THRESHOLD,
    CONSISTENCY_WARNING_THRESHOLD,
    MATRIX_MAX_COLUMNS,
    NULL_DEFAULT,
)
from argwatch.errors import ArgwatchError
from argwatch.models import AnalysisResult, UsageMatrix
from argwatch.sources import ModuleSource, PythonASTSource

# Create a console instance for all output
console = Console()


def setup_logging(verbose: bool = False) -> None:
    """Configure logging to stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def _consistency_style(pct: float) -> str:
    """Get Rich style name based on consistency percentage."""
    if pct >= CONSISTENCY_HEALTHY_THRESHOLD:
        return "green"
    if pct >= CONSISTENCY_WARNING_THRESHOLD:
        return "yellow"
    return "red"


def _display_default(default: str) -> str:
    """Show the canonical empty default as a visible placeholder."""
    return "[dim]<none>[/]" if default == NULL_DEFAULT else rich_escape(default)


def print_summary(result: AnalysisResult) -> None:
    """Print a one-panel summary of the analysis."""
    inconsistent = len(result.inconsistent_arguments())
    n_functions, n_arguments = result.usage_matrix.shape

    summary = Text()
    summary.append("Functions: ", style="bold")
    summary.append(f"{n_functions}\n", style="cyan bold")
    summary.append("Arguments: ", style="bold")
    summary.append(f"{n_arguments}\n", style="cyan bold")
    summary.append("Consistent defaults: ", style="bold")
    summary.append(f"{result.consistent_count}\n", style="green bold")
    summary.append("Inconsistent defaults: ", style="bold")
    summary.append(f"{inconsistent}", style="red bold" if inconsistent else "green bold")

    title = "[bold blue]Argument Consistency[/]"
    if result.exported_only:
        title += " [dim](exported only)[/]"
    console.print(Panel(summary, title=title, border_style="blue"))


def print_argument_table(result: AnalysisResult, inconsistent_only: bool = False) -> None:
    """Print the per-argument consistency table."""
    rows = result.inconsistent_arguments() if inconsistent_only else list(result.arguments)

    if not rows:
        console.print("[green]✓ All argument defaults are consistent.[/]")
        return

    table = Table(title="Arguments", show_header=True, header_style="bold magenta")
    table.add_column("arg_name", style="cyan")
    table.add_column("n_functions", justify="right", style="bold")
    table.add_column("default_consistent", justify="center")
    table.add_column("default_consistent_percent", justify="right")
    table.add_column("baseline default")
    table.add_column("other defaults", style="dim")

    for report in rows:
        pct = report.default_consistent_percent
        style = _consistency_style(pct)
        others = [d for d in report.distinct_defaults if d != report.baseline_default]
        table.add_row(
            rich_escape(report.arg_name),
            str(report.n_functions),
            "[green]yes[/]" if report.default_consistent else "[red]no[/]",
            f"[{style}]{pct:.2f}[/]",
            _display_default(report.baseline_default),
            ", ".join(_display_default(d) for d in others),
        )

    console.print(table)


def print_usage_matrix(matrix: UsageMatrix, max_columns: int = MATRIX_MAX_COLUMNS) -> None:
    """Print the function x argument usage matrix."""
    n_arguments = matrix.shape[1]
    arg_names = matrix.arg_names[:max_columns]

    table = Table(title="Usage Matrix", show_header=True, header_style="bold magenta")
    table.add_column("function", style="cyan", no_wrap=True)
    for name in arg_names:
        table.add_column(rich_escape(name), justify="center")

    for function_id, row in matrix.rows():
        cells = ["[green]●[/]" if used else "[dim]·[/]" for used in row[:max_columns]]
        table.add_row(rich_escape(function_id), *cells)

    console.print(table)

    if n_arguments > max_columns:
        console.print(f"  [dim]... and {n_arguments - max_columns} more arguments[/]")


def print_function_table(result: AnalysisResult) -> None:
    """Print the analyzed functions with their argument and caller counts."""
    table = Table(title="Functions", show_header=True, header_style="bold magenta")
    table.add_column("function", style="cyan")
    table.add_column("exported", justify="center")
    table.add_column("n_args", justify="right")
    table.add_column("n_callers", justify="right")

    for entry in result.functions:
        table.add_row(
            rich_escape(entry.id),
            "[green]yes[/]" if entry.exported else "[dim]no[/]",
            str(entry.n_args),
            "-" if entry.n_callers is None else str(entry.n_callers),
        )

    console.print(table)


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="argwatch",
        description="Audit argument default consistency across a package's functions"
    )
    parser.add_argument(
        "target",
        help="Package directory to analyze (or a module name with --module)"
    )
    parser.add_argument(
        "--module",
        action="store_true",
        help="Treat TARGET as an importable module name and inspect it at runtime"
    )
    parser.add_argument(
        "--exported-only",
        action="store_true",
        help="Only analyze exported functions"
    )
    parser.add_argument(
        "--include-methods",
        action="store_true",
        help="Also analyze methods of module-level classes"
    )
    parser.add_argument(
        "--matrix",
        action="store_true",
        help="Show the function x argument usage matrix"
    )
    parser.add_argument(
        "--functions",
        action="store_true",
        help="Show the analyzed functions"
    )
    parser.add_argument(
        "--inconsistent-only",
        action="store_true",
        help="Only list arguments with inconsistent defaults"
    )
    parser.add_argument(
        "--output",
        type=Path,
        help="Save results to JSON file"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging"
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = create_parser().parse_args(argv)
    setup_logging(args.verbose)

    if args.module:
        source = ModuleSource(include_methods=args.include_methods)
    else:
        source = PythonASTSource(include_methods=args.include_methods)

    console.print(f"[bold]Analyzing:[/] [blue]{rich_escape(args.target)}[/]")

    analyzer = ArgumentAnalyzer(source)
    try:
        result = analyzer.analyze(args.target, exported_only=args.exported_only)
    except (ArgwatchError, FileNotFoundError, NotADirectoryError, ImportError) as e:
        console.print(f"[bold red]Error:[/] {rich_escape(str(e))}")
        return 1

    print_summary(result)
    print_argument_table(result, inconsistent_only=args.inconsistent_only)

    if args.matrix:
        print_usage_matrix(result.usage_matrix)

    if args.functions:
        print_function_table(result)

    if args.output:
        analyzer.save(result, args.output)
        console.print(f"\n[bold green]✓[/] Results saved to [underline]{rich_escape(str(args.output))}[/]")

    return 0


if __name__ == "__main__":
    sys.exit(main())
