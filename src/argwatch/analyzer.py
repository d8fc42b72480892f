"""
Argument consistency analysis orchestrator.

This module provides the ArgumentAnalyzer class that coordinates the
analysis pipeline. It delegates to specialized components:
- SignatureSource: Lists functions and fetches their parameters
- build_usage_matrix: Builds the function x argument usage matrix
- evaluate_all: Computes per-argument default consistency
- ReportSerializer: Handles save/load operations
"""
import logging
from pathlib import Path
from typing import Iterable, Optional

from argwatch.consistency import evaluate_all
from argwatch.matrix import build_usage_matrix
from argwatch.models import (
    AnalysisResult, ArgumentReport, FunctionEntry, UsageMatrix,
)
from argwatch.serializer import ReportSerializer
from argwatch.sources import PythonASTSource, SignatureSource

logger = logging.getLogger(__name__)

__all__ = ["ArgumentAnalyzer", "analyze_entries", "analyze_arguments"]

DEFAULT_SCOPE_LABEL = "<catalog>"


def analyze_entries(
    entries: Iterable[FunctionEntry],
    exported_only: bool = False,
    scope: str = DEFAULT_SCOPE_LABEL,
) -> AnalysisResult:
    """
    Run the analysis over an in-memory function catalog.

    Args:
        entries: Functions in enumeration order
        exported_only: Drop non-exported functions before analysis
        scope: Label recorded on the result

    Returns:
        AnalysisResult with the argument reports and usage matrix

    Raises:
        EmptyInputError: If no functions remain after filtering
        InvariantViolationError: If an argument ends up with zero usage
    """
    selected = [e for e in entries if e.exported or not exported_only]

    matrix = build_usage_matrix(selected)
    arguments = evaluate_all(matrix, selected)

    logger.debug(
        "Analyzed %s: %d functions, %d arguments, %d inconsistent",
        scope, len(selected), len(arguments),
        sum(1 for a in arguments if not a.default_consistent),
    )

    return AnalysisResult(
        scope=scope,
        exported_only=exported_only,
        functions=tuple(selected),
        arguments=tuple(arguments),
        usage_matrix=matrix,
    )


class ArgumentAnalyzer:
    """
    Analyzes argument default consistency across a package's functions.

    This is the main entry point for argument analysis. It pulls the
    function catalog from a signature source once, fetches each
    function's parameters once, and runs the pipeline.

    Usage:
        analyzer = ArgumentAnalyzer(PythonASTSource())
        result = analyzer.analyze("/path/to/mypkg", exported_only=True)

        # Get results
        arguments, matrix = result.as_pair()
        inconsistent = result.inconsistent_arguments()
    """

    def __init__(self, source: Optional[SignatureSource] = None):
        self.source = source if source is not None else PythonASTSource()

    def load_catalog(self, scope: str | Path, exported_only: bool = False) -> list[FunctionEntry]:
        """
        Build the function catalog from the signature source.

        Errors raised by the source propagate unchanged.
        """
        refs = self.source.list_functions(scope, exported_only=exported_only)
        return [
            FunctionEntry.from_ref(ref, self.source.get_parameters(ref.id))
            for ref in refs
        ]

    def analyze(self, scope: str | Path, exported_only: bool = False) -> AnalysisResult:
        """
        Analyze a package.

        Args:
            scope: Package identifier understood by the source
                   (a directory for PythonASTSource, a module name for ModuleSource)
            exported_only: Only consider exported functions

        Returns:
            AnalysisResult

        Raises:
            EmptyInputError: If the (filtered) catalog is empty
        """
        entries = self.load_catalog(scope, exported_only=exported_only)
        return analyze_entries(entries, exported_only=exported_only, scope=str(scope))

    def save(self, result: AnalysisResult, filepath: Path) -> None:
        """Save an analysis result to a JSON file."""
        ReportSerializer.save(result, filepath)

    @staticmethod
    def load(filepath: Path) -> AnalysisResult:
        """Load an analysis result from a JSON file."""
        return ReportSerializer.load(filepath)


def analyze_arguments(
    scope: str | Path,
    exported_only: bool = False,
    source: Optional[SignatureSource] = None,
) -> tuple[list[ArgumentReport], UsageMatrix]:
    """
    Analyze a package and return the (argument reports, usage matrix) pair.

    Args:
        scope: Package identifier understood by the source
        exported_only: Only consider exported functions
        source: Signature source (default: PythonASTSource)
    """
    return ArgumentAnalyzer(source).analyze(scope, exported_only=exported_only).as_pair()
