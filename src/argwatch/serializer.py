"""
Serialization for argument analysis results.

This module handles saving and loading analysis results to/from JSON files.
"""
from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path

from argwatch.constants import REPORT_FILE_VERSION
from argwatch.errors import ReportFormatError
from argwatch.models import AnalysisResult


class ReportSerializer:
    """
    Handles saving and loading argument analysis results.

    Provides static methods for persisting and restoring
    AnalysisResult objects to/from JSON files.
    """

    @staticmethod
    def to_dict(result: AnalysisResult) -> dict:
        """Versioned JSON-serializable representation."""
        return {
            "version": REPORT_FILE_VERSION,
            "created_at": datetime.now().isoformat(),
            **result.to_dict(),
        }

    @staticmethod
    def save(result: AnalysisResult, filepath: Path) -> None:
        """
        Save an analysis result to a JSON file.

        Args:
            result: The AnalysisResult to save
            filepath: Path to save the JSON file
        """
        filepath = Path(filepath)
        with filepath.open("w", encoding="utf-8") as f:
            json.dump(ReportSerializer.to_dict(result), f, indent=2)

    @staticmethod
    def load(filepath: Path) -> AnalysisResult:
        """
        Load an analysis result from a JSON file.

        Args:
            filepath: Path to the JSON file

        Returns:
            AnalysisResult with restored state

        Raises:
            ReportFormatError: If the file is not a report of a supported version
        """
        filepath = Path(filepath)
        with filepath.open("r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ReportFormatError(f"Invalid JSON in {filepath}: {e}") from e

        if not isinstance(data, dict):
            raise ReportFormatError(f"Expected a JSON object in {filepath}")

        version = data.get("version")
        if version != REPORT_FILE_VERSION:
            raise ReportFormatError(
                f"Unsupported report version {version!r} (expected {REPORT_FILE_VERSION})"
            )

        try:
            return AnalysisResult.from_dict(data)
        except (KeyError, TypeError) as e:
            raise ReportFormatError(f"Malformed report {filepath}: {e}") from e
