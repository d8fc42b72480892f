"""
Usage matrix construction.

Derives the ordered set of argument names from a function catalog and
the boolean function x argument grid recording who declares what.
"""
import logging
from typing import Sequence

from argwatch.errors import EmptyInputError
from argwatch.models import FunctionEntry, UsageMatrix

logger = logging.getLogger(__name__)

__all__ = ["collect_argument_names", "build_usage_matrix"]


def collect_argument_names(entries: Sequence[FunctionEntry]) -> list[str]:
    """
    Collect distinct parameter names in first-appearance order.

    Functions are visited in catalog order and parameters in declaration
    order; the result is never sorted.
    """
    seen: set[str] = set()
    names: list[str] = []

    for entry in entries:
        for param in entry.parameters:
            if param.name not in seen:
                seen.add(param.name)
                names.append(param.name)

    return names


def build_usage_matrix(entries: Sequence[FunctionEntry]) -> UsageMatrix:
    """
    Build the function x argument usage matrix.

    Args:
        entries: Function catalog in enumeration order

    Returns:
        UsageMatrix with one row per function and one column per argument

    Raises:
        EmptyInputError: If the catalog has no functions
    """
    if not entries:
        raise EmptyInputError("No functions to analyze")

    arg_names = collect_argument_names(entries)

    cells = []
    for entry in entries:
        declared = frozenset(entry.parameter_names)
        cells.append(tuple(name in declared for name in arg_names))

    logger.debug(
        "Built usage matrix: %d functions x %d arguments",
        len(entries), len(arg_names)
    )

    return UsageMatrix(
        function_ids=tuple(entry.id for entry in entries),
        arg_names=tuple(arg_names),
        cells=tuple(cells),
    )
