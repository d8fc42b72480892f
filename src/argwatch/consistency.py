"""
Default-value consistency evaluation.

For each argument, the defaults of every declaring function are compared
against the default of the first declaring function in catalog order.
The baseline is positional, not a majority vote: if the first function
is the odd one out, the percentage is low even when every other function
agrees.
"""
from typing import Sequence

from argwatch.errors import InvariantViolationError
from argwatch.models import ArgumentReport, FunctionEntry, UsageMatrix
from argwatch.normalizer import normalize_default

__all__ = ["evaluate_argument", "evaluate_all"]


def _declaring_defaults(
    arg_name: str,
    matrix: UsageMatrix,
    entries: Sequence[FunctionEntry],
) -> list[tuple[str, str]]:
    """(function id, normalized default) for each declaring function, in matrix order."""
    if len(entries) != len(matrix.function_ids):
        raise InvariantViolationError(
            f"Matrix has {len(matrix.function_ids)} rows but catalog has {len(entries)} functions"
        )

    defaults = []
    for entry, used in zip(entries, matrix.column(arg_name)):
        if not used:
            continue
        param = entry.parameter(arg_name)
        if param is None:
            raise InvariantViolationError(
                f"Matrix marks '{arg_name}' as used by {entry.id}, which does not declare it"
            )
        defaults.append((entry.id, normalize_default(param)))
    return defaults


def evaluate_argument(
    arg_name: str,
    matrix: UsageMatrix,
    entries: Sequence[FunctionEntry],
) -> ArgumentReport:
    """
    Compute the consistency report row for one argument.

    Args:
        arg_name: Argument name (a matrix column)
        matrix: Usage matrix built from `entries`
        entries: Function catalog, same order as the matrix rows

    Returns:
        ArgumentReport for the argument

    Raises:
        InvariantViolationError: If no function declares the argument, or
            the matrix and catalog disagree
        KeyError: If the argument is not a matrix column
    """
    defaults = _declaring_defaults(arg_name, matrix, entries)
    if not defaults:
        raise InvariantViolationError(f"Argument '{arg_name}' is not used by any function")

    baseline = defaults[0][1]
    matches = sum(1 for _, default in defaults if default == baseline)

    return ArgumentReport(
        arg_name=arg_name,
        n_functions=len(defaults),
        default_consistent=matches == len(defaults),
        default_consistent_percent=matches / len(defaults) * 100,
        baseline_default=baseline,
        defaults=tuple(defaults),
    )


def evaluate_all(
    matrix: UsageMatrix,
    entries: Sequence[FunctionEntry],
) -> list[ArgumentReport]:
    """Evaluate every matrix column, in column order."""
    return [evaluate_argument(name, matrix, entries) for name in matrix.arg_names]
