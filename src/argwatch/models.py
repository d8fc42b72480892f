"""
Data models for function catalogs and argument consistency reports.

All models are immutable (frozen) dataclasses for safety and hashability.
"""
from dataclasses import dataclass, field
from functools import cached_property
from typing import Iterator, Optional


def _json_default_repr(value: object) -> object:
    """Convert a raw default representation into a JSON-compatible value."""
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, (list, tuple)):
        return [str(token) for token in value]
    return str(value)


@dataclass(frozen=True)
class ParameterDecl:
    """
    A declared parameter of a function. Immutable and hashable.

    `default_repr` is None both when there is no default (`has_default` is
    False) and when the default is an explicit null (`has_default` is True).
    The two states stay distinct here; normalization treats them alike.
    """
    name: str
    has_default: bool = False
    default_repr: object = None

    def __post_init__(self) -> None:
        # Token lists are stored as tuples to keep the declaration hashable
        if isinstance(self.default_repr, list):
            object.__setattr__(self, "default_repr", tuple(self.default_repr))

    def __str__(self) -> str:
        if not self.has_default:
            return self.name
        if self.default_repr is None:
            return f"{self.name}=None"
        if isinstance(self.default_repr, tuple):
            return f"{self.name}={''.join(str(t) for t in self.default_repr)}"
        return f"{self.name}={self.default_repr}"

    @property
    def is_null_default(self) -> bool:
        """True when the parameter declares an explicit null default."""
        return self.has_default and self.default_repr is None

    def to_dict(self) -> dict:
        """JSON-serializable representation."""
        return {
            "name": self.name,
            "has_default": self.has_default,
            "default_repr": _json_default_repr(self.default_repr),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ParameterDecl":
        """Reconstruct from dictionary."""
        return cls(
            name=data["name"],
            has_default=data.get("has_default", False),
            default_repr=data.get("default_repr"),
        )


@dataclass(frozen=True)
class FunctionRef:
    """A discovered function, before its signature is fetched."""
    id: str
    exported: bool
    n_callers: Optional[int] = None

    def __str__(self) -> str:
        return self.id


@dataclass(frozen=True)
class FunctionEntry:
    """A function and its ordered parameter declarations. Immutable and hashable."""
    id: str
    exported: bool
    parameters: tuple[ParameterDecl, ...] = ()
    n_callers: Optional[int] = None

    def __post_init__(self) -> None:
        if not isinstance(self.parameters, tuple):
            object.__setattr__(self, "parameters", tuple(self.parameters))

    def __str__(self) -> str:
        return f"{self.id}({', '.join(str(p) for p in self.parameters)})"

    @property
    def n_args(self) -> int:
        """Number of declared parameters."""
        return len(self.parameters)

    @property
    def parameter_names(self) -> tuple[str, ...]:
        """Parameter names in declaration order."""
        return tuple(p.name for p in self.parameters)

    def parameter(self, name: str) -> Optional[ParameterDecl]:
        """Get the first parameter declared with this name."""
        for param in self.parameters:
            if param.name == name:
                return param
        return None

    @classmethod
    def from_ref(cls, ref: FunctionRef, parameters) -> "FunctionEntry":
        """Combine a discovered function with its fetched parameters."""
        return cls(
            id=ref.id,
            exported=ref.exported,
            parameters=tuple(parameters),
            n_callers=ref.n_callers,
        )

    def to_dict(self) -> dict:
        """JSON-serializable representation."""
        return {
            "id": self.id,
            "exported": self.exported,
            "n_args": self.n_args,
            "n_callers": self.n_callers,
            "parameters": [p.to_dict() for p in self.parameters],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "FunctionEntry":
        """Reconstruct from dictionary."""
        return cls(
            id=data["id"],
            exported=data["exported"],
            parameters=tuple(ParameterDecl.from_dict(p) for p in data.get("parameters", [])),
            n_callers=data.get("n_callers"),
        )


@dataclass(frozen=True)
class UsageMatrix:
    """
    Boolean grid of which functions declare which argument names.

    Rows follow function enumeration order, columns follow the
    first-appearance order of argument names.
    """
    function_ids: tuple[str, ...]
    arg_names: tuple[str, ...]
    cells: tuple[tuple[bool, ...], ...]

    def __str__(self) -> str:
        return f"UsageMatrix({len(self.function_ids)} functions x {len(self.arg_names)} arguments)"

    @cached_property
    def _column_index(self) -> dict[str, int]:
        return {name: j for j, name in enumerate(self.arg_names)}

    @cached_property
    def _row_index(self) -> dict[str, int]:
        index: dict[str, int] = {}
        for i, function_id in enumerate(self.function_ids):
            index.setdefault(function_id, i)
        return index

    @property
    def shape(self) -> tuple[int, int]:
        """(number of functions, number of arguments)."""
        return len(self.function_ids), len(self.arg_names)

    def column(self, arg_name: str) -> tuple[bool, ...]:
        """
        Get the usage column for an argument.

        Raises:
            KeyError: If the argument is not in the matrix
        """
        j = self._column_index[arg_name]
        return tuple(row[j] for row in self.cells)

    def count(self, arg_name: str) -> int:
        """Number of functions declaring an argument."""
        return sum(self.column(arg_name))

    def functions_using(self, arg_name: str) -> list[str]:
        """Ids of functions declaring an argument, in enumeration order."""
        return [
            function_id
            for function_id, used in zip(self.function_ids, self.column(arg_name))
            if used
        ]

    def is_used(self, function_id: str, arg_name: str) -> bool:
        """Check whether a function declares an argument."""
        return self.cells[self._row_index[function_id]][self._column_index[arg_name]]

    def rows(self) -> Iterator[tuple[str, tuple[bool, ...]]]:
        """Iterate over (function_id, row) pairs."""
        yield from zip(self.function_ids, self.cells)

    def to_dict(self) -> dict:
        """JSON-serializable representation."""
        return {
            "function_ids": list(self.function_ids),
            "arg_names": list(self.arg_names),
            "cells": [list(row) for row in self.cells],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "UsageMatrix":
        """Reconstruct from dictionary."""
        return cls(
            function_ids=tuple(data["function_ids"]),
            arg_names=tuple(data["arg_names"]),
            cells=tuple(tuple(bool(c) for c in row) for row in data["cells"]),
        )


@dataclass(frozen=True)
class ArgumentReport:
    """Consistency summary for one argument name. Immutable and hashable."""
    arg_name: str
    n_functions: int
    default_consistent: bool
    default_consistent_percent: float
    baseline_default: str = ""
    defaults: tuple[tuple[str, str], ...] = field(default=(), compare=False)

    def __str__(self) -> str:
        status = "consistent" if self.default_consistent else "inconsistent"
        return (
            f"{self.arg_name}: {self.n_functions} functions, "
            f"{status} ({self.default_consistent_percent:.2f}%)"
        )

    @property
    def distinct_defaults(self) -> list[str]:
        """Distinct normalized defaults in first-appearance order."""
        seen: dict[str, None] = {}
        for _, default in self.defaults:
            seen.setdefault(default, None)
        return list(seen)

    @property
    def deviating_functions(self) -> list[str]:
        """Ids of functions whose default differs from the baseline."""
        return [fid for fid, default in self.defaults if default != self.baseline_default]

    def to_dict(self) -> dict:
        """JSON-serializable representation."""
        return {
            "arg_name": self.arg_name,
            "n_functions": self.n_functions,
            "default_consistent": self.default_consistent,
            "default_consistent_percent": round(self.default_consistent_percent, 2),
            "baseline_default": self.baseline_default,
            "defaults": {fid: default for fid, default in self.defaults},
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ArgumentReport":
        """Reconstruct from dictionary."""
        return cls(
            arg_name=data["arg_name"],
            n_functions=data["n_functions"],
            default_consistent=data["default_consistent"],
            default_consistent_percent=float(data["default_consistent_percent"]),
            baseline_default=data.get("baseline_default", ""),
            defaults=tuple(data.get("defaults", {}).items()),
        )


@dataclass(frozen=True)
class AnalysisResult:
    """The argument report table and usage matrix for one analysis run."""
    scope: str
    exported_only: bool
    functions: tuple[FunctionEntry, ...]
    arguments: tuple[ArgumentReport, ...]
    usage_matrix: UsageMatrix

    def __str__(self) -> str:
        return (
            f"AnalysisResult({self.scope}, {len(self.functions)} functions, "
            f"{len(self.arguments)} arguments)"
        )

    def as_pair(self) -> tuple[list[ArgumentReport], UsageMatrix]:
        """The (argument reports, usage matrix) pair."""
        return list(self.arguments), self.usage_matrix

    def get_argument(self, arg_name: str) -> Optional[ArgumentReport]:
        """Get the report row for an argument name."""
        for report in self.arguments:
            if report.arg_name == arg_name:
                return report
        return None

    def inconsistent_arguments(self) -> list[ArgumentReport]:
        """Report rows whose defaults disagree with their baseline."""
        return [r for r in self.arguments if not r.default_consistent]

    @property
    def consistent_count(self) -> int:
        return sum(1 for r in self.arguments if r.default_consistent)

    def to_dict(self) -> dict:
        """JSON-serializable representation."""
        return {
            "scope": self.scope,
            "exported_only": self.exported_only,
            "functions": [f.to_dict() for f in self.functions],
            "arguments": [a.to_dict() for a in self.arguments],
            "usage_matrix": self.usage_matrix.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AnalysisResult":
        """Reconstruct from dictionary."""
        return cls(
            scope=data["scope"],
            exported_only=data.get("exported_only", False),
            functions=tuple(FunctionEntry.from_dict(f) for f in data.get("functions", [])),
            arguments=tuple(ArgumentReport.from_dict(a) for a in data.get("arguments", [])),
            usage_matrix=UsageMatrix.from_dict(data["usage_matrix"]),
        )
