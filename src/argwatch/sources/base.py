"""
Signature source protocol and shared helpers.

A signature source answers two questions about a package: which functions
exist (and whether each is exported), and what parameters a given function
declares. The analyzer only talks to this protocol.
"""
import logging
from typing import Iterable, Optional, Protocol, Sequence, runtime_checkable

from argwatch.constants import PACKAGE_INIT_STEM
from argwatch.errors import UnknownFunctionError
from argwatch.models import FunctionEntry, FunctionRef, ParameterDecl

logger = logging.getLogger(__name__)

__all__ = [
    "SignatureSource",
    "InMemorySource",
    "is_private_name",
    "is_exported",
    "is_public_method",
]


@runtime_checkable
class SignatureSource(Protocol):
    """Supplies a function catalog and per-function parameter lists."""

    def list_functions(self, scope: str, exported_only: bool = False) -> list[FunctionRef]:
        """List functions in enumeration order."""
        ...

    def get_parameters(self, function_id: str) -> list[ParameterDecl]:
        """Get the ordered parameters of a listed function."""
        ...


def is_private_name(name: str) -> bool:
    """Check if a name follows the leading-underscore private convention."""
    return name.startswith("_") and name != PACKAGE_INIT_STEM


def is_public_method(name: str) -> bool:
    """Check if a method name is public. Dunder protocol methods count as public."""
    if name.startswith("__") and name.endswith("__"):
        return True
    return not name.startswith("_")


def is_exported(
    name: str,
    module_parts: Sequence[str],
    exports: Optional[Iterable[str]] = None,
) -> bool:
    """
    Decide whether a module-level name is part of the public API.

    An explicit `__all__` is authoritative. Without one, the name and
    every module path component must be public.

    Args:
        name: Function (or class) name
        module_parts: Dotted module path split into components
        exports: Contents of the module's `__all__`, or None if undefined
    """
    if exports is not None:
        return name in exports
    if is_private_name(name):
        return False
    return not any(is_private_name(part) for part in module_parts)


class InMemorySource:
    """
    Signature source backed by an in-memory catalog.

    Usage:
        source = InMemorySource([
            FunctionEntry("f", True, (ParameterDecl("x", True, "1"),)),
        ])
        ArgumentAnalyzer(source).analyze("<catalog>")
    """

    def __init__(self, entries: Iterable[FunctionEntry]):
        self._entries = list(entries)
        self._by_id = {entry.id: entry for entry in self._entries}

    def list_functions(self, scope: str = "<catalog>", exported_only: bool = False) -> list[FunctionRef]:
        return [
            FunctionRef(id=e.id, exported=e.exported, n_callers=e.n_callers)
            for e in self._entries
            if e.exported or not exported_only
        ]

    def get_parameters(self, function_id: str) -> list[ParameterDecl]:
        try:
            return list(self._by_id[function_id].parameters)
        except KeyError:
            raise UnknownFunctionError(f"Unknown function: {function_id}") from None
