"""
Signature sources for function catalogs.

- base: SignatureSource protocol and the in-memory catalog source
- python_ast: static analysis of a package directory
- inspect_source: runtime introspection of an importable module
"""

from argwatch.sources.base import (
    SignatureSource,
    InMemorySource,
    is_exported,
    is_private_name,
    is_public_method,
)
from argwatch.sources.python_ast import PythonASTSource
from argwatch.sources.inspect_source import ModuleSource

__all__ = [
    "SignatureSource",
    "InMemorySource",
    "PythonASTSource",
    "ModuleSource",
    "is_exported",
    "is_private_name",
    "is_public_method",
]
