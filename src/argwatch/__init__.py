"""
argwatch - Argument default consistency auditing for Python packages.

Collects the parameters of a package's functions, builds a usage matrix
of which functions declare which argument names, and reports whether
each argument's default is used consistently.
"""

__version__ = "0.1.0"

# Errors
from argwatch.errors import (
    ArgwatchError,
    EmptyInputError,
    InvariantViolationError,
    UnknownFunctionError,
    ReportFormatError,
)

# Models
from argwatch.models import (
    ParameterDecl,
    FunctionRef,
    FunctionEntry,
    UsageMatrix,
    ArgumentReport,
    AnalysisResult,
)

# Core functionality
from argwatch.normalizer import normalize_default, normalize_default_value
from argwatch.matrix import build_usage_matrix, collect_argument_names
from argwatch.consistency import evaluate_argument, evaluate_all
from argwatch.analyzer import ArgumentAnalyzer, analyze_entries, analyze_arguments

# Signature sources
from argwatch.sources import (
    SignatureSource,
    InMemorySource,
    PythonASTSource,
    ModuleSource,
)
from argwatch.call_graph import CallGraph

__all__ = [
    # Version
    "__version__",
    # Errors
    "ArgwatchError",
    "EmptyInputError",
    "InvariantViolationError",
    "UnknownFunctionError",
    "ReportFormatError",
    # Models
    "ParameterDecl",
    "FunctionRef",
    "FunctionEntry",
    "UsageMatrix",
    "ArgumentReport",
    "AnalysisResult",
    # Normalizer
    "normalize_default",
    "normalize_default_value",
    # Matrix
    "build_usage_matrix",
    "collect_argument_names",
    # Consistency
    "evaluate_argument",
    "evaluate_all",
    # Analyzer
    "ArgumentAnalyzer",
    "analyze_entries",
    "analyze_arguments",
    # Sources
    "SignatureSource",
    "InMemorySource",
    "PythonASTSource",
    "ModuleSource",
    # Call graph
    "CallGraph",
]
