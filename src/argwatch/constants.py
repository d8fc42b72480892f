"""
Centralized constants for the argwatch package.

This module contains:
- Directory ignore patterns for scanning
- Parameter naming conventions used by the signature sources
- Normalization and display thresholds
"""

# =============================================================================
# File Scanner Constants
# =============================================================================

# Directories to ignore when scanning
DEFAULT_IGNORE_DIRS: frozenset[str] = frozenset({
    '.git', '.hg', '.svn',              # Version control
    'node_modules', 'vendor',            # Dependencies
    '__pycache__', '.pytest_cache',      # Python cache
    'venv', '.venv', 'env', '.env',      # Virtual environments
    '.idea', '.vscode',                  # IDE configs
    'dist', 'build', 'target',           # Build outputs
    '.tox', '.nox',                      # Test runners
    'egg-info', '.eggs',                 # Python packaging
})

# Python source file extensions considered by the AST source
PYTHON_EXTENSIONS: frozenset[str] = frozenset({'.py'})

# Source directories that may hold the packages of a project root (src-layout)
SOURCE_DIR_PREFIXES: tuple[str, ...] = ('src', 'lib', 'source')

# Project-root directories that are never the package under analysis
PROJECT_NON_PACKAGE_DIRS: frozenset[str] = frozenset({
    'tests', 'test', 'testing',
    'docs', 'doc',
    'examples', 'example', 'scripts', 'benchmarks',
})

# =============================================================================
# Signature Constants
# =============================================================================

# Module stem that represents the package itself
PACKAGE_INIT_STEM = "__init__"

# Prefixes for variadic parameters, so `*args` and `args` stay distinct
VARARG_PREFIX = "*"
KWARG_PREFIX = "**"

# Name of the module attribute that lists exported names
EXPORTS_ATTRIBUTE = "__all__"

# =============================================================================
# Normalization Constants
# =============================================================================

# Canonical form of a missing or null default
NULL_DEFAULT = ""

# =============================================================================
# Display Thresholds
# =============================================================================

# Consistency percentage thresholds for table styling
CONSISTENCY_HEALTHY_THRESHOLD = 100.0  # == this is consistent (green)
CONSISTENCY_WARNING_THRESHOLD = 50.0   # >= this is "mostly" (yellow), below is red

# Maximum matrix columns before the CLI truncates the usage matrix view
MATRIX_MAX_COLUMNS = 30

# =============================================================================
# Serialization
# =============================================================================

# Version string for saved report files (for format compatibility)
REPORT_FILE_VERSION = "1.0"
