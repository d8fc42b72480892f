"""
File scanner for locating Python modules in a package tree.

Provides utilities for:
- Finding the packages under a scan root (package dir or project root)
- Recursively scanning directories for source files
- Mapping file paths to dotted module names
"""
from pathlib import Path
from typing import Iterator, Optional

from rich.console import Console

from argwatch.constants import (
    DEFAULT_IGNORE_DIRS,
    PACKAGE_INIT_STEM,
    PROJECT_NON_PACKAGE_DIRS,
    PYTHON_EXTENSIONS,
    SOURCE_DIR_PREFIXES,
)

console = Console(stderr=True)


def should_ignore(path: Path, ignore_dirs: frozenset[str]) -> bool:
    """
    Check if a path should be ignored based on directory names.

    Args:
        path: Path to check
        ignore_dirs: Set of directory names to ignore

    Returns:
        True if any parent directory is in ignore_dirs
    """
    for part in path.parts:
        if part in ignore_dirs:
            return True
        # Also check for .egg-info suffix
        if part.endswith('.egg-info'):
            return True
    return False


def is_package_dir(path: Path) -> bool:
    """Check if a directory is a regular package (has `__init__.py`)."""
    return (path / f"{PACKAGE_INIT_STEM}.py").is_file()


def _check_directory(dir_path: Path) -> None:
    if not dir_path.exists():
        raise FileNotFoundError(f"Directory does not exist: {dir_path}")

    if not dir_path.is_dir():
        raise NotADirectoryError(f"Path is not a directory: {dir_path}")


def find_package_dirs(
    directory: Path | str,
    ignore_dirs: Optional[frozenset[str]] = None,
) -> list[Path]:
    """
    Find the package directories to analyze under a scan root.

    A root that is itself a package is returned as is. A project root
    yields its top-level packages, found directly under it or under a
    source directory (`src/`, `lib/`, `source/`). Test, docs and example
    directories and loose top-level scripts are not packages.

    Args:
        directory: Package directory or project root
        ignore_dirs: Set of directory names to ignore (default: DEFAULT_IGNORE_DIRS)

    Returns:
        Package directories in sorted order, or an empty list when the
        root holds no packages

    Raises:
        FileNotFoundError: If directory doesn't exist
        NotADirectoryError: If path points to a file, not a directory
    """
    if ignore_dirs is None:
        ignore_dirs = DEFAULT_IGNORE_DIRS

    dir_path = Path(directory)
    _check_directory(dir_path)

    if is_package_dir(dir_path):
        return [dir_path]

    bases = [dir_path] + [
        dir_path / prefix for prefix in SOURCE_DIR_PREFIXES
        if (dir_path / prefix).is_dir() and not is_package_dir(dir_path / prefix)
    ]

    packages = []
    for base in bases:
        for child in sorted(base.iterdir()):
            if child.name in PROJECT_NON_PACKAGE_DIRS or should_ignore(Path(child.name), ignore_dirs):
                continue
            if child.is_dir() and is_package_dir(child):
                packages.append(child)
    return packages


def iter_python_files(
    directory: Path | str,
    ignore_dirs: Optional[frozenset[str]] = None,
) -> Iterator[Path]:
    """
    Yield Python source files under a directory, in sorted path order.

    Args:
        directory: Path to directory (string or Path object)
        ignore_dirs: Set of directory names to ignore (default: DEFAULT_IGNORE_DIRS)

    Yields:
        Path objects pointing to files

    Raises:
        FileNotFoundError: If directory doesn't exist
        NotADirectoryError: If path points to a file, not a directory
    """
    if ignore_dirs is None:
        ignore_dirs = DEFAULT_IGNORE_DIRS

    dir_path = Path(directory)
    _check_directory(dir_path)

    for item in sorted(dir_path.rglob('*')):
        try:
            # Only ignore directories below the scanned root
            if should_ignore(item.relative_to(dir_path), ignore_dirs):
                continue

            if item.suffix.lower() in PYTHON_EXTENSIONS and item.is_file():
                yield item
        except PermissionError:
            console.print(f"[yellow]Warning:[/] Permission denied for {item}", style="dim")
            continue


def module_name_for(filepath: Path, root: Path) -> str:
    """
    Convert a file path to a dotted module name relative to a scan root.

    When the root is itself a package (has `__init__.py`) its name is the
    first component. Leading source directory prefixes are stripped and
    `__init__` resolves to its package.

    Examples (root = project/):
        project/src/mypkg/mod.py -> mypkg.mod
        project/mypkg/__init__.py -> mypkg

    Examples (root = project/mypkg, a package):
        project/mypkg/sub/mod.py -> mypkg.sub.mod
    """
    parts = list(filepath.relative_to(root).with_suffix("").parts)
    # Path(".").name is empty
    root_name = root.name or root.resolve().name

    if is_package_dir(root):
        parts.insert(0, root_name)
    elif parts and parts[0] in SOURCE_DIR_PREFIXES and len(parts) > 1:
        parts = parts[1:]

    if parts and parts[-1] == PACKAGE_INIT_STEM:
        parts = parts[:-1]

    return ".".join(parts) if parts else root_name
