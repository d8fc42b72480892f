"""
Source file readers.

Provides safe reading of Python source with:
- Encoding detection (UTF-8 BOM, PEP 263 declarations)
- Latin-1 fallback for undecodable files
- Graceful error handling for missing/inaccessible files
"""
import logging
import re
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

# Exceptions that indicate file access problems (not encoding issues)
_FILE_ACCESS_ERRORS = (FileNotFoundError, PermissionError, IsADirectoryError)

_CODING_PATTERN = re.compile(rb'coding[:=]\s*([-\w.]+)')


def detect_encoding(filepath: Path) -> str:
    """
    Detect the encoding of a Python file.

    Checks for:
    1. UTF-8 BOM
    2. PEP 263 coding declaration (# -*- coding: xxx -*-)
    3. Falls back to UTF-8
    """
    try:
        raw = filepath.read_bytes()
    except OSError as e:
        logger.debug("Cannot read %s for encoding detection, defaulting to utf-8: %s", filepath, e)
        return 'utf-8'

    if raw.startswith(b'\xef\xbb\xbf'):
        return 'utf-8-sig'

    # PEP 263 only honors the first two lines
    for line in raw.split(b'\n', 2)[:2]:
        match = _CODING_PATTERN.search(line)
        if match:
            return match.group(1).decode('ascii')

    return 'utf-8'


def read_source(filepath: Path | str) -> Optional[str]:
    """
    Read a Python source file.

    Args:
        filepath: Path to file (string or Path object)

    Returns:
        File contents as string, or None if the file can't be read
    """
    path = Path(filepath)
    encoding = detect_encoding(path)

    try:
        return path.read_text(encoding=encoding)
    except (UnicodeDecodeError, LookupError) as e:
        logger.debug("Failed to decode %s with %s encoding: %s", path, encoding, e)
    except _FILE_ACCESS_ERRORS as e:
        logger.warning("%s: %s", type(e).__name__, path)
        return None

    try:
        return path.read_text(encoding='latin-1')
    except OSError as e:
        logger.warning("Failed to read %s: %s", path, e)
        return None
