"""
File Utilities Module
File discovery and reading for the unused class detector.
"""

import os
import re
from pathlib import Path
from typing import List, Pattern, Union

# Directories never worth scanning for component sources
SKIPPED_DIRECTORIES = {'node_modules', '__pycache__'}


def normalize_path(path: str | Path) -> Path:
    """Convert string path to normalized Path object."""
    return Path(path).resolve()


def is_hidden(path: Path) -> bool:
    """Check if a file or directory is hidden."""
    return path.name.startswith('.')


def suffix_pattern(suffixes) -> Pattern:
    """Build a file-name pattern matching any of ``suffixes``."""
    return re.compile('(' + '|'.join(re.escape(s) for s in suffixes) + r')$')


def find_files(root_path: str | Path, pattern: Union[str, Pattern]) -> List[Path]:
    """
    Recursively collect files whose name matches ``pattern``.

    Args:
        root_path: Base directory path
        pattern: Regular expression searched in each file name
            (e.g. r'\\.module\\.scss$')

    Returns:
        Sorted list of Path objects for matching files; empty if
        ``root_path`` is not a directory
    """
    base_path = normalize_path(root_path)
    if not base_path.is_dir():
        return []
    regex = re.compile(pattern) if isinstance(pattern, str) else pattern
    matching_files = []

    for root, dirs, files in os.walk(base_path):
        # Skip hidden and dependency directories
        dirs[:] = [d for d in dirs if d not in SKIPPED_DIRECTORIES and not is_hidden(Path(root) / d)]

        for file in files:
            file_path = Path(root) / file
            if is_hidden(file_path):
                continue
            if regex.search(file):
                matching_files.append(file_path)

    return sorted(matching_files)


def read_file_content(file_path: str | Path) -> str:
    """
    Safely read file content with proper encoding.

    Raises:
        FileNotFoundError: If file doesn't exist
        OSError: If file can't be read
    """
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            return f.read()
    except UnicodeDecodeError:
        # Fallback to system default encoding if UTF-8 fails
        with open(file_path, 'r') as f:
            return f.read()


class LocalFileReader:
    """File-reading collaborator backed by the local file system."""

    def exists(self, path: str | Path) -> bool:
        return Path(path).is_file()

    def read_text(self, path: str | Path) -> str:
        return read_file_content(path)
