"""
Safe file operations for struct-depth.

Provides size-limited reads and a filtered directory walk.
"""

import os
from collections.abc import Generator, Iterable
from pathlib import Path
from typing import Optional

from .exceptions import FileAccessError, InvalidPathError, SecurityError
from .security import ResourceLimiter


def safe_read_file(
    filepath: Path,
    limiter: Optional[ResourceLimiter] = None,
    encoding: str = "utf-8",
    errors: str = "replace",
) -> str:
    """
    Safely read a file with a size check.

    Args:
        filepath: File to read
        limiter: Resource limiter (if None, skips size check)
        encoding: Text encoding
        errors: How to handle encoding errors

    Returns:
        File contents as string

    Raises:
        FileAccessError: If file cannot be read
        SecurityError: If file is over the size limit
    """
    if limiter:
        try:
            limiter.check_file_size(filepath)
        except InvalidPathError as e:
            raise FileAccessError(filepath, e.reason)

    try:
        with open(filepath, encoding=encoding, errors=errors) as f:
            return f.read()
    except UnicodeDecodeError as e:
        raise FileAccessError(filepath, f"Encoding error: {e}")
    except OSError as e:
        raise FileAccessError(filepath, f"OS error: {e}")


def safe_scan_directory(
    root_dir: Path,
    suffix: str = ".rs",
    exclude_dirs: Iterable[str] = (),
    allow_hidden: bool = False,
    limiter: Optional[ResourceLimiter] = None,
    follow_symlinks: bool = False,
) -> Generator[Path, None, None]:
    """
    Walk a directory yielding files with the given suffix.

    Excluded and (unless allowed) hidden directories are pruned before
    descent. Files are yielded in sorted order within each directory.

    Args:
        root_dir: Directory to scan
        suffix: File suffix to keep
        exclude_dirs: Directory names never descended into
        allow_hidden: Include hidden files and directories
        limiter: Resource limiter for the file count
        follow_symlinks: Whether to follow symbolic links

    Yields:
        File paths

    Raises:
        FileAccessError: If the root cannot be walked
        SecurityError: If the file count limit is exceeded
    """
    excluded = set(exclude_dirs)

    def _on_error(error: OSError) -> None:
        if Path(error.filename or "") == root_dir:
            raise FileAccessError(root_dir, f"Directory scan failed: {error}")

    for dirpath, dirnames, filenames in os.walk(
        root_dir, followlinks=follow_symlinks, onerror=_on_error
    ):
        dirnames[:] = sorted(
            d
            for d in dirnames
            if d not in excluded and (allow_hidden or not d.startswith("."))
        )
        for name in sorted(filenames):
            if not name.endswith(suffix):
                continue
            if not allow_hidden and name.startswith("."):
                continue
            path = Path(dirpath) / name
            if path.is_symlink() and not follow_symlinks:
                continue
            if limiter:
                limiter.increment_file_count()
            yield path
