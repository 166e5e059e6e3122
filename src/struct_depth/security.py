"""
Security utilities for struct-depth.

Provides root validation and resource limits for source scanning.
"""

import os
from pathlib import Path

from .exceptions import InvalidPathError, SecurityError

# System directories that should never be analyzed
SYSTEM_DIRECTORIES = {
    "/etc", "/sys", "/proc", "/dev", "/boot",
    "/bin", "/sbin", "/usr/bin", "/usr/sbin",
    "C:\\Windows", "C:\\Program Files", "C:\\Program Files (x86)",
}

# Maximum file size in bytes (default 10MB)
DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024

# Maximum number of files to scan
DEFAULT_MAX_FILES = 10000


class ResourceLimiter:
    """
    Enforces resource limits during scanning.
    """

    def __init__(
        self,
        max_file_size: int = DEFAULT_MAX_FILE_SIZE,
        max_files: int = DEFAULT_MAX_FILES
    ):
        """
        Initialize resource limiter.

        Args:
            max_file_size: Maximum file size in bytes
            max_files: Maximum number of files to process
        """
        self.max_file_size = max_file_size
        self.max_files = max_files
        self.files_processed = 0

    def check_file_size(self, filepath: Path) -> None:
        """
        Check if file size is within limits.

        Raises:
            InvalidPathError: If the file cannot be inspected
            SecurityError: If file exceeds size limit
        """
        try:
            size = filepath.stat().st_size
        except OSError as e:
            raise InvalidPathError(filepath, f"Cannot stat file: {e}")

        if size > self.max_file_size:
            size_mb = size / (1024 * 1024)
            limit_mb = self.max_file_size / (1024 * 1024)
            raise SecurityError(
                f"File size ({size_mb:.2f}MB) exceeds limit ({limit_mb:.2f}MB)",
                filepath=filepath
            )

    def check_file_count(self) -> None:
        """
        Check if file count is within limits.

        Raises:
            SecurityError: If file count exceeds limit
        """
        if self.files_processed > self.max_files:
            raise SecurityError(
                f"File count ({self.files_processed}) exceeds limit ({self.max_files})"
            )

    def increment_file_count(self) -> None:
        """Increment the count of processed files."""
        self.files_processed += 1
        self.check_file_count()

    def reset(self) -> None:
        """Reset counters."""
        self.files_processed = 0


def validate_root(path: Path) -> Path:
    """
    Validate that an analysis root is safe to scan.

    The root may be a directory or a single ``.rs`` file.

    Args:
        path: Root path to validate

    Returns:
        Resolved absolute path

    Raises:
        InvalidPathError: If path is invalid
        SecurityError: If path is unsafe
    """
    try:
        resolved = path.resolve()
    except (OSError, RuntimeError) as e:
        raise InvalidPathError(path, f"Cannot resolve path: {e}")

    if not resolved.exists():
        raise InvalidPathError(resolved, "Path does not exist")

    if resolved.is_file() and resolved.suffix != ".rs":
        raise InvalidPathError(resolved, "File is not a Rust source file")

    if not os.access(resolved, os.R_OK):
        raise InvalidPathError(resolved, "Path is not readable")

    path_str = str(resolved)
    for sys_dir in SYSTEM_DIRECTORIES:
        if path_str == sys_dir or path_str.startswith(sys_dir + os.sep):
            raise SecurityError(
                f"Cannot analyze system directory: {sys_dir}",
                filepath=resolved
            )

    return resolved
