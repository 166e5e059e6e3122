"""Analysis-related exceptions: source access, parsing, repository retrieval."""

from pathlib import PurePath
from typing import Optional

from .base import StructDepthError


class AnalysisError(StructDepthError):
    """Base class for analysis-related errors."""
    pass


class FileAccessError(AnalysisError):
    """Raised when a source file cannot be accessed or read."""

    def __init__(self, filepath: PurePath, reason: str):
        super().__init__(
            f"Cannot access file: {filepath}",
            details={"filepath": str(filepath), "reason": reason},
        )
        self.filepath = filepath
        self.reason = reason


class ParsingError(AnalysisError):
    """Raised when file content cannot be parsed into a syntax tree."""

    def __init__(self, filepath: PurePath, reason: str, language: str = "rust"):
        super().__init__(
            f"Failed to parse {language} file: {filepath}",
            details={"filepath": str(filepath), "language": language, "reason": reason},
        )
        self.filepath = filepath
        self.language = language
        self.reason = reason


class SourceListingError(AnalysisError):
    """Raised when the starting file list cannot be obtained.

    This is the only condition that aborts a run.
    """

    def __init__(self, root: PurePath, reason: str):
        super().__init__(
            f"Cannot list source files under: {root}",
            details={"root": str(root), "reason": reason},
        )
        self.root = root
        self.reason = reason


class RepositoryError(AnalysisError):
    """Raised when a remote repository cannot be retrieved."""

    def __init__(self, repository: str, reason: str, stderr: Optional[str] = None):
        details = {"repository": repository, "reason": reason}
        if stderr:
            details["stderr"] = stderr.strip()
        super().__init__(f"Cannot retrieve repository: {repository}", details=details)
        self.repository = repository
        self.reason = reason
        self.stderr = stderr
