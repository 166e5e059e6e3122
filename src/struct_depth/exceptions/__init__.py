"""Exception hierarchy for struct-depth."""

from .analysis import (
    AnalysisError,
    FileAccessError,
    ParsingError,
    RepositoryError,
    SourceListingError,
)
from .base import StructDepthError
from .config import (
    ConfigurationError,
    InvalidConfigError,
    InvalidPathError,
    SecurityError,
)
from .taxonomy import Diagnostic, ErrorCode, Severity

__all__ = [
    "StructDepthError",
    "AnalysisError",
    "FileAccessError",
    "ParsingError",
    "SourceListingError",
    "RepositoryError",
    "ConfigurationError",
    "InvalidPathError",
    "InvalidConfigError",
    "SecurityError",
    "Diagnostic",
    "ErrorCode",
    "Severity",
]
