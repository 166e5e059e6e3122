"""Diagnostic codes for non-fatal analysis events.

Error Code Convention:
    SD1xx - Source and parsing events
    SD2xx - Module discovery events
    SD3xx - Resolution events

None of these abort a run. They are collected as Diagnostic records and
handed to the result sink next to the depth map.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ErrorCode(Enum):
    """Structured codes for observability and debugging."""

    # Source and parsing (SD1xx)
    SD100 = "SD100"  # File read error
    SD101 = "SD101"  # File skipped by resource limits
    SD102 = "SD102"  # Syntax tree has errors, file skipped

    # Module discovery (SD2xx)
    SD200 = "SD200"  # Out-of-line submodule file not found
    SD201 = "SD201"  # Submodule file already extracted

    # Resolution (SD3xx)
    SD300 = "SD300"  # Type alias cycle truncated
    SD301 = "SD301"  # Re-export cycle truncated
    SD302 = "SD302"  # Duplicate aggregate declaration merged


class Severity(Enum):
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"


@dataclass(frozen=True)
class Diagnostic:
    """A non-fatal event worth surfacing to the user.

    Attributes:
        code: Structured code for categorization
        message: Human-readable description
        path: Source file or symbol the event concerns
        severity: How loudly sinks should report it
    """

    code: ErrorCode
    message: str
    path: str | None = None
    severity: Severity = Severity.INFO

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"

    def to_json(self) -> dict[str, Any]:
        """Structured logging format."""
        return {
            "code": self.code.value,
            "message": self.message,
            "path": self.path,
            "severity": self.severity.value,
        }
