"""Base formatter interface for struct-depth output rendering."""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from ..analysis.models import AnalysisResult


@dataclass(frozen=True)
class OutputOptions:
    """What a formatter should include.

    Attributes:
        top: Number of deepest aggregates (and types) to list
        edges: Include the resolved field edges of every aggregate
        traits: Include trait hierarchy depths
        files: Include trait summaries per source file
        dirs: Include trait summaries per directory
        verbose: Include every diagnostic, not only warnings
    """

    top: int = 10
    edges: bool = False
    traits: bool = False
    files: bool = False
    dirs: bool = False
    verbose: bool = False


class BaseFormatter(ABC):
    """Abstract base class for output formatters."""

    def __init__(self, options: OutputOptions = OutputOptions()) -> None:
        self.options = options

    @abstractmethod
    def render(self, result: AnalysisResult) -> None:
        """Render a result to the terminal."""

    @abstractmethod
    def format(self, result: AnalysisResult) -> str:
        """Return formatted string representation of a result."""
