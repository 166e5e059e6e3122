"""Output formatters for struct-depth."""

from .base import BaseFormatter, OutputOptions
from .json_formatter import JsonFormatter
from .rich_formatter import RichFormatter


def get_formatter(name: str, options: OutputOptions = OutputOptions()) -> BaseFormatter:
    """Get a formatter instance by name.

    Args:
        name: One of "rich", "json"
        options: What the formatter should include

    Returns:
        Formatter instance

    Raises:
        ValueError: If name is not recognized
    """
    formatters = {
        "rich": RichFormatter,
        "json": JsonFormatter,
    }
    cls = formatters.get(name)
    if cls is None:
        raise ValueError(f"Unknown formatter: {name!r}. Choose from: {', '.join(sorted(formatters))}")
    return cls(options)


__all__ = [
    "BaseFormatter",
    "OutputOptions",
    "RichFormatter",
    "JsonFormatter",
    "get_formatter",
]
