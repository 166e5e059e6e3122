"""
struct-depth - composition depth analysis for Rust source trees

Resolves every struct field type through module paths, imports and type
aliases, then measures how deeply aggregates nest within one another.
Trait hierarchy depth is reported alongside.
"""

__version__ = "0.3.0"

from .analysis import AnalysisEngine, AnalysisResult
from .api import analyze
from .graph import CompositionGraph, DepthResult, TraitDepthResult

__all__ = [
    "analyze",  # Main entry point
    "AnalysisEngine",  # Direct engine access with a custom SourceProvider
    "AnalysisResult",
    "CompositionGraph",
    "DepthResult",
    "TraitDepthResult",
]
