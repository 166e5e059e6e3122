"""Result models handed to formatters and API callers."""

from dataclasses import dataclass, field
from typing import Any

from ..exceptions import Diagnostic
from ..graph.models import CompositionGraph, DepthResult, TraitDepthResult


@dataclass
class RunStats:
    """Counts describing one analysis run."""

    files_listed: int = 0
    files_analyzed: int = 0
    files_skipped: int = 0
    crate_roots: int = 0
    modules: int = 0
    aggregates: int = 0
    aliases: int = 0
    imports: int = 0
    traits: int = 0
    impls: int = 0
    elapsed_seconds: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "files_listed": self.files_listed,
            "files_analyzed": self.files_analyzed,
            "files_skipped": self.files_skipped,
            "crate_roots": self.crate_roots,
            "modules": self.modules,
            "aggregates": self.aggregates,
            "aliases": self.aliases,
            "imports": self.imports,
            "traits": self.traits,
            "impls": self.impls,
            "elapsed_seconds": round(self.elapsed_seconds, 3),
        }


@dataclass
class AnalysisResult:
    """Everything a run produces.

    Attributes:
        root: Display form of the analyzed root
        graph: Aggregate name -> resolved field type names
        depths: Composition depth per aggregate and the global maximum
        traits: Trait hierarchy depths
        stats: Run counts
        diagnostics: Non-fatal events, in the order they occurred
    """

    root: str
    graph: CompositionGraph = field(default_factory=CompositionGraph)
    depths: DepthResult = field(default_factory=DepthResult)
    traits: TraitDepthResult = field(default_factory=TraitDepthResult)
    stats: RunStats = field(default_factory=RunStats)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def max_depth(self) -> int:
        return self.depths.max_depth

    def depth_of(self, name: str) -> int:
        """Depth of an aggregate by qualified name (0 if unknown)."""
        return self.depths.depths.get(name, 0)
