"""Composition graph construction and depth algorithms."""

from .algorithms import (
    composition_depth,
    compute_depths,
    longest_paths,
    path_depth,
    tarjan_scc,
)
from .builder import build_composition_graph, build_trait_depths
from .models import (
    CompositionGraph,
    DepthResult,
    TraitDepthResult,
    TraitGroupSummary,
    node_key,
)

__all__ = [
    "CompositionGraph",
    "DepthResult",
    "TraitDepthResult",
    "TraitGroupSummary",
    "node_key",
    "build_composition_graph",
    "build_trait_depths",
    "composition_depth",
    "compute_depths",
    "longest_paths",
    "path_depth",
    "tarjan_scc",
]
