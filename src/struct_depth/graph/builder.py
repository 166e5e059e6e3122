"""Build composition and trait graphs from a resolved symbol universe."""

import logging
from pathlib import PurePosixPath
from typing import Callable

from ..resolution import SymbolResolver, SymbolUniverse
from ..scanning.type_refs import is_builtin
from .algorithms import longest_paths
from .models import CompositionGraph, TraitDepthResult, TraitGroupSummary, node_key

logger = logging.getLogger(__name__)


def build_composition_graph(
    universe: SymbolUniverse,
    resolver: SymbolResolver,
    extra_builtins: frozenset[str] = frozenset(),
) -> CompositionGraph:
    """Resolve every aggregate's field references into one graph.

    Names that resolve to standard library types (through an import such as
    ``use std::collections::HashMap as Map``) or to aliases of built-in types
    are dropped; any other name that is not an aggregate is kept and
    reported as unresolved.
    """
    graph = CompositionGraph()

    for name in sorted(universe.aggregates):
        aggregate = universe.aggregates[name]
        targets: list[str] = []
        for raw in aggregate.field_types:
            resolved = resolver.resolve(raw, aggregate.module, owner=aggregate.name)
            key = node_key(resolved)
            if is_builtin(key, extra_builtins) or key in universe.opaque_aliases:
                continue
            targets.append(resolved)
        graph.edges[name] = targets
        graph.kinds[name] = aggregate.kind

    for name, targets in graph.edges.items():
        missing = [target for target in targets if node_key(target) not in graph.edges]
        if missing:
            graph.unresolved[name] = missing

    logger.debug(
        f"Composition graph: {len(graph.edges)} nodes, {graph.edge_count} edges, "
        f"{sum(len(v) for v in graph.unresolved.values())} unresolved references"
    )
    return graph


def build_trait_depths(
    universe: SymbolUniverse,
    resolver: SymbolResolver,
) -> TraitDepthResult:
    """Trait hierarchy depth per trait and per implementing type.

    Traits declared outside the analyzed sources (``Display``) are leaves of
    depth 1. Per-file and per-directory summaries use the crate-wide
    hierarchy but count only the traits and impls declared in the group.
    """
    result = TraitDepthResult(trait_count=len(universe.traits))

    for name in sorted(universe.traits):
        trait = universe.traits[name]
        result.supertraits[name] = [
            resolver.resolve(raw, trait.module) for raw in trait.supertraits
        ]

    resolved_impls: list[tuple[str, str, str]] = []
    for impl in universe.impls:
        type_name = node_key(resolver.resolve(impl.type_name, impl.module))
        trait_name = node_key(resolver.resolve(impl.trait_name, impl.module))
        resolved_impls.append((impl.path, type_name, trait_name))
        implemented = result.implementations.setdefault(type_name, [])
        if trait_name not in implemented:
            implemented.append(trait_name)

    adjacency: dict[str, list[str]] = {
        name: [node_key(s) for s in supers] for name, supers in result.supertraits.items()
    }
    for supers in list(adjacency.values()):
        for trait_name in supers:
            adjacency.setdefault(trait_name, [])
    for traits in result.implementations.values():
        for trait_name in traits:
            adjacency.setdefault(trait_name, [])

    result.trait_depths = longest_paths(adjacency, revisit_weight=0)
    result.type_depths = {
        type_name: max((result.trait_depths[t] for t in traits), default=0)
        for type_name, traits in result.implementations.items()
    }
    result.files = _group_summaries(
        universe, resolved_impls, result.trait_depths, lambda path: path
    )
    result.directories = _group_summaries(
        universe, resolved_impls, result.trait_depths, _directory_of
    )
    return result


def _directory_of(path: str) -> str:
    return PurePosixPath(path).parent.as_posix()


def _group_summaries(
    universe: SymbolUniverse,
    resolved_impls: list[tuple[str, str, str]],
    trait_depths: dict[str, int],
    group_of: Callable[[str], str],
) -> dict[str, TraitGroupSummary]:
    summaries: dict[str, TraitGroupSummary] = {}
    implemented: dict[str, set[str]] = {}

    for trait in universe.traits.values():
        summaries.setdefault(group_of(trait.path), TraitGroupSummary()).trait_count += 1

    for path, type_name, trait_name in resolved_impls:
        group = group_of(path)
        summary = summaries.setdefault(group, TraitGroupSummary())
        summary.max_depth = max(summary.max_depth, trait_depths[trait_name])
        implemented.setdefault(group, set()).add(type_name)

    for group, types in implemented.items():
        summaries[group].impl_count = len(types)
    return dict(sorted(summaries.items()))
