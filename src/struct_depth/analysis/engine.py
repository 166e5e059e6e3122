"""AnalysisEngine: orchestrate extract -> resolve -> graph -> depth.

Extraction runs first over every file; only then is the symbol universe
built and are references resolved, so a field may name a type from a file
extracted later.

Crate roots (``lib.rs``, ``main.rs``) are extracted first, in sorted order,
each following its ``mod`` declarations. Every listed file not reached from
a root is then extracted as a root of its own, again in sorted order, so the
result does not depend on the order the provider lists files in.
"""

from __future__ import annotations

import os
import time
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import PurePath
from typing import Optional

from ..config import DEFAULT_CONFIG, AnalysisConfig
from ..exceptions import ErrorCode
from ..graph import build_composition_graph, build_trait_depths, compute_depths
from ..logging_config import get_logger
from ..resolution import SymbolResolver, build_symbol_universe
from ..scanning import DeclarationExtractor, FileDeclarations
from ..sources import SourceProvider, is_crate_root
from .models import AnalysisResult, RunStats

logger = get_logger(__name__)

ProgressCallback = Optional[Callable[[str], None]]

# Default worker count: use CPU count, capped at 8 to avoid overwhelming I/O
_DEFAULT_WORKERS = min(os.cpu_count() or 4, 8)

# Below this many crate roots, extraction runs sequentially
_PARALLEL_THRESHOLD = 10

# Diagnostics that mean a file contributed nothing
_SKIP_CODES = (ErrorCode.SD100, ErrorCode.SD101, ErrorCode.SD102)


class AnalysisEngine:
    """Runs one analysis over the files of a source provider."""

    def __init__(self, provider: SourceProvider, config: AnalysisConfig = DEFAULT_CONFIG) -> None:
        self.provider = provider
        self.config = config
        self._extractor = DeclarationExtractor(provider, config)

    def run(self, on_progress: ProgressCallback = None) -> AnalysisResult:
        """Execute the full pipeline.

        Raises:
            SourceListingError: If the provider cannot list the root
        """

        def _progress(msg: str) -> None:
            if on_progress is not None:
                on_progress(msg)

        started = time.perf_counter()
        stats = RunStats()

        _progress("Listing source files...")
        files = sorted(self.provider.list_files())
        stats.files_listed = len(files)
        logger.info(f"Found {len(files)} Rust files")

        _progress(f"Extracting declarations from {len(files)} files...")
        declarations, crate_roots = self._extract(files)
        stats.crate_roots = crate_roots

        _progress("Resolving references...")
        universe, merge_diagnostics = build_symbol_universe(declarations)
        resolver = SymbolResolver(universe)

        _progress("Building composition graph...")
        extra_builtins = frozenset(self.config.extra_builtin_types)
        graph = build_composition_graph(universe, resolver, extra_builtins)

        _progress("Computing depths...")
        depths = compute_depths(graph)
        traits = build_trait_depths(universe, resolver)

        diagnostics = declarations.diagnostics + merge_diagnostics + resolver.diagnostics

        analyzed = set(declarations.files)
        stats.files_analyzed = len(analyzed)
        stats.files_skipped = len(
            {d.path for d in declarations.diagnostics if d.code in _SKIP_CODES}
        )
        stats.modules = len(universe.modules)
        stats.aggregates = len(universe.aggregates)
        stats.aliases = len(universe.aliases)
        stats.imports = universe.imports.binding_count
        stats.traits = len(universe.traits)
        stats.impls = len(universe.impls)
        stats.elapsed_seconds = time.perf_counter() - started

        logger.info(
            f"Analyzed {stats.files_analyzed} files: {stats.aggregates} aggregates, "
            f"max depth {depths.max_depth}"
        )

        return AnalysisResult(
            root=str(self.provider.root),
            graph=graph,
            depths=depths,
            traits=traits,
            stats=stats,
            diagnostics=diagnostics,
        )

    def _extract(self, files: list[PurePath]) -> tuple[FileDeclarations, int]:
        """Extract every file once, crate roots first."""
        merged = FileDeclarations()
        roots = [f for f in files if is_crate_root(f)]
        reached: set[PurePath] = set()

        # Each crate tree is independent; trees are merged in root order
        for tree, visited in self._extract_roots(roots):
            merged.merge(tree)
            reached |= visited

        for path in files:
            if path in reached:
                continue
            # Shared visited set: an orphan's submodules are not re-extracted as roots
            merged.merge(self._extractor.extract_crate(path, reached))

        return merged, len(roots)

    def _extract_roots(
        self, roots: list[PurePath]
    ) -> list[tuple[FileDeclarations, set[PurePath]]]:
        def _extract_one(root: PurePath) -> tuple[FileDeclarations, set[PurePath]]:
            visited: set[PurePath] = set()
            tree = self._extractor.extract_crate(root, visited)
            return tree, visited

        if not self.config.parallel or len(roots) < _PARALLEL_THRESHOLD:
            return [_extract_one(root) for root in roots]

        workers = self.config.workers or _DEFAULT_WORKERS
        results: dict[PurePath, tuple[FileDeclarations, set[PurePath]]] = {}
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {executor.submit(_extract_one, root): root for root in roots}
            for future in as_completed(futures):
                results[futures[future]] = future.result()
        return [results[root] for root in roots]
