"""Public API for struct-depth.

Example:
    >>> from struct_depth import analyze
    >>>
    >>> result = analyze("path/to/crate")
    >>> result.max_depth
    4
    >>> result.depths.top(3)
    [('tree::Forest', 4), ('tree::Node', 3), ('tree::Leaf', 1)]
    >>>
    >>> # Sources that are not on disk
    >>> from struct_depth.sources import InMemorySourceProvider
    >>> result = analyze(InMemorySourceProvider({"lib.rs": "struct A { b: B } struct B;"}))
    >>> result.depth_of("A")
    2
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from .analysis import AnalysisEngine, AnalysisResult, ProgressCallback
from .config import AnalysisConfig, load_config
from .logging_config import get_logger, setup_logging
from .sources import SourceProvider, clone_repository, is_remote, open_provider

logger = get_logger(__name__)


def analyze(
    source: Union[str, Path, SourceProvider] = ".",
    config: Optional[AnalysisConfig] = None,
    config_file: Optional[Path] = None,
    on_progress: ProgressCallback = None,
    **overrides,
) -> AnalysisResult:
    """Compute composition and trait depths for a Rust source tree.

    Args:
        source: Directory, single ``.rs`` file, git URL, or a SourceProvider
        config: Ready configuration; when None it is loaded from config
            files, environment and ``overrides``
        config_file: Optional explicit config file path
        on_progress: Called with a status message at each phase
        **overrides: Configuration overrides (e.g. ``workers=4``,
            ``verbose=True``)

    Returns:
        AnalysisResult with graph, depths, trait depths, stats and diagnostics

    Raises:
        StructDepthError: If configuration is invalid, the root cannot be
            listed, or a remote repository cannot be cloned
    """
    if "verbose" in overrides or "quiet" in overrides:
        setup_logging(verbose=bool(overrides.get("verbose")), quiet=bool(overrides.get("quiet")))

    if config is None:
        config = load_config(config_file=config_file, **overrides)
    logger.debug(f"Configuration loaded: {config.verbosity} mode")

    if isinstance(source, SourceProvider):
        return AnalysisEngine(source, config).run(on_progress)

    if isinstance(source, str) and is_remote(source):
        with clone_repository(source, depth=config.clone_depth) as checkout:
            result = AnalysisEngine(open_provider(checkout, config), config).run(on_progress)
            result.root = source
            return result

    logger.info(f"Starting analysis of {source}")
    return AnalysisEngine(open_provider(Path(source), config), config).run(on_progress)
