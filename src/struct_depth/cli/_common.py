"""Shared CLI helpers."""

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

from rich.console import Console

from ..config import AnalysisConfig, load_config
from ..exceptions import InvalidPathError
from ..sources import clone_repository, is_remote

console = Console()
err_console = Console(stderr=True)


def resolve_config(
    config: Optional[Path] = None,
    workers: Optional[int] = None,
    verbose: bool = False,
    quiet: bool = False,
) -> AnalysisConfig:
    """Build configuration from CLI options."""
    overrides: dict = {}
    if workers is not None:
        overrides["workers"] = workers
    if verbose:
        overrides["verbose"] = True
    if quiet:
        overrides["quiet"] = True
    return load_config(config_file=config, **overrides)


@contextmanager
def resolve_root(path: Path, repo: Optional[str], settings: AnalysisConfig) -> Iterator[Path]:
    """Yield the local analysis root.

    With ``repo``, a git URL is cloned into a temporary directory for the
    duration of the block and a local repository path is used as-is;
    ``path`` is then taken relative to the repository.
    """
    if repo is None:
        yield path
        return

    if is_remote(repo):
        with clone_repository(repo, depth=settings.clone_depth) as checkout:
            yield checkout / path
        return

    repo_dir = Path(repo)
    if not repo_dir.is_dir():
        raise InvalidPathError(repo_dir, "Repository is not a directory")
    yield repo_dir / path


def display_root(path: Path, repo: Optional[str]) -> str:
    if repo is None:
        return str(path)
    return repo if str(path) == "." else f"{repo} ({path})"
