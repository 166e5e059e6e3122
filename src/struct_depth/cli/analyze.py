"""Analyze commands: composition depth and trait depth."""

from pathlib import Path
from typing import Optional

import typer

from ..api import analyze as run_analysis
from ..exceptions import StructDepthError
from ..formatters import OutputOptions, get_formatter
from ..logging_config import setup_logging
from . import app
from ._common import console, display_root, err_console, resolve_config, resolve_root

_PATH_HELP = "Crate directory or .rs file (relative to --repo when given)"
_REPO_HELP = "Git URL to clone, or a local repository directory"


def _run(
    path: Path,
    repo: Optional[str],
    fmt: str,
    options: OutputOptions,
    config: Optional[Path],
    workers: Optional[int],
    verbose: bool,
    quiet: bool,
) -> None:
    logger = setup_logging(verbose=verbose, quiet=quiet)

    try:
        settings = resolve_config(config=config, workers=workers, verbose=verbose, quiet=quiet)
        formatter = get_formatter(fmt, options)

        with resolve_root(path, repo, settings) as root:
            if fmt == "rich" and not quiet:
                with err_console.status("Analyzing...") as status:
                    result = run_analysis(root, config=settings, on_progress=status.update)
            else:
                result = run_analysis(root, config=settings)

        if repo is not None:
            result.root = display_root(path, repo)
        formatter.render(result)

    except typer.Exit:
        raise
    except (StructDepthError, ValueError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except Exception as e:
        logger.exception("Unexpected error")
        console.print(f"[red]Unexpected error:[/red] {e}")
        if verbose:
            console.print_exception()
        raise typer.Exit(1)


@app.command()
def analyze(
    path: Path = typer.Argument(Path("."), help=_PATH_HELP),
    repo: Optional[str] = typer.Option(None, "--repo", "-r", help=_REPO_HELP),
    fmt: str = typer.Option(
        "rich",
        "--format",
        "-f",
        help="Output format: rich (human-readable) or json",
    ),
    top: int = typer.Option(10, "--top", "-n", help="Number of deepest structs to list", min=1),
    edges: bool = typer.Option(False, "--edges", "-e", help="List resolved field types per struct"),
    traits: bool = typer.Option(False, "--traits", "-t", help="Include trait hierarchy depth"),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    workers: Optional[int] = typer.Option(
        None,
        "--workers",
        "-w",
        help="Parallel workers",
        min=1,
        max=32,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging and all diagnostics"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress logging"),
):
    """
    Compute struct composition depth for a Rust source tree.

    [bold cyan]Examples:[/bold cyan]

      struct-depth analyze path/to/crate

      struct-depth analyze --repo https://github.com/owner/project --top 20

      struct-depth analyze src/lib.rs --format json --edges
    """
    options = OutputOptions(top=top, edges=edges, traits=traits, verbose=verbose)
    _run(path, repo, fmt, options, config, workers, verbose, quiet)


@app.command()
def traits(
    path: Path = typer.Argument(Path("."), help=_PATH_HELP),
    repo: Optional[str] = typer.Option(None, "--repo", "-r", help=_REPO_HELP),
    fmt: str = typer.Option("rich", "--format", "-f", help="Output format: rich or json"),
    top: int = typer.Option(10, "--top", "-n", help="Number of types to list", min=1),
    files: bool = typer.Option(False, "--files", help="Summarize traits and impls per source file"),
    dirs: bool = typer.Option(False, "--dirs", help="Summarize traits and impls per directory"),
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Configuration file (TOML)", exists=True, dir_okay=False
    ),
    workers: Optional[int] = typer.Option(None, "--workers", "-w", help="Parallel workers", min=1, max=32),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging and all diagnostics"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress logging"),
):
    """
    Compute trait hierarchy depth: the longest supertrait chain behind each type.

    [bold cyan]Examples:[/bold cyan]

      struct-depth traits path/to/crate --files

      struct-depth traits path/to/crate --dirs --format json
    """
    options = OutputOptions(top=top, traits=True, files=files, dirs=dirs, verbose=verbose)
    _run(path, repo, fmt, options, config, workers, verbose, quiet)
