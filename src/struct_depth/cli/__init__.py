"""CLI entry point: registers all subcommands."""

import typer

from .. import __version__
from ._common import console

app = typer.Typer(
    name="struct-depth",
    help="struct-depth - composition depth analysis for Rust source trees",
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"struct-depth {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
):
    """Measure how deeply Rust structs nest within one another."""


# Import subcommands to register them
from .analyze import analyze as _analyze, traits as _traits  # noqa: F401, E402
