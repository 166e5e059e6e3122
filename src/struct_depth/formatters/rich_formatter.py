"""Rich terminal formatter for struct-depth."""

from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..analysis.models import AnalysisResult
from ..exceptions import Severity
from ..graph import TraitGroupSummary
from .base import BaseFormatter, OutputOptions


def _depth_label(depth: int) -> str:
    if depth >= 8:
        return f"[red bold]{depth}[/red bold]"
    elif depth >= 5:
        return f"[yellow]{depth}[/yellow]"
    else:
        return f"[green]{depth}[/green]"


class RichFormatter(BaseFormatter):
    """Summary panel, depth table, and optional edge, trait and diagnostic listings."""

    def __init__(
        self, options: OutputOptions = OutputOptions(), console: Optional[Console] = None
    ) -> None:
        super().__init__(options)
        self.console = console or Console()

    def render(self, result: AnalysisResult) -> None:
        self._print_summary(result)
        self._print_depths(result)
        if self.options.edges:
            self._print_edges(result)
        if self.options.traits:
            self._print_traits(result)
        self._print_diagnostics(result)

    def format(self, result: AnalysisResult) -> str:
        with self.console.capture() as capture:
            self.render(result)
        return capture.get()

    def _print_summary(self, result: AnalysisResult) -> None:
        stats = result.stats
        lines = [
            f"[bold]Root:[/bold] {result.root}",
            f"[bold]Files:[/bold] {stats.files_analyzed} analyzed"
            + (f", [yellow]{stats.files_skipped} skipped[/yellow]" if stats.files_skipped else ""),
            f"[bold]Modules:[/bold] {stats.modules}   "
            f"[bold]Aggregates:[/bold] {stats.aggregates}   "
            f"[bold]Aliases:[/bold] {stats.aliases}   "
            f"[bold]Imports:[/bold] {stats.imports}",
            f"[bold]Maximum composition depth:[/bold] {_depth_label(result.max_depth)}",
        ]
        self.console.print(
            Panel("\n".join(lines), title="[bold cyan]Composition Depth[/bold cyan]", expand=False)
        )

    def _print_depths(self, result: AnalysisResult) -> None:
        ranked = result.depths.top(self.options.top)
        if not ranked:
            self.console.print("[yellow]No structs found.[/yellow]")
            return

        table = Table(title=f"Deepest aggregates (top {len(ranked)})", show_lines=False)
        table.add_column("#", justify="right", style="dim")
        table.add_column("Aggregate", style="cyan")
        table.add_column("Kind")
        table.add_column("Depth", justify="right")
        table.add_column("Fields", justify="right")

        for rank, (name, depth) in enumerate(ranked, 1):
            table.add_row(
                str(rank),
                name,
                result.graph.kinds.get(name, "struct"),
                _depth_label(depth),
                str(len(result.graph.edges.get(name, ()))),
            )
        self.console.print(table)

    def _print_edges(self, result: AnalysisResult) -> None:
        table = Table(title="Field edges")
        table.add_column("Aggregate", style="cyan")
        table.add_column("Field types")

        for name in result.graph.nodes:
            unresolved = set(result.graph.unresolved.get(name, ()))
            targets = [
                f"[dim]{target}[/dim]" if target in unresolved else target
                for target in result.graph.edges[name]
            ]
            table.add_row(name, ", ".join(targets) or "[dim]-[/dim]")
        self.console.print(table)

    def _print_traits(self, result: AnalysisResult) -> None:
        traits = result.traits
        self.console.print(
            f"  [bold]{traits.trait_count}[/bold] traits, "
            f"[bold]{traits.impl_count}[/bold] implementing types, "
            f"maximum trait depth [bold]{traits.max_depth}[/bold]"
        )
        ranked = traits.top(self.options.top)
        if ranked:
            table = Table(title="Trait depth per type")
            table.add_column("Type", style="cyan")
            table.add_column("Depth", justify="right")
            table.add_column("Implements")
            for name, depth in ranked:
                table.add_row(name, str(depth), ", ".join(traits.implementations.get(name, ())))
            self.console.print(table)

        if self.options.files:
            self._print_trait_groups("Trait summary per file", "File", traits.files)
        if self.options.dirs:
            self._print_trait_groups("Trait summary per directory", "Directory", traits.directories)

    def _print_trait_groups(
        self, title: str, label: str, groups: dict[str, TraitGroupSummary]
    ) -> None:
        if not groups:
            return
        table = Table(title=title)
        table.add_column(label, style="cyan")
        table.add_column("Max depth", justify="right")
        table.add_column("Traits", justify="right")
        table.add_column("Impls", justify="right")
        for path, summary in groups.items():
            table.add_row(
                path, str(summary.max_depth), str(summary.trait_count), str(summary.impl_count)
            )
        self.console.print(table)

    def _print_diagnostics(self, result: AnalysisResult) -> None:
        shown = [
            d
            for d in result.diagnostics
            if self.options.verbose or d.severity == Severity.WARNING
        ]
        if not shown:
            return
        self.console.print()
        self.console.print(f"[bold]Diagnostics[/bold] ({len(shown)}):")
        for diagnostic in shown:
            style = "yellow" if diagnostic.severity == Severity.WARNING else "dim"
            self.console.print(f"  [{style}]{escape(str(diagnostic))}[/{style}]", highlight=False)
