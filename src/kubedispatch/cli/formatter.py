# src/kubedispatch/cli/formatter.py
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from kubedispatch.core.models import OperationResult, RegistrationRecord
from kubedispatch.manifest.exporter import ManifestExporter

# Initialize the Rich console for high-quality terminal output
console = Console()


class ResultFormatter:
    """
    Renders operation results and registration state for the terminal.
    """

    def __init__(self, target: Optional[Console] = None):
        self.console = target or console
        self.exporter = ManifestExporter()

    def show_result(self, result: OperationResult, output: str = "yaml"):
        verb = result.verb.value.upper()
        if result.noop:
            self.console.print(
                f"[bold yellow]{verb}[/bold yellow] [dim]no-op: target state already reached[/dim]"
            )
            return

        if result.object is None or result.object.is_empty():
            self.console.print(f"[bold green]{verb}[/bold green] done")
            return

        obj = result.object
        rendered = self.exporter.export(obj, fmt=output)
        syntax = Syntax(rendered.strip(), output, theme="monokai", line_numbers=False)
        self.console.print(Panel(
            syntax,
            title=f"[bold green]{verb}[/bold green] {obj.kind} {obj.name}",
            border_style="green",
        ))

    def show_registration(self, record: Optional[RegistrationRecord], namespace: str, name: str):
        table = Table(title="Cluster Registration", show_header=True, header_style="bold magenta")
        table.add_column("Field", style="cyan")
        table.add_column("Value")

        table.add_row("Record", f"{namespace}/{name}")
        if record is None:
            table.add_row("Confirmed", "[red]no (record absent)[/red]")
        else:
            confirmed = "[green]yes[/green]" if record.confirmed else "[yellow]no[/yellow]"
            table.add_row("Confirmed", confirmed)
            table.add_row("Cluster Key", record.cluster_key or "-")
            table.add_row("Cluster ID", record.cluster_id or "-")

        self.console.print(table)

    def show_error(self, error: Exception):
        self.console.print(f"[bold red]{type(error).__name__}:[/bold red] {error}")
