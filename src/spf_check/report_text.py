"""Rich terminal renderer for a single chain check."""

from typing import Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import CheckResult
from .spf_resolver import LOOKUP_BUDGET


class TextReporter:
    def __init__(self, console: Optional[Console] = None):
        self._console = console or Console()

    def render(self, result: CheckResult, domain: str, target: str, elapsed_ms: int) -> None:
        c = self._console
        c.print()
        c.print(Panel(
            Text(f"SPF CHAIN: {domain} -> {target}", style="bold"),
            style="bold blue",
            expand=False,
        ))

        if result.found:
            verdict = Text("FOUND", style="bold white on green")
        else:
            verdict = Text("NOT FOUND", style="bold white on red")
        c.print(Text.assemble(("\nResult: ", "bold"), verdict))
        c.print(f"[bold]Checked domains:[/bold] {result.visited_count}/{LOOKUP_BUDGET} ({elapsed_ms}ms)")
        if result.budget_exhausted:
            c.print("[yellow]Lookup budget exhausted before the chain was fully walked.[/yellow]")

        c.print("[bold]Root record:[/bold] ", end="")
        c.print(Text(result.root_record_text or "Not found", no_wrap=True))

        self._render_domains(result)

    def _render_domains(self, result: CheckResult) -> None:
        table = Table(box=box.SIMPLE, show_header=True, header_style="bold")
        table.add_column("#", justify="right")
        table.add_column("Visited domain")
        for i, d in enumerate(result.visited_domains, start=1):
            table.add_row(str(i), Text(d))
        self._console.print(table)

        if result.included_domains:
            self._console.print("[bold]Included domains:[/bold]")
            for d in result.included_domains:
                self._console.print(Text(f"  include:{d}"), highlight=False)
