"""Rich console summary of an inlining pass."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from rich.console import Console
from rich.table import Table


@dataclass
class InlineReport:
    """Collects resolver events; usable directly as an ``on_event`` callback."""

    inlined: list[dict[str, Any]] = field(default_factory=list)
    missing: list[dict[str, Any]] = field(default_factory=list)

    def __call__(self, event: str, payload: dict[str, Any]) -> None:
        if event == "tag:inlined":
            self.inlined.append(payload)
        elif event == "tag:missing":
            self.missing.append(payload)

    def build_table(self) -> Table:
        table = Table(title="Inlined assets", show_lines=False)
        table.add_column("Reference", style="cyan")
        table.add_column("Artifact")
        table.add_column("Kind")
        table.add_column("Size", justify="right")
        table.add_column("Status")
        for item in self.inlined:
            table.add_row(
                str(item["reference"]),
                str(item["asset"]),
                str(item["kind"]),
                f"{item['size']:,}",
                "[green]inlined[/green]",
            )
        for item in self.missing:
            table.add_row(str(item["reference"]), str(item["asset"]), "", "", "[yellow]not found[/yellow]")
        return table

    def print(self, console: Console | None = None) -> None:
        console = console or Console()
        if not self.inlined and not self.missing:
            console.print("No references matched the inline-source pattern.")
            return
        console.print(self.build_table())


__all__ = ["InlineReport"]
