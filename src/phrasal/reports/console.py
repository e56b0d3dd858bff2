"""Console rendering of check outcomes and the catalog using Rich."""

from __future__ import annotations

import sys
from collections.abc import Sequence

from rich.console import Console, Group
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from phrasal._internal.formatting import inspect_args, inspect_value
from phrasal.catalog import CatalogEntry
from phrasal.context import CheckRecord
from phrasal.errors import AssertionFailedError, PhrasalError, UnknownAssertionError


class ConsoleReporter:
    """Renders check results, failures and catalogs to the console."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console(file=sys.__stdout__)

    def _print_section_header(self, title: str) -> None:
        width = self.console.width
        header_title = f" {title} "
        fill = max(width - len(header_title), 0)
        left = fill // 2
        self.console.print("=" * left + header_title + "=" * (fill - left))

    def print_records(self, records: Sequence[CheckRecord]) -> None:
        for record in records:
            mark, color = ("✓", "green") if record.passed else ("✗", "red")
            negated = " [dim](negated)[/dim]" if record.negated else ""
            self.console.print(
                f"  [{color}]{mark}[/{color}] {escape(record.signature)}{negated} "
                f"[dim]{escape(record.assertion_id)}[/dim]"
            )

    def print_passed(self, args: Sequence[object]) -> None:
        self.console.print(f"[green]PASSED[/green] check{escape(inspect_args(tuple(args)))}")

    def print_failure(self, error: AssertionFailedError) -> None:
        body: list = [escape(error.message)]
        if error.failure.has_actual:
            body.append(f"[bold]actual:[/bold]   {escape(inspect_value(error.actual))}")
        if error.failure.has_expected:
            body.append(f"[bold]expected:[/bold] {escape(inspect_value(error.expected))}")
        if error.diff:
            body.append(Syntax(error.diff, "diff", theme="ansi_dark", background_color="default"))
        header = f"[red]FAILED[/red] {type(error).__name__}"
        if error.assertion_id:
            header += f" [dim]{escape(error.assertion_id)}[/dim]"
        self.console.print(header)
        self.console.print(Panel(Group(*body), border_style="red", expand=False))

    def print_error(self, error: PhrasalError) -> None:
        lines = [escape(str(error))]
        if isinstance(error, UnknownAssertionError) and error.phrases:
            lines.append(f"[dim]phrases: {escape(', '.join(error.phrases))}[/dim]")
        self.console.print(f"[yellow]ERROR[/yellow] {type(error).__name__} [dim]{error.code}[/dim]")
        self.console.print(Panel("\n".join(lines), border_style="yellow", expand=False))

    def print_catalog(self, entries: Sequence[CatalogEntry], *, title: str = "assertions") -> None:
        self._print_section_header(f"{title.upper()} ({len(entries)})")
        table = Table(show_lines=False)
        table.add_column("id", style="cyan", no_wrap=True)
        table.add_column("signature")
        table.add_column("category", style="magenta")
        for entry in entries:
            table.add_row(entry.id, escape(entry.signature), entry.category or "")
        self.console.print(table)
