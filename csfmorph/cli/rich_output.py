"""
Rich terminal output utilities for the csfmorph CLI.

Provides formatted terminal output with panels, tables and status lines.
With rich styling disabled the same calls print plain, uncolored text.
"""

from typing import List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text


class RichOutputManager:
    """Manages terminal output with a plain-text mode."""

    def __init__(self, use_rich: bool = True, console: Optional[Console] = None):
        """Initialize the output manager."""
        self.use_rich = use_rich
        if console is not None:
            self.console = console
        elif use_rich:
            self.console = Console()
        else:
            self.console = Console(no_color=True, highlight=False, emoji=False)

    def print_header(self, title: str, subtitle: Optional[str] = None) -> None:
        """Print a formatted header."""
        if self.use_rich:
            if subtitle:
                header_text = f"[bold blue]{title}[/bold blue]\n[dim]{subtitle}[/dim]"
            else:
                header_text = f"[bold blue]{title}[/bold blue]"

            self.console.print(Panel(header_text, border_style="blue", padding=(1, 2)))
        else:
            self.console.print(f"\n=== {title} ===", markup=False)
            if subtitle:
                self.console.print(subtitle, markup=False)
            self.console.print()

    def print_section(self, title: str) -> None:
        """Print a section separator."""
        if self.use_rich:
            self.console.rule(f"[bold]{title}[/bold]", style="blue")
        else:
            self.console.print(f"\n--- {title} ---", markup=False)

    def _print_status(self, symbol: str, style: str, message: str) -> None:
        if self.use_rich:
            self.console.print(f"[{style}]{symbol}[/{style}] ", end="")
            self.console.print(message, markup=False, highlight=False)
        else:
            self.console.print(f"{symbol} {message}", markup=False)

    def print_success(self, message: str) -> None:
        """Print a success message."""
        self._print_status("✓", "green", message)

    def print_warning(self, message: str) -> None:
        """Print a warning message."""
        self._print_status("⚠", "yellow", message)

    def print_error(self, message: str) -> None:
        """Print an error message."""
        self._print_status("✗", "red", message)

    def print_info(self, message: str) -> None:
        """Print an info message."""
        self._print_status("ℹ", "blue", message)

    def create_table(self, title: str, columns: List[str]) -> Table:
        """Create a table."""
        table = Table(
            title=title,
            show_header=True,
            header_style="bold blue" if self.use_rich else None,
        )
        for column in columns:
            table.add_column(column)
        return table

    def add_table_row(self, table: Table, *values) -> None:
        """Add a row to the table."""
        table.add_row(*[Text(str(v)) for v in values])

    def print_table(self, table: Table) -> None:
        """Print the table."""
        self.console.print(table)


rich_output = RichOutputManager()


def set_rich_enabled(enabled: bool) -> None:
    """Enable or disable rich output globally."""
    global rich_output
    rich_output = RichOutputManager(use_rich=enabled)


def get_rich_output() -> RichOutputManager:
    """Get the global rich output manager."""
    return rich_output
