"""
Rich table formatter for terminal output
"""

from typing import Any, List

try:
    from rich import box
    from rich.console import Console
    from rich.markup import escape
    from rich.table import Table

    RICH_AVAILABLE = True
except ImportError:
    RICH_AVAILABLE = False
    Console = None
    Table = None
    box = None
    escape = None

from pullchain.cli.formatters.base import BaseFormatter


class TableFormatter(BaseFormatter):
    """Format values as a Rich table"""

    def format(self, values: List[Any], **kwargs) -> str:
        """
        Format values as a Rich table

        Args:
            values: Pipeline output
            **kwargs: Options like 'column', 'no_color', 'show_footer'

        Returns:
            Formatted table string
        """
        if not RICH_AVAILABLE:
            raise ImportError(
                "Table formatter requires rich library. "
                "Install with: pip install pullchain[cli]"
            )

        if not values:
            return "No results found."

        console = Console(force_terminal=not kwargs.get("no_color", False))

        # Narrow terminals get a compact box
        if console.width < 80:
            table = Table(show_header=True, header_style="bold magenta", box=box.SIMPLE)
        else:
            table = Table(show_header=True, header_style="bold magenta")

        table.add_column("#", style="dim", justify="right")
        table.add_column(kwargs.get("column", "value"), style="cyan", overflow="ellipsis", max_width=40)

        for index, val in enumerate(values, start=1):
            cell = "[dim]None[/dim]" if val is None else escape(str(val))
            table.add_row(str(index), cell)

        with console.capture() as capture:
            console.print(table)
        output = capture.get()

        if kwargs.get("show_footer", True):
            count = len(values)
            footer = f"[dim]{count} value{'s' if count != 1 else ''}[/dim]"
            with console.capture() as capture:
                console.print(footer)
            output += capture.get()

        return output
