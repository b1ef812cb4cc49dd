"""
Rich table formatter for terminal output
"""

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from fluxline.cli.formatters.base import BaseFormatter
from fluxline.core.query import QueryResult


class TableFormatter(BaseFormatter):
    """Format a result series as a Rich table titled with the series name"""

    def format(self, result: QueryResult, **kwargs) -> str:
        """
        Format a result series as a Rich table

        Args:
            result: Series to render
            **kwargs: 'no_color' disables styling, 'show_footer' (default
                True) appends the row count

        Returns:
            Formatted table string
        """
        if not result.values:
            return "No results found."

        console = Console(force_terminal=not kwargs.get("no_color", False), width=120)

        table = Table(
            show_header=True,
            header_style="bold magenta",
            box=box.SIMPLE,
            title=escape(result.name),
        )
        for column in result.columns:
            table.add_column(escape(column), style="cyan", overflow="fold")

        for row in result.values:
            # Cell text is data, not markup
            table.add_row(*(escape(str(value)) for value in row))

        with console.capture() as capture:
            console.print(table)
        output = capture.get()

        if kwargs.get("show_footer", True):
            row_count = len(result)
            footer = f"[dim]{row_count} row{'s' if row_count != 1 else ''}[/dim]"
            with console.capture() as capture:
                console.print(footer)
            output += capture.get()

        return output
