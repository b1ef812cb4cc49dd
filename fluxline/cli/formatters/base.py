"""
Base formatter interface for CLI output

A formatter renders one QueryResult series (name, columns, values) as text.
"""

from fluxline.core.query import QueryResult


class BaseFormatter:
    """Base class for all output formatters"""

    def format(self, result: QueryResult, **kwargs) -> str:
        """
        Render a result series

        Args:
            result: Named series of rows to render
            **kwargs: Formatter-specific options

        Returns:
            Formatted string ready for output
        """
        raise NotImplementedError("Formatters must implement format() method")
