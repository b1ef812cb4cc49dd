"""
Output formatters for CLI

Available formatters:
- TableFormatter: Rich tables
- JSONFormatter: the series as a JSON object
- CSVFormatter: Unix-friendly CSV
"""

from fluxline.cli.formatters.base import BaseFormatter
from fluxline.cli.formatters.csv import CSVFormatter
from fluxline.cli.formatters.json import JSONFormatter
from fluxline.cli.formatters.table import TableFormatter

__all__ = ["BaseFormatter", "TableFormatter", "JSONFormatter", "CSVFormatter", "get_formatter"]


def get_formatter(format_name: str) -> BaseFormatter:
    """
    Get formatter by name

    Args:
        format_name: Name of formatter (table, json, csv)

    Returns:
        Formatter instance

    Raises:
        ValueError: If formatter not found
    """
    formatters = {
        "table": TableFormatter,
        "json": JSONFormatter,
        "csv": CSVFormatter,
    }

    if format_name not in formatters:
        available = ", ".join(formatters.keys())
        raise ValueError(f"Unknown format: {format_name}. Available formats: {available}")

    return formatters[format_name]()
