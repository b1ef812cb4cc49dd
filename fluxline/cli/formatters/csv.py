"""
CSV formatter: header line from the columns, one line per value row
"""

import csv
import io

from fluxline.cli.formatters.base import BaseFormatter
from fluxline.core.query import QueryResult


class CSVFormatter(BaseFormatter):
    """Format a result series as CSV"""

    def format(self, result: QueryResult, **kwargs) -> str:
        if not result.values:
            return ""

        output = io.StringIO()
        writer = csv.writer(output, lineterminator="\n")
        writer.writerow(result.columns)
        writer.writerows(result.values)
        return output.getvalue()
