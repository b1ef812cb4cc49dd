"""
JSON formatter - writes the result as a series object

    {"name": "cpu", "columns": ["time", "mean"], "values": [[0, 15.0], ...]}
"""

import json
import math

from fluxline.cli.formatters.base import BaseFormatter
from fluxline.core.query import QueryResult


def _finite_or_none(value):
    # JSON has no NaN or infinity
    if isinstance(value, float) and (math.isnan(value) or math.isinf(value)):
        return None
    return value


class JSONFormatter(BaseFormatter):
    """Format a result series as JSON"""

    def format(self, result: QueryResult, **kwargs) -> str:
        series = {
            "name": result.name,
            "columns": result.columns,
            "values": [[_finite_or_none(v) for v in row] for row in result.values],
        }
        return json.dumps(series, indent=2)
