"""
Pandas-based Query Executor - alternative to the Volcano operator chain

Translates a SELECT descriptor into DataFrame operations:
- raw SELECT → filter rows of a long (time, field, value) frame
- agg(field) GROUP BY time(...) → bucket column + groupby().agg()

Results match the Python executor row for row.
"""

from __future__ import annotations

from typing import Iterable, List

try:
    import pandas as pd

    PANDAS_AVAILABLE = True
except ImportError:
    PANDAS_AVAILABLE = False
    pd = None

from fluxline.core.types import Point, ResultRow
from fluxline.sql.ast_nodes import DEFAULT_BUCKET_WIDTH_NS, Aggregation, QueryDescriptor

COLUMNS = ["time", "field", "value"]


class PandasExecutor:
    """
    Pandas-based executor for bucketed aggregation

    Worth it for large point sets: bucketing and reduction run vectorized.
    """

    def __init__(self):
        """Initialize pandas executor"""
        if not PANDAS_AVAILABLE:
            raise ImportError(
                "Pandas backend requires pandas library. Install `fluxline[pandas]`"
            )

    def execute(self, descriptor: QueryDescriptor, points: Iterable[Point]) -> List[ResultRow]:
        """
        Execute the descriptor over points

        Args:
            descriptor: Interpreted SELECT descriptor
            points: Points ascending by timestamp, already range filtered

        Returns:
            List of result rows
        """
        df = self._load_dataframe(points)
        if df.empty:
            return []

        if descriptor.field != "*":
            df = df[df["field"] == descriptor.field]

        if descriptor.aggregation is None:
            return [
                ResultRow(int(row.time), row.field, float(row.value))
                for row in df.itertuples(index=False)
            ]

        return self._apply_groupby(df, descriptor)

    def _load_dataframe(self, points: Iterable[Point]) -> pd.DataFrame:
        """Flatten points into one row per field value, keeping input order"""
        records = [
            (point.timestamp, name, value)
            for point in points
            for name, value in point.fields.items()
        ]
        return pd.DataFrame.from_records(records, columns=COLUMNS)

    def _apply_groupby(self, df: pd.DataFrame, descriptor: QueryDescriptor) -> List[ResultRow]:
        """Bucket by time and reduce each bucket"""
        if df.empty:
            return []

        width = descriptor.bucket_width_ns or DEFAULT_BUCKET_WIDTH_NS
        if width <= 0:
            raise ValueError(f"Bucket width must be positive, got {width}")

        aggregation = Aggregation(descriptor.aggregation)
        df = df.assign(bucket=df["time"] - df["time"] % width)
        reduced = df.groupby("bucket", sort=True)["value"].agg(aggregation.value)

        convert = int if aggregation == Aggregation.COUNT else float
        return [
            ResultRow(int(bucket), aggregation.value, convert(value))
            for bucket, value in reduced.items()
        ]
