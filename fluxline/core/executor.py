"""
Query Executor - builds and runs operator chains from a descriptor

Takes an interpreted SELECT descriptor and the points returned by the store's
range query, and constructs the operators that produce result rows using the
Volcano pull-based model.
"""

import logging
from typing import Iterable, List

from fluxline.core.types import Point, ResultRow
from fluxline.operators.base import Operator
from fluxline.operators.bucket import TimeBucketAggregate
from fluxline.operators.project import Project
from fluxline.operators.scan import Scan
from fluxline.sql.ast_nodes import DEFAULT_BUCKET_WIDTH_NS, QueryDescriptor

logger = logging.getLogger(__name__)

BACKENDS = ("python", "pandas")


class Executor:
    """
    Query executor - builds the operator chain for a descriptor

    Operator chain:
        TimeBucketAggregate (aggregation requested)   Project (raw points)
                ↓                                          ↓
              Scan                                       Scan
                ↓                                          ↓
        points from the store                      points from the store
    """

    def execute(self, descriptor: QueryDescriptor, points: Iterable[Point]) -> List[ResultRow]:
        """
        Execute the descriptor over points

        Args:
            descriptor: Interpreted SELECT descriptor
            points: Points ascending by timestamp, already limited to the
                descriptor's time range

        Returns:
            List of result rows
        """
        plan = self.build_plan(descriptor, points)
        rows = list(plan)
        logger.debug("%r produced %d rows", plan, len(rows))
        return rows

    def build_plan(self, descriptor: QueryDescriptor, points: Iterable[Point]) -> Operator:
        """Build the operator chain, Scan at the bottom"""
        plan: Operator = Scan(points)

        if descriptor.aggregation is None:
            return Project(plan, descriptor.field)

        width = descriptor.bucket_width_ns or DEFAULT_BUCKET_WIDTH_NS
        return TimeBucketAggregate(plan, descriptor.field, descriptor.aggregation, width)


def aggregate(
    descriptor: QueryDescriptor, points: Iterable[Point], backend: str = "python"
) -> List[ResultRow]:
    """
    Compute the result rows of a SELECT descriptor

    Args:
        descriptor: Interpreted SELECT descriptor
        points: Points ascending by timestamp, already range filtered
        backend: "python" (operator chain) or "pandas" (DataFrame group-by)

    Returns:
        List of (timestamp, label, value) rows. Raw rows are labelled with
        the field name, aggregated rows with the aggregation name.

    Raises:
        ValueError: If the backend is unknown
        ImportError: If the pandas backend is requested without pandas

    Examples:
        >>> aggregate(interpret("SELECT mean(v) FROM m GROUP BY time(1m)"), points)
        [ResultRow(timestamp=0, label='mean', value=1.5), ...]
    """
    if backend == "python":
        return Executor().execute(descriptor, points)
    if backend == "pandas":
        from fluxline.core.pandas_executor import PandasExecutor

        return PandasExecutor().execute(descriptor, points)

    raise ValueError(f"Unknown backend: {backend}. Available backends: {', '.join(BACKENDS)}")
