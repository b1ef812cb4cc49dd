"""
TimeBucketAggregate operator

Groups points into fixed-width, epoch-aligned time buckets and computes an
aggregate function per bucket.
"""

from collections.abc import Iterator

from fluxline.core.types import ResultRow
from fluxline.operators.base import Operator
from fluxline.sql.ast_nodes import Aggregation
from fluxline.utils.aggregates import Aggregator, create_aggregator


def bucket_start(timestamp: int, width: int) -> int:
    """
    Align a timestamp to the start of its bucket

    Alignment is to the epoch, not to the start of the queried range.
    Negative timestamps floor towards the earlier bucket.
    """
    return timestamp - (timestamp % width)


class TimeBucketAggregate(Operator):
    """
    GROUP BY time(...) operator with aggregation

    Uses hash-based aggregation:
    1. Scan all input points
    2. Assign each point to bucket = ts - ts % width
    3. Maintain one aggregator per bucket
    4. Yield one row per bucket, ascending by bucket timestamp

    Points without the selected field contribute nothing. With '*', every
    field value of a point is fed to the bucket's aggregator.

    Note: This operator materializes one aggregator per bucket in memory.
    """

    def __init__(self, child: Operator, field: str, aggregation: Aggregation, width_ns: int):
        """
        Initialize the operator

        Args:
            child: Child operator yielding points
            field: Field to aggregate, or '*' for all fields
            aggregation: Aggregate function
            width_ns: Bucket width in nanoseconds

        Raises:
            ValueError: If the bucket width is not positive
        """
        if width_ns <= 0:
            raise ValueError(f"Bucket width must be positive, got {width_ns}")
        super().__init__(child)
        self.field = field
        self.aggregation = Aggregation(aggregation)
        self.width_ns = width_ns

    def __iter__(self) -> Iterator[ResultRow]:
        buckets: dict[int, Aggregator] = {}

        for point in self.child:
            if self.field == "*":
                values = list(point.fields.values())
            elif self.field in point.fields:
                values = [point.fields[self.field]]
            else:
                continue
            if not values:
                continue

            bucket = bucket_start(point.timestamp, self.width_ns)
            if bucket not in buckets:
                buckets[bucket] = create_aggregator(self.aggregation)
            for value in values:
                buckets[bucket].update(value)

        label = self.aggregation.value
        for bucket in sorted(buckets):
            yield ResultRow(bucket, label, buckets[bucket].result())

    def __repr__(self) -> str:
        return f"TimeBucketAggregate({self.aggregation}({self.field}), width={self.width_ns}ns)"
