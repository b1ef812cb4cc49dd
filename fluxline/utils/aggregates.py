"""
Aggregation function implementations

Provides MEAN, SUM, COUNT, MIN, MAX aggregations over field values.
Each aggregator maintains state and can be updated incrementally, one
aggregator per time bucket.
"""

from typing import Optional

from fluxline.sql.ast_nodes import Aggregation


class Aggregator:
    """Base class for aggregators"""

    def update(self, value: float) -> None:
        """Update aggregator with a new value"""
        raise NotImplementedError

    def result(self):
        """Get final aggregated result"""
        raise NotImplementedError


class MeanAggregator(Aggregator):
    """MEAN aggregator - sum of values divided by their count"""

    def __init__(self):
        self.sum = 0.0
        self.count = 0

    def update(self, value: float) -> None:
        self.sum += value
        self.count += 1

    def result(self) -> Optional[float]:
        """Return mean, or None if no values"""
        if self.count == 0:
            return None
        return self.sum / self.count


class SumAggregator(Aggregator):
    """SUM aggregator"""

    def __init__(self):
        self.sum: Optional[float] = None

    def update(self, value: float) -> None:
        if self.sum is None:
            self.sum = 0.0
        self.sum += value

    def result(self) -> Optional[float]:
        return self.sum


class CountAggregator(Aggregator):
    """COUNT aggregator - counts values"""

    def __init__(self):
        self.count = 0

    def update(self, value: float) -> None:
        self.count += 1

    def result(self) -> int:
        return self.count


class MinAggregator(Aggregator):
    """MIN aggregator - finds minimum value"""

    def __init__(self):
        self.min: Optional[float] = None

    def update(self, value: float) -> None:
        if self.min is None or value < self.min:
            self.min = value

    def result(self) -> Optional[float]:
        return self.min


class MaxAggregator(Aggregator):
    """MAX aggregator - finds maximum value"""

    def __init__(self):
        self.max: Optional[float] = None

    def update(self, value: float) -> None:
        if self.max is None or value > self.max:
            self.max = value

    def result(self) -> Optional[float]:
        return self.max


_AGGREGATORS = {
    Aggregation.MEAN: MeanAggregator,
    Aggregation.SUM: SumAggregator,
    Aggregation.COUNT: CountAggregator,
    Aggregation.MIN: MinAggregator,
    Aggregation.MAX: MaxAggregator,
}


def create_aggregator(aggregation: Aggregation) -> Aggregator:
    """
    Factory function to create appropriate aggregator

    Args:
        aggregation: Aggregate function

    Returns:
        Aggregator instance

    Raises:
        ValueError: If the aggregation is not recognized
    """
    try:
        return _AGGREGATORS[Aggregation(aggregation)]()
    except (KeyError, ValueError):
        raise ValueError(f"Unknown aggregate function: {aggregation}")
