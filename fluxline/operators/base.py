"""
Base operator class for Volcano-style query execution

The Volcano model uses pull-based execution where each operator
pulls data from its child operator on demand.
"""

from collections.abc import Iterator
from typing import Any, Optional


class Operator:
    """
    Base class for all query operators

    Operators form a chain where:
    - The leaf operator (Scan) yields points handed over by the store
    - The root operator (Project or TimeBucketAggregate) yields result rows

    Operators are generators and keep no state between executions, so a
    plan can be run from any thread.
    """

    def __init__(self, child: Optional["Operator"] = None):
        """
        Initialize operator

        Args:
            child: Child operator to pull data from (None for leaf operators)
        """
        self.child = child

    def __iter__(self) -> Iterator[Any]:
        """
        Execute operator and yield results

        Subclasses must implement this to define how they process data.
        """
        raise NotImplementedError(f"{self.__class__.__name__} must implement __iter__()")

    def explain(self, indent: int = 0) -> list[str]:
        """Generate execution plan explanation"""
        lines = [" " * indent + repr(self)]
        if self.child is not None:
            lines.extend(self.child.explain(indent + 2))
        return lines

    def __repr__(self) -> str:
        """String representation for debugging"""
        return f"{self.__class__.__name__}()"
