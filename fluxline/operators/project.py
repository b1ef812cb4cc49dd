"""
Project operator - implements a raw (non-aggregated) SELECT

Turns points into (timestamp, field, value) rows.
"""

from collections.abc import Iterator

from fluxline.core.types import ResultRow
from fluxline.operators.base import Operator


class Project(Operator):
    """
    Project operator - selects a field (SELECT clause)

    Pulls points from child and yields one row per selected field value,
    in input order. With '*', every field of the point is emitted in the
    point's own field order; otherwise points lacking the field are skipped.
    """

    def __init__(self, child: Operator, field: str):
        """
        Initialize project operator

        Args:
            child: Child operator to pull points from
            field: Field name to select, or '*' for all fields
        """
        super().__init__(child)
        self.field = field

    def __iter__(self) -> Iterator[ResultRow]:
        for point in self.child:
            if self.field == "*":
                for name, value in point.fields.items():
                    yield ResultRow(point.timestamp, name, value)
            elif self.field in point.fields:
                yield ResultRow(point.timestamp, self.field, point.fields[self.field])

    def __repr__(self) -> str:
        return f"Project({self.field})"
