"""
Scan operator - yields points from a store result

This is a leaf operator (has no child).
"""

from collections.abc import Iterable, Iterator

from fluxline.core.types import Point
from fluxline.operators.base import Operator


class Scan(Operator):
    """
    Scan operator - wrapper around the points returned by a range query

    The points are expected in ascending timestamp order and are only read.
    """

    def __init__(self, points: Iterable[Point]):
        super().__init__(child=None)
        self.points = points

    def __iter__(self) -> Iterator[Point]:
        yield from self.points

    def __repr__(self) -> str:
        return "Scan(points)"
