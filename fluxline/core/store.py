"""
Point store collaborator

The query engine only needs three operations from storage: save a field value,
range-query a measurement, and list measurement names. PointStore describes
that contract; MemoryStore implements it in process.
"""

import bisect
import threading
from typing import Dict, List, Mapping, Optional, Protocol

from fluxline.core.types import Point


class PointStore(Protocol):
    """Storage contract consumed by ingestion and query execution"""

    def save(
        self,
        measurement: str,
        field: str,
        value: float,
        tags: Optional[Mapping[str, str]],
        timestamp: int,
    ) -> None: ...

    def range_query(self, measurement: str, start_ns: int, end_ns: int) -> List[Point]: ...

    def list_measurements(self) -> List[str]: ...


class MemoryStore:
    """
    In-memory point store

    Each saved field value becomes its own point, like a row in a table keyed
    by (measurement, timestamp). Points are kept sorted by timestamp per
    measurement; points with equal timestamps keep their insertion order.
    Safe to share between threads.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._series: Dict[str, List[Point]] = {}
        self._keys: Dict[str, List[int]] = {}

    def save(
        self,
        measurement: str,
        field: str,
        value: float,
        tags: Optional[Mapping[str, str]],
        timestamp: int,
    ) -> None:
        """Store a single field value as a point"""
        point = Point(
            measurement=measurement,
            timestamp=timestamp,
            fields={field: float(value)},
            tags=dict(tags or {}),
        )
        with self._lock:
            keys = self._keys.setdefault(measurement, [])
            series = self._series.setdefault(measurement, [])
            index = bisect.bisect_right(keys, timestamp)
            keys.insert(index, timestamp)
            series.insert(index, point)

    def range_query(self, measurement: str, start_ns: int, end_ns: int) -> List[Point]:
        """
        Return the points of a measurement with start_ns <= timestamp <= end_ns

        Returns:
            New list of points ascending by timestamp (empty for an unknown
            measurement)
        """
        with self._lock:
            keys = self._keys.get(measurement, [])
            lo = bisect.bisect_left(keys, start_ns)
            hi = bisect.bisect_right(keys, end_ns)
            return self._series.get(measurement, [])[lo:hi]

    def list_measurements(self) -> List[str]:
        """Return all measurement names holding at least one point"""
        with self._lock:
            return sorted(self._series)

    def __len__(self) -> int:
        with self._lock:
            return sum(len(series) for series in self._series.values())
