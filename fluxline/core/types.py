"""Types shared between the store and query execution."""

from dataclasses import dataclass, field
from typing import Any, Dict, NamedTuple


@dataclass(frozen=True)
class Point:
    """A stored point: float field values at a nanosecond timestamp."""

    measurement: str
    timestamp: int
    fields: Dict[str, float] = field(default_factory=dict)
    tags: Dict[str, str] = field(default_factory=dict)


class ResultRow(NamedTuple):
    """One output row of a SELECT: (timestamp, label, value)."""

    timestamp: int
    label: str
    value: Any

    def as_dict(self) -> Dict[str, Any]:
        return {"time": self.timestamp, self.label: self.value}
