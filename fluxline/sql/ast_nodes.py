"""
Query descriptor definitions

These dataclasses represent the parsed structure of a query. The grammar is
small: SHOW DATABASES, SHOW MEASUREMENTS, CREATE DATABASE, USE and a single
field or aggregate SELECT with a time range and time bucketing.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

NANOS_PER_MILLI = 1_000_000
NANOS_PER_MINUTE = 60 * 1_000_000_000
DEFAULT_BUCKET_WIDTH_NS = 5 * NANOS_PER_MINUTE


class Command(Enum):
    """Kinds of statement the interpreter recognizes"""

    SELECT_POINTS = "SELECT_POINTS"
    SHOW_DATABASES = "SHOW_DATABASES"
    SHOW_MEASUREMENTS = "SHOW_MEASUREMENTS"
    CREATE_DATABASE = "CREATE_DATABASE"
    USE = "USE"

    def __str__(self) -> str:
        return self.value


class Aggregation(Enum):
    """Aggregate functions allowed in the SELECT clause"""

    MEAN = "mean"
    SUM = "sum"
    COUNT = "count"
    MIN = "min"
    MAX = "max"

    def __str__(self) -> str:
        return self.value


@dataclass
class QueryDescriptor:
    """
    Represents an interpreted query

    Examples:
        SHOW MEASUREMENTS
        CREATE DATABASE telemetry
        SELECT * FROM cpu
        SELECT mean("value") FROM "cpu" WHERE time >= 1000ms and time <= 2000ms GROUP BY time(1m)
    """

    command: Command
    database: Optional[str] = None  # CREATE DATABASE / USE target
    measurement: Optional[str] = None
    field: str = "*"
    aggregation: Optional[Aggregation] = None
    start_ns: int = 0
    end_ns: int = 0
    bucket_width_ns: Optional[int] = None  # None: return raw points

    def __repr__(self) -> str:
        if self.command != Command.SELECT_POINTS:
            target = f" {self.database}" if self.database else ""
            return f"{self.command}{target}"

        selector = f"{self.aggregation}({self.field})" if self.aggregation else self.field
        parts = [f"SELECT {selector}", f"FROM {self.measurement}"]
        parts.append(f"WHERE {self.start_ns} <= time <= {self.end_ns}")
        if self.bucket_width_ns:
            parts.append(f"BUCKET {self.bucket_width_ns}ns")
        return " ".join(parts)
