"""
Main Query API - runs query text against a store

This is the entry point frontends use. A Session interprets the query,
handles the SHOW / CREATE / USE commands itself, and for SELECT range-queries
the store and aggregates the points.

Example:
    >>> from fluxline import Session
    >>> from fluxline.core.store import MemoryStore
    >>> session = Session(MemoryStore(), database="mydb")
    >>> result = session.execute('SELECT mean("value") FROM cpu GROUP BY time(1m)')
    >>> for row in result.to_dicts():
    ...     print(row)
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from fluxline.core.executor import BACKENDS, aggregate
from fluxline.core.store import PointStore
from fluxline.sql.ast_nodes import Command, QueryDescriptor
from fluxline.sql.parser import interpret

logger = logging.getLogger(__name__)

DEFAULT_DATABASE = "mydb"


class SessionError(Exception):
    """Raised when a query is valid but cannot run in the session's state"""

    pass


@dataclass
class QueryResult:
    """A named series of result values"""

    name: str
    columns: List[str] = field(default_factory=list)
    values: List[List[Any]] = field(default_factory=list)

    def to_dicts(self) -> List[Dict[str, Any]]:
        """Rows as dictionaries keyed by column name"""
        return [dict(zip(self.columns, row)) for row in self.values]

    def __len__(self) -> int:
        return len(self.values)


class Session:
    """
    Query session over a point store

    Holds the known database names and the current database. Everything it
    delegates to (interpretation, aggregation) is stateless.
    """

    def __init__(
        self,
        store: PointStore,
        database: Optional[str] = None,
        backend: str = "python",
    ):
        """
        Initialize session

        Args:
            store: Point store to query
            database: Current database; SELECT needs one
            backend: Aggregation backend ("python" or "pandas")
        """
        if backend not in BACKENDS:
            raise ValueError(f"Unknown backend: {backend}. Available backends: {', '.join(BACKENDS)}")

        self.store = store
        self.backend = backend
        self.database = database
        self.databases = [DEFAULT_DATABASE]
        if database and database not in self.databases:
            self.databases.append(database)

    def execute(self, query: str, now_ns: Optional[int] = None) -> QueryResult:
        """
        Interpret and run a query

        Args:
            query: Query text
            now_ns: Override for "now" (default end of the time range)

        Returns:
            QueryResult

        Raises:
            QueryError: If the query cannot be interpreted
            SessionError: If a SELECT runs without a current database
        """
        descriptor = interpret(query, now_ns=now_ns)
        logger.info("Handling %s", descriptor.command)

        if descriptor.command == Command.SHOW_DATABASES:
            return QueryResult("databases", ["name"], [[name] for name in self.databases])

        if descriptor.command == Command.SHOW_MEASUREMENTS:
            names = self.store.list_measurements()
            return QueryResult("measurements", ["name"], [[name] for name in names])

        if descriptor.command == Command.CREATE_DATABASE:
            if descriptor.database not in self.databases:
                self.databases.append(descriptor.database)
            logger.info("Created database: %s", descriptor.database)
            return QueryResult(descriptor.database)

        if descriptor.command == Command.USE:
            self.database = descriptor.database
            logger.info("Using database: %s", descriptor.database)
            return QueryResult(descriptor.database)

        return self._select(descriptor)

    def _select(self, descriptor: QueryDescriptor) -> QueryResult:
        if not self.database:
            raise SessionError("database is required")

        logger.debug(
            "Querying measurement %s from %d to %d",
            descriptor.measurement,
            descriptor.start_ns,
            descriptor.end_ns,
        )
        points = self.store.range_query(
            descriptor.measurement, descriptor.start_ns, descriptor.end_ns
        )
        logger.debug("Found %d points in time range", len(points))

        rows = aggregate(descriptor, points, backend=self.backend)

        if descriptor.aggregation is None and descriptor.field == "*":
            return QueryResult(
                descriptor.measurement,
                ["time", "field", "value"],
                [[row.timestamp, row.label, row.value] for row in rows],
            )

        label = str(descriptor.aggregation) if descriptor.aggregation else descriptor.field
        return QueryResult(
            descriptor.measurement,
            ["time", label],
            [[row.timestamp, row.value] for row in rows],
        )
