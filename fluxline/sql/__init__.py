"""
Query interpretation: descriptors and the query parser
"""

from fluxline.sql.ast_nodes import Aggregation, Command, QueryDescriptor
from fluxline.sql.parser import QueryError, QueryErrorKind, QueryParser, interpret

__all__ = [
    "Aggregation",
    "Command",
    "QueryDescriptor",
    "QueryError",
    "QueryErrorKind",
    "QueryParser",
    "interpret",
]
