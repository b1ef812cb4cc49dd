"""
fluxline - line protocol codec and time-bucketed query engine

This package decodes and encodes the line protocol text format, interprets a
small time-series query language, and aggregates stored points into
fixed-width time buckets.
"""

__version__ = "0.1.0"

# Main API
from fluxline.core.executor import aggregate
from fluxline.core.query import Session
from fluxline.protocol.parser import decode
from fluxline.protocol.serializer import encode
from fluxline.sql.parser import interpret

__all__ = ["__version__", "Session", "aggregate", "decode", "encode", "interpret"]
