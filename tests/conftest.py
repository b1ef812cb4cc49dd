"""
Pytest configuration and shared fixtures
"""

import pytest

from fluxline.core.store import MemoryStore
from fluxline.core.types import Point

SECOND = 1_000_000_000


@pytest.fixture
def sample_lines():
    """Sample line protocol batch"""
    return (
        "cpu,host=server1,region=us-west value=10,temp=20i 0\n"
        "cpu,host=server1,region=us-west value=20,temp=22i 30000000000\n"
        "cpu,host=server2 value=60 70000000000\n"
        "mem,host=server1 used=512i,free=true 10000000000\n"
    )


@pytest.fixture
def loaded_store(sample_lines):
    """MemoryStore loaded with sample_lines"""
    from fluxline.core.ingest import write_lines

    store = MemoryStore()
    write_lines(sample_lines, store)
    return store


@pytest.fixture
def make_points():
    """Factory for points of a single field at the given timestamps"""

    def _make(timestamps, values=None, field="value", measurement="cpu"):
        values = values if values is not None else [float(i + 1) for i in range(len(timestamps))]
        return [
            Point(measurement=measurement, timestamp=ts, fields={field: value})
            for ts, value in zip(timestamps, values)
        ]

    return _make
