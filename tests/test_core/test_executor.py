"""
Tests for the executor and the aggregate() entry point
"""

import pytest

from fluxline.core.executor import Executor, aggregate
from fluxline.core.types import Point, ResultRow
from fluxline.operators.bucket import TimeBucketAggregate
from fluxline.operators.project import Project
from fluxline.sql.ast_nodes import Aggregation, Command, QueryDescriptor
from fluxline.sql.parser import interpret

SECOND = 1_000_000_000
MINUTE = 60 * SECOND


class TestBuildPlan:
    """Test operator chain construction"""

    def test_raw_plan(self):
        descriptor = interpret("SELECT value FROM cpu")
        plan = Executor().build_plan(descriptor, [])

        assert isinstance(plan, Project)

    def test_aggregate_plan(self):
        descriptor = interpret("SELECT mean(value) FROM cpu GROUP BY time(2m)")
        plan = Executor().build_plan(descriptor, [])

        assert isinstance(plan, TimeBucketAggregate)
        assert plan.width_ns == 2 * MINUTE

    def test_missing_width_uses_default(self):
        """Test a hand-built descriptor without width gets 5 minutes"""
        descriptor = QueryDescriptor(
            command=Command.SELECT_POINTS,
            measurement="cpu",
            field="value",
            aggregation=Aggregation.MEAN,
        )
        plan = Executor().build_plan(descriptor, [])

        assert plan.width_ns == 5 * MINUTE


class TestAggregate:
    """Test aggregate() end to end over points"""

    def test_mean_buckets(self, make_points):
        """Test points at 0, 30s and 70s in 1 minute buckets"""
        descriptor = interpret("SELECT mean(value) FROM cpu GROUP BY time(1m)")
        points = make_points([0, 30 * SECOND, 70 * SECOND], [2.0, 4.0, 9.0])

        rows = aggregate(descriptor, points)

        assert rows == [ResultRow(0, "mean", 3.0), ResultRow(MINUTE, "mean", 9.0)]

    def test_raw_rows(self, make_points):
        """Test raw rows keep input order"""
        descriptor = interpret("SELECT value FROM cpu")
        rows = aggregate(descriptor, make_points([5, 6], [1.0, 2.0]))

        assert rows == [ResultRow(5, "value", 1.0), ResultRow(6, "value", 2.0)]

    def test_raw_star(self):
        descriptor = interpret("SELECT * FROM cpu")
        points = [Point("cpu", 1, {"a": 1.0, "b": 2.0})]

        assert aggregate(descriptor, points) == [ResultRow(1, "a", 1.0), ResultRow(1, "b", 2.0)]

    def test_points_iterator(self, make_points):
        """Test a one-shot iterator of points is accepted"""
        descriptor = interpret("SELECT count(value) FROM cpu GROUP BY time(1m)")
        rows = aggregate(descriptor, iter(make_points([0, 1, 2])))

        assert rows == [ResultRow(0, "count", 3)]

    def test_default_bucket_without_group_by(self, make_points):
        """Test aggregation without GROUP BY buckets by 5 minutes"""
        descriptor = interpret("SELECT sum(value) FROM cpu")
        points = make_points([0, 4 * MINUTE, 5 * MINUTE], [1.0, 2.0, 4.0])

        rows = aggregate(descriptor, points)

        assert rows == [ResultRow(0, "sum", 3.0), ResultRow(5 * MINUTE, "sum", 4.0)]

    def test_unknown_backend(self):
        with pytest.raises(ValueError, match="Unknown backend"):
            aggregate(interpret("SELECT * FROM cpu"), [], backend="duckdb")

    def test_result_row_as_dict(self):
        assert ResultRow(1, "mean", 2.0).as_dict() == {"time": 1, "mean": 2.0}
