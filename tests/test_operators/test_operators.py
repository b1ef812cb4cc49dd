"""
Tests for query operators
"""

import pytest

from fluxline.core.types import Point, ResultRow
from fluxline.operators.bucket import TimeBucketAggregate, bucket_start
from fluxline.operators.project import Project
from fluxline.operators.scan import Scan
from fluxline.sql.ast_nodes import Aggregation

SECOND = 1_000_000_000
MINUTE = 60 * SECOND


class TestScan:
    """Test Scan operator"""

    def test_yields_points_in_order(self, make_points):
        points = make_points([1, 2, 3])
        assert list(Scan(points)) == points

    def test_repeatable(self, make_points):
        """Test a scan over a list can run twice"""
        scan = Scan(make_points([1, 2]))
        assert list(scan) == list(scan)


class TestProject:
    """Test Project operator (raw rows)"""

    def test_selected_field(self, make_points):
        """Test one row per point with the field"""
        rows = list(Project(Scan(make_points([10, 20], [1.0, 2.0])), "value"))

        assert rows == [ResultRow(10, "value", 1.0), ResultRow(20, "value", 2.0)]

    def test_missing_field_skipped(self):
        """Test points without the field produce no row"""
        points = [
            Point("cpu", 1, {"value": 1.0}),
            Point("cpu", 2, {"temp": 5.0}),
        ]
        rows = list(Project(Scan(points), "value"))

        assert rows == [ResultRow(1, "value", 1.0)]

    def test_star_emits_every_field(self):
        """Test * emits one row per field, in the point's order"""
        points = [Point("cpu", 1, {"b": 2.0, "a": 1.0}), Point("cpu", 2, {"a": 3.0})]
        rows = list(Project(Scan(points), "*"))

        assert rows == [
            ResultRow(1, "b", 2.0),
            ResultRow(1, "a", 1.0),
            ResultRow(2, "a", 3.0),
        ]

    def test_explain(self, make_points):
        plan = Project(Scan(make_points([1])), "value")
        assert plan.explain() == ["Project(value)", "  Scan(points)"]


class TestBucketStart:
    """Test bucket alignment"""

    def test_epoch_aligned(self):
        assert bucket_start(0, MINUTE) == 0
        assert bucket_start(30 * SECOND, MINUTE) == 0
        assert bucket_start(70 * SECOND, MINUTE) == MINUTE
        assert bucket_start(MINUTE, MINUTE) == MINUTE

    def test_negative_floors(self):
        """Test negative timestamps go to the earlier bucket"""
        assert bucket_start(-1, MINUTE) == -MINUTE


class TestTimeBucketAggregate:
    """Test time bucketed aggregation"""

    def test_mean_two_buckets(self, make_points):
        """Test points at 0s, 30s, 70s with 1 minute buckets"""
        points = make_points([0, 30 * SECOND, 70 * SECOND], [1.0, 3.0, 10.0])
        rows = list(TimeBucketAggregate(Scan(points), "value", Aggregation.MEAN, MINUTE))

        assert rows == [ResultRow(0, "mean", 2.0), ResultRow(MINUTE, "mean", 10.0)]

    def test_buckets_sorted_regardless_of_input(self, make_points):
        """Test output order is ascending even for unordered input"""
        points = make_points([3 * MINUTE, 0, 2 * MINUTE], [3.0, 1.0, 2.0])
        rows = list(TimeBucketAggregate(Scan(points), "value", Aggregation.SUM, MINUTE))

        assert [row.timestamp for row in rows] == [0, 2 * MINUTE, 3 * MINUTE]

    def test_missing_field_skipped(self):
        """Test points without the field do not create buckets"""
        points = [Point("cpu", 0, {"value": 4.0}), Point("cpu", 2 * MINUTE, {"temp": 1.0})]
        rows = list(TimeBucketAggregate(Scan(points), "value", Aggregation.MEAN, MINUTE))

        assert rows == [ResultRow(0, "mean", 4.0)]

    @pytest.mark.parametrize(
        "aggregation,expected",
        [
            (Aggregation.MEAN, [2.0, 10.0]),
            (Aggregation.SUM, [4.0, 10.0]),
            (Aggregation.COUNT, [2, 1]),
            (Aggregation.MIN, [1.0, 10.0]),
            (Aggregation.MAX, [3.0, 10.0]),
        ],
    )
    def test_all_aggregations(self, make_points, aggregation, expected):
        """Test every aggregation reduces per bucket"""
        points = make_points([0, 30 * SECOND, 70 * SECOND], [1.0, 3.0, 10.0])
        rows = list(TimeBucketAggregate(Scan(points), "value", aggregation, MINUTE))

        assert [row.value for row in rows] == expected
        assert {row.label for row in rows} == {aggregation.value}

    def test_star_aggregates_all_fields(self):
        """Test * feeds every field value into the bucket"""
        points = [Point("cpu", 0, {"a": 1.0, "b": 3.0})]
        rows = list(TimeBucketAggregate(Scan(points), "*", Aggregation.COUNT, MINUTE))

        assert rows == [ResultRow(0, "count", 2)]

    def test_empty_input(self):
        assert list(TimeBucketAggregate(Scan([]), "value", Aggregation.MEAN, MINUTE)) == []

    def test_invalid_width(self):
        with pytest.raises(ValueError):
            TimeBucketAggregate(Scan([]), "value", Aggregation.MEAN, 0)
