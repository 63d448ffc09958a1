"""Unit tests for Ramer–Douglas–Peucker simplification."""

from __future__ import annotations

import math

import pytest

from zone_geometry.geometry.simplify import simplify, squared_segment_distance


class TestSquaredSegmentDistance:
    def test_perpendicular_foot_inside_segment(self) -> None:
        assert squared_segment_distance((1.0, 2.0), (0.0, 0.0), (4.0, 0.0)) == pytest.approx(4.0)

    def test_beyond_segment_end_measures_to_endpoint(self) -> None:
        assert squared_segment_distance((7.0, 4.0), (0.0, 0.0), (4.0, 0.0)) == pytest.approx(25.0)

    def test_degenerate_segment(self) -> None:
        assert squared_segment_distance((3.0, 4.0), (0.0, 0.0), (0.0, 0.0)) == pytest.approx(25.0)


class TestSimplify:
    def test_two_points_unchanged(self) -> None:
        points = [(0.0, 0.0), (1.0, 1.0)]
        assert simplify(points, 10.0) == points

    @pytest.mark.parametrize("tolerance", [0.0, 0.5, 1e6])
    def test_three_points_unchanged(self, tolerance: float) -> None:
        points = [(0.0, 0.0), (5.0, 0.0), (10.0, 0.0)]
        assert simplify(points, tolerance) == points

    def test_collinear_line_reduces_to_endpoints(self) -> None:
        points = [(float(i), 2.0 * i) for i in range(5)]
        assert simplify(points, 0.01) == [(0.0, 0.0), (4.0, 8.0)]

    def test_keeps_point_beyond_tolerance(self) -> None:
        points = [(0.0, 0.0), (1.0, 0.05), (2.0, 3.0), (3.0, 0.05), (4.0, 0.0)]
        assert simplify(points, 1.0) == [(0.0, 0.0), (2.0, 3.0), (4.0, 0.0)]

    def test_distance_equal_to_tolerance_is_dropped(self) -> None:
        points = [(0.0, 0.0), (1.0, 0.0), (2.0, 1.0), (3.0, 0.0), (4.0, 0.0)]
        assert simplify(points, 1.0) == [(0.0, 0.0), (4.0, 0.0)]

    def test_zero_tolerance_keeps_every_bend(self) -> None:
        points = [(0.0, 0.0), (1.0, 1.0), (2.0, 0.0), (3.0, 1.0), (4.0, 0.0)]
        assert simplify(points, 0.0) == points

    def test_tie_resolves_to_lowest_index(self) -> None:
        """(1,1) and (2,1) are equally far from the chord; (1,1) wins."""
        points = [(0.0, 0.0), (1.0, 1.0), (2.0, 1.0), (3.0, 0.0)]
        assert simplify(points, 0.5) == [(0.0, 0.0), (1.0, 1.0), (3.0, 0.0)]

    def test_preserves_order_and_identity(self) -> None:
        points = [(0.0, 0.0), (1.0, 5.0), (2.0, 0.0), (3.0, 5.0), (4.0, 0.0)]
        result = simplify(points, 0.1)
        assert result == points
        assert all(r is p for r, p in zip(result, points, strict=True))

    def test_does_not_mutate_input(self) -> None:
        points = [(float(i), 0.0) for i in range(6)]
        snapshot = list(points)
        simplify(points, 1.0)
        assert points == snapshot

    def test_negative_tolerance_rejected(self) -> None:
        with pytest.raises(ValueError, match="tolerance"):
            simplify([(0.0, 0.0), (1.0, 1.0), (2.0, 0.0), (3.0, 1.0)], -0.1)

    def test_large_curved_ring(self) -> None:
        """Ten thousand points on an arc: no recursion limits, nothing collinear dropped."""
        count = 10_001
        points = [
            (math.cos(math.pi * i / (count - 1)), math.sin(math.pi * i / (count - 1)))
            for i in range(count)
        ]
        result = simplify(points, 0.0)
        assert len(result) == count
        assert result[0] == points[0]
        assert result[-1] == points[-1]

    def test_degree_tolerance_on_projected_ring(self) -> None:
        """Default 1e-4 degree tolerance drops sub-10 m wiggles on a zone edge."""
        points = [(-5.40000, 33.30000), (-5.39500, 33.30002), (-5.39000, 33.30000), (-5.39000, 33.31000)]
        assert simplify(points, 0.0001) == [(-5.40000, 33.30000), (-5.39000, 33.30000), (-5.39000, 33.31000)]
