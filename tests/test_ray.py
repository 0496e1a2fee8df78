"""Unit tests for Ray and Interval."""

import math

import pytest


class TestRay:
    """Test the Ray value type."""

    def test_direction_is_normalized(self):
        """Test that the direction is unit length after construction."""
        from sunbeam.core.ray import Ray
        from sunbeam.core.vector import Vector3

        ray = Ray((1.0, 2.0, 3.0), (0.0, 3.0, 4.0))

        assert ray.origin == Vector3(1.0, 2.0, 3.0)
        assert ray.direction.norm() == pytest.approx(1.0)
        assert ray.direction.y == pytest.approx(0.6)
        assert ray.direction.z == pytest.approx(0.8)

    def test_at_moves_along_direction(self):
        """Test point evaluation along the ray."""
        from sunbeam.core.ray import Ray
        from sunbeam.core.vector import Vector3

        ray = Ray(Vector3(1.0, 0.0, 0.0), Vector3(0.0, 5.0, 0.0))

        assert ray.at(0.0) == Vector3(1.0, 0.0, 0.0)
        assert ray.at(2.5) == Vector3(1.0, 2.5, 0.0)
        assert ray.at(-1.0) == Vector3(1.0, -1.0, 0.0)

    def test_zero_direction_is_tolerated(self):
        """Test that a degenerate ray keeps a zero direction."""
        from sunbeam.core.ray import Ray
        from sunbeam.core.vector import Vector3

        ray = Ray((0.0, 0.0, 0.0), (0.0, 0.0, 0.0))

        assert ray.direction == Vector3.zero()


class TestInterval:
    """Test the closed Interval."""

    def test_endpoints_are_sorted(self):
        """Test that endpoints may be given in either order."""
        from sunbeam.core.ray import Interval

        assert Interval(2.0, -1.0).endpoints == (-1.0, 2.0)
        assert Interval(-1.0, 2.0) == Interval(2.0, -1.0)

    def test_overlapping_intersection(self):
        """Test the overlap of two intervals."""
        from sunbeam.core.ray import Interval

        result = Interval(0.0, 5.0).intersection(Interval(3.0, 8.0))

        assert result == Interval(3.0, 5.0)

    def test_disjoint_intersection_is_none(self):
        """Test that non-overlapping intervals have no intersection."""
        from sunbeam.core.ray import Interval

        assert Interval(0.0, 1.0).intersection(Interval(2.0, 3.0)) is None
        assert Interval(2.0, 3.0).intersection(Interval(0.0, 1.0)) is None

    def test_touching_intervals_share_a_point(self):
        """Test that closed intervals touching at an endpoint intersect."""
        from sunbeam.core.ray import Interval

        result = Interval(0.0, 1.0).intersection(Interval(1.0, 2.0))

        assert result is not None
        assert result.endpoints == (1.0, 1.0)

    def test_infinite_endpoints(self):
        """Test intersection with an unbounded interval."""
        from sunbeam.core.ray import Interval

        everything = Interval(-math.inf, math.inf)

        assert everything.intersection(Interval(-2.0, 4.0)) == Interval(-2.0, 4.0)
