"""Ray and interval data structures.

This module provides the Ray value type cast through the scene and the
closed Interval used by the bounding-box slab test.

Example:
    >>> from sunbeam.core.ray import Interval, Ray
    >>> from sunbeam.core.vector import Vector3
    >>> ray = Ray(Vector3.zero(), Vector3(0.0, 3.0, 0.0))
    >>> ray.direction  # normalized at construction
    Vector3(x=0.0, y=1.0, z=0.0)
    >>> point = ray.at(5.0)  # Point 5 units along the ray
    >>> Interval(2.0, -1.0).endpoints
    (-1.0, 2.0)
"""

from __future__ import annotations

from dataclasses import dataclass

from sunbeam.core.vector import Vector3, VectorLike, as_vector


@dataclass(frozen=True, slots=True, init=False)
class Ray:
    """A half-line cast from `origin` along `direction`.

    Attributes:
        origin: The starting point of the ray.
        direction: The direction of the ray. Always unit length, or zero
            if the ray was built from a zero direction.
    """

    origin: Vector3
    direction: Vector3

    def __init__(self, origin: VectorLike, direction: VectorLike) -> None:
        object.__setattr__(self, "origin", as_vector(origin))
        object.__setattr__(self, "direction", as_vector(direction).normalize())

    def at(self, t: float) -> Vector3:
        """Compute the point origin + t * direction."""
        return self.origin + self.direction * t


@dataclass(frozen=True, slots=True, init=False)
class Interval:
    """A closed interval [lo, hi] of real numbers.

    The endpoints may be given in either order; they are sorted so that
    lo <= hi always holds. Infinite endpoints are allowed.
    """

    lo: float
    hi: float

    def __init__(self, first_endpoint: float, second_endpoint: float) -> None:
        if first_endpoint <= second_endpoint:
            lo, hi = first_endpoint, second_endpoint
        else:
            lo, hi = second_endpoint, first_endpoint
        object.__setattr__(self, "lo", lo)
        object.__setattr__(self, "hi", hi)

    @property
    def endpoints(self) -> tuple[float, float]:
        """The (lo, hi) pair."""
        return (self.lo, self.hi)

    def intersection(self, other: Interval) -> Interval | None:
        """Intersect two closed intervals.

        Args:
            other: The interval to intersect with.

        Returns:
            The overlap of the two intervals, or None if it is empty.
            Intervals that only touch at one point intersect in that point.
        """
        lower = max(self.lo, other.lo)
        upper = min(self.hi, other.hi)
        if upper < lower:
            return None
        return Interval(lower, upper)
