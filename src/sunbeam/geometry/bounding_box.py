"""Axis-aligned bounding boxes with a slab intersection test."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from sunbeam.core.arrays import FloatArray
from sunbeam.core.ray import Interval, Ray
from sunbeam.core.vector import Vector3, VectorLike, as_vector


@dataclass(frozen=True, slots=True, init=False)
class BoundingBox:
    """An axis-aligned box given by two opposite corners.

    Attributes:
        lower: The corner with the lowest coordinate values.
        upper: The corner with the highest coordinate values.
    """

    lower: Vector3
    upper: Vector3

    def __init__(self, first_corner: VectorLike, second_corner: VectorLike) -> None:
        a = as_vector(first_corner)
        b = as_vector(second_corner)
        object.__setattr__(self, "lower", Vector3(min(a.x, b.x), min(a.y, b.y), min(a.z, b.z)))
        object.__setattr__(self, "upper", Vector3(max(a.x, b.x), max(a.y, b.y), max(a.z, b.z)))

    def intersects(self, ray: Ray) -> bool:
        """Slab test: does the ray pass through the box?

        The ray is intersected parametrically with the x, y and z slabs,
        narrowing one Interval of ray parameters. An axis along which the
        ray does not move either always overlaps (origin inside the slab) or
        never does.

        Args:
            ray: The ray to test.

        Returns:
            False if the slabs have no common parameter, or if the whole
            overlap lies behind the ray origin. True otherwise.
        """
        t_interval = Interval(-math.inf, math.inf)

        for origin, direction, low, high in (
            (ray.origin.x, ray.direction.x, self.lower.x, self.upper.x),
            (ray.origin.y, ray.direction.y, self.lower.y, self.upper.y),
            (ray.origin.z, ray.direction.z, self.lower.z, self.upper.z),
        ):
            if direction == 0.0:
                if not low <= origin <= high:
                    return False
                continue
            slab = Interval((low - origin) / direction, (high - origin) / direction)
            narrowed = t_interval.intersection(slab)
            if narrowed is None:
                return False
            t_interval = narrowed

        return t_interval.lo >= 0.0 or t_interval.hi >= 0.0

    def intersects_batch(self, origins: FloatArray, directions: FloatArray) -> np.ndarray:
        """Slab test for N rays at once.

        Element i equals intersects() for the ray origins[i] +
        t * directions[i].

        Args:
            origins: (N, 3) ray origins.
            directions: (N, 3) ray directions.

        Returns:
            (N,) bool array.
        """
        count = len(directions)
        lower = np.full(count, -math.inf)
        upper = np.full(count, math.inf)
        inside = np.ones(count, dtype=bool)

        for axis, (low, high) in enumerate(zip(self.lower, self.upper)):
            origin = origins[:, axis]
            direction = directions[:, axis]
            parallel = direction == 0.0
            inside &= ~parallel | ((low <= origin) & (origin <= high))

            with np.errstate(divide="ignore", invalid="ignore"):
                t_low = (low - origin) / direction
                t_high = (high - origin) / direction
            # A parallel axis leaves the interval unchanged
            lower = np.where(parallel, lower, np.maximum(lower, np.minimum(t_low, t_high)))
            upper = np.where(parallel, upper, np.minimum(upper, np.maximum(t_low, t_high)))

        return inside & (lower <= upper) & ((lower >= 0.0) | (upper >= 0.0))
