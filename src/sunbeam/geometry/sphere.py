"""Sphere primitive with a bounding-box pre-test.

The ray-sphere intersection solves

    |origin + t * direction - center|^2 = radius^2

which, for a unit direction and oc = center - origin, reduces to

    t^2 - 2 (oc . d) t + (|oc|^2 - radius^2) = 0

with reduced discriminant (oc . d)^2 - (|oc|^2 - radius^2). Before solving,
the ray is tested against the sphere's axis-aligned bounding box.

Example:
    >>> from sunbeam.core.ray import Ray
    >>> from sunbeam.geometry.sphere import Sphere
    >>> sphere = Sphere((0.0, 5.0, 0.0), 1.0)
    >>> sphere.closest_intersection(Ray((0.0, 0.0, 0.0), (0.0, 1.0, 0.0))).distance
    4.0
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from sunbeam.core.arrays import FloatArray, as_row, dot_rows, normalize_rows, points_at
from sunbeam.core.ray import Ray
from sunbeam.core.vector import Vector3, VectorLike, as_vector
from sunbeam.geometry.bounding_box import BoundingBox
from sunbeam.geometry.surface import Surface, SurfaceHit, SurfaceHits


@dataclass(frozen=True, init=False)
class Sphere(Surface):
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere.
        radius: The radius of the sphere. Positivity is the caller's
            responsibility; a zero radius is tolerated and never hit
            except tangentially.
    """

    center: Vector3
    radius: float

    def __init__(self, center: VectorLike, radius: float) -> None:
        object.__setattr__(self, "center", as_vector(center))
        object.__setattr__(self, "radius", float(radius))

    def bounding_box(self) -> BoundingBox:
        """The smallest axis-aligned box containing the sphere."""
        half_extent = Vector3.ones() * self.radius
        return BoundingBox(self.center - half_extent, self.center + half_extent)

    def closest_intersection(self, ray: Ray) -> SurfaceHit | None:
        """Intersect the ray with the sphere.

        Returns the near root of the quadratic. The root is not checked
        against the ray origin, so a ray starting inside the sphere (or
        past it) gets a negative distance; the tracer filters those out.

        Args:
            ray: The ray to test.

        Returns:
            The near-root distance with the outward unit normal, or None if
            the ray misses the bounding box or the sphere.
        """
        if not self.bounding_box().intersects(ray):
            return None

        origin_to_center = self.center - ray.origin
        b = origin_to_center.dot(ray.direction)
        discriminant = b * b - (origin_to_center.norm2() - self.radius * self.radius)
        if discriminant < 0.0:
            return None

        distance = b - math.sqrt(discriminant)
        hit_point = ray.at(distance)
        if self.radius == 0.0:
            normal = (hit_point - self.center).normalize()
        else:
            normal = (hit_point - self.center) * (1.0 / self.radius)
        return SurfaceHit(distance, normal)

    def intersect_batch(self, origins: FloatArray, directions: FloatArray) -> SurfaceHits:
        """Vectorized closest_intersection() over N rays."""
        center = as_row(self.center)
        mask = self.bounding_box().intersects_batch(origins, directions)

        origin_to_center = center - origins
        b = dot_rows(origin_to_center, directions)
        discriminant = b * b - (
            dot_rows(origin_to_center, origin_to_center) - self.radius * self.radius
        )
        mask &= discriminant >= 0.0

        distances = b - np.sqrt(np.where(mask, discriminant, 0.0))
        offsets = points_at(origins, directions, distances) - center
        if self.radius == 0.0:
            normals = normalize_rows(offsets)
        else:
            normals = offsets * (1.0 / self.radius)
        return SurfaceHits(mask, distances, normals)
