"""Infinite plane primitive.

A plane is stored in implicit form ``normal . p = offset`` with a unit
normal. Intersections are solved analytically:

    t = (offset - normal . origin) / (normal . direction)
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from sunbeam.core.arrays import FloatArray, as_row, dot_rows
from sunbeam.core.ray import Ray
from sunbeam.core.vector import Vector3, VectorLike, as_vector
from sunbeam.geometry.surface import Surface, SurfaceHit, SurfaceHits


@dataclass(frozen=True, init=False)
class Plane(Surface):
    """An infinite plane ``normal . p = offset``.

    The normal is normalized at construction and the offset rescaled by
    the same factor, so the plane described by the arguments is kept.

    Attributes:
        normal: Unit normal of the plane. Returned for every hit, from
            either side.
        offset: Signed distance of the plane from the origin along normal.
    """

    normal: Vector3
    offset: float

    def __init__(self, normal: VectorLike, offset: float) -> None:
        normal_vec = as_vector(normal)
        length = normal_vec.norm()
        if length == 0.0:
            # Degenerate plane, kept as given; never hit
            object.__setattr__(self, "normal", normal_vec)
            object.__setattr__(self, "offset", float(offset))
            return
        object.__setattr__(self, "normal", normal_vec * (1.0 / length))
        object.__setattr__(self, "offset", float(offset) / length)

    def closest_intersection(self, ray: Ray) -> SurfaceHit | None:
        """Intersect the ray with the plane.

        Args:
            ray: The ray to test.

        Returns:
            The hit distance (negative if the plane is behind the origin)
            with the plane normal, or None if the ray is parallel to the
            plane.
        """
        denominator = self.normal.dot(ray.direction)
        if denominator == 0.0:
            return None
        distance = (self.offset - self.normal.dot(ray.origin)) / denominator
        return SurfaceHit(distance, self.normal)

    def intersect_batch(self, origins: FloatArray, directions: FloatArray) -> SurfaceHits:
        """Vectorized closest_intersection() over N rays."""
        normal = as_row(self.normal)
        denominators = dot_rows(normal, directions)
        mask = denominators != 0.0
        with np.errstate(divide="ignore", invalid="ignore"):
            distances = (self.offset - dot_rows(normal, origins)) / denominators
        normals = np.broadcast_to(normal, directions.shape)
        return SurfaceHits(mask, distances, normals)
