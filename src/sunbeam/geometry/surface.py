"""Common interface for ray-intersectable surfaces.

Every primitive the tracer can see implements :class:`Surface`, exposing
``closest_intersection(ray)`` for a single ray. The renderer traces whole
image rows at once through ``intersect_batch(origins, directions)``, which
by default loops over closest_intersection; built-in primitives override it
with a NumPy version. New primitives subclass Surface without touching the
tracer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import NamedTuple

import numpy as np

from sunbeam.core.arrays import FloatArray
from sunbeam.core.ray import Ray
from sunbeam.core.vector import Vector3


class SurfaceHit(NamedTuple):
    """Result of a ray-surface intersection.

    Attributes:
        distance: Ray parameter of the hit. May be negative (behind the
            ray origin); the tracer discards those.
        normal: Unit surface normal at the hit point.
    """

    distance: float
    normal: Vector3


class SurfaceHits(NamedTuple):
    """Intersections of a batch of N rays with one surface.

    Attributes:
        mask: (N,) bool, True where the ray hits.
        distances: (N,) hit distances. Meaningless where mask is False.
        normals: (N, 3) unit normals. Meaningless where mask is False.
    """

    mask: np.ndarray
    distances: FloatArray
    normals: FloatArray


class Surface(ABC):
    """A geometric primitive testable for ray intersection."""

    @abstractmethod
    def closest_intersection(self, ray: Ray) -> SurfaceHit | None:
        """Find the nearest intersection between `ray` and the surface.

        Args:
            ray: The ray to test. Its direction is unit length.

        Returns:
            The hit distance and unit normal, or None if the ray misses.
        """

    def intersect_batch(self, origins: FloatArray, directions: FloatArray) -> SurfaceHits:
        """Intersect N rays at once.

        Row i of the result matches closest_intersection() for the ray
        with origin origins[i] and direction directions[i].

        Args:
            origins: (N, 3) ray origins.
            directions: (N, 3) unit ray directions.
        """
        count = len(directions)
        mask = np.zeros(count, dtype=bool)
        distances = np.zeros(count)
        normals = np.zeros((count, 3))
        for index, (origin, direction) in enumerate(zip(origins.tolist(), directions.tolist())):
            hit = self.closest_intersection(Ray(origin, direction))
            if hit is None:
                continue
            mask[index] = True
            distances[index] = hit.distance
            normals[index] = tuple(hit.normal)
        return SurfaceHits(mask, distances, normals)
