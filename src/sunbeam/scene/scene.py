"""Scene container and nearest-hit ray tracing.

A Scene owns the surfaces, lights and camera to be rendered. It is built
incrementally with add_surface() / add_light() and refuses any further change
once a render has been dispatched, so render threads can share it without
locking.

Example:
    >>> from sunbeam.geometry import Plane, Sphere
    >>> from sunbeam.lighting import Sun
    >>> from sunbeam.scene.scene import Scene
    >>> scene = Scene()
    >>> scene.add_surface(Sphere((0.0, 2.0, 0.0), 0.5))
    >>> scene.add_surface(Plane((0.0, 0.0, 1.0), -0.5))
    >>> scene.add_light(Sun((1.0, 1.0, 1.0), (1.0, 1.0, -1.0)))
    >>> stream = scene.spawn_render(64, 48)
"""

from __future__ import annotations

import logging
import math
import sys
from collections.abc import Sequence
from typing import TYPE_CHECKING, NamedTuple

import numpy as np

from sunbeam.camera.pinhole import Camera
from sunbeam.core.arrays import FloatArray, points_at
from sunbeam.core.ray import Ray
from sunbeam.core.vector import Vector3
from sunbeam.geometry.surface import Surface
from sunbeam.lighting.sun import Sun

if TYPE_CHECKING:
    from sunbeam.core.dispatch import PixelStream

_LOGGER: logging.Logger = logging.getLogger(__name__)

# Hits closer than this to the ray origin are ignored, so a shadow ray does
# not re-hit the surface it starts on. Larger values trade acne for visible
# gaps at contact points.
SELF_INTERSECTION_EPSILON = math.sqrt(sys.float_info.epsilon)


class TraceHit(NamedTuple):
    """Nearest intersection of a ray with the scene.

    Attributes:
        point: World-space hit point.
        normal: Unit surface normal at the hit point.
    """

    point: Vector3
    normal: Vector3


class TraceHits(NamedTuple):
    """Nearest intersections of a batch of N rays with the scene.

    Attributes:
        mask: (N,) bool, True where the ray hits something.
        points: (N, 3) hit points. Meaningless where mask is False.
        normals: (N, 3) unit normals. Meaningless where mask is False.
    """

    mask: np.ndarray
    points: FloatArray
    normals: FloatArray


class Scene:
    """Surfaces, lights and the camera to render them with.

    Attributes:
        camera: The camera the scene is viewed through.
        epsilon: Minimum accepted hit distance in trace().

    Assigning camera or epsilon after a render was dispatched raises
    RuntimeError, like adding surfaces or lights.
    """

    def __init__(
        self,
        camera: Camera | None = None,
        *,
        epsilon: float = SELF_INTERSECTION_EPSILON,
    ) -> None:
        """Make an empty scene.

        Args:
            camera: Camera to render through. Defaults to Camera().
            epsilon: Self-intersection threshold for trace().
        """
        self._camera = camera if camera is not None else Camera()
        self._epsilon = epsilon
        self._surfaces: list[Surface] = []
        self._lights: list[Sun] = []
        self._dispatched = False

    @property
    def camera(self) -> Camera:
        """The camera the scene is viewed through."""
        return self._camera

    @camera.setter
    def camera(self, camera: Camera) -> None:
        self._check_mutable()
        self._camera = camera

    @property
    def epsilon(self) -> float:
        """Minimum accepted hit distance in trace()."""
        return self._epsilon

    @epsilon.setter
    def epsilon(self, epsilon: float) -> None:
        self._check_mutable()
        self._epsilon = epsilon

    @property
    def surfaces(self) -> Sequence[Surface]:
        """The surfaces in insertion order."""
        return tuple(self._surfaces)

    @property
    def lights(self) -> Sequence[Sun]:
        """The lights in insertion order."""
        return tuple(self._lights)

    @property
    def is_dispatched(self) -> bool:
        """Whether a render has been started from this scene."""
        return self._dispatched

    # =========================================================================
    # Building
    # =========================================================================

    def add_surface(self, surface: Surface) -> None:
        """Add a surface to the scene.

        Raises:
            TypeError: If `surface` is not a Surface.
            RuntimeError: If a render has already been dispatched.
        """
        if not isinstance(surface, Surface):
            raise TypeError(f"Expected a Surface, got {type(surface).__name__}")
        self._check_mutable()
        self._surfaces.append(surface)

    def add_light(self, light: Sun) -> None:
        """Add a light to the scene.

        Raises:
            TypeError: If `light` is not a Sun.
            RuntimeError: If a render has already been dispatched.
        """
        if not isinstance(light, Sun):
            raise TypeError(f"Expected a Sun, got {type(light).__name__}")
        self._check_mutable()
        self._lights.append(light)

    def _check_mutable(self) -> None:
        if self._dispatched:
            raise RuntimeError("Scene is shared with render workers and can no longer change")

    def mark_dispatched(self) -> None:
        """Freeze the scene; called by the dispatcher before workers start."""
        if not self._dispatched:
            _LOGGER.debug(
                "Freezing scene with %d surfaces and %d lights",
                len(self._surfaces),
                len(self._lights),
            )
        self._dispatched = True

    # =========================================================================
    # Tracing
    # =========================================================================

    def trace(self, ray: Ray) -> TraceHit | None:
        """Find the nearest surface the ray hits.

        Hits at a distance <= epsilon are ignored. On an exact distance
        tie the surface added first wins.

        Args:
            ray: The ray to trace.

        Returns:
            The hit point and unit normal, or None if nothing is hit.
        """
        closest_distance = math.inf
        result = None

        for surface in self._surfaces:
            hit = surface.closest_intersection(ray)
            if hit is None:
                continue
            distance, normal = hit
            if distance <= self._epsilon:
                continue
            if distance < closest_distance:
                closest_distance = distance
                result = TraceHit(ray.at(distance), normal)

        return result

    def trace_batch(self, origins: FloatArray, directions: FloatArray) -> TraceHits:
        """Vectorized trace() over N rays.

        Row i of the result matches trace() for the ray with origin
        origins[i] and unit direction directions[i].

        Args:
            origins: (N, 3) ray origins.
            directions: (N, 3) unit ray directions.
        """
        count = len(directions)
        closest = np.full(count, math.inf)
        normals = np.zeros((count, 3))

        for surface in self._surfaces:
            hits = surface.intersect_batch(origins, directions)
            nearer = hits.mask & (hits.distances > self._epsilon) & (hits.distances < closest)
            closest = np.where(nearer, hits.distances, closest)
            normals = np.where(nearer[:, None], hits.normals, normals)

        mask = closest < math.inf
        points = points_at(origins, directions, np.where(mask, closest, 0.0))
        return TraceHits(mask, points, normals)

    # =========================================================================
    # Rendering
    # =========================================================================

    def spawn_render(
        self,
        width: int,
        height: int,
        *,
        num_threads: int | None = None,
    ) -> PixelStream:
        """Render the scene in worker threads.

        See sunbeam.core.dispatch.spawn_render.
        """
        # Import here to avoid circular imports
        from sunbeam.core.dispatch import spawn_render

        return spawn_render(self, width, height, num_threads=num_threads)

    def __repr__(self) -> str:
        return (
            f"Scene(surfaces={len(self._surfaces)}, lights={len(self._lights)}, "
            f"camera={self.camera!r})"
        )
