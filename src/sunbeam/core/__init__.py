"""Core rendering module.

This module contains the fundamental building blocks for ray tracing:

Components:
    vector: Vector3 and UnitQuaternion value types
    ray: Ray and closed Interval
    arrays: Row-wise helpers for (N, 3) batches of vectors
    integrator: Direct lighting with hard shadows, per-partition rendering
    dispatch: Row-striped worker threads and the PixelStream channel

Every pixel is shaded from one primary ray: the nearest surface hit is lit
by each sun whose shadow ray reaches it unobstructed.
"""

from .ray import Interval, Ray
from .vector import UnitQuaternion, Vector3, VectorLike, as_vector

# Note: integrator and dispatch are NOT imported here to avoid circular imports.
# Import directly from sunbeam.core.integrator or sunbeam.core.dispatch when needed.

__all__ = [
    "Vector3",
    "VectorLike",
    "UnitQuaternion",
    "as_vector",
    "Ray",
    "Interval",
]
