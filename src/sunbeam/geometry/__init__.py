"""Geometry module for surface primitives and intersection acceleration.

This module provides the primitives the tracer can intersect:

Components:
    surface: Abstract Surface interface and the SurfaceHit result
    bounding_box: Axis-aligned bounding box with a slab test
    sphere: Sphere primitive, pre-tested against its bounding box
    plane: Infinite plane primitive

Ray-surface intersection follows the pattern:
    hit = surface.closest_intersection(ray)  # SurfaceHit(distance, normal) or None
    hits = surface.intersect_batch(origins, directions)  # SurfaceHits over N rays
"""

from .bounding_box import BoundingBox
from .plane import Plane
from .sphere import Sphere
from .surface import Surface, SurfaceHit, SurfaceHits

__all__ = [
    "Surface",
    "SurfaceHit",
    "SurfaceHits",
    "BoundingBox",
    "Sphere",
    "Plane",
]
