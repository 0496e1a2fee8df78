"""Scene module for scene representation and ray queries.

This module handles scene representation and ray-scene queries:

Components:
    scene: Scene container holding surfaces, lights and the camera, with
        nearest-hit tracing
    demo: Factories for the showcase and reference scenes

The scene is built by the embedding application, then frozen and shared
read-only by the render workers:
    - Surfaces are tested in insertion order; the first wins a distance tie
    - Hits closer than the self-intersection epsilon are ignored
"""

from .demo import (
    RGB_SUNS,
    SunParams,
    add_suns,
    create_demo_scene,
    create_reference_scene,
)
from .scene import SELF_INTERSECTION_EPSILON, Scene, TraceHit, TraceHits

__all__ = [
    # Scene
    "Scene",
    "TraceHit",
    "TraceHits",
    "SELF_INTERSECTION_EPSILON",
    # Demo scenes
    "SunParams",
    "RGB_SUNS",
    "add_suns",
    "create_demo_scene",
    "create_reference_scene",
]
