"""Ready-made demo scenes.

These scenes are used by the example scripts and the integration tests:

- The showcase scene: two spheres resting above a ground plane, lit by
  three colored suns (red, green and blue) from different directions.
- The reference scenes: a single sphere, a single ground plane, or both,
  under the same three suns.

All scenes use the default camera at the origin, looking along +y with +z
up.

Example:
    >>> from sunbeam.scene.demo import create_demo_scene
    >>> scene = create_demo_scene()
    >>> stream = scene.spawn_render(640, 360)
"""

from __future__ import annotations

from dataclasses import dataclass

from sunbeam.camera.pinhole import Camera
from sunbeam.geometry.plane import Plane
from sunbeam.geometry.sphere import Sphere
from sunbeam.lighting.sun import Sun
from sunbeam.scene.scene import Scene

# =============================================================================
# Demo Scene Parameters
# =============================================================================


@dataclass
class SunParams:
    """Color and direction of one sun.

    Attributes:
        color: Linear RGB color.
        direction: Direction the light travels (toward the scene).
    """

    color: tuple[float, float, float]
    direction: tuple[float, float, float]


# Red from the left, green from the right, blue from behind the camera
RGB_SUNS = (
    SunParams(color=(1.0, 0.0, 0.0), direction=(1.0, 1.0, -1.0)),
    SunParams(color=(0.0, 1.0, 0.0), direction=(-1.0, 1.0, -1.0)),
    SunParams(color=(0.0, 0.0, 1.0), direction=(0.0, 1.0, 1.0)),
)

# Showcase scene geometry
LARGE_SPHERE_CENTER = (-1.0, 5.0, 0.0)
LARGE_SPHERE_RADIUS = 1.5
SMALL_SPHERE_CENTER = (1.0, 5.0, 0.0)
SMALL_SPHERE_RADIUS = 1.0
GROUND_NORMAL = (0.0, 0.0, 1.0)
GROUND_OFFSET = -2.0

# Reference scene geometry
REFERENCE_SPHERE_CENTER = (0.0, 2.0, 0.0)
REFERENCE_SPHERE_RADIUS = 0.5
REFERENCE_GROUND_OFFSET = -0.5


# =============================================================================
# Scene Factories
# =============================================================================


def add_suns(scene: Scene, suns: tuple[SunParams, ...] = RGB_SUNS) -> None:
    """Add a set of suns to `scene`."""
    for params in suns:
        scene.add_light(Sun(params.color, params.direction))


def create_demo_scene(camera: Camera | None = None) -> Scene:
    """Two spheres above a ground plane under three colored suns.

    Args:
        camera: Optional camera; the default camera if None.

    Returns:
        A Scene ready to render.
    """
    scene = Scene(camera)
    scene.add_surface(Sphere(LARGE_SPHERE_CENTER, LARGE_SPHERE_RADIUS))
    scene.add_surface(Sphere(SMALL_SPHERE_CENTER, SMALL_SPHERE_RADIUS))
    scene.add_surface(Plane(GROUND_NORMAL, GROUND_OFFSET))
    add_suns(scene)
    return scene


def create_reference_scene(*, sphere: bool = True, plane: bool = True) -> Scene:
    """A small sphere and/or a ground plane under three colored suns.

    Args:
        sphere: Include the sphere at (0, 2, 0) with radius 0.5.
        plane: Include the ground plane z = -0.5.

    Returns:
        A Scene ready to render.
    """
    scene = Scene()
    if sphere:
        scene.add_surface(Sphere(REFERENCE_SPHERE_CENTER, REFERENCE_SPHERE_RADIUS))
    if plane:
        scene.add_surface(Plane(GROUND_NORMAL, REFERENCE_GROUND_OFFSET))
    add_suns(scene)
    return scene
