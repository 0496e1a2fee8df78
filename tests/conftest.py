"""Pytest configuration for sunbeam tests.

This module provides shared fixtures for all test modules. Taichi is
initialized once per session, and only for the tests that request it:
the interactive preview is the one Taichi user, the tracer itself runs on
NumPy.
"""

import pytest


@pytest.fixture(scope="session")
def init_taichi_session():
    """Initialize Taichi once, on first use, for the rest of the session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    import taichi as ti

    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture
def sphere_scene():
    """A unit sphere 5 units in front of the default camera, lit from behind the camera."""
    from sunbeam.geometry import Sphere
    from sunbeam.lighting import Sun
    from sunbeam.scene import Scene

    scene = Scene()
    scene.add_surface(Sphere((0.0, 5.0, 0.0), 1.0))
    scene.add_light(Sun((0.5, 0.25, 1.0), (0.0, 1.0, 0.0)))
    return scene


@pytest.fixture
def reference_scene():
    """Sphere above a ground plane under the red, green and blue suns."""
    from sunbeam.scene import create_reference_scene

    return create_reference_scene()
