"""Camera module for view and ray generation.

This module provides the camera model used to generate primary rays:

Components:
    pinhole: Pinhole (perspective) camera oriented by a unit quaternion

Camera responsibilities:
    - Derive the view basis (forward, up, right) from the orientation
    - Map integer pixel coordinates to primary-ray directions
    - Fix the horizontal field of view through screen width and distance

Pixel coordinates follow image conventions:
    x in [0, width): left to right
    y in [0, height): top to bottom
"""

from .pinhole import DEFAULT_DISTANCE_TO_SCREEN, DEFAULT_SCREEN_WIDTH, Camera

__all__ = [
    "Camera",
    "DEFAULT_SCREEN_WIDTH",
    "DEFAULT_DISTANCE_TO_SCREEN",
]
