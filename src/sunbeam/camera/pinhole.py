"""Pinhole camera model for primary ray generation.

The camera sits at `position` and is oriented by a unit quaternion. Its
reference frame, before rotation, looks along +y with +z up:

- forward: the reference axis j, rotated by the orientation
- up: the reference axis k, rotated by the orientation
- right: forward x up

The virtual screen is `distance_to_screen` in front of the camera and
`screen_width` wide, which fixes the horizontal field of view. Pixels are
square, so the vertical extent follows from the image aspect ratio.

Example:
    >>> from sunbeam.camera.pinhole import Camera
    >>> camera = Camera()
    >>> ray = camera.primary_ray(320, 240, 640, 480)  # Ray through the image center
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

import numpy as np

from sunbeam.core.arrays import as_row
from sunbeam.core.ray import Ray
from sunbeam.core.vector import UnitQuaternion, Vector3

# =============================================================================
# Camera defaults
# =============================================================================

DEFAULT_SCREEN_WIDTH = 0.64
DEFAULT_DISTANCE_TO_SCREEN = 0.5


@dataclass(frozen=True)
class Camera:
    """Configuration for a pinhole (perspective) camera.

    Attributes:
        position: Camera position in world space.
        orientation: Rotation applied to the reference frame.
        screen_width: Width of the virtual screen in world units.
        distance_to_screen: Distance from the camera to the virtual screen.
    """

    position: Vector3 = field(default_factory=Vector3.zero)
    orientation: UnitQuaternion = field(default_factory=UnitQuaternion.identity)
    screen_width: float = DEFAULT_SCREEN_WIDTH
    distance_to_screen: float = DEFAULT_DISTANCE_TO_SCREEN

    # =========================================================================
    # View basis
    # =========================================================================

    def up(self) -> Vector3:
        """Unit vector pointing up when viewed through the camera."""
        return Vector3.k().rotate(self.orientation)

    def forward(self) -> Vector3:
        """Unit vector pointing through the middle of the screen."""
        return Vector3.j().rotate(self.orientation)

    def right(self) -> Vector3:
        """Unit vector pointing right when viewed through the camera."""
        return self.forward().cross(self.up())

    # =========================================================================
    # Ray generation
    # =========================================================================

    def pixel_size(self, width: int) -> float:
        """Side length of one (square) pixel on the virtual screen."""
        return self.screen_width / width

    def direction_mapper(self, width: int, height: int) -> Callable[[int, int], Vector3]:
        """Build a pixel -> ray direction function for one image size.

        The view basis is computed once, which matters when the function
        is called for every pixel of a render partition.

        Image row 0 is the top of the image, so the vertical offset is
        negated relative to the camera's up vector. Aspect ratio is not
        corrected: pixels are square and the screen height follows from
        `height`.

        Args:
            width: Image width in pixels.
            height: Image height in pixels.

        Returns:
            A function of (pixel_x, pixel_y) returning the unnormalized
            direction forward * distance_to_screen + delta_x + delta_y.
        """
        size = self.pixel_size(width)
        right = self.right()
        up = self.up()
        center_of_screen = self.forward() * self.distance_to_screen
        half_width = 0.5 * (width - 1)
        half_height = 0.5 * (height - 1)

        def direction(pixel_x: int, pixel_y: int) -> Vector3:
            delta_x = right * ((pixel_x - half_width) * size)
            delta_y = up * (-(pixel_y - half_height) * size)
            return center_of_screen + delta_x + delta_y

        return direction


    def row_direction_mapper(self, width: int, height: int) -> Callable[[int], np.ndarray]:
        """Build a row -> ray directions function for one image size.

        The batch counterpart of direction_mapper(): the returned function
        maps a row index to a (width, 3) array whose column x holds exactly
        direction_mapper(width, height)(x, pixel_y).
        """
        size = self.pixel_size(width)
        right = as_row(self.right())
        up = as_row(self.up())
        center_of_screen = as_row(self.forward() * self.distance_to_screen)
        half_width = 0.5 * (width - 1)
        half_height = 0.5 * (height - 1)
        offsets_x = (np.arange(width, dtype=np.float64) - half_width) * size
        deltas_x = right * offsets_x[:, None]

        def directions(pixel_y: int) -> np.ndarray:
            delta_y = up * (-(pixel_y - half_height) * size)
            return center_of_screen + deltas_x + delta_y

        return directions

    def ray_direction(self, pixel_x: int, pixel_y: int, width: int, height: int) -> Vector3:
        """Unnormalized direction from the camera through a pixel center.

        Args:
            pixel_x: Column index, 0 is the left edge.
            pixel_y: Row index, 0 is the top edge.
            width: Image width in pixels.
            height: Image height in pixels.
        """
        return self.direction_mapper(width, height)(pixel_x, pixel_y)

    def primary_ray(self, pixel_x: int, pixel_y: int, width: int, height: int) -> Ray:
        """The ray from the camera position through a pixel center."""
        return Ray(self.position, self.ray_direction(pixel_x, pixel_y, width, height))
