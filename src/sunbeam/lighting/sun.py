"""Directional "sun" light.

A sun is infinitely far away: it has a color and a direction but no
position, and its light is not attenuated with distance.

Example:
    >>> from sunbeam.lighting.sun import Sun
    >>> red_from_above = Sun(color=(1.0, 0.0, 0.0), direction=(0.0, 0.0, -2.0))
    >>> red_from_above.direction
    Vector3(x=0.0, y=0.0, z=-1.0)
"""

from __future__ import annotations

from dataclasses import dataclass

from sunbeam.core.vector import Vector3, VectorLike, as_vector


@dataclass(frozen=True, init=False)
class Sun:
    """A light source emitting parallel rays.

    Attributes:
        color: Linear RGB color of the light. Unbounded; values above 1
            are allowed and only clamped in post-processing.
        direction: Unit vector the light rays travel along (pointing away
            from the light, toward the scene).
    """

    color: Vector3
    direction: Vector3

    def __init__(self, color: VectorLike, direction: VectorLike) -> None:
        object.__setattr__(self, "color", as_vector(color))
        object.__setattr__(self, "direction", as_vector(direction).normalize())

    @property
    def direction_to_light(self) -> Vector3:
        """Unit vector from any lit point toward the light."""
        return -self.direction
