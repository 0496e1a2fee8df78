"""Vector and quaternion algebra for the ray tracer.

This module provides the 3D vector value type used by every geometric
computation, plus the unit quaternion used to orient the camera.

Both types are immutable values with no identity, so they can be shared
freely between render threads.

Example:
    >>> import math
    >>> from sunbeam.core.vector import UnitQuaternion, Vector3
    >>> v = Vector3(1.0, 2.0, 2.0)
    >>> v.norm()
    3.0
    >>> quarter_turn = UnitQuaternion.from_axis_angle((0.0, 0.0, 1.0), math.pi / 2)
    >>> Vector3.i().rotate(quarter_turn)  # approximately (0, 1, 0)
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Union

# Anything that can be turned into a Vector3
VectorLike = Union["Vector3", tuple[float, float, float]]


@dataclass(frozen=True, slots=True)
class Vector3:
    """A 3D vector of double precision floats.

    Attributes:
        x: The x component.
        y: The y component.
        z: The z component.
    """

    x: float
    y: float
    z: float

    # =========================================================================
    # Named vectors
    # =========================================================================

    @classmethod
    def zero(cls) -> Vector3:
        """The zero vector."""
        return cls(0.0, 0.0, 0.0)

    @classmethod
    def ones(cls) -> Vector3:
        """The vector with 1 in every component."""
        return cls(1.0, 1.0, 1.0)

    @classmethod
    def i(cls) -> Vector3:
        """The unit vector along x."""
        return cls(1.0, 0.0, 0.0)

    @classmethod
    def j(cls) -> Vector3:
        """The unit vector along y."""
        return cls(0.0, 1.0, 0.0)

    @classmethod
    def k(cls) -> Vector3:
        """The unit vector along z."""
        return cls(0.0, 0.0, 1.0)

    # =========================================================================
    # Arithmetic
    # =========================================================================

    def __add__(self, other: Vector3) -> Vector3:
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vector3) -> Vector3:
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __neg__(self) -> Vector3:
        return Vector3(-self.x, -self.y, -self.z)

    def __mul__(self, scalar: float) -> Vector3:
        return Vector3(self.x * scalar, self.y * scalar, self.z * scalar)

    def __rmul__(self, scalar: float) -> Vector3:
        return self * scalar

    def __iter__(self):
        yield self.x
        yield self.y
        yield self.z

    def dot(self, other: Vector3) -> float:
        """Dot product of two vectors."""
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vector3) -> Vector3:
        """Cross product of two vectors (right-handed)."""
        return Vector3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def norm2(self) -> float:
        """Squared Euclidean length. Cheaper than norm() for comparisons."""
        return self.dot(self)

    def norm(self) -> float:
        """Euclidean length."""
        return math.sqrt(self.norm2())

    def is_zero(self) -> bool:
        """Whether every component is exactly zero."""
        return self.x == 0.0 and self.y == 0.0 and self.z == 0.0

    def normalize(self) -> Vector3:
        """Scale the vector to unit length.

        The zero vector has no direction and is returned unchanged instead
        of raising.

        Returns:
            A unit vector parallel to this one, or the zero vector.
        """
        if self.is_zero():
            return self
        return self * (1.0 / self.norm())

    def rotate(self, rotation: UnitQuaternion) -> Vector3:
        """Rotate the vector with a unit quaternion: q * (0, v) * q^-1."""
        pure = UnitQuaternion(0.0, self)
        return (rotation * pure * rotation.inverse()).imag


def as_vector(value: VectorLike) -> Vector3:
    """Coerce a 3-tuple (or a Vector3) into a Vector3."""
    if isinstance(value, Vector3):
        return value
    x, y, z = value
    return Vector3(float(x), float(y), float(z))


@dataclass(frozen=True, slots=True)
class UnitQuaternion:
    """A unit quaternion representing a rotation.

    Only the operations needed to rotate vectors are provided. Instances
    built through the named constructors are normalized; the product of
    two unit quaternions stays unit, so the inverse is the conjugate.

    Attributes:
        real: The scalar part.
        imag: The vector part.
    """

    real: float
    imag: Vector3

    @classmethod
    def identity(cls) -> UnitQuaternion:
        """The identity rotation."""
        return cls(1.0, Vector3.zero())

    @classmethod
    def i(cls) -> UnitQuaternion:
        """The unit quaternion i (half turn about x)."""
        return cls(0.0, Vector3.i())

    @classmethod
    def j(cls) -> UnitQuaternion:
        """The unit quaternion j (half turn about y)."""
        return cls(0.0, Vector3.j())

    @classmethod
    def k(cls) -> UnitQuaternion:
        """The unit quaternion k (half turn about z)."""
        return cls(0.0, Vector3.k())

    @classmethod
    def from_axis_angle(cls, rotation_axis: VectorLike, angle: float) -> UnitQuaternion:
        """Build the rotation of `angle` radians about `rotation_axis`.

        The axis is normalized, and the angle follows the right-hand rule.

        Args:
            rotation_axis: Axis of rotation. Need not be unit length.
            angle: Rotation angle in radians.

        Returns:
            The unit quaternion (cos(angle/2), sin(angle/2) * axis).
        """
        half = 0.5 * angle
        axis = as_vector(rotation_axis).normalize()
        return cls(math.cos(half), axis * math.sin(half))

    def __mul__(self, other: UnitQuaternion) -> UnitQuaternion:
        # Hamilton product
        return UnitQuaternion(
            self.real * other.real - self.imag.dot(other.imag),
            other.imag * self.real + self.imag * other.real + self.imag.cross(other.imag),
        )

    def inverse(self) -> UnitQuaternion:
        """Multiplicative inverse, which for a unit quaternion is its conjugate."""
        return UnitQuaternion(self.real, -self.imag)
