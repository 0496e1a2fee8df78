"""Row-wise vector helpers for batches of rays.

A batch of N vectors is an (N, 3) float64 array. The helpers below apply
the same floating-point operations, in the same order, as the matching
Vector3 methods, so a batch computation gives bitwise the same numbers as
looping the scalar code over its rows.

NumPy releases the GIL inside these array operations, which is what lets
several render threads make progress at the same time.

Example:
    >>> import numpy as np
    >>> from sunbeam.core.arrays import dot_rows, normalize_rows
    >>> d = normalize_rows(np.array([[0.0, 0.0, 2.0], [0.0, 0.0, 0.0]]))
    >>> d.tolist()
    [[0.0, 0.0, 1.0], [0.0, 0.0, 0.0]]
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt

from sunbeam.core.vector import Vector3

FloatArray = npt.NDArray[np.float64]


def as_row(vector: Vector3) -> FloatArray:
    """A Vector3 as a (3,) array, for broadcasting against a batch."""
    return np.array((vector.x, vector.y, vector.z), dtype=np.float64)


def dot_rows(a: FloatArray, b: FloatArray) -> FloatArray:
    """Per-row dot product, summed x, then y, then z like Vector3.dot.

    Either argument may be a single (3,) vector, broadcast over the batch.
    """
    return a[..., 0] * b[..., 0] + a[..., 1] * b[..., 1] + a[..., 2] * b[..., 2]


def normalize_rows(vectors: FloatArray) -> FloatArray:
    """Per-row Vector3.normalize: zero rows stay zero."""
    length = np.sqrt(dot_rows(vectors, vectors))
    nonzero = length != 0.0
    scale = np.ones_like(length)
    np.divide(1.0, length, out=scale, where=nonzero)
    return np.where(nonzero[:, None], vectors * scale[:, None], vectors)


def points_at(origins: FloatArray, directions: FloatArray, t: FloatArray) -> FloatArray:
    """Per-row Ray.at: origin + direction * t."""
    return origins + directions * t[:, None]


def to_vectors(rows: FloatArray) -> list[Vector3]:
    """Convert an (N, 3) array back to Vector3 values."""
    return [Vector3(x, y, z) for x, y, z in rows.tolist()]
