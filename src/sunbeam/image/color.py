"""Linear <-> sRGB transfer functions.

Shading happens in linear space; the output format stores gamma-encoded
8-bit channels. The sRGB encoding law is

    srgb = 12.92 * c                      if c < 0.0031308
    srgb = 1.055 * c ** (1 / 2.4) - 0.055 otherwise

and the byte is round(srgb * 255) with halves rounded up. Inputs are
expected in [0, 1]; anything outside (including NaN) saturates to 0 or 255.

Both scalar functions (used on every pixel write) and a vectorized NumPy
version (used when re-encoding a whole image) are provided.
"""

from __future__ import annotations

import math

import numpy as np
import numpy.typing as npt

# Linear value below which the sRGB curve is a straight line
SRGB_LINEAR_THRESHOLD = 0.0031308
# Encoded value below which the inverse curve is a straight line
SRGB_ENCODED_THRESHOLD = 0.04045
SRGB_GAMMA = 2.4


def _to_byte(value: float) -> int:
    """Round a [0, 1] value to a byte, halves up, saturating."""
    if not value > 0.0:
        return 0
    if value >= 1.0:
        return 255
    return int(math.floor(value * 255.0 + 0.5))


def linear_to_srgb(color: float) -> int:
    """Gamma-encode one linear channel into an 8-bit sRGB value.

    Args:
        color: Linear channel value, nominally in [0, 1].

    Returns:
        The encoded byte in [0, 255].
    """
    if not color > 0.0:
        return 0
    if color < SRGB_LINEAR_THRESHOLD:
        srgb = 12.92 * color
    else:
        srgb = 1.055 * color ** (1.0 / SRGB_GAMMA) - 0.055
    return _to_byte(srgb)


def alpha_to_byte(alpha: float) -> int:
    """Scale an alpha value linearly to a byte (alpha is not gamma-encoded)."""
    return _to_byte(alpha)


def srgb_to_linear(value: int) -> float:
    """Decode an 8-bit sRGB value to a linear channel in [0, 1]."""
    srgb = value / 255.0
    if srgb <= SRGB_ENCODED_THRESHOLD:
        return srgb / 12.92
    return ((srgb + 0.055) / 1.055) ** SRGB_GAMMA


def encode_srgb(linear: npt.ArrayLike) -> npt.NDArray[np.uint8]:
    """Vectorized linear_to_srgb.

    Args:
        linear: Array of linear channel values of any shape.

    Returns:
        uint8 array of the same shape.
    """
    c = np.asarray(linear, dtype=np.float64)
    # NaN compares False and ends up as 0
    c = np.where(c > 0.0, c, 0.0)
    with np.errstate(over="ignore", invalid="ignore"):
        srgb = np.where(
            c < SRGB_LINEAR_THRESHOLD,
            12.92 * c,
            1.055 * np.power(c, 1.0 / SRGB_GAMMA) - 0.055,
        )
    srgb = np.clip(srgb, 0.0, 1.0)
    return np.floor(srgb * 255.0 + 0.5).astype(np.uint8)


def encode_alpha(alpha: npt.ArrayLike) -> npt.NDArray[np.uint8]:
    """Vectorized alpha_to_byte."""
    a = np.asarray(alpha, dtype=np.float64)
    a = np.clip(np.where(a > 0.0, a, 0.0), 0.0, 1.0)
    return np.floor(a * 255.0 + 0.5).astype(np.uint8)
