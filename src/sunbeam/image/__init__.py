"""Image module for pixel storage and color encoding.

Components:
    buffer: Pixel value type and the Image grid with its cached encoding
    color: Linear <-> sRGB transfer functions (scalar and vectorized)

The Image is the usual consumer of a render's pixel stream: it is the only
writer of its buffers, so no locking is needed while results arrive.
"""

from .buffer import Image, Pixel, PixelLike
from .color import (
    alpha_to_byte,
    encode_alpha,
    encode_srgb,
    linear_to_srgb,
    srgb_to_linear,
)

__all__ = [
    "Image",
    "Pixel",
    "PixelLike",
    "linear_to_srgb",
    "srgb_to_linear",
    "alpha_to_byte",
    "encode_srgb",
    "encode_alpha",
]
