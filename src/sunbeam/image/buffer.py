"""Pixel and image buffers.

The Image stores linear RGBA per pixel together with a gamma-encoded RGBA
byte buffer that is kept in sync on every write, so a display layer can
blit it at any time while render results are still arriving.

Example:
    >>> from sunbeam.image.buffer import Image
    >>> image = Image(640, 480)
    >>> image.set_pixel(10, 20, (1.0, 0.5, 0.0))
    >>> data = image.to_encoded_bytes()  # 640 * 480 * 4 bytes, row-major RGBA
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Union

import numpy as np
import numpy.typing as npt

from sunbeam.core.vector import Vector3
from sunbeam.image.color import alpha_to_byte, encode_alpha, encode_srgb, linear_to_srgb


@dataclass(frozen=True, slots=True)
class Pixel:
    """A linear RGBA color.

    Channels are nominally in [0, 1]; shading may produce larger values,
    which are kept until the image is normalized or clamped. Alpha 1 is
    fully opaque.
    """

    r: float
    g: float
    b: float
    a: float = 1.0

    @classmethod
    def black(cls) -> Pixel:
        """An opaque black pixel."""
        return cls(0.0, 0.0, 0.0, 1.0)

    @classmethod
    def from_rgb(cls, rgb: Vector3) -> Pixel:
        """An opaque pixel from a linear RGB vector."""
        return cls(rgb.x, rgb.y, rgb.z, 1.0)

    @classmethod
    def coerce(cls, value: PixelLike) -> Pixel:
        """Accept a Pixel, an RGB Vector3 or an RGB(A) tuple."""
        if isinstance(value, Pixel):
            return value
        if isinstance(value, Vector3):
            return cls.from_rgb(value)
        return cls(*(float(channel) for channel in value))


PixelLike = Union[Pixel, Vector3, tuple[float, float, float], tuple[float, float, float, float]]


class Image:
    """A width x height grid of linear pixels with a cached sRGBA encoding.

    Pixels are stored row-major: index = y * width + x.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
    """

    def __init__(self, width: int, height: int) -> None:
        """Create an opaque black image.

        Args:
            width: Image width in pixels.
            height: Image height in pixels.

        Raises:
            ValueError: If either dimension is negative.
        """
        if width < 0 or height < 0:
            raise ValueError(f"Image dimensions must be non-negative, got {width}x{height}")
        self._width = width
        self._height = height

        self._pixels = np.zeros((height, width, 4), dtype=np.float64)
        self._pixels[..., 3] = 1.0

        self._srgba = np.zeros((height, width, 4), dtype=np.uint8)
        self._srgba[..., 3] = 255

    @property
    def width(self) -> int:
        """Get the image width."""
        return self._width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self._height

    @property
    def size(self) -> tuple[int, int]:
        """The (width, height) pair."""
        return (self._width, self._height)

    # =========================================================================
    # Pixel access
    # =========================================================================

    def set_pixel(self, x: int, y: int, value: PixelLike) -> None:
        """Write one pixel, updating both the linear and encoded buffers.

        Args:
            x: Column, 0 <= x < width.
            y: Row, 0 <= y < height.
            value: The linear color.

        Raises:
            IndexError: If (x, y) is outside the image.
        """
        if not (0 <= x < self._width and 0 <= y < self._height):
            raise IndexError(
                f"Pixel ({x}, {y}) is outside the {self._width}x{self._height} image"
            )

        pixel = Pixel.coerce(value)
        self._pixels[y, x] = (pixel.r, pixel.g, pixel.b, pixel.a)
        self._srgba[y, x] = (
            linear_to_srgb(pixel.r),
            linear_to_srgb(pixel.g),
            linear_to_srgb(pixel.b),
            alpha_to_byte(pixel.a),
        )

    def get_pixel(self, x: int, y: int) -> Pixel:
        """Read one linear pixel.

        Raises:
            IndexError: If (x, y) is outside the image.
        """
        if not (0 <= x < self._width and 0 <= y < self._height):
            raise IndexError(
                f"Pixel ({x}, {y}) is outside the {self._width}x{self._height} image"
            )
        r, g, b, a = self._pixels[y, x]
        return Pixel(float(r), float(g), float(b), float(a))

    def update(self, pixels: Iterable[tuple[int, int, PixelLike]]) -> int:
        """Write every (x, y, pixel) item yielded by `pixels`.

        Works with a blocking stream (drains it completely) as well as a
        non-blocking try_iter() batch.

        Returns:
            The number of pixels written.
        """
        count = 0
        for x, y, pixel in pixels:
            self.set_pixel(x, y, pixel)
            count += 1
        return count

    # =========================================================================
    # Post-processing
    # =========================================================================

    def min_max(self) -> tuple[float, float]:
        """Smallest and largest value across the R, G and B channels."""
        if self._pixels.size == 0:
            return (0.0, 0.0)
        rgb = self._pixels[..., :3]
        return (float(np.min(rgb)), float(np.max(rgb)))

    def normalize(self) -> None:
        """Map the minimum color value to 0 and the maximum to 1.

        A flat image (max == min) becomes black. The encoded buffer is
        refreshed.
        """
        low, high = self.min_max()
        rgb = self._pixels[..., :3]
        rgb -= low
        if high > low:
            rgb *= 1.0 / (high - low)
        self._refresh_encoding()

    def clamp(self) -> None:
        """Clamp R, G and B to [0, 1] and refresh the encoded buffer."""
        np.clip(self._pixels[..., :3], 0.0, 1.0, out=self._pixels[..., :3])
        self._refresh_encoding()

    def _refresh_encoding(self) -> None:
        self._srgba[..., :3] = encode_srgb(self._pixels[..., :3])
        self._srgba[..., 3] = encode_alpha(self._pixels[..., 3])

    # =========================================================================
    # Export
    # =========================================================================

    def to_encoded_bytes(self) -> bytes:
        """Row-major RGBA bytes, gamma-encoded except for alpha."""
        return self._srgba.tobytes()

    def to_array(self) -> npt.NDArray[np.uint8]:
        """Read-only (height, width, 4) view of the encoded buffer."""
        view = self._srgba.view()
        view.flags.writeable = False
        return view

    def linear_array(self) -> npt.NDArray[np.float64]:
        """Copy of the linear (height, width, 4) buffer."""
        return self._pixels.copy()

    def __repr__(self) -> str:
        return f"Image(width={self._width}, height={self._height})"
