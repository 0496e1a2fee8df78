"""Image export utilities for rendered images.

This module saves Image buffers to files. The encoded buffer is already
gamma-corrected sRGBA, so export is a straight copy into the container.

Supported formats:
    - PNG (8-bit sRGBA via Pillow)

Example:
    >>> from sunbeam.image import Image
    >>> from sunbeam.preview.export import save_png
    >>>
    >>> image = Image(64, 64)
    >>> image.update(stream)
    >>> image.clamp()
    >>> save_png(image, "output.png")
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from sunbeam.image.buffer import Image

_LOGGER: logging.Logger = logging.getLogger(__name__)


def save_png(image: Image, filepath: str | Path) -> Path:
    """Save an image as an 8-bit RGBA PNG.

    The image's cached sRGBA bytes are written unchanged. Call clamp() or
    normalize() first if the linear values may exceed [0, 1].

    Args:
        image: The image to save.
        filepath: Output file path (should end in .png).

    Returns:
        The path written.
    """
    return save_png_from_array(image.to_array(), filepath)


def save_png_from_array(srgba: npt.NDArray[np.uint8], filepath: str | Path) -> Path:
    """Save an encoded (H, W, 4) uint8 array as a PNG.

    Raises:
        ValueError: If the array is not (H, W, 4) uint8.
    """
    if srgba.ndim != 3 or srgba.shape[2] != 4 or srgba.dtype != np.uint8:
        raise ValueError(
            f"Expected an (H, W, 4) uint8 array, got {srgba.shape} {srgba.dtype}"
        )

    path = Path(filepath)
    pil_image = PILImage.fromarray(np.ascontiguousarray(srgba), mode="RGBA")
    pil_image.save(path)
    _LOGGER.info("Saved %dx%d PNG to %s", srgba.shape[1], srgba.shape[0], path)
    return path


def load_png(filepath: str | Path) -> npt.NDArray[np.uint8]:
    """Read a PNG back as an (H, W, 4) uint8 sRGBA array."""
    with PILImage.open(filepath) as pil_image:
        return np.asarray(pil_image.convert("RGBA"), dtype=np.uint8).copy()


def compute_rmse(
    image_a: npt.NDArray[np.floating[npt.NBitBase]] | npt.NDArray[np.uint8],
    image_b: npt.NDArray[np.floating[npt.NBitBase]] | npt.NDArray[np.uint8],
) -> float:
    """Compute root mean squared error between two images.

    Args:
        image_a: First image array.
        image_b: Second image array (must have same shape as image_a).

    Returns:
        RMSE value (lower is more similar).

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(
            f"Image shapes must match: {image_a.shape} vs {image_b.shape}"
        )

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
