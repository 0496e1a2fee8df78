"""Matplotlib-based preview display for rendered images.

This module shows finished images in a Matplotlib figure. For a live view
of a render in progress use the interactive module instead.

Example:
    >>> from sunbeam.preview.display import show_preview
    >>>
    >>> image.update(stream)
    >>> show_preview(image)
"""

from __future__ import annotations

import numpy as np

from sunbeam.image.buffer import Image
from sunbeam.preview.export import compute_rmse


def show_preview(
    image: Image,
    *,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 4.5),
    block: bool = True,
) -> None:
    """Display an image as a Matplotlib figure.

    The encoded (gamma-corrected) buffer is shown as-is.

    Args:
        image: The image to display.
        title: Custom title (default shows the image size).
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until figure is closed.
    """
    import matplotlib.pyplot as plt

    fig, ax = plt.subplots(1, 1, figsize=figsize)

    ax.imshow(image.to_array())
    ax.axis("off")
    ax.set_title(title if title is not None else f"Render Preview - {image.width}x{image.height}")

    plt.tight_layout()
    plt.show(block=block)


def show_comparison(
    image_a: Image,
    image_b: Image,
    *,
    labels: tuple[str, str] = ("A", "B"),
    diff_scale: float = 10.0,
    figsize: tuple[float, float] = (16, 6),
    block: bool = True,
) -> float:
    """Display side-by-side comparison of two images with difference view.

    Shows two images and their amplified difference, along with RMSE metric.

    Args:
        image_a: First image.
        image_b: Second image (same size).
        labels: Labels for the two images.
        diff_scale: Scale factor for difference amplification.
        figsize: Figure size in inches.
        block: Whether to block execution until figure is closed.

    Returns:
        RMSE between the two encoded images, in [0, 1] units.
    """
    import matplotlib.pyplot as plt

    display_a = image_a.to_array()[..., :3].astype(np.float64) / 255.0
    display_b = image_b.to_array()[..., :3].astype(np.float64) / 255.0
    rmse = compute_rmse(display_a, display_b)

    diff_amplified = np.clip(np.abs(display_a - display_b) * diff_scale, 0.0, 1.0)

    fig, axes = plt.subplots(1, 3, figsize=figsize)

    axes[0].imshow(display_a)
    axes[0].set_title(labels[0])
    axes[0].axis("off")

    axes[1].imshow(display_b)
    axes[1].set_title(labels[1])
    axes[1].axis("off")

    axes[2].imshow(diff_amplified)
    axes[2].set_title(f"Difference ({diff_scale}x) - RMSE: {rmse:.6f}")
    axes[2].axis("off")

    plt.tight_layout()
    plt.show(block=block)

    return rmse
