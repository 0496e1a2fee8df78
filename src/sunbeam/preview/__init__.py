"""Preview module for output and visualization.

This module handles rendering output and interactive preview:

Components:
    display: Matplotlib-based preview display
    export: PNG image export utilities
    interactive: Taichi GGUI-based interactive preview window

The images shown and saved here are the Image's encoded sRGBA buffer, so
what the window displays is exactly what ends up in the PNG.

Example:
    >>> from sunbeam.preview import save_png, show_preview
    >>>
    >>> image.update(stream)
    >>> image.clamp()
    >>> show_preview(image)
    >>> save_png(image, "output.png")

For a live view of a render in progress:
    >>> from sunbeam.preview import InteractivePreview
    >>> preview = InteractivePreview(640, 360)
    >>> preview.run_stream(stream, image)

InteractivePreview is imported lazily since it pulls in Taichi.
"""

from sunbeam.preview.display import show_comparison, show_preview
from sunbeam.preview.export import (
    compute_rmse,
    load_png,
    save_png,
    save_png_from_array,
)

__all__ = [
    # Interactive preview
    "InteractivePreview",
    # Display functions
    "show_preview",
    "show_comparison",
    # Export functions
    "save_png",
    "save_png_from_array",
    "load_png",
    "compute_rmse",
]


def __getattr__(name: str):
    if name == "InteractivePreview":
        from sunbeam.preview.interactive import InteractivePreview

        return InteractivePreview
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
