"""Render configuration.

RenderConfig bundles the settings an embedding application or the example
scripts pass to a render. Values are validated on construction.

Example:
    >>> from sunbeam.config import RenderConfig
    >>> config = RenderConfig(width=320, height=180, num_threads=4)
    >>> config.resolved_threads()
    4
"""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_WIDTH = 1280
DEFAULT_HEIGHT = 720
DEFAULT_OUTPUT = "render.png"


def default_thread_count() -> int:
    """Number of render workers to use when none is requested.

    One core is left for the consumer (display or export) loop, but at
    least one worker is always used.
    """
    cpus = os.cpu_count() or 1
    return max(1, cpus - 1)


@dataclass
class RenderConfig:
    """Settings for one render.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        num_threads: Number of render workers. None picks
            default_thread_count().
        output: Path of the PNG written after rendering.
        normalize: Whether to min/max normalize before clamping on export.
    """

    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    num_threads: int | None = None
    output: str = DEFAULT_OUTPUT
    normalize: bool = False

    def __post_init__(self) -> None:
        if self.width < 1 or self.height < 1:
            raise ValueError(
                f"Image dimensions must be positive, got {self.width}x{self.height}"
            )
        if self.num_threads is not None and self.num_threads < 1:
            raise ValueError(f"num_threads must be at least 1, got {self.num_threads}")

    def resolved_threads(self) -> int:
        """The worker count to dispatch with."""
        if self.num_threads is None:
            return default_thread_count()
        return self.num_threads
