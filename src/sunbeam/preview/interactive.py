"""Interactive preview window using Taichi GGUI.

This module shows a render in progress: each frame drains whatever pixels
the render workers have finished so far into an Image and presents its
encoded buffer, so the picture fills in row by row.

Features:
    - Taichi GGUI-based window
    - Updating the display from an Image's encoded sRGBA buffer
    - Non-blocking polling of a PixelStream on every frame
    - Rendering continues until the window is closed

Taichi must be initialized (ti.init) before a window is created. The
render workers themselves do not use Taichi.

Example:
    >>> import taichi as ti
    >>> from sunbeam.image import Image
    >>> from sunbeam.preview.interactive import InteractivePreview
    >>> from sunbeam.scene.demo import create_demo_scene
    >>>
    >>> ti.init(arch=ti.cpu)
    >>> stream = create_demo_scene().spawn_render(640, 360)
    >>> image = Image(640, 360)
    >>> preview = InteractivePreview(640, 360)
    >>> preview.run_stream(stream, image)  # Blocks until the window is closed
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

import numpy as np
import taichi as ti

from sunbeam.image.buffer import Image

if TYPE_CHECKING:
    import numpy.typing as npt

    from sunbeam.core.dispatch import PixelStream

_LOGGER: logging.Logger = logging.getLogger(__name__)


class InteractivePreview:
    """Interactive preview window using Taichi GGUI.

    This class wraps ti.ui.Window to provide a simple interface for
    displaying a render as it arrives. It manages the window, canvas, and
    display buffer.

    Attributes:
        width: Window width in pixels.
        height: Window height in pixels.
        display_image: Taichi field storing the display image (RGB float).
    """

    def __init__(
        self,
        width: int,
        height: int,
        *,
        title: str = "sunbeam - Interactive Preview",
    ) -> None:
        """Initialize the interactive preview window.

        Args:
            width: Window width in pixels.
            height: Window height in pixels.
            title: Window title.

        Note:
            The window itself is created lazily on first use, so the
            display buffer can be used in headless environments.
        """
        self.width = width
        self.height = height
        self._title = title
        self._is_initialized = False

        self._window: ti.ui.Window | None = None
        self._canvas: ti.ui.Canvas | None = None

        # Shape is (width, height) for Taichi field, RGB values stored as vec3
        self.display_image: ti.MatrixField = ti.Vector.field(
            3, dtype=ti.f32, shape=(width, height)
        )

    def _initialize_window(self) -> None:
        if self._is_initialized:
            return

        self._window = ti.ui.Window(
            name=self._title,
            res=(self.width, self.height),
            vsync=True,
        )
        self._canvas = self._window.get_canvas()
        self._is_initialized = True

    @property
    def window(self) -> ti.ui.Window:
        """Get the Taichi GGUI window, initializing if needed."""
        if self._window is None:
            self._initialize_window()
        assert self._window is not None
        return self._window

    @property
    def canvas(self) -> ti.ui.Canvas:
        """Get the canvas for rendering."""
        if self._canvas is None:
            self._initialize_window()
        assert self._canvas is not None
        return self._canvas

    def update_image(self, srgba: npt.NDArray[np.uint8]) -> None:
        """Update the display image from an encoded sRGBA array.

        Args:
            srgba: Array of shape (height, width, 4) with dtype uint8, as
                returned by Image.to_array(). Alpha is ignored.

        Raises:
            ValueError: If the array shape doesn't match (height, width, 4).
        """
        expected_shape = (self.height, self.width, 4)
        if srgba.shape != expected_shape:
            raise ValueError(
                f"Image shape {srgba.shape} doesn't match expected {expected_shape}"
            )

        rgb = srgba[..., :3].astype(np.float32) / 255.0
        # Taichi fields are indexed (x, y) with the origin at the bottom-left,
        # NumPy images are (row, column) with row 0 at the top
        image_transposed = np.ascontiguousarray(
            np.transpose(np.flipud(rgb), (1, 0, 2))
        )
        self.display_image.from_numpy(image_transposed)

    def is_running(self) -> bool:
        """Check if the window is still open."""
        return self.window.running

    def show_frame(self) -> None:
        """Present the current display image as one frame."""
        self.canvas.set_image(self.display_image)
        self.window.show()

    def run_stream(self, stream: PixelStream, image: Image) -> int:
        """Show a render as it arrives, until the window is closed.

        Every frame takes the pixels that are ready without waiting for
        more. Closing the window before the render finished closes the
        stream, which stops the workers at their next pixel.

        Args:
            stream: The pixel stream returned by spawn_render().
            image: Image the pixels are written to. Must match the
                window size.

        Returns:
            The number of pixels received.
        """
        if (image.width, image.height) != (self.width, self.height):
            raise ValueError(
                f"Image size {image.width}x{image.height} doesn't match "
                f"window size {self.width}x{self.height}"
            )

        self._initialize_window()
        was_exhausted = False

        while self.is_running():
            if image.update(stream.try_iter()):
                self.update_image(image.to_array())
            if stream.exhausted and not was_exhausted:
                _LOGGER.info("Render finished: %d pixels", stream.received)
                was_exhausted = True
            self.show_frame()

        if not stream.exhausted:
            stream.close()

        return stream.received

    def close(self) -> None:
        """Close the preview window.

        After calling this, the window cannot be reopened.
        """
        if self._window is not None:
            self._window.running = False

    @staticmethod
    def is_display_available() -> bool:
        """Check if a display is available for GUI rendering.

        Returns:
            True if a display is available, False for headless environments.
        """
        display = os.environ.get("DISPLAY")
        wayland = os.environ.get("WAYLAND_DISPLAY")

        if os.name == "nt":
            return True

        if os.uname().sysname == "Darwin":
            # SSH session without X forwarding
            return not (os.environ.get("SSH_CONNECTION") and not display)

        return bool(display or wayland)
