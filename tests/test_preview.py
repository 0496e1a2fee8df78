"""Tests for the preview module.

This module tests the preview/export, preview/display and
preview/interactive functionality including:
- PNG export and reload
- RMSE computation
- Matplotlib figures (with the non-interactive Agg backend)
- The Taichi display buffer of the interactive window

Note: Tests never open an actual window. InteractivePreview creates its
window lazily, so its display buffer can be tested headless.
"""

import numpy as np
import pytest


def _gradient_image(width=8, height=4):
    """Red increases to the right, green downward."""
    from sunbeam.image import Image

    image = Image(width, height)
    for y in range(height):
        for x in range(width):
            image.set_pixel(x, y, (x / (width - 1), y / (height - 1), 0.25))
    return image


class TestSavePng:
    """Test PNG export."""

    def test_save_and_reload(self, tmp_path):
        """Test that the saved PNG holds exactly the encoded buffer."""
        from sunbeam.preview.export import load_png, save_png

        image = _gradient_image()
        path = save_png(image, tmp_path / "out.png")

        assert path.exists()
        np.testing.assert_array_equal(load_png(path), image.to_array())

    def test_png_is_rgba_with_image_size(self, tmp_path):
        """Test the PNG mode and size."""
        from PIL import Image as PILImage

        from sunbeam.preview.export import save_png

        path = save_png(_gradient_image(8, 4), str(tmp_path / "out.png"))

        with PILImage.open(path) as loaded:
            assert loaded.mode == "RGBA"
            assert loaded.size == (8, 4)

    def test_rejects_wrong_array_shape(self, tmp_path):
        """Test that save_png_from_array validates its input."""
        from sunbeam.preview.export import save_png_from_array

        with pytest.raises(ValueError):
            save_png_from_array(np.zeros((4, 4, 3), dtype=np.uint8), tmp_path / "bad.png")
        with pytest.raises(ValueError):
            save_png_from_array(np.zeros((4, 4, 4), dtype=np.float32), tmp_path / "bad.png")


class TestComputeRmse:
    """Test RMSE computation."""

    def test_identical_images(self):
        """Test that identical images have zero error."""
        from sunbeam.preview.export import compute_rmse

        a = np.random.default_rng(0).random((5, 5, 3))

        assert compute_rmse(a, a) == 0.0

    def test_constant_offset(self):
        """Test RMSE of a constant difference."""
        from sunbeam.preview.export import compute_rmse

        a = np.zeros((4, 4, 3))
        b = np.full((4, 4, 3), 0.5)

        assert compute_rmse(a, b) == pytest.approx(0.5)

    def test_shape_mismatch(self):
        """Test that mismatched shapes raise ValueError."""
        from sunbeam.preview.export import compute_rmse

        with pytest.raises(ValueError):
            compute_rmse(np.zeros((2, 2)), np.zeros((3, 3)))


class TestDisplay:
    """Test Matplotlib figures without showing a window."""

    @pytest.fixture(autouse=True)
    def agg_backend(self):
        import matplotlib

        matplotlib.use("Agg")
        yield
        import matplotlib.pyplot as plt

        plt.close("all")

    def test_show_preview(self):
        """Test that a preview figure is created with one image."""
        import matplotlib.pyplot as plt

        from sunbeam.preview.display import show_preview

        show_preview(_gradient_image(), title="gradient", block=False)

        fig = plt.gcf()
        assert fig.axes[0].get_title() == "gradient"
        assert len(fig.axes[0].images) == 1

    def test_show_comparison_returns_rmse(self):
        """Test that comparing an image with itself reports zero error."""
        from sunbeam.preview.display import show_comparison

        image = _gradient_image()

        assert show_comparison(image, image, block=False) == 0.0


@pytest.mark.usefixtures("init_taichi_session")
class TestInteractivePreview:
    """Test the Taichi display buffer (no window is opened)."""

    def test_update_image_orientation(self):
        """Test that row 0 of the image ends up at the top of the Taichi field."""
        from sunbeam.preview.interactive import InteractivePreview

        image = _gradient_image(8, 4)
        preview = InteractivePreview(8, 4)
        preview.update_image(image.to_array())

        field = preview.display_image.to_numpy()
        assert field.shape == (8, 4, 3)
        expected = image.to_array()[0, 5, :3] / 255.0
        np.testing.assert_allclose(field[5, 3], expected, atol=1e-6)

    def test_update_image_rejects_wrong_shape(self):
        """Test that the array must match the window size."""
        from sunbeam.preview.interactive import InteractivePreview

        preview = InteractivePreview(8, 4)

        with pytest.raises(ValueError):
            preview.update_image(np.zeros((8, 4, 4), dtype=np.uint8))

    def test_run_stream_rejects_mismatched_image(self):
        """Test that the target image must match the window before any window opens."""
        from sunbeam.core.dispatch import PixelStream
        from sunbeam.image import Image
        from sunbeam.preview.interactive import InteractivePreview

        preview = InteractivePreview(8, 4)

        with pytest.raises(ValueError):
            preview.run_stream(PixelStream(8, 4, 1), Image(4, 8))

    def test_display_detection(self, monkeypatch):
        """Test headless detection on Linux."""
        import os

        from sunbeam.preview.interactive import InteractivePreview

        if os.name == "nt" or os.uname().sysname != "Linux":
            pytest.skip("Linux-specific display detection")
        monkeypatch.delenv("DISPLAY", raising=False)
        monkeypatch.delenv("WAYLAND_DISPLAY", raising=False)
        assert not InteractivePreview.is_display_available()

        monkeypatch.setenv("DISPLAY", ":0")
        assert InteractivePreview.is_display_available()

    def test_lazy_package_export(self):
        """Test that InteractivePreview is reachable from sunbeam.preview."""
        import sunbeam.preview
        from sunbeam.preview.interactive import InteractivePreview

        assert sunbeam.preview.InteractivePreview is InteractivePreview
