"""Tests for parallel render dispatch and the pixel stream.

This module tests:
- Complete, duplicate-free delivery of width * height pixels
- Identical colors from threaded and sequential renders
- Per-worker delivery order
- Non-blocking draining, closing the stream, and worker failures
- Parallel speedup from the GIL-free row batches
"""

import math
import os
import threading
import time

import pytest


def _collect(stream):
    """Drain a stream into a {(x, y): pixel} dict, checking for duplicates."""
    pixels = {}
    for x, y, pixel in stream:
        assert (x, y) not in pixels
        pixels[(x, y)] = pixel
    return pixels


def _exploding_scene():
    """A scene whose only surface raises on every intersection test."""
    from sunbeam.geometry import Surface
    from sunbeam.scene import Scene

    class ExplodingSurface(Surface):
        def closest_intersection(self, ray):
            raise ZeroDivisionError("broken surface")

    scene = Scene()
    scene.add_surface(ExplodingSurface())
    return scene


def _gated_scene(gate):
    """A scene that renders its first row at once, then waits for `gate` on every later row."""
    from sunbeam.geometry import Surface
    from sunbeam.scene import Scene

    class GatedSurface(Surface):
        def __init__(self):
            self.rows_traced = 0

        def closest_intersection(self, ray):
            return None

        def intersect_batch(self, origins, directions):
            self.rows_traced += 1
            if self.rows_traced > 1:
                gate.wait(timeout=30)
            return super().intersect_batch(origins, directions)

    scene = Scene()
    scene.add_surface(GatedSurface())
    return scene


class TestSpawnRender:
    """Test the threaded renderer."""

    def test_delivers_every_pixel_exactly_once(self, reference_scene):
        """Test that exactly width * height distinct coordinates arrive."""
        from sunbeam.core.dispatch import spawn_render

        stream = spawn_render(reference_scene, 16, 9, num_threads=3)
        pixels = _collect(stream)
        stream.join()

        assert len(pixels) == 16 * 9
        assert set(pixels) == {(x, y) for y in range(9) for x in range(16)}
        assert stream.received == stream.total == 144
        assert stream.exhausted

    def test_threaded_matches_sequential(self):
        """Test that threading changes delivery order only, never colors."""
        from sunbeam.core.dispatch import render_sequential, spawn_render
        from sunbeam.scene import create_demo_scene, create_reference_scene

        for make_scene in (create_reference_scene, create_demo_scene):
            sequential = _collect(render_sequential(make_scene(), 24, 18))
            for num_threads in (1, 2, 5):
                stream = spawn_render(make_scene(), 24, 18, num_threads=num_threads)
                assert _collect(stream) == sequential

    def test_each_worker_delivers_in_row_column_order(self, reference_scene):
        """Test that pixels of one partition arrive in increasing (row, column) order."""
        from sunbeam.core.dispatch import spawn_render

        num_threads = 3
        stream = spawn_render(reference_scene, 8, 12, num_threads=num_threads)
        arrivals = [(y, x) for x, y, _ in stream]

        for worker_id in range(num_threads):
            own = [coord for coord in arrivals if coord[0] % num_threads == worker_id]
            assert own == sorted(own)

    def test_more_threads_than_rows(self, reference_scene):
        """Test that idle workers still let the stream finish."""
        from sunbeam.core.dispatch import spawn_render

        stream = spawn_render(reference_scene, 5, 2, num_threads=6)

        assert len(_collect(stream)) == 10
        stream.join(timeout=30)

    def test_default_thread_count(self, reference_scene, monkeypatch):
        """Test that the worker count defaults to CPU count minus one."""
        from sunbeam.core.dispatch import spawn_render

        monkeypatch.setattr("sunbeam.config.os.cpu_count", lambda: 4)
        stream = spawn_render(reference_scene, 4, 4)
        _collect(stream)

        assert stream.num_workers == 3

    def test_scene_is_frozen_after_dispatch(self, reference_scene):
        """Test that the shared scene rejects changes once workers start."""
        from sunbeam.core.dispatch import spawn_render
        from sunbeam.geometry import Sphere

        stream = spawn_render(reference_scene, 4, 4, num_threads=2)

        with pytest.raises(RuntimeError):
            reference_scene.add_surface(Sphere((0.0, 3.0, 0.0), 0.2))
        _collect(stream)

    def test_camera_and_epsilon_are_frozen_after_dispatch(self):
        """Test that a running render cannot be disturbed by swapping camera or epsilon."""
        from sunbeam.camera import Camera
        from sunbeam.core.dispatch import render_sequential, spawn_render
        from sunbeam.core.vector import Vector3
        from sunbeam.scene import create_demo_scene

        scene = create_demo_scene()
        stream = spawn_render(scene, 40, 30, num_threads=1)

        with pytest.raises(RuntimeError):
            scene.epsilon = 1e9
        with pytest.raises(RuntimeError):
            scene.camera = Camera(position=Vector3(0.0, -100.0, 0.0))

        assert _collect(stream) == _collect(render_sequential(create_demo_scene(), 40, 30))

    @pytest.mark.skipif((os.cpu_count() or 1) < 4, reason="needs at least 4 CPUs")
    def test_more_workers_cut_wall_time(self):
        """Test that four workers finish a wide render clearly faster than one."""
        from sunbeam.core.dispatch import spawn_render
        from sunbeam.scene import create_demo_scene

        def render_seconds(num_threads):
            best = math.inf
            for _ in range(3):
                start = time.perf_counter()
                stream = spawn_render(create_demo_scene(), 6000, 48, num_threads=num_threads)
                stream.join(timeout=120)
                best = min(best, time.perf_counter() - start)
            return best

        single = render_seconds(1)
        multi = render_seconds(4)

        assert multi < 0.8 * single

    def test_invalid_arguments(self, reference_scene):
        """Test that empty images and zero workers are rejected."""
        from sunbeam.core.dispatch import render_sequential, spawn_render

        with pytest.raises(ValueError):
            spawn_render(reference_scene, 0, 10)
        with pytest.raises(ValueError):
            spawn_render(reference_scene, 10, 10, num_threads=0)
        with pytest.raises(ValueError):
            render_sequential(reference_scene, 10, -1)
        assert not reference_scene.is_dispatched


class TestPixelStream:
    """Test the consumer end of the pixel channel."""

    def test_try_iter_drains_finished_render(self, reference_scene):
        """Test that try_iter returns everything once the workers are done."""
        from sunbeam.core.dispatch import spawn_render
        from sunbeam.image import Image

        stream = spawn_render(reference_scene, 10, 6, num_threads=2)
        stream.join(timeout=30)
        image = Image(10, 6)

        assert image.update(stream.try_iter()) == 60
        assert stream.exhausted
        assert list(stream.try_iter()) == []
        assert list(stream) == []

    def test_try_iter_never_blocks(self):
        """Test that polling an idle stream returns immediately."""
        from sunbeam.core.dispatch import PixelStream

        stream = PixelStream(4, 4, num_workers=1)

        assert list(stream.try_iter()) == []
        assert not stream.exhausted

    def test_send_after_close_raises(self):
        """Test that producers are told when the consumer has gone away."""
        from sunbeam.core.dispatch import PixelStream, StreamClosedError
        from sunbeam.image import Pixel

        stream = PixelStream(2, 2, num_workers=1)
        stream.send(0, 0, Pixel.black())
        stream.close()

        assert stream.closed
        with pytest.raises(StreamClosedError):
            stream.send(1, 0, Pixel.black())

    def test_close_discards_pending_pixels(self):
        """Test that a closed stream yields nothing more."""
        from sunbeam.core.dispatch import PixelStream
        from sunbeam.image import Pixel

        stream = PixelStream(2, 2, num_workers=1)
        stream.send(0, 0, Pixel.black())
        stream.send(1, 0, Pixel.black())
        stream.close()

        assert list(stream) == []
        assert stream.received == 0

    def test_closing_mid_render_stops_workers(self):
        """Test that a worker still rendering when the stream closes stops with StreamClosedError."""
        from sunbeam.core.dispatch import RenderError, StreamClosedError, spawn_render
        from sunbeam.image import Pixel

        gate = threading.Event()
        stream = spawn_render(_gated_scene(gate), 4, 3, num_threads=1)
        first = next(iter(stream))
        stream.close()
        gate.set()

        assert first == (0, 0, Pixel.black())
        assert list(stream) == []
        with pytest.raises(RenderError) as exc_info:
            stream.join(timeout=30)
        assert isinstance(exc_info.value.__cause__, StreamClosedError)

    def test_partly_consumed_row_is_kept(self):
        """Test that pixels of a row survive switching from one iterator to another."""
        import numpy as np

        from sunbeam.core.dispatch import PixelStream
        from sunbeam.image import Pixel

        stream = PixelStream(3, 1, num_workers=1)
        stream.send_row(0, np.array([[0.1, 0.0, 0.0], [0.2, 0.0, 0.0], [0.3, 0.0, 0.0]]))

        first = next(iter(stream))
        rest = list(stream.try_iter())

        assert first == (0, 0, Pixel(0.1, 0.0, 0.0, 1.0))
        assert rest == [(1, 0, Pixel(0.2, 0.0, 0.0, 1.0)), (2, 0, Pixel(0.3, 0.0, 0.0, 1.0))]
        assert stream.received == 3
        assert not stream.exhausted

    def test_send_row_after_close_raises(self):
        """Test that row producers are told when the consumer has gone away."""
        import numpy as np

        from sunbeam.core.dispatch import PixelStream, StreamClosedError

        stream = PixelStream(2, 2, num_workers=1)
        stream.close()

        with pytest.raises(StreamClosedError):
            stream.send_row(0, np.zeros((2, 3)))

    def test_worker_failure_is_reported(self):
        """Test that an exception in a worker surfaces as RenderError."""
        from sunbeam.core.dispatch import RenderError, spawn_render

        stream = spawn_render(_exploding_scene(), 4, 4, num_threads=2)

        with pytest.raises(RenderError) as exc_info:
            list(stream)
        assert isinstance(exc_info.value.__cause__, ZeroDivisionError)

        with pytest.raises(RenderError):
            stream.join(timeout=30)

    def test_repr(self):
        """Test the stream's repr shows its progress."""
        from sunbeam.core.dispatch import PixelStream

        assert repr(PixelStream(3, 2, 1)) == "PixelStream(3x2, workers=1, received=0/6)"
