"""Parallel render dispatch with streamed pixel delivery.

spawn_render() splits the image rows across a fixed pool of worker
threads (row y goes to worker y % num_workers). Every worker reads the
shared, frozen Scene, shades one row at a time as a NumPy batch and pushes
the finished row into one unbounded multi-producer / single-consumer
queue. The array work releases the GIL, so the workers run in parallel.

The consumer side of that queue is a PixelStream. It splits rows back into
pixels and can be drained completely (batch export) or polled without
blocking (live display):

    >>> from sunbeam.core.dispatch import spawn_render
    >>> from sunbeam.image import Image
    >>> from sunbeam.scene.demo import create_demo_scene
    >>>
    >>> stream = spawn_render(create_demo_scene(), 128, 72)
    >>> image = Image(128, 72)
    >>> image.update(stream)          # blocks until every pixel arrived
    >>>
    >>> # Or, inside a display loop:
    >>> image.update(stream.try_iter())  # only what is ready right now

Exactly width * height items are delivered, each (x, y) once. The order
across workers is unspecified; within one worker pixels arrive in
increasing (row, column) order.

There is no cancellation of running workers. Closing the stream makes
their next send raise StreamClosedError, which ends that partition; the
error is reported through PixelStream.join().
"""

from __future__ import annotations

import logging
import queue
import threading
from collections import deque
from collections.abc import Iterator
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

from sunbeam.config import default_thread_count
from sunbeam.core.arrays import FloatArray
from sunbeam.core.integrator import iter_partition, render_partition_rows, row_pixels
from sunbeam.image.buffer import Pixel

if TYPE_CHECKING:
    from sunbeam.scene.scene import Scene

_LOGGER: logging.Logger = logging.getLogger(__name__)

# One delivered pixel: (x, y, linear color)
PixelItem = tuple[int, int, Pixel]


class StreamClosedError(RuntimeError):
    """Raised by PixelStream.send() after the consumer closed the stream."""


class RenderError(RuntimeError):
    """A render worker failed; the original exception is the __cause__."""


@dataclass(frozen=True)
class _ProducerDone:
    """End-of-partition marker a worker puts after its last pixel."""

    worker_id: int
    error: BaseException | None = None


@dataclass(frozen=True, eq=False)
class _RowItem:
    """One finished image row: y and its (width, 3) linear RGB."""

    y: int
    rgb: FloatArray

    def __len__(self) -> int:
        return len(self.rgb)


_QueueItem = Union[PixelItem, _RowItem, _ProducerDone]


class PixelStream:
    """Consumer end of the pixel channel shared by the render workers.

    Iterating the stream blocks until the next pixel is available and
    ends once every worker has finished. try_iter() returns only what has
    already arrived. Both may be mixed, but the stream is single-consumer
    and cannot be restarted.

    Attributes:
        width: Width of the image being rendered.
        height: Height of the image being rendered.
        num_workers: Number of producer threads.
    """

    def __init__(self, width: int, height: int, num_workers: int) -> None:
        self.width = width
        self.height = height
        self.num_workers = num_workers
        self._queue: queue.SimpleQueue[_QueueItem] = queue.SimpleQueue()
        # Pixels already taken off the queue but not yet handed out
        self._pending: deque[PixelItem] = deque()
        self._closed = threading.Event()
        self._received = 0
        self._finished_workers = 0
        self._futures: list[Future[int]] = []

    # =========================================================================
    # Producer side
    # =========================================================================

    def send(self, x: int, y: int, pixel: Pixel) -> None:
        """Deliver one finished pixel. Never blocks.

        Raises:
            StreamClosedError: If the consumer has closed the stream.
        """
        if self._closed.is_set():
            raise StreamClosedError("Pixel stream was closed by its consumer")
        self._queue.put((x, y, pixel))

    def send_row(self, y: int, rgb: FloatArray) -> None:
        """Deliver a finished row of linear RGB, one entry per column.

        Raises:
            StreamClosedError: If the consumer has closed the stream.
        """
        if self._closed.is_set():
            raise StreamClosedError("Pixel stream was closed by its consumer")
        self._queue.put(_RowItem(y, rgb))

    def _finish_worker(self, worker_id: int, error: BaseException | None) -> None:
        self._queue.put(_ProducerDone(worker_id, error))

    def _attach(self, futures: list[Future[int]]) -> None:
        self._futures = futures

    # =========================================================================
    # Consumer side
    # =========================================================================

    @property
    def total(self) -> int:
        """Number of pixels a complete render delivers."""
        return self.width * self.height

    @property
    def received(self) -> int:
        """Number of pixels handed to the consumer so far."""
        return self._received

    @property
    def exhausted(self) -> bool:
        """Whether every worker has finished and its pixels were consumed."""
        return self._finished_workers >= self.num_workers and not self._pending

    @property
    def closed(self) -> bool:
        """Whether close() was called."""
        return self._closed.is_set()

    def _accept(self, item: _QueueItem) -> None:
        """Count an end marker, or queue up the pixels an item carries."""
        if isinstance(item, _ProducerDone):
            self._finished_workers += 1
            if item.error is not None and not isinstance(item.error, StreamClosedError):
                raise RenderError(f"Render worker {item.worker_id} failed") from item.error
        elif isinstance(item, _RowItem):
            self._pending.extend(row_pixels(item.y, item.rgb))
        else:
            self._pending.append(item)

    def _pop(self) -> PixelItem:
        self._received += 1
        return self._pending.popleft()

    def __iter__(self) -> Iterator[PixelItem]:
        while not self.exhausted and not self.closed:
            if self._pending:
                yield self._pop()
            else:
                self._accept(self._queue.get())

    def try_iter(self) -> Iterator[PixelItem]:
        """Yield the pixels that are available now, without blocking."""
        while not self.exhausted and not self.closed:
            if self._pending:
                yield self._pop()
                continue
            try:
                item = self._queue.get_nowait()
            except queue.Empty:
                return
            self._accept(item)

    def close(self) -> None:
        """Drop the consumer end.

        Pending pixels are discarded and workers stop at their next send.
        """
        if self._closed.is_set():
            return
        self._closed.set()
        discarded = len(self._pending)
        self._pending.clear()
        while True:
            try:
                item = self._queue.get_nowait()
            except queue.Empty:
                break
            if isinstance(item, _RowItem):
                discarded += len(item)
            elif not isinstance(item, _ProducerDone):
                discarded += 1
        _LOGGER.info(
            "Pixel stream closed after %d of %d pixels (%d discarded)",
            self._received,
            self.total,
            discarded,
        )

    def join(self, timeout: float | None = None) -> None:
        """Wait for all workers to finish.

        Args:
            timeout: Seconds to wait for each worker, or None to wait
                indefinitely.

        Raises:
            RenderError: If any worker raised, including a worker stopped
                by close().
            TimeoutError: If a worker did not finish in time.
        """
        for worker_id, future in enumerate(self._futures):
            error = future.exception(timeout=timeout)
            if error is not None:
                raise RenderError(f"Render worker {worker_id} failed") from error

    def __repr__(self) -> str:
        return (
            f"PixelStream({self.width}x{self.height}, workers={self.num_workers}, "
            f"received={self._received}/{self.total})"
        )


def _render_worker(
    scene: Scene,
    width: int,
    height: int,
    stream: PixelStream,
    worker_id: int,
    num_workers: int,
) -> int:
    """Thread body: render one partition into the stream."""
    error: BaseException | None = None
    try:
        count = render_partition_rows(
            scene, width, height, stream.send_row, worker_id, num_workers
        )
        _LOGGER.debug("Render worker %d finished %d pixels", worker_id, count)
        return count
    except StreamClosedError as exc:
        _LOGGER.debug("Render worker %d stopped: stream closed", worker_id)
        error = exc
        raise
    except Exception as exc:
        _LOGGER.exception("Render worker %d failed", worker_id)
        error = exc
        raise
    finally:
        stream._finish_worker(worker_id, error)


def spawn_render(
    scene: Scene,
    width: int,
    height: int,
    *,
    num_threads: int | None = None,
) -> PixelStream:
    """Start rendering `scene` in worker threads.

    The scene is frozen against further changes (see Scene) and
    shared read-only by all workers.

    Args:
        scene: The scene to render.
        width: Image width in pixels.
        height: Image height in pixels.
        num_threads: Number of worker threads. Defaults to
            default_thread_count().

    Returns:
        The consumer end of the pixel channel.

    Raises:
        ValueError: If the image size or thread count is not positive.
    """
    if width < 1 or height < 1:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if num_threads is None:
        num_threads = default_thread_count()
    if num_threads < 1:
        raise ValueError(f"num_threads must be at least 1, got {num_threads}")

    scene.mark_dispatched()
    stream = PixelStream(width, height, num_threads)

    _LOGGER.debug("Rendering %dx%d with %d worker threads", width, height, num_threads)

    executor = ThreadPoolExecutor(max_workers=num_threads, thread_name_prefix="sunbeam-render")
    futures = [
        executor.submit(_render_worker, scene, width, height, stream, worker_id, num_threads)
        for worker_id in range(num_threads)
    ]
    stream._attach(futures)
    # Workers keep running; the pool's threads exit once their partition is done
    executor.shutdown(wait=False)

    return stream


def render_sequential(scene: Scene, width: int, height: int) -> Iterator[PixelItem]:
    """Render every pixel on the calling thread, in row-major order.

    Produces the same color values as spawn_render() for the same scene
    and size; only the delivery order differs.
    """
    if width < 1 or height < 1:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    return iter_partition(scene, width, height, worker_id=0, num_workers=1)
