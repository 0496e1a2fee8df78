"""Direct-lighting integrator.

This module computes pixel colors with a single-bounce local lighting
model:

1. Cast the primary ray through the pixel; a miss is black.
2. For each sun, cast a shadow ray from the hit point toward the light.
   Any hit means the light is fully occluded (hard shadow).
3. Otherwise add max(0, normal . to_light) * light.color (Lambertian,
   no specular term).

Contributions are accumulated unclamped, so several lights can push a
channel above 1. Clamping or normalization is left to the image
post-processing step.

Pixels are computed independently of each other, which is what makes
row-striped parallel rendering produce the same values as a sequential
render.

Renders shade one image row at a time as a NumPy batch (shade_batch),
which releases the GIL for the array work and lets render threads run in
parallel. The per-ray shade() applies the same operations to one ray and
gives the same bits.

Example:
    >>> from sunbeam.core.integrator import iter_partition
    >>> from sunbeam.scene.demo import create_demo_scene
    >>> scene = create_demo_scene()
    >>> for x, y, pixel in iter_partition(scene, 64, 36, worker_id=0, num_workers=1):
    ...     pass
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING

import numpy as np

from sunbeam.core.arrays import FloatArray, as_row, dot_rows, normalize_rows
from sunbeam.core.ray import Ray
from sunbeam.core.vector import Vector3
from sunbeam.image.buffer import Pixel

if TYPE_CHECKING:
    from sunbeam.scene.scene import Scene

# Callback receiving one finished pixel: (x, y, pixel)
PixelSink = Callable[[int, int, Pixel], None]
# Callback receiving one finished row: (y, (width, 3) linear RGB array)
RowSink = Callable[[int, FloatArray], None]


def shade(scene: Scene, ray: Ray) -> Vector3:
    """Linear RGB radiance arriving along a primary ray.

    Args:
        scene: The scene to trace against.
        ray: The primary ray.

    Returns:
        The accumulated, unclamped linear RGB. Black on a miss.
    """
    rgb = Vector3.zero()

    hit = scene.trace(ray)
    if hit is None:
        return rgb

    for light in scene.lights:
        dir_to_light = light.direction_to_light
        shadow_ray = Ray(hit.point, dir_to_light)
        if scene.trace(shadow_ray) is not None:
            # Hard shadow: the light is fully blocked
            continue
        rgb = rgb + light.color * max(0.0, hit.normal.dot(dir_to_light))

    return rgb


def shade_batch(scene: Scene, origins: FloatArray, directions: FloatArray) -> FloatArray:
    """Vectorized shade() over N primary rays.

    Row i equals shade() for the ray origins[i] + t * directions[i],
    computed with the same floating-point operations in the same order.

    Args:
        scene: The scene to trace against.
        origins: (N, 3) ray origins.
        directions: (N, 3) unit ray directions.

    Returns:
        (N, 3) accumulated, unclamped linear RGB.
    """
    rgb = np.zeros((len(directions), 3))

    primary = scene.trace_batch(origins, directions)
    if not primary.mask.any():
        return rgb

    points = primary.points[primary.mask]
    normals = primary.normals[primary.mask]
    lit_rgb = rgb[primary.mask]

    for light in scene.lights:
        dir_to_light = light.direction_to_light
        shadow_direction = as_row(Ray(Vector3.zero(), dir_to_light).direction)
        shadowed = scene.trace_batch(points, np.broadcast_to(shadow_direction, points.shape)).mask

        cosines = dot_rows(normals, as_row(dir_to_light))
        contribution = as_row(light.color) * np.where(cosines > 0.0, cosines, 0.0)[:, None]
        lit_rgb = np.where(shadowed[:, None], lit_rgb, lit_rgb + contribution)

    rgb[primary.mask] = lit_rgb
    return rgb


def partition_rows(height: int, worker_id: int, num_workers: int) -> range:
    """Rows assigned to one worker by round-robin striping.

    Row y belongs to worker y % num_workers, so consecutive rows go to
    different workers and spatially clustered expensive regions are
    spread across all of them.

    Raises:
        ValueError: If num_workers < 1 or worker_id is out of range.
    """
    if num_workers < 1:
        raise ValueError(f"num_workers must be at least 1, got {num_workers}")
    if not 0 <= worker_id < num_workers:
        raise ValueError(f"worker_id {worker_id} is not in [0, {num_workers})")
    return range(worker_id, height, num_workers)


def iter_partition_rows(
    scene: Scene,
    width: int,
    height: int,
    worker_id: int,
    num_workers: int,
) -> Iterator[tuple[int, FloatArray]]:
    """Render the rows of one partition, one whole row at a time.

    Each row is shaded as a batch of `width` primary rays. Rows are
    yielded in increasing order.

    Args:
        scene: The scene to render. Only read.
        width: Image width in pixels.
        height: Image height in pixels.
        worker_id: Index of this partition, 0 <= worker_id < num_workers.
        num_workers: Total number of partitions.

    Yields:
        (y, rgb) with rgb a (width, 3) array of linear RGB, column x in
        row x.
    """
    rows = partition_rows(height, worker_id, num_workers)
    camera = scene.camera
    directions_for_row = camera.row_direction_mapper(width, height)
    origins = np.broadcast_to(as_row(camera.position), (width, 3))

    for pixel_y in rows:
        directions = normalize_rows(directions_for_row(pixel_y))
        yield pixel_y, shade_batch(scene, origins, directions)


def row_pixels(pixel_y: int, rgb: FloatArray) -> Iterator[tuple[int, int, Pixel]]:
    """Split a shaded row into (x, y, pixel) items in column order."""
    for pixel_x, (red, green, blue) in enumerate(rgb.tolist()):
        yield pixel_x, pixel_y, Pixel(red, green, blue, 1.0)


def iter_partition(
    scene: Scene,
    width: int,
    height: int,
    worker_id: int,
    num_workers: int,
) -> Iterator[tuple[int, int, Pixel]]:
    """Render the rows of one partition, yielding pixels as they finish.

    Pixels are yielded in increasing (row, column) order. The values do
    not depend on the partitioning: a pixel gets the same bits whichever
    worker renders it.

    Yields:
        (x, y, pixel) for every pixel in the partition.
    """
    for pixel_y, rgb in iter_partition_rows(scene, width, height, worker_id, num_workers):
        yield from row_pixels(pixel_y, rgb)


def render_partition(
    scene: Scene,
    width: int,
    height: int,
    sink: PixelSink,
    worker_id: int,
    num_workers: int,
) -> int:
    """Render one partition, handing every pixel to `sink`.

    Exceptions raised by the sink (for example a closed stream) stop the
    partition and propagate to the caller.

    Returns:
        The number of pixels delivered.
    """
    count = 0
    for pixel_x, pixel_y, pixel in iter_partition(scene, width, height, worker_id, num_workers):
        sink(pixel_x, pixel_y, pixel)
        count += 1
    return count


def render_partition_rows(
    scene: Scene,
    width: int,
    height: int,
    sink: RowSink,
    worker_id: int,
    num_workers: int,
) -> int:
    """Like render_partition(), but hand `sink` one whole row at a time.

    Returns:
        The number of pixels delivered.
    """
    count = 0
    for pixel_y, rgb in iter_partition_rows(scene, width, height, worker_id, num_workers):
        sink(pixel_y, rgb)
        count += width
    return count
