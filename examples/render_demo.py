#!/usr/bin/env python3
"""Render a demo scene to a PNG file.

This script renders one of the built-in scenes with the parallel
dispatcher, drains the pixel stream into an image, and saves it.

Usage:
    python examples/render_demo.py [options]

Options:
    --width WIDTH       Image width in pixels (default: 1280)
    --height HEIGHT     Image height in pixels (default: 720)
    --threads N         Number of render threads (default: CPU count - 1)
    --scene NAME        demo, reference, sphere or plane (default: demo)
    --output OUTPUT     Output file path (default: render.png)
    --normalize         Stretch colors to the full range before saving
    --preview           Show the result in a Matplotlib window
    --quiet             Suppress progress output
    --verbose           Enable debug logging

Example:
    python examples/render_demo.py --width 320 --height 180 --threads 4
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

from sunbeam.config import DEFAULT_HEIGHT, DEFAULT_OUTPUT, DEFAULT_WIDTH, RenderConfig
from sunbeam.image import Image
from sunbeam.preview.export import save_png
from sunbeam.scene import Scene, create_demo_scene, create_reference_scene

SCENES = ("demo", "reference", "sphere", "plane")


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a demo scene to a PNG file.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=DEFAULT_WIDTH,
        help=f"Image width in pixels (default: {DEFAULT_WIDTH})",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=DEFAULT_HEIGHT,
        help=f"Image height in pixels (default: {DEFAULT_HEIGHT})",
    )
    parser.add_argument(
        "--threads",
        type=int,
        default=None,
        help="Number of render threads (default: CPU count - 1)",
    )
    parser.add_argument(
        "--scene",
        choices=SCENES,
        default="demo",
        help="Scene to render (default: demo)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=DEFAULT_OUTPUT,
        help=f"Output file path (default: {DEFAULT_OUTPUT})",
    )
    parser.add_argument(
        "--normalize",
        action="store_true",
        help="Stretch colors to the full range before saving",
    )
    parser.add_argument(
        "--preview",
        action="store_true",
        help="Show the result in a Matplotlib window",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser.parse_args()


def build_scene(name: str) -> Scene:
    """Create the scene selected on the command line."""
    if name == "demo":
        return create_demo_scene()
    if name == "sphere":
        return create_reference_scene(plane=False)
    if name == "plane":
        return create_reference_scene(sphere=False)
    return create_reference_scene()


def render_demo(config: RenderConfig, scene_name: str = "demo", quiet: bool = False) -> Image:
    """Render a scene and save it to config.output.

    Args:
        config: Render settings.
        scene_name: One of SCENES.
        quiet: If True, suppress progress output.

    Returns:
        The rendered image, after post-processing.
    """
    scene = build_scene(scene_name)
    num_threads = config.resolved_threads()

    if not quiet:
        print(
            f"Rendering {scene_name} scene ({config.width}x{config.height}) "
            f"on {num_threads} threads..."
        )

    start_time = time.time()
    stream = scene.spawn_render(config.width, config.height, num_threads=num_threads)
    image = Image(config.width, config.height)

    report_every = max(1, stream.total // 20)
    for x, y, pixel in stream:
        image.set_pixel(x, y, pixel)
        if not quiet and stream.received % report_every == 0:
            progress_pct = 100.0 * stream.received / stream.total
            print(f"\r  Progress: {progress_pct:.0f}%", end="", flush=True)
    stream.join()

    if not quiet:
        print()  # Newline after progress

    if config.normalize:
        image.normalize()
    image.clamp()

    output_file = save_png(image, Path(config.output))

    total_time = time.time() - start_time
    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {total_time:.2f}s")

    return image


def main() -> int:
    """Main entry point."""
    args = parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    try:
        config = RenderConfig(
            width=args.width,
            height=args.height,
            num_threads=args.threads,
            output=args.output,
            normalize=args.normalize,
        )
        image = render_demo(config, scene_name=args.scene, quiet=args.quiet)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.preview:
        from sunbeam.preview.display import show_preview

        show_preview(image, title=f"{args.scene} - {args.width}x{args.height}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
