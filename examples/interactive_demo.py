#!/usr/bin/env python3
"""Watch a demo scene render in real time.

This script starts the parallel render and opens a Taichi GGUI window that
shows the image filling in as pixels arrive. Closing the window stops the
render; the image is then clamped and saved.

Usage:
    python examples/interactive_demo.py [--width W] [--height H] [--threads N]

The render threads do all the tracing; the window only displays the
encoded image buffer.
"""

from __future__ import annotations

import argparse
import logging
import sys

import taichi as ti

from sunbeam.config import DEFAULT_HEIGHT, DEFAULT_OUTPUT, DEFAULT_WIDTH
from sunbeam.image import Image
from sunbeam.preview.export import save_png
from sunbeam.scene import create_demo_scene


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(description="Watch a demo scene render in real time.")
    parser.add_argument("--width", type=int, default=DEFAULT_WIDTH)
    parser.add_argument("--height", type=int, default=DEFAULT_HEIGHT)
    parser.add_argument("--threads", type=int, default=None)
    parser.add_argument("--output", type=str, default=DEFAULT_OUTPUT)
    return parser.parse_args()


def main() -> int:
    """Main entry point for the interactive renderer.

    Returns:
        Exit code (0 for success, non-zero for error).
    """
    args = parse_args()
    logging.basicConfig(level=logging.INFO, format="%(name)s %(levelname)s: %(message)s")

    # The window only needs Taichi's CPU backend
    ti.init(arch=ti.cpu)

    from sunbeam.preview.interactive import InteractivePreview

    if not InteractivePreview.is_display_available():
        print("Error: No display available. Cannot run interactive preview.")
        print("This script requires a graphical display environment.")
        return 1

    print(f"Creating interactive preview window ({args.width}x{args.height})...")
    preview = InteractivePreview(args.width, args.height)
    image = Image(args.width, args.height)
    stream = create_demo_scene().spawn_render(args.width, args.height, num_threads=args.threads)

    print("Rendering... close the window to exit")

    try:
        received = preview.run_stream(stream, image)
    except KeyboardInterrupt:
        print("\nInterrupted by user.")
        stream.close()
        received = stream.received
    finally:
        preview.close()

    image.clamp()
    output_file = save_png(image, args.output)
    print(f"Received {received}/{stream.total} pixels, saved to {output_file}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
