"""Multithreaded direct-lighting ray tracer.

This package renders scenes of spheres and planes lit by directional suns,
with support for:
- One primary ray per pixel with hard shadows
- Bounding-box accelerated sphere intersection
- Row-striped rendering across worker threads
- Streaming finished pixels to a live display or an image buffer
- sRGB encoding and PNG export

Subpackages:
    core: Vector math, rays, the integrator and render dispatch
    geometry: Surface primitives and intersection algorithms
    lighting: Light sources
    camera: Camera model with ray generation
    scene: Scene container and demo scenes
    image: Pixel/image buffers and color encoding
    preview: PNG export, static display and the interactive window
"""

__version__ = "0.1.0"
