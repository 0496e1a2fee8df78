"""Lighting module for scene light sources.

Components:
    sun: Directional light infinitely far away (no falloff, no position)

Lights are created once during scene setup and are immutable afterwards,
so they are shared between render threads without locking.
"""

from .sun import Sun

__all__ = [
    "Sun",
]
