"""Rendering components for the 2D swarm simulation.

Only the palette is imported eagerly; the OpenGL drawing modules are loaded
by the application once a window exists.
"""

from .palette import boid_color, flash_intensity

__all__ = ["boid_color", "flash_intensity"]
