"""Core simulation components.

``core.simulation.Simulation`` drives a tick; ``core.application.Application``
wraps it in a window. Both are imported from their modules directly so the
primitives here stay free of package cycles and display requirements.
"""

from .timer import FrameClock, Timer, heading_angle, normalize_or_zero

__all__ = ["FrameClock", "Timer", "heading_angle", "normalize_or_zero"]
