"""Boid display colors: base tint, damage flash and health darkening."""

import math

from config import swarm as config
from boids.boid import Boid


def flash_intensity(progress: float) -> float:
    """Strobe value in [0, 1] for a flash that is ``progress`` of the way through."""
    return abs(math.sin(progress * 10.0 * math.pi))


def boid_color(boid: Boid) -> tuple:
    """
    RGB color a boid should be drawn with this frame.

    While the damage flash runs the boid strobes between bright red and its
    base color; afterwards a damaged boid is darkened in proportion to its
    remaining health.
    """
    base = boid.color

    if boid.flashing:
        if flash_intensity(boid.flash_progress) > 0.5:
            return config.COLORS["flash"]
        return base

    if boid.health < 1.0:
        factor = max(boid.health, 0.0)
        return (base[0] * factor, base[1] * factor, base[2] * factor)

    return base
