"""Boid classification and the read-only per-boid view handed to renderers."""

import numpy as np
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Tuple


class BoidTag(IntEnum):
    """Visual classification. Special boids fly exactly like normal ones."""
    NORMAL = 0
    SPECIAL = 1


@dataclass(frozen=True)
class Boid:
    """
    Snapshot of a single boid (bird-oid object) in the flock.

    Attributes:
        id: Stable identifier, never reused within a session
        position: 2D position vector
        velocity: 2D velocity vector
        acceleration: 2D acceleration applied during the last tick
        health: Remaining health; alive while > 0
        flash_elapsed: Seconds since the damage flash last (re)started
        flash_duration: Length of the damage flash
        tag: Normal or special classification
        color: RGB base color (0-1 range), fixed at spawn
    """
    id: int
    position: np.ndarray = field(default_factory=lambda: np.zeros(2))
    velocity: np.ndarray = field(default_factory=lambda: np.zeros(2))
    acceleration: np.ndarray = field(default_factory=lambda: np.zeros(2))
    health: float = 1.0
    flash_elapsed: float = 0.0
    flash_duration: float = 0.5
    tag: BoidTag = BoidTag.NORMAL
    color: Tuple[float, float, float] = (1.0, 1.0, 1.0)

    @property
    def alive(self) -> bool:
        return self.health > 0.0

    @property
    def speed(self) -> float:
        return float(np.hypot(self.velocity[0], self.velocity[1]))

    @property
    def flashing(self) -> bool:
        """True while the damage flash timer is still running."""
        return self.flash_elapsed < self.flash_duration

    @property
    def flash_progress(self) -> float:
        """Fraction of the flash timer elapsed, 1.0 once finished."""
        if self.flash_duration <= 0:
            return 1.0
        return min(self.flash_elapsed / self.flash_duration, 1.0)
