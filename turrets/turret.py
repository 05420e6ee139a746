"""Stationary turret record and its derived targeting state."""

import numpy as np
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from config import swarm as config
from core.timer import Timer, heading_angle


class TurretState(Enum):
    IDLE = "idle"            # Waiting out the re-targeting cooldown
    ACQUIRING = "acquiring"  # Cooldown done, scanning every tick
    ENGAGED = "engaged"      # Tracking a target


@dataclass
class Turret:
    """
    A fixed defensive unit.

    ``target`` holds a boid id, never the boid itself; the targeting system
    re-validates it against the flock every tick before using it.
    """
    id: int
    position: np.ndarray
    range: float = config.TURRETS["range"]
    target: Optional[int] = None
    cooldown: Timer = field(default_factory=lambda: Timer(config.TURRETS["cooldown"]))
    aim_direction: np.ndarray = field(default_factory=lambda: np.zeros(2))

    def __post_init__(self):
        self.position = np.asarray(self.position, dtype=np.float64)

    @property
    def state(self) -> TurretState:
        if self.target is not None:
            return TurretState.ENGAGED
        if self.cooldown.finished:
            return TurretState.ACQUIRING
        return TurretState.IDLE

    @property
    def aim_angle(self) -> float:
        """Barrel rotation in radians (0 points the barrel along +y)."""
        return heading_angle(self.aim_direction)

    def distance_to(self, point) -> float:
        return float(np.hypot(point[0] - self.position[0], point[1] - self.position[1]))


def layout_turrets(width: float, height: float, layout=None,
                   turret_range: Optional[float] = None,
                   cooldown: Optional[float] = None) -> List[Turret]:
    """
    Place turrets at fixed fractions of the full viewport size.

    Args:
        width: Full viewport width
        height: Full viewport height
        layout: Sequence of (fx, fy) fractions; defaults to config
        turret_range: Targeting range for every turret
        cooldown: Re-targeting delay for every turret
    """
    if layout is None:
        layout = config.TURRETS["layout"]
    if turret_range is None:
        turret_range = config.TURRETS["range"]
    if cooldown is None:
        cooldown = config.TURRETS["cooldown"]

    return [
        Turret(
            id=i,
            position=np.array([fx * width, fy * height]),
            range=turret_range,
            cooldown=Timer(cooldown),
        )
        for i, (fx, fy) in enumerate(layout)
    ]
