"""Frame-synchronous simulation: flock, turrets, combat and population in a fixed order."""

import numpy as np
from typing import Optional, Tuple

from boids import Flock, PopulationManager
from config import swarm as config
from turrets import TargetingSystem, TickReport, layout_turrets
from .timer import FrameClock

Viewport = Tuple[float, float]


class Simulation:
    """
    Owns every simulation component and advances them one tick per frame.

    Tick order:
        (a) flocking and integration against a start-of-tick snapshot
        (b) screen wrap
        (c) turret targeting, beams, damage
        (d) despawn of dead boids and of the beams locked on them
        (e) population top-up

    Steps that need the viewport are skipped for a tick when it is None.
    """

    def __init__(self, seed: Optional[int] = None, flocking: Optional[dict] = None,
                 population: Optional[dict] = None, combat: Optional[dict] = None):
        self.rng = np.random.default_rng(seed)
        self._flocking = flocking
        self._population = population
        self._combat = combat
        self._build()

    def _build(self):
        self.clock = FrameClock()
        self.flock = Flock(flocking=self._flocking)
        self.population = PopulationManager(self.flock, self.rng, settings=self._population)
        self.targeting = TargetingSystem([], self.flock, settings=self._combat)
        self.seeded = False
        self.last_report = TickReport()

    @property
    def turrets(self):
        return list(self.targeting.turrets.values())

    @property
    def beams(self):
        return self.targeting.beams

    @property
    def elapsed(self) -> float:
        return self.clock.elapsed

    def setup(self, viewport: Optional[Viewport], boids: bool = True, turrets: bool = True) -> bool:
        """
        Seed the initial flock and place the turrets.

        Returns False (and does nothing) while the viewport is unknown.
        """
        if viewport is None:
            return False
        half_width, half_height = _check_viewport(viewport)

        if boids:
            seeded = self.population.seed(half_width, half_height)
            print(f"[Swarm] Seeded {len(seeded)} boids")
        if turrets:
            placed = layout_turrets(half_width * 2, half_height * 2)
            self.targeting.turrets = {t.id: t for t in placed}
            print(f"[Swarm] Placed {len(placed)} turrets")

        self.seeded = True
        return True

    def step(self, dt: float, viewport: Optional[Viewport]) -> TickReport:
        """Advance the whole simulation by ``dt`` seconds."""
        if dt < 0:
            raise ValueError(f"dt must be non-negative, got {dt}")

        elapsed = self.clock.advance(dt)

        if viewport is not None:
            half_width, half_height = _check_viewport(viewport)
            self.flock.update(dt, elapsed, half_width, half_height)
            self.flock.wrap(half_width, half_height)

        report = self.targeting.update(dt)

        self.flock.despawn_dead()
        self.targeting.drop_beams_on(report.killed)

        if viewport is not None:
            self.population.update(half_width, half_height)

        self.last_report = report
        return report

    def reset(self, viewport: Optional[Viewport]) -> bool:
        """Throw away all state and seed again."""
        print("[Swarm] Resetting simulation...")
        self._build()
        return self.setup(viewport)

    def stats(self) -> dict:
        engaged = sum(1 for t in self.turrets if t.target is not None)
        return {
            "time": self.elapsed,
            "frames": self.clock.frames,
            "boids": self.flock.num_boids,
            "engaged": engaged,
            "beams": len(self.targeting.beams),
            "kills": self.targeting.kills,
            "spawned": self.population.total_spawned,
        }


def _check_viewport(viewport: Viewport) -> Viewport:
    half_width, half_height = float(viewport[0]), float(viewport[1])
    if half_width <= 0 or half_height <= 0:
        raise ValueError(f"Viewport half extents must be positive, got {viewport}")
    return half_width, half_height
