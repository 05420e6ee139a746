"""Turret targeting, beam tracking and damage over time.

Each tick runs three passes over the turrets, in order:

  1. ``acquire()`` ticks every acquisition cooldown, drops targets that died
     or left range (restarting the cooldown), scans for the nearest in-range
     boid once the cooldown has finished, and re-aims engaged turrets.

  2. ``sync_beams()`` creates a beam for every engaged turret that lacks one,
     destroys beams whose owner or target is gone, and recomputes the geometry
     of the rest from the two endpoints.

  3. ``apply_damage()`` drains health from every in-range target and reports
     the boids that died. Removing them from the flock is left to the caller,
     which then calls ``drop_beams_on()`` so no beam points at a removed boid.

Turret targets and beam owners are plain ids, looked up again on every use.
"""

import math
import numpy as np
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, NamedTuple, Optional

from boids.flock import Flock
from config import swarm as config
from core.timer import heading_angle, normalize_or_zero
from .turret import Turret


class CombatEvent(NamedTuple):
    kind: str          # "acquired", "lost" or "killed"
    turret_id: int
    boid_id: int


@dataclass
class TickReport:
    """What the targeting system did during one tick."""
    events: List[CombatEvent] = field(default_factory=list)
    killed: List[int] = field(default_factory=list)

    def of_kind(self, kind: str) -> List[CombatEvent]:
        return [e for e in self.events if e.kind == kind]


@dataclass
class Beam:
    """Link from a turret to its current target; geometry is rebuilt every tick."""
    owner: int
    target: int
    midpoint: np.ndarray = field(default_factory=lambda: np.zeros(2))
    length: float = 0.0
    rotation: float = 0.0

    def track(self, start: np.ndarray, end: np.ndarray):
        """Stretch the beam between ``start`` and ``end``."""
        delta = np.asarray(end, dtype=np.float64) - np.asarray(start, dtype=np.float64)
        self.length = math.hypot(delta[0], delta[1])
        self.midpoint = start + delta / 2.0
        self.rotation = heading_angle(delta)


class TargetingSystem:
    """Owns turret targeting state and the beams drawn between turrets and targets."""

    def __init__(self, turrets: Iterable[Turret], flock: Flock, settings: Optional[dict] = None):
        params = {**config.COMBAT, **(settings or {})}
        self.turrets: Dict[int, Turret] = {t.id: t for t in turrets}
        self.flock = flock
        self.damage_per_second = float(params["damage_per_second"])
        self.flash_duration = float(config.BOIDS["flash_duration"])
        self._beams: Dict[int, Beam] = {}
        self.kills = 0

    @property
    def beams(self) -> List[Beam]:
        return list(self._beams.values())

    def beam_for(self, turret_id: int) -> Optional[Beam]:
        return self._beams.get(turret_id)

    def _log(self, message: str):
        if config.LOGGING["events"]:
            print(message)

    # ------------------------------------------------------------------
    # Pass 1: validation, acquisition, aim
    # ------------------------------------------------------------------

    def _target_position(self, turret: Turret) -> Optional[np.ndarray]:
        index = self.flock.index_of(turret.target)
        if index is None:
            return None
        return self.flock.positions[index]

    def _nearest_in_range(self, turret: Turret) -> Optional[int]:
        if self.flock.num_boids == 0:
            return None
        offsets = self.flock.positions - turret.position
        distances = np.hypot(offsets[:, 0], offsets[:, 1])
        candidates = np.where(distances < turret.range, distances, np.inf)
        # argmin keeps the first of equally close boids
        best = int(np.argmin(candidates))
        if not np.isfinite(candidates[best]):
            return None
        return int(self.flock.ids[best])

    def acquire(self, dt: float, report: Optional[TickReport] = None) -> TickReport:
        if report is None:
            report = TickReport()

        for turret in self.turrets.values():
            turret.cooldown.tick(dt)

            if turret.target is not None:
                position = self._target_position(turret)
                if position is None or turret.distance_to(position) >= turret.range:
                    report.events.append(CombatEvent("lost", turret.id, turret.target))
                    self._log(f"[Turret] #{turret.id} lost boid {turret.target}")
                    turret.target = None
                    turret.aim_direction = np.zeros(2)
                    turret.cooldown.reset()

            if turret.target is None and turret.cooldown.finished:
                turret.target = self._nearest_in_range(turret)
                if turret.target is not None:
                    report.events.append(CombatEvent("acquired", turret.id, turret.target))
                    self._log(f"[Turret] #{turret.id} acquired boid {turret.target}")

            if turret.target is not None:
                position = self._target_position(turret)
                turret.aim_direction = normalize_or_zero(position - turret.position)

        return report

    # ------------------------------------------------------------------
    # Pass 2: beams
    # ------------------------------------------------------------------

    def sync_beams(self):
        for turret in self.turrets.values():
            if turret.target is not None and turret.id not in self._beams:
                self._beams[turret.id] = Beam(owner=turret.id, target=turret.target)

        for owner_id, beam in list(self._beams.items()):
            turret = self.turrets.get(owner_id)
            position = self._target_position(turret) if turret is not None else None
            if turret is None or position is None:
                del self._beams[owner_id]
                continue
            beam.target = turret.target
            beam.track(turret.position, position)

    # ------------------------------------------------------------------
    # Pass 3: damage
    # ------------------------------------------------------------------

    def apply_damage(self, dt: float, report: Optional[TickReport] = None) -> TickReport:
        if report is None:
            report = TickReport()

        amount = self.damage_per_second * dt
        for turret in self.turrets.values():
            index = self.flock.index_of(turret.target)
            if index is None:
                continue
            if turret.distance_to(self.flock.positions[index]) > turret.range:
                continue

            health = self.flock.damage(index, amount, self.flash_duration)
            boid_id = int(self.flock.ids[index])
            if health <= 0.0 and boid_id not in report.killed:
                report.killed.append(boid_id)
                report.events.append(CombatEvent("killed", turret.id, boid_id))
                self.kills += 1
                self._log(f"[Combat] Boid {boid_id} destroyed by turret #{turret.id}")

        return report

    def drop_beams_on(self, boid_ids: Iterable[int]) -> int:
        """Destroy beams locked on any of ``boid_ids``. Turret targets are left for the next pass."""
        doomed = set(int(i) for i in boid_ids)
        owners = [owner for owner, beam in self._beams.items() if beam.target in doomed]
        for owner in owners:
            del self._beams[owner]
        return len(owners)

    def update(self, dt: float) -> TickReport:
        """Run targeting, beam tracking and damage for one tick."""
        report = self.acquire(dt)
        self.sync_beams()
        self.apply_damage(dt, report)
        return report
