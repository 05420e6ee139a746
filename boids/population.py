"""Population seeding and replenishment for the flock."""

import math
import numpy as np
from typing import Optional

from config import swarm as config
from .boid import BoidTag
from .flock import Flock


# Spawn edges (index drawn uniformly)
EDGE_LEFT, EDGE_RIGHT, EDGE_BOTTOM, EDGE_TOP = range(4)


def edge_spawn_positions(rng: np.random.Generator, count: int,
                         half_width: float, half_height: float) -> np.ndarray:
    """Uniform points along uniformly chosen viewport edges."""
    positions = np.zeros((count, 2), dtype=np.float64)
    for i in range(count):
        edge = rng.integers(0, 4)
        if edge == EDGE_LEFT:
            positions[i] = (-half_width, rng.uniform(-half_height, half_height))
        elif edge == EDGE_RIGHT:
            positions[i] = (half_width, rng.uniform(-half_height, half_height))
        elif edge == EDGE_BOTTOM:
            positions[i] = (rng.uniform(-half_width, half_width), -half_height)
        else:
            positions[i] = (rng.uniform(-half_width, half_width), half_height)
    return positions


class PopulationManager:
    """
    Keeps the flock topped up to a target size.

    Population is only ever pushed up: at most ``max_spawn_per_tick`` new
    normal boids appear per tick along the viewport edges, and nothing is
    removed here when the flock is above target.
    """

    def __init__(self, flock: Flock, rng: Optional[np.random.Generator] = None,
                 settings: Optional[dict] = None):
        params = {**config.POPULATION, **(settings or {})}
        self.flock = flock
        self.rng = rng if rng is not None else np.random.default_rng()
        self.target = int(params["target"])
        self.max_spawn_per_tick = int(params["max_spawn_per_tick"])
        self.spawn_velocity = float(params["spawn_velocity"])
        self.total_spawned = 0

    def seed(self, half_width: float, half_height: float,
             count: Optional[int] = None, specials: bool = True) -> np.ndarray:
        """
        Initial population: a randomly scattered main flock plus the
        hand-placed special boids.

        Returns the ids of every boid created.
        """
        if count is None:
            count = config.BOIDS["initial_count"]

        positions = np.column_stack([
            self.rng.uniform(-half_width, half_width, count),
            self.rng.uniform(-half_height, half_height, count),
        ])
        angles = self.rng.uniform(0.0, 2 * math.pi, count)
        speeds = self.rng.uniform(config.BOIDS["initial_speed_min"], config.BOIDS["initial_speed_max"], count)
        velocities = np.column_stack([np.cos(angles) * speeds, np.sin(angles) * speeds])

        ids = [self.flock.spawn(positions, velocities)]

        if specials:
            pink = config.SPECIAL_BOIDS["pink"]
            v = pink["velocity"]
            ids.append(self.flock.spawn(
                [pink["position"]],
                [self.rng.uniform(-v, v, 2)],
                tag=BoidTag.SPECIAL,
                color=config.COLORS["pink"],
            ))

            red = config.SPECIAL_BOIDS["red"]
            v = red["velocity"]
            for i in range(red["count"]):
                position = (half_width - red["inset"] - i * red["spacing"], -half_height + red["inset"])
                ids.append(self.flock.spawn(
                    [position],
                    [self.rng.uniform(-v, v, 2)],
                    tag=BoidTag.SPECIAL,
                    color=config.COLORS["red"],
                    flash_duration=red["flash_duration"],
                ))

        seeded = np.concatenate(ids)
        self.total_spawned += len(seeded)
        return seeded

    def deficit(self) -> int:
        return max(self.target - self.flock.num_boids, 0)

    def update(self, half_width: float, half_height: float) -> np.ndarray:
        """Spawn replacements at the edges if below target. Returns new ids."""
        count = min(self.deficit(), self.max_spawn_per_tick)
        if count == 0:
            return np.zeros(0, dtype=np.int64)

        positions = edge_spawn_positions(self.rng, count, half_width, half_height)
        v = self.spawn_velocity
        velocities = self.rng.uniform(-v, v, (count, 2))

        new_ids = self.flock.spawn(positions, velocities)
        self.total_spawned += count

        if config.LOGGING["events"]:
            print(f"[Swarm] Spawned {count} boids at edges ({self.flock.num_boids}/{self.target})")

        return new_ids
