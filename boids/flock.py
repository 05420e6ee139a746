"""Flock storage and per-tick flocking - spatial hashing and Numba JIT over struct-of-arrays."""

import math
import numpy as np
from numba import njit, prange
from typing import Iterator, NamedTuple, Optional

from config import swarm as config
from .boid import Boid, BoidTag


# ============================================================================
# NUMBA JIT-COMPILED SPATIAL GRID FUNCTIONS
# ============================================================================

@njit(cache=True)
def get_cell_coords(x: float, y: float, cell_size: float, grid_w: int, grid_h: int,
                    offset_x: float, offset_y: float):
    """Convert 2D position to clamped (cx, cy) cell coordinates."""
    cx = int(math.floor((x + offset_x) / cell_size))
    cy = int(math.floor((y + offset_y) / cell_size))

    cx = max(0, min(cx, grid_w - 1))
    cy = max(0, min(cy, grid_h - 1))

    return cx, cy


@njit(parallel=True, cache=True)
def assign_cells(
    positions: np.ndarray,
    cell_indices: np.ndarray,
    cell_size: float,
    grid_w: int,
    grid_h: int,
    offset_x: float,
    offset_y: float,
    num_boids: int
):
    """Assign each boid to a cell."""
    for i in prange(num_boids):
        cx, cy = get_cell_coords(
            positions[i, 0], positions[i, 1],
            cell_size, grid_w, grid_h, offset_x, offset_y
        )
        cell_indices[i] = cx + cy * grid_w


@njit(cache=True)
def build_cell_lists(
    cell_indices: np.ndarray,
    sorted_indices: np.ndarray,
    cell_starts: np.ndarray,
    cell_counts: np.ndarray,
    num_boids: int,
    num_cells: int
):
    """Build cell start indices and counts after sorting."""
    for i in range(num_cells):
        cell_starts[i] = -1
        cell_counts[i] = 0

    for i in range(num_boids):
        cell = cell_indices[sorted_indices[i]]
        if cell_starts[cell] == -1:
            cell_starts[cell] = i
        cell_counts[cell] += 1


@njit(cache=True)
def edge_force_1d(pos: float, half_extent: float, margin: float, strength: float) -> float:
    """Quadratic ease-in push away from whichever border pos is inside the margin of."""
    if pos > half_extent - margin:
        distance_to_edge = half_extent - pos
        ratio = 1.0 - distance_to_edge / margin
        return -ratio * ratio * strength
    elif pos < -half_extent + margin:
        distance_to_edge = pos + half_extent
        ratio = 1.0 - distance_to_edge / margin
        return ratio * ratio * strength
    return 0.0


@njit(parallel=True, cache=True)
def compute_steering(
    positions: np.ndarray,
    velocities: np.ndarray,
    phases: np.ndarray,
    sorted_indices: np.ndarray,
    cell_starts: np.ndarray,
    cell_counts: np.ndarray,
    accelerations: np.ndarray,
    cell_size: float,
    grid_w: int,
    grid_h: int,
    offset_x: float,
    offset_y: float,
    half_width: float,
    half_height: float,
    elapsed: float,
    perception_radius: float,
    separation_radius: float,
    separation_weight: float,
    alignment_gain: float,
    cohesion_gain: float,
    max_speed: float,
    max_force: float,
    edge_margin: float,
    edge_force: float,
    wander_strength: float,
    wander_frequency: float,
    wander_y_ratio: float,
    num_boids: int
):
    """
    Edge avoidance, separation/alignment/cohesion and wander for every boid.

    Reads only the snapshot arrays; writes only accelerations[i].
    """
    for i in prange(num_boids):
        px = positions[i, 0]
        py = positions[i, 1]
        vx = velocities[i, 0]
        vy = velocities[i, 1]

        ax = edge_force_1d(px, half_width, edge_margin, edge_force)
        ay = edge_force_1d(py, half_height, edge_margin, edge_force)

        sep_x, sep_y = 0.0, 0.0
        align_x, align_y = 0.0, 0.0
        coh_x, coh_y = 0.0, 0.0
        neighbors = 0

        cx, cy = get_cell_coords(px, py, cell_size, grid_w, grid_h, offset_x, offset_y)

        for ncy in range(max(0, cy - 1), min(grid_h, cy + 2)):
            for ncx in range(max(0, cx - 1), min(grid_w, cx + 2)):
                cell_idx = ncx + ncy * grid_w

                start = cell_starts[cell_idx]
                if start == -1:
                    continue

                for k in range(cell_counts[cell_idx]):
                    j = sorted_indices[start + k]
                    if i == j:
                        continue

                    dx = px - positions[j, 0]
                    dy = py - positions[j, 1]
                    dist = math.sqrt(dx * dx + dy * dy)

                    if dist < perception_radius and dist > 0.0:
                        if dist < separation_radius:
                            strength = (separation_radius - dist) / separation_radius
                            sep_x += dx / dist * strength
                            sep_y += dy / dist * strength

                        align_x += velocities[j, 0]
                        align_y += velocities[j, 1]

                        coh_x += positions[j, 0]
                        coh_y += positions[j, 1]

                        neighbors += 1

        if neighbors > 0:
            align_x /= neighbors
            align_y /= neighbors
            coh_x = coh_x / neighbors - px
            coh_y = coh_y / neighbors - py

            sep_mag = math.sqrt(sep_x * sep_x + sep_y * sep_y)
            if sep_mag > 0:
                sep_x = sep_x / sep_mag * max_force
                sep_y = sep_y / sep_mag * max_force

            align_mag = math.sqrt(align_x * align_x + align_y * align_y)
            if align_mag > 0:
                align_x = (align_x / align_mag * max_speed - vx) * alignment_gain
                align_y = (align_y / align_mag * max_speed - vy) * alignment_gain

            coh_mag = math.sqrt(coh_x * coh_x + coh_y * coh_y)
            if coh_mag > 0:
                coh_x = (coh_x / coh_mag * max_speed - vx) * cohesion_gain
                coh_y = (coh_y / coh_mag * max_speed - vy) * cohesion_gain

            ax += sep_x * separation_weight + align_x + coh_x
            ay += sep_y * separation_weight + align_y + coh_y

        angle = elapsed * wander_frequency
        ax += math.sin(angle + phases[i]) * wander_strength
        ay += math.cos(angle * wander_y_ratio + phases[i]) * wander_strength

        accelerations[i, 0] = ax
        accelerations[i, 1] = ay


@njit(cache=True)
def clamp_speed(vx: float, vy: float, max_speed: float):
    speed = math.sqrt(vx * vx + vy * vy)
    if speed > max_speed:
        scale = max_speed / speed
        return vx * scale, vy * scale
    return vx, vy


@njit(parallel=True, cache=True)
def update_physics_numba(
    positions: np.ndarray,
    velocities: np.ndarray,
    accelerations: np.ndarray,
    damping: float,
    max_speed: float,
    min_speed: float,
    dt: float,
    num_boids: int
):
    """
    Integrate velocity and position.

    The acceleration delta is deliberately applied twice: once before damping,
    clamping and the speed floor, then again followed by a second clamp.
    """
    for i in prange(num_boids):
        dvx = accelerations[i, 0] * dt
        dvy = accelerations[i, 1] * dt

        vx = (velocities[i, 0] + dvx) * damping
        vy = (velocities[i, 1] + dvy) * damping
        vx, vy = clamp_speed(vx, vy, max_speed)

        speed = math.sqrt(vx * vx + vy * vy)
        if speed < min_speed:
            if speed > 0.0:
                vx = vx / speed * min_speed
                vy = vy / speed * min_speed
            else:
                vx = 0.0
                vy = 0.0

        vx, vy = clamp_speed(vx + dvx, vy + dvy, max_speed)

        velocities[i, 0] = vx
        velocities[i, 1] = vy

        positions[i, 0] += vx * dt
        positions[i, 1] += vy * dt


@njit(cache=True)
def wrap_positions_numba(positions: np.ndarray, half_width: float, half_height: float, num_boids: int):
    """Teleport boids that left the viewport to the opposite side (per axis)."""
    for i in range(num_boids):
        if positions[i, 0] > half_width:
            positions[i, 0] = -half_width
        elif positions[i, 0] < -half_width:
            positions[i, 0] = half_width

        if positions[i, 1] > half_height:
            positions[i, 1] = -half_height
        elif positions[i, 1] < -half_height:
            positions[i, 1] = half_height


# ============================================================================
# FLOCK CLASS
# ============================================================================

class FlockSnapshot(NamedTuple):
    """Read-only copy of flock kinematics taken once at the start of a tick."""
    ids: np.ndarray
    positions: np.ndarray
    velocities: np.ndarray


def _frozen(array: np.ndarray) -> np.ndarray:
    array = np.array(array, copy=True)
    array.setflags(write=False)
    return array


class Flock:
    """
    The live boid population, stored column-wise, plus the flocking update.

    Boids are addressed by stable ids. Row indices shift whenever boids are
    despawned, so anything holding on to a boid between ticks keeps its id and
    looks it up again with ``index_of``.
    """

    def __init__(self, flocking: Optional[dict] = None, edges: Optional[dict] = None):
        params = {**config.FLOCKING, **(flocking or {})}
        edge_params = {**config.EDGES, **(edges or {})}

        # Flocking parameters
        self.perception_radius = float(params["perception_radius"])
        self.separation_radius = float(params["separation_radius"])
        self.separation_weight = float(params["separation_weight"])
        self.alignment_gain = float(params["alignment_gain"])
        self.cohesion_gain = float(params["cohesion_gain"])
        self.max_speed = float(params["max_speed"])
        self.min_speed = float(params["min_speed"])
        self.max_force = float(params["max_force"])
        self.damping = float(params["damping"])
        self.wander_strength = float(params["wander_strength"])
        self.wander_frequency = float(params["wander_frequency"])
        self.wander_y_ratio = float(params["wander_y_ratio"])
        self.wander_phase_step = float(params["wander_phase_step"])

        self.edge_margin = float(edge_params["margin"])
        self.edge_force = float(edge_params["force"])

        # Spatial grid parameters
        self.cell_size = self.perception_radius

        # Boid data
        self.ids = np.zeros(0, dtype=np.int64)
        self.positions = np.zeros((0, 2), dtype=np.float64)
        self.velocities = np.zeros((0, 2), dtype=np.float64)
        self.accelerations = np.zeros((0, 2), dtype=np.float64)
        self.health = np.zeros(0, dtype=np.float64)
        self.flash_elapsed = np.zeros(0, dtype=np.float64)
        self.flash_duration = np.zeros(0, dtype=np.float64)
        self.tags = np.zeros(0, dtype=np.int8)
        self.colors = np.zeros((0, 3), dtype=np.float64)
        self.phases = np.zeros(0, dtype=np.float64)

        self._next_id = 0

    # ------------------------------------------------------------------
    # Store
    # ------------------------------------------------------------------

    @property
    def num_boids(self) -> int:
        return len(self.ids)

    def __len__(self) -> int:
        return len(self.ids)

    def __contains__(self, boid_id) -> bool:
        return self.index_of(boid_id) is not None

    def __iter__(self) -> Iterator[Boid]:
        return self.views()

    def spawn(
        self,
        positions,
        velocities,
        tag: BoidTag = BoidTag.NORMAL,
        color=None,
        flash_duration: Optional[float] = None,
    ) -> np.ndarray:
        """
        Add a batch of boids at full health and return their new ids.

        Args:
            positions: (n, 2) array-like of spawn positions
            velocities: (n, 2) array-like of initial velocities
            tag: Classification for the whole batch
            color: RGB base color for the whole batch (defaults to normal white)
            flash_duration: Initial damage flash length
        """
        positions = np.asarray(positions, dtype=np.float64).reshape(-1, 2)
        velocities = np.asarray(velocities, dtype=np.float64).reshape(-1, 2)
        if len(positions) != len(velocities):
            raise ValueError(
                f"Spawn batch mismatch: {len(positions)} positions, {len(velocities)} velocities"
            )

        count = len(positions)
        if count == 0:
            return np.zeros(0, dtype=np.int64)

        if color is None:
            color = config.COLORS["normal"]
        if flash_duration is None:
            flash_duration = config.BOIDS["flash_duration"]

        new_ids = np.arange(self._next_id, self._next_id + count, dtype=np.int64)
        self._next_id += count

        self.ids = np.concatenate([self.ids, new_ids])
        self.positions = np.concatenate([self.positions, positions])
        self.velocities = np.concatenate([self.velocities, velocities])
        self.accelerations = np.concatenate([self.accelerations, np.zeros((count, 2))])
        self.health = np.concatenate([self.health, np.ones(count)])
        self.flash_elapsed = np.concatenate([self.flash_elapsed, np.zeros(count)])
        self.flash_duration = np.concatenate([self.flash_duration, np.full(count, float(flash_duration))])
        self.tags = np.concatenate([self.tags, np.full(count, int(tag), dtype=np.int8)])
        self.colors = np.concatenate([self.colors, np.tile(np.asarray(color, dtype=np.float64), (count, 1))])
        self.phases = np.concatenate([self.phases, new_ids.astype(np.float64) * self.wander_phase_step])

        return new_ids

    def index_of(self, boid_id) -> Optional[int]:
        """Row index of a live boid, or None if it no longer exists."""
        if boid_id is None:
            return None
        rows = np.flatnonzero(self.ids == boid_id)
        if len(rows) == 0:
            return None
        return int(rows[0])

    def get(self, boid_id) -> Boid:
        index = self.index_of(boid_id)
        if index is None:
            raise KeyError(f"No boid with id {boid_id}")
        return self.view(index)

    def view(self, index: int) -> Boid:
        return Boid(
            id=int(self.ids[index]),
            position=_frozen(self.positions[index]),
            velocity=_frozen(self.velocities[index]),
            acceleration=_frozen(self.accelerations[index]),
            health=float(self.health[index]),
            flash_elapsed=float(self.flash_elapsed[index]),
            flash_duration=float(self.flash_duration[index]),
            tag=BoidTag(int(self.tags[index])),
            color=tuple(float(c) for c in self.colors[index]),
        )

    def views(self) -> Iterator[Boid]:
        for index in range(self.num_boids):
            yield self.view(index)

    def snapshot(self) -> FlockSnapshot:
        return FlockSnapshot(
            ids=_frozen(self.ids),
            positions=_frozen(self.positions),
            velocities=_frozen(self.velocities),
        )

    # ------------------------------------------------------------------
    # Health
    # ------------------------------------------------------------------

    def damage(self, index: int, amount: float, flash_duration: Optional[float] = None) -> float:
        """
        Remove health from the boid at ``index`` and start its damage flash.

        A flash already in progress is left running. Returns the new health.
        """
        if amount < 0:
            raise ValueError(f"Damage must be non-negative, got {amount}")
        self.health[index] -= amount

        if self.flash_elapsed[index] >= self.flash_duration[index]:
            if flash_duration is None:
                flash_duration = config.BOIDS["flash_duration"]
            self.flash_elapsed[index] = 0.0
            self.flash_duration[index] = flash_duration

        return float(self.health[index])

    def dead_ids(self) -> np.ndarray:
        return self.ids[self.health <= 0.0].copy()

    def despawn(self, boid_ids) -> int:
        """Remove the given boids. Unknown ids are ignored. Returns how many were removed."""
        boid_ids = np.asarray(boid_ids, dtype=np.int64).reshape(-1)
        if len(boid_ids) == 0:
            return 0

        keep = ~np.isin(self.ids, boid_ids)
        removed = int(self.num_boids - np.count_nonzero(keep))
        if removed == 0:
            return 0

        self.ids = self.ids[keep]
        self.positions = self.positions[keep]
        self.velocities = self.velocities[keep]
        self.accelerations = self.accelerations[keep]
        self.health = self.health[keep]
        self.flash_elapsed = self.flash_elapsed[keep]
        self.flash_duration = self.flash_duration[keep]
        self.tags = self.tags[keep]
        self.colors = self.colors[keep]
        self.phases = self.phases[keep]

        return removed

    def despawn_dead(self) -> np.ndarray:
        """Remove every boid whose health is at or below zero and return their ids."""
        dead = self.dead_ids()
        self.despawn(dead)
        return dead

    # ------------------------------------------------------------------
    # Simulation
    # ------------------------------------------------------------------

    def _build_spatial_grid(self, snapshot: FlockSnapshot, half_width: float, half_height: float):
        """Build spatial grid over the snapshot for efficient neighbor queries."""
        num_boids = len(snapshot.ids)
        self.grid_w = int(np.ceil(half_width * 2 / self.cell_size)) + 2
        self.grid_h = int(np.ceil(half_height * 2 / self.cell_size)) + 2
        self.num_cells = self.grid_w * self.grid_h
        self.grid_offset_x = float(half_width + self.cell_size)
        self.grid_offset_y = float(half_height + self.cell_size)

        self._cell_indices = np.zeros(num_boids, dtype=np.int32)
        self._cell_starts = np.zeros(self.num_cells, dtype=np.int32)
        self._cell_counts = np.zeros(self.num_cells, dtype=np.int32)

        assign_cells(
            snapshot.positions, self._cell_indices,
            self.cell_size, self.grid_w, self.grid_h,
            self.grid_offset_x, self.grid_offset_y,
            num_boids
        )

        self._sorted_indices = np.argsort(self._cell_indices, kind="stable").astype(np.int32)

        build_cell_lists(
            self._cell_indices, self._sorted_indices,
            self._cell_starts, self._cell_counts,
            num_boids, self.num_cells
        )

    def update(self, dt: float, elapsed: float, half_width: float, half_height: float):
        """
        Steer and integrate every boid for one tick.

        Neighbor computations read a snapshot taken before any boid moves,
        so no boid sees another's partially updated state.
        """
        if dt < 0:
            raise ValueError(f"dt must be non-negative, got {dt}")
        if half_width <= 0 or half_height <= 0:
            raise ValueError(f"Viewport half extents must be positive, got ({half_width}, {half_height})")

        # Flash timers run regardless of damage state
        self.flash_elapsed = np.minimum(self.flash_elapsed + dt, self.flash_duration)

        num_boids = self.num_boids
        if num_boids == 0:
            return

        snapshot = self.snapshot()
        self._build_spatial_grid(snapshot, half_width, half_height)

        accelerations = np.zeros((num_boids, 2), dtype=np.float64)
        compute_steering(
            snapshot.positions,
            snapshot.velocities,
            self.phases,
            self._sorted_indices,
            self._cell_starts,
            self._cell_counts,
            accelerations,
            self.cell_size,
            self.grid_w,
            self.grid_h,
            self.grid_offset_x,
            self.grid_offset_y,
            float(half_width),
            float(half_height),
            float(elapsed),
            self.perception_radius,
            self.separation_radius,
            self.separation_weight,
            self.alignment_gain,
            self.cohesion_gain,
            self.max_speed,
            self.max_force,
            self.edge_margin,
            self.edge_force,
            self.wander_strength,
            self.wander_frequency,
            self.wander_y_ratio,
            num_boids
        )
        self.accelerations = accelerations

        update_physics_numba(
            self.positions,
            self.velocities,
            self.accelerations,
            self.damping,
            self.max_speed,
            self.min_speed,
            float(dt),
            num_boids
        )

    def wrap(self, half_width: float, half_height: float):
        """Torus wrap: anything past a half extent reappears on the opposite side."""
        if self.num_boids == 0:
            return
        wrap_positions_numba(self.positions, float(half_width), float(half_height), self.num_boids)
