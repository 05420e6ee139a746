"""Timing and 2D vector primitives shared by the simulation."""

import math
import numpy as np


class Timer:
    """
    One-shot countdown timer.

    Elapsed time saturates at the duration; the timer reports finished once
    it gets there and stays finished until reset.
    """

    def __init__(self, duration: float, elapsed: float = 0.0):
        if duration < 0:
            raise ValueError(f"Timer duration must be non-negative, got {duration}")
        self.duration = float(duration)
        self.elapsed = min(float(elapsed), self.duration)

    @property
    def finished(self) -> bool:
        return self.elapsed >= self.duration

    @property
    def remaining(self) -> float:
        return self.duration - self.elapsed

    def tick(self, dt: float):
        self.elapsed = min(self.elapsed + dt, self.duration)

    def reset(self):
        self.elapsed = 0.0

    def __repr__(self):
        return f"Timer({self.elapsed:.3f}/{self.duration:.3f})"


class FrameClock:
    """Monotonic simulation clock advanced by per-frame deltas."""

    def __init__(self):
        self.elapsed = 0.0
        self.frames = 0

    def advance(self, dt: float) -> float:
        if dt < 0:
            raise ValueError(f"Frame delta must be non-negative, got {dt}")
        self.elapsed += dt
        self.frames += 1
        return self.elapsed


def normalize_or_zero(v: np.ndarray) -> np.ndarray:
    """Unit vector in the direction of v, or the zero vector if v has no length."""
    length = math.hypot(v[0], v[1])
    if length > 0.0 and math.isfinite(length):
        return np.asarray(v, dtype=np.float64) / length
    return np.zeros(2)


def heading_angle(v: np.ndarray) -> float:
    """Rotation (radians) that points a +y-facing sprite along v."""
    return math.atan2(v[1], v[0]) - math.pi / 2
