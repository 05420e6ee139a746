"""Shared fixtures for the swarm simulation tests."""

from __future__ import annotations

import numpy as np
import pytest

from boids.flock import Flock

HALF_WIDTH = 640.0
HALF_HEIGHT = 360.0


@pytest.fixture
def viewport() -> tuple[float, float]:
    return (HALF_WIDTH, HALF_HEIGHT)


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(1234)


@pytest.fixture
def make_flock():
    """Build a flock from explicit (position, velocity) pairs."""

    def _make(positions, velocities=None, **kwargs) -> Flock:
        flock = Flock(**kwargs)
        positions = np.asarray(positions, dtype=np.float64).reshape(-1, 2)
        if velocities is None:
            velocities = np.tile([0.0, 200.0], (len(positions), 1))
        flock.spawn(positions, velocities)
        return flock

    return _make
