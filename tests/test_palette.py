"""Unit tests for boid display colors."""

from __future__ import annotations

import numpy as np
import pytest

from boids.boid import Boid, BoidTag
from config import swarm as config
from rendering.palette import boid_color, flash_intensity

pytestmark = pytest.mark.unit

PINK = config.COLORS["pink"]


def make_boid(**kwargs) -> Boid:
    defaults = dict(id=0, flash_elapsed=0.5, flash_duration=0.5, color=PINK, tag=BoidTag.SPECIAL)
    defaults.update(kwargs)
    return Boid(**defaults)


class TestPalette:
    def test_full_health_uses_base(self):
        assert boid_color(make_boid()) == PINK

    def test_damaged_is_darkened(self):
        color = boid_color(make_boid(health=0.5))
        assert color == pytest.approx((0.5, 0.0, 0.25))

    def test_negative_health_is_black(self):
        assert boid_color(make_boid(health=-0.1)) == pytest.approx((0.0, 0.0, 0.0))

    def test_flash_peak_is_red(self):
        # progress 0.05 -> |sin(0.5 pi)| = 1
        boid = make_boid(flash_elapsed=0.025, flash_duration=0.5, health=0.5)
        assert boid_color(boid) == config.COLORS["flash"]

    def test_flash_trough_is_base(self):
        # progress 0.1 -> |sin(pi)| = 0; base color, not darkened, while flashing
        boid = make_boid(flash_elapsed=0.05, flash_duration=0.5, health=0.5)
        assert boid_color(boid) == PINK

    def test_intensity_range(self):
        values = [flash_intensity(p) for p in np.linspace(0, 1, 101)]
        assert min(values) >= 0.0
        assert max(values) <= 1.0


class TestBoidView:
    def test_flash_progress(self):
        assert make_boid(flash_elapsed=0.25).flash_progress == pytest.approx(0.5)
        assert make_boid(flash_duration=0.0, flash_elapsed=0.0).flash_progress == 1.0
        assert not make_boid().flashing

    def test_alive_and_speed(self):
        boid = make_boid(velocity=np.array([3.0, 4.0]), health=0.0)
        assert boid.speed == pytest.approx(5.0)
        assert not boid.alive
