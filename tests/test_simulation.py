"""Integration tests for the per-tick orchestration."""

from __future__ import annotations

import numpy as np
import pytest

from core.simulation import Simulation
from turrets.turret import TurretState

pytestmark = pytest.mark.unit

VIEWPORT = (640.0, 360.0)
DT = 1 / 60


@pytest.fixture
def sim() -> Simulation:
    s = Simulation(seed=42)
    s.setup(VIEWPORT)
    return s


class TestSetup:
    def test_setup_seeds_boids_and_turrets(self, sim):
        assert len(sim.flock) == 154
        assert len(sim.turrets) == 5
        assert sim.seeded
        assert all(t.state == TurretState.IDLE for t in sim.turrets)

    def test_setup_without_viewport_does_nothing(self):
        s = Simulation(seed=1)
        assert s.setup(None) is False
        assert len(s.flock) == 0
        assert not s.seeded

    def test_invalid_viewport_rejected(self):
        with pytest.raises(ValueError):
            Simulation(seed=1).setup((0.0, 360.0))


class TestStep:
    def test_clock_advances(self, sim):
        sim.step(DT, VIEWPORT)
        sim.step(DT, VIEWPORT)
        assert sim.elapsed == pytest.approx(2 * DT)
        assert sim.clock.frames == 2

    def test_negative_dt_rejected(self, sim):
        with pytest.raises(ValueError):
            sim.step(-DT, VIEWPORT)

    def test_missing_viewport_skips_motion_and_spawning(self, sim):
        sim.flock.despawn(sim.flock.ids[:10])
        before = sim.flock.positions.copy()
        sim.step(DT, None)
        np.testing.assert_array_equal(sim.flock.positions, before)
        assert len(sim.flock) == 144
        # turret cooldowns still run
        assert sim.turrets[0].cooldown.elapsed == pytest.approx(DT)
        # damage flashes only advance with the flock update
        assert np.all(sim.flock.flash_elapsed == 0.0)

    def test_dead_boids_removed_same_tick(self, sim):
        doomed = sim.flock.ids[:20].copy()
        sim.flock.health[:20] = 0.0
        sim.step(DT, VIEWPORT)
        assert not any(int(i) in sim.flock for i in doomed)
        # 134 survivors plus the first top-up batch
        assert len(sim.flock) == 139

    def test_beam_dropped_in_kill_tick(self, sim):
        turret = sim.turrets[0]
        sim.flock.despawn(sim.flock.ids)
        (victim,) = sim.flock.spawn([turret.position + [1.0, 0.0]], [[0.0, 120.0]])
        sim.flock.health[0] = 0.001
        turret.cooldown.tick(0.5)

        report = sim.step(DT, VIEWPORT)
        assert report.killed == [int(victim)]
        assert victim not in sim.flock
        assert all(b.target in sim.flock for b in sim.beams)
        assert sim.targeting.beam_for(turret.id) is None

    def test_population_recovers(self, sim):
        sim.flock.despawn(sim.flock.ids[:40])
        for _ in range(8):
            sim.step(DT, VIEWPORT)
        assert len(sim.flock) == 150
        for _ in range(30):
            sim.step(DT, VIEWPORT)
            assert len(sim.flock) <= 150

    def test_same_seed_same_run(self):
        a, b = Simulation(seed=9), Simulation(seed=9)
        a.setup(VIEWPORT)
        b.setup(VIEWPORT)
        for _ in range(30):
            a.step(DT, VIEWPORT)
            b.step(DT, VIEWPORT)
        np.testing.assert_allclose(a.flock.positions, b.flock.positions)
        assert list(a.flock.ids) == list(b.flock.ids)


class TestInvariants:
    def test_long_run_invariants(self, sim):
        health = {int(i): float(h) for i, h in zip(sim.flock.ids, sim.flock.health)}
        for _ in range(240):
            report = sim.step(DT, VIEWPORT)

            # No boid at or below zero health survives its tick
            assert np.all(sim.flock.health > 0.0)
            for boid_id in report.killed:
                assert boid_id not in sim.flock

            # Health only ever goes down
            for i, h in zip(sim.flock.ids, sim.flock.health):
                i = int(i)
                if i in health:
                    assert h <= health[i]
                health[i] = float(h)

            # At most one beam per turret, each tied to an engaged turret
            owners = [b.owner for b in sim.beams]
            assert len(owners) == len(set(owners))
            turrets = {t.id: t for t in sim.turrets}
            for beam in sim.beams:
                assert turrets[beam.owner].target == beam.target
                assert beam.target in sim.flock

            # Speeds stay under the cap
            speeds = np.hypot(sim.flock.velocities[:, 0], sim.flock.velocities[:, 1])
            assert np.all(speeds <= 600.0 + 1e-9)

            # Everything is back inside the wrap bounds
            assert np.all(np.abs(sim.flock.positions[:, 0]) <= VIEWPORT[0] + 1e-9)
            assert np.all(np.abs(sim.flock.positions[:, 1]) <= VIEWPORT[1] + 1e-9)

    def test_turrets_engage_eventually(self, sim):
        engaged = False
        for _ in range(120):
            sim.step(DT, VIEWPORT)
            engaged = engaged or any(t.target is not None for t in sim.turrets)
        assert engaged
        assert sim.stats()["boids"] == len(sim.flock)


class TestReset:
    def test_reset_reseeds(self, sim):
        for _ in range(10):
            sim.step(DT, VIEWPORT)
        assert sim.reset(VIEWPORT)
        assert sim.elapsed == 0.0
        assert len(sim.flock) == 154
        assert sim.beams == []
        assert sim.targeting.kills == 0
        assert sim.population.flock is sim.flock
        assert sim.targeting.flock is sim.flock

    def test_overrides_survive_reset(self):
        s = Simulation(seed=3, population={"target": 200})
        s.setup(VIEWPORT)
        s.reset(VIEWPORT)
        assert s.population.target == 200

    def test_stats(self, sim):
        sim.step(DT, VIEWPORT)
        stats = sim.stats()
        assert set(stats) == {"time", "frames", "boids", "engaged", "beams", "kills", "spawned"}
        assert stats["spawned"] == 154
