"""Unit tests for the timing and vector primitives."""

from __future__ import annotations

import math

import numpy as np
import pytest

from core.timer import FrameClock, Timer, heading_angle, normalize_or_zero

pytestmark = pytest.mark.unit


class TestTimer:
    def test_starts_unfinished(self):
        t = Timer(0.5)
        assert not t.finished
        assert t.remaining == pytest.approx(0.5)

    def test_finishes_and_saturates(self):
        t = Timer(0.5)
        t.tick(0.25)
        assert not t.finished
        t.tick(0.5)
        assert t.finished
        assert t.elapsed == pytest.approx(0.5)

    def test_reset_restarts_countdown(self):
        t = Timer(0.5)
        t.tick(1.0)
        t.reset()
        assert not t.finished
        assert t.elapsed == 0.0

    def test_zero_duration_is_finished(self):
        assert Timer(0.0).finished

    def test_negative_duration_rejected(self):
        with pytest.raises(ValueError):
            Timer(-1.0)


class TestFrameClock:
    def test_accumulates(self):
        clock = FrameClock()
        clock.advance(0.25)
        clock.advance(0.5)
        assert clock.elapsed == pytest.approx(0.75)
        assert clock.frames == 2

    def test_negative_delta_rejected(self):
        with pytest.raises(ValueError):
            FrameClock().advance(-0.01)


class TestVectors:
    def test_normalize(self):
        v = normalize_or_zero(np.array([3.0, 4.0]))
        assert v == pytest.approx([0.6, 0.8])

    def test_normalize_zero_is_zero(self):
        v = normalize_or_zero(np.zeros(2))
        assert np.all(v == 0.0)
        assert np.all(np.isfinite(v))

    def test_heading_angle(self):
        assert heading_angle((0.0, 1.0)) == pytest.approx(0.0)
        assert heading_angle((1.0, 0.0)) == pytest.approx(-math.pi / 2)
        assert heading_angle((-1.0, 0.0)) == pytest.approx(math.pi / 2)
