"""Immediate-mode drawing of boids, turrets and beams."""

import math
import numpy as np
from OpenGL.GL import *

from config import swarm as config
from core.timer import heading_angle
from .palette import boid_color


def _rotate(x: float, y: float, angle: float):
    c, s = math.cos(angle), math.sin(angle)
    return x * c - y * s, x * s + y * c


def _quad(cx: float, cy: float, w: float, h: float, angle: float):
    """Emit a rotated rectangle centred on (cx, cy) as two triangles."""
    hw, hh = w / 2.0, h / 2.0
    corners = [_rotate(dx, dy, angle) for dx, dy in ((-hw, -hh), (hw, -hh), (hw, hh), (-hw, hh))]
    for k in (0, 1, 2, 0, 2, 3):
        glVertex2f(cx + corners[k][0], cy + corners[k][1])


class SwarmRenderer:
    """Draws the simulation state read-only; never mutates it."""

    def __init__(self):
        s = config.BOIDS["size"]
        # Triangle pointing along +y, rotated to face the velocity
        self.triangle = ((0.0, s), (-0.6 * s, -0.6 * s), (0.6 * s, -0.6 * s))
        self.base_size = config.TURRETS["base_size"]
        self.barrel_w, self.barrel_h = config.TURRETS["barrel_size"]
        self.barrel_offset = config.TURRETS["barrel_offset"]
        self.beam_width = config.COMBAT["beam_width"]

    def draw_boids(self, flock):
        glBegin(GL_TRIANGLES)
        for boid in flock.views():
            glColor3f(*boid_color(boid))
            angle = heading_angle(boid.velocity)
            px, py = boid.position
            for vx, vy in self.triangle:
                rx, ry = _rotate(vx, vy, angle)
                glVertex2f(px + rx, py + ry)
        glEnd()

    def draw_turrets(self, turrets):
        glColor3f(*config.COLORS["turret"])
        glBegin(GL_TRIANGLES)
        for turret in turrets:
            px, py = turret.position
            _quad(px, py, self.base_size, self.base_size, 0.0)

            angle = turret.aim_angle if np.any(turret.aim_direction) else 0.0
            ox, oy = _rotate(0.0, self.barrel_offset, angle)
            _quad(px + ox, py + oy, self.barrel_w, self.barrel_h, angle)
        glEnd()

    def draw_beams(self, beams):
        glEnable(GL_BLEND)
        glBlendFunc(GL_SRC_ALPHA, GL_ONE_MINUS_SRC_ALPHA)
        glColor4f(*config.COLORS["beam"])
        glBegin(GL_TRIANGLES)
        for beam in beams:
            _quad(beam.midpoint[0], beam.midpoint[1], self.beam_width, beam.length, beam.rotation)
        glEnd()
        glDisable(GL_BLEND)

    def draw(self, simulation):
        self.draw_beams(simulation.beams)
        self.draw_turrets(simulation.turrets)
        self.draw_boids(simulation.flock)
