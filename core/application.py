"""Main application class that ties everything together."""

import pygame
from pygame.locals import *
from OpenGL.GL import *

from config import swarm as config
from .input_handler import InputHandler
from .simulation import Simulation
from rendering.border import ArenaBorder
from rendering.swarm import SwarmRenderer
from rendering.text import TextRenderer


class Application:
    """Main application managing the frame loop and rendering."""

    def __init__(self, width: int = None, height: int = None, seed: int = None):
        self.width = width or config.WINDOW["width"]
        self.height = height or config.WINDOW["height"]

        pygame.init()
        pygame.display.set_mode((self.width, self.height), DOUBLEBUF | OPENGL)
        pygame.display.set_caption(config.WINDOW["title"])

        self.input_handler = InputHandler()

        # Rendering components
        self.border = ArenaBorder()
        self.renderer = SwarmRenderer()
        self.text_renderer = TextRenderer()

        # Simulation
        self.simulation = Simulation(seed=seed)
        self.simulation.setup(self.viewport())

        # State
        self.clock = pygame.time.Clock()
        self.running = True
        self.fps = 0

        self._setup_gl()

    def viewport(self):
        """Half extents of the drawable surface, or None if there is none yet."""
        surface = pygame.display.get_surface()
        if surface is None:
            return None
        w, h = surface.get_size()
        if w <= 0 or h <= 0:
            return None
        return w / 2.0, h / 2.0

    def _setup_gl(self):
        """Initialize OpenGL settings: world units map 1:1 to pixels, origin at center."""
        glClearColor(*config.COLORS["background"])
        glDisable(GL_DEPTH_TEST)

        glMatrixMode(GL_PROJECTION)
        glLoadIdentity()
        glOrtho(-self.width / 2, self.width / 2, -self.height / 2, self.height / 2, -1, 1)
        glMatrixMode(GL_MODELVIEW)
        glLoadIdentity()

    def _handle_events(self):
        """Process all pending pygame events."""
        for event in pygame.event.get():
            if not self.input_handler.handle_event(event):
                self.running = False

        if self.input_handler.consume_reset():
            self.simulation.reset(self.viewport())

    def _update(self, dt: float):
        """Update simulation state."""
        # Cap dt to prevent physics explosion on lag
        dt = min(dt, config.WINDOW["max_dt"])

        if self.input_handler.paused:
            return

        viewport = self.viewport()
        if not self.simulation.seeded:
            self.simulation.setup(viewport)
        self.simulation.step(dt, viewport)

    def _render(self):
        """Render the scene."""
        glClear(GL_COLOR_BUFFER_BIT)
        glLoadIdentity()

        self.border.draw(self.width / 2, self.height / 2)
        self.renderer.draw(self.simulation)

        # Draw HUD
        stats = self.simulation.stats()
        screen_size = (self.width, self.height)
        lines = [
            f"Boids: {stats['boids']}  |  FPS: {self.fps:.0f}",
            f"Engaged: {stats['engaged']}/{len(self.simulation.turrets)}  |  Kills: {stats['kills']}",
        ]
        if self.input_handler.paused:
            lines.append("PAUSED")
        self.text_renderer.draw_lines(lines, 10, 10, screen_size)

        pygame.display.flip()

    def run(self):
        """Main application loop."""
        print("[App] Starting main loop...")
        while self.running:
            dt = self.clock.tick() / 1000.0
            self.fps = self.clock.get_fps()

            self._handle_events()
            self._update(dt)
            self._render()

        pygame.quit()
        print("[App] Shutdown complete")
