"""Keyboard handling for the simulation window."""

import pygame
from pygame.locals import *


class InputHandler:
    """Translates pygame events into application commands."""

    def __init__(self):
        self.paused = False
        self.reset_requested = False

    def handle_event(self, event: pygame.event.Event) -> bool:
        """
        Handle a single pygame event.
        Returns False if the application should quit, True otherwise.
        """
        if event.type == QUIT:
            return False
        elif event.type == KEYDOWN:
            if event.key == K_ESCAPE:
                return False
            elif event.key == K_SPACE:
                self.paused = not self.paused
                print(f"[App] {'Paused' if self.paused else 'Running'}")
            elif event.key == K_r:
                self.reset_requested = True

        return True

    def consume_reset(self) -> bool:
        """Return True once per R press."""
        requested = self.reset_requested
        self.reset_requested = False
        return requested
