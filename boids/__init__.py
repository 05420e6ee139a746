"""Boid storage, flocking and population management."""

from .boid import Boid, BoidTag
from .flock import Flock, FlockSnapshot
from .population import PopulationManager

__all__ = ["Boid", "BoidTag", "Flock", "FlockSnapshot", "PopulationManager"]
