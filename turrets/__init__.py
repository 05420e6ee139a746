"""Turrets and the targeting/combat system."""

from .turret import Turret, TurretState, layout_turrets
from .targeting import Beam, CombatEvent, TargetingSystem, TickReport

__all__ = ["Turret", "TurretState", "layout_turrets",
           "Beam", "CombatEvent", "TargetingSystem", "TickReport"]
