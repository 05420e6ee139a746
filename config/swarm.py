"""Configuration for the 2D boid swarm defense simulation."""

WINDOW = {
    "width": 1280,
    "height": 720,
    "title": "Swarm Defense",
    "max_dt": 0.05,             # Cap frame delta after stalls
}

BOIDS = {
    "initial_count": 150,
    "initial_speed_min": 300.0,
    "initial_speed_max": 500.0,
    "flash_duration": 0.5,      # Damage flash length (seconds)
    "size": 5.0,                # Triangle length for rendering
}

FLOCKING = {
    "perception_radius": 100.0,  # How far boids can see neighbors
    "separation_radius": 40.0,   # Personal space
    "separation_weight": 2.0,
    "alignment_gain": 0.05,      # Alignment reacts faster than cohesion
    "cohesion_gain": 0.02,
    "max_speed": 600.0,
    "min_speed": 100.0,
    "max_force": 400.0,
    "damping": 0.99,             # Per-tick velocity multiplier
    "wander_strength": 20.0,
    "wander_frequency": 2.0,
    "wander_y_ratio": 1.3,       # Different frequency for y
    "wander_phase_step": 0.5,    # Phase offset per boid id
}

EDGES = {
    "margin": 150.0,            # Distance from edge where force starts
    "force": 300.0,             # Maximum edge force strength
}

POPULATION = {
    "target": 150,
    "max_spawn_per_tick": 5,
    "spawn_velocity": 150.0,    # Edge spawns get components in [-v, v)
}

# Hand-placed boids seeded alongside the main flock
SPECIAL_BOIDS = {
    "pink": {"position": (200.0, 100.0), "velocity": 150.0},
    "red": {"count": 3, "inset": 100.0, "spacing": 30.0, "velocity": 100.0,
            "flash_duration": 0.1},
}

TURRETS = {
    "range": 250.0,
    "cooldown": 0.5,            # Delay before re-acquiring after a lost target
    "base_size": 20.0,
    "barrel_size": (4.0, 15.0),
    "barrel_offset": 10.0,
    # Layout as fractions of the full viewport (width, height)
    "layout": [
        (-1 / 3, -1 / 3),
        (1 / 3, -1 / 3),
        (0.0, 1 / 3),
        (-1 / 4, 1 / 4),
        (1 / 4, 1 / 4),
    ],
}

COMBAT = {
    "damage_per_second": 0.5,   # 1.0 health lasts two seconds
    "beam_width": 2.0,
}

COLORS = {
    "background": (0.15, 0.15, 0.15, 1.0),
    "normal": (1.0, 1.0, 1.0),
    "pink": (1.0, 0.0, 0.5),
    "red": (1.0, 0.2, 0.2),
    "flash": (1.0, 0.0, 0.0),
    "turret": (0.3, 0.3, 0.3),
    "beam": (1.0, 0.0, 0.0, 0.7),
    "border": (0.25, 0.25, 0.3),
    "text": (0.9, 0.9, 0.9),
}

LOGGING = {
    "events": False,            # Per-event lines (acquire/lose/kill/spawn)
}
