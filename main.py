"""
2D Swarm Defense Simulation
===========================

A flock of boids wanders the screen while stationary turrets lock on,
beam them and wear them down. Destroyed boids are replaced from the edges.

Usage:
    python main.py                              # Windowed
    python main.py --seed 7                     # Reproducible run
    python main.py --headless --ticks 3600      # No window, print summaries

Controls:
    - SPACE: Pause/resume
    - R: Reseed the simulation
    - ESC: Quit
"""

import argparse

from config import swarm as config


def run_headless(ticks: int, dt: float, width: int, height: int, seed: int = None):
    """Step the simulation without a window, printing one line per simulated second."""
    from core.simulation import Simulation

    simulation = Simulation(seed=seed)
    viewport = (width / 2.0, height / 2.0)
    simulation.setup(viewport)

    report_every = max(int(round(1.0 / dt)), 1)
    for tick in range(1, ticks + 1):
        simulation.step(dt, viewport)
        if tick % report_every == 0 or tick == ticks:
            s = simulation.stats()
            print(
                f"[Headless] t={s['time']:.2f}s  boids={s['boids']}  engaged={s['engaged']}"
                f"  beams={s['beams']}  kills={s['kills']}  spawned={s['spawned']}"
            )

    return simulation


def main():
    parser = argparse.ArgumentParser(description="2D boid swarm defense simulation")
    parser.add_argument("--width", type=int, default=config.WINDOW["width"],
                        help=f"Viewport width (default: {config.WINDOW['width']})")
    parser.add_argument("--height", type=int, default=config.WINDOW["height"],
                        help=f"Viewport height (default: {config.WINDOW['height']})")
    parser.add_argument("--seed", type=int, help="Random seed")
    parser.add_argument("--headless", action="store_true", help="Run without a window")
    parser.add_argument("--ticks", type=int, default=600,
                        help="Ticks to run in headless mode (default: 600)")
    parser.add_argument("--dt", type=float, default=1 / 60,
                        help="Seconds per headless tick (default: 1/60)")
    parser.add_argument("--events", action="store_true",
                        help="Log every acquire/lose/kill/spawn event")
    args = parser.parse_args()

    if args.width <= 0 or args.height <= 0:
        parser.error("--width and --height must be positive")
    if args.dt <= 0:
        parser.error("--dt must be positive")

    if args.events:
        config.LOGGING["events"] = True

    if args.headless:
        run_headless(args.ticks, args.dt, args.width, args.height, args.seed)
        return

    from core.application import Application

    app = Application(width=args.width, height=args.height, seed=args.seed)
    app.run()


if __name__ == "__main__":
    main()
