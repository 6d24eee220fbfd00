"""Entry point for ``python -m tilepool``.

Loads the default YAML config, builds a simulation engine around a
freshly bootstrapped tile pool, and opens a Pygame window to watch the
units move.
"""

from __future__ import annotations

import argparse
import logging
import pathlib

from tilepool.simulation.config import SimulationConfig
from tilepool.simulation.driver import SimulationDriver
from tilepool.simulation.engine import SimulationEngine
from tilepool.ui.pygame_client import PygameRenderer

_DEFAULT_CONFIG = (
    pathlib.Path(__file__).resolve().parent.parent / "config" / "default.yaml"
)


def main() -> None:
    """Parse CLI args, create engine and driver, launch renderer."""
    parser = argparse.ArgumentParser(
        prog="tilepool",
        description="Tilepool - units on a sparse nearest-neighbour tile graph",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=pathlib.Path,
        default=_DEFAULT_CONFIG,
        help="Path to YAML config file (default: config/default.yaml)",
    )
    parser.add_argument(
        "--cell-size",
        type=int,
        default=16,
        help="Pixel size per tile (default: 16)",
    )
    parser.add_argument(
        "--fps",
        type=int,
        default=30,
        help="Target frames per second (default: 30)",
    )
    parser.add_argument(
        "--speed",
        type=float,
        default=5.0,
        help="Simulation ticks per second (default: 5)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Set the logging level (default: WARNING)",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = SimulationConfig.from_yaml(args.config)
    engine = SimulationEngine(config=config)

    driver = SimulationDriver(engine=engine, ticks_per_second=args.speed)
    renderer = PygameRenderer(driver=driver, cell_size=args.cell_size)
    renderer.run(fps=args.fps)


if __name__ == "__main__":
    main()
