"""Config — load simulation parameters from YAML files.

World bootstrap, spawning and neighbour-search limits live in YAML and
are parsed into a typed dataclass here.  Keys missing from the file
keep their defaults.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml

from tilepool.world.pool import DEFAULT_MAX_RESTARTS


@dataclass
class SimulationConfig:
    """Top-level simulation configuration.

    Attributes:
        seed: RNG seed for deterministic replay.
        initial_units: Units spawned around the bootstrap column.
        spawn_radius: Units spawn within this many tiles of the origin
            on each axis.
        max_restarts: Relaxation restart cap for neighbour queries.
        snapshot_queue_size: Capacity of the snapshot channel between
            the engine and its readers.
    """

    seed: int = 42
    initial_units: int = 8
    spawn_radius: int = 10
    max_restarts: int = DEFAULT_MAX_RESTARTS
    snapshot_queue_size: int = 4

    @classmethod
    def from_yaml(cls, path: str | Path) -> SimulationConfig:
        """Load configuration from a YAML file.

        Args:
            path: Path to the YAML config file.

        Returns:
            A populated SimulationConfig instance.

        Raises:
            FileNotFoundError: If the config file does not exist.
        """
        path = Path(path)
        with path.open("r") as f:
            data = yaml.safe_load(f) or {}

        return cls(
            seed=data.get("seed", cls.seed),
            initial_units=data.get("initial_units", cls.initial_units),
            spawn_radius=data.get("spawn_radius", cls.spawn_radius),
            max_restarts=data.get("max_restarts", cls.max_restarts),
            snapshot_queue_size=data.get(
                "snapshot_queue_size",
                cls.snapshot_queue_size,
            ),
        )
