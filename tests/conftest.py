"""Shared fixtures for the Tilepool test suite."""

from __future__ import annotations

import numpy as np
import pytest
from numpy.random import Generator

from tilepool.entities.unit import Unit
from tilepool.simulation.config import SimulationConfig
from tilepool.world.pool import TilePool
from tilepool.world.position import Position


@pytest.fixture
def rng() -> Generator:
    """A deterministic random generator for reproducible tests."""
    return np.random.default_rng(seed=12345)


@pytest.fixture
def pool() -> TilePool:
    """The default pool: six empty tiles on the column (0, 0)..(0, 5)."""
    return TilePool.default()


@pytest.fixture
def scattered_pool(rng: Generator) -> TilePool:
    """A default pool grown to 30 tiles at random positions."""
    pool = TilePool.default()
    unit_id = 0
    while len(pool) < 30:
        x, y = rng.integers(-20, 21, size=2)
        position = Position(int(x), int(y))
        if position in pool:
            continue
        pool.place(position, Unit(unit_id=unit_id))
        unit_id += 1
    return pool


@pytest.fixture
def default_config() -> SimulationConfig:
    """Default simulation config (no YAML file needed)."""
    return SimulationConfig()


@pytest.fixture
def quiet_config() -> SimulationConfig:
    """Config with only the player spawned, for hand-driven tests."""
    return SimulationConfig(seed=7, initial_units=0)
