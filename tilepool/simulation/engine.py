"""SimulationEngine — the tick loop and sole owner of the tile pool.

The engine is the only component that mutates the pool.  Each tick it:

1. Moves every non-player unit one random cardinal step
2. Resolves moves onto filled tiles through ``Combat``
3. Advances the tick counter

Readers (renderers, other threads) never touch the live pool.  They get
immutable ``Snapshot`` values through the bounded queue fed by
``publish``; ``SimulationDriver`` runs that loop on its own thread.
"""

from __future__ import annotations

import contextlib
import logging
import queue
from dataclasses import dataclass, field
from enum import Enum

import numpy as np
from numpy.random import Generator

from tilepool.entities.unit import Unit
from tilepool.simulation.combat import Combat
from tilepool.simulation.config import SimulationConfig
from tilepool.world.errors import FilledTile, PoolError, TooFewTiles
from tilepool.world.pool import TilePool
from tilepool.world.position import Position

logger = logging.getLogger(__name__)

# Failures the engine logs and skips; anything else means the pool is corrupt.
_RECOVERABLE = (FilledTile, TooFewTiles)


class Direction(Enum):
    """A single cardinal step on the tile plane."""

    UP = Position(0, -1)
    DOWN = Position(0, 1)
    LEFT = Position(-1, 0)
    RIGHT = Position(1, 0)


@dataclass(frozen=True)
class Snapshot:
    """A read-only view of the pool at the end of a tick.

    Attributes:
        tick: Tick the snapshot was taken at.
        tiles: ``(position, glyph)`` for every tile, sorted by position.
            ``glyph`` is ``None`` for empty tiles.
        player: Position of the keyboard-controlled unit, or ``None``
            once it has been defeated.
    """

    tick: int
    tiles: tuple[tuple[Position, str | None], ...]
    player: Position | None = None

    @property
    def occupied(self) -> dict[Position, str]:
        """Map each filled tile to its occupant's glyph."""
        return {pos: glyph for pos, glyph in self.tiles if glyph is not None}


@dataclass
class SimulationEngine:
    """Drives the simulation forward tick by tick.

    Attributes:
        config: Loaded simulation configuration.
        pool: The tile pool, owned exclusively by this engine.
        rng: Master seeded random generator.
        player: Current position of the keyboard-controlled unit.
        tick: Current tick count.
    """

    config: SimulationConfig
    pool: TilePool = field(init=False)
    rng: Generator = field(init=False)
    player: Position | None = field(init=False, default=None)
    tick: int = 0
    _next_id: int = field(init=False, default=0, repr=False)

    def __post_init__(self) -> None:
        """Bootstrap the pool, then spawn the player and initial units."""
        self.rng = np.random.default_rng(self.config.seed)
        self.pool = TilePool.default(max_restarts=self.config.max_restarts)
        if self.spawn(Position.origin(), is_player=True) is not None:
            self.player = Position.origin()

        radius = self.config.spawn_radius
        for _ in range(self.config.initial_units):
            x, y = self.rng.integers(-radius, radius + 1, size=2)
            self.spawn(Position(int(x), int(y)))

    def spawn(self, position: Position, *, is_player: bool = False) -> Unit | None:
        """Create a unit and place it at ``position``.

        Returns:
            The new unit, or ``None`` if the tile was already filled.
        """
        unit = Unit(unit_id=self._next_id, is_player=is_player)
        try:
            self.pool.place(position, unit)
        except _RECOVERABLE as error:
            logger.info("Spawn at %s skipped: %s", position, error)
            return None
        self._next_id += 1
        return unit

    def move(self, source: Position, direction: Direction) -> Position | None:
        """Move the occupant at ``source`` one step in ``direction``.

        A filled destination is fought over before the attacker is
        placed.  A blocked move puts the occupant back where it was.

        Returns:
            Where the occupant ended up, or ``None`` if ``source`` held
            nothing.

        Raises:
            PoolError: For failures other than a filled tile or an
                undersized pool.  These mean the pool is corrupt.
        """
        occupant = self.pool.vacate(source)
        if occupant is None:
            return None

        target = source + direction.value
        cell = self.pool.get(target)
        try:
            if cell is not None and not cell.is_empty:
                Combat(attacker=occupant, target=target).resolve(self.pool)
            else:
                self.pool.place(target, occupant)
        except PoolError as error:
            self.pool.place(source, occupant)
            if not isinstance(error, _RECOVERABLE):
                raise
            logger.warning("Move from %s blocked: %s", source, error)
            return source

        if target == self.player:
            # The player was defeated on its own tile.
            self.player = None
        if source == self.player:
            self.player = target
        return target

    def move_player(self, direction: Direction) -> Position | None:
        """Move the keyboard-controlled unit, if it is still alive."""
        if self.player is None:
            return None
        return self.move(self.player, direction)

    def step(self) -> None:
        """Advance the simulation by one tick."""
        directions = list(Direction)
        movers = sorted(
            ((pos, unit) for pos, unit in self.pool.occupied() if pos != self.player),
            key=lambda item: item[0],
        )
        for position, unit in movers:
            cell = self.pool.get(position)
            # Skip units defeated earlier this tick.
            if cell is None or cell.occupant is not unit:
                continue
            choice = directions[int(self.rng.integers(0, len(directions)))]
            self.move(position, choice)

        self.tick += 1

    def run(self, ticks: int) -> None:
        """Run the simulation for a fixed number of ticks.

        Args:
            ticks: Number of ticks to advance.
        """
        for _ in range(ticks):
            self.step()

    def snapshot(self) -> Snapshot:
        """Flatten the pool into an immutable ``Snapshot``."""
        tiles = tuple(
            sorted(
                (
                    (pos, None if cell.is_empty else cell.occupant.glyph)
                    for pos, cell in self.pool.items()
                ),
                key=lambda tile: tile[0],
            ),
        )
        return Snapshot(tick=self.tick, tiles=tiles, player=self.player)

    def publish(self, channel: queue.Queue[Snapshot]) -> Snapshot:
        """Put the current snapshot on a bounded ``channel``.

        When the channel is full the oldest snapshot is dropped, so
        readers always see the latest state.
        """
        snap = self.snapshot()
        try:
            channel.put_nowait(snap)
        except queue.Full:
            with contextlib.suppress(queue.Empty):
                channel.get_nowait()
            channel.put_nowait(snap)
        return snap

    def make_channel(self) -> queue.Queue[Snapshot]:
        """Return an empty snapshot channel sized from the config."""
        return queue.Queue(maxsize=self.config.snapshot_queue_size)
