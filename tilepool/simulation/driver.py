"""SimulationDriver — ticks the engine on its own thread.

The driver thread is the single owner of the engine and its pool.  Other
threads talk to it only through two queues:

- commands go in (player moves, pause, speed changes)
- snapshots come out, through the engine's bounded ``publish`` channel
"""

from __future__ import annotations

import logging
import queue
import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Union

from tilepool.world.errors import PoolError

if TYPE_CHECKING:
    from tilepool.simulation.engine import Direction, SimulationEngine, Snapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MovePlayer:
    """Ask the driver to step the player unit."""

    direction: Direction


@dataclass(frozen=True)
class TogglePause:
    """Pause or resume ticking.  Player moves still apply while paused."""


@dataclass(frozen=True)
class SetSpeed:
    """Change the tick rate."""

    ticks_per_second: float


Command = Union[MovePlayer, TogglePause, SetSpeed]


@dataclass
class SimulationDriver:
    """Runs a SimulationEngine on a background tick thread.

    Attributes:
        engine: The engine this driver owns exclusively once started.
        ticks_per_second: Current tick rate.
        paused: Whether ticking is suspended.
        channel: Bounded queue the engine publishes snapshots onto.
        failure: The pool error that stopped the thread, if any.
    """

    engine: SimulationEngine
    ticks_per_second: float = 5.0
    paused: bool = False
    channel: queue.Queue[Snapshot] = field(init=False)
    failure: PoolError | None = field(init=False, default=None)
    _commands: queue.Queue[Command] = field(init=False, repr=False)
    _stop: threading.Event = field(init=False, repr=False)
    _thread: threading.Thread | None = field(init=False, default=None, repr=False)

    def __post_init__(self) -> None:
        self.channel = self.engine.make_channel()
        self._commands = queue.Queue()
        self._stop = threading.Event()

    @property
    def is_running(self) -> bool:
        """Return True while the tick thread is alive."""
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Publish the initial state and start the tick thread."""
        if self._thread is not None:
            return
        self.engine.publish(self.channel)
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._tick_loop,
            name="tilepool-driver",
            daemon=True,
        )
        self._thread.start()

    def stop(self, timeout: float = 1.0) -> None:
        """Stop the tick thread and wait for it to exit.

        Raises:
            PoolError: If the thread stopped because the pool failed.
        """
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            self._thread = None
        if self.failure is not None:
            raise self.failure

    def send(self, command: Command) -> None:
        """Queue a command for the tick thread."""
        self._commands.put(command)

    def latest(self) -> Snapshot | None:
        """Drain the channel and return the newest snapshot, if any."""
        snap = None
        while True:
            try:
                snap = self.channel.get_nowait()
            except queue.Empty:
                return snap

    def _tick_loop(self) -> None:
        try:
            while not self._stop.wait(1.0 / self.ticks_per_second):
                self._apply_commands()
                if not self.paused:
                    self.engine.step()
                self.engine.publish(self.channel)
        except PoolError as error:
            logger.critical("Simulation stopped, pool integrity lost: %s", error)
            self.failure = error

    def _apply_commands(self) -> None:
        while True:
            try:
                command = self._commands.get_nowait()
            except queue.Empty:
                return
            if isinstance(command, MovePlayer):
                self.engine.move_player(command.direction)
            elif isinstance(command, TogglePause):
                self.paused = not self.paused
            elif isinstance(command, SetSpeed):
                self.ticks_per_second = command.ticks_per_second
