"""Errors raised by TilePool and NeighbourSet operations.

The set is closed: every failure in the ``tilepool.world`` package is one
of the ``PoolError`` subclasses below.  Each carries the offending
position or count.  Placement failures additionally carry the occupant
that was refused so the caller gets it back untouched.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tilepool.entities.unit import Occupant
    from tilepool.world.position import Position


class PoolError(Exception):
    """Base class for all tile pool failures.

    Attributes:
        occupant: The occupant handed back to the caller when the error
            aborted a placement, otherwise ``None``.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.occupant: Occupant | None = None


class TooFewTiles(PoolError):
    """A neighbour set was requested from a pool below its minimum size."""

    def __init__(self, count: int, minimum: int) -> None:
        super().__init__(f"pool holds {count} tiles, need at least {minimum}")
        self.count = count
        self.minimum = minimum


class BrokenNeighbourLink(PoolError):
    """A tracked neighbour has no tile in the pool; the graph is corrupt."""

    def __init__(self, position: Position) -> None:
        super().__init__(f"no tile at {position}; the pool is inconsistent")
        self.position = position


class FilledTile(PoolError):
    """An occupant was placed on a tile that already holds one."""

    def __init__(self, position: Position) -> None:
        super().__init__(f"tile at {position} is already filled")
        self.position = position


class RepeatedNeighbour(PoolError):
    """A position appeared twice where distinct positions are required."""

    def __init__(self, position: Position) -> None:
        super().__init__(f"neighbour {position} is repeated")
        self.position = position


class ConversionError(PoolError):
    """A sequence had the wrong length for a fixed-size conversion."""

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(f"expected {expected} positions, got {actual}")
        self.expected = expected
        self.actual = actual


class NoFixedPoint(PoolError):
    """Neighbour relaxation hit its restart cap without settling."""

    def __init__(self, position: Position, restarts: int) -> None:
        super().__init__(
            f"neighbours for {position} did not settle after {restarts} restarts",
        )
        self.position = position
        self.restarts = restarts


class MissingTile(PoolError):
    """An operation needed an existing tile and found none."""

    def __init__(self, position: Position) -> None:
        super().__init__(f"no tile at {position}")
        self.position = position
