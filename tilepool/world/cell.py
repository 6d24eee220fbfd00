"""Cell — a single tile in the pool.

Each cell holds an optional occupant and the cached set of its nearest
neighbouring tiles.  The occupant slot is the only part callers may
change; the neighbour set is written by the owning ``TilePool`` alone.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tilepool.entities.unit import Occupant
    from tilepool.world.neighbours import NeighbourSet


class Cell:
    """A single tile in the pool.

    Attributes:
        occupant: The entity standing on this tile, or ``None``.
    """

    __slots__ = ("_neighbours", "occupant")

    def __init__(
        self,
        neighbours: NeighbourSet,
        occupant: Occupant | None = None,
    ) -> None:
        self._neighbours = neighbours
        self.occupant = occupant

    @property
    def neighbours(self) -> NeighbourSet:
        """The cached nearest neighbours of this tile."""
        return self._neighbours

    @property
    def is_empty(self) -> bool:
        """Return True if no occupant stands on this tile."""
        return self.occupant is None

    def __repr__(self) -> str:
        return f"Cell(occupant={self.occupant!r}, neighbours={self._neighbours!r})"
