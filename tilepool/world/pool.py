"""TilePool — the sparse map of tiles and its nearest-neighbour graph.

The pool maps positions to cells.  Every cell caches the ``NEIGHBOURS``
tiles nearest to it, which makes the flat map a local graph: a
neighbour query walks neighbour-of-neighbour links instead of scanning
every stored tile.

The graph is maintained lazily.  Placing a new tile computes that
tile's own neighbours but never rewrites the neighbours of tiles that
already exist; ``refresh`` recomputes an existing tile on request.
Tiles are never deleted, so every tracked neighbour must always be a
key of the pool.  A missing key means the graph is corrupt and is
reported as ``BrokenNeighbourLink``.
"""

from __future__ import annotations

import heapq
import logging
from typing import TYPE_CHECKING

from tilepool.world.cell import Cell
from tilepool.world.errors import (
    BrokenNeighbourLink,
    FilledTile,
    MissingTile,
    NoFixedPoint,
    PoolError,
    TooFewTiles,
)
from tilepool.world.neighbours import (
    MINIMUM_TILES,
    NEIGHBOURS,
    NeighbourSet,
    connect_neighbours,
)
from tilepool.world.position import Position, squared_distance

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from tilepool.entities.unit import Occupant

logger = logging.getLogger(__name__)

DEFAULT_MAX_RESTARTS = 10_000


def _rank(candidate: Position, target: Position) -> tuple[int, Position]:
    """Sort key: nearer first, ties broken by position order."""
    return (squared_distance(candidate, target), candidate)


class TilePool:
    """A mapping from positions to cells with a cached neighbour graph.

    Callers read the pool like a mapping but change it only through
    ``place``, ``vacate`` and ``refresh``.

    Attributes:
        max_restarts: Cap on relaxation restarts for a single query.
    """

    MINIMUM = MINIMUM_TILES

    def __init__(self, *, max_restarts: int = DEFAULT_MAX_RESTARTS) -> None:
        self._tiles: dict[Position, Cell] = {}
        self.max_restarts = max_restarts

    @classmethod
    def seeded(
        cls,
        positions: Sequence[Position],
        *,
        max_restarts: int = DEFAULT_MAX_RESTARTS,
    ) -> TilePool:
        """Bootstrap a pool from exactly ``MINIMUM`` distinct positions.

        Every seed tile starts empty, with all the other seed tiles as its
        neighbours.

        Raises:
            ConversionError: If ``positions`` has the wrong length.
            RepeatedNeighbour: If two positions are equal.
        """
        pool = cls(max_restarts=max_restarts)
        for position, neighbours in connect_neighbours(positions):
            pool._tiles[position] = Cell(neighbours)
        logger.debug("Seeded pool with %d tiles", len(pool._tiles))
        return pool

    @classmethod
    def default(cls, *, max_restarts: int = DEFAULT_MAX_RESTARTS) -> TilePool:
        """Bootstrap a pool on the column ``(0, 0) .. (0, MINIMUM - 1)``."""
        column = [Position(0, y) for y in range(cls.MINIMUM)]
        return cls.seeded(column, max_restarts=max_restarts)

    # -- read-only mapping view ------------------------------------------

    def __len__(self) -> int:
        return len(self._tiles)

    def __contains__(self, position: object) -> bool:
        return position in self._tiles

    def __iter__(self) -> Iterator[Position]:
        return iter(self._tiles)

    def __getitem__(self, position: Position) -> Cell:
        return self._tiles[position]

    def get(self, position: Position) -> Cell | None:
        """Return the cell at ``position``, or ``None`` if there is none."""
        return self._tiles.get(position)

    def items(self) -> Iterator[tuple[Position, Cell]]:
        """Iterate over ``(position, cell)`` pairs."""
        return iter(self._tiles.items())

    def occupied(self) -> Iterator[tuple[Position, Occupant]]:
        """Iterate over ``(position, occupant)`` for every filled tile."""
        for position, cell in self._tiles.items():
            if cell.occupant is not None:
                yield position, cell.occupant

    # -- occupants ---------------------------------------------------------

    def place(self, position: Position, occupant: Occupant | None) -> None:
        """Put ``occupant`` on the tile at ``position``.

        An existing empty tile is filled in place.  When no tile exists
        one is created, with its neighbours computed from an empty seed.

        Args:
            position: Where to place the occupant.
            occupant: The occupant to hand over to the pool.

        Raises:
            ValueError: If ``occupant`` is ``None``.
            FilledTile: If the tile already holds an occupant.
            PoolError: If the new tile's neighbours cannot be computed.
                In every failure case the pool is left unchanged and the
                refused occupant is available as ``error.occupant``.
        """
        if occupant is None:
            msg = "cannot place None; use vacate() to empty a tile"
            raise ValueError(msg)

        cell = self._tiles.get(position)
        if cell is not None:
            if cell.occupant is not None:
                error = FilledTile(position)
                error.occupant = occupant
                raise error
            cell.occupant = occupant
            return

        try:
            neighbours = self.neighbours_for(None, position)
        except PoolError as error:
            error.occupant = occupant
            raise
        self._tiles[position] = Cell(neighbours, occupant)
        logger.debug("Created tile at %s with neighbours %r", position, neighbours)

    def vacate(self, position: Position) -> Occupant | None:
        """Remove and return the occupant at ``position``.

        Returns ``None`` if there is no tile or the tile is empty.  The
        tile itself always stays in the pool.
        """
        cell = self._tiles.get(position)
        if cell is None:
            return None
        occupant, cell.occupant = cell.occupant, None
        return occupant

    # -- neighbour graph -------------------------------------------------

    def neighbours_for(
        self,
        seed: NeighbourSet | None,
        position: Position,
    ) -> NeighbourSet:
        """Return the tiles nearest to ``position``.

        If ``position`` already has a tile its cached neighbours are
        returned.  Otherwise ``seed`` is repaired into ``NEIGHBOURS``
        distinct existing tiles and relaxed to a local fixed point.  The
        closer the seed is to the answer, the fewer restarts are needed;
        ``None`` starts cold from the nearest tiles by a single scan.

        Args:
            seed: Starting guess, or ``None`` for an empty seed.
            position: The position to find neighbours for.

        Raises:
            TooFewTiles: If the pool holds fewer than ``MINIMUM`` tiles.
            BrokenNeighbourLink: If a tracked neighbour has no tile.
            NoFixedPoint: If relaxation exceeds ``max_restarts``.
        """
        self._check_size()
        cell = self._tiles.get(position)
        if cell is not None:
            return cell.neighbours
        return self._relax(self._repair(seed, position), position)

    def refresh(self, position: Position) -> NeighbourSet:
        """Recompute and store the neighbours of an existing tile.

        Tiles placed after this one are not linked back to it, so its
        cached neighbours cannot be used as the seed; the query starts
        cold from the nearest tiles by a single scan.

        Raises:
            MissingTile: If there is no tile at ``position``.
            TooFewTiles: If the pool is below ``MINIMUM`` tiles.
            BrokenNeighbourLink: If a tracked neighbour has no tile.
            NoFixedPoint: If relaxation exceeds ``max_restarts``.
        """
        cell = self._tiles.get(position)
        if cell is None:
            raise MissingTile(position)
        self._check_size()
        neighbours = self._relax(self._repair(None, position), position)
        if neighbours != cell.neighbours:
            logger.debug("Relinked tile at %s to %r", position, neighbours)
        self._tiles[position] = Cell(neighbours, cell.occupant)
        return neighbours

    def _check_size(self) -> None:
        if len(self._tiles) < self.MINIMUM:
            raise TooFewTiles(len(self._tiles), self.MINIMUM)

    def _repair(
        self,
        seed: NeighbourSet | None,
        position: Position,
    ) -> list[Position]:
        """Turn ``seed`` into ``NEIGHBOURS`` distinct existing tiles.

        Slots that are not pool keys (or would point back at
        ``position``) are filled with the nearest tiles not yet tracked.
        """
        kept: list[Position | None] = []
        tracked: set[Position] = set()
        for slot in seed if seed is not None else ():
            if slot != position and slot in self._tiles and slot not in tracked:
                kept.append(slot)
                tracked.add(slot)
            else:
                kept.append(None)
        kept.extend([None] * (NEIGHBOURS - len(kept)))

        missing = kept.count(None)
        if not missing:
            return [slot for slot in kept if slot is not None]

        spares = iter(
            heapq.nsmallest(
                missing,
                (p for p in self._tiles if p != position and p not in tracked),
                key=lambda p: _rank(p, position),
            ),
        )
        return [slot if slot is not None else next(spares) for slot in kept]

    def _relax(self, slots: list[Position], position: Position) -> NeighbourSet:
        """Improve ``slots`` until no neighbour-of-neighbour is nearer.

        Each tracked tile's own neighbours are offered as candidates; a
        candidate nearer than the farthest tracked slot replaces it.  A
        replacement at or before the slot being scanned means that slot
        has not been scanned in its new form, so the pass restarts.
        """
        restarts = 0
        index = 0
        while index < len(slots):
            cell = self._tiles.get(slots[index])
            if cell is None:
                raise BrokenNeighbourLink(slots[index])

            restart = False
            for candidate in cell.neighbours:
                if candidate == position or candidate in slots:
                    continue
                farthest = max(
                    range(len(slots)),
                    key=lambda i: _rank(slots[i], position),
                )
                if _rank(candidate, position) < _rank(slots[farthest], position):
                    if candidate not in self._tiles:
                        raise BrokenNeighbourLink(candidate)
                    slots[farthest] = candidate
                    if farthest <= index:
                        restart = True
                        break

            if not restart:
                index += 1
                continue

            restarts += 1
            if restarts > self.max_restarts:
                raise NoFixedPoint(position, restarts - 1)
            index = 0

        if restarts:
            logger.debug("Neighbours for %s settled after %d restarts", position, restarts)
        return NeighbourSet(slots)
