"""Combat — resolve two occupants contending for one tile.

The pool only ever accepts or refuses an occupant.  When a move targets
a filled tile, the engine builds a ``Combat`` and resolves it before
placing anyone.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from tilepool.world.errors import MissingTile

if TYPE_CHECKING:
    from tilepool.entities.unit import Occupant
    from tilepool.world.pool import TilePool
    from tilepool.world.position import Position

logger = logging.getLogger(__name__)


@dataclass
class Combat:
    """A conflict between an attacker and the occupant of a tile.

    Attributes:
        attacker: The occupant moving onto the tile.
        target: Position of the defended tile.
    """

    attacker: Occupant
    target: Position

    def resolve(self, pool: TilePool) -> Occupant | None:
        """Settle the conflict.  The attacker always wins.

        The defender is removed from the tile and the attacker takes its
        place.

        Args:
            pool: The pool holding the defended tile.

        Returns:
            The defeated occupant, or ``None`` if the tile was already
            empty.

        Raises:
            MissingTile: If there is no tile at ``target``.
        """
        if self.target not in pool:
            raise MissingTile(self.target)
        defender = pool.vacate(self.target)
        pool.place(self.target, self.attacker)
        logger.info("%s defeated %s at %s", self.attacker, defender, self.target)
        return defender
