"""Position — an integer coordinate on the unbounded tile plane.

Positions are immutable values.  They order lexicographically (x, then
y) so that candidate neighbours can always be sorted and tie-broken
deterministically, and every distance comparison uses the exact integer
``squared_distance``.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class Position:
    """A coordinate on the tile plane.

    Attributes:
        x: Column coordinate.
        y: Row coordinate.
    """

    x: int
    y: int

    @classmethod
    def origin(cls) -> Position:
        """Return the position ``(0, 0)``."""
        return cls(0, 0)

    def __add__(self, offset: Position) -> Position:
        return Position(self.x + offset.x, self.y + offset.y)

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"


def squared_distance(a: Position, b: Position) -> int:
    """Return the squared Euclidean distance between ``a`` and ``b``."""
    dx = a.x - b.x
    dy = a.y - b.y
    return dx * dx + dy * dy
