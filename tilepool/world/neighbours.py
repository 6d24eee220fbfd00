"""NeighbourSet — the fixed-size cache of nearby tiles held by every cell.

A NeighbourSet always holds exactly ``NEIGHBOURS`` distinct positions.
It is only ever built from a complete, deduplicated sequence, so a
half-filled or repeating set can never be observed.  Slots carry no
ranking; two sets holding the same positions in a different slot order
compare equal.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from tilepool.world.errors import ConversionError, RepeatedNeighbour

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from tilepool.world.position import Position

NEIGHBOURS = 5
"""Number of neighbours each cell tracks."""

MINIMUM_TILES = NEIGHBOURS + 1
"""Smallest pool that can fill a NeighbourSet without self-reference."""


def _first_repeat(positions: Sequence[Position]) -> Position | None:
    """Return a position that occurs twice in ``positions``, if any."""
    ordered = sorted(positions)
    for previous, current in zip(ordered, ordered[1:]):
        if previous == current:
            return current
    return None


class NeighbourSet:
    """An immutable set of exactly ``NEIGHBOURS`` distinct positions."""

    __slots__ = ("_slots",)

    def __init__(self, positions: Sequence[Position]) -> None:
        """Validate and freeze ``positions``.

        Args:
            positions: Exactly ``NEIGHBOURS`` distinct positions.

        Raises:
            ConversionError: If the sequence has the wrong length.
            RepeatedNeighbour: If two positions are equal.
        """
        if len(positions) != NEIGHBOURS:
            raise ConversionError(NEIGHBOURS, len(positions))
        repeat = _first_repeat(positions)
        if repeat is not None:
            raise RepeatedNeighbour(repeat)
        self._slots: tuple[Position, ...] = tuple(positions)

    @classmethod
    def from_sequence(cls, positions: Sequence[Position]) -> NeighbourSet:
        """Build a NeighbourSet from a variable-length sequence."""
        return cls(positions)

    @property
    def positions(self) -> tuple[Position, ...]:
        """The slot contents, in slot order."""
        return self._slots

    def __len__(self) -> int:
        return len(self._slots)

    def __iter__(self) -> Iterator[Position]:
        return iter(self._slots)

    def __contains__(self, position: object) -> bool:
        return position in self._slots

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NeighbourSet):
            return NotImplemented
        return frozenset(self._slots) == frozenset(other._slots)

    def __hash__(self) -> int:
        return hash(frozenset(self._slots))

    def __repr__(self) -> str:
        inner = ", ".join(str(p) for p in self._slots)
        return f"NeighbourSet({inner})"


def connect_neighbours(
    positions: Sequence[Position],
) -> list[tuple[Position, NeighbourSet]]:
    """Pair each of ``MINIMUM_TILES`` positions with all the others.

    With exactly ``NEIGHBOURS + 1`` points, the nearest ``NEIGHBOURS`` of
    any one of them are simply the rest, so this gives every bootstrap
    cell an exact neighbour set.

    Args:
        positions: Exactly ``MINIMUM_TILES`` distinct positions.

    Returns:
        ``(focus, neighbours)`` pairs in input order.

    Raises:
        ConversionError: If the sequence has the wrong length.
        RepeatedNeighbour: If two positions are equal.
    """
    if len(positions) != MINIMUM_TILES:
        raise ConversionError(MINIMUM_TILES, len(positions))
    repeat = _first_repeat(positions)
    if repeat is not None:
        raise RepeatedNeighbour(repeat)

    result: list[tuple[Position, NeighbourSet]] = []
    for index, focus in enumerate(positions):
        others = [*positions[:index], *positions[index + 1 :]]
        result.append((focus, NeighbourSet(others)))
    return result
