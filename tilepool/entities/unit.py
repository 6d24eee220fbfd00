"""Unit — the occupant that stands on tiles.

The pool itself treats occupants as opaque values.  Anything with a
one-character ``glyph`` render hint satisfies ``Occupant``; ``Unit`` is
the combatant the simulation moves around.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@runtime_checkable
class Occupant(Protocol):
    """Structural type for anything a tile can hold."""

    @property
    def glyph(self) -> str:
        """Single-character render hint."""
        ...


@dataclass(frozen=True)
class Unit:
    """A combatant.

    Attributes:
        unit_id: Unique identifier.
        is_player: Whether the keyboard controls this unit.
    """

    unit_id: int
    is_player: bool = False

    @property
    def glyph(self) -> str:
        """Return ``@`` for the player and ``U`` for every other unit."""
        return "@" if self.is_player else "U"

    def __str__(self) -> str:
        return self.glyph
