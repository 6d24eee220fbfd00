"""Tests for tilepool.simulation.combat."""

from dataclasses import dataclass

import pytest

from tilepool.entities.unit import Occupant, Unit
from tilepool.simulation.combat import Combat
from tilepool.world.errors import MissingTile
from tilepool.world.pool import TilePool
from tilepool.world.position import Position


@dataclass(frozen=True)
class Marker:
    """A non-unit occupant."""

    glyph: str = "*"


class TestUnit:
    """Tests for the Unit occupant."""

    def test_glyphs(self) -> None:
        assert Unit(unit_id=0).glyph == "U"
        assert Unit(unit_id=1, is_player=True).glyph == "@"

    def test_equality_by_value(self) -> None:
        assert Unit(unit_id=3) == Unit(unit_id=3)
        assert Unit(unit_id=3) != Unit(unit_id=4)

    def test_unit_is_an_occupant(self) -> None:
        assert isinstance(Unit(unit_id=0), Occupant)
        assert not isinstance(object(), Occupant)

    def test_any_glyph_holder_can_occupy(self, pool: TilePool) -> None:
        marker = Marker()
        assert isinstance(marker, Occupant)
        pool.place(Position(0, 3), marker)
        assert pool.vacate(Position(0, 3)) is marker


class TestCombat:
    """The attacker always wins."""

    def test_attacker_replaces_defender(self, pool: TilePool) -> None:
        defender, attacker = Unit(unit_id=1), Unit(unit_id=2)
        pool.place(Position(0, 2), defender)
        loser = Combat(attacker=attacker, target=Position(0, 2)).resolve(pool)
        assert loser is defender
        assert pool[Position(0, 2)].occupant is attacker

    def test_empty_tile_has_no_loser(self, pool: TilePool) -> None:
        attacker = Unit(unit_id=2)
        assert Combat(attacker=attacker, target=Position(0, 2)).resolve(pool) is None
        assert pool[Position(0, 2)].occupant is attacker

    def test_missing_tile(self, pool: TilePool) -> None:
        with pytest.raises(MissingTile):
            Combat(attacker=Unit(unit_id=2), target=Position(5, 5)).resolve(pool)
        assert Position(5, 5) not in pool
