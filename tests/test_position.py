"""Tests for tilepool.world.position."""

from tilepool.world.position import Position, squared_distance


class TestPosition:
    """Tests for the Position value type."""

    def test_squared_distance(self) -> None:
        assert squared_distance(Position(1, 2), Position(1, 1)) == 1
        assert squared_distance(Position(0, 0), Position(3, 4)) == 25
        assert squared_distance(Position(-2, 5), Position(1, 1)) == 25
        assert squared_distance(Position.origin(), Position.origin()) == 0

    def test_distance_is_symmetric(self) -> None:
        a, b = Position(-7, 3), Position(4, -9)
        assert squared_distance(a, b) == squared_distance(b, a)

    def test_order_is_x_then_y(self) -> None:
        assert Position(0, 9) < Position(1, 0)
        assert Position(1, 0) < Position(1, 1)
        assert sorted([Position(2, 1), Position(0, 5), Position(2, 0)]) == [
            Position(0, 5),
            Position(2, 0),
            Position(2, 1),
        ]

    def test_offset_by_step(self) -> None:
        assert Position(3, -1) + Position(1, 1) == Position(4, 0)
        assert Position.origin() + Position(0, -1) == Position(0, -1)

    def test_only_translation_is_supported(self) -> None:
        assert not hasattr(Position, "__sub__")
        assert not hasattr(Position, "__neg__")

    def test_hashable_value(self) -> None:
        assert len({Position(1, 1), Position(1, 1), Position(1, 2)}) == 2
