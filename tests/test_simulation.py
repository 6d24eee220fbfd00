"""Tests for tilepool.simulation - engine and config loading."""

import queue
from pathlib import Path

from tilepool.simulation.config import SimulationConfig
from tilepool.simulation.engine import Direction, SimulationEngine
from tilepool.world.pool import DEFAULT_MAX_RESTARTS
from tilepool.world.position import Position


class TestSimulationConfig:
    """Tests for YAML config loading."""

    def test_defaults(self) -> None:
        cfg = SimulationConfig()
        assert cfg.seed == 42
        assert cfg.initial_units == 8
        assert cfg.max_restarts == DEFAULT_MAX_RESTARTS

    def test_from_yaml(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "test.yaml"
        yaml_file.write_text("seed: 99\ninitial_units: 3\nmax_restarts: 50\n")
        cfg = SimulationConfig.from_yaml(yaml_file)
        assert cfg.seed == 99
        assert cfg.initial_units == 3
        assert cfg.max_restarts == 50
        assert cfg.spawn_radius == SimulationConfig.spawn_radius

    def test_from_empty_yaml(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "empty.yaml"
        yaml_file.write_text("")
        assert SimulationConfig.from_yaml(yaml_file) == SimulationConfig()


class TestSimulationEngine:
    """Tests for the tick loop and moves."""

    def test_engine_initialises(self, default_config: SimulationConfig) -> None:
        engine = SimulationEngine(config=default_config)
        assert engine.tick == 0
        assert engine.player == Position.origin()
        assert len(engine.pool) >= engine.pool.MINIMUM
        assert engine.pool.max_restarts == default_config.max_restarts

    def test_run_multiple_ticks(self, default_config: SimulationConfig) -> None:
        engine = SimulationEngine(config=default_config)
        engine.run(ticks=10)
        assert engine.tick == 10

    def test_units_never_multiply(self, default_config: SimulationConfig) -> None:
        engine = SimulationEngine(config=default_config)
        before = len(list(engine.pool.occupied()))
        engine.run(ticks=25)
        assert 1 <= len(list(engine.pool.occupied())) <= before

    def test_graph_stays_consistent(self, default_config: SimulationConfig) -> None:
        engine = SimulationEngine(config=default_config)
        engine.run(ticks=25)
        for position, cell in engine.pool.items():
            assert position not in cell.neighbours
            assert all(p in engine.pool for p in cell.neighbours)

    def test_determinism(self) -> None:
        """Same seed must produce identical state after N ticks."""
        cfg = SimulationConfig(seed=777, initial_units=6, spawn_radius=4)
        engine_a = SimulationEngine(config=cfg)
        engine_b = SimulationEngine(config=cfg)
        engine_a.run(ticks=20)
        engine_b.run(ticks=20)
        assert engine_a.snapshot() == engine_b.snapshot()

    def test_player_stays_put_without_input(
        self,
        quiet_config: SimulationConfig,
    ) -> None:
        engine = SimulationEngine(config=quiet_config)
        engine.run(ticks=5)
        assert engine.player == Position.origin()

    def test_move_player_to_new_tile(self, quiet_config: SimulationConfig) -> None:
        engine = SimulationEngine(config=quiet_config)
        assert engine.move_player(Direction.RIGHT) == Position(1, 0)
        assert engine.player == Position(1, 0)
        assert engine.pool[Position(0, 0)].is_empty
        assert engine.pool[Position(1, 0)].occupant.is_player

    def test_move_onto_unit_fights(self, quiet_config: SimulationConfig) -> None:
        engine = SimulationEngine(config=quiet_config)
        assert engine.spawn(Position(0, 1)) is not None
        assert engine.move_player(Direction.DOWN) == Position(0, 1)
        assert engine.player == Position(0, 1)
        assert engine.snapshot().occupied == {Position(0, 1): "@"}

    def test_player_can_be_defeated(self, quiet_config: SimulationConfig) -> None:
        engine = SimulationEngine(config=quiet_config)
        engine.spawn(Position(0, 1))
        assert engine.move(Position(0, 1), Direction.UP) == Position(0, 0)
        assert engine.player is None
        assert engine.move_player(Direction.UP) is None
        assert engine.snapshot().occupied == {Position(0, 0): "U"}

    def test_move_from_empty_tile(self, quiet_config: SimulationConfig) -> None:
        engine = SimulationEngine(config=quiet_config)
        assert engine.move(Position(0, 3), Direction.LEFT) is None
        assert engine.move(Position(40, 40), Direction.LEFT) is None

    def test_spawn_on_filled_tile(self, quiet_config: SimulationConfig) -> None:
        engine = SimulationEngine(config=quiet_config)
        assert engine.spawn(Position.origin()) is None


class TestSnapshots:
    """Tests for the read-only views handed to renderers."""

    def test_snapshot_is_sorted(self, default_config: SimulationConfig) -> None:
        engine = SimulationEngine(config=default_config)
        snap = engine.snapshot()
        positions = [pos for pos, _ in snap.tiles]
        assert positions == sorted(positions)
        assert len(positions) == len(engine.pool)
        assert snap.occupied[Position.origin()] == "@"

    def test_publish_drops_oldest(self, quiet_config: SimulationConfig) -> None:
        engine = SimulationEngine(config=quiet_config)
        channel: queue.Queue = queue.Queue(maxsize=1)
        engine.publish(channel)
        engine.step()
        engine.publish(channel)
        assert channel.qsize() == 1
        assert channel.get_nowait().tick == 1

    def test_make_channel_uses_config(self, quiet_config: SimulationConfig) -> None:
        engine = SimulationEngine(config=quiet_config)
        assert engine.make_channel().maxsize == quiet_config.snapshot_queue_size

    def test_snapshot_tracks_player(self, quiet_config: SimulationConfig) -> None:
        engine = SimulationEngine(config=quiet_config)
        assert engine.snapshot().player == Position.origin()
        engine.move_player(Direction.LEFT)
        assert engine.snapshot().player == Position(-1, 0)
        engine.player = None
        assert engine.snapshot().player is None
