"""Pygame 2D visualization for the tile pool simulation.

Renders the latest snapshot published by a ``SimulationDriver`` in a
window centred on the player.  The driver ticks the simulation on its
own thread; the renderer never touches the engine.  Key presses are
sent to the driver as commands and take effect on its next tick.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

import pygame

if TYPE_CHECKING:
    from tilepool.simulation.driver import SimulationDriver
    from tilepool.simulation.engine import Snapshot

from tilepool.simulation.driver import MovePlayer, SetSpeed, TogglePause
from tilepool.simulation.engine import Direction
from tilepool.world.position import Position

# Colour palette
_BG = (15, 15, 20)
_TILE = (45, 45, 60)
_INFO = (200, 200, 200)

# Occupant colours by glyph
_GLYPH_COLOURS: dict[str, tuple[int, int, int]] = {
    "@": (255, 200, 50),
    "U": (255, 80, 80),
}

_KEY_DIRECTIONS: dict[int, Direction] = {
    pygame.K_UP: Direction.UP,
    pygame.K_DOWN: Direction.DOWN,
    pygame.K_LEFT: Direction.LEFT,
    pygame.K_RIGHT: Direction.RIGHT,
}


class PygameRenderer:
    """Renders driver snapshots into a Pygame window.

    Attributes:
        driver: The background driver that owns the simulation.
        cell_size: Pixel size of each tile.
        screen: The Pygame display surface.
    """

    # Speed presets: ticks per second
    _SPEED_STEPS: ClassVar[list[float]] = [0.5, 1.0, 2.0, 5.0, 10.0, 20.0, 60.0]

    def __init__(
        self,
        driver: SimulationDriver,
        cell_size: int = 16,
        view_tiles: int = 41,
    ) -> None:
        """Initialise the renderer.

        Args:
            driver: The driver whose snapshots are drawn.
            cell_size: Pixel width/height per tile.
            view_tiles: Width and height of the visible area, in tiles.
        """
        self.driver = driver
        self.cell_size = cell_size
        self.view_tiles = view_tiles
        self.ticks_per_second = driver.ticks_per_second
        self._speed_index = self._nearest_speed(self.ticks_per_second)
        self._panel_width = 180
        self._centre = Position.origin()
        self._snapshot: Snapshot | None = None

        side = view_tiles * cell_size
        pygame.init()
        self.screen = pygame.display.set_mode((side + self._panel_width, side))
        pygame.display.set_caption("Tilepool")
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("monospace", 14)
        self.glyph_font = pygame.font.SysFont("monospace", cell_size, bold=True)
        self.running = True
        self.paused = driver.paused

    def _nearest_speed(self, tps: float) -> int:
        """Return the index of the closest speed preset."""
        diffs = [abs(s - tps) for s in self._SPEED_STEPS]
        return diffs.index(min(diffs))

    def run(self, fps: int = 30) -> None:
        """Main loop: start the driver, handle events, render.

        Args:
            fps: Target frames per second.
        """
        self.driver.start()
        try:
            while self.running:
                self.clock.tick(fps)
                self._handle_events()
                self._snapshot = self.driver.latest() or self._snapshot
                if self._snapshot is not None:
                    self._draw(self._snapshot)
        finally:
            pygame.quit()
            self.driver.stop()

    def _handle_events(self) -> None:
        """Translate Pygame input events into driver commands."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self.running = False
                elif event.key == pygame.K_SPACE:
                    self.paused = not self.paused
                    self.driver.send(TogglePause())
                elif event.key in _KEY_DIRECTIONS:
                    self.driver.send(MovePlayer(_KEY_DIRECTIONS[event.key]))
                elif event.key in (pygame.K_PLUS, pygame.K_EQUALS):
                    self._change_speed(+1)
                elif event.key == pygame.K_MINUS:
                    self._change_speed(-1)

    def _change_speed(self, step: int) -> None:
        self._speed_index = max(
            0,
            min(len(self._SPEED_STEPS) - 1, self._speed_index + step),
        )
        self.ticks_per_second = self._SPEED_STEPS[self._speed_index]
        self.driver.send(SetSpeed(self.ticks_per_second))

    def _draw(self, snap: Snapshot) -> None:
        """Render one frame."""
        if snap.player is not None:
            self._centre = snap.player
        self.screen.fill(_BG)
        self._draw_tiles(snap)
        self._draw_info_panel(snap)
        pygame.display.flip()

    def _to_screen(self, pos: Position) -> tuple[int, int] | None:
        """Return the pixel corner of ``pos``, or None if off-screen."""
        half = self.view_tiles // 2
        col = pos.x - self._centre.x + half
        row = pos.y - self._centre.y + half
        if not (0 <= col < self.view_tiles and 0 <= row < self.view_tiles):
            return None
        return col * self.cell_size, row * self.cell_size

    def _draw_tiles(self, snap: Snapshot) -> None:
        """Draw every visible tile and the glyph of its occupant."""
        cs = self.cell_size
        for pos, glyph in snap.tiles:
            corner = self._to_screen(pos)
            if corner is None:
                continue
            pygame.draw.rect(self.screen, _TILE, (*corner, cs - 1, cs - 1))
            if glyph is not None:
                colour = _GLYPH_COLOURS.get(glyph, _INFO)
                surf = self.glyph_font.render(glyph, True, colour)
                self.screen.blit(surf, corner)

    def _draw_info_panel(self, snap: Snapshot) -> None:
        """Draw a stats panel on the right side of the window."""
        panel_x = self.view_tiles * self.cell_size + 10
        y = 10

        lines = [
            f"Tick: {snap.tick}",
            f"Speed: {self.ticks_per_second:.1f} t/s",
            f"{'PAUSED' if self.paused else 'RUNNING'}",
            "",
            f"Tiles: {len(snap.tiles)}",
            f"Units: {len(snap.occupied)}",
            f"Player: {snap.player or 'defeated'}",
            "",
            "--- Controls ---",
            "Arrows: move",
            "SPACE: pause",
            "+/-: speed",
            "ESC: quit",
        ]

        for line in lines:
            surf = self.font.render(line, True, _INFO)
            self.screen.blit(surf, (panel_x, y))
            y += 18
