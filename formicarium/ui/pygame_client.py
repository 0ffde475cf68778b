"""Pygame 2D visualization for the formicarium simulation.

Renders tunnels, pheromone links, food, the nest and ants in a window.
Everything drawn comes from ``Terrarium.snapshot()``; the only ways the
viewer touches the simulation are ``step``, ``toggle_pause`` and
``add_food_source``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

import numpy as np
import pygame

if TYPE_CHECKING:
    from formicarium.simulation.engine import Terrarium
    from formicarium.simulation.snapshot import Snapshot

from formicarium.colony.ant import AntCategory
from formicarium.pheromones.lattice import lattice_to_link
from formicarium.simulation.snapshot import RunMode
from formicarium.world.position import Position

# Colour palette
_SOIL = (56, 38, 33)
_TUNNEL = (102, 51, 25)
_NEST = (36, 23, 20)
_FOOD = (0, 200, 0)
_TEXT = (230, 230, 230)

_ANT_COLOURS: dict[AntCategory, tuple[int, int, int]] = {
    AntCategory.NORMAL: (0, 0, 0),
    AntCategory.CARRYING_FOOD: (0, 255, 0),
    AntCategory.SOIL_FULL: (143, 92, 59),
}

_NEST_SIZE = 30
_FOOD_SIZE = 30


class PygameRenderer:
    """Renders a Terrarium into a Pygame window.

    Attributes:
        terrarium: The simulation to visualise.
        cell_size: Pixel size of each grid cell.
        screen: The Pygame display surface.
    """

    # Speed presets: ticks per second
    _SPEED_STEPS: ClassVar[list[float]] = [
        1.0,
        5.0,
        10.0,
        30.0,
        60.0,
        120.0,
        300.0,
    ]

    def __init__(
        self,
        terrarium: Terrarium,
        cell_size: int = 5,
        ticks_per_second: float = 60.0,
    ) -> None:
        """Initialise the renderer.

        Args:
            terrarium: The simulation to render.
            cell_size: Pixel width/height per grid cell.
            ticks_per_second: Simulation ticks per real-time second.
        """
        self.terrarium = terrarium
        self.cell_size = cell_size
        self.ticks_per_second = ticks_per_second
        self._speed_index = self._nearest_speed(ticks_per_second)
        self._tick_accumulator = 0.0
        self._fine_per_pixel = terrarium.config.cell_scale / cell_size

        w = terrarium.config.world_width * cell_size
        h = terrarium.config.world_height * cell_size

        pygame.init()
        self.screen = pygame.display.set_mode((w, h))
        pygame.display.set_caption("Formicarium")
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("monospace", 14)
        self.running = True

    def _nearest_speed(self, tps: float) -> int:
        """Return the index of the closest speed preset."""
        diffs = [abs(s - tps) for s in self._SPEED_STEPS]
        return diffs.index(min(diffs))

    def run(self, fps: int = 30) -> None:
        """Main loop: handle events, step sim, render.

        Args:
            fps: Target frames per second.
        """
        while self.running:
            dt = self.clock.tick(fps) / 1000.0
            self._handle_events()
            if self.terrarium.mode is RunMode.ACTIVE:
                self._tick_accumulator += self.ticks_per_second * dt
                steps = int(self._tick_accumulator)
                self._tick_accumulator -= steps
                for _ in range(steps):
                    self.terrarium.step()
            self._draw(self.terrarium.snapshot())

        pygame.quit()

    def _handle_events(self) -> None:
        """Translate Pygame input into simulation calls."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                self.terrarium.add_food_source(self._to_fine(*event.pos))
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self.running = False
                elif event.key == pygame.K_SPACE:
                    self.terrarium.toggle_pause()
                elif event.key in (pygame.K_PLUS, pygame.K_EQUALS):
                    self._speed_index = min(
                        len(self._SPEED_STEPS) - 1,
                        self._speed_index + 1,
                    )
                    self.ticks_per_second = self._SPEED_STEPS[self._speed_index]
                elif event.key == pygame.K_MINUS:
                    self._speed_index = max(0, self._speed_index - 1)
                    self.ticks_per_second = self._SPEED_STEPS[self._speed_index]

    def _to_fine(self, px: int, py: int) -> Position:
        return Position(
            int(px * self._fine_per_pixel),
            int(py * self._fine_per_pixel),
            self.terrarium.config.cell_scale,
        )

    def _to_pixels(self, position: Position) -> tuple[int, int]:
        return (
            int(position.x / self._fine_per_pixel),
            int(position.y / self._fine_per_pixel),
        )

    def _draw(self, snap: Snapshot) -> None:
        """Render one frame."""
        self.screen.fill(_SOIL)
        self._draw_tunnels(snap)
        self._draw_pheromones(snap)
        self._draw_ants(snap)
        self._draw_nest(snap)
        self._draw_food(snap)
        self._draw_status(snap)
        pygame.display.flip()

    def _draw_tunnels(self, snap: Snapshot) -> None:
        cs = self.cell_size
        ys, xs = np.nonzero(snap.tunnels)
        for x, y in zip(xs, ys):
            pygame.draw.rect(self.screen, _TUNNEL, (int(x) * cs, int(y) * cs, cs, cs))

    def _draw_pheromones(self, snap: Snapshot) -> None:
        """Draw links above the floor as white dots between their cells."""
        cs = self.cell_size
        height, width = snap.tunnels.shape
        overlay = pygame.Surface(self.screen.get_size(), pygame.SRCALPHA)
        lys, xs = np.nonzero(snap.pheromones > snap.min_pheromone)
        for x, ly in zip(xs, lys):
            link = lattice_to_link((int(x), int(ly)), width=width, height=height)
            if link is None:
                continue
            (x1, y1), (x2, y2) = link
            px = (x1 + x2) * cs // 2 + cs // 2
            py = (y1 + y2) * cs // 2 + cs // 2
            alpha = int(min(snap.pheromones[ly, x] / snap.max_pheromone, 1.0) * 255)
            pygame.draw.rect(overlay, (255, 255, 255, alpha), (px, py, 2, 2))
        self.screen.blit(overlay, (0, 0))

    def _draw_ants(self, snap: Snapshot) -> None:
        radius = max(2, self.cell_size // 2)
        for ant in snap.ants:
            colour = _ANT_COLOURS[ant.category]
            pygame.draw.circle(self.screen, colour, self._to_pixels(ant.position), radius)

    def _draw_nest(self, snap: Snapshot) -> None:
        cx, cy = self._to_pixels(snap.nest)
        rect = pygame.Rect(cx - _NEST_SIZE // 2, cy - _NEST_SIZE // 2, _NEST_SIZE, _NEST_SIZE)
        pygame.draw.rect(self.screen, _NEST, rect)
        self._blit_centred(str(snap.food_delivered), rect, _TEXT)

    def _draw_food(self, snap: Snapshot) -> None:
        for food in snap.food_sources:
            cx, cy = self._to_pixels(food.position)
            rect = pygame.Rect(
                cx - _FOOD_SIZE // 2,
                cy - _FOOD_SIZE // 2,
                _FOOD_SIZE,
                _FOOD_SIZE,
            )
            pygame.draw.rect(self.screen, _FOOD, rect)
            self._blit_centred(str(food.amount), rect, (0, 0, 0))

    def _draw_status(self, snap: Snapshot) -> None:
        lines = [
            f"Tick: {snap.tick}",
            f"Speed: {self.ticks_per_second:.0f} t/s",
            "PAUSED" if snap.mode is RunMode.SUSPENDED else "RUNNING",
        ]
        y = 5
        for line in lines:
            surf = self.font.render(line, True, _TEXT)
            self.screen.blit(surf, (5, y))
            y += 16

    def _blit_centred(
        self,
        text: str,
        rect: pygame.Rect,
        colour: tuple[int, int, int],
    ) -> None:
        surf = self.font.render(text, True, colour)
        self.screen.blit(surf, surf.get_rect(center=rect.center))
