"""Terrarium — the main tick loop.

Owns all shared simulation state (tunnel map, pheromone lattice, food
sources, colony) and advances it in a fixed tick order:

1. Prune depleted food sources
2. Evaporate the pheromone lattice
3. Update every ant once, in colony order

Ant updates run strictly one after another.  Each ant gets the shared
grids for the length of its own ``update`` call, so an ant sees the
moves of ants earlier in the order from this tick and of later ants
only from the previous tick.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import numpy as np
from numpy.random import Generator

from formicarium.colony.ant import Ant
from formicarium.colony.colony import Colony
from formicarium.pheromones.fields import PheromoneField
from formicarium.simulation.config import SimulationConfig
from formicarium.simulation.random_source import UniformSource
from formicarium.simulation.snapshot import (
    AntView,
    FoodView,
    RunMode,
    Snapshot,
)
from formicarium.world.food import FoodSource, scatter_food_sources
from formicarium.world.position import Position
from formicarium.world.tunnels import TunnelMap

logger = logging.getLogger(__name__)


@dataclass
class Terrarium:
    """Drives the simulation forward tick by tick.

    Attributes:
        config: Loaded simulation configuration.
        tunnels: Shared dig grid.
        pheromones: Shared pheromone lattice.
        food_sources: Active food sources.
        colony: The nest and its ants.
        rng: Master seeded random generator.
        ant_rng: Uniform stream used for ant decisions.  Defaults to
            ``rng``; tests may swap in a scripted stream.
        mode: ``RunMode.SUSPENDED`` makes ``step`` a no-op.
        tick: Ticks completed.
    """

    config: SimulationConfig
    tunnels: TunnelMap = field(init=False)
    pheromones: PheromoneField = field(init=False)
    food_sources: list[FoodSource] = field(init=False, default_factory=list)
    colony: Colony = field(init=False)
    rng: Generator = field(init=False)
    ant_rng: UniformSource = field(init=False)
    mode: RunMode = RunMode.ACTIVE
    tick: int = 0

    def __post_init__(self) -> None:
        """Build grids, nest, food sources and ants from config."""
        cfg = self.config
        self.rng = np.random.default_rng(cfg.seed)
        self.ant_rng = self.rng
        self.tunnels = TunnelMap(width=cfg.world_width, height=cfg.world_height)
        self.pheromones = PheromoneField(
            width=cfg.world_width,
            height=cfg.world_height,
            minimum=cfg.min_pheromone,
            maximum=cfg.max_pheromone,
            fast_rate=cfg.evaporation_rate_fast,
            slow_rate=cfg.evaporation_rate_slow,
        )

        nest = self._nest_position()
        self.tunnels.dig(*nest.cell)
        self.colony = Colony(
            nest=nest,
            width=cfg.world_width,
            height=cfg.world_height,
        )

        self.food_sources = scatter_food_sources(
            self.rng,
            nest,
            count=cfg.food_sources_count,
            amount=cfg.food_amount_per_source,
            width=cfg.world_width,
            height=cfg.world_height,
            margin=cfg.food_margin,
            min_distance=cfg.food_distance,
        )
        for _ in range(cfg.ant_count):
            self.colony.spawn_ant(
                self.rng,
                jitter=cfg.spawn_jitter,
                soil_limit=cfg.ant_soil_limit,
            )

        logger.info(
            "Terrarium %dx%d ready: nest at cell %s, %d ants, %d food sources",
            cfg.world_width,
            cfg.world_height,
            nest.cell,
            len(self.colony.ants),
            len(self.food_sources),
        )

    def _nest_position(self) -> Position:
        cfg = self.config
        x = cfg.fine_width // 2 if cfg.nest_x is None else cfg.nest_x
        y = cfg.fine_height // 2 if cfg.nest_y is None else cfg.nest_y
        if not (0 <= x < cfg.fine_width and 0 <= y < cfg.fine_height):
            msg = f"nest ({x}, {y}) outside {cfg.fine_width}x{cfg.fine_height} world"
            raise ValueError(msg)
        return Position(x, y, cfg.cell_scale)

    @property
    def nest(self) -> Position:
        return self.colony.nest

    @property
    def ants(self) -> list[Ant]:
        return self.colony.ants

    # -- Run control --

    def pause(self) -> None:
        self.mode = RunMode.SUSPENDED

    def resume(self) -> None:
        self.mode = RunMode.ACTIVE

    def toggle_pause(self) -> None:
        """Flip between active and suspended."""
        if self.mode is RunMode.ACTIVE:
            self.pause()
        else:
            self.resume()

    # -- Tick --

    def step(self) -> None:
        """Advance the simulation by one tick.

        Does nothing while suspended.
        """
        if self.mode is RunMode.SUSPENDED:
            return

        # 1. Drop food sources emptied during the previous tick
        self._prune_food_sources()

        # 2. Evaporate pheromones
        self.pheromones.evaporate_all()

        # 3. Update ants in fixed order
        for ant in self.colony.ants:
            delivered = ant.update(
                self.tunnels,
                self.pheromones,
                self.food_sources,
                self.config,
                self.ant_rng,
            )
            if delivered:
                self.colony.record_delivery(delivered)

        self.tick += 1

    def run(self, ticks: int) -> None:
        """Run the simulation for a fixed number of ticks.

        Args:
            ticks: Number of ticks to advance.
        """
        for _ in range(ticks):
            self.step()

    def _prune_food_sources(self) -> None:
        depleted = [f for f in self.food_sources if f.is_depleted]
        if not depleted:
            return
        self.food_sources = [f for f in self.food_sources if not f.is_depleted]
        for food in depleted:
            logger.info("Food source at cell %s depleted", food.position.cell)

    # -- External input --

    def add_food_source(self, position: Position) -> bool:
        """Place a new food source, e.g. from a mouse click.

        The source is only accepted if its cell lies strictly farther than
        ``food_distance`` cells (Manhattan) from the nest cell.

        Args:
            position: Fine-grained location.

        Returns:
            True if the source was added.
        """
        position = Position(position.x, position.y, self.config.cell_scale)
        cx, cy = position.cell
        if not self.tunnels.in_bounds(cx, cy):
            logger.debug("Rejected food source outside the world at %s", position)
            return False
        if position.cell_distance(self.nest) <= self.config.food_distance:
            logger.debug("Rejected food source too close to the nest at %s", position)
            return False
        self.food_sources.append(
            FoodSource(position, self.config.food_amount_per_source),
        )
        logger.debug("Added food source at cell %s", position.cell)
        return True

    # -- Observation --

    def snapshot(self) -> Snapshot:
        """Return a copy of everything a renderer needs."""
        return Snapshot(
            tick=self.tick,
            mode=self.mode,
            tunnels=self.tunnels.grid.copy(),
            pheromones=self.pheromones.grid.copy(),
            min_pheromone=self.pheromones.minimum,
            max_pheromone=self.pheromones.maximum,
            ants=tuple(AntView(a.position, a.category) for a in self.colony.ants),
            food_sources=tuple(
                FoodView(f.position, f.amount) for f in self.food_sources
            ),
            nest=self.nest,
            food_delivered=self.colony.food_delivered,
        )
