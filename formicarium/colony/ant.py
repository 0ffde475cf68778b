"""Ant — individual digging and foraging agent.

Each ant runs a small state machine driven by two flags:

- **Exploring** (not returning): pick an unvisited neighbouring cell by
  roulette-wheel selection weighted by link pheromone and a digging
  heuristic, dig it if needed, and remember it on the backtrack stack.
- **Returning with food**: same selection, restricted to cells that are
  already tunnels.  On reaching the nest the remembered path is
  reinforced with pheromone.
- **Returning empty** (soil capacity reached): retrace the backtrack
  stack one step per tick until the nest is in range.

Ants never talk to each other.  The tunnel map, pheromone field and
food-source list are passed into ``update`` for the duration of the call
and are not kept afterwards.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, TypeVar

import numpy as np
from numpy.typing import NDArray

from formicarium.pheromones.lattice import link_to_lattice
from formicarium.world.position import CellCoord, Position

if TYPE_CHECKING:
    from formicarium.pheromones.fields import PheromoneField
    from formicarium.simulation.config import SimulationConfig
    from formicarium.simulation.random_source import UniformSource
    from formicarium.world.food import FoodSource
    from formicarium.world.tunnels import TunnelMap

logger = logging.getLogger(__name__)

T = TypeVar("T")


class AntState(Enum):
    """Behavioural state derived from the ``returning``/``carrying_food`` flags."""

    EXPLORING = auto()
    RETURNING_WITH_FOOD = auto()
    RETURNING_EMPTY = auto()


class AntCategory(Enum):
    """How an ant should be drawn."""

    CARRYING_FOOD = auto()
    SOIL_FULL = auto()
    NORMAL = auto()


def roulette_select(weighted: Sequence[tuple[T, float]], sample: float) -> T | None:
    """Pick an item with probability proportional to its weight.

    Walks ``weighted`` in order, accumulating normalised weight, and
    returns the first item whose cumulative share reaches ``sample``.

    Args:
        weighted: ``(item, weight)`` pairs with non-negative weights.
        sample: Uniform draw in ``[0, 1)``.

    Returns:
        The chosen item.  None if there is nothing to choose from or the
        weights sum to zero.  If rounding leaves the cumulative share
        just short of ``sample``, the last item is chosen.
    """
    total = sum(w for _, w in weighted)
    if not weighted or not total > 0.0:
        return None
    cumulative = 0.0
    for item, weight in weighted:
        cumulative += weight / total
        if cumulative >= sample:
            return item
    return weighted[-1][0]


@dataclass(eq=False)
class Ant:
    """A single ant agent.

    Attributes:
        position: Current fine-grained position.
        nest: Nest anchor; the ant is reset here after every round trip.
        width: Cell-grid columns (sizes the visited grid).
        height: Cell-grid rows.
        soil_limit: Cells the ant can dig before it must head home.
        heading: Direction in degrees, used only for the bootstrap step
            taken when the backtrack stack is empty.
        returning: Heading home, with or without food.
        carrying_food: Holding one unit of food.  Implies ``returning``.
        soil_carried: Cells dug since leaving the nest.
        path: Backtrack stack of fine positions, oldest first.
        visited: Per-cell flags for the current trip, indexed ``[y, x]``.
    """

    position: Position
    nest: Position
    width: int
    height: int
    soil_limit: int = 100
    heading: float = 0.0
    returning: bool = False
    carrying_food: bool = False
    soil_carried: int = 0
    path: list[Position] = field(default_factory=list)
    visited: NDArray[np.bool_] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.visited = np.zeros((self.height, self.width), dtype=np.bool_)

    @classmethod
    def spawn(
        cls,
        nest: Position,
        width: int,
        height: int,
        rng: np.random.Generator,
        *,
        jitter: int = 5,
        soil_limit: int = 100,
    ) -> Ant:
        """Create an ant near the nest with a random heading.

        The spawn point is offset from the nest by up to ``jitter`` fine
        units on each axis and clamped to the world.

        Args:
            nest: Nest anchor position.
            width: Cell-grid columns.
            height: Cell-grid rows.
            rng: Seeded random generator.
            jitter: Maximum spawn offset per axis, in fine units.
            soil_limit: Digging capacity.

        Returns:
            A new exploring Ant.
        """
        heading = float(rng.uniform(0.0, 360.0))
        dx = int(rng.uniform(-jitter, jitter))
        dy = int(rng.uniform(-jitter, jitter))
        x = min(max(nest.x + dx, 0), width * nest.scale - 1)
        y = min(max(nest.y + dy, 0), height * nest.scale - 1)
        return cls(
            position=Position(x, y, nest.scale),
            nest=nest,
            width=width,
            height=height,
            soil_limit=soil_limit,
            heading=heading,
        )

    @property
    def state(self) -> AntState:
        if not self.returning:
            return AntState.EXPLORING
        if self.carrying_food:
            return AntState.RETURNING_WITH_FOOD
        return AntState.RETURNING_EMPTY

    @property
    def category(self) -> AntCategory:
        """Visual category: food first, then a full soil load."""
        if self.carrying_food:
            return AntCategory.CARRYING_FOOD
        if self.soil_carried >= self.soil_limit:
            return AntCategory.SOIL_FULL
        return AntCategory.NORMAL

    def has_visited(self, cell: CellCoord) -> bool:
        cx, cy = cell
        return bool(self.visited[cy, cx])

    def update(
        self,
        tunnels: TunnelMap,
        pheromones: PheromoneField,
        food_sources: list[FoodSource],
        config: SimulationConfig,
        rng: UniformSource,
    ) -> int:
        """Perform one tick of decision-making and movement.

        Args:
            tunnels: Shared dig grid, mutated when the ant digs.
            pheromones: Shared pheromone lattice, read for path choice
                and reinforced on delivery.
            food_sources: Active food sources; one may be depleted.
            config: Behaviour parameters.
            rng: Source of uniform samples.

        Returns:
            Units of food delivered to the nest this tick (0 or 1).
        """
        # Full of soil: retrace the path home
        if self.returning and not self.carrying_food:
            if not self._backtrack():
                self._abandon_trip()
                return 0
            return self._scan_for_target(food_sources, pheromones, config)

        if not self.path:
            self._bootstrap_step()
            return 0

        candidates = self._candidates(tunnels)
        if not candidates:
            if not self._backtrack():
                self._abandon_trip()
            return 0

        weighted = self._desirabilities(candidates, tunnels, pheromones, config)
        chosen = roulette_select(weighted, rng.random())
        if chosen is not None:
            self._move_and_dig(chosen, tunnels)

        delivered = self._scan_for_target(food_sources, pheromones, config)
        self._check_if_full()
        return delivered

    # -- Movement --

    def _bootstrap_step(self) -> None:
        """Take the first step of a trip along the heading.

        Offsets are the truncated cosine/sine of the heading, so most
        headings leave the ant where it is; the point is to seed the
        backtrack stack and visited grid with the starting cell.
        """
        rad = math.radians(self.heading)
        x = self.position.x + int(math.cos(rad))
        y = self.position.y + int(math.sin(rad))
        scale = self.position.scale
        x = min(max(x, 0), self.width * scale - 1)
        y = min(max(y, 0), self.height * scale - 1)
        self.position = Position(x, y, scale)
        self._mark_visited()
        self.path.append(self.position)

    def _candidates(self, tunnels: TunnelMap) -> list[CellCoord]:
        """Unvisited 4-neighbours; tunnels only while carrying food."""
        cx, cy = self.position.cell
        result = []
        for cell in tunnels.neighbours(cx, cy):
            if self.has_visited(cell):
                continue
            if self.carrying_food and not tunnels.is_dug(*cell):
                continue
            result.append(cell)
        return result

    def _desirabilities(
        self,
        candidates: list[CellCoord],
        tunnels: TunnelMap,
        pheromones: PheromoneField,
        config: SimulationConfig,
    ) -> list[tuple[CellCoord, float]]:
        """Score each candidate by link pheromone and digging heuristic."""
        here = self.position.cell
        weighted = []
        for cell in candidates:
            link = link_to_lattice(here, cell)
            if link is None:
                continue
            pheromone = pheromones.read(link)
            heuristic = 1.0 if tunnels.is_dug(*cell) else 1.0 / config.digging_cost
            desirability = (
                pheromone**config.desirability_pheromone
                * heuristic**config.desirability_heuristic
            )
            weighted.append((cell, desirability))
        return weighted

    def _move_and_dig(self, cell: CellCoord, tunnels: TunnelMap) -> None:
        cx, cy = cell
        self.position = Position.from_cell(cx, cy, self.position.scale)
        if tunnels.dig(cx, cy):
            self.soil_carried += 1
        self._mark_visited()
        self.path.append(self.position)

    def _backtrack(self) -> bool:
        """Pop the stack until a position other than the current one.

        Returns:
            False if the stack ran out first.
        """
        while self.path:
            previous = self.path.pop()
            if previous != self.position:
                self.position = previous
                return True
        return False

    def _mark_visited(self) -> None:
        cx, cy = self.position.cell
        if 0 <= cx < self.width and 0 <= cy < self.height:
            self.visited[cy, cx] = True

    # -- Targets --

    def _scan_for_target(
        self,
        food_sources: list[FoodSource],
        pheromones: PheromoneField,
        config: SimulationConfig,
    ) -> int:
        """Pick up food while exploring, or finish a trip at the nest."""
        if not self.returning:
            for food in food_sources:
                if (
                    food.amount > 0
                    and self.position.cell_distance(food.position)
                    <= config.food_detection_range
                ):
                    self._take_food(food, unlimited=config.unlimited_food)
                    break

        if (
            self.returning
            and self.position.fine_distance(self.nest) <= config.nest_detection_range
        ):
            return self._arrive_home(pheromones, config.pheromone_intensity)
        return 0

    def _take_food(self, food: FoodSource, *, unlimited: bool) -> None:
        if not unlimited:
            food.take()
        self.returning = True
        self.carrying_food = True
        self._start_trip()

    def _arrive_home(self, pheromones: PheromoneField, intensity: float) -> int:
        """Reinforce the path if carrying food, then reset at the nest."""
        delivered = 0
        if self.carrying_food:
            links = pheromones.deposit_path([p.cell for p in self.path], intensity)
            delivered = 1
            logger.debug(
                "Ant delivered food at %s, reinforced %d links",
                self.position,
                links,
            )
        self._reset_at_nest()
        return delivered

    def _abandon_trip(self) -> None:
        """Recover from an empty backtrack stack by restarting at the nest."""
        logger.debug(
            "Backtrack stack exhausted at %s (%s), resetting to nest",
            self.position,
            self.state.name,
        )
        self._reset_at_nest()

    def _check_if_full(self) -> None:
        if self.soil_carried >= self.soil_limit and not self.returning:
            self.returning = True

    def _reset_at_nest(self) -> None:
        self.position = self.nest
        self.returning = False
        self.carrying_food = False
        self.soil_carried = 0
        self._start_trip()

    def _start_trip(self) -> None:
        """Forget the current path and visited cells."""
        self.path.clear()
        self.visited.fill(False)
