"""Read-only view of the simulation for renderers.

A Snapshot copies everything a viewer needs, so drawing code can never
mutate simulation state and a snapshot stays valid after further ticks.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

if TYPE_CHECKING:
    from formicarium.colony.ant import AntCategory
    from formicarium.world.position import Position


class RunMode(Enum):
    """Whether ticks advance the simulation."""

    ACTIVE = auto()
    SUSPENDED = auto()


@dataclass(frozen=True)
class AntView:
    position: Position
    category: AntCategory


@dataclass(frozen=True)
class FoodView:
    position: Position
    amount: int


@dataclass(frozen=True)
class Snapshot:
    """Simulation state at the end of a tick.

    Attributes:
        tick: Ticks completed.
        mode: Active or suspended.
        tunnels: Copy of the dig grid, indexed ``[y, x]``.
        pheromones: Copy of the lattice, indexed ``[ly, x]``.  Only values
            above ``min_pheromone`` are worth drawing.
        min_pheromone: Lattice floor.
        max_pheromone: Lattice ceiling.
        ants: Position and draw category of every ant, in update order.
        food_sources: Active food sources.
        nest: Nest anchor.
        food_delivered: Units of food brought home so far.
    """

    tick: int
    mode: RunMode
    tunnels: NDArray[np.bool_]
    pheromones: NDArray[np.float64]
    min_pheromone: float
    max_pheromone: float
    ants: tuple[AntView, ...]
    food_sources: tuple[FoodView, ...]
    nest: Position
    food_delivered: int
