"""Colony — the nest and the ants that belong to it.

A Colony owns its ants and counts the food they bring home.  It holds
no grids; those belong to the Terrarium and are lent to each ant during
its update.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from numpy.random import Generator

    from formicarium.world.position import Position

from formicarium.colony.ant import Ant


@dataclass
class Colony:
    """Top-level state for the ant colony.

    Attributes:
        nest: Fine-grained nest anchor.
        width: Cell-grid columns (passed on to ants).
        height: Cell-grid rows.
        food_delivered: Units of food brought home so far.
        ants: Ant population, in update order.
    """

    nest: Position
    width: int
    height: int
    food_delivered: int = 0
    ants: list[Ant] = field(default_factory=list)

    def spawn_ant(
        self,
        rng: Generator,
        *,
        jitter: int = 5,
        soil_limit: int = 100,
    ) -> Ant:
        """Create a new ant near the nest.

        Args:
            rng: Seeded random generator.
            jitter: Maximum spawn offset per axis, in fine units.
            soil_limit: Digging capacity of the new ant.

        Returns:
            The newly created Ant (also appended to ``self.ants``).
        """
        ant = Ant.spawn(
            self.nest,
            self.width,
            self.height,
            rng,
            jitter=jitter,
            soil_limit=soil_limit,
        )
        self.ants.append(ant)
        return ant

    def record_delivery(self, units: int) -> None:
        self.food_delivered += units
