"""Food sources and their initial placement."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from numpy.random import Generator

from formicarium.world.position import Position


@dataclass
class FoodSource:
    """A pile of food that ants carry home one unit at a time.

    Attributes:
        position: Fine-grained location of the pile.
        amount: Units left.  A source at zero is pruned on the next tick.
    """

    position: Position
    amount: int

    @property
    def is_depleted(self) -> bool:
        return self.amount <= 0

    def take(self) -> None:
        """Remove one unit, never going below zero."""
        self.amount = max(0, self.amount - 1)


def scatter_food_sources(
    rng: Generator,
    nest: Position,
    *,
    count: int,
    amount: int,
    width: int,
    height: int,
    margin: int,
    min_distance: int,
) -> list[FoodSource]:
    """Place ``count`` food sources at random cells away from the nest.

    Each source is drawn uniformly from the cells at least ``margin`` cells
    from every edge whose Manhattan cell distance from the nest exceeds
    ``min_distance``.  Two sources may share a cell.

    Args:
        rng: Seeded random generator.
        nest: Nest anchor position.
        count: Number of sources to place.
        amount: Starting amount for each source.
        width: Grid columns.
        height: Grid rows.
        margin: Minimum distance in cells from the grid border.
        min_distance: Sources must be strictly farther than this from the nest.

    Returns:
        The new food sources, in placement order.

    Raises:
        ValueError: If the margin leaves no room or no cell in the placement
            area is far enough from the nest.
    """
    lo_x, hi_x = margin, width - margin
    lo_y, hi_y = margin, height - margin
    if count > 0 and (lo_x >= hi_x or lo_y >= hi_y):
        msg = f"food margin {margin} leaves no room in a {width}x{height} grid"
        raise ValueError(msg)

    candidates = [
        (cx, cy)
        for cy in range(lo_y, hi_y)
        for cx in range(lo_x, hi_x)
        if abs(cx - nest.cell_x) + abs(cy - nest.cell_y) > min_distance
    ]
    if count > 0 and not candidates:
        msg = f"no cell is more than {min_distance} cells from the nest"
        raise ValueError(msg)

    sources: list[FoodSource] = []
    for _ in range(count):
        cx, cy = candidates[int(rng.integers(len(candidates)))]
        sources.append(
            FoodSource(Position.from_cell(cx, cy, nest.scale), amount),
        )
    return sources
