"""Position — a point in fine (sub-cell) coordinates.

Ants and food sources live on a fine-grained coordinate plane.  The
tunnel map and pheromone lattice are indexed by *cells*, obtained by
integer-dividing fine coordinates by the cell scale.
"""

from __future__ import annotations

from dataclasses import dataclass, field

DEFAULT_CELL_SCALE = 5

CellCoord = tuple[int, int]


@dataclass(frozen=True)
class Position:
    """A fine-grained position.

    Equality and hashing use ``(x, y)`` only, so two positions inside the
    same cell at different sub-cell offsets are distinct keys.

    Attributes:
        x: Fine column coordinate.
        y: Fine row coordinate.
        scale: Fine units per cell edge.
    """

    x: int
    y: int
    scale: int = field(default=DEFAULT_CELL_SCALE, compare=False, repr=False)

    @classmethod
    def from_cell(cls, cx: int, cy: int, scale: int = DEFAULT_CELL_SCALE) -> Position:
        """Return the position at the top-left corner of cell ``(cx, cy)``."""
        return cls(cx * scale, cy * scale, scale)

    @property
    def cell_x(self) -> int:
        return self.x // self.scale

    @property
    def cell_y(self) -> int:
        return self.y // self.scale

    @property
    def cell(self) -> CellCoord:
        """Cell coordinate containing this position."""
        return (self.cell_x, self.cell_y)

    def cell_distance(self, other: Position) -> int:
        """Manhattan distance between the cells of two positions."""
        return abs(self.cell_x - other.cell_x) + abs(self.cell_y - other.cell_y)

    def fine_distance(self, other: Position) -> int:
        """Manhattan distance in fine units."""
        return abs(self.x - other.x) + abs(self.y - other.y)
