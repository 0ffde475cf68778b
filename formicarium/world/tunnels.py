"""TunnelMap — which cells of the soil have been dug out.

The map is a boolean NumPy grid indexed ``[y, x]``.  Cells only ever
go from undug to dug; nothing fills a tunnel back in.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray

from formicarium.world.position import CellCoord

# Left, right, up, down.  Neighbour order feeds the roulette wheel, so it
# must stay fixed for runs to be reproducible.
_OFFSETS: tuple[CellCoord, ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))


@dataclass
class TunnelMap:
    """A width x height grid of dug/undug cells.

    Attributes:
        width: Number of columns.
        height: Number of rows.
        grid: Boolean array, True where a tunnel exists.
    """

    width: int
    height: int
    grid: NDArray[np.bool_] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Start with solid soil everywhere."""
        self.grid = np.zeros((self.height, self.width), dtype=np.bool_)

    def in_bounds(self, cx: int, cy: int) -> bool:
        return 0 <= cx < self.width and 0 <= cy < self.height

    def is_dug(self, cx: int, cy: int) -> bool:
        """Return True if cell ``(cx, cy)`` is a tunnel.

        Raises:
            IndexError: If coordinates are out of bounds.
        """
        if not self.in_bounds(cx, cy):
            msg = f"({cx}, {cy}) out of bounds for {self.width}x{self.height}"
            raise IndexError(msg)
        return bool(self.grid[cy, cx])

    def dig(self, cx: int, cy: int) -> bool:
        """Dig cell ``(cx, cy)``.

        Returns:
            True if the cell was solid and has now been dug, False if it
            was already a tunnel.
        """
        if self.is_dug(cx, cy):
            return False
        self.grid[cy, cx] = True
        return True

    def neighbours(self, cx: int, cy: int) -> list[CellCoord]:
        """Return the in-bounds 4-neighbours of a cell in fixed order."""
        result: list[CellCoord] = []
        for dx, dy in _OFFSETS:
            nx, ny = cx + dx, cy + dy
            if self.in_bounds(nx, ny):
                result.append((nx, ny))
        return result

    def dug_count(self) -> int:
        return int(self.grid.sum())
