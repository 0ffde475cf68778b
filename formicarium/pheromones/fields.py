"""PheromoneField — bounded trail intensity on the links between cells.

The lattice is stored as a NumPy 2D array of shape ``(2 * height,
width)`` indexed ``[ly, x]`` (see ``lattice.py`` for the layout).  The
field exposes exactly three mutations: ``deposit``, ``deposit_path`` and
``evaporate_all``.  Every one of them leaves all entries inside
``[minimum, maximum]``.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray

from formicarium.pheromones.evaporation import two_tier_decay
from formicarium.pheromones.lattice import LatticeCoord, path_links
from formicarium.world.position import CellCoord


@dataclass
class PheromoneField:
    """Pheromone lattice for a ``width`` x ``height`` cell grid.

    Attributes:
        width: Cell-grid columns (lattice columns).
        height: Cell-grid rows (the lattice has twice as many).
        minimum: Floor value; also the initial value of every link.
        maximum: Ceiling value.
        fast_rate: Decay multiplier above ``maximum / 2``.
        slow_rate: Decay multiplier between ``minimum`` and ``maximum / 2``.
    """

    width: int
    height: int
    minimum: float = 1.0
    maximum: float = 2000.0
    fast_rate: float = 0.9
    slow_rate: float = 0.99
    _grid: NDArray[np.float64] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Create the lattice with every link at the minimum."""
        if self.minimum >= self.maximum:
            msg = f"pheromone minimum {self.minimum} must be below maximum {self.maximum}"
            raise ValueError(msg)
        self._grid = np.full(
            (2 * self.height, self.width),
            self.minimum,
            dtype=np.float64,
        )

    @property
    def grid(self) -> NDArray[np.float64]:
        """Read-only view of the lattice, indexed ``[ly, x]``."""
        view = self._grid.view()
        view.flags.writeable = False
        return view

    def _check(self, link: LatticeCoord) -> tuple[int, int]:
        x, ly = link
        if not (0 <= x < self.width and 0 <= ly < 2 * self.height):
            msg = f"lattice {link} out of bounds for {self.width}x{2 * self.height}"
            raise IndexError(msg)
        return x, ly

    def read(self, link: LatticeCoord) -> float:
        """Return the intensity on a link.

        Args:
            link: Lattice coordinate ``(x, ly)``.

        Raises:
            IndexError: If the coordinate is outside the lattice.
        """
        x, ly = self._check(link)
        return float(self._grid[ly, x])

    def deposit(self, link: LatticeCoord, amount: float) -> None:
        """Add pheromone to a link, clamping to the bounds.

        Args:
            link: Lattice coordinate ``(x, ly)``.
            amount: Quantity to add.

        Raises:
            IndexError: If the coordinate is outside the lattice.
        """
        x, ly = self._check(link)
        value = self._grid[ly, x] + amount
        self._grid[ly, x] = min(self.maximum, max(self.minimum, value))

    def deposit_path(self, cells: list[CellCoord], total: float) -> int:
        """Spread ``total`` evenly over the links along a cell path.

        Each of the ``n`` valid links receives ``total / n`` before
        clamping, so the pre-clamp mass is exactly ``total``.  Pairs that
        are not neighbours contribute no link.

        Args:
            cells: Cells in path order.
            total: Pheromone mass to spread.

        Returns:
            Number of links that received pheromone.
        """
        links = path_links(cells)
        if not links:
            return 0
        share = total / len(links)
        for link in links:
            self.deposit(link, share)
        return len(links)

    def evaporate_all(self) -> None:
        """Apply one tick of two-tier evaporation to the whole lattice."""
        two_tier_decay(
            self._grid,
            minimum=self.minimum,
            maximum=self.maximum,
            fast_rate=self.fast_rate,
            slow_rate=self.slow_rate,
        )

    def above_minimum(self) -> list[LatticeCoord]:
        """Return lattice coordinates carrying more than the floor value."""
        ly, x = np.nonzero(self._grid > self.minimum)
        return [(int(cx), int(cy)) for cx, cy in zip(x, ly)]
