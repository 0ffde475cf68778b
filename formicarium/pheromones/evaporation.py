"""Evaporation kernel for the pheromone lattice.

Operates on the raw NumPy array inside ``PheromoneField``.  Kept apart
from ``fields.py`` so the decay schedule can be tuned or swapped without
touching deposit/read logic.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray


def two_tier_decay(
    grid: NDArray[np.float64],
    *,
    minimum: float,
    maximum: float,
    fast_rate: float,
    slow_rate: float,
) -> None:
    """Decay every lattice entry in-place.

    Strong trails fade quickly and weak ones linger:

    - entries above ``maximum / 2`` are multiplied by ``fast_rate``;
    - entries above ``minimum`` (up to ``maximum / 2``) are multiplied by
      ``slow_rate``;
    - entries at or below ``minimum`` are set to ``minimum``.

    The tiers are chosen from the values *before* decay.  The result is
    clamped to ``[minimum, maximum]`` so a slow decay can never undershoot
    the floor.

    Args:
        grid: Lattice values, modified in-place.
        minimum: Lower bound of every entry.
        maximum: Upper bound of every entry.
        fast_rate: Multiplier for the upper tier.
        slow_rate: Multiplier for the lower tier.
    """
    strong = grid > maximum / 2.0
    weak = (grid > minimum) & ~strong
    grid[strong] *= fast_rate
    grid[weak] *= slow_rate
    np.clip(grid, minimum, maximum, out=grid)
