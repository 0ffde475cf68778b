"""Config — load simulation parameters from YAML files.

Every tunable constant (grid size, detection ranges, pheromone bounds
and decay rates, desirability exponents) lives in YAML and is parsed
into a typed dataclass here.  Defaults reproduce the reference colony:
a 180x120 cell soil block, 100 ants and three food piles of 50.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class SimulationConfig:
    """Top-level simulation configuration.

    Attributes:
        seed: RNG seed for deterministic replay.
        world_width: Number of cell columns.
        world_height: Number of cell rows.
        cell_scale: Fine units per cell edge.
        ant_count: Ants spawned at the nest.
        spawn_jitter: Max fine-unit offset of an ant's spawn point from
            the nest anchor, per axis.
        nest_x: Fine X of the nest anchor (None = centre of the world).
        nest_y: Fine Y of the nest anchor (None = centre of the world).
        food_sources_count: Food sources placed at start.
        food_amount_per_source: Starting amount of every new food source.
        food_distance: New food sources must be strictly farther than this
            many cells (Manhattan) from the nest.
        food_margin: Initial food sources keep this many cells clear of
            the grid border.
        unlimited_food: If True, foraging never depletes a source.
        nest_detection_range: Fine-unit Manhattan radius in which a
            returning ant counts as home.
        food_detection_range: Cell Manhattan radius in which an exploring
            ant picks up food.
        ant_soil_limit: Cells an ant may dig before heading home.
        pheromone_intensity: Pheromone mass spread over a delivered path.
        evaporation_rate_fast: Decay multiplier for strong links.
        evaporation_rate_slow: Decay multiplier for weak links.
        desirability_pheromone: Exponent on link pheromone.
        desirability_heuristic: Exponent on the dig heuristic.
        min_pheromone: Lattice floor (and initial value); must be positive.
        max_pheromone: Lattice ceiling.
        digging_cost: Undug cells score ``1 / digging_cost`` as heuristic.
        log_level: Root logging level used by the CLI.
    """

    seed: int = 42
    world_width: int = 180
    world_height: int = 120
    cell_scale: int = 5

    # Colony
    ant_count: int = 100
    spawn_jitter: int = 5
    nest_x: int | None = None
    nest_y: int | None = None

    # Food
    food_sources_count: int = 3
    food_amount_per_source: int = 50
    food_distance: int = 10
    food_margin: int = 6
    unlimited_food: bool = False

    # Ant behaviour
    nest_detection_range: int = 25
    food_detection_range: int = 5
    ant_soil_limit: int = 100

    # Pheromones / path selection
    pheromone_intensity: float = 20000.0
    evaporation_rate_fast: float = 0.9
    evaporation_rate_slow: float = 0.99
    desirability_pheromone: float = 7.0
    desirability_heuristic: float = 2.0
    min_pheromone: float = 1.0
    max_pheromone: float = 2000.0
    digging_cost: float = 100.0

    log_level: str = "INFO"

    def __post_init__(self) -> None:
        """Reject parameter combinations the simulation cannot run with.

        Raises:
            ValueError: On any invalid value.
        """
        if self.world_width <= 0 or self.world_height <= 0:
            msg = f"world size must be positive, got {self.world_width}x{self.world_height}"
            raise ValueError(msg)
        if self.cell_scale <= 0:
            msg = f"cell_scale must be positive, got {self.cell_scale}"
            raise ValueError(msg)
        if self.ant_count < 0 or self.food_sources_count < 0:
            msg = "ant_count and food_sources_count must not be negative"
            raise ValueError(msg)
        if self.food_amount_per_source < 0:
            msg = f"food_amount_per_source must not be negative, got {self.food_amount_per_source}"
            raise ValueError(msg)
        if self.ant_soil_limit <= 0:
            msg = f"ant_soil_limit must be positive, got {self.ant_soil_limit}"
            raise ValueError(msg)
        if self.min_pheromone <= 0:
            msg = f"min_pheromone must be positive, got {self.min_pheromone}"
            raise ValueError(msg)
        if not (0 < self.evaporation_rate_fast <= 1 and 0 < self.evaporation_rate_slow <= 1):
            msg = "evaporation rates must lie in (0, 1]"
            raise ValueError(msg)
        if self.min_pheromone >= self.max_pheromone:
            msg = (
                f"min_pheromone ({self.min_pheromone}) must be below "
                f"max_pheromone ({self.max_pheromone})"
            )
            raise ValueError(msg)
        if self.digging_cost <= 0:
            msg = f"digging_cost must be positive, got {self.digging_cost}"
            raise ValueError(msg)
        self.log_level = self.log_level.upper()
        if self.log_level not in _LOG_LEVELS:
            msg = f"unknown log_level {self.log_level!r}"
            raise ValueError(msg)

    @property
    def fine_width(self) -> int:
        """World width in fine units."""
        return self.world_width * self.cell_scale

    @property
    def fine_height(self) -> int:
        """World height in fine units."""
        return self.world_height * self.cell_scale

    @classmethod
    def from_yaml(cls, path: str | Path) -> SimulationConfig:
        """Load configuration from a YAML file.

        Keys missing from the file keep their defaults.  Unknown keys are
        logged and ignored.

        Args:
            path: Path to the YAML config file.

        Returns:
            A populated SimulationConfig instance.

        Raises:
            FileNotFoundError: If the config file does not exist.
            ValueError: If a value is invalid.
        """
        path = Path(path)
        with path.open("r") as f:
            data = yaml.safe_load(f) or {}

        known = {f.name for f in fields(cls)}
        for key in sorted(set(data) - known):
            logger.warning("Ignoring unknown config key %r in %s", key, path)

        return cls(**{k: v for k, v in data.items() if k in known})
