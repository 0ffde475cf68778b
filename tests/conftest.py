"""Shared fixtures for the formicarium test suite."""

from __future__ import annotations

from collections.abc import Callable

import numpy as np
import pytest
from numpy.random import Generator

from formicarium.colony.ant import Ant
from formicarium.pheromones.fields import PheromoneField
from formicarium.simulation.config import SimulationConfig
from formicarium.world.position import Position
from formicarium.world.tunnels import TunnelMap


@pytest.fixture
def rng() -> Generator:
    """A deterministic random generator for reproducible tests."""
    return np.random.default_rng(seed=12345)


@pytest.fixture
def small_tunnels() -> TunnelMap:
    """An 8x8 tunnel map for fast tests."""
    return TunnelMap(width=8, height=8)


@pytest.fixture
def small_field() -> PheromoneField:
    """An 8x8 pheromone field with default bounds."""
    return PheromoneField(width=8, height=8)


@pytest.fixture
def default_config() -> SimulationConfig:
    """Default simulation config (no YAML file needed)."""
    return SimulationConfig()


@pytest.fixture
def small_config() -> SimulationConfig:
    """An 8x8 world with no ants or food placed automatically."""
    return SimulationConfig(
        world_width=8,
        world_height=8,
        ant_count=0,
        food_sources_count=0,
    )


@pytest.fixture
def make_ant() -> Callable[..., Ant]:
    """Build an 8x8-world ant standing in a cell, with that cell on its path.

    The nest defaults to cell (7, 7), far from most test positions.
    """

    def _make(
        cx: int,
        cy: int,
        *,
        nest: Position | None = None,
        visited: tuple[tuple[int, int], ...] = (),
        **kwargs: object,
    ) -> Ant:
        here = Position.from_cell(cx, cy)
        ant = Ant(
            position=here,
            nest=nest if nest is not None else Position.from_cell(7, 7),
            width=8,
            height=8,
            **kwargs,
        )
        ant.path.append(here)
        ant.visited[cy, cx] = True
        for vx, vy in visited:
            ant.visited[vy, vx] = True
        return ant

    return _make
