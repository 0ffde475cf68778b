"""Tests for formicarium.colony.ant — selection, movement and the state machine."""

import math

import numpy as np
import pytest
from numpy.random import Generator

from formicarium.colony.ant import Ant, AntCategory, AntState, roulette_select
from formicarium.pheromones.fields import PheromoneField
from formicarium.pheromones.lattice import link_to_lattice
from formicarium.simulation.config import SimulationConfig
from formicarium.simulation.random_source import ScriptedUniforms
from formicarium.world.food import FoodSource
from formicarium.world.position import Position
from formicarium.world.tunnels import TunnelMap


def cell(cx: int, cy: int) -> Position:
    return Position.from_cell(cx, cy)


class TestRouletteSelect:
    """Tests for weighted random choice."""

    def test_picks_by_cumulative_share(self) -> None:
        weighted = [("a", 1.0), ("b", 1.0), ("c", 2.0)]
        assert roulette_select(weighted, 0.1) == "a"
        assert roulette_select(weighted, 0.3) == "b"
        assert roulette_select(weighted, 0.6) == "c"

    def test_boundary_goes_to_earlier_item(self) -> None:
        assert roulette_select([("a", 1.0), ("b", 1.0)], 0.5) == "a"

    def test_zero_total_is_no_choice(self) -> None:
        assert roulette_select([("a", 0.0), ("b", 0.0)], 0.5) is None

    def test_empty_is_no_choice(self) -> None:
        assert roulette_select([], 0.5) is None

    def test_sample_just_below_one_picks_last(self) -> None:
        weighted = [(i, 0.1) for i in range(10)]
        assert roulette_select(weighted, math.nextafter(1.0, 0.0)) == 9


class TestAntSpawn:
    """Tests for creating ants at the nest."""

    def test_spawn_near_nest(self, rng: Generator) -> None:
        nest = Position(100, 100)
        for _ in range(20):
            ant = Ant.spawn(nest, 60, 60, rng, jitter=5)
            assert abs(ant.position.x - nest.x) < 5
            assert abs(ant.position.y - nest.y) < 5
            assert 0.0 <= ant.heading < 360.0
            assert ant.state is AntState.EXPLORING
            assert ant.path == []

    def test_spawn_clamped_to_world(self, rng: Generator) -> None:
        nest = Position(0, 0)
        for _ in range(20):
            ant = Ant.spawn(nest, 10, 10, rng, jitter=5)
            assert ant.position.x >= 0
            assert ant.position.y >= 0
            assert ant.position.cell == (0, 0)

    def test_visited_grid_sized_to_world(self, rng: Generator) -> None:
        ant = Ant.spawn(Position(10, 10), 12, 7, rng)
        assert ant.visited.shape == (7, 12)
        assert not ant.visited.any()


class TestBootstrapStep:
    """The first move of a trip follows the heading without grid checks."""

    def test_heading_east(
        self,
        small_tunnels: TunnelMap,
        small_field: PheromoneField,
        small_config: SimulationConfig,
    ) -> None:
        ant = Ant(position=Position(10, 10), nest=cell(7, 7), width=8, height=8)
        uniforms = ScriptedUniforms([0.5])
        delivered = ant.update(small_tunnels, small_field, [], small_config, uniforms)
        assert delivered == 0
        assert ant.position == Position(11, 10)
        assert ant.path == [Position(11, 10)]
        assert ant.has_visited((2, 2))
        assert uniforms.draws == 0
        assert small_tunnels.dug_count() == 0

    def test_typical_heading_stays_in_place(
        self,
        small_tunnels: TunnelMap,
        small_field: PheromoneField,
        small_config: SimulationConfig,
    ) -> None:
        ant = Ant(
            position=Position(12, 13),
            nest=cell(7, 7),
            width=8,
            height=8,
            heading=37.5,
        )
        ant.update(small_tunnels, small_field, [], small_config, ScriptedUniforms([0.5]))
        assert ant.position == Position(12, 13)
        assert len(ant.path) == 1


class TestExploring:
    """Tests for pheromone/heuristic weighted exploration."""

    def test_uniform_neighbours_follow_sample(
        self,
        make_ant,
        small_tunnels: TunnelMap,
        small_field: PheromoneField,
        small_config: SimulationConfig,
    ) -> None:
        # Candidates in order: (1,2), (3,2), (2,1), (2,3); each 25%
        ant = make_ant(2, 2)
        ant.update(
            small_tunnels, small_field, [], small_config, ScriptedUniforms([0.3])
        )
        assert ant.position == cell(3, 2)
        assert small_tunnels.is_dug(3, 2)
        assert ant.soil_carried == 1
        assert ant.path == [cell(2, 2), cell(3, 2)]
        assert ant.has_visited((3, 2))

    def test_last_quarter_picks_last_neighbour(
        self,
        make_ant,
        small_tunnels: TunnelMap,
        small_field: PheromoneField,
        small_config: SimulationConfig,
    ) -> None:
        ant = make_ant(2, 2)
        ant.update(
            small_tunnels, small_field, [], small_config, ScriptedUniforms([0.9])
        )
        assert ant.position == cell(2, 3)

    def test_strong_pheromone_dominates(
        self,
        make_ant,
        small_tunnels: TunnelMap,
        small_field: PheromoneField,
        small_config: SimulationConfig,
    ) -> None:
        small_field.deposit(link_to_lattice((2, 2), (2, 1)), 1000.0)
        ant = make_ant(2, 2)
        ant.update(
            small_tunnels, small_field, [], small_config, ScriptedUniforms([0.001])
        )
        assert ant.position == cell(2, 1)

    def test_existing_tunnel_preferred_and_not_counted(
        self,
        make_ant,
        small_tunnels: TunnelMap,
        small_field: PheromoneField,
        small_config: SimulationConfig,
    ) -> None:
        small_tunnels.dig(1, 2)
        ant = make_ant(2, 2)
        ant.update(
            small_tunnels, small_field, [], small_config, ScriptedUniforms([0.99])
        )
        assert ant.position == cell(1, 2)
        assert ant.soil_carried == 0

    def test_visited_cells_excluded(
        self,
        make_ant,
        small_tunnels: TunnelMap,
        small_field: PheromoneField,
        small_config: SimulationConfig,
    ) -> None:
        ant = make_ant(2, 2, visited=((1, 2), (3, 2), (2, 1)))
        ant.update(
            small_tunnels, small_field, [], small_config, ScriptedUniforms([0.0])
        )
        assert ant.position == cell(2, 3)

    def test_degenerate_weights_hold_position(
        self,
        make_ant,
        small_tunnels: TunnelMap,
        small_field: PheromoneField,
    ) -> None:
        # (1e-200) ** 2 underflows to 0.0, so every undug neighbour scores zero
        config = SimulationConfig(
            world_width=8,
            world_height=8,
            ant_count=0,
            food_sources_count=0,
            digging_cost=1e200,
        )
        ant = make_ant(2, 2)
        ant.update(small_tunnels, small_field, [], config, ScriptedUniforms([0.5]))
        assert ant.position == cell(2, 2)
        assert ant.path == [cell(2, 2)]
        assert small_tunnels.dug_count() == 0


class TestBacktracking:
    """Tests for retracing the backtrack stack."""

    def test_dead_end_backtracks_one_step(
        self,
        make_ant,
        small_tunnels: TunnelMap,
        small_field: PheromoneField,
        small_config: SimulationConfig,
    ) -> None:
        ant = make_ant(2, 2, visited=((1, 2), (3, 2), (2, 1), (2, 3)))
        ant.path.insert(0, cell(2, 1))
        uniforms = ScriptedUniforms([0.5])
        ant.update(small_tunnels, small_field, [], small_config, uniforms)
        assert ant.position == cell(2, 1)
        assert ant.path == []
        assert not ant.returning
        assert uniforms.draws == 0

    def test_exhausted_stack_resets_to_nest(
        self,
        make_ant,
        small_tunnels: TunnelMap,
        small_field: PheromoneField,
        small_config: SimulationConfig,
    ) -> None:
        nest = cell(6, 6)
        ant = make_ant(2, 2, nest=nest, visited=((1, 2), (3, 2), (2, 1), (2, 3)))
        ant.soil_carried = 4
        ant.update(
            small_tunnels, small_field, [], small_config, ScriptedUniforms([0.5])
        )
        assert ant.position == nest
        assert ant.path == []
        assert not ant.visited.any()
        assert ant.soil_carried == 0
        assert ant.state is AntState.EXPLORING

    def test_returning_empty_retraces_until_nest(
        self,
        small_tunnels: TunnelMap,
        small_field: PheromoneField,
        small_config: SimulationConfig,
    ) -> None:
        ant = Ant(
            position=cell(5, 2),
            nest=Position(0, 0),
            width=8,
            height=8,
            soil_limit=3,
            returning=True,
            soil_carried=3,
            path=[cell(1, 1), cell(3, 2), cell(4, 2), cell(5, 2)],
        )
        assert ant.state is AntState.RETURNING_EMPTY
        assert ant.category is AntCategory.SOIL_FULL
        uniforms = ScriptedUniforms([0.5])

        # (20, 10) is 30 fine units from the nest: not home yet
        ant.update(small_tunnels, small_field, [], small_config, uniforms)
        assert ant.position == cell(4, 2)
        assert ant.returning

        # (15, 10) is 25 units away: home
        delivered = ant.update(small_tunnels, small_field, [], small_config, uniforms)
        assert delivered == 0
        assert ant.position == Position(0, 0)
        assert ant.state is AntState.EXPLORING
        assert ant.soil_carried == 0
        assert ant.path == []
        assert uniforms.draws == 0
        assert np.all(small_field.grid == small_field.minimum)

    def test_returning_empty_ignores_food(
        self,
        small_tunnels: TunnelMap,
        small_field: PheromoneField,
        small_config: SimulationConfig,
    ) -> None:
        food = FoodSource(cell(4, 4), amount=5)
        ant = Ant(
            position=cell(4, 5),
            nest=cell(0, 7),
            width=8,
            height=8,
            returning=True,
            path=[cell(4, 3), cell(4, 4), cell(4, 5)],
        )
        ant.update(small_tunnels, small_field, [food], small_config, ScriptedUniforms([0.5]))
        assert food.amount == 5
        assert not ant.carrying_food


class TestForaging:
    """Tests for finding food and bringing it home."""

    def test_reaching_food_starts_return(
        self,
        make_ant,
        small_tunnels: TunnelMap,
        small_field: PheromoneField,
        small_config: SimulationConfig,
    ) -> None:
        food = FoodSource(cell(7, 2), amount=3)
        ant = make_ant(1, 2, visited=((0, 2), (1, 1), (1, 3)))
        ant.update(small_tunnels, small_field, [food], small_config, ScriptedUniforms([0.5]))
        # Moved to (2, 2): five cells from the food
        assert ant.position == cell(2, 2)
        assert food.amount == 2
        assert ant.state is AntState.RETURNING_WITH_FOOD
        assert ant.category is AntCategory.CARRYING_FOOD
        assert ant.path == []
        assert not ant.visited.any()

    def test_food_out_of_range_ignored(
        self,
        make_ant,
        small_tunnels: TunnelMap,
        small_field: PheromoneField,
        small_config: SimulationConfig,
    ) -> None:
        food = FoodSource(cell(7, 3), amount=3)
        ant = make_ant(1, 2, visited=((0, 2), (1, 1), (1, 3)))
        ant.update(small_tunnels, small_field, [food], small_config, ScriptedUniforms([0.5]))
        assert food.amount == 3
        assert ant.state is AntState.EXPLORING

    def test_empty_source_ignored(
        self,
        make_ant,
        small_tunnels: TunnelMap,
        small_field: PheromoneField,
        small_config: SimulationConfig,
    ) -> None:
        food = FoodSource(cell(4, 2), amount=0)
        ant = make_ant(2, 2)
        ant.update(small_tunnels, small_field, [food], small_config, ScriptedUniforms([0.5]))
        assert ant.state is AntState.EXPLORING

    def test_unlimited_food_not_consumed(
        self,
        make_ant,
        small_tunnels: TunnelMap,
        small_field: PheromoneField,
    ) -> None:
        config = SimulationConfig(
            world_width=8,
            world_height=8,
            ant_count=0,
            food_sources_count=0,
            unlimited_food=True,
        )
        food = FoodSource(cell(4, 2), amount=1)
        ant = make_ant(2, 2)
        ant.update(small_tunnels, small_field, [food], config, ScriptedUniforms([0.5]))
        assert ant.carrying_food
        assert food.amount == 1

    def test_carrying_ant_stays_in_tunnels(
        self,
        make_ant,
        small_tunnels: TunnelMap,
        small_field: PheromoneField,
        small_config: SimulationConfig,
    ) -> None:
        small_tunnels.dig(2, 1)
        ant = make_ant(2, 2, returning=True, carrying_food=True)
        ant.update(
            small_tunnels, small_field, [], small_config, ScriptedUniforms([0.99])
        )
        assert ant.position == cell(2, 1)
        assert small_tunnels.dug_count() == 1

    def test_carrying_ant_without_tunnel_backtracks(
        self,
        make_ant,
        small_tunnels: TunnelMap,
        small_field: PheromoneField,
        small_config: SimulationConfig,
    ) -> None:
        ant = make_ant(2, 2, returning=True, carrying_food=True)
        ant.path.insert(0, cell(2, 3))
        ant.update(
            small_tunnels, small_field, [], small_config, ScriptedUniforms([0.5])
        )
        assert ant.position == cell(2, 3)
        assert ant.carrying_food
        assert small_tunnels.dug_count() == 0

    def test_delivery_reinforces_path(
        self,
        small_tunnels: TunnelMap,
        small_field: PheromoneField,
    ) -> None:
        config = SimulationConfig(
            world_width=8,
            world_height=8,
            ant_count=0,
            food_sources_count=0,
            pheromone_intensity=30.0,
        )
        for cx in (1, 2, 3, 4):
            small_tunnels.dig(cx, 1)
        ant = Ant(
            position=cell(2, 1),
            nest=Position(0, 0),
            width=8,
            height=8,
            returning=True,
            carrying_food=True,
            path=[cell(4, 1), cell(3, 1), cell(2, 1)],
        )
        for cx in (2, 3, 4):
            ant.visited[1, cx] = True

        delivered = ant.update(
            small_tunnels, small_field, [], config, ScriptedUniforms([0.5])
        )

        assert delivered == 1
        for a, b in [((4, 1), (3, 1)), ((3, 1), (2, 1)), ((2, 1), (1, 1))]:
            assert small_field.read(link_to_lattice(a, b)) == pytest.approx(11.0)
        added = (small_field.grid - small_field.minimum).sum()
        assert added == pytest.approx(30.0)
        assert ant.position == Position(0, 0)
        assert ant.path == []
        assert ant.state is AntState.EXPLORING
        assert ant.category is AntCategory.NORMAL


class TestDiggingCapacity:
    """The ant turns home in the same tick its soil load fills up."""

    def test_full_load_sets_returning(
        self,
        make_ant,
        small_tunnels: TunnelMap,
        small_field: PheromoneField,
        small_config: SimulationConfig,
    ) -> None:
        ant = make_ant(2, 2, soil_limit=2)
        uniforms = ScriptedUniforms([0.9])

        ant.update(small_tunnels, small_field, [], small_config, uniforms)
        assert ant.soil_carried == 1
        assert not ant.returning

        ant.update(small_tunnels, small_field, [], small_config, uniforms)
        assert ant.soil_carried == 2
        assert ant.returning
        assert ant.state is AntState.RETURNING_EMPTY
        assert ant.category is AntCategory.SOIL_FULL

    def test_walking_tunnels_does_not_fill(
        self,
        make_ant,
        small_tunnels: TunnelMap,
        small_field: PheromoneField,
        small_config: SimulationConfig,
    ) -> None:
        for cy in range(8):
            small_tunnels.dig(2, cy)
        ant = make_ant(2, 2, soil_limit=1, visited=((1, 2), (3, 2)))
        uniforms = ScriptedUniforms([0.9])
        for _ in range(3):
            ant.update(small_tunnels, small_field, [], small_config, uniforms)
        assert ant.soil_carried == 0
        assert not ant.returning


class TestNoRevisit:
    """Within one trip an ant never steps forward onto a visited cell."""

    def test_random_walk(self, rng: Generator) -> None:
        config = SimulationConfig(
            world_width=10,
            world_height=10,
            ant_count=0,
            food_sources_count=0,
            ant_soil_limit=10_000,
        )
        tunnels = TunnelMap(width=10, height=10)
        field = PheromoneField(width=10, height=10)
        ant = Ant.spawn(Position(25, 25), 10, 10, rng, soil_limit=10_000)

        forward_moves = 0
        for _ in range(400):
            before = ant.visited.copy()
            depth = len(ant.path)
            ant.update(tunnels, field, [], config, rng)
            if depth and len(ant.path) == depth + 1:
                cx, cy = ant.position.cell
                assert not before[cy, cx]
                forward_moves += 1
        assert forward_moves > 50
