import numpy as np
import pytest

from antix.arena import World
from antix.entity import Pose
from antix.geometry_utils.spatialgrid import PUCKS


class TestInitialize:
    def test_population_counts(self, populated_params):
        world = World(populated_params)
        world.initialize()
        assert len(world.homes) == 2
        assert len(world.pucks) == 60
        assert len(world.robots) == 20
        assert [r.home for r in world.robots[:4]] == [0, 1, 0, 1]
        world.check_invariants()

    def test_seed_makes_placement_repeatable(self, populated_params):
        a = World(populated_params)
        a.initialize()
        b = World(populated_params)
        b.initialize()
        assert [r.pose for r in a.robots] == [r.pose for r in b.robots]
        assert [(p.x, p.y) for p in a.pucks] == [(p.x, p.y) for p in b.pucks]

    def test_negative_seed_draws_a_fresh_one(self, populated_params):
        world = World(populated_params.with_overrides(random_seed=-1))
        assert world.get_seed() >= 0

    def test_homes_get_distinct_colours(self, populated_params):
        world = World(populated_params)
        world.initialize()
        assert world.homes[0].color != world.homes[1].color


class TestPopulation:
    def test_add_robot_normalizes_the_pose(self, world):
        robot = world.add_robot(Pose(1.25, -0.25, 7.0))
        assert robot.pose.x == pytest.approx(0.25)
        assert robot.pose.y == pytest.approx(0.75)
        assert -np.pi < robot.pose.a <= np.pi
        assert robot.index == world.grid.cell_index(robot.pose.x, robot.pose.y)

    def test_add_robot_rejects_unknown_home(self, world):
        with pytest.raises(ValueError):
            world.add_robot(Pose(0.5, 0.5, 0.0), home=3)

    def test_add_robot_rejects_unknown_controller(self, world):
        with pytest.raises(ValueError):
            world.add_robot(Pose(0.5, 0.5, 0.0), controller="no_such_controller")

    def test_add_puck_registers_it(self, world):
        puck = world.add_puck(0.35, 0.15)
        assert puck.id in world.grid[puck.index].pucks


class TestCheckInvariants:
    def test_detects_a_robot_in_two_cells(self, world):
        robot = world.add_robot(Pose(0.5, 0.5, 0.0))
        world.grid.insert(robot.id, 0)
        with pytest.raises(AssertionError):
            world.check_invariants()

    def test_detects_a_stale_index(self, world):
        robot = world.add_robot(Pose(0.5, 0.5, 0.0))
        robot.pose.x = 0.05
        with pytest.raises(AssertionError):
            world.check_invariants()

    def test_detects_a_held_puck_left_in_a_cell(self, world):
        robot = world.add_robot(Pose(0.5, 0.5, 0.0))
        puck = world.add_puck(0.505, 0.5)
        robot.pickup()
        world.grid.insert(puck.id, puck.index, PUCKS)
        with pytest.raises(AssertionError):
            world.check_invariants()


class TestViews:
    def test_snapshot_shapes(self, populated_params):
        world = World(populated_params)
        world.initialize()
        snap = world.snapshot()
        assert snap["robot_poses"].shape == (20, 3)
        assert snap["puck_positions"].shape == (60, 2)
        assert snap["home_colors"].shape == (2, 3)
        assert snap["robot_holding"].dtype == bool
        assert not snap["puck_held"].any()

    def test_snapshot_of_an_empty_world(self, params):
        snap = World(params).snapshot()
        assert snap["robot_poses"].shape == (0, 3)
        assert snap["home_positions"].shape == (0, 2)

    def test_density(self, world):
        world.add_robot(Pose(0.05, 0.05, 0.0))
        world.add_robot(Pose(0.06, 0.07, 0.0))
        world.add_puck(0.95, 0.05)
        robots = world.density()
        assert robots.shape == (10, 10)
        assert robots[0, 0] == 2
        assert world.density(PUCKS)[0, 9] == 1

    def test_delivered_counts_free_pucks_at_home(self, world):
        world.add_puck(0.52, 0.5)
        world.add_puck(0.9, 0.9)
        assert world.delivered() == 1
