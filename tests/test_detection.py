import math

import pytest

from antix.arena import World
from antix.config import build_params
from antix.entity import Pose


def sensed(robot):
    robot.update_sensors()
    return robot.see_robots, robot.see_pucks


class TestRobotPercepts:
    def test_robot_ahead_is_seen(self, world):
        a = world.add_robot(Pose(0.5, 0.5, 0.0))
        world.add_robot(Pose(0.55, 0.5, 0.0))
        robots, _ = sensed(a)
        assert len(robots) == 1
        assert robots[0].range == pytest.approx(0.05)
        assert robots[0].bearing == pytest.approx(0.0)

    def test_never_sees_itself(self, world):
        a = world.add_robot(Pose(0.5, 0.5, 0.0))
        robots, _ = sensed(a)
        assert robots == []

    def test_robot_behind_is_outside_field_of_view(self, world):
        a = world.add_robot(Pose(0.5, 0.5, 0.0))
        world.add_robot(Pose(0.45, 0.5, 0.0))
        robots, _ = sensed(a)
        assert robots == []

    def test_robot_beyond_range_is_not_seen(self, world):
        a = world.add_robot(Pose(0.5, 0.5, 0.0))
        world.add_robot(Pose(0.65, 0.5, 0.0))
        robots, _ = sensed(a)
        assert robots == []

    def test_inside_both_axes_but_outside_the_circle(self, world):
        a = world.add_robot(Pose(0.5, 0.5, math.pi / 4))
        world.add_robot(Pose(0.58, 0.58, 0.0))
        robots, _ = sensed(a)
        assert robots == []

    def test_bearing_edge_of_field_of_view(self, world):
        a = world.add_robot(Pose(0.5, 0.5, 0.0))
        world.add_robot(Pose(0.5 + 0.05 * math.cos(0.7), 0.5 + 0.05 * math.sin(0.7), 0.0))
        world.add_robot(Pose(0.5 + 0.05 * math.cos(0.9), 0.5 - 0.05 * math.sin(0.9), 0.0))
        robots, _ = sensed(a)
        assert len(robots) == 1
        assert robots[0].bearing == pytest.approx(0.7)

    def test_seen_across_the_world_edge(self, world):
        a = world.add_robot(Pose(0.98, 0.5, 0.0))
        world.add_robot(Pose(0.02, 0.5, 0.0))
        robots, _ = sensed(a)
        assert len(robots) == 1
        assert robots[0].range == pytest.approx(0.04)
        assert robots[0].bearing == pytest.approx(0.0)

    def test_neighbour_exactly_at_range_across_a_cell_edge(self):
        params = build_params({
            "worldsize": 10.0,
            "range": 1.0,
            "matrixwidth": 10,
            "puck_count": 0,
            "home_population": 0,
            "controller": "idle",
        })
        w = World(params)
        w.add_home(5.0, 5.0)
        a = w.add_robot(Pose(math.nextafter(1.0, 0.0), 5.0, 0.0))
        w.add_robot(Pose(2.0, 5.0, 0.0))
        robots, _ = sensed(a)
        assert len(robots) == 1
        assert robots[0].range == 1.0

    def test_mutual_visibility_with_opposite_headings(self, world):
        a = world.add_robot(Pose(0.5, 0.5, 0.0))
        b = world.add_robot(Pose(0.55, 0.5, math.pi))
        seen_by_a, _ = sensed(a)
        seen_by_b, _ = sensed(b)
        assert len(seen_by_a) == len(seen_by_b) == 1
        assert seen_by_a[0].range == pytest.approx(seen_by_b[0].range)

    def test_percept_describes_the_other_robot(self, world):
        second_home = world.add_home(0.1, 0.1)
        a = world.add_robot(Pose(0.5, 0.5, 0.0))
        b = world.add_robot(Pose(0.55, 0.5, 1.0), home=second_home.id)
        b.speed.v = 0.003
        robots, _ = sensed(a)
        seen = robots[0]
        assert seen.home == second_home.id
        assert seen.pose == b.pose
        assert seen.speed.v == pytest.approx(0.003)
        assert seen.haspuck is False

    def test_percepts_are_rebuilt_each_time(self, world):
        a = world.add_robot(Pose(0.5, 0.5, 0.0))
        b = world.add_robot(Pose(0.55, 0.5, 0.0))
        assert len(sensed(a)[0]) == 1
        b.speed.v = 0.2
        b.update_pose(1)
        assert sensed(a)[0] == []


class TestPuckPercepts:
    def test_free_puck_in_view(self, world):
        a = world.add_robot(Pose(0.5, 0.5, 0.0))
        world.add_puck(0.53, 0.5)
        _, pucks = sensed(a)
        assert len(pucks) == 1
        assert pucks[0].puck == 0
        assert pucks[0].held is False
        assert pucks[0].range == pytest.approx(0.03)

    def test_held_puck_is_not_seen(self, world):
        holder = world.add_robot(Pose(0.62, 0.5, 0.0))
        world.add_puck(0.625, 0.5)
        assert holder.pickup()
        a = world.add_robot(Pose(0.55, 0.5, 0.0))
        _, pucks = sensed(a)
        assert pucks == []

    def test_puck_outside_field_of_view(self, world):
        a = world.add_robot(Pose(0.5, 0.5, math.pi / 2))
        world.add_puck(0.5, 0.45)
        _, pucks = sensed(a)
        assert pucks == []
