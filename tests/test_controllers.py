import math

from antix.entity import Pose
from antix.entityManager import EntityManager
from antix.models.controllers.forager import ForagerController
from antix.models.controllers.random_walk import FORWARD, RandomWalkController
from antix.models.utils import levy_steps, make_robot_seed, steer_towards, wrapped_cauchy_turn


class TestForager:
    def test_collects_a_puck_and_delivers_it_home(self, world):
        world.homes[0].x = 0.55
        world.homes[0].y = 0.55
        robot = world.add_robot(Pose(0.55, 0.25, math.pi / 2), controller="forager")
        puck = world.add_puck(0.55, 0.255)
        manager = EntityManager(world)
        manager.step()
        assert robot.puck_held == puck.id
        for _ in range(200):
            manager.step()
            if robot.controller.deliveries:
                break
        assert robot.controller.deliveries == 1
        assert not puck.held
        assert world.delivered() == 1

    def test_turns_away_from_a_close_robot(self, world):
        robot = world.add_robot(Pose(0.3, 0.3, 0.0), controller="forager")
        world.add_robot(Pose(0.32, 0.305, 0.0))
        robot.update_sensors()
        robot.control(1)
        assert robot.speed.v == 0.0
        assert robot.speed.w < 0.0

    def test_wanders_when_nothing_is_in_view(self, world, params):
        robot = world.add_robot(Pose(0.1, 0.1, 0.0))
        controller = ForagerController(robot, params)
        robot.update_sensors()
        controller.step(robot, 1)
        assert robot.speed.v == params.linear_velocity
        assert abs(robot.speed.w) <= params.angular_velocity


class TestRandomWalk:
    def test_starts_moving_forward(self, world, params):
        robot = world.add_robot(Pose(0.5, 0.5, 0.0))
        controller = RandomWalkController(robot, params)
        controller.step(robot, 1)
        assert controller.motion == FORWARD
        assert robot.speed.v == params.linear_velocity
        assert robot.speed.w == 0.0

    def test_robots_do_not_share_a_random_stream(self, world, params):
        a = RandomWalkController(world.add_robot(Pose(0.1, 0.1, 0.0)), params)
        b = RandomWalkController(world.add_robot(Pose(0.2, 0.2, 0.0)), params)
        assert a.random_generator.random() != b.random_generator.random()


class TestSamplers:
    def test_levy_steps_are_non_negative(self):
        import random
        rng = random.Random(1)
        assert all(levy_steps(rng, 20, 1.75) >= 0 for _ in range(500))

    def test_wrapped_cauchy_turn_is_bounded(self):
        import random
        rng = random.Random(2)
        assert all(abs(wrapped_cauchy_turn(rng, 0.5)) <= math.pi for _ in range(500))

    def test_steer_towards_clamps(self):
        assert steer_towards(2.0, 1.0, 0.2) == 0.2
        assert steer_towards(-2.0, 1.0, 0.2) == -0.2
        assert steer_towards(0.1, 0.5, 0.2) == 0.05

    def test_robot_seed_is_stable(self):
        assert make_robot_seed(0, "forager", 3) == make_robot_seed(0, "forager", 3)
        assert make_robot_seed(0, "forager", 3) != make_robot_seed(0, "forager", 4)
