# ------------------------------------------------------------------------------
#  Antix
#  Copyright (c) 2025 Fabio Oddi
#
#  This file is part of Antix, released under the BSD 3-Clause License.
#  You may use, modify, and redistribute this file according to the terms of the
#  license. Attribution is required if this code is used in other works.
# ------------------------------------------------------------------------------

"""Puck-gathering controller: find a puck, carry it home, drop it, repeat."""

import math
from random import Random

from antix.geometry_utils.torus import normalize_angle
from antix.logging_utils import get_logger
from antix.models.utils import make_robot_seed, steer_towards
from antix.plugin_base import Controller
from antix.plugin_registry import register_controller

logger = get_logger("controllers.forager")


class ForagerController(Controller):
    """
    Forager.

    Priorities, highest first:
      1. a robot close ahead: stop and turn away from it;
      2. holding a puck: steer home and drop it inside the home radius;
      3. a free puck in view (and not standing at home): steer to the
         nearest one and pick it up once within pickup range;
      4. otherwise wander with a small random turn.
    """

    def __init__(self, robot, params, turn_gain: float = 0.5):
        """Initialize the instance."""
        self.random_generator = Random(make_robot_seed(robot.world.get_seed(), "forager", robot.id))
        self.cruise = params.linear_velocity
        self.max_turn = params.angular_velocity
        self.pickup_range = params.pickup_range
        self.avoid_range = 4.0 * params.radius
        self.turn_gain = turn_gain
        self.deliveries = 0

    def step(self, robot, tick: int) -> None:
        """Decide the speed command and pickup/drop for this tick."""
        speed = robot.speed
        if self._avoid(robot):
            return
        home = robot.get_home()
        hx, hy = robot.home_vector()
        home_dist = math.hypot(hx, hy)
        if robot.holding():
            if home_dist < home.r and robot.drop():
                self.deliveries += 1
                logger.debug("%s delivered a puck home (total %d)", robot.get_name(), self.deliveries)
                speed.v = self.cruise
                speed.w = self.max_turn
                return
            bearing = normalize_angle(math.atan2(hy, hx) - robot.pose.a)
            speed.v = self.cruise
            speed.w = steer_towards(bearing, self.turn_gain, self.max_turn)
            return
        free = [p for p in robot.see_pucks if not p.held]
        if free and home_dist >= home.r:
            target = min(free, key=lambda p: (p.range, p.puck))
            if target.range <= self.pickup_range and robot.pickup():
                return
            speed.v = min(self.cruise, target.range)
            speed.w = steer_towards(target.bearing, self.turn_gain, self.max_turn)
            return
        speed.v = self.cruise
        speed.w = self.random_generator.uniform(-0.25, 0.25) * self.max_turn

    def _avoid(self, robot) -> bool:
        """Stop and turn away from the closest robot in the avoid range."""
        close = [r for r in robot.see_robots if r.range < self.avoid_range]
        if not close:
            return False
        nearest = min(close, key=lambda r: r.range)
        robot.speed.v = 0.0
        robot.speed.w = -self.max_turn if nearest.bearing > 0 else self.max_turn
        return True


register_controller("forager", lambda robot, params: ForagerController(robot, params))
