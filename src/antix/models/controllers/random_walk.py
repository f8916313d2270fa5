# ------------------------------------------------------------------------------
#  Antix
#  Copyright (c) 2025 Fabio Oddi
#
#  This file is part of Antix, released under the BSD 3-Clause License.
#  You may use, modify, and redistribute this file according to the terms of the
#  license. Attribution is required if this code is used in other works.
# ------------------------------------------------------------------------------

from random import Random
from antix.logging_utils import get_logger
from antix.plugin_base import Controller
from antix.plugin_registry import register_controller
from antix.models.utils import levy_steps, make_robot_seed, wrapped_cauchy_turn

logger = get_logger("controllers.random_walk")

STOP    = 0
FORWARD = 1
LEFT    = 2
RIGHT   = 3


class RandomWalkController(Controller):
    """Levy walk: forward runs of Levy-distributed length separated by wrapped-Cauchy turns."""
    def __init__(self, robot, params, crw_exponent: float = 0.5, levy_exponent: float = 1.75,
                 standard_motion_steps: int = 20):
        """Initialize the instance."""
        self.random_generator = Random(make_robot_seed(robot.world.get_seed(), "random_walk", robot.id))
        self.linear_velocity = params.linear_velocity
        self.angular_velocity = params.angular_velocity
        self.crw_exponent = crw_exponent
        self.levy_exponent = levy_exponent
        self.standard_motion_steps = standard_motion_steps
        self.motion = STOP
        self.last_motion_tick = 0
        self.forward_ticks = 0
        self.turning_ticks = 0

    def step(self, robot, tick: int) -> None:
        """Execute the simulation step."""
        self._update_motion_state(robot, tick)
        self._apply_motion_state(robot)

    def _update_motion_state(self, robot, tick: int) -> None:
        """Update motion state."""
        if self.motion in (LEFT, RIGHT, STOP):
            if tick > self.last_motion_tick + self.turning_ticks:
                self.last_motion_tick = tick
                self.motion = FORWARD
                self.forward_ticks = levy_steps(self.random_generator, self.standard_motion_steps, self.levy_exponent)
                logger.debug("%s begins forward motion for %s ticks", robot.get_name(), self.forward_ticks)
        elif self.motion == FORWARD:
            if tick > self.last_motion_tick + self.forward_ticks:
                self.last_motion_tick = tick
                self.motion = LEFT if self.random_generator.random() < 0.5 else RIGHT
                angle = abs(wrapped_cauchy_turn(self.random_generator, self.crw_exponent))
                self.turning_ticks = int(angle / self.angular_velocity) if self.angular_velocity > 0 else 0
                logger.debug("%s starts turning %s for %s ticks", robot.get_name(), self.motion, self.turning_ticks)

    def _apply_motion_state(self, robot) -> None:
        """Translate the discrete motion state into a speed command."""
        robot.speed.v = self.linear_velocity if self.motion == FORWARD else 0.0
        if self.motion == LEFT:
            robot.speed.w = self.angular_velocity
        elif self.motion == RIGHT:
            robot.speed.w = -self.angular_velocity
        else:
            robot.speed.w = 0.0


register_controller("random_walk", lambda robot, params: RandomWalkController(robot, params))
