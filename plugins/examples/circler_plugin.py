# ------------------------------------------------------------------------------
#  Antix
# Copyright (c) 2025 Fabio Oddi
#
#  Example plugin showing how to add a decision strategy without touching the
#  simulator. Import this module (e.g. add "plugins.examples.circler_plugin"
#  to the `plugins` list in the config) and set `agents.controller` to
#  `"circler"` to use it.
# ------------------------------------------------------------------------------

from __future__ import annotations

from typing import Any

from antix.logging_utils import get_logger
from antix.plugin_registry import register_controller

logger = get_logger("plugins.circler")


class Circler:
    """
    Drive in circles and grab any puck that ends up within pickup range.

    Robots holding a puck widen their circle so the carried pucks get
    spread around instead of piling up in one spot.
    """

    def __init__(self, robot: Any, params: Any) -> None:
        self.v = params.linear_velocity
        self.w = params.angular_velocity / 4.0
        self.pickup_range = params.pickup_range

    def step(self, robot: Any, tick: int) -> None:
        """Set the speed command; pick up or drop on the way."""
        if robot.holding():
            robot.speed.v = self.v
            robot.speed.w = self.w / 2.0
            if tick % 200 == 0 and robot.drop():
                logger.debug("%s dropped its puck at tick %d", robot.get_name(), tick)
            return
        robot.speed.v = self.v
        robot.speed.w = self.w
        if any(p.range <= self.pickup_range and not p.held for p in robot.see_pucks):
            robot.pickup()


def _create_circler(robot: Any, params: Any) -> Circler:
    """Factory registered in the plugin registry."""
    return Circler(robot, params)


register_controller("circler", _create_circler)
