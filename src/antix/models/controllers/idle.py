# ------------------------------------------------------------------------------
#  Antix
# ------------------------------------------------------------------------------

from antix.plugin_base import Controller
from antix.plugin_registry import register_controller


class IdleController(Controller):
    """Keep whatever speed command the robot already has."""

    def __init__(self, robot, params):
        self.robot = robot

    def step(self, robot, tick: int) -> None:
        return None


register_controller("idle", lambda robot, params: IdleController(robot, params))
