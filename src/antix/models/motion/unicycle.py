# ------------------------------------------------------------------------------
#  Antix
# ------------------------------------------------------------------------------

"""Unicycle kinematic model on the torus."""

import math
from antix.plugin_base import MotionModel
from antix.plugin_registry import register_motion_model


class UnicycleMotionModel(MotionModel):
    """Integrate a standard unicycle model (x, y, heading) over one unit tick."""

    def __init__(self, params):
        self.params = params

    def step(self, robot, world, tick: int) -> None:
        """Move along the pre-tick heading, then turn, then re-index."""
        torus = world.torus
        pose = robot.pose
        old_position = (pose.x, pose.y)
        v = robot.speed.v
        pose.x = torus.distance_normalize(pose.x + v * math.cos(pose.a))
        pose.y = torus.distance_normalize(pose.y + v * math.sin(pose.a))
        pose.a = torus.angle_normalize(pose.a + robot.speed.w)
        world.relocate_robot(robot, old_position)


register_motion_model("unicycle", lambda params: UnicycleMotionModel(params))
