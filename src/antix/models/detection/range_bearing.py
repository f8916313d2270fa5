# ------------------------------------------------------------------------------
#  Antix
#  Copyright (c) 2025 Fabio Oddi
#
#  This file is part of Antix, released under the BSD 3-Clause License.
#  You may use, modify, and redistribute this file according to the terms of the
#  license. Attribution is required if this code is used in other works.
# ------------------------------------------------------------------------------

"""Range/bearing sensor with a limited field of view."""

import logging
import math

from antix.entity import SeePuck, SeeRobot
from antix.geometry_utils.torus import normalize_angle
from antix.logging_utils import get_logger
from antix.plugin_base import DetectionModel
from antix.plugin_registry import register_detection_model

logger = get_logger("detection.range_bearing")


class RangeBearingDetectionModel(DetectionModel):
    """
    Detect robots and free pucks within ``range`` and ``fov``.

    Candidates come from the grid cells that can hold a point within
    range. Each one goes through filters of increasing cost: identity,
    per-axis wrapped distance, squared distance, then bearing.
    """
    def __init__(self, params):
        """Initialize the instance."""
        self.range = float(params.range)
        self.range_sq = self.range * self.range
        self.half_fov = float(params.fov) / 2.0

    def _measure(self, torus, pose, x: float, y: float):
        """Return (range, bearing) of (x, y) seen from ``pose``, or None if not visible."""
        dx = torus.wrap_distance(x - pose.x)
        if abs(dx) > self.range:
            return None
        dy = torus.wrap_distance(y - pose.y)
        if abs(dy) > self.range:
            return None
        dsq = dx * dx + dy * dy
        if dsq > self.range_sq:
            return None
        bearing = normalize_angle(math.atan2(dy, dx) - pose.a)
        if abs(bearing) > self.half_fov:
            return None
        return math.sqrt(dsq), bearing

    def sense(self, robot, world):
        """Return the percept lists for ``robot``."""
        torus = world.torus
        grid = world.grid
        pose = robot.pose
        see_robots = []
        see_pucks = []
        for index in grid.neighbor_cells(pose.x, pose.y, self.range):
            cell = grid[index]
            for other_id in cell.robots:
                if other_id == robot.id:
                    continue
                other = world.robots[other_id]
                hit = self._measure(torus, pose, other.pose.x, other.pose.y)
                if hit is None:
                    continue
                see_robots.append(SeeRobot(
                    home=other.home,
                    pose=other.pose.copy(),
                    speed=other.speed.copy(),
                    range=hit[0],
                    bearing=hit[1],
                    haspuck=other.holding(),
                ))
            for puck_id in cell.pucks:
                puck = world.pucks[puck_id]
                hit = self._measure(torus, pose, puck.x, puck.y)
                if hit is None:
                    continue
                see_pucks.append(SeePuck(puck=puck_id, held=puck.held, range=hit[0], bearing=hit[1]))
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("%s sees %d robots and %d pucks", robot.get_name(), len(see_robots), len(see_pucks))
        return see_robots, see_pucks


register_detection_model("range_bearing", lambda params: RangeBearingDetectionModel(params))
