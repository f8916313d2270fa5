# ------------------------------------------------------------------------------
#  Antix
#  Copyright (c) 2025 Fabio Oddi
#
#  This file is part of Antix, released under the BSD 3-Clause License.
#  You may use, modify, and redistribute this file according to the terms of the
#  license. Attribution is required if this code is used in other works.
# ------------------------------------------------------------------------------

"""
Strategy interfaces used by the simulator.

A robot is assembled from three strategies chosen by name at
construction time: a detection model (what it senses), a controller
(what it decides) and a motion model (how it moves). The core never
subclasses Robot; new behaviour is added by registering a strategy in
`antix.plugin_registry`.
"""

from typing import Any, List, Protocol, Tuple


class Controller(Protocol):
    """
    Decision step of a robot.

    Called exactly once per tick, after sensing and before the pose is
    integrated. Implementations read ``robot.see_robots``,
    ``robot.see_pucks`` and ``robot.holding()``, may write
    ``robot.speed`` and may call ``robot.pickup()`` / ``robot.drop()``.
    """
    def step(self, robot: Any, tick: int) -> None:
        """Decide the robot's action for the current tick."""


class DetectionModel(Protocol):
    """
    Interface for perception components.

    Detection models turn the world state into percept lists for a
    single robot. They must not mutate the world.
    """
    def sense(self, robot: Any, world: Any) -> Tuple[List[Any], List[Any]]:
        """Return ``(see_robots, see_pucks)`` for ``robot``."""


class MotionModel(Protocol):
    """
    Interface for kinematic motion models.

    These models integrate the speed command set by the controller and
    update the robot pose, then hand the position change to the world
    so the cell index stays current.
    """
    def step(self, robot: Any, world: Any, tick: int) -> None:
        """Integrate the motion for ``robot`` over one simulation tick."""
