# ------------------------------------------------------------------------------
#  Antix
#  Copyright (c) 2025 Fabio Oddi
#
#  This file is part of Antix, released under the BSD 3-Clause License.
#  You may use, modify, and redistribute this file according to the terms of the
#  license. Attribution is required if this code is used in other works.
# ------------------------------------------------------------------------------

"""Entities living on the torus: homes, pucks and robots.

The `World` owns every entity in dense lists and hands out integer ids.
Cross references (robot -> home, puck -> holder, robot -> held puck) are
ids into those lists. A robot keeps a non-owning handle on its world so
that `pickup` and `drop` can reach the grid.
"""
import logging, math
from dataclasses import dataclass
from random import Random
from typing import Any, List, Optional, Tuple

from antix.geometry_utils.spatialgrid import PUCKS
from antix.geometry_utils.torus import normalize_angle
from antix.logging_utils import get_logger

logger = get_logger("entity")


class Pose:
    """2D position and heading."""

    __slots__ = ("x", "y", "a")

    def __init__(self, x: float = 0.0, y: float = 0.0, a: float = 0.0):
        """Initialize the instance."""
        self.x = x
        self.y = y
        self.a = a

    @staticmethod
    def random(random_generator: Random, worldsize: float) -> "Pose":
        """Uniform pose over the world, heading in (-pi, pi]."""
        return Pose(
            random_generator.uniform(0.0, worldsize) % worldsize,
            random_generator.uniform(0.0, worldsize) % worldsize,
            normalize_angle(random_generator.uniform(0.0, 2.0 * math.pi)),
        )

    def copy(self) -> "Pose":
        """Return a detached copy."""
        return Pose(self.x, self.y, self.a)

    def as_tuple(self) -> Tuple[float, float, float]:
        """Return (x, y, a)."""
        return (self.x, self.y, self.a)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Pose):
            return NotImplemented
        return self.as_tuple() == other.as_tuple()

    def __repr__(self) -> str:
        """Return the string representation."""
        return f"Pose({self.x:.4f}, {self.y:.4f}, {self.a:.4f})"


class Speed:
    """Forward speed ``v`` and turn speed ``w``, per tick."""

    __slots__ = ("v", "w")

    def __init__(self, v: float = 0.0, w: float = 0.0):
        """Initialize the instance."""
        self.v = v
        self.w = w

    def copy(self) -> "Speed":
        """Return a detached copy."""
        return Speed(self.v, self.w)

    def __repr__(self) -> str:
        """Return the string representation."""
        return f"Speed(v={self.v}, w={self.w})"


@dataclass(frozen=True)
class SeeRobot:
    """Another robot inside the sensor field of view."""
    home: int
    pose: Pose
    speed: Speed
    range: float
    bearing: float
    haspuck: bool


@dataclass(frozen=True)
class SeePuck:
    """A puck inside the sensor field of view."""
    puck: int
    held: bool
    range: float
    bearing: float


class Home:
    """Delivery zone; a target, never an active entity."""

    __slots__ = ("id", "x", "y", "r", "color")

    def __init__(self, _id: int, x: float, y: float, r: float, color: Tuple[float, float, float] = (0.5, 0.5, 0.5)):
        """Initialize the instance."""
        self.id = _id
        self.x = x
        self.y = y
        self.r = r
        self.color = color

    def __repr__(self) -> str:
        """Return the string representation."""
        return f"Home({self.id}, x={self.x:.3f}, y={self.y:.3f}, r={self.r})"


class Puck:
    """
    Collectible item.

    Free: ``held`` is False, ``holder`` is None and the id sits in the
    puck set of cell ``index``. Held: ``held`` is True, ``holder`` is the
    robot id and the puck is in no cell; ``x``/``y``/``index`` keep the
    values from before the pickup until the holder drops it.
    """

    __slots__ = ("id", "x", "y", "held", "holder", "index")

    def __init__(self, _id: int, x: float = 0.0, y: float = 0.0):
        """Initialize the instance."""
        self.id = _id
        self.x = x
        self.y = y
        self.held = False
        self.holder: Optional[int] = None
        self.index = 0

    def __repr__(self) -> str:
        """Return the string representation."""
        state = f"held by {self.holder}" if self.held else f"free in cell {self.index}"
        return f"Puck({self.id}, x={self.x:.3f}, y={self.y:.3f}, {state})"


class Robot:
    """Robot."""

    def __init__(self, _id: int, world: Any, home: int, pose: Pose):
        """Initialize the instance."""
        self.id = _id
        self.world = world
        self.home = home
        self.pose = pose
        self.speed = Speed()
        self.index = 0
        self.puck_held: Optional[int] = None
        self.see_robots: List[SeeRobot] = []
        self.see_pucks: List[SeePuck] = []
        self.controller = None

    def get_name(self) -> str:
        """Return the name used in log records."""
        return f"robot_{self.id}"

    def holding(self) -> bool:
        """Return True if the robot currently holds a puck."""
        return self.puck_held is not None

    def get_home(self) -> Home:
        """Return the home this robot delivers to."""
        return self.world.homes[self.home]

    def home_vector(self) -> Tuple[float, float]:
        """Wrapped displacement from the robot to the centre of its home."""
        home = self.get_home()
        return self.world.torus.wrap_delta(self.pose.x, self.pose.y, home.x, home.y)

    def pickup(self) -> bool:
        """
        Attempt to pick up a puck. Returns True if one was picked up.

        Only free pucks in the robot's current cell are considered. Among
        those within ``pickup_range`` the nearest wins, ties going to the
        lowest puck id.
        """
        if self.puck_held is not None:
            return False
        world = self.world
        torus = world.torus
        limit = world.params.pickup_range ** 2
        best: Optional[Tuple[float, int]] = None
        for puck_id in world.grid[self.index].pucks:
            puck = world.pucks[puck_id]
            assert not puck.held, f"held puck {puck_id} found in free set of cell {self.index}"
            dx, dy = torus.wrap_delta(self.pose.x, self.pose.y, puck.x, puck.y)
            dsq = dx * dx + dy * dy
            if dsq > limit:
                continue
            if best is None or (dsq, puck_id) < best:
                best = (dsq, puck_id)
        if best is None:
            return False
        puck = world.pucks[best[1]]
        world.grid.remove(puck.id, puck.index, PUCKS)
        puck.held = True
        puck.holder = self.id
        self.puck_held = puck.id
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("%s picked up puck %s in cell %s", self.get_name(), puck.id, self.index)
        return True

    def drop(self) -> bool:
        """Attempt to drop the held puck at the current position. Returns True on success."""
        if self.puck_held is None:
            return False
        world = self.world
        puck = world.pucks[self.puck_held]
        assert puck.held and puck.holder == self.id, f"{self.get_name()} holds {puck!r} it does not own"
        puck.held = False
        puck.holder = None
        puck.x = self.pose.x
        puck.y = self.pose.y
        puck.index = world.grid.cell_index(puck.x, puck.y)
        world.grid.insert(puck.id, puck.index, PUCKS)
        self.puck_held = None
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("%s dropped puck %s in cell %s", self.get_name(), puck.id, puck.index)
        return True

    def update_sensors(self) -> None:
        """Rebuild the percept lists from scratch."""
        self.see_robots, self.see_pucks = self.world.detection.sense(self, self.world)

    def control(self, tick: int) -> None:
        """Run the decision step."""
        if self.controller is None:
            raise ValueError(f"No controller configured for {self.get_name()}")
        self.controller.step(self, tick)

    def update_pose(self, tick: int) -> None:
        """Integrate the speed command and re-index the robot."""
        self.world.motion.step(self, self.world, tick)

    def __repr__(self) -> str:
        """Return the string representation."""
        return f"Robot({self.id}, {self.pose!r}, home={self.home}, puck={self.puck_held})"
