# ------------------------------------------------------------------------------
#  Antix
#  Copyright (c) 2025 Fabio Oddi
#
#  This file is part of Antix, released under the BSD 3-Clause License.
#  You may use, modify, and redistribute this file according to the terms of the
#  license. Attribution is required if this code is used in other works.
# ------------------------------------------------------------------------------

"""EntityManager: the discrete-time clock driving every robot."""
from typing import Callable, Optional, Union
from threading import Event

from antix.arena import World
from antix.logging_utils import get_logger

logger = get_logger("entity_manager")

StopSignal = Union[Event, Callable[[], bool], None]


class EntityManager:
    """
    Entity manager.

    Each tick visits the robots in population order. In ``sequential``
    mode every robot senses, decides and moves before the next one is
    visited, so later robots see earlier robots' new poses. In
    ``two_phase`` mode all robots sense first, then each one decides and
    moves, so no controller observes another robot's post-tick state.
    """
    def __init__(self, world: World):
        """Initialize the instance."""
        self.world = world
        self.params = world.params
        self.updates = 0
        self.updates_max = int(self.params.updates_max)
        self.update_mode = self.params.update_mode
        self.check_invariants = bool(self.params.check_invariants)
        logger.info("EntityManager ready: %d robots, mode=%s, updates_max=%s",
                    len(world.robots), self.update_mode, self.updates_max or "unbounded")

    def finished(self) -> bool:
        """True once the configured tick bound has been reached."""
        return self.updates_max > 0 and self.updates >= self.updates_max

    def step(self) -> bool:
        """Advance every robot by one tick. Returns False (and does nothing) once finished."""
        if self.finished():
            return False
        tick = self.updates + 1
        robots = self.world.robots
        if self.update_mode == "two_phase":
            for robot in robots:
                robot.update_sensors()
            for robot in robots:
                robot.control(tick)
                robot.update_pose(tick)
        else:
            for robot in robots:
                robot.update_sensors()
                robot.control(tick)
                robot.update_pose(tick)
        self.updates = tick
        if self.check_invariants:
            self.world.check_invariants()
        return True

    def run(self, stop: StopSignal = None, on_tick: Optional[Callable[[int], None]] = None) -> int:
        """
        Tick until the bound is reached or ``stop`` fires.

        ``stop`` is a `threading.Event` or a predicate checked before each
        tick. ``on_tick`` receives the tick counter after each tick.
        Returns the number of ticks executed by this call.
        """
        if self.updates_max == 0 and stop is None:
            raise ValueError("An unbounded run needs a stop signal")
        is_stopped = stop.is_set if isinstance(stop, Event) else (stop or (lambda: False))
        start = self.updates
        logger.info("Run started at tick %d", start)
        while not is_stopped() and self.step():
            if on_tick is not None:
                on_tick(self.updates)
        logger.info("Run stopped at tick %d", self.updates)
        return self.updates - start
