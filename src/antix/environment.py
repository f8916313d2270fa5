# ------------------------------------------------------------------------------
#  Antix
#  Copyright (c) 2025 Fabio Oddi
#
#  This file is part of Antix, released under the BSD 3-Clause License.
#  You may use, modify, and redistribute this file according to the terms of the
#  license. Attribution is required if this code is used in other works.
# ------------------------------------------------------------------------------

"""Environment: builds the world and drives the clock, headless or behind the GUI."""
import time
from threading import Event
from typing import Optional

from antix.arena import World
from antix.config import SimulationParams
from antix.entityManager import EntityManager
from antix.logging_utils import get_logger

logger = get_logger("environment")

REPORT_EVERY = 10


class EnvironmentFactory():
    """Environment factory."""
    @staticmethod
    def create_environment(params: SimulationParams, render: bool = False):
        """Create environment."""
        if render:
            return GuiEnvironment(params)
        return HeadlessEnvironment(params)


class RateMeter:
    """Ticks-per-second reporting, every `REPORT_EVERY` updates."""
    def __init__(self, clock=time.perf_counter):
        """Initialize the instance."""
        self._clock = clock
        self.start_seconds = clock()
        self.last_seconds = self.start_seconds

    def report(self, updates: int) -> Optional[tuple]:
        """Log and return (recent rate, mean rate) when ``updates`` is a report tick."""
        if updates % REPORT_EVERY != 0:
            return None
        seconds = self._clock()
        interval = seconds - self.last_seconds
        elapsed = seconds - self.start_seconds
        self.last_seconds = seconds
        recent = REPORT_EVERY / interval if interval > 0 else float("inf")
        mean = updates / elapsed if elapsed > 0 else float("inf")
        logger.info("[%d] %.2f (%.2f)", updates, recent, mean)
        return recent, mean


class Environment():
    """Environment."""
    def __init__(self, params: SimulationParams):
        """Initialize the instance."""
        self.params = params
        self.sleep_seconds = params.sleep_msec / 1000.0

    def build(self) -> EntityManager:
        """Create a freshly populated world and its clock."""
        world = World(self.params)
        world.initialize()
        return EntityManager(world)

    def start(self, stop: Optional[Event] = None):
        """Start the simulation."""
        raise NotImplementedError


class HeadlessEnvironment(Environment):
    """Runs ticks back to back, sleeping ``sleep_msec`` between them."""
    def __init__(self, params: SimulationParams):
        """Initialize the instance."""
        super().__init__(params)
        if params.updates_max == 0:
            raise ValueError("Invalid configuration: infinite run with no GUI (set updates_max)")
        logger.info("Headless environment created successfully")

    def start(self, stop: Optional[Event] = None) -> EntityManager:
        """Run to the tick bound (or until ``stop`` is set) and return the finished clock."""
        manager = self.build()
        meter = RateMeter()

        def pace(updates: int) -> None:
            meter.report(updates)
            if self.sleep_seconds > 0:
                time.sleep(self.sleep_seconds)

        manager.run(stop=stop, on_tick=pace)
        logger.info("Simulation finished after %d updates, %d pucks at home",
                    manager.updates, manager.world.delivered())
        return manager


class GuiEnvironment(Environment):
    """Hands the clock to the Qt viewer, which ticks it from a timer."""
    def __init__(self, params: SimulationParams):
        """Initialize the instance."""
        super().__init__(params)
        logger.info("GUI environment created successfully")

    def start(self, stop: Optional[Event] = None) -> EntityManager:
        """Open the window and block until it is closed."""
        from antix.gui import GuiFactory
        manager = self.build()
        app, gui = GuiFactory.create_gui(self.params, manager, rebuild=self.build)
        gui.show()
        app.exec()
        return gui.manager
