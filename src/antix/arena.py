# ------------------------------------------------------------------------------
#  Antix
#  Copyright (c) 2025 Fabio Oddi
#
#  This file is part of Antix, released under the BSD 3-Clause License.
#  You may use, modify, and redistribute this file according to the terms of the
#  license. Attribution is required if this code is used in other works.
# ------------------------------------------------------------------------------

import math, random
from random import Random
from typing import List, Optional, Union

import numpy as np
from matplotlib.cm import hsv

from antix.config import SimulationParams
from antix.entity import Home, Pose, Puck, Robot
from antix.geometry_utils.spatialgrid import PUCKS, ROBOTS, SpatialGrid
from antix.geometry_utils.torus import Torus
from antix.logging_utils import get_logger
from antix.plugin_base import Controller
from antix.plugin_registry import get_controller, get_detection_model, get_motion_model
import antix.models  # noqa: F401  # ensure built-in models register themselves

logger = get_logger("arena")


class World:
    """
    Toroidal world.

    Owns the parameters, the torus, the cell matrix and the dense lists
    of homes, pucks and robots. Entity ids are list positions.
    """
    def __init__(self, params: SimulationParams):
        """Initialize the instance."""
        self.params = params
        self.torus = Torus(params.worldsize)
        self.grid = SpatialGrid(self.torus, params.matrixwidth)
        self.homes: List[Home] = []
        self.pucks: List[Puck] = []
        self.robots: List[Robot] = []
        self.detection = get_detection_model(params.detection, params)
        self.motion = get_motion_model(params.motion, params)
        self.random_generator = Random()
        self._seed_random = random.SystemRandom()
        self.random_seed = int(params.random_seed)
        self.set_random_seed()

    def set_random_seed(self):
        """Seed the placement generator; a negative seed draws a fresh one."""
        if self.random_seed < 0:
            self.random_seed = self._seed_random.randrange(0, 2**32)
        self.random_generator.seed(self.random_seed)

    def get_seed(self):
        """Return the seed."""
        return self.random_seed

    # ----- Population -----------------------------------------------------------

    def add_home(self, x: float, y: float, r: Optional[float] = None, color=None) -> Home:
        """Create a home at (x, y)."""
        home_id = len(self.homes)
        if color is None:
            color = tuple(float(c) for c in hsv(home_id / max(1, self.params.home_count))[:3])
        home = Home(
            home_id,
            self.torus.distance_normalize(x),
            self.torus.distance_normalize(y),
            self.params.home_radius if r is None else r,
            color,
        )
        self.homes.append(home)
        return home

    def add_puck(self, x: float, y: float) -> Puck:
        """Create a free puck at (x, y) and register it in its cell."""
        puck = Puck(len(self.pucks), self.torus.distance_normalize(x), self.torus.distance_normalize(y))
        puck.index = self.grid.cell_index(puck.x, puck.y)
        self.grid.insert(puck.id, puck.index, PUCKS)
        self.pucks.append(puck)
        return puck

    def add_robot(self, pose: Pose, home: int = 0, controller: Union[str, Controller, None] = None) -> Robot:
        """
        Create a robot at ``pose`` delivering to ``home`` and register it in its cell.

        ``controller`` is a registered strategy name or a ready instance;
        it defaults to the configured strategy.
        """
        if not 0 <= home < len(self.homes):
            raise ValueError(f"Unknown home {home}; world has {len(self.homes)} homes")
        pose = Pose(
            self.torus.distance_normalize(pose.x),
            self.torus.distance_normalize(pose.y),
            self.torus.angle_normalize(pose.a),
        )
        robot = Robot(len(self.robots), self, home, pose)
        if controller is None:
            controller = self.params.controller
        robot.controller = get_controller(controller, robot, self.params) if isinstance(controller, str) else controller
        robot.index = self.grid.cell_index(pose.x, pose.y)
        self.grid.insert(robot.id, robot.index, ROBOTS)
        self.robots.append(robot)
        return robot

    def initialize(self):
        """Create homes, pucks and robots at random positions."""
        rng = self.random_generator
        ws = self.params.worldsize
        for _ in range(self.params.home_count):
            self.add_home(rng.uniform(0.0, ws), rng.uniform(0.0, ws))
        for _ in range(self.params.puck_count):
            self.add_puck(rng.uniform(0.0, ws), rng.uniform(0.0, ws))
        for n in range(self.params.population):
            self.add_robot(Pose.random(rng, ws), home=n % len(self.homes))
        logger.info(
            "World created: worldsize=%.2f matrix=%dx%d homes=%d pucks=%d robots=%d seed=%s",
            ws, self.grid.matrixwidth, self.grid.matrixwidth,
            len(self.homes), len(self.pucks), len(self.robots), self.random_seed,
        )

    # ----- Grid bookkeeping ---------------------------------------------------

    def relocate_robot(self, robot: Robot, old_position: tuple) -> None:
        """Single entry point for robot position changes; keeps ``robot.index`` current."""
        assert robot.index == self.grid.cell_index(*old_position), (
            f"{robot.get_name()} index {robot.index} does not match its previous position"
        )
        robot.index = self.grid.relocate(robot.id, old_position, (robot.pose.x, robot.pose.y), ROBOTS)

    def check_invariants(self) -> None:
        """Assert every structural invariant of the world; raises AssertionError on the first violation."""
        ws = self.params.worldsize
        robot_cells = {}
        puck_cells = {}
        for index, cell in enumerate(self.grid.matrix):
            for robot_id in cell.robots:
                assert robot_id not in robot_cells, f"robot {robot_id} in cells {robot_cells[robot_id]} and {index}"
                robot_cells[robot_id] = index
            for puck_id in cell.pucks:
                assert puck_id not in puck_cells, f"puck {puck_id} in cells {puck_cells[puck_id]} and {index}"
                puck_cells[puck_id] = index
        assert len(robot_cells) == len(self.robots), "robot count in grid differs from population"
        for robot in self.robots:
            pose = robot.pose
            assert 0.0 <= pose.x < ws and 0.0 <= pose.y < ws, f"{robot!r} outside the world"
            assert -math.pi < pose.a <= math.pi, f"{robot!r} heading not normalized"
            expected = self.grid.cell_index(pose.x, pose.y)
            assert robot.index == expected, f"{robot!r} stores cell {robot.index}, pose gives {expected}"
            assert robot_cells.get(robot.id) == expected, f"{robot!r} registered in cell {robot_cells.get(robot.id)}"
            if robot.puck_held is not None:
                puck = self.pucks[robot.puck_held]
                assert puck.held and puck.holder == robot.id, f"{robot!r} holds {puck!r}"
        for puck in self.pucks:
            if puck.held:
                assert puck.id not in puck_cells, f"held {puck!r} found in cell {puck_cells.get(puck.id)}"
                assert puck.holder is not None and self.robots[puck.holder].puck_held == puck.id, (
                    f"{puck!r} holder does not reference it"
                )
            else:
                assert puck.holder is None, f"free {puck!r} has a holder"
                assert 0.0 <= puck.x < ws and 0.0 <= puck.y < ws, f"{puck!r} outside the world"
                expected = self.grid.cell_index(puck.x, puck.y)
                assert puck.index == expected and puck_cells.get(puck.id) == expected, (
                    f"{puck!r} registered in cell {puck_cells.get(puck.id)}, position gives {expected}"
                )

    # ----- Read-only views ----------------------------------------------------

    def snapshot(self) -> dict:
        """Copy of the current state as numpy arrays, for presentation code."""
        robots = self.robots
        return {
            "robot_poses": np.array([r.pose.as_tuple() for r in robots], dtype=float).reshape(-1, 3),
            "robot_holding": np.array([r.holding() for r in robots], dtype=bool),
            "robot_homes": np.array([r.home for r in robots], dtype=int),
            "puck_positions": np.array([(p.x, p.y) for p in self.pucks], dtype=float).reshape(-1, 2),
            "puck_held": np.array([p.held for p in self.pucks], dtype=bool),
            "home_positions": np.array([(h.x, h.y) for h in self.homes], dtype=float).reshape(-1, 2),
            "home_radii": np.array([h.r for h in self.homes], dtype=float),
            "home_colors": np.array([h.color for h in self.homes], dtype=float).reshape(-1, 3),
        }

    def density(self, layer: str = ROBOTS) -> np.ndarray:
        """Per-cell counts as a ``matrixwidth x matrixwidth`` array (row = y cell)."""
        mw = self.grid.matrixwidth
        return np.array(self.grid.occupancy(layer), dtype=int).reshape(mw, mw)

    def delivered(self) -> int:
        """Number of free pucks lying inside any home."""
        count = 0
        for puck in self.pucks:
            if puck.held:
                continue
            for home in self.homes:
                dx, dy = self.torus.wrap_delta(home.x, home.y, puck.x, puck.y)
                if dx * dx + dy * dy <= home.r * home.r:
                    count += 1
                    break
        return count
