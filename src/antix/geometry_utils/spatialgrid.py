# ------------------------------------------------------------------------------
#  Antix
#  Copyright (c) 2025 Fabio Oddi
#
#  This file is part of Antix, released under the BSD 3-Clause License.
#  You may use, modify, and redistribute this file according to the terms of the
#  license. Attribution is required if this code is used in other works.
# ------------------------------------------------------------------------------

"""
Uniform cell matrix over the torus.

Cells are numbered row-major: ``index = cx + matrixwidth * cy``. Each cell
keeps the ids of the robots standing in it and the ids of the free pucks
lying in it. Held pucks are in no cell.
"""

import logging
import math
from typing import List

from antix.geometry_utils.torus import Torus
from antix.logging_utils import get_logger

logger = get_logger("spatialgrid")

ROBOTS = "robots"
PUCKS = "pucks"
# cell-edge tolerance when sizing a neighbour block
BOUNDARY_SLACK = 1e-9


class MatrixCell:
    """Membership of one square cell."""

    __slots__ = ("robots", "pucks")

    def __init__(self):
        """Initialize the instance."""
        self.robots: set[int] = set()
        self.pucks: set[int] = set()

    def layer(self, name: str) -> set:
        """Return the id set for ``name`` (robots or pucks)."""
        if name == ROBOTS:
            return self.robots
        if name == PUCKS:
            return self.pucks
        raise ValueError(f"Unknown grid layer '{name}'")

    def __repr__(self) -> str:
        """Return the string representation."""
        return f"MatrixCell(robots={sorted(self.robots)}, pucks={sorted(self.pucks)})"


class SpatialGrid:
    """Spatial grid."""

    def __init__(self, torus: Torus, matrixwidth: int):
        """Initialize the instance."""
        if matrixwidth < 1:
            raise ValueError(f"matrixwidth must be >= 1, got {matrixwidth}")
        self.torus = torus
        self.matrixwidth = int(matrixwidth)
        self.cell_size = torus.worldsize / self.matrixwidth
        self.matrix: List[MatrixCell] = [MatrixCell() for _ in range(self.matrixwidth * self.matrixwidth)]

    def __len__(self) -> int:
        return len(self.matrix)

    def __getitem__(self, index: int) -> MatrixCell:
        return self.matrix[index]

    # ----- Index arithmetic ---------------------------------------------------

    def cell(self, x: float) -> int:
        """Column (or row) holding the coordinate ``x``."""
        x = self.torus.distance_normalize(x)
        c = int(math.floor(x / self.cell_size))
        # x just below worldsize can round up to matrixwidth
        return c if c < self.matrixwidth else self.matrixwidth - 1

    def cell_wrap(self, c: int) -> int:
        """Wrap an integer cell coordinate into [0, matrixwidth)."""
        return c % self.matrixwidth

    def cell_index(self, x: float, y: float) -> int:
        """Row-major index of the cell holding (x, y)."""
        return self.cell(x) + self.cell(y) * self.matrixwidth

    def _reach(self, v: float, c: int, radius: float) -> int:
        """Cells between column ``c`` and the farthest column ``v +/- radius`` can round into."""
        v = self.torus.distance_normalize(v)
        low = math.floor((v - radius) / self.cell_size - BOUNDARY_SLACK)
        high = math.floor((v + radius) / self.cell_size + BOUNDARY_SLACK)
        return max(c - low, high - c)

    def neighbor_cells(self, x: float, y: float, radius: float) -> List[int]:
        """
        Cells that may contain a point within ``radius`` of (x, y).

        The block is ``2 * ceil(radius / cell_size) + 1`` cells wide, centred
        on the cell holding (x, y) and wrapped independently on each axis.
        It grows by one cell when (x, y) sits within rounding error of a
        cell edge, so every point the sensor's float arithmetic accepts is
        covered. Each cell appears once even when the block is wider than
        the grid.
        """
        cx = self.cell(x)
        cy = self.cell(y)
        reach = max(int(math.ceil(radius / self.cell_size)),
                    self._reach(x, cx, radius), self._reach(y, cy, radius))
        mw = self.matrixwidth
        if 2 * reach + 1 >= mw:
            xs = range(mw)
            ys = range(mw)
        else:
            xs = [self.cell_wrap(cx + dx) for dx in range(-reach, reach + 1)]
            ys = [self.cell_wrap(cy + dy) for dy in range(-reach, reach + 1)]
        return [ix + iy * mw for iy in ys for ix in xs]

    # ----- Membership -----------------------------------------------------------

    def insert(self, entity_id: int, index: int, layer: str = ROBOTS) -> None:
        """Register ``entity_id`` in cell ``index``."""
        members = self.matrix[index].layer(layer)
        assert entity_id not in members, f"{layer[:-1]} {entity_id} already in cell {index}"
        members.add(entity_id)

    def remove(self, entity_id: int, index: int, layer: str = ROBOTS) -> None:
        """Drop ``entity_id`` from cell ``index``."""
        members = self.matrix[index].layer(layer)
        assert entity_id in members, f"{layer[:-1]} {entity_id} missing from cell {index}"
        members.remove(entity_id)

    def relocate(self, entity_id: int, old_pos: tuple, new_pos: tuple, layer: str = ROBOTS) -> int:
        """
        Move ``entity_id`` from the cell of ``old_pos`` to the cell of ``new_pos``.

        Membership changes only when the two cells differ. Returns the index
        of the cell now holding the entity.
        """
        old_index = self.cell_index(old_pos[0], old_pos[1])
        new_index = self.cell_index(new_pos[0], new_pos[1])
        if old_index != new_index:
            self.remove(entity_id, old_index, layer)
            self.insert(entity_id, new_index, layer)
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug("%s %s moved from cell %s to %s", layer[:-1], entity_id, old_index, new_index)
        return new_index

    def cells_containing(self, entity_id: int, layer: str = ROBOTS) -> List[int]:
        """Linear scan for the cells holding ``entity_id`` (diagnostics only)."""
        return [i for i, cell in enumerate(self.matrix) if entity_id in cell.layer(layer)]

    def occupancy(self, layer: str = ROBOTS) -> List[int]:
        """Number of ids per cell, row-major."""
        return [len(cell.layer(layer)) for cell in self.matrix]
