# ------------------------------------------------------------------------------
#  Antix
#  Copyright (c) 2025 Fabio Oddi
#
#  This file is part of Antix, released under the BSD 3-Clause License.
#  You may use, modify, and redistribute this file according to the terms of the
#  license. Attribution is required if this code is used in other works.
# ------------------------------------------------------------------------------

"""Wrap-around geometry on a square torus."""

import math

_PI = math.pi
_TWO_PI = 2.0 * math.pi


def rtod(r: float) -> float:
    """Convert radians to degrees."""
    return r * 180.0 / _PI


def dtor(d: float) -> float:
    """Convert degrees to radians."""
    return d * _PI / 180.0


def normalize_angle(angle: float) -> float:
    """Normalize an angle (radians) into (-pi, pi]."""
    a = math.fmod(angle + _PI, _TWO_PI)
    if a < 0:
        a += _TWO_PI
    a -= _PI
    # fmod leaves -pi for odd multiples of pi; the interval is closed at +pi
    if a <= -_PI:
        a = _PI
    return a


class Torus:
    """Square torus of side ``worldsize``."""

    __slots__ = ("worldsize", "half_world")

    def __init__(self, worldsize: float):
        """Initialize the instance."""
        if worldsize <= 0:
            raise ValueError(f"worldsize must be positive, got {worldsize}")
        self.worldsize = float(worldsize)
        self.half_world = self.worldsize * 0.5

    def distance_normalize(self, d: float) -> float:
        """Wrap a coordinate into [0, worldsize)."""
        ws = self.worldsize
        d = math.fmod(d, ws)
        if d < 0:
            d += ws
        # -1e-18 + 1.0 rounds back to 1.0
        if d >= ws:
            d -= ws
        return d

    @staticmethod
    def angle_normalize(a: float) -> float:
        """Wrap an angle into (-pi, pi]."""
        return normalize_angle(a)

    def wrap_distance(self, d: float) -> float:
        """Return the shortest signed displacement equivalent to ``d``."""
        ws = self.worldsize
        if d > ws or d < -ws:
            d = math.fmod(d, ws)
        if d > self.half_world:
            d -= ws
        elif d < -self.half_world:
            d += ws
        return d

    def wrap_delta(self, x0: float, y0: float, x1: float, y1: float) -> tuple[float, float]:
        """Wrapped (dx, dy) pointing from (x0, y0) towards (x1, y1)."""
        return self.wrap_distance(x1 - x0), self.wrap_distance(y1 - y0)

    def __repr__(self) -> str:
        """Return the string representation."""
        return f"Torus({self.worldsize})"
