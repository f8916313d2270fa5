# ------------------------------------------------------------------------------
#  Antix
#  Copyright (c) 2025 Fabio Oddi
#
#  This file is part of Antix, released under the BSD 3-Clause License.
#  You may use, modify, and redistribute this file according to the terms of the
#  license. Attribution is required if this code is used in other works.
# ------------------------------------------------------------------------------

"""Random step and turn samplers shared by the wandering controllers."""

import hashlib
import math
from random import Random

_PI = math.pi


def exponential_sample(rng: Random, alpha: float) -> float:
    """Exponential variate with mean ``alpha``."""
    return -alpha * math.log1p(-rng.random())


def wrapped_cauchy_turn(rng: Random, c: float) -> float:
    """Turn angle (radians) from a wrapped Cauchy with concentration ``c`` in [0, 1)."""
    spread = (1.0 - c) / (1.0 + c)
    return 2.0 * math.atan(spread * math.tanh(_PI * (rng.random() - 0.5)))


def levy_steps(rng: Random, scale: float, alpha: float) -> int:
    """Number of forward ticks drawn from a Levy-stable law of index ``alpha``."""
    u = _PI * (rng.random() - 0.5)
    if alpha == 1:
        return abs(int(scale * math.tan(u)))
    v = 0.0
    while v == 0.0:
        v = exponential_sample(rng, 1.0)
    if alpha == 2:
        return abs(int(scale * 2.0 * math.sin(u) * math.sqrt(v)))
    t = math.sin(alpha * u) / math.pow(math.cos(u), 1.0 / alpha)
    s = math.pow(math.cos((1.0 - alpha) * u) / v, (1.0 - alpha) / alpha)
    return abs(int(scale * t * s))


def steer_towards(bearing: float, gain: float, max_turn: float) -> float:
    """Proportional turn command towards ``bearing``, clamped to ``max_turn``."""
    return max(-max_turn, min(max_turn, gain * bearing))


def splitmix32(x: int) -> int:
    """SplitMix64 finaliser folded to 32 bits."""
    x = (x + 0x9E3779B97F4A7C15) & 0xFFFFFFFFFFFFFFFF
    x = (x ^ (x >> 30)) * 0xBF58476D1CE4E5B9 & 0xFFFFFFFFFFFFFFFF
    x = (x ^ (x >> 27)) * 0x94D049BB133111EB & 0xFFFFFFFFFFFFFFFF
    x = x ^ (x >> 31)
    return x & 0xFFFFFFFF


def make_robot_seed(global_seed: int, strategy: str, robot_id: int) -> int:
    """Stable per-robot seed so controllers do not share one random stream."""
    base = f"{global_seed}|{strategy}|{robot_id}"
    digest = hashlib.blake2s(hashlib.sha256(base.encode()).digest()).digest()
    return splitmix32(int.from_bytes(digest[:8], "little"))
