import pytest

from antix.arena import World
from antix.config import build_params


@pytest.fixture
def params():
    """Empty 1x1 world, 10x10 cells, sensor range 0.1, robots that never change speed."""
    return build_params({
        "puck_count": 0,
        "home_count": 1,
        "home_population": 0,
        "worldsize": 1.0,
        "range": 0.1,
        "controller": "idle",
        "check_invariants": True,
    })


@pytest.fixture
def world(params):
    w = World(params)
    w.add_home(0.5, 0.5)
    return w


@pytest.fixture
def populated_params():
    return build_params({
        "puck_count": 60,
        "home_count": 2,
        "home_population": 20,
        "updates_max": 200,
        "sleep_msec": 0,
        "check_invariants": True,
    })
