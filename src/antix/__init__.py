# ------------------------------------------------------------------------------
#  Antix
#  Copyright (c) 2025 Fabio Oddi
#
#  This file is part of Antix, released under the BSD 3-Clause License.
#  You may use, modify, and redistribute this file according to the terms of the
#  license. Attribution is required if this code is used in other works.
# ------------------------------------------------------------------------------

"""Antix: robots gathering pucks on a toroidal world."""

__version__ = "0.1.0"

from antix.config import Config, SimulationParams, build_params  # noqa: F401
from antix.arena import World  # noqa: F401
from antix.entityManager import EntityManager  # noqa: F401
