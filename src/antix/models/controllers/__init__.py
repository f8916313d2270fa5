# ------------------------------------------------------------------------------
#  Antix
#  Copyright (c) 2025 Fabio Oddi
#
#  This file is part of Antix, released under the BSD 3-Clause License.
#  You may use, modify, and redistribute this file according to the terms of the
#  license. Attribution is required if this code is used in other works.
# ------------------------------------------------------------------------------

"""
Controller package.

Importing this module registers the built-in decision strategies.
"""

from . import forager  # noqa: F401
from . import idle  # noqa: F401
from . import random_walk  # noqa: F401
