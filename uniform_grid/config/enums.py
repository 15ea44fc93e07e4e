"""
Configuration Enums for uniform grids

Import Policy:
    from uniform_grid.config.enums import RoundingMode

DO NOT use: from uniform_grid.config.enums import *
"""

from enum import Enum


class RoundingMode(Enum):
    """Tie-breaking rule for nearest-node lookups.

    A query point lying exactly halfway between two nodes is assigned to one
    of them according to this rule.

    Options:
        HALF_AWAY_FROM_ZERO: 2.5 -> 3, 3.5 -> 4 (default; in grid space this
            always picks the upper node)
        HALF_EVEN: 2.5 -> 2, 3.5 -> 4 (Python's built-in round)
    """
    HALF_AWAY_FROM_ZERO = "half_away_from_zero"
    HALF_EVEN = "half_even"
