"""
Growth-related Enumerations
============================

This module contains all enums related to plant growth.
"""

from enum import IntEnum


class GrowthStage(IntEnum):
    """Ordinal growth stages for plants (stored as 0..4)."""

    SEED = 0
    SPROUT = 1
    YOUNG = 2
    MATURE = 3
    FLOWERING = 4

    def __str__(self):
        return self.name.capitalize()
