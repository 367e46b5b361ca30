"""Shared enums used across features.

This module provides a single source of truth for enums used in both
Riot payload models and insight schemas.
"""

from enum import Enum


class RankedQueue(str, Enum):
    """League-V4 queue identifiers for ranked entries."""

    SOLO = "RANKED_SOLO_5x5"
    FLEX = "RANKED_FLEX_SR"


class PlayerRole(str, Enum):
    """Team positions as reported by Match-V5 ``teamPosition``."""

    TOP = "TOP"
    JUNGLE = "JUNGLE"
    MIDDLE = "MIDDLE"
    BOTTOM = "BOTTOM"
    UTILITY = "UTILITY"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def from_position(cls, position: str | None) -> "PlayerRole":
        """Normalize a raw position string, falling back to UNKNOWN."""
        if not position:
            return cls.UNKNOWN
        try:
            return cls(position.upper())
        except ValueError:
            return cls.UNKNOWN

    @property
    def is_lane(self) -> bool:
        """Whether the role farms a lane (TOP, MIDDLE, BOTTOM)."""
        return self in (PlayerRole.TOP, PlayerRole.MIDDLE, PlayerRole.BOTTOM)
