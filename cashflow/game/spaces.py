"""
Board space definitions and types.
"""

from dataclasses import dataclass
from enum import Enum


class SpaceType(Enum):
    """Types of spaces on the board."""

    PAYDAY = "payday"
    OPPORTUNITY = "opportunity"
    MARKET = "market"
    DOODADS = "doodads"
    BABY = "baby"
    DOWNSIZE = "downsize"
    CHARITY = "charity"
    EXIT = "exit"


class Circle(Enum):
    """Which loop of the board a space belongs to."""

    RAT_RACE = "rat_race"
    FAST_TRACK = "fast_track"


@dataclass(frozen=True)
class Space:
    """A single board space. Immutable for the lifetime of a game."""

    space_id: int
    name: str
    space_type: SpaceType
    position: int
    circle: Circle = Circle.RAT_RACE

    def __repr__(self) -> str:
        return f"Space(name='{self.name}', type={self.space_type.value}, position={self.position})"
