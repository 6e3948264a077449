"""
Game configuration settings.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

# Custom mode multipliers
STARTING_CASH_MULTIPLIER = 1.5
BASE_EXPENSES_MULTIPLIER = 0.8
PASSIVE_INCOME_MULTIPLIER = 1.2

DICE_SIDES = 6
CHARITY_PERCENT = 10
DOWNSIZE_SKIPS = 2
LOG_LIMIT = 50


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (not banker's rounding)."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


@dataclass
class GameConfig:
    """Configuration for a Cashflow game."""

    custom_mode: bool = False

    seed: Optional[int] = None

    max_players: int = 6
    log_limit: int = LOG_LIMIT

    @classmethod
    def from_settings(cls, settings) -> "GameConfig":
        """Build a game configuration from application settings."""
        return cls(
            custom_mode=settings.custom_mode,
            seed=settings.seed,
            log_limit=settings.log_limit,
        )
