"""
Profession cards and starting-profile assignment.
"""

import logging
import random
from dataclasses import dataclass, field, replace
from typing import List, Optional, Sequence, Tuple

from cashflow.game.config import (
    BASE_EXPENSES_MULTIPLIER,
    PASSIVE_INCOME_MULTIPLIER,
    STARTING_CASH_MULTIPLIER,
    round_half_up,
)
from cashflow.game.finance import recalculate
from cashflow.game.player import Player

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProfessionAssets:
    real_estate: int = 0
    stocks: int = 0
    cash: int = 0


@dataclass(frozen=True)
class ProfessionLiabilities:
    home_mortgage: int = 0
    car_loan: int = 0
    credit_card: int = 0
    student_loan: int = 0


@dataclass(frozen=True)
class Profession:
    """Starting financial template for a player."""

    profession_id: int
    name: str
    career: str
    salary: int
    paycheck: int
    expenses: int
    cash_flow: int
    assets: ProfessionAssets = field(default_factory=ProfessionAssets)
    liabilities: ProfessionLiabilities = field(default_factory=ProfessionLiabilities)
    credit_limit: int = 0

    def __repr__(self) -> str:
        return f"Profession('{self.name}', paycheck={self.paycheck}, expenses={self.expenses})"


PROFESSION_CARDS: Tuple[Profession, ...] = (
    Profession(
        1, "Doctor", "Medical Doctor", 12000, 12000, 4200, 7800,
        ProfessionAssets(real_estate=68000, stocks=35400, cash=1000),
        ProfessionLiabilities(home_mortgage=192000, car_loan=25000, credit_card=2000, student_loan=8000),
        credit_limit=3500,
    ),
    Profession(
        2, "Lawyer", "Attorney", 7500, 7500, 2700, 4800,
        ProfessionAssets(real_estate=40000, stocks=10000, cash=500),
        ProfessionLiabilities(home_mortgage=100000, car_loan=15000, credit_card=1500, student_loan=6000),
        credit_limit=2500,
    ),
    Profession(
        3, "Teacher", "School Teacher", 3500, 3500, 1600, 1900,
        ProfessionAssets(real_estate=15000, stocks=5000, cash=300),
        ProfessionLiabilities(home_mortgage=50000, car_loan=8000, credit_card=500, student_loan=3000),
        credit_limit=1000,
    ),
    Profession(
        4, "Engineer", "Software Engineer", 5500, 5500, 2100, 3400,
        ProfessionAssets(real_estate=25000, stocks=15000, cash=800),
        ProfessionLiabilities(home_mortgage=70000, car_loan=12000, credit_card=1000, student_loan=5000),
        credit_limit=2000,
    ),
    Profession(
        5, "Janitor", "Custodian", 2000, 2000, 900, 1100,
        ProfessionAssets(real_estate=5000, stocks=0, cash=200),
        ProfessionLiabilities(home_mortgage=20000, car_loan=3000, credit_card=200, student_loan=0),
        credit_limit=500,
    ),
    Profession(
        6, "Secretary", "Administrative Assistant", 2500, 2500, 1100, 1400,
        ProfessionAssets(real_estate=8000, stocks=2000, cash=300),
        ProfessionLiabilities(home_mortgage=35000, car_loan=5000, credit_card=300, student_loan=1000),
        credit_limit=800,
    ),
)


def custom_mode_profession(profession: Profession) -> Profession:
    """
    Derive the custom-mode variant of a profession.

    Starting cash is scaled up, base expenses scaled down (both rounded to
    the nearest dollar) and cash flow recomputed from the unchanged paycheck.
    """
    expenses = round_half_up(profession.expenses * BASE_EXPENSES_MULTIPLIER)
    return replace(
        profession,
        assets=replace(profession.assets, cash=round_half_up(profession.assets.cash * STARTING_CASH_MULTIPLIER)),
        expenses=expenses,
        cash_flow=profession.paycheck - expenses,
    )


def boost_passive_income(income: int) -> int:
    """Custom mode multiplier for income of a newly purchased asset."""
    return round_half_up(income * PASSIVE_INCOME_MULTIPLIER)


def apply_profession(player: Player, profession: Profession, auditor_id: Optional[str]) -> Player:
    """Seed a player's finances from a profession template."""
    seeded = replace(
        player,
        profession=profession.name,
        cash=profession.assets.cash,
        rat_race=replace(
            player.rat_race,
            monthly_income=profession.paycheck,
            monthly_expenses=profession.expenses,
            monthly_payday=profession.cash_flow,
            credit_limit=profession.credit_limit,
            auditor_id=auditor_id,
            liabilities=replace(
                player.rat_race.liabilities,
                home_loan=profession.liabilities.home_mortgage,
                car_loan=profession.liabilities.car_loan,
                credit_card_debt=profession.liabilities.credit_card,
            ),
        ),
    )
    return recalculate(seeded)


def assign_professions(
    players: Sequence[Player],
    catalog: Sequence[Profession],
    rng: random.Random,
    custom_mode: bool = False,
) -> Tuple[Player, ...]:
    """
    Give every player without a profession a random starting profile.

    The catalog is shuffled once and dealt in turn order, wrapping around
    when there are more players than professions. Each player is audited by
    their right-hand neighbour.
    """
    if not catalog:
        raise ValueError("Profession catalog is empty")

    shuffled: List[Profession] = list(catalog)
    rng.shuffle(shuffled)

    assigned: List[Player] = []
    for index, player in enumerate(players):
        if player.profession:
            assigned.append(player)
            continue

        profession = shuffled[index % len(shuffled)]
        if custom_mode:
            profession = custom_mode_profession(profession)

        auditor = players[(index + 1) % len(players)]
        assigned.append(apply_profession(player, profession, auditor.player_id))
        logger.debug("Assigned %s to %s", profession.name, player.name)

    return tuple(assigned)
