"""
Player state and management.

Every record here is frozen: engine actions build new values with
``dataclasses.replace`` instead of mutating a published snapshot.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional, Tuple


class PlayerStatus(Enum):
    """Lifecycle of a participant."""

    ACTIVE = "active"
    ELIMINATED = "eliminated"
    WON = "won"


class TurnPhase(Enum):
    """Where the player stands within their own turn."""

    NOT_ROLLED = "not_rolled"
    ROLLED = "rolled"
    SKIPPING = "skipping"


@dataclass(frozen=True)
class RealEstateAsset:
    asset_id: str
    name: str
    down_payment: int
    total_cost: int
    monthly_income: int
    current_value: int


@dataclass(frozen=True)
class StockAsset:
    asset_id: str
    symbol: str
    shares: int
    purchase_price: int
    current_value: int
    monthly_income: int = 0


@dataclass(frozen=True)
class BusinessAsset:
    asset_id: str
    name: str
    cost: int
    monthly_income: int


@dataclass(frozen=True)
class BankLoan:
    """A loan from the bank; its payment accrues to total expenses."""

    loan_id: str
    amount: int
    monthly_payment: int
    created_at: float = 0.0


@dataclass(frozen=True)
class Assets:
    real_estate: Tuple[RealEstateAsset, ...] = ()
    stocks: Tuple[StockAsset, ...] = ()
    businesses: Tuple[BusinessAsset, ...] = ()


@dataclass(frozen=True)
class Liabilities:
    home_loan: int = 0
    car_loan: int = 0
    credit_card_debt: int = 0
    bank_loans: Tuple[BankLoan, ...] = ()


@dataclass(frozen=True)
class RatRaceFinancials:
    """Income statement and balance sheet used while in the Rat Race."""

    monthly_income: int = 0
    monthly_expenses: int = 0
    monthly_payday: int = 0
    passive_income: int = 0
    total_expenses: int = 0
    children: int = 0
    credit_limit: int = 0
    auditor_id: Optional[str] = None
    assets: Assets = field(default_factory=Assets)
    liabilities: Liabilities = field(default_factory=Liabilities)


@dataclass(frozen=True)
class FastTrackFinancials:
    """Fast Track figures. Seeded on entry, otherwise not driven by the engine."""

    buyout: int = 0
    income_goal: int = 0
    current_income: int = 0
    dream_price: int = 0


@dataclass(frozen=True)
class Player:
    """Represents the complete state of a player in the game."""

    player_id: str
    name: str
    color: str
    profession: Optional[str] = None
    position: int = 0
    on_fast_track: bool = False
    rat_race: RatRaceFinancials = field(default_factory=RatRaceFinancials)
    fast_track: FastTrackFinancials = field(default_factory=FastTrackFinancials)
    cash: int = 0
    net_worth: int = 0
    status: PlayerStatus = PlayerStatus.ACTIVE
    has_charity_bonus: bool = False
    rolled_dice: Tuple[int, ...] = ()
    passes_this_turn: int = 0

    @property
    def turn_phase(self) -> TurnPhase:
        if self.rolled_dice:
            return TurnPhase.ROLLED
        if self.passes_this_turn > 0:
            return TurnPhase.SKIPPING
        return TurnPhase.NOT_ROLLED

    @property
    def is_active(self) -> bool:
        return self.status == PlayerStatus.ACTIVE

    def with_rat_race(self, **changes) -> "Player":
        """Copy of this player with fields of the Rat Race block replaced."""
        return replace(self, rat_race=replace(self.rat_race, **changes))

    def __repr__(self) -> str:
        return (
            f"Player(id={self.player_id!r}, name='{self.name}', "
            f"cash={self.cash}, position={self.position}, fast_track={self.on_fast_track})"
        )
