"""
Opportunity, Market and Doodad card system.
"""

import random
from dataclasses import dataclass, replace
from enum import Enum
from typing import Generic, Tuple, TypeVar, Union


class DealType(Enum):
    """Size of an opportunity deal."""

    SMALL_DEAL = "small_deal"
    BIG_DEAL = "big_deal"


class MarketAssetType(Enum):
    """Kind of holding a market card refers to."""

    REAL_ESTATE = "real_estate"
    STOCKS = "stocks"
    BUSINESS = "business"


class DeckType(Enum):
    OPPORTUNITY = "opportunity"
    MARKET = "market"
    DOODAD = "doodad"


@dataclass(frozen=True)
class OpportunityCard:
    """An asset offered for purchase."""

    card_id: int
    name: str
    deal_type: DealType
    down_payment: int
    total_cost: int
    monthly_income: int
    total_value: int
    description: str = ""
    buyable: bool = True

    def __repr__(self) -> str:
        return f"OpportunityCard('{self.name}')"


@dataclass(frozen=True)
class MarketCard:
    """A market event quoting a selling price for a kind of asset."""

    card_id: int
    asset_type: MarketAssetType
    asset_name: str
    selling_price: int
    description: str = ""

    def __repr__(self) -> str:
        return f"MarketCard('{self.asset_name}')"


@dataclass(frozen=True)
class DoodadCard:
    """An unavoidable expense, optionally raising monthly expenses for good."""

    card_id: int
    name: str
    cost: int
    expense_increase: int = 0
    description: str = ""

    def __repr__(self) -> str:
        return f"DoodadCard('{self.name}')"


Card = Union[OpportunityCard, MarketCard, DoodadCard]
C = TypeVar("C", OpportunityCard, MarketCard, DoodadCard)


@dataclass(frozen=True)
class Deck(Generic[C]):
    """
    A finite deck drawn from the end.

    The catalog is the source of truth for content: when the deck runs out
    it is refilled with a fresh shuffle of the whole catalog, so cards are
    redrawable but never repeat before the deck is exhausted.
    """

    catalog: Tuple[C, ...]
    cards: Tuple[C, ...] = ()
    reshuffles: int = 0

    @classmethod
    def fresh(cls, catalog: Tuple[C, ...], rng: random.Random) -> "Deck[C]":
        """Create a deck holding a shuffled copy of the catalog."""
        return cls(catalog=tuple(catalog), cards=_shuffled(catalog, rng))

    def __len__(self) -> int:
        return len(self.cards)

    def draw(self, rng: random.Random) -> Tuple[C, "Deck[C]"]:
        """
        Draw a card from the deck.
        If the deck is empty, reshuffle the full catalog back in first.

        Returns:
            The drawn card and the deck that remains after drawing.
        """
        if not self.catalog:
            raise ValueError("Cannot draw from a deck with an empty catalog")

        deck = self
        if not deck.cards:
            deck = replace(deck, cards=_shuffled(deck.catalog, rng), reshuffles=deck.reshuffles + 1)

        card = deck.cards[-1]
        return card, replace(deck, cards=deck.cards[:-1])


def _shuffled(cards: Tuple[C, ...], rng: random.Random) -> Tuple[C, ...]:
    pool = list(cards)
    rng.shuffle(pool)  # Fisher-Yates
    return tuple(pool)


OPPORTUNITY_CARDS: Tuple[OpportunityCard, ...] = (
    OpportunityCard(
        1,
        "8-Plex Apartment Building",
        DealType.SMALL_DEAL,
        down_payment=5000,
        total_cost=50000,
        monthly_income=500,
        total_value=50000,
        description="8-unit apartment building with good rental income potential.",
    ),
    OpportunityCard(
        2,
        "4-Plex Apartment Building",
        DealType.SMALL_DEAL,
        down_payment=3000,
        total_cost=30000,
        monthly_income=300,
        total_value=30000,
        description="4-unit apartment building in a growing neighborhood.",
    ),
    OpportunityCard(
        3,
        "24-Plex Apartment Building",
        DealType.BIG_DEAL,
        down_payment=20000,
        total_cost=200000,
        monthly_income=2000,
        total_value=200000,
        description="Large apartment complex with excellent cash flow.",
    ),
    OpportunityCard(
        4,
        "100 Shares of MYT4U",
        DealType.SMALL_DEAL,
        down_payment=1000,
        total_cost=5000,
        monthly_income=0,
        total_value=5000,
        description="Stock investment opportunity. Price may fluctuate.",
    ),
    OpportunityCard(
        5,
        "3-Bedroom House",
        DealType.SMALL_DEAL,
        down_payment=2000,
        total_cost=40000,
        monthly_income=400,
        total_value=40000,
        description="Single-family rental property in a stable neighborhood.",
    ),
)

DOODAD_CARDS: Tuple[DoodadCard, ...] = (
    DoodadCard(1, "Car Accident", 2500, 0, "Medical bills from car accident. Pay immediately."),
    DoodadCard(2, "Speeding Ticket", 200, 0, "Pay the fine immediately."),
    DoodadCard(3, "Boat Purchase", 5000, 300, "You bought a boat! Monthly expenses increase by $300."),
    DoodadCard(4, "Vacation", 3000, 0, "Family vacation costs. Pay immediately."),
    DoodadCard(5, "New Car", 8000, 400, "You bought a new car! Monthly expenses increase by $400."),
)

MARKET_CARDS: Tuple[MarketCard, ...] = (
    MarketCard(1, MarketAssetType.REAL_ESTATE, "Apartment Building", 55000, "Apartment building price has increased!"),
    MarketCard(2, MarketAssetType.STOCKS, "MYT4U Stock", 6000, "Stock prices are up!"),
    MarketCard(3, MarketAssetType.REAL_ESTATE, "3-Bedroom House", 45000, "House prices have increased in your area!"),
)


def create_opportunity_deck(rng: random.Random) -> Deck[OpportunityCard]:
    """Create a shuffled opportunity deck."""
    return Deck.fresh(OPPORTUNITY_CARDS, rng)


def create_market_deck(rng: random.Random) -> Deck[MarketCard]:
    """Create a shuffled market deck."""
    return Deck.fresh(MARKET_CARDS, rng)


def create_doodad_deck(rng: random.Random) -> Deck[DoodadCard]:
    """Create a shuffled doodad deck."""
    return Deck.fresh(DOODAD_CARDS, rng)
