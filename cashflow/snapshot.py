"""
Snapshot serialization for persistence.

Converts a GameSnapshot to and from the camelCase JSON document used by
saved games. Unknown keys are ignored on load and the deck keys are
optional: a saved game without decks gets freshly shuffled ones.
"""

import random
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from cashflow.game.cards import (
    DOODAD_CARDS,
    MARKET_CARDS,
    OPPORTUNITY_CARDS,
    DealType,
    Deck,
    DoodadCard,
    MarketAssetType,
    MarketCard,
    OpportunityCard,
)
from cashflow.game.player import (
    Assets,
    BankLoan,
    BusinessAsset,
    FastTrackFinancials,
    Liabilities,
    Player,
    PlayerStatus,
    RatRaceFinancials,
    RealEstateAsset,
    StockAsset,
)
from cashflow.game.professions import PROFESSION_CARDS, Profession, ProfessionAssets, ProfessionLiabilities
from cashflow.game.state import GamePhase, GameSnapshot


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class RealEstateAssetModel(WireModel):
    id: str
    name: str
    down_payment: int = 0
    total_cost: int = 0
    monthly_income: int = 0
    current_value: int = 0


class StockAssetModel(WireModel):
    id: str
    symbol: str
    shares: int = 0
    purchase_price: int = 0
    current_value: int = 0
    monthly_income: int = 0


class BusinessAssetModel(WireModel):
    id: str
    name: str
    cost: int = 0
    monthly_income: int = 0


class BankLoanModel(WireModel):
    id: str
    amount: int
    monthly_payment: int
    date_created: float = 0


class AssetsModel(WireModel):
    real_estate: List[RealEstateAssetModel] = Field(default_factory=list)
    stocks: List[StockAssetModel] = Field(default_factory=list)
    businesses: List[BusinessAssetModel] = Field(default_factory=list)
    cash: int = 0


class LiabilitiesModel(WireModel):
    home_loan: int = 0
    car_loan: int = 0
    credit_card_debt: int = 0
    bank_loans: List[BankLoanModel] = Field(default_factory=list)


class RatRaceModel(WireModel):
    monthly_income: int = 0
    monthly_expenses: int = 0
    monthly_payday: int = 0
    passive_income: int = 0
    total_expenses: int = 0
    children: int = 0
    credit_limit: int = 0
    auditor_id: Optional[str] = None
    assets: AssetsModel = Field(default_factory=AssetsModel)
    liabilities: LiabilitiesModel = Field(default_factory=LiabilitiesModel)


class FastTrackModel(WireModel):
    buyout: int = 0
    income_goal: int = 0
    current_income: int = 0
    dream_price: int = 0


class PlayerModel(WireModel):
    id: str
    name: str
    color: str
    profession: Optional[str] = None
    position: int = 0
    on_fast_track: bool = False
    rat_race: RatRaceModel = Field(default_factory=RatRaceModel)
    fast_track: FastTrackModel = Field(default_factory=FastTrackModel)
    cash: int = 0
    net_worth: int = 0
    status: Literal["active", "eliminated", "won"] = "active"
    has_charity_bonus: bool = False
    rolled_dice: List[int] = Field(default_factory=list)
    passes_this_turn: int = 0


class ProfessionAssetsModel(WireModel):
    real_estate: int = 0
    stocks: int = 0
    cash: int = 0


class ProfessionLiabilitiesModel(WireModel):
    home_mortgage: int = 0
    car_loan: int = 0
    credit_card: int = 0
    student_loan: int = 0


class ProfessionModel(WireModel):
    id: int
    name: str
    career: str = ""
    salary: int = 0
    paycheck: int = 0
    expenses: int = 0
    cash_flow: int = 0
    assets: ProfessionAssetsModel = Field(default_factory=ProfessionAssetsModel)
    liabilities: ProfessionLiabilitiesModel = Field(default_factory=ProfessionLiabilitiesModel)
    credit_limit: int = 0


class OpportunityCardModel(WireModel):
    id: int
    name: str
    type: Literal["small_deal", "big_deal"]
    down_payment: int
    total_cost: int
    monthly_income: int
    total_value: int
    description: str = ""
    buyable: bool = True


class MarketCardModel(WireModel):
    id: int
    asset_type: Literal["real_estate", "stocks", "business"]
    asset_name: str
    selling_price: int
    description: str = ""


class DoodadCardModel(WireModel):
    id: int
    name: str
    cost: int
    expense_increase: int = 0
    description: str = ""


class SnapshotModel(WireModel):
    """Top-level saved-game document."""

    players: List[PlayerModel] = Field(min_length=1)
    current_player_index: int = 0
    game_phase: Literal["setup", "rat_race", "fast_track", "ended"] = "setup"
    profession_deck: Optional[List[ProfessionModel]] = None
    opportunity_deck: Optional[List[OpportunityCardModel]] = None
    market_deck: Optional[List[MarketCardModel]] = None
    doodad_deck: Optional[List[DoodadCardModel]] = None
    turn_number: int = 0
    winner_id: Optional[str] = None


# ----------------------------------------------------------------------
# Domain -> wire
# ----------------------------------------------------------------------


def _player_to_model(player: Player) -> PlayerModel:
    rr = player.rat_race
    return PlayerModel(
        id=player.player_id,
        name=player.name,
        color=player.color,
        profession=player.profession,
        position=player.position,
        on_fast_track=player.on_fast_track,
        rat_race=RatRaceModel(
            monthly_income=rr.monthly_income,
            monthly_expenses=rr.monthly_expenses,
            monthly_payday=rr.monthly_payday,
            passive_income=rr.passive_income,
            total_expenses=rr.total_expenses,
            children=rr.children,
            credit_limit=rr.credit_limit,
            auditor_id=rr.auditor_id,
            assets=AssetsModel(
                real_estate=[
                    RealEstateAssetModel(
                        id=a.asset_id,
                        name=a.name,
                        down_payment=a.down_payment,
                        total_cost=a.total_cost,
                        monthly_income=a.monthly_income,
                        current_value=a.current_value,
                    )
                    for a in rr.assets.real_estate
                ],
                stocks=[
                    StockAssetModel(
                        id=s.asset_id,
                        symbol=s.symbol,
                        shares=s.shares,
                        purchase_price=s.purchase_price,
                        current_value=s.current_value,
                        monthly_income=s.monthly_income,
                    )
                    for s in rr.assets.stocks
                ],
                businesses=[
                    BusinessAssetModel(id=b.asset_id, name=b.name, cost=b.cost, monthly_income=b.monthly_income)
                    for b in rr.assets.businesses
                ],
                cash=player.cash,
            ),
            liabilities=LiabilitiesModel(
                home_loan=rr.liabilities.home_loan,
                car_loan=rr.liabilities.car_loan,
                credit_card_debt=rr.liabilities.credit_card_debt,
                bank_loans=[
                    BankLoanModel(
                        id=loan.loan_id,
                        amount=loan.amount,
                        monthly_payment=loan.monthly_payment,
                        date_created=loan.created_at,
                    )
                    for loan in rr.liabilities.bank_loans
                ],
            ),
        ),
        fast_track=FastTrackModel(
            buyout=player.fast_track.buyout,
            income_goal=player.fast_track.income_goal,
            current_income=player.fast_track.current_income,
            dream_price=player.fast_track.dream_price,
        ),
        cash=player.cash,
        net_worth=player.net_worth,
        status=player.status.value,
        has_charity_bonus=player.has_charity_bonus,
        rolled_dice=list(player.rolled_dice),
        passes_this_turn=player.passes_this_turn,
    )


def _profession_to_model(profession: Profession) -> ProfessionModel:
    return ProfessionModel(
        id=profession.profession_id,
        name=profession.name,
        career=profession.career,
        salary=profession.salary,
        paycheck=profession.paycheck,
        expenses=profession.expenses,
        cash_flow=profession.cash_flow,
        assets=ProfessionAssetsModel(
            real_estate=profession.assets.real_estate,
            stocks=profession.assets.stocks,
            cash=profession.assets.cash,
        ),
        liabilities=ProfessionLiabilitiesModel(
            home_mortgage=profession.liabilities.home_mortgage,
            car_loan=profession.liabilities.car_loan,
            credit_card=profession.liabilities.credit_card,
            student_loan=profession.liabilities.student_loan,
        ),
        credit_limit=profession.credit_limit,
    )


def opportunity_to_model(card: OpportunityCard) -> OpportunityCardModel:
    return OpportunityCardModel(
        id=card.card_id,
        name=card.name,
        type=card.deal_type.value,
        down_payment=card.down_payment,
        total_cost=card.total_cost,
        monthly_income=card.monthly_income,
        total_value=card.total_value,
        description=card.description,
        buyable=card.buyable,
    )


def market_to_model(card: MarketCard) -> MarketCardModel:
    return MarketCardModel(
        id=card.card_id,
        asset_type=card.asset_type.value,
        asset_name=card.asset_name,
        selling_price=card.selling_price,
        description=card.description,
    )


def doodad_to_model(card: DoodadCard) -> DoodadCardModel:
    return DoodadCardModel(
        id=card.card_id,
        name=card.name,
        cost=card.cost,
        expense_increase=card.expense_increase,
        description=card.description,
    )


def card_to_dict(card) -> Dict[str, Any]:
    """Serialize any drawn card to its camelCase document."""
    if isinstance(card, OpportunityCard):
        model = opportunity_to_model(card)
    elif isinstance(card, MarketCard):
        model = market_to_model(card)
    else:
        model = doodad_to_model(card)
    return model.model_dump(by_alias=True)


def serialize_snapshot(snapshot: GameSnapshot) -> Dict[str, Any]:
    """Serialize a GameSnapshot into its saved-game JSON dict."""
    model = SnapshotModel(
        players=[_player_to_model(p) for p in snapshot.players],
        current_player_index=snapshot.current_player_index,
        game_phase=snapshot.game_phase.value,
        profession_deck=[_profession_to_model(p) for p in snapshot.profession_deck],
        opportunity_deck=[opportunity_to_model(c) for c in snapshot.opportunity_deck.cards],
        market_deck=[market_to_model(c) for c in snapshot.market_deck.cards],
        doodad_deck=[doodad_to_model(c) for c in snapshot.doodad_deck.cards],
        turn_number=snapshot.turn_number,
        winner_id=snapshot.winner_id,
    )
    return model.model_dump(by_alias=True)


# ----------------------------------------------------------------------
# Wire -> domain
# ----------------------------------------------------------------------


def _player_from_model(model: PlayerModel) -> Player:
    rr = model.rat_race
    return Player(
        player_id=model.id,
        name=model.name,
        color=model.color,
        profession=model.profession,
        position=model.position,
        on_fast_track=model.on_fast_track,
        rat_race=RatRaceFinancials(
            monthly_income=rr.monthly_income,
            monthly_expenses=rr.monthly_expenses,
            monthly_payday=rr.monthly_payday,
            passive_income=rr.passive_income,
            total_expenses=rr.total_expenses,
            children=rr.children,
            credit_limit=rr.credit_limit,
            auditor_id=rr.auditor_id,
            assets=Assets(
                real_estate=tuple(
                    RealEstateAsset(a.id, a.name, a.down_payment, a.total_cost, a.monthly_income, a.current_value)
                    for a in rr.assets.real_estate
                ),
                stocks=tuple(
                    StockAsset(s.id, s.symbol, s.shares, s.purchase_price, s.current_value, s.monthly_income)
                    for s in rr.assets.stocks
                ),
                businesses=tuple(
                    BusinessAsset(b.id, b.name, b.cost, b.monthly_income) for b in rr.assets.businesses
                ),
            ),
            liabilities=Liabilities(
                home_loan=rr.liabilities.home_loan,
                car_loan=rr.liabilities.car_loan,
                credit_card_debt=rr.liabilities.credit_card_debt,
                bank_loans=tuple(
                    BankLoan(loan.id, loan.amount, loan.monthly_payment, loan.date_created)
                    for loan in rr.liabilities.bank_loans
                ),
            ),
        ),
        fast_track=FastTrackFinancials(
            buyout=model.fast_track.buyout,
            income_goal=model.fast_track.income_goal,
            current_income=model.fast_track.current_income,
            dream_price=model.fast_track.dream_price,
        ),
        cash=model.cash,
        net_worth=model.net_worth,
        status=PlayerStatus(model.status),
        has_charity_bonus=model.has_charity_bonus,
        rolled_dice=tuple(model.rolled_dice),
        passes_this_turn=model.passes_this_turn,
    )


def _profession_from_model(model: ProfessionModel) -> Profession:
    return Profession(
        profession_id=model.id,
        name=model.name,
        career=model.career,
        salary=model.salary,
        paycheck=model.paycheck,
        expenses=model.expenses,
        cash_flow=model.cash_flow,
        assets=ProfessionAssets(model.assets.real_estate, model.assets.stocks, model.assets.cash),
        liabilities=ProfessionLiabilities(
            model.liabilities.home_mortgage,
            model.liabilities.car_loan,
            model.liabilities.credit_card,
            model.liabilities.student_loan,
        ),
        credit_limit=model.credit_limit,
    )


def _deck(catalog, saved, rng: random.Random) -> Deck:
    if saved is None:
        return Deck.fresh(catalog, rng)
    return Deck(catalog=catalog, cards=tuple(saved))


def deserialize_snapshot(data: Dict[str, Any], rng: Optional[random.Random] = None) -> GameSnapshot:
    """
    Build a GameSnapshot from a saved-game dict.

    Raises:
        pydantic.ValidationError: if the document does not have the saved-game shape
    """
    model = SnapshotModel.model_validate(data)
    rng = rng if rng is not None else random.Random()

    opportunity = None
    if model.opportunity_deck is not None:
        opportunity = [
            OpportunityCard(
                c.id,
                c.name,
                DealType(c.type),
                c.down_payment,
                c.total_cost,
                c.monthly_income,
                c.total_value,
                c.description,
                c.buyable,
            )
            for c in model.opportunity_deck
        ]
    market = None
    if model.market_deck is not None:
        market = [
            MarketCard(c.id, MarketAssetType(c.asset_type), c.asset_name, c.selling_price, c.description)
            for c in model.market_deck
        ]
    doodad = None
    if model.doodad_deck is not None:
        doodad = [DoodadCard(c.id, c.name, c.cost, c.expense_increase, c.description) for c in model.doodad_deck]

    professions = PROFESSION_CARDS
    if model.profession_deck:
        professions = tuple(_profession_from_model(p) for p in model.profession_deck)

    players = tuple(_player_from_model(p) for p in model.players)
    index = model.current_player_index if 0 <= model.current_player_index < len(players) else 0

    return GameSnapshot(
        players=players,
        opportunity_deck=_deck(OPPORTUNITY_CARDS, opportunity, rng),
        market_deck=_deck(MARKET_CARDS, market, rng),
        doodad_deck=_deck(DOODAD_CARDS, doodad, rng),
        current_player_index=index,
        game_phase=GamePhase(model.game_phase),
        profession_deck=professions,
        turn_number=model.turn_number,
        winner_id=model.winner_id,
    )
