"""
Game-state snapshot: the immutable aggregate the engine reads and writes.
"""

import random
import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional, Sequence, Tuple

from cashflow.exceptions import SetupError
from cashflow.game.cards import (
    Card,
    Deck,
    DoodadCard,
    MarketCard,
    OpportunityCard,
    create_doodad_deck,
    create_market_deck,
    create_opportunity_deck,
)
from cashflow.game.config import GameConfig
from cashflow.game.player import Player
from cashflow.game.professions import PROFESSION_CARDS, Profession, assign_professions

PLAYER_COLORS = ("#ef4444", "#3b82f6", "#10b981", "#f59e0b", "#8b5cf6", "#ec4899")


class GamePhase(Enum):
    SETUP = "setup"
    RAT_RACE = "rat_race"
    FAST_TRACK = "fast_track"
    ENDED = "ended"


class PendingKind(Enum):
    OPPORTUNITY = "opportunity"
    CHARITY = "charity"


@dataclass(frozen=True)
class PendingDecision:
    """A choice the active player must make before the turn can move on."""

    kind: PendingKind
    player_id: str
    card: Optional[OpportunityCard] = None
    amount: int = 0


@dataclass(frozen=True)
class GameSnapshot:
    """
    Complete, serializable state of a game between two actions.

    Snapshots are never modified in place; every engine action returns a
    new one.
    """

    players: Tuple[Player, ...]
    opportunity_deck: Deck[OpportunityCard]
    market_deck: Deck[MarketCard]
    doodad_deck: Deck[DoodadCard]
    current_player_index: int = 0
    game_phase: GamePhase = GamePhase.RAT_RACE
    profession_deck: Tuple[Profession, ...] = field(default=PROFESSION_CARDS)
    drawn_card: Optional[Card] = None
    pending: Optional[PendingDecision] = None
    turn_number: int = 0
    winner_id: Optional[str] = None

    @property
    def current_player(self) -> Player:
        return self.players[self.current_player_index]

    @property
    def is_over(self) -> bool:
        return self.game_phase == GamePhase.ENDED

    def player_index(self, player_id: str) -> int:
        for index, player in enumerate(self.players):
            if player.player_id == player_id:
                return index
        raise KeyError(player_id)

    def get_player(self, player_id: str) -> Player:
        return self.players[self.player_index(player_id)]

    def with_player(self, player: Player) -> "GameSnapshot":
        """Copy of this snapshot with one player record swapped out."""
        index = self.player_index(player.player_id)
        players = self.players[:index] + (player,) + self.players[index + 1 :]
        return replace(self, players=players)

    def any_on_fast_track(self) -> bool:
        return any(p.on_fast_track for p in self.players)


def new_player(name: str, color: str, player_id: Optional[str] = None) -> Player:
    """Create a fresh player with no profession yet."""
    return Player(player_id=player_id or uuid.uuid4().hex[:12], name=name, color=color)


def validate_players(players: Sequence[Player], max_players: int) -> None:
    if not players:
        raise SetupError("At least one player is required")
    if len(players) > max_players:
        raise SetupError(f"Maximum {max_players} players allowed")

    ids = [p.player_id for p in players]
    if len(set(ids)) != len(ids):
        raise SetupError("Player ids must be unique")

    colors = [p.color for p in players]
    if len(set(colors)) != len(colors):
        raise SetupError("Player colors must be unique")

    for player in players:
        if not player.name.strip():
            raise SetupError("Player name must not be empty")


def new_game(
    players: Sequence[Player],
    config: GameConfig,
    rng: random.Random,
    professions: Sequence[Profession] = PROFESSION_CARDS,
) -> GameSnapshot:
    """
    Build the initial snapshot for a new game.

    Players are validated, dealt professions and given fresh decks.
    """
    validate_players(players, config.max_players)
    seeded = assign_professions(players, professions, rng, custom_mode=config.custom_mode)

    return GameSnapshot(
        players=seeded,
        opportunity_deck=create_opportunity_deck(rng),
        market_deck=create_market_deck(rng),
        doodad_deck=create_doodad_deck(rng),
        game_phase=GamePhase.RAT_RACE,
        profession_deck=tuple(professions),
    )


def prepare_resume(snapshot: GameSnapshot, config: GameConfig, rng: random.Random) -> GameSnapshot:
    """
    Make a loaded snapshot playable again.

    If any player lacks a profession the game is dealt afresh instead of
    resumed. Otherwise every player's dice are cleared so the active player
    can roll, and transient card state is dropped.
    """
    if any(not p.profession for p in snapshot.players):
        players = assign_professions(
            snapshot.players,
            snapshot.profession_deck or PROFESSION_CARDS,
            rng,
            custom_mode=config.custom_mode,
        )
        return replace(
            snapshot,
            players=tuple(replace(p, rolled_dice=()) for p in players),
            current_player_index=0,
            game_phase=GamePhase.RAT_RACE,
            drawn_card=None,
            pending=None,
            turn_number=0,
        )

    index = snapshot.current_player_index
    if not 0 <= index < len(snapshot.players):
        index = 0

    return replace(
        snapshot,
        players=tuple(replace(p, rolled_dice=()) for p in snapshot.players),
        current_player_index=index,
        drawn_card=None,
        pending=None,
    )


def draw_opportunity(snapshot: GameSnapshot, rng: random.Random) -> Tuple[OpportunityCard, GameSnapshot]:
    card, deck = snapshot.opportunity_deck.draw(rng)
    return card, replace(snapshot, opportunity_deck=deck)


def draw_market(snapshot: GameSnapshot, rng: random.Random) -> Tuple[MarketCard, GameSnapshot]:
    card, deck = snapshot.market_deck.draw(rng)
    return card, replace(snapshot, market_deck=deck)


def draw_doodad(snapshot: GameSnapshot, rng: random.Random) -> Tuple[DoodadCard, GameSnapshot]:
    card, deck = snapshot.doodad_deck.draw(rng)
    return card, replace(snapshot, doodad_deck=deck)
