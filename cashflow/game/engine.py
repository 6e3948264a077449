"""
Turn state machine for the Rat Race.

Every public action takes a snapshot and returns a new one wrapped in an
:class:`ActionResult`; the input snapshot is never modified. Errors that
reject a whole action are raised and leave the snapshot untouched. Space
effects that fail inside an otherwise valid roll (a doodad the player
cannot afford, a baby at the children cap) are surfaced as the result's
``condition`` instead, because the roll itself still happened.
"""

import logging
import random
import uuid
from dataclasses import dataclass, replace
from typing import Callable, Optional, Sequence, Tuple

from cashflow.exceptions import (
    AlreadyRolledError,
    GameOverError,
    InsufficientFundsError,
    InvalidActionError,
    InvalidDecisionError,
    MaxChildrenReachedError,
    NotYourTurnError,
    RollRequiredError,
)
from cashflow.game.board import Board
from cashflow.game.cards import DeckType
from cashflow.game.config import CHARITY_PERCENT, DICE_SIDES, DOWNSIZE_SKIPS, GameConfig
from cashflow.game.events import EventLog, EventType
from cashflow.game.finance import MAX_CHILDREN, can_exit_rat_race, fast_track_buyout, recalculate
from cashflow.game.player import FastTrackFinancials, Player, PlayerStatus, RealEstateAsset, TurnPhase
from cashflow.game.professions import boost_passive_income
from cashflow.game.spaces import SpaceType
from cashflow.game.state import (
    GamePhase,
    GameSnapshot,
    PendingDecision,
    PendingKind,
    draw_doodad,
    draw_market,
    draw_opportunity,
    new_game,
    prepare_resume,
)

logger = logging.getLogger(__name__)

FAST_TRACK_GOAL_MARGIN = 50_000

PlayerRule = Callable[[GameSnapshot, Player], bool]


@dataclass(frozen=True)
class ActionResult:
    """New snapshot plus the space-effect error surfaced during the action, if any."""

    snapshot: GameSnapshot
    condition: Optional[InvalidActionError] = None


class GameEngine:
    """
    Applies player actions to game snapshots.

    The engine owns the random source, the board and the display event log.
    It holds no game state of its own, so one engine can drive any snapshot.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        board: Optional[Board] = None,
        rng: Optional[random.Random] = None,
        event_log: Optional[EventLog] = None,
        win_rule: Optional[PlayerRule] = None,
        elimination_rule: Optional[PlayerRule] = None,
    ):
        self.config = config if config is not None else GameConfig()
        self.board = board if board is not None else Board()
        self.rng = rng if rng is not None else random.Random(self.config.seed)
        self.event_log = event_log if event_log is not None else EventLog(self.config.log_limit)
        self.win_rule = win_rule
        self.elimination_rule = elimination_rule

    # ------------------------------------------------------------------
    # Game lifecycle
    # ------------------------------------------------------------------

    def new_game(self, players: Sequence[Player]) -> GameSnapshot:
        """Start a game for the given players (fresh decks, professions dealt)."""
        snapshot = new_game(players, self.config, self.rng)
        self.event_log.log(EventType.GAME_START, players=len(snapshot.players))
        for player in snapshot.players:
            logger.info("%s starts as %s with $%d", player.name, player.profession, player.cash)
        self.event_log.log(
            EventType.TURN_START, snapshot.current_player.player_id, name=snapshot.current_player.name
        )
        return snapshot

    def resume(self, snapshot: GameSnapshot) -> GameSnapshot:
        """Make a loaded snapshot playable again."""
        snapshot = prepare_resume(snapshot, self.config, self.rng)
        self.event_log.log(EventType.GAME_RESTORED)
        return snapshot

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def roll(self, snapshot: GameSnapshot, player_id: str) -> ActionResult:
        """
        Roll for the active player, move, and resolve the landing space.

        A player with forced skips remaining uses their roll to skip instead:
        one skip is consumed and the turn passes without dice or movement.
        """
        player = self._require_turn(snapshot, player_id)
        phase = player.turn_phase

        if phase == TurnPhase.ROLLED:
            raise AlreadyRolledError(f"{player.name} already rolled this turn")

        if phase == TurnPhase.SKIPPING:
            player = replace(player, passes_this_turn=player.passes_this_turn - 1)
            self.event_log.log(
                EventType.SKIP_TURN, player_id, name=player.name, remaining=player.passes_this_turn
            )
            return ActionResult(self._end_turn(snapshot.with_player(player)))

        dice_count = 2 if player.on_fast_track else 1
        if player.has_charity_bonus:
            dice_count = 3

        dice = self.roll_dice(dice_count)
        total = sum(dice)
        player = replace(player, rolled_dice=dice, has_charity_bonus=False)
        snapshot = snapshot.with_player(player)
        self.event_log.log(
            EventType.DICE_ROLL, player_id, name=player.name, dice=", ".join(map(str, dice)), total=total
        )

        snapshot, collected = self._move(snapshot, player_id, total)
        return self._resolve(snapshot, player_id, payday_collected=collected)

    def roll_dice(self, count: int) -> Tuple[int, ...]:
        """Roll ``count`` six-sided dice."""
        return tuple(self.rng.randint(1, DICE_SIDES) for _ in range(count))

    def move_player(self, snapshot: GameSnapshot, player_id: str, spaces: int) -> GameSnapshot:
        """
        Move a player forward, collecting Payday on landing exactly on it.

        Does not resolve the landing space.
        """
        snapshot, _ = self._move(snapshot, player_id, spaces)
        return snapshot

    def resolve_space(self, snapshot: GameSnapshot, player_id: str) -> ActionResult:
        """Apply the effect of the space the player is standing on."""
        return self._resolve(snapshot, player_id, payday_collected=False)

    def decide_opportunity(self, snapshot: GameSnapshot, player_id: str, buy: bool) -> ActionResult:
        """
        Buy or pass on the pending opportunity card.

        An unaffordable purchase raises and keeps the decision pending so the
        player may still pass.
        """
        player = self._require_turn(snapshot, player_id)
        pending = snapshot.pending
        if pending is None or pending.kind != PendingKind.OPPORTUNITY or pending.player_id != player_id:
            raise InvalidDecisionError("No opportunity is awaiting a decision")

        card = pending.card
        cleared = replace(snapshot, pending=None, drawn_card=None)

        if not buy:
            self.event_log.log(EventType.DECLINE_PURCHASE, player_id, name=player.name, card=card.name)
            return ActionResult(cleared)

        if player.cash < card.down_payment:
            raise InsufficientFundsError(
                f"{player.name} needs ${card.down_payment:,} for {card.name}",
                required=card.down_payment,
                available=player.cash,
            )

        monthly_income = card.monthly_income
        if self.config.custom_mode:
            monthly_income = boost_passive_income(monthly_income)

        asset = RealEstateAsset(
            asset_id=uuid.uuid4().hex,
            name=card.name,
            down_payment=card.down_payment,
            total_cost=card.total_cost,
            monthly_income=monthly_income,
            current_value=card.total_value,
        )
        holdings = player.rat_race.assets
        holdings = replace(holdings, real_estate=holdings.real_estate + (asset,))
        player = replace(player, cash=player.cash - card.down_payment)
        player = recalculate(player.with_rat_race(assets=holdings))

        self.event_log.log(
            EventType.PURCHASE, player_id, name=player.name, card=card.name, amount=card.down_payment
        )
        logger.debug("%s bought %s, passive income %d", player.name, card.name, player.rat_race.passive_income)
        return ActionResult(cleared.with_player(player))

    def confirm_charity(self, snapshot: GameSnapshot, player_id: str, confirmed: bool) -> ActionResult:
        """
        Answer the pending charity offer.

        A confirmed donation the player cannot afford clears the offer and
        reports the shortfall as the result's condition.
        """
        player = self._require_turn(snapshot, player_id)
        pending = snapshot.pending
        if pending is None or pending.kind != PendingKind.CHARITY or pending.player_id != player_id:
            raise InvalidDecisionError("No charity offer is awaiting a decision")

        cleared = replace(snapshot, pending=None)
        amount = pending.amount

        if not confirmed:
            self.event_log.log(EventType.CHARITY_DECLINED, player_id, name=player.name)
            return ActionResult(cleared)

        if player.cash < amount:
            self.event_log.log(
                EventType.INSUFFICIENT_FUNDS, player_id, name=player.name, item="charity", required=amount
            )
            return ActionResult(
                cleared,
                InsufficientFundsError(
                    f"{player.name} cannot afford a ${amount:,} donation", required=amount, available=player.cash
                ),
            )

        player = recalculate(replace(player, cash=player.cash - amount, has_charity_bonus=True))
        self.event_log.log(EventType.CHARITY_DONATION, player_id, name=player.name, amount=amount)
        return ActionResult(cleared.with_player(player))

    def pass_turn(self, snapshot: GameSnapshot, player_id: str) -> ActionResult:
        """End the active player's turn, discarding any open decision."""
        player = self._require_turn(snapshot, player_id)
        if player.turn_phase != TurnPhase.ROLLED:
            raise RollRequiredError(f"{player.name} must roll before passing")

        pending = snapshot.pending
        if pending is not None and pending.kind == PendingKind.OPPORTUNITY:
            self.event_log.log(EventType.DECLINE_PURCHASE, player_id, name=player.name, card=pending.card.name)
        elif pending is not None:
            self.event_log.log(EventType.CHARITY_DECLINED, player_id, name=player.name)

        snapshot = replace(snapshot, pending=None, drawn_card=None)
        return ActionResult(self._end_turn(snapshot))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _require_turn(self, snapshot: GameSnapshot, player_id: str) -> Player:
        if snapshot.is_over:
            raise GameOverError("The game has ended")

        try:
            player = snapshot.get_player(player_id)
        except KeyError:
            raise NotYourTurnError(f"Unknown player {player_id!r}") from None

        if snapshot.current_player.player_id != player_id or not player.is_active:
            raise NotYourTurnError(f"It is not {player.name}'s turn")
        return player

    def _move(self, snapshot: GameSnapshot, player_id: str, spaces: int) -> Tuple[GameSnapshot, bool]:
        player = snapshot.get_player(player_id)
        position = self.board.advance(player.position, spaces)
        player = replace(player, position=position)
        snapshot = snapshot.with_player(player)

        collected = spaces > 0 and position == 0 and not player.on_fast_track
        if collected:
            snapshot = self._collect_payday(snapshot, player_id)
        return snapshot, collected

    def _collect_payday(self, snapshot: GameSnapshot, player_id: str) -> GameSnapshot:
        player = snapshot.get_player(player_id)
        amount = player.rat_race.monthly_payday
        player = recalculate(replace(player, cash=player.cash + amount))
        self.event_log.log(EventType.PAYDAY, player_id, name=player.name, amount=amount)
        return snapshot.with_player(player)

    def _resolve(self, snapshot: GameSnapshot, player_id: str, payday_collected: bool) -> ActionResult:
        player = snapshot.get_player(player_id)
        space = self.board.get_space(player.position)
        self.event_log.log(
            EventType.MOVE, player_id, name=player.name, display_position=space.position + 1, space=space.name
        )

        handler = self._space_handlers.get(space.space_type)
        if handler is None:
            return ActionResult(snapshot)
        if space.space_type == SpaceType.PAYDAY and payday_collected:
            return ActionResult(snapshot)
        return handler(self, snapshot, player)

    def _on_payday(self, snapshot: GameSnapshot, player: Player) -> ActionResult:
        return ActionResult(self._collect_payday(snapshot, player.player_id))

    def _on_opportunity(self, snapshot: GameSnapshot, player: Player) -> ActionResult:
        card, snapshot = draw_opportunity(snapshot, self.rng)
        self._log_draw(player, DeckType.OPPORTUNITY, card.name)
        pending = PendingDecision(PendingKind.OPPORTUNITY, player.player_id, card=card)
        return ActionResult(replace(snapshot, drawn_card=card, pending=pending))

    def _on_market(self, snapshot: GameSnapshot, player: Player) -> ActionResult:
        card, snapshot = draw_market(snapshot, self.rng)
        self._log_draw(player, DeckType.MARKET, card.asset_name)
        return ActionResult(replace(snapshot, drawn_card=card))

    def _on_doodad(self, snapshot: GameSnapshot, player: Player) -> ActionResult:
        card, snapshot = draw_doodad(snapshot, self.rng)
        snapshot = replace(snapshot, drawn_card=card)
        self._log_draw(player, DeckType.DOODAD, card.name)

        if player.cash < card.cost:
            self.event_log.log(
                EventType.INSUFFICIENT_FUNDS,
                player.player_id,
                name=player.name,
                item=card.name,
                required=card.cost,
            )
            return ActionResult(
                snapshot,
                InsufficientFundsError(
                    f"{player.name} cannot pay ${card.cost:,} for {card.name}",
                    required=card.cost,
                    available=player.cash,
                ),
            )

        player = replace(player, cash=player.cash - card.cost)
        if card.expense_increase:
            expenses = player.rat_race.monthly_expenses + card.expense_increase
            player = player.with_rat_race(monthly_expenses=expenses)
        player = recalculate(player)
        self.event_log.log(
            EventType.DOODAD_PAYMENT, player.player_id, name=player.name, amount=card.cost, card=card.name
        )
        return ActionResult(snapshot.with_player(player))

    def _log_draw(self, player: Player, deck: DeckType, card_name: str) -> None:
        self.event_log.log(EventType.CARD_DRAW, player.player_id, name=player.name, deck=deck.value, card=card_name)

    def _on_baby(self, snapshot: GameSnapshot, player: Player) -> ActionResult:
        if player.rat_race.children >= MAX_CHILDREN:
            self.event_log.log(EventType.MAX_CHILDREN, player.player_id, name=player.name, limit=MAX_CHILDREN)
            return ActionResult(
                snapshot, MaxChildrenReachedError(f"Maximum {MAX_CHILDREN} children allowed")
            )

        before = player.rat_race.total_expenses
        player = recalculate(player.with_rat_race(children=player.rat_race.children + 1))
        self.event_log.log(
            EventType.BABY, player.player_id, name=player.name, amount=player.rat_race.total_expenses - before
        )
        return ActionResult(snapshot.with_player(player))

    def _on_downsize(self, snapshot: GameSnapshot, player: Player) -> ActionResult:
        player = replace(player, passes_this_turn=DOWNSIZE_SKIPS)
        self.event_log.log(EventType.DOWNSIZE, player.player_id, name=player.name, turns=DOWNSIZE_SKIPS)
        return ActionResult(snapshot.with_player(player))

    def _on_charity(self, snapshot: GameSnapshot, player: Player) -> ActionResult:
        amount = player.rat_race.monthly_income * CHARITY_PERCENT // 100
        pending = PendingDecision(PendingKind.CHARITY, player.player_id, amount=amount)
        self.event_log.log(EventType.CHARITY_OFFER, player.player_id, name=player.name, amount=amount)
        return ActionResult(replace(snapshot, pending=pending))

    def _on_exit(self, snapshot: GameSnapshot, player: Player) -> ActionResult:
        if player.on_fast_track:
            return ActionResult(snapshot)
        if can_exit_rat_race(player):
            return ActionResult(self._enter_fast_track(snapshot, player.player_id))
        self.event_log.log(EventType.EXIT_DENIED, player.player_id, name=player.name)
        return ActionResult(snapshot)

    _space_handlers = {
        SpaceType.PAYDAY: _on_payday,
        SpaceType.OPPORTUNITY: _on_opportunity,
        SpaceType.MARKET: _on_market,
        SpaceType.DOODADS: _on_doodad,
        SpaceType.BABY: _on_baby,
        SpaceType.DOWNSIZE: _on_downsize,
        SpaceType.CHARITY: _on_charity,
        SpaceType.EXIT: _on_exit,
    }

    def _enter_fast_track(self, snapshot: GameSnapshot, player_id: str) -> GameSnapshot:
        player = recalculate(snapshot.get_player(player_id))
        buyout = fast_track_buyout(player)
        player = replace(
            player,
            on_fast_track=True,
            position=0,
            fast_track=FastTrackFinancials(buyout=buyout, income_goal=buyout + FAST_TRACK_GOAL_MARGIN),
        )
        self.event_log.log(EventType.FAST_TRACK, player_id, name=player.name)
        logger.info("%s entered the Fast Track (buyout $%d)", player.name, buyout)
        return replace(snapshot.with_player(player), game_phase=GamePhase.FAST_TRACK)

    def _end_turn(self, snapshot: GameSnapshot) -> GameSnapshot:
        """Run end-of-turn checks for the outgoing player and hand over the turn."""
        outgoing = snapshot.current_player
        if not outgoing.on_fast_track and can_exit_rat_race(outgoing):
            snapshot = self._enter_fast_track(snapshot, outgoing.player_id)
            outgoing = snapshot.current_player

        if self.elimination_rule is not None and self.elimination_rule(snapshot, outgoing):
            outgoing = replace(outgoing, status=PlayerStatus.ELIMINATED)
            snapshot = snapshot.with_player(outgoing)
            self.event_log.log(EventType.ELIMINATED, outgoing.player_id, name=outgoing.name)

        if self.win_rule is not None and outgoing.is_active and self.win_rule(snapshot, outgoing):
            winner = replace(outgoing, status=PlayerStatus.WON)
            self.event_log.log(EventType.GAME_END, winner.player_id, name=winner.name)
            logger.info("%s won after %d turns", winner.name, snapshot.turn_number + 1)
            return replace(
                snapshot.with_player(winner),
                game_phase=GamePhase.ENDED,
                winner_id=winner.player_id,
                turn_number=snapshot.turn_number + 1,
            )

        return self._advance_turn(snapshot)

    def _advance_turn(self, snapshot: GameSnapshot) -> GameSnapshot:
        count = len(snapshot.players)
        next_index = None
        for step in range(1, count + 1):
            candidate = (snapshot.current_player_index + step) % count
            if snapshot.players[candidate].is_active:
                next_index = candidate
                break

        if next_index is None:
            logger.info("No active players remain, ending game")
            return replace(snapshot, game_phase=GamePhase.ENDED, turn_number=snapshot.turn_number + 1)

        incoming = replace(snapshot.players[next_index], rolled_dice=())
        snapshot = replace(
            snapshot.with_player(incoming),
            current_player_index=next_index,
            pending=None,
            drawn_card=None,
            turn_number=snapshot.turn_number + 1,
        )
        snapshot = replace(
            snapshot,
            game_phase=GamePhase.FAST_TRACK if snapshot.any_on_fast_track() else GamePhase.RAT_RACE,
        )
        self.event_log.log(EventType.TURN_START, incoming.player_id, name=incoming.name)
        return snapshot
