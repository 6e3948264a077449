"""
GameSession orchestrates the turn engine with persistence and the display log.
"""

import logging
from typing import List, Optional, Sequence

from cashflow.data.store import SnapshotStore
from cashflow.game.cards import Card
from cashflow.game.engine import ActionResult, GameEngine
from cashflow.game.events import GameEvent
from cashflow.game.player import Player
from cashflow.game.rules import Action, apply_action
from cashflow.game.state import GameSnapshot, PendingDecision

logger = logging.getLogger(__name__)


class GameSession:
    """
    Holds the single current snapshot of one game.

    Every successful action replaces the snapshot wholesale and saves it.
    A game that has been won is removed from the store so the next session
    starts fresh.
    """

    def __init__(self, engine: GameEngine, store: Optional[SnapshotStore] = None):
        self.engine = engine
        self.store = store
        self._snapshot: Optional[GameSnapshot] = None

    # ---- Lifecycle ----

    def new_game(self, players: Sequence[Player]) -> GameSnapshot:
        """Start a new game and save it."""
        snapshot = self.engine.new_game(players)
        self._replace(snapshot)
        return snapshot

    def resume(self) -> Optional[GameSnapshot]:
        """Load the saved game, if any, and make it playable."""
        if self.store is None:
            return None

        loaded = self.store.load(self.engine.rng)
        if loaded is None:
            return None

        snapshot = self.engine.resume(loaded)
        self._replace(snapshot)
        logger.info("Resumed game at turn %d with %d player(s)", snapshot.turn_number, len(snapshot.players))
        return snapshot

    # ---- Actions ----

    def roll(self, player_id: str) -> ActionResult:
        return self._apply(self.engine.roll(self.snapshot, player_id))

    def pass_turn(self, player_id: str) -> ActionResult:
        return self._apply(self.engine.pass_turn(self.snapshot, player_id))

    def decide_opportunity(self, player_id: str, buy: bool) -> ActionResult:
        return self._apply(self.engine.decide_opportunity(self.snapshot, player_id, buy))

    def confirm_charity(self, player_id: str, confirmed: bool) -> ActionResult:
        return self._apply(self.engine.confirm_charity(self.snapshot, player_id, confirmed))

    def apply(self, action: Action, player_id: Optional[str] = None) -> ActionResult:
        """Apply an agent's action (see `cashflow.game.rules`)."""
        return self._apply(apply_action(self.engine, self.snapshot, action, player_id))

    # ---- Views ----

    @property
    def snapshot(self) -> GameSnapshot:
        if self._snapshot is None:
            raise RuntimeError("No game in progress. Call new_game() or resume() first.")
        return self._snapshot

    @property
    def drawn_card(self) -> Optional[Card]:
        return self.snapshot.drawn_card

    @property
    def pending(self) -> Optional[PendingDecision]:
        return self.snapshot.pending

    def log(self, count: Optional[int] = None) -> List[GameEvent]:
        """Game log, most recent first."""
        return self.engine.event_log.recent(count)

    # ---- Internals ----

    def _apply(self, result: ActionResult) -> ActionResult:
        self._replace(result.snapshot)
        return result

    def _replace(self, snapshot: GameSnapshot) -> None:
        """Persist the snapshot, then make it current. A failed save leaves the old snapshot in place."""
        if snapshot is self._snapshot:
            return

        if self.store is not None:
            if snapshot.winner_id is not None:
                logger.info("Game won by %s, clearing saved game", snapshot.winner_id)
                self.store.clear()
            else:
                self.store.save(snapshot)
        self._snapshot = snapshot
