"""
Tests for GameSession: the live snapshot, saving and resuming.
"""

import json

import pytest

from cashflow.data import JsonSnapshotStore
from cashflow.exceptions import NotYourTurnError, PersistenceError
from cashflow.game import GameEngine
from cashflow.game.events import EventLog, EventType
from cashflow.game.rules import Action, ActionType
from cashflow.services import GameSession

from .conftest import LoadedDice


@pytest.fixture
def store(tmp_path):
    return JsonSnapshotStore(tmp_path / "game.json")


@pytest.fixture
def session(engine, store):
    return GameSession(engine, store)


class TestLifecycle:
    def test_no_game_before_start(self, session):
        with pytest.raises(RuntimeError):
            session.snapshot

    def test_new_game_is_saved(self, session, store, two_players):
        snapshot = session.new_game(two_players)

        assert session.snapshot is snapshot
        assert store.load() == snapshot

    def test_resume_without_save(self, session):
        assert session.resume() is None

    def test_resume_without_store(self, engine):
        assert GameSession(engine).resume() is None

    def test_resume_picks_up_saved_game(self, session, store, game_config, dice, two_players):
        session.new_game(two_players)
        dice.rolls = [2]
        session.roll("p1")
        session.pass_turn("p1")

        later = GameSession(GameEngine(game_config, rng=LoadedDice(), event_log=EventLog()), store)
        resumed = later.resume()

        assert resumed.current_player.player_id == "p2"
        assert resumed.turn_number == 1
        assert resumed.get_player("p1").position == 2

    def test_resumed_decks_follow_the_engine_seed(self, session, store, game_config, two_players):
        session.new_game(two_players)

        def resume_without_decks():
            data = json.loads(store.path.read_text(encoding="utf-8"))
            del data["opportunityDeck"]
            store.path.write_text(json.dumps(data), encoding="utf-8")
            engine = GameEngine(game_config, rng=LoadedDice(seed=7), event_log=EventLog())
            return GameSession(engine, store).resume()

        first = resume_without_decks()
        second = resume_without_decks()

        assert first.opportunity_deck == second.opportunity_deck


class TestActions:
    def test_actions_replace_and_save_snapshot(self, session, store, dice, two_players):
        session.new_game(two_players)
        dice.rolls = [2]

        result = session.roll("p1")

        assert session.snapshot is result.snapshot
        assert store.load().get_player("p1").rolled_dice == (2,)
        assert session.drawn_card is not None
        assert session.pending is None

    def test_rejected_action_keeps_snapshot(self, session, two_players):
        snapshot = session.new_game(two_players)

        with pytest.raises(NotYourTurnError):
            session.roll("p2")

        assert session.snapshot is snapshot

    def test_apply_agent_action(self, session, dice, two_players):
        session.new_game(two_players)
        dice.rolls = [2]

        session.apply(Action(ActionType.ROLL_DICE))
        session.apply(Action(ActionType.PASS_TURN), "p1")

        assert session.snapshot.current_player.player_id == "p2"

    def test_win_clears_saved_game(self, game_config, store, two_players):
        engine = GameEngine(game_config, rng=LoadedDice(rolls=[2]), win_rule=lambda s, p: True)
        session = GameSession(engine, store)
        session.new_game(two_players)
        session.roll("p1")

        session.pass_turn("p1")

        assert session.snapshot.winner_id == "p1"
        assert store.load() is None
        assert not store.path.exists()


class TestLog:
    def test_log_is_most_recent_first(self, session, dice, two_players):
        session.new_game(two_players)
        dice.rolls = [2]
        session.roll("p1")

        events = session.log()

        assert events[-1].event_type == EventType.GAME_START
        assert session.log(1)[0].event_type == EventType.CARD_DRAW


class FlakyStore:
    """Store whose saves fail while ``failing`` is set."""

    def __init__(self):
        self.failing = False
        self.saved = None

    def load(self, rng=None):
        return None

    def save(self, snapshot):
        if self.failing:
            raise PersistenceError("disk full")
        self.saved = snapshot

    def clear(self):
        self.saved = None


class TestSaveFailures:
    def test_failed_save_keeps_previous_snapshot(self, engine, dice, two_players):
        store = FlakyStore()
        session = GameSession(engine, store)
        snapshot = session.new_game(two_players)
        store.failing = True
        dice.rolls = [2, 3]

        with pytest.raises(PersistenceError):
            session.roll("p1")

        assert session.snapshot is snapshot
        assert session.snapshot.current_player.rolled_dice == ()
        assert store.saved is snapshot

    def test_action_can_be_retried_after_failed_save(self, engine, dice, two_players):
        store = FlakyStore()
        session = GameSession(engine, store)
        session.new_game(two_players)
        store.failing = True
        dice.rolls = [2, 3]
        with pytest.raises(PersistenceError):
            session.roll("p1")

        store.failing = False
        result = session.roll("p1")

        assert result.snapshot.current_player.rolled_dice == (3,)
        assert store.saved is session.snapshot
