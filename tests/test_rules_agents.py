"""
Tests for legal-action detection, action dispatch and the built-in agents.
"""

from dataclasses import replace

import pytest

from cashflow.agents import GreedyAgent, RandomAgent
from cashflow.exceptions import InvalidActionError
from cashflow.game import GamePhase
from cashflow.game.cards import OPPORTUNITY_CARDS, Deck
from cashflow.game.rules import Action, ActionType, apply_action, get_legal_actions

from .conftest import adjust_player

EIGHT_PLEX = OPPORTUNITY_CARDS[0]


def _types(actions):
    return [a.action_type for a in actions]


@pytest.fixture
def opportunity_game(engine, dice, basic_game):
    """Alice has just drawn the 8-plex ($5,000 down) with $10,000 in hand."""
    snapshot = adjust_player(basic_game, "p1", cash=10_000)
    snapshot = replace(snapshot, opportunity_deck=Deck(OPPORTUNITY_CARDS, cards=(EIGHT_PLEX,)))
    dice.rolls = [1]
    return engine.roll(snapshot, "p1").snapshot


@pytest.fixture
def charity_game(engine, dice, basic_game):
    """Alice has been offered a $500 donation with $2,000 in hand."""
    snapshot = adjust_player(basic_game, "p1", cash=2_000, position=8, monthly_income=5000)
    dice.rolls = [1]
    return engine.roll(snapshot, "p1").snapshot


class TestLegalActions:
    def test_roll_at_turn_start(self, basic_game):
        assert get_legal_actions(basic_game, "p1") == [Action(ActionType.ROLL_DICE)]

    def test_nothing_for_waiting_player(self, basic_game):
        assert get_legal_actions(basic_game, "p2") == []

    def test_pass_after_plain_roll(self, engine, dice, basic_game):
        dice.rolls = [2]
        snapshot = engine.roll(basic_game, "p1").snapshot

        assert get_legal_actions(snapshot, "p1") == [Action(ActionType.PASS_TURN)]

    def test_opportunity_choices(self, opportunity_game):
        actions = get_legal_actions(opportunity_game, "p1")

        assert actions == [
            Action(ActionType.BUY_OPPORTUNITY, card=EIGHT_PLEX.name),
            Action(ActionType.DECLINE_OPPORTUNITY),
            Action(ActionType.PASS_TURN),
        ]

    def test_unaffordable_purchase_not_offered(self, opportunity_game):
        snapshot = adjust_player(opportunity_game, "p1", cash=1_000)

        assert _types(get_legal_actions(snapshot, "p1")) == [
            ActionType.DECLINE_OPPORTUNITY,
            ActionType.PASS_TURN,
        ]

    def test_charity_choices(self, charity_game):
        actions = get_legal_actions(charity_game, "p1")

        assert actions == [
            Action(ActionType.DONATE_CHARITY, amount=500),
            Action(ActionType.DECLINE_CHARITY),
            Action(ActionType.PASS_TURN),
        ]

    def test_nothing_after_game_over(self, basic_game):
        snapshot = replace(basic_game, game_phase=GamePhase.ENDED)

        assert get_legal_actions(snapshot, "p1") == []


class TestApplyAction:
    def test_defaults_to_current_player(self, engine, dice, basic_game):
        dice.rolls = [2]

        result = apply_action(engine, basic_game, Action(ActionType.ROLL_DICE))

        assert result.snapshot.get_player("p1").position == 2

    def test_buy_and_donate_dispatch(self, engine, opportunity_game, charity_game):
        bought = apply_action(engine, opportunity_game, Action(ActionType.BUY_OPPORTUNITY, card=EIGHT_PLEX.name))
        donated = apply_action(engine, charity_game, Action(ActionType.DONATE_CHARITY, amount=500))

        assert bought.snapshot.get_player("p1").rat_race.passive_income == 500
        assert donated.snapshot.get_player("p1").has_charity_bonus

    def test_unknown_action_rejected(self, engine, basic_game):
        with pytest.raises(InvalidActionError):
            apply_action(engine, basic_game, Action("sell_stock"))


class TestGreedyAgent:
    def test_rolls_first(self, basic_game):
        agent = GreedyAgent("p1", "Alice")

        action = agent.choose_action(basic_game, get_legal_actions(basic_game, "p1"))

        assert action.action_type == ActionType.ROLL_DICE

    def test_buys_when_reserve_survives(self, opportunity_game):
        agent = GreedyAgent("p1", "Alice")

        action = agent.choose_action(opportunity_game, get_legal_actions(opportunity_game, "p1"))

        assert action.action_type == ActionType.BUY_OPPORTUNITY

    def test_declines_when_reserve_would_be_spent(self, opportunity_game):
        snapshot = adjust_player(opportunity_game, "p1", cash=5_500)
        agent = GreedyAgent("p1", "Alice")

        action = agent.choose_action(snapshot, get_legal_actions(snapshot, "p1"))

        assert action.action_type == ActionType.DECLINE_OPPORTUNITY

    def test_donates_when_affordable(self, charity_game):
        agent = GreedyAgent("p1", "Alice")

        action = agent.choose_action(charity_game, get_legal_actions(charity_game, "p1"))

        assert action.action_type == ActionType.DONATE_CHARITY


class TestRandomAgent:
    def test_always_rolls_when_possible(self, basic_game):
        agent = RandomAgent("p1", "Alice", seed=3)

        action = agent.choose_action(basic_game, get_legal_actions(basic_game, "p1"))

        assert action.action_type == ActionType.ROLL_DICE

    def test_picks_a_legal_action(self, opportunity_game):
        legal = get_legal_actions(opportunity_game, "p1")
        agent = RandomAgent("p1", "Alice", seed=3)

        for _ in range(10):
            assert agent.choose_action(opportunity_game, legal) in legal

    def test_repr(self):
        assert repr(RandomAgent("p1", "Alice")) == "RandomAgent(player_id='p1', name='Alice')"
