"""Shared test fixtures for the Cashflow engine tests."""

import random
from dataclasses import replace

import pytest

from cashflow.game import GameConfig, GameEngine
from cashflow.game.events import EventLog
from cashflow.game.finance import recalculate
from cashflow.game.state import PLAYER_COLORS, new_player


class LoadedDice(random.Random):
    """Seeded random source whose die rolls come from a queue until it runs dry."""

    def __init__(self, *, rolls=(), seed=42):
        super().__init__(seed)
        self.rolls = list(rolls)

    def randint(self, a, b):
        if self.rolls:
            return self.rolls.pop(0)
        return super().randint(a, b)


def adjust_player(snapshot, player_id, *, cash=None, position=None, recalc=True, **rat_race):
    """Copy of the snapshot with one player's fields overridden."""
    player = snapshot.get_player(player_id)
    if rat_race:
        player = player.with_rat_race(**rat_race)
    if cash is not None:
        player = replace(player, cash=cash)
    if position is not None:
        player = replace(player, position=position)
    if recalc:
        player = recalculate(player)
    return snapshot.with_player(player)


@pytest.fixture
def game_config():
    """Default game configuration with fixed seed for reproducibility."""
    return GameConfig(seed=42)


@pytest.fixture
def dice():
    return LoadedDice()


@pytest.fixture
def engine(game_config, dice):
    return GameEngine(game_config, rng=dice, event_log=EventLog(game_config.log_limit))


@pytest.fixture
def two_players():
    """Two test players."""
    return [new_player("Alice", PLAYER_COLORS[0], "p1"), new_player("Bob", PLAYER_COLORS[1], "p2")]


@pytest.fixture
def four_players():
    """Four test players."""
    names = ["Alice", "Bob", "Charlie", "Diana"]
    return [new_player(name, PLAYER_COLORS[i], f"p{i + 1}") for i, name in enumerate(names)]


@pytest.fixture
def basic_game(engine, two_players):
    """Fresh two-player snapshot, Alice to move."""
    return engine.new_game(two_players)
