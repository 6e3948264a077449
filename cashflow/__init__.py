"""
Cashflow Rat Race engine.

Exposes the turn engine, snapshot types and built-in agents.
"""

from cashflow.game import ActionResult, Board, GameConfig, GameEngine, GameSnapshot, Player, new_player
from cashflow.agents import Agent, GreedyAgent, RandomAgent

__version__ = "0.1.0"

__all__ = [
    "ActionResult",
    "Board",
    "GameConfig",
    "GameEngine",
    "GameSnapshot",
    "Player",
    "new_player",
    "Agent",
    "GreedyAgent",
    "RandomAgent",
]
