"""Random agent that picks uniformly among legal actions."""

import random
from typing import List, Optional

from cashflow.agents.base import Agent
from cashflow.game.rules import Action, ActionType
from cashflow.game.state import GameSnapshot


class RandomAgent(Agent):
    """
    Simple AI that makes random legal moves.

    Rolling is always taken when offered so the game keeps moving.
    """

    def __init__(self, player_id: str, name: str, seed: Optional[int] = None):
        super().__init__(player_id, name)
        self.rng = random.Random(seed)

    def choose_action(self, snapshot: GameSnapshot, legal_actions: List[Action]) -> Action:
        for action in legal_actions:
            if action.action_type == ActionType.ROLL_DICE:
                return action
        return self.rng.choice(legal_actions)
