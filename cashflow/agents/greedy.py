"""Greedy agent that buys every affordable deal and donates when it can."""

from typing import List

from cashflow.agents.base import Agent
from cashflow.game.rules import Action, ActionType
from cashflow.game.state import GameSnapshot

# Keep at least this share of cash after a purchase
CASH_RESERVE_RATIO = 0.2


class GreedyAgent(Agent):
    """
    Simple AI that grows passive income as fast as possible.

    Buys an opportunity whenever the down payment leaves a small cash
    reserve, always takes the charity bonus when affordable, then passes.
    """

    def choose_action(self, snapshot: GameSnapshot, legal_actions: List[Action]) -> Action:
        """
        Choose action with simple greedy strategy.

        Priority order:
        1. Roll dice
        2. Buy opportunity (if the reserve survives)
        3. Donate to charity
        4. Pass turn
        """
        player = snapshot.get_player(self.player_id)
        by_type = {action.action_type: action for action in legal_actions}

        if ActionType.ROLL_DICE in by_type:
            return by_type[ActionType.ROLL_DICE]

        buy = by_type.get(ActionType.BUY_OPPORTUNITY)
        if buy is not None and snapshot.pending is not None:
            remaining = player.cash - snapshot.pending.card.down_payment
            if remaining >= player.cash * CASH_RESERVE_RATIO:
                return buy

        priority = [
            ActionType.DONATE_CHARITY,
            ActionType.DECLINE_OPPORTUNITY,
            ActionType.DECLINE_CHARITY,
            ActionType.PASS_TURN,
        ]
        for action_type in priority:
            if action_type in by_type:
                return by_type[action_type]

        return legal_actions[0]
