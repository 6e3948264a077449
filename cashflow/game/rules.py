"""
High-level rules API for controlling game flow.
This module provides the public interface for game actions and legal move detection.
"""

from enum import Enum
from typing import Any, List, Optional

from cashflow.exceptions import InvalidActionError
from cashflow.game.engine import ActionResult, GameEngine
from cashflow.game.player import TurnPhase
from cashflow.game.state import GameSnapshot, PendingKind


class ActionType(Enum):
    """Types of actions a player can take."""

    ROLL_DICE = "roll_dice"
    PASS_TURN = "pass_turn"
    BUY_OPPORTUNITY = "buy_opportunity"
    DECLINE_OPPORTUNITY = "decline_opportunity"
    DONATE_CHARITY = "donate_charity"
    DECLINE_CHARITY = "decline_charity"


class Action:
    """Represents a game action that can be taken."""

    def __init__(self, action_type: ActionType, **params: Any):
        self.action_type = action_type
        self.params = params

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Action):
            return NotImplemented
        return self.action_type == other.action_type and self.params == other.params

    def __repr__(self) -> str:
        return f"Action({self.action_type.value}, {self.params})"


def get_legal_actions(snapshot: GameSnapshot, player_id: str) -> List[Action]:
    """
    Get all legal actions available to a player.

    This is the main interface for agents/controllers to determine valid moves.
    Purchases and donations the player cannot afford are left out.

    Args:
        snapshot: Current game snapshot
        player_id: Player to get actions for

    Returns:
        List of legal Action objects
    """
    if snapshot.is_over:
        return []

    player = snapshot.current_player
    if player.player_id != player_id or not player.is_active:
        return []

    if player.turn_phase != TurnPhase.ROLLED:
        return [Action(ActionType.ROLL_DICE)]

    actions: List[Action] = []
    pending = snapshot.pending
    if pending is not None and pending.player_id == player_id:
        if pending.kind == PendingKind.OPPORTUNITY:
            if player.cash >= pending.card.down_payment:
                actions.append(Action(ActionType.BUY_OPPORTUNITY, card=pending.card.name))
            actions.append(Action(ActionType.DECLINE_OPPORTUNITY))
        elif pending.kind == PendingKind.CHARITY:
            if player.cash >= pending.amount:
                actions.append(Action(ActionType.DONATE_CHARITY, amount=pending.amount))
            actions.append(Action(ActionType.DECLINE_CHARITY))

    actions.append(Action(ActionType.PASS_TURN))
    return actions


def apply_action(
    engine: GameEngine,
    snapshot: GameSnapshot,
    action: Action,
    player_id: Optional[str] = None,
) -> ActionResult:
    """
    Apply an action to a snapshot.

    This is the main interface for executing moves.

    Args:
        engine: Engine that carries out the action
        snapshot: Current game snapshot
        action: Action to apply
        player_id: Player executing the action (optional, defaults to current player)

    Returns:
        The engine's result for the action
    """
    if player_id is None:
        player_id = snapshot.current_player.player_id

    action_type = action.action_type
    if action_type == ActionType.ROLL_DICE:
        return engine.roll(snapshot, player_id)
    if action_type == ActionType.PASS_TURN:
        return engine.pass_turn(snapshot, player_id)
    if action_type in (ActionType.BUY_OPPORTUNITY, ActionType.DECLINE_OPPORTUNITY):
        return engine.decide_opportunity(snapshot, player_id, buy=action_type == ActionType.BUY_OPPORTUNITY)
    if action_type in (ActionType.DONATE_CHARITY, ActionType.DECLINE_CHARITY):
        return engine.confirm_charity(snapshot, player_id, confirmed=action_type == ActionType.DONATE_CHARITY)

    raise InvalidActionError(f"Unsupported action: {action_type}")
