from cashflow.game.board import Board
from cashflow.game.config import GameConfig
from cashflow.game.engine import ActionResult, GameEngine
from cashflow.game.player import Player, PlayerStatus, TurnPhase
from cashflow.game.state import GamePhase, GameSnapshot, PendingDecision, PendingKind, new_player

__all__ = [
    "ActionResult",
    "Board",
    "GameConfig",
    "GameEngine",
    "GamePhase",
    "GameSnapshot",
    "PendingDecision",
    "PendingKind",
    "Player",
    "PlayerStatus",
    "TurnPhase",
    "new_player",
]
