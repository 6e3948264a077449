"""Base class for all Cashflow agents."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List

if TYPE_CHECKING:
    from cashflow.game.rules import Action
    from cashflow.game.state import GameSnapshot


class Agent(ABC):
    """
    Abstract base class for Cashflow agents.

    All agents must implement the `choose_action` method to select
    an action from the list of legal actions.

    Attributes:
        player_id: The id of the player this agent controls.
        name: The player's display name.
    """

    def __init__(self, player_id: str, name: str):
        self.player_id = player_id
        self.name = name

    @abstractmethod
    def choose_action(self, snapshot: "GameSnapshot", legal_actions: List["Action"]) -> "Action":
        """
        Choose an action from the list of legal actions.

        Args:
            snapshot: The current game snapshot.
            legal_actions: List of legal actions available to the player.

        Returns:
            The chosen action to execute.
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}(player_id={self.player_id!r}, name={self.name!r})"
