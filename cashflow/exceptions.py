"""
Custom exception hierarchy for the Cashflow engine and services.

Provides typed errors that can be handled consistently across
the core engine, the session service, and the API layer. Every
action error is recoverable: the rejected action leaves the game
snapshot unchanged.
"""


class CashflowError(Exception):
    """Base exception for all game-related errors."""


class InvalidActionError(CashflowError):
    """Action is not legal in the current state."""


class NotYourTurnError(InvalidActionError):
    """Action targets a player who is not the active player."""


class AlreadyRolledError(InvalidActionError):
    """Roll requested after the active player already rolled this turn."""


class RollRequiredError(InvalidActionError):
    """Turn cannot be passed before the active player has rolled."""


class InsufficientFundsError(InvalidActionError):
    """A purchase or payment costs more than the player's cash."""

    def __init__(self, message: str, *, required: int = 0, available: int = 0):
        super().__init__(message)
        self.required = required
        self.available = available


class MaxChildrenReachedError(InvalidActionError):
    """Baby space landed on while already at the children cap."""


class InvalidDecisionError(InvalidActionError):
    """Buy/pass or donate decision requested with nothing pending."""


class GameOverError(InvalidActionError):
    """Game has ended; no further actions are accepted."""


class BoardError(CashflowError):
    """Board layout violates its invariants."""


class SetupError(CashflowError):
    """New game could not be created from the given players."""


class PersistenceError(CashflowError):
    """Saved game state could not be read or written."""


class GameNotFoundError(CashflowError):
    """Game does not exist."""
