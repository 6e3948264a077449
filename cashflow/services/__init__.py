"""
Application services layer.

Provides use-case oriented services that glue the turn engine with
persistence.
"""

from .game_session import GameSession

__all__ = ["GameSession"]
