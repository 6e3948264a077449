"""
Turn event logging.

The event log is a display side channel: it is never read back by the
engine and is not part of the authoritative game state.
"""

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Deque, Dict, List, Optional

from cashflow.game.config import LOG_LIMIT


class EventType(Enum):
    """Types of game events."""

    GAME_START = "game_start"
    GAME_RESTORED = "game_restored"
    TURN_START = "turn_start"
    DICE_ROLL = "dice_roll"
    SKIP_TURN = "skip_turn"
    MOVE = "move"
    PAYDAY = "payday"

    CARD_DRAW = "card_draw"
    PURCHASE = "purchase"
    DECLINE_PURCHASE = "decline_purchase"
    DOODAD_PAYMENT = "doodad_payment"
    INSUFFICIENT_FUNDS = "insufficient_funds"

    BABY = "baby"
    MAX_CHILDREN = "max_children"
    DOWNSIZE = "downsize"
    CHARITY_OFFER = "charity_offer"
    CHARITY_DONATION = "charity_donation"
    CHARITY_DECLINED = "charity_declined"

    EXIT_DENIED = "exit_denied"
    FAST_TRACK = "fast_track"
    ELIMINATED = "eliminated"
    GAME_END = "game_end"


_MESSAGES: Dict[EventType, str] = {
    EventType.GAME_START: "Game started with {players} player(s)!",
    EventType.GAME_RESTORED: "Game state restored from saved data.",
    EventType.TURN_START: "It's {name}'s turn.",
    EventType.DICE_ROLL: "{name} rolled: {dice} = {total}",
    EventType.SKIP_TURN: "{name} is skipping this turn ({remaining} remaining)",
    EventType.MOVE: "{name} moved to position {display_position}: {space}",
    EventType.PAYDAY: "{name} collected ${amount:,} payday!",
    EventType.CARD_DRAW: "{name} drew {deck} card: {card}",
    EventType.PURCHASE: "{name} purchased {card} for ${amount:,}",
    EventType.DECLINE_PURCHASE: "{name} passed on {card}",
    EventType.DOODAD_PAYMENT: "{name} paid ${amount:,} for {card}",
    EventType.INSUFFICIENT_FUNDS: "{name} doesn't have enough cash for {item} (needs ${required:,})",
    EventType.BABY: "{name} had a baby! Monthly expenses increase by ${amount}.",
    EventType.MAX_CHILDREN: "{name} already has the maximum of {limit} children",
    EventType.DOWNSIZE: "{name} must skip {turns} turns due to downsizing.",
    EventType.CHARITY_OFFER: "{name} may donate ${amount:,} to charity",
    EventType.CHARITY_DONATION: "{name} donated ${amount:,} to charity!",
    EventType.CHARITY_DECLINED: "{name} declined to donate to charity",
    EventType.EXIT_DENIED: "{name} needs more passive income to exit Rat Race.",
    EventType.FAST_TRACK: "{name} escaped the Rat Race and entered the Fast Track!",
    EventType.ELIMINATED: "{name} has been eliminated.",
    EventType.GAME_END: "{name} won the game!",
}


@dataclass
class GameEvent:
    """A logged event in the game."""

    event_type: EventType
    player_id: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def message(self) -> str:
        """Human-readable rendering for display."""
        template = _MESSAGES.get(self.event_type)
        if template is None:
            return f"{self.event_type.value}: {self.details}"
        try:
            return template.format(**self.details)
        except (KeyError, ValueError):
            return f"{self.event_type.value}: {self.details}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_type": self.event_type.value,
            "player_id": self.player_id,
            "timestamp": self.timestamp.isoformat(),
            "message": self.message,
            **self.details,
        }

    def __str__(self) -> str:
        return f"[{self.timestamp.strftime('%H:%M:%S')}] {self.message}"

    def __repr__(self) -> str:
        player_str = self.player_id if self.player_id is not None else "System"
        return f"[{player_str}] {self.event_type.value}: {self.details}"


class EventLog:
    """Append-only event log keeping the most recent ``limit`` events."""

    def __init__(self, limit: int = LOG_LIMIT):
        self.limit = limit
        self._events: Deque[GameEvent] = deque(maxlen=limit)

    def log(self, event_type: EventType, player_id: Optional[str] = None, **details: Any) -> GameEvent:
        """Log a game event."""
        event = GameEvent(event_type, player_id, details)
        self._events.append(event)
        return event

    def recent(self, count: Optional[int] = None) -> List[GameEvent]:
        """Most recent events first."""
        events = list(reversed(self._events))
        return events if count is None else events[:count]

    def messages(self, count: Optional[int] = None) -> List[str]:
        return [str(e) for e in self.recent(count)]

    def __len__(self) -> int:
        return len(self._events)

    def clear(self) -> None:
        """Clear the event log."""
        self._events.clear()
