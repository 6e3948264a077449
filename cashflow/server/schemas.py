from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class PlayerSpec(BaseModel):
    name: str = Field(min_length=1, max_length=40)
    color: Optional[str] = None


class CreateGameRequest(BaseModel):
    players: List[PlayerSpec] = Field(min_length=1, max_length=6)
    seed: Optional[int] = None
    custom_mode: bool = False


class PlayerRef(BaseModel):
    player_id: str
    name: str
    color: str
    profession: Optional[str] = None


class CreateGameResponse(BaseModel):
    game_id: str
    players: List[PlayerRef]


class PlayerActionRequest(BaseModel):
    player_id: str


class OpportunityRequest(PlayerActionRequest):
    buy: bool


class CharityRequest(PlayerActionRequest):
    confirmed: bool


class PendingDTO(BaseModel):
    kind: str
    player_id: str
    card: Optional[Dict[str, Any]] = None
    amount: int = 0


class ConditionDTO(BaseModel):
    error: str
    detail: str


class GameView(BaseModel):
    game_id: str
    snapshot: Dict[str, Any]
    pending: Optional[PendingDTO] = None
    drawn_card: Optional[Dict[str, Any]] = None
    winner_id: Optional[str] = None


class ActionResponse(GameView):
    condition: Optional[ConditionDTO] = None


class LegalActionsResponse(BaseModel):
    game_id: str
    player_id: str
    actions: List[Dict[str, Any]]


class GameEventDTO(BaseModel):
    event_type: str
    player_id: Optional[str] = None
    message: str
    timestamp: datetime


class GameLogResponse(BaseModel):
    game_id: str
    events: List[GameEventDTO]
