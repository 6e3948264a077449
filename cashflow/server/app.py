import logging
from contextlib import asynccontextmanager
from typing import Callable

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from cashflow.data import SnapshotStore, close_db, create_store, get_storage_settings
from cashflow.exceptions import (
    GameNotFoundError,
    InsufficientFundsError,
    InvalidActionError,
    MaxChildrenReachedError,
    PersistenceError,
    SetupError,
)
from cashflow.game.engine import ActionResult
from cashflow.game.rules import get_legal_actions
from cashflow.logging_config import setup_logging
from cashflow.services import GameSession
from cashflow.settings import get_app_settings
from cashflow.snapshot import card_to_dict, serialize_snapshot

from .registry import GameRegistry
from .schemas import (
    ActionResponse,
    CharityRequest,
    ConditionDTO,
    CreateGameRequest,
    CreateGameResponse,
    GameEventDTO,
    GameLogResponse,
    GameView,
    LegalActionsResponse,
    OpportunityRequest,
    PendingDTO,
    PlayerActionRequest,
    PlayerRef,
)

logger = logging.getLogger(__name__)

# Space-effect failures are unprocessable; everything else is a state conflict
UNPROCESSABLE_ERRORS = (InsufficientFundsError, MaxChildrenReachedError)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle - startup and shutdown."""
    settings = get_app_settings()
    setup_logging(settings.log_level)
    logger.info("Starting Cashflow server")
    yield
    close_db()
    logger.info("Cashflow server stopped")


app = FastAPI(title="Cashflow Server", version="0.1.0", lifespan=lifespan)


def _store_for(game_id: str) -> SnapshotStore:
    """Each game is saved in its own slot of the configured backend."""
    return create_store(get_storage_settings(), slot=game_id)


registry = GameRegistry(store_factory=_store_for, log_limit=get_app_settings().log_limit)


@app.exception_handler(InvalidActionError)
async def invalid_action_handler(request: Request, exc: InvalidActionError):
    status_code = 422 if isinstance(exc, UNPROCESSABLE_ERRORS) else 409
    return JSONResponse(status_code=status_code, content={"error": type(exc).__name__, "detail": str(exc)})


@app.exception_handler(SetupError)
async def setup_error_handler(request: Request, exc: SetupError):
    return JSONResponse(status_code=422, content={"error": type(exc).__name__, "detail": str(exc)})


@app.exception_handler(PersistenceError)
async def persistence_error_handler(request: Request, exc: PersistenceError):
    logger.error("Storage failure on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=503, content={"error": type(exc).__name__, "detail": str(exc)})


@app.exception_handler(GameNotFoundError)
async def not_found_handler(request: Request, exc: GameNotFoundError):
    return JSONResponse(status_code=404, content={"detail": "Game not found"})


# ---- Helpers ----


async def _get_session(game_id: str) -> GameSession:
    session = await registry.get(game_id)
    if not session:
        raise HTTPException(status_code=404, detail="Game not found")
    return session


def _view(game_id: str, session: GameSession) -> dict:
    snapshot = session.snapshot
    pending = None
    if snapshot.pending is not None:
        pending = PendingDTO(
            kind=snapshot.pending.kind.value,
            player_id=snapshot.pending.player_id,
            card=card_to_dict(snapshot.pending.card) if snapshot.pending.card else None,
            amount=snapshot.pending.amount,
        )
    return {
        "game_id": game_id,
        "snapshot": serialize_snapshot(snapshot),
        "pending": pending,
        "drawn_card": card_to_dict(snapshot.drawn_card) if snapshot.drawn_card else None,
        "winner_id": snapshot.winner_id,
    }


async def _run(game_id: str, action: Callable[[GameSession], ActionResult]) -> ActionResponse:
    session = await _get_session(game_id)
    async with registry.lock_for(game_id):
        result = action(session)
        condition = None
        if result.condition is not None:
            condition = ConditionDTO(error=type(result.condition).__name__, detail=str(result.condition))
        return ActionResponse(**_view(game_id, session), condition=condition)


# ---- Routes ----


@app.post("/games", response_model=CreateGameResponse)
async def create_game(req: CreateGameRequest):
    game_id, session = await registry.create_game(
        [(p.name, p.color) for p in req.players],
        seed=req.seed,
        custom_mode=req.custom_mode,
    )
    players = [
        PlayerRef(player_id=p.player_id, name=p.name, color=p.color, profession=p.profession)
        for p in session.snapshot.players
    ]
    return CreateGameResponse(game_id=game_id, players=players)


@app.get("/games/{game_id}/snapshot", response_model=GameView)
async def get_snapshot(game_id: str):
    session = await _get_session(game_id)
    return GameView(**_view(game_id, session))


@app.get("/games/{game_id}/log", response_model=GameLogResponse)
async def get_log(game_id: str, limit: int = 50):
    session = await _get_session(game_id)
    events = [
        GameEventDTO(event_type=e.event_type.value, player_id=e.player_id, message=e.message, timestamp=e.timestamp)
        for e in session.log(limit)
    ]
    return GameLogResponse(game_id=game_id, events=events)


@app.get("/games/{game_id}/legal_actions", response_model=LegalActionsResponse)
async def legal_actions(game_id: str, player_id: str):
    session = await _get_session(game_id)
    legal = get_legal_actions(session.snapshot, player_id)
    actions = [{"action_type": a.action_type.value, "params": a.params} for a in legal]
    return LegalActionsResponse(game_id=game_id, player_id=player_id, actions=actions)


@app.post("/games/{game_id}/roll", response_model=ActionResponse)
async def roll(game_id: str, req: PlayerActionRequest):
    return await _run(game_id, lambda s: s.roll(req.player_id))


@app.post("/games/{game_id}/pass", response_model=ActionResponse)
async def pass_turn(game_id: str, req: PlayerActionRequest):
    return await _run(game_id, lambda s: s.pass_turn(req.player_id))


@app.post("/games/{game_id}/opportunity", response_model=ActionResponse)
async def decide_opportunity(game_id: str, req: OpportunityRequest):
    return await _run(game_id, lambda s: s.decide_opportunity(req.player_id, req.buy))


@app.post("/games/{game_id}/charity", response_model=ActionResponse)
async def confirm_charity(game_id: str, req: CharityRequest):
    return await _run(game_id, lambda s: s.confirm_charity(req.player_id, req.confirmed))


@app.delete("/games/{game_id}")
async def delete_game(game_id: str):
    await _get_session(game_id)
    await registry.remove(game_id)
    return {"game_id": game_id, "deleted": True}


@app.get("/")
async def root():
    return {"name": "Cashflow Server", "games": "/games"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("cashflow.server.app:app", host="0.0.0.0", port=8000, reload=True)
