import asyncio
import logging
import random
import uuid
from typing import Callable, Dict, List, Optional, Tuple

from cashflow.data.store import SnapshotStore
from cashflow.exceptions import GameNotFoundError
from cashflow.game.config import GameConfig
from cashflow.game.engine import GameEngine
from cashflow.game.state import PLAYER_COLORS, new_player
from cashflow.services import GameSession

logger = logging.getLogger(__name__)

StoreFactory = Callable[[str], SnapshotStore]


class GameRegistry:
    """
    In-memory registry of running games, one lock per game.

    With a store factory every game is saved under its id, and a game that
    is not in memory (after a restart, say) is resumed from its save on
    first access.
    """

    def __init__(self, store_factory: Optional[StoreFactory] = None, log_limit: int = 50):
        self._games: Dict[str, GameSession] = {}
        self._locks: Dict[str, asyncio.Lock] = {}
        self._lock = asyncio.Lock()
        self.store_factory = store_factory
        self.log_limit = log_limit

    async def create_game(
        self,
        players: List[Tuple[str, Optional[str]]],
        *,
        seed: Optional[int] = None,
        custom_mode: bool = False,
    ) -> Tuple[str, GameSession]:
        """Create a game for (name, color) pairs; missing colors come from the default palette."""
        game_id = uuid.uuid4().hex[:12]

        config = GameConfig(custom_mode=custom_mode, seed=seed, log_limit=self.log_limit)
        engine = GameEngine(config, rng=random.Random(seed))
        store = self.store_factory(game_id) if self.store_factory else None
        session = GameSession(engine, store)
        session.new_game(
            [
                new_player(name, color or PLAYER_COLORS[i % len(PLAYER_COLORS)])
                for i, (name, color) in enumerate(players)
            ]
        )

        async with self._lock:
            self._games[game_id] = session
            self._locks[game_id] = asyncio.Lock()
        return game_id, session

    async def get(self, game_id: str) -> Optional[GameSession]:
        session = self._games.get(game_id)
        if session is not None or self.store_factory is None or not game_id.isalnum():
            return session
        return await self._restore(game_id)

    async def _restore(self, game_id: str) -> Optional[GameSession]:
        engine = GameEngine(GameConfig(log_limit=self.log_limit))
        session = GameSession(engine, self.store_factory(game_id))
        if session.resume() is None:
            return None

        async with self._lock:
            if game_id in self._games:
                return self._games[game_id]
            self._games[game_id] = session
            self._locks[game_id] = asyncio.Lock()
        logger.info("Restored game %s from storage", game_id)
        return session

    def lock_for(self, game_id: str) -> asyncio.Lock:
        try:
            return self._locks[game_id]
        except KeyError:
            raise GameNotFoundError(game_id) from None

    async def remove(self, game_id: str) -> bool:
        """Forget a game and delete its save."""
        async with self._lock:
            session = self._games.pop(game_id, None)
            self._locks.pop(game_id, None)
        if session is None:
            return False
        if session.store is not None:
            session.store.clear()
        return True
