"""
Repository for saved games in a relational database.

Implements the snapshot store interface on top of the `saved_games` table.
"""

import logging
import random
from typing import Optional

from pydantic import ValidationError
from sqlalchemy import Engine, delete, select
from sqlalchemy.exc import SQLAlchemyError

from cashflow.data.models import Base, SavedGame
from cashflow.data.session import session_scope
from cashflow.exceptions import PersistenceError
from cashflow.game.state import GameSnapshot
from cashflow.snapshot import deserialize_snapshot, serialize_snapshot

logger = logging.getLogger(__name__)

DEFAULT_SLOT = "default"


class SqlSnapshotStore:
    """
    Snapshot store backed by SQLAlchemy.

    Each store instance owns one slot; several games can share a database by
    using different slots.
    """

    def __init__(self, engine: Engine, slot: str = DEFAULT_SLOT, create_tables: bool = True):
        self.engine = engine
        self.slot = slot
        if create_tables:
            Base.metadata.create_all(engine)

    def load(self, rng: Optional[random.Random] = None) -> Optional[GameSnapshot]:
        try:
            with session_scope(self.engine) as session:
                row = session.scalar(select(SavedGame).where(SavedGame.slot == self.slot))
                if row is None:
                    return None
                data = row.state
        except SQLAlchemyError as exc:
            logger.warning("Could not read saved game %r: %s", self.slot, exc)
            return None

        try:
            return deserialize_snapshot(data, rng)
        except (ValidationError, ValueError) as exc:
            logger.warning("Ignoring malformed saved game %r: %s", self.slot, exc)
            return None

    def save(self, snapshot: GameSnapshot) -> None:
        state = serialize_snapshot(snapshot)
        try:
            with session_scope(self.engine) as session:
                row = session.scalar(select(SavedGame).where(SavedGame.slot == self.slot))
                if row is None:
                    row = SavedGame(slot=self.slot, state=state)
                    session.add(row)
                else:
                    row.state = state
                row.game_phase = snapshot.game_phase.value
                row.turn_number = snapshot.turn_number
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Could not save game {self.slot!r}: {exc}") from exc
        logger.debug("Saved game %r (turn %d)", self.slot, snapshot.turn_number)

    def clear(self) -> None:
        try:
            with session_scope(self.engine) as session:
                session.execute(delete(SavedGame).where(SavedGame.slot == self.slot))
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Could not clear saved game {self.slot!r}: {exc}") from exc
