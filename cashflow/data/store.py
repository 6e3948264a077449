"""
Saved-game stores.

A store holds at most one game. Reading never raises: a missing, unreadable
or malformed save is logged and reported as "no saved game".
"""

import json
import logging
import os
import random
from pathlib import Path
from typing import Optional, Protocol, Union

from pydantic import ValidationError

from cashflow.exceptions import PersistenceError
from cashflow.game.state import GameSnapshot
from cashflow.snapshot import deserialize_snapshot, serialize_snapshot

logger = logging.getLogger(__name__)


class SnapshotStore(Protocol):
    def load(self, rng: Optional[random.Random] = None) -> Optional[GameSnapshot]: ...

    def save(self, snapshot: GameSnapshot) -> None: ...

    def clear(self) -> None: ...


class JsonSnapshotStore:
    """Keeps the saved game in a single JSON file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def load(self, rng: Optional[random.Random] = None) -> Optional[GameSnapshot]:
        """Load the saved game; decks missing from the file are reshuffled with ``rng``."""
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            return deserialize_snapshot(data, rng)
        except (OSError, ValueError, ValidationError) as exc:
            logger.warning("Ignoring unreadable saved game at %s: %s", self.path, exc)
            return None

    def save(self, snapshot: GameSnapshot) -> None:
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(serialize_snapshot(snapshot)), encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as exc:
            raise PersistenceError(f"Could not save game to {self.path}: {exc}") from exc
        logger.debug("Saved game to %s (turn %d)", self.path, snapshot.turn_number)

    def clear(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as exc:
            raise PersistenceError(f"Could not clear saved game at {self.path}: {exc}") from exc
