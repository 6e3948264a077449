"""
Persistence layer for saved games.

Provides a JSON file store and a SQLAlchemy-backed store behind a common
`SnapshotStore` interface.
"""

from pathlib import Path
from typing import Optional

from cashflow.data.config import StorageBackend, StorageSettings, get_storage_settings
from cashflow.data.models import Base, SavedGame
from cashflow.data.repository import DEFAULT_SLOT, SqlSnapshotStore
from cashflow.data.session import close_db, init_db, session_scope
from cashflow.data.store import JsonSnapshotStore, SnapshotStore


def create_store(settings: Optional[StorageSettings] = None, slot: str = DEFAULT_SLOT) -> SnapshotStore:
    """
    Build the snapshot store selected by storage settings.

    Each slot holds one game: a row of the `saved_games` table for the SQL
    backend, a file next to the configured JSON path otherwise.
    """
    settings = settings or get_storage_settings()
    if settings.storage_backend == StorageBackend.SQL:
        return SqlSnapshotStore(init_db(settings.database_url, settings), slot=slot)

    path = Path(settings.json_path)
    if slot != DEFAULT_SLOT:
        path = path.with_name(f"{path.stem}_{slot}{path.suffix}")
    return JsonSnapshotStore(path)


__all__ = [
    "Base",
    "SavedGame",
    "SnapshotStore",
    "JsonSnapshotStore",
    "SqlSnapshotStore",
    "StorageBackend",
    "StorageSettings",
    "get_storage_settings",
    "create_store",
    "DEFAULT_SLOT",
    "init_db",
    "close_db",
    "session_scope",
]
