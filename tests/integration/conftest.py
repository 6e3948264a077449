import pytest

from cashflow.data import JsonSnapshotStore
from cashflow.server.app import registry


@pytest.fixture(autouse=True)
def saves_dir(tmp_path, monkeypatch):
    """Keep the server's saved games inside the test's temporary directory."""
    monkeypatch.setattr(registry, "store_factory", lambda game_id: JsonSnapshotStore(tmp_path / f"{game_id}.json"))
    return tmp_path
