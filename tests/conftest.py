from datetime import datetime, timezone

import pytest

from studydeck.clock import FixedClock
from studydeck.store import MemoryStore, SqliteStore

T0 = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def tmp_db(tmp_path):
    """Provide a temporary SQLite database path for tests."""
    db_path = str(tmp_path / "test_studydeck.db")
    return db_path


@pytest.fixture
def now():
    return T0


@pytest.fixture
def clock():
    return FixedClock(T0)


@pytest.fixture(params=["memory", "sqlite"])
def store(request, tmp_db):
    if request.param == "memory":
        return MemoryStore()
    return SqliteStore(tmp_db)
