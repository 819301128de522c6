import asyncio
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.main import app
from app.routers.deps import get_play_registry, get_store
from app.schemas.stop import Stop
from app.schemas.tour import Tour
from app.services.player import PlaySessionRegistry
from app.services.storage import MemoryStorage
from app.services.tour_store import TourStore

NOW = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


class TickingClock:
    """Deterministic clock that moves one second per call."""

    def __init__(self, start: datetime = NOW):
        self.current = start

    def __call__(self) -> datetime:
        self.current += timedelta(seconds=1)
        return self.current


def make_store(storage: MemoryStorage | None = None, clock=None, **settings) -> TourStore:
    store = TourStore(storage or MemoryStorage(), Settings(**settings), clock=clock or TickingClock())
    asyncio.run(store.load())
    return store


def make_tour(**fields) -> Tour:
    data = {"id": "t1", "name": "Test Tour", "is_active": True, "created_at": NOW, "updated_at": NOW}
    data.update(fields)
    return Tour(**data)


def make_stop(number: int, **fields) -> Stop:
    data = {"id": f"s{number}", "tour_id": "t1", "stop_number": number, "created_at": NOW}
    data.update(fields)
    return Stop(**data)


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def store(storage):
    return make_store(storage)


@pytest.fixture
def client(store):
    registry = PlaySessionRegistry()
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_play_registry] = lambda: registry
    yield TestClient(app)
    app.dependency_overrides.clear()
