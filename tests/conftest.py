import pytest
import socketio
from fastapi.testclient import TestClient

from relay.core.config import Settings
from relay.db.store import MessageStore
from relay.main import create_app


@pytest.fixture
def sio():
    return socketio.AsyncServer(async_mode="asgi")


@pytest.fixture
def emitted(sio, monkeypatch):
    """Every ``sio.emit`` call as ``(event, data, to)``; ``to`` is None for broadcasts."""
    events = []

    async def fake_emit(event, data=None, to=None, **kwargs):
        events.append((event, data, to))

    monkeypatch.setattr(sio, "emit", fake_emit)
    return events


@pytest.fixture
def store():
    return MessageStore()


@pytest.fixture
def app(store, sio, emitted):
    return create_app(settings=Settings(USE_IN_MEMORY_STORAGE=True), store=store, sio=sio)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c
