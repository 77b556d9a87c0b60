"""Shared fixtures for session client tests."""

from __future__ import annotations

from typing import Any, Dict, List, Tuple

import pytest

from rasa_session.core.config import ClientConfig
from rasa_session.core.connection_manager import ConnectionManager
from rasa_session.transports.i_connection import EventHandler, IConnection


class FakeConnection(IConnection):
    """In-memory transport that records emits and lets tests fire events."""

    def __init__(self) -> None:
        self.handlers: Dict[str, List[EventHandler]] = {}
        self.emitted: List[Tuple[str, Any]] = []
        self.connect_calls = 0
        self.disconnect_calls = 0
        self.connect_error: Exception | None = None

    def on(self, event: str, handler: EventHandler) -> None:
        self.handlers.setdefault(event, []).append(handler)

    async def connect(self) -> None:
        self.connect_calls += 1
        if self.connect_error is not None:
            raise self.connect_error

    async def emit(self, event: str, data: Any) -> None:
        self.emitted.append((event, data))

    async def disconnect(self) -> None:
        self.disconnect_calls += 1

    def fire(self, event: str, *args: Any) -> None:
        for handler in self.handlers.get(event, []):
            handler(*args)

    def emitted_events(self, event: str) -> List[Any]:
        return [data for name, data in self.emitted if name == event]


@pytest.fixture
def connection():
    return FakeConnection()


@pytest.fixture
def client_config():
    return ClientConfig(server_url="http://localhost:5005")


@pytest.fixture
def manager(client_config, connection):
    return ConnectionManager(client_config, connection=connection)


@pytest.fixture
def quick_reply_payload():
    return {
        "text": "Do you want to continue?",
        "quick_replies": [
            {"content_type": "text", "title": "Yes", "payload": "/yes"},
            {"content_type": "text", "title": "No", "payload": "no thanks"},
        ],
    }
