"""socket.io transport using python-socketio's asyncio client."""

from __future__ import annotations

import logging
from typing import Any, Dict, List

import socketio
from socketio import exceptions as sio_exceptions

from .i_connection import (
    BOT_UTTERED_EVENT,
    CONNECT_EVENT,
    DISCONNECT_EVENT,
    ERROR_EVENT,
    SESSION_CONFIRM_EVENT,
    EventHandler,
    IConnection,
)
from ..core.errors import TransportError

LOGGER = logging.getLogger(__name__)

DEFAULT_SOCKET_PATH = "/socket.io"


class SocketIOConnection(IConnection):
    def __init__(
        self,
        server_url: str,
        socket_path: str = DEFAULT_SOCKET_PATH,
        reconnection: bool = True,
    ) -> None:
        self._server_url = server_url
        self._socket_path = socket_path
        self._client = socketio.AsyncClient(reconnection=reconnection)
        self._handlers: Dict[str, List[EventHandler]] = {}

        self._client.on("connect", self._on_connect)
        self._client.on("disconnect", self._on_disconnect)
        self._client.on("connect_error", self._on_connect_error)
        self._client.on("error", self._on_error)
        self._client.on(SESSION_CONFIRM_EVENT, self._on_session_confirm)
        self._client.on(BOT_UTTERED_EVENT, self._on_bot_uttered)

    def on(self, event: str, handler: EventHandler) -> None:
        self._handlers.setdefault(event, []).append(handler)

    async def connect(self) -> None:
        LOGGER.info("Connecting to %s (path %s)", self._server_url, self._socket_path)
        try:
            await self._client.connect(self._server_url, socketio_path=self._socket_path)
        except sio_exceptions.ConnectionError as exc:
            raise TransportError(f"Failed to connect to {self._server_url}: {exc}") from exc

    async def emit(self, event: str, data: Any) -> None:
        try:
            await self._client.emit(event, data)
        except sio_exceptions.SocketIOError as exc:
            raise TransportError(f"Failed to emit {event}: {exc}") from exc

    async def disconnect(self) -> None:
        await self._client.disconnect()

    def _dispatch(self, event: str, *args: Any) -> None:
        for handler in self._handlers.get(event, []):
            handler(*args)

    async def _on_connect(self) -> None:
        self._dispatch(CONNECT_EVENT)

    async def _on_disconnect(self, reason: Any = None) -> None:
        self._dispatch(DISCONNECT_EVENT, reason)

    async def _on_connect_error(self, data: Any = None) -> None:
        LOGGER.error("socket.io connection error: %s", data)
        self._dispatch(ERROR_EVENT, data)

    async def _on_error(self, data: Any = None) -> None:
        self._dispatch(ERROR_EVENT, data)

    async def _on_session_confirm(self, session_id: Any = None) -> None:
        self._dispatch(SESSION_CONFIRM_EVENT, session_id)

    async def _on_bot_uttered(self, message: Any = None) -> None:
        self._dispatch(BOT_UTTERED_EVENT, message)
