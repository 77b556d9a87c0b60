"""Connection abstraction."""

from __future__ import annotations

import abc
from typing import Any, Callable

EventHandler = Callable[..., None]

CONNECT_EVENT = "connect"
DISCONNECT_EVENT = "disconnect"
ERROR_EVENT = "error"
SESSION_CONFIRM_EVENT = "session_confirm"
BOT_UTTERED_EVENT = "bot_uttered"


class IConnection(abc.ABC):
    """Abstraction for event-based duplex transports (socket.io, test fakes)."""

    @abc.abstractmethod
    def on(self, event: str, handler: EventHandler) -> None:
        """Register a synchronous handler for a lifecycle or server event.

        Lifecycle events are ``connect``, ``disconnect`` (reason) and
        ``error`` (error detail).
        """

    @abc.abstractmethod
    async def connect(self) -> None:
        """Open the connection."""

    @abc.abstractmethod
    async def emit(self, event: str, data: Any) -> None:
        """Send an event without waiting for an acknowledgement."""

    @abc.abstractmethod
    async def disconnect(self) -> None:
        """Close the connection. Safe to call more than once."""
