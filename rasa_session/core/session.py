"""Session handshake with the Rasa socket.io channel."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Dict, Optional

from .models import Session

if TYPE_CHECKING:
    from ..transports.i_connection import IConnection

LOGGER = logging.getLogger(__name__)

SESSION_REQUEST_EVENT = "session_request"


class SessionNegotiator:
    """Requests, confirms and attaches the session token."""

    def __init__(self, connection: IConnection, session: Session) -> None:
        self._connection = connection
        self._session = session

    @property
    def session_id(self) -> Optional[str]:
        return self._session.session_id

    async def request_session(self) -> None:
        """Ask the server for a session, resuming the known one if any."""
        data: Dict[str, Any] = {}
        if self._session.session_id:
            data["session_id"] = self._session.session_id
        LOGGER.info(
            "Requesting session %s",
            self._session.session_id or "(new)",
        )
        await self._connection.emit(SESSION_REQUEST_EVENT, data)

    def confirm(self, session_id: Any) -> bool:
        if not isinstance(session_id, str) or not session_id:
            LOGGER.warning("Ignoring session confirmation without a token: %r", session_id)
            return False
        self._session.session_id = session_id
        self._session.confirmed_at = datetime.now(timezone.utc)
        LOGGER.info("Session confirmed: %s", session_id)
        return True

    def outbound(self, message: Any) -> Dict[str, Any]:
        return {"session_id": self._session.session_id or "", "message": message}

    def clear(self) -> None:
        self._session.session_id = None
        self._session.confirmed_at = None
