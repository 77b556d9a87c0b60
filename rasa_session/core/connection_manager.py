"""Connection and session state machine for one Rasa conversation."""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from functools import partial
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple, Union

from ..transports.i_connection import (
    BOT_UTTERED_EVENT,
    CONNECT_EVENT,
    DISCONNECT_EVENT,
    ERROR_EVENT,
    SESSION_CONFIRM_EVENT,
    IConnection,
)
from ..transports.socketio_connection import SocketIOConnection
from .config import ClientConfig
from .conversation import HistoryStore, MessageClassifier, QuickReplyInteractionHandler
from .errors import ManagerClosed, TransportError
from .models import ConnectionState, Message, MessageKind, QuickReplyAction, Session
from .session import SessionNegotiator

LOGGER = logging.getLogger(__name__)

USER_UTTERED_EVENT = "user_uttered"

Utterance = Union[str, Dict[str, Any]]
ManagerListener = Callable[["ConnectionManager"], None]

_UTTER_JOB = "utter"
_CLICK_JOB = "click"


@dataclass
class _Job:
    name: str
    args: Tuple[Any, ...] = ()
    future: Optional[asyncio.Future] = None


class ConnectionManager:
    """Owns the connection, session token and history of one client.

    Transport events, utterances and quick-reply clicks are queued and run one
    at a time by a single dispatch task, so no two mutations of the state or
    the history ever interleave.
    """

    def __init__(self, config: ClientConfig, connection: Optional[IConnection] = None) -> None:
        if connection is None:
            connection = SocketIOConnection(
                config.server_url,
                socket_path=config.socket_path,
                reconnection=config.reconnection,
            )
        self._config = config
        self._connection = connection
        self._state = ConnectionState.CONNECTING
        self._session = Session()
        self._history = HistoryStore()
        self._negotiator = SessionNegotiator(connection, self._session)
        self._quick_replies = QuickReplyInteractionHandler(self._history)
        self._queue: asyncio.Queue[_Job] = asyncio.Queue()
        self._dispatch_task: Optional[asyncio.Task] = None
        self._listeners: List[ManagerListener] = []
        self._closed = False
        self._handlers: Dict[str, Callable[..., Awaitable[Any]]] = {
            CONNECT_EVENT: self._handle_connect,
            SESSION_CONFIRM_EVENT: self._handle_session_confirm,
            BOT_UTTERED_EVENT: self._handle_bot_uttered,
            DISCONNECT_EVENT: self._handle_disconnect,
            ERROR_EVENT: self._handle_error,
            _UTTER_JOB: self._handle_utter,
            _CLICK_JOB: self._handle_click,
        }
        for event in (
            CONNECT_EVENT,
            SESSION_CONFIRM_EVENT,
            BOT_UTTERED_EVENT,
            DISCONNECT_EVENT,
            ERROR_EVENT,
        ):
            self._connection.on(event, partial(self._submit, event))

    async def __aenter__(self) -> ConnectionManager:
        try:
            await self.start()
        except BaseException:
            await self.shutdown()
            raise
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.shutdown()

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def history(self) -> Tuple[Message, ...]:
        return self._history.snapshot()

    @property
    def session_id(self) -> Optional[str]:
        return self._session.session_id

    @property
    def is_closed(self) -> bool:
        return self._closed

    def add_listener(self, listener: ManagerListener) -> None:
        """Call ``listener(manager)`` after every handled event or command."""
        self._listeners.append(listener)

    def replace_history(self, messages: Any) -> None:
        """Overwrite the history. Invariants are the caller's responsibility."""
        self._history.replace_all(messages)
        self._notify_listeners()

    async def start(self) -> None:
        """Start dispatching and open the connection.

        Raises:
            ManagerClosed: The manager was already shut down
            TransportError: The connection could not be opened
        """
        if self._closed:
            raise ManagerClosed("Connection manager has been shut down")
        self._ensure_dispatching()
        self._set_state(ConnectionState.CONNECTING)
        try:
            await self._connection.connect()
        except TransportError:
            self._set_state(ConnectionState.ERROR)
            raise

    async def utter(self, payload: Utterance) -> Message:
        """Send a user utterance and record it in the history."""
        return await self._call(_UTTER_JOB, payload)

    async def click(self, action: QuickReplyAction) -> Optional[Message]:
        """Click a quick-reply option.

        Returns the resolved message when it stays in the history, None when
        it was removed or the group had already been resolved.

        Raises:
            MessageNotFound: The message is not in the history
            OptionNotFound: The option index is out of range
        """
        return await self._call(_CLICK_JOB, action)

    async def join(self) -> None:
        """Wait until every queued event has been handled."""
        if self._closed:
            return
        self._ensure_dispatching()
        await self._queue.join()

    async def shutdown(self) -> None:
        """Stop handling events and release the connection. Idempotent."""
        if self._closed:
            return
        self._closed = True
        LOGGER.info("Shutting down connection to %s", self._config.server_url)
        try:
            if self._dispatch_task is not None:
                self._dispatch_task.cancel()
                await asyncio.gather(self._dispatch_task, return_exceptions=True)
                self._dispatch_task = None
            self._fail_queued()
        finally:
            try:
                await self._connection.disconnect()
            finally:
                self._negotiator.clear()
                self._state = ConnectionState.DISCONNECTED

    def _submit(self, name: str, *args: Any) -> None:
        if self._closed:
            LOGGER.debug("Ignoring %s event after shutdown", name)
            return
        self._queue.put_nowait(_Job(name, args))

    async def _call(self, name: str, *args: Any) -> Any:
        if self._closed:
            raise ManagerClosed("Connection manager has been shut down")
        self._ensure_dispatching()
        future = asyncio.get_running_loop().create_future()
        self._queue.put_nowait(_Job(name, args, future))
        return await future

    def _ensure_dispatching(self) -> None:
        if self._dispatch_task is None:
            self._dispatch_task = asyncio.create_task(self._dispatch_loop())

    async def _dispatch_loop(self) -> None:
        while True:
            job = await self._queue.get()
            try:
                await self._run(job)
            except asyncio.CancelledError:
                _fail(job, ManagerClosed(f"Shut down while handling {job.name}"))
                raise
            finally:
                self._queue.task_done()

    async def _run(self, job: _Job) -> None:
        if self._closed:
            _fail(job, ManagerClosed("Connection manager has been shut down"))
            return
        try:
            result = await self._handlers[job.name](*job.args)
        except Exception as exc:
            if job.future is None:
                LOGGER.exception("Failed to handle %s event", job.name)
            else:
                _fail(job, exc)
        else:
            if job.future is not None and not job.future.done():
                job.future.set_result(result)
        self._notify_listeners()

    def _fail_queued(self) -> None:
        while not self._queue.empty():
            job = self._queue.get_nowait()
            _fail(job, ManagerClosed("Connection manager has been shut down"))
            self._queue.task_done()

    def _notify_listeners(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                LOGGER.exception("History listener %r failed", listener)

    def _set_state(self, state: ConnectionState) -> None:
        if state is not self._state:
            LOGGER.debug("Connection state %s -> %s", self._state.value, state.value)
        self._state = state

    async def _transmit(self, awaitable: Awaitable[None]) -> None:
        try:
            await awaitable
        except TransportError:
            self._set_state(ConnectionState.ERROR)
            raise

    def _record_utterance(self, payload: Utterance) -> Tuple[Message, Dict[str, Any]]:
        text = payload if isinstance(payload, str) else json.dumps(payload, sort_keys=True)
        message = Message(
            kind=MessageKind.TEXT,
            received=False,
            text=text,
            raw={"message": payload},
        )
        self._history.append(message)
        if self._state is not ConnectionState.ERROR:
            self._set_state(ConnectionState.WAITING_FOR_RESPONSE)
        return message, self._negotiator.outbound(payload)

    async def _handle_connect(self) -> None:
        self._set_state(ConnectionState.CONNECTED)
        LOGGER.info("Connected to %s", self._config.server_url)
        await self._transmit(self._negotiator.request_session())

    async def _handle_session_confirm(self, session_id: Any = None) -> None:
        if not self._negotiator.confirm(session_id):
            return
        if self._config.send_on_connect:
            await self._handle_utter(self._config.send_on_connect)

    async def _handle_utter(self, payload: Utterance) -> Message:
        message, outbound = self._record_utterance(payload)
        await self._transmit(self._connection.emit(USER_UTTERED_EVENT, outbound))
        return message

    async def _handle_click(self, action: QuickReplyAction) -> Optional[Message]:
        outbound: List[Dict[str, Any]] = []
        resolved = self._quick_replies.click(
            action,
            lambda payload: outbound.append(self._record_utterance(payload)[1]),
        )
        for data in outbound:
            await self._transmit(self._connection.emit(USER_UTTERED_EVENT, data))
        return resolved

    async def _handle_bot_uttered(self, payload: Any = None) -> None:
        message = self._quick_replies.bind(MessageClassifier.build_message(payload))
        self._history.append(message)
        self._set_state(ConnectionState.CONNECTED)
        LOGGER.debug("Bot uttered %s message %s", message.kind.value, message.id)

    async def _handle_disconnect(self, reason: Any = None) -> None:
        LOGGER.info("Disconnected: %s", reason)
        self._set_state(ConnectionState.DISCONNECTED)

    async def _handle_error(self, error: Any = None) -> None:
        LOGGER.error("Rasa connection error: %s", error)
        self._set_state(ConnectionState.ERROR)


def _fail(job: _Job, exc: BaseException) -> None:
    if job.future is not None and not job.future.done():
        job.future.set_exception(exc)
