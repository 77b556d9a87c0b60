"""Ordered, append-only conversation log."""

from __future__ import annotations

import logging
from dataclasses import replace
from threading import RLock
from typing import Iterable, Iterator, List, Optional, Tuple
from uuid import UUID

from ..errors import MessageNotFound, OptionNotFound
from ..models import Message

LOGGER = logging.getLogger(__name__)


class HistoryStore:
    """Thread-safe in-memory message log.

    Messages are never reordered. Besides ``append`` the only mutations are
    quick-reply resolution and removal of a whole message. Stored messages
    are immutable; a resolution swaps in an updated copy so snapshots handed
    to a renderer never change underneath it.
    """

    def __init__(self, messages: Iterable[Message] = ()) -> None:
        self._messages: List[Message] = list(messages)
        self._lock = RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(self.snapshot())

    def snapshot(self) -> Tuple[Message, ...]:
        with self._lock:
            return tuple(self._messages)

    def append(self, message: Message) -> None:
        with self._lock:
            self._messages.append(message)
        LOGGER.debug("Appended %s message %s", message.kind.value, message.id)

    def find_by_id(self, message_id: UUID) -> Optional[Message]:
        with self._lock:
            index = self._index_of(message_id)
            return self._messages[index] if index is not None else None

    def resolve_quick_reply(self, message_id: UUID, option_index: int) -> Message:
        """
        Mark one option of a quick-reply message as clicked.

        The message and the option at ``option_index`` get ``clicked=True``;
        every other option of the group gets ``clicked=False``.

        Raises:
            MessageNotFound: No message with ``message_id`` is in the log
            OptionNotFound: The message has no option at ``option_index``
        """
        with self._lock:
            index = self._index_of(message_id)
            if index is None:
                raise MessageNotFound(message_id)
            message = self._messages[index]
            if not 0 <= option_index < len(message.quick_replies):
                raise OptionNotFound(f"{message_id} has no option {option_index}")

            resolved = replace(
                message,
                clicked=True,
                quick_replies=tuple(
                    replace(option, clicked=i == option_index)
                    for i, option in enumerate(message.quick_replies)
                ),
            )
            self._messages[index] = resolved
        LOGGER.debug("Resolved option %d of message %s", option_index, message_id)
        return resolved

    def remove_by_id(self, message_id: UUID) -> bool:
        with self._lock:
            index = self._index_of(message_id)
            if index is None:
                return False
            del self._messages[index]
        LOGGER.debug("Removed message %s", message_id)
        return True

    def replace_all(self, messages: Iterable[Message]) -> None:
        """Overwrite the whole log. No invariant is checked."""
        with self._lock:
            self._messages = list(messages)

    def _index_of(self, message_id: UUID) -> Optional[int]:
        for index, message in enumerate(self._messages):
            if message.id == message_id:
                return index
        return None
