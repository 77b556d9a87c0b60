"""Click handling for quick-reply option groups."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Callable, Optional

from ..errors import MessageNotFound
from ..models import Message, QuickReplyAction
from .history import HistoryStore

LOGGER = logging.getLogger(__name__)

COMMAND_PREFIX = "/"

UtterCallback = Callable[[str], Any]


def is_command(payload: str) -> bool:
    return payload.startswith(COMMAND_PREFIX)


class QuickReplyInteractionHandler:
    """Resolves clicks on quick-reply options against the live history."""

    def __init__(self, history: HistoryStore) -> None:
        self._history = history

    @staticmethod
    def bind(message: Message) -> Message:
        """Return a copy of ``message`` whose options carry click actions."""
        if not message.quick_replies:
            return message
        return replace(
            message,
            quick_replies=tuple(
                replace(option, action=QuickReplyAction(message.id, index))
                for index, option in enumerate(message.quick_replies)
            ),
        )

    def click(self, action: QuickReplyAction, utter: UtterCallback) -> Optional[Message]:
        """
        Apply a click on one quick-reply option.

        The option payload is uttered. A command payload (leading ``/``) keeps
        the message in its resolved state; any other payload removes the
        message, since the uttered text replaces it in the log.

        A group that is already resolved ignores further clicks: nothing is
        uttered and None is returned.

        Args:
            action: The descriptor attached to the clicked option
            utter: Records the payload as a user utterance

        Returns:
            The resolved message if it stayed in the history, else None

        Raises:
            MessageNotFound: The message is no longer in the history
            OptionNotFound: The option index is out of range
        """
        current = self._history.find_by_id(action.message_id)
        if current is None:
            raise MessageNotFound(action.message_id)
        if current.clicked:
            LOGGER.debug("Ignoring click on resolved quick reply %s", action.message_id)
            return None

        resolved = self._history.resolve_quick_reply(action.message_id, action.option_index)
        option = resolved.quick_replies[action.option_index]
        utter(option.payload)
        LOGGER.debug("Clicked on option %r of message %s", option.title, resolved.id)

        if is_command(option.payload):
            return resolved

        self._history.remove_by_id(resolved.id)
        return None
