"""Classify inbound agent payloads into the message vocabulary."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Tuple

from ..models import Attachment, ContentType, Message, MessageKind, QuickReplyOption

LOGGER = logging.getLogger(__name__)


class MessageClassifier:
    """Maps raw ``bot_uttered`` payloads to typed messages."""

    @staticmethod
    def classify(payload: Any) -> MessageKind:
        """
        Return the kind of an inbound payload.

        Presence of a field decides, not its value, and the first match wins:
        1. ``attachment`` -> ATTACHMENT
        2. ``quick_replies`` -> QUICK_REPLY
        3. ``text`` -> TEXT
        4. anything else -> UNKNOWN

        A payload carrying quick replies always has lead-in text as well, and
        an attachment may come with a caption, so the order matters.

        Args:
            payload: The untyped mapping received from the server

        Returns:
            Exactly one MessageKind; never raises
        """
        if not isinstance(payload, Mapping):
            return MessageKind.UNKNOWN

        if "attachment" in payload:
            return MessageKind.ATTACHMENT

        if "quick_replies" in payload:
            return MessageKind.QUICK_REPLY

        if "text" in payload:
            return MessageKind.TEXT

        return MessageKind.UNKNOWN

    @classmethod
    def build_message(cls, payload: Any) -> Message:
        """
        Build a received Message from a ``bot_uttered`` payload.

        Sub-fields that do not have the expected shape are dropped rather than
        rejected; the original mapping is kept on ``raw`` for the consumer.
        """
        kind = cls.classify(payload)
        raw: Dict[str, Any] = dict(payload) if isinstance(payload, Mapping) else {"payload": payload}
        LOGGER.debug("Classified inbound payload as %s", kind.value)

        text = raw.get("text")
        return Message(
            kind=kind,
            received=True,
            text=text if isinstance(text, str) else None,
            attachment=_parse_attachment(raw.get("attachment")),
            quick_replies=_parse_quick_replies(raw.get("quick_replies")),
            raw=raw,
        )


def _parse_attachment(value: Any) -> Optional[Attachment]:
    if not isinstance(value, Mapping):
        return None
    inner = value.get("payload")
    src = inner.get("src") if isinstance(inner, Mapping) else None
    return Attachment(
        type=str(value.get("type") or "image"),
        src=src if isinstance(src, str) else None,
    )


def _parse_quick_replies(value: Any) -> Tuple[QuickReplyOption, ...]:
    if not isinstance(value, list):
        return ()

    options: List[QuickReplyOption] = []
    for item in value:
        if not isinstance(item, Mapping):
            LOGGER.debug("Skipping malformed quick reply option: %r", item)
            continue
        options.append(
            QuickReplyOption(
                content_type=_parse_content_type(item.get("content_type")),
                title=str(item.get("title") or ""),
                payload=str(item.get("payload") or ""),
                clicked=False,
            )
        )
    return tuple(options)


def _parse_content_type(value: Any) -> ContentType:
    try:
        return ContentType(value)
    except ValueError:
        return ContentType.TEXT
