"""Domain models for the Rasa session client."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Tuple
from uuid import UUID, uuid4


class ConnectionState(str, Enum):
    CONNECTING = "connecting"
    CONNECTED = "connected"
    WAITING_FOR_RESPONSE = "waiting_for_response"
    DISCONNECTED = "disconnected"
    ERROR = "error"


class MessageKind(str, Enum):
    TEXT = "text"
    ATTACHMENT = "attachment"
    QUICK_REPLY = "quick_reply"
    UNKNOWN = "unknown"


class ContentType(str, Enum):
    TEXT = "text"
    IMAGE = "image"


@dataclass(frozen=True)
class QuickReplyAction:
    """Points at one option of one quick-reply message in the history."""

    message_id: UUID
    option_index: int


@dataclass(frozen=True)
class QuickReplyOption:
    content_type: ContentType
    title: str
    payload: str
    clicked: bool = False
    action: Optional[QuickReplyAction] = None


@dataclass(frozen=True)
class Attachment:
    type: str
    src: Optional[str] = None


@dataclass(frozen=True)
class Message:
    kind: MessageKind
    received: bool
    text: Optional[str] = None
    attachment: Optional[Attachment] = None
    quick_replies: Tuple[QuickReplyOption, ...] = ()
    clicked: bool = False
    raw: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def clicked_option(self) -> Optional[QuickReplyOption]:
        for option in self.quick_replies:
            if option.clicked:
                return option
        return None


@dataclass
class Session:
    session_id: Optional[str] = None
    confirmed_at: Optional[datetime] = None

    @property
    def is_confirmed(self) -> bool:
        return self.session_id is not None
