"""Core domain logic for the Rasa session client."""

from .config import ClientConfig, load_config
from .errors import (
    ConfigError,
    ManagerClosed,
    MessageNotFound,
    OptionNotFound,
    ProtocolViolation,
    RasaSessionError,
    TransportError,
)
from .models import (
    Attachment,
    ConnectionState,
    ContentType,
    Message,
    MessageKind,
    QuickReplyAction,
    QuickReplyOption,
    Session,
)
from .conversation import HistoryStore, MessageClassifier, QuickReplyInteractionHandler
from .session import SessionNegotiator
from .connection_manager import ConnectionManager

__all__ = [
    "ClientConfig",
    "load_config",
    "Attachment",
    "ConnectionState",
    "ContentType",
    "Message",
    "MessageKind",
    "QuickReplyAction",
    "QuickReplyOption",
    "Session",
    "RasaSessionError",
    "ConfigError",
    "TransportError",
    "ManagerClosed",
    "ProtocolViolation",
    "MessageNotFound",
    "OptionNotFound",
    "HistoryStore",
    "MessageClassifier",
    "QuickReplyInteractionHandler",
    "SessionNegotiator",
    "ConnectionManager",
]
