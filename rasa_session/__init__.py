"""Client-side session and history manager for Rasa's socket.io channel."""

from .core import (
    ClientConfig,
    ConnectionManager,
    ConnectionState,
    Message,
    MessageKind,
    QuickReplyAction,
    QuickReplyOption,
    load_config,
)

__all__ = [
    "ClientConfig",
    "ConnectionManager",
    "ConnectionState",
    "Message",
    "MessageKind",
    "QuickReplyAction",
    "QuickReplyOption",
    "load_config",
]
