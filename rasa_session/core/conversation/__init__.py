"""Conversation log - classification, history and quick replies."""

from .classifier import MessageClassifier
from .history import HistoryStore
from .quick_replies import COMMAND_PREFIX, QuickReplyInteractionHandler, is_command

__all__ = [
    "COMMAND_PREFIX",
    "HistoryStore",
    "MessageClassifier",
    "QuickReplyInteractionHandler",
    "is_command",
]
