"""Tests for MessageClassifier."""

import pytest

from rasa_session.core.conversation import MessageClassifier
from rasa_session.core.models import ContentType, MessageKind


class TestMessageClassifier:
    """Test cases for MessageClassifier."""

    def test_attachment_wins_over_text(self):
        payload = {
            "text": "caption",
            "attachment": {"type": "image", "payload": {"src": "https://example.com/cat.png"}},
        }
        assert MessageClassifier.classify(payload) is MessageKind.ATTACHMENT

    def test_quick_replies_win_over_text(self):
        payload = {"text": "Pick one", "quick_replies": []}
        assert MessageClassifier.classify(payload) is MessageKind.QUICK_REPLY

    def test_attachment_wins_over_quick_replies(self):
        payload = {"attachment": {}, "quick_replies": [], "text": "x"}
        assert MessageClassifier.classify(payload) is MessageKind.ATTACHMENT

    def test_text_only(self):
        assert MessageClassifier.classify({"text": "Hello"}) is MessageKind.TEXT

    def test_presence_not_value_decides(self):
        """A field present with a null value still counts."""
        assert MessageClassifier.classify({"text": None}) is MessageKind.TEXT

    @pytest.mark.parametrize("payload", [{}, {"custom": {"foo": 1}}, None, "hello", 42, ["text"]])
    def test_unrecognized_shapes_are_unknown(self, payload):
        assert MessageClassifier.classify(payload) is MessageKind.UNKNOWN

    def test_build_text_message(self):
        message = MessageClassifier.build_message({"text": "Hi there"})
        assert message.kind is MessageKind.TEXT
        assert message.received is True
        assert message.text == "Hi there"
        assert message.quick_replies == ()
        assert message.clicked is False

    def test_build_attachment_message(self):
        message = MessageClassifier.build_message(
            {"attachment": {"type": "image", "payload": {"src": "https://example.com/cat.png"}}}
        )
        assert message.kind is MessageKind.ATTACHMENT
        assert message.attachment is not None
        assert message.attachment.type == "image"
        assert message.attachment.src == "https://example.com/cat.png"

    def test_build_quick_reply_message(self, quick_reply_payload):
        message = MessageClassifier.build_message(quick_reply_payload)
        assert message.kind is MessageKind.QUICK_REPLY
        assert message.text == "Do you want to continue?"
        assert [o.payload for o in message.quick_replies] == ["/yes", "no thanks"]
        assert all(o.clicked is False for o in message.quick_replies)
        assert message.quick_replies[0].content_type is ContentType.TEXT

    def test_malformed_options_degrade(self):
        message = MessageClassifier.build_message(
            {"quick_replies": [{"content_type": "video", "title": "A"}, "junk"]}
        )
        assert len(message.quick_replies) == 1
        option = message.quick_replies[0]
        assert option.content_type is ContentType.TEXT
        assert option.payload == ""

    def test_unknown_message_keeps_raw_payload(self):
        message = MessageClassifier.build_message({"custom": {"blocks": [1, 2]}})
        assert message.kind is MessageKind.UNKNOWN
        assert message.raw == {"custom": {"blocks": [1, 2]}}

    def test_built_messages_get_distinct_ids(self):
        first = MessageClassifier.build_message({"text": "a"})
        second = MessageClassifier.build_message({"text": "a"})
        assert first.id != second.id
