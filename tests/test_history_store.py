"""Tests for HistoryStore."""

from uuid import uuid4

import pytest

from rasa_session.core.conversation import HistoryStore, MessageClassifier
from rasa_session.core.errors import MessageNotFound, OptionNotFound
from rasa_session.core.models import Message, MessageKind


def _text(text: str, received: bool = True) -> Message:
    return Message(kind=MessageKind.TEXT, received=received, text=text)


class TestHistoryStore:
    """Test cases for HistoryStore."""

    @pytest.fixture
    def store(self):
        return HistoryStore()

    @pytest.fixture
    def quick_reply(self, quick_reply_payload):
        return MessageClassifier.build_message(quick_reply_payload)

    def test_append_preserves_order(self, store):
        messages = [_text("one"), _text("two"), _text("three")]
        for message in messages:
            store.append(message)
        assert [m.text for m in store] == ["one", "two", "three"]
        assert len(store) == 3

    def test_find_by_id(self, store):
        message = _text("hello")
        store.append(message)
        assert store.find_by_id(message.id) is message
        assert store.find_by_id(uuid4()) is None

    def test_resolve_quick_reply_marks_single_option(self, store, quick_reply):
        store.append(quick_reply)
        resolved = store.resolve_quick_reply(quick_reply.id, 1)

        assert resolved.clicked is True
        assert [o.clicked for o in resolved.quick_replies] == [False, True]
        assert store.find_by_id(quick_reply.id) == resolved

    def test_resolve_quick_reply_is_copy_on_write(self, store, quick_reply):
        store.append(quick_reply)
        before = store.snapshot()
        store.resolve_quick_reply(quick_reply.id, 0)

        assert before[0] is quick_reply
        assert quick_reply.clicked is False
        assert all(o.clicked is False for o in quick_reply.quick_replies)

    def test_resolve_again_moves_the_click(self, store, quick_reply):
        store.append(quick_reply)
        store.resolve_quick_reply(quick_reply.id, 0)
        resolved = store.resolve_quick_reply(quick_reply.id, 1)
        assert [o.clicked for o in resolved.quick_replies] == [False, True]

    def test_resolve_keeps_position(self, store, quick_reply):
        store.append(_text("before"))
        store.append(quick_reply)
        store.append(_text("after"))
        store.resolve_quick_reply(quick_reply.id, 0)
        assert [m.id for m in store][1] == quick_reply.id

    def test_resolve_unknown_message_raises(self, store):
        with pytest.raises(MessageNotFound):
            store.resolve_quick_reply(uuid4(), 0)

    def test_resolve_out_of_range_option_raises(self, store, quick_reply):
        store.append(quick_reply)
        with pytest.raises(OptionNotFound):
            store.resolve_quick_reply(quick_reply.id, 5)
        with pytest.raises(OptionNotFound):
            store.resolve_quick_reply(quick_reply.id, -1)

    def test_remove_by_id_preserves_remaining_order(self, store):
        messages = [_text("a"), _text("b"), _text("c")]
        for message in messages:
            store.append(message)

        assert store.remove_by_id(messages[1].id) is True
        assert [m.text for m in store] == ["a", "c"]
        assert store.remove_by_id(messages[1].id) is False

    def test_replace_all(self, store):
        store.append(_text("old"))
        store.replace_all([_text("new", received=False)])
        assert [m.text for m in store] == ["new"]

    def test_snapshot_is_detached(self, store):
        store.append(_text("a"))
        snapshot = store.snapshot()
        store.append(_text("b"))
        assert len(snapshot) == 1
