"""Tests for SessionNegotiator."""

import pytest

from rasa_session.core.models import Session
from rasa_session.core.session import SESSION_REQUEST_EVENT, SessionNegotiator


class TestSessionNegotiator:
    """Test cases for the session handshake."""

    @pytest.fixture
    def session(self):
        return Session()

    @pytest.fixture
    def negotiator(self, connection, session):
        return SessionNegotiator(connection, session)

    @pytest.mark.asyncio
    async def test_first_request_carries_no_token(self, negotiator, connection):
        await negotiator.request_session()
        assert connection.emitted == [(SESSION_REQUEST_EVENT, {})]

    @pytest.mark.asyncio
    async def test_request_resumes_known_token(self, negotiator, connection):
        negotiator.confirm("abc")
        await negotiator.request_session()
        assert connection.emitted == [(SESSION_REQUEST_EVENT, {"session_id": "abc"})]

    def test_confirm_sets_session(self, negotiator, session):
        assert negotiator.confirm("abc") is True
        assert session.session_id == "abc"
        assert session.confirmed_at is not None
        assert session.is_confirmed

    @pytest.mark.parametrize("token", [None, "", 123, {"session_id": "abc"}])
    def test_confirm_rejects_missing_token(self, negotiator, session, token):
        assert negotiator.confirm(token) is False
        assert session.session_id is None

    def test_outbound_attaches_token(self, negotiator):
        assert negotiator.outbound("hi") == {"session_id": "", "message": "hi"}
        negotiator.confirm("abc")
        assert negotiator.outbound({"x": 1}) == {"session_id": "abc", "message": {"x": 1}}

    def test_clear(self, negotiator, session):
        negotiator.confirm("abc")
        negotiator.clear()
        assert session.session_id is None
        assert session.confirmed_at is None
