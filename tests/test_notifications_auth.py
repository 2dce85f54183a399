"""Tests for notification sinks and the auth gate."""
import logging

import pytest

from checkout_form.auth import ANONYMOUS, AuthGate
from checkout_form.errors import AuthenticationError
from checkout_form.notifications import (
    PURCHASE_SUCCEEDED,
    InMemoryNotificationSink,
    LoggingNotificationSink,
    payment_failed,
)


class TestInMemorySink:
    def test_drain_returns_in_order_and_clears(self):
        sink = InMemoryNotificationSink()
        sink.notify(payment_failed("declined"))
        sink.notify(PURCHASE_SUCCEEDED)
        drained = sink.drain()
        assert [n.title for n in drained] == ["Payment failed", "Purchase successful!"]
        assert sink.drain() == []

    def test_pending_is_a_copy(self):
        sink = InMemoryNotificationSink()
        sink.notify(PURCHASE_SUCCEEDED)
        sink.pending.clear()
        assert len(sink.pending) == 1


class TestLoggingSink:
    def test_failure_logged_as_error(self, caplog):
        with caplog.at_level(logging.INFO, logger="checkout_form.notifications"):
            LoggingNotificationSink().notify(payment_failed("declined"))
        assert caplog.records[0].levelno == logging.ERROR
        assert "declined" in caplog.text

    def test_success_logged_as_info(self, caplog):
        with caplog.at_level(logging.INFO, logger="checkout_form.notifications"):
            LoggingNotificationSink().notify(PURCHASE_SUCCEEDED)
        assert caplog.records[0].levelno == logging.INFO


class TestAuthGate:
    def test_open_when_no_token_configured(self, monkeypatch):
        monkeypatch.delenv("CHECKOUT_SESSION_TOKEN", raising=False)
        gate = AuthGate()
        assert not gate.enabled
        assert gate.require_user(None) is ANONYMOUS

    def test_valid_token(self):
        user = AuthGate("s3cret").require_user("s3cret")
        assert user.user_id.startswith("session-")
        assert "s3cret" not in user.user_id

    @pytest.mark.parametrize("token", [None, "", "wrong"])
    def test_bad_token_denied(self, token):
        with pytest.raises(AuthenticationError):
            AuthGate("s3cret").require_user(token)

    def test_token_from_environment(self, monkeypatch):
        monkeypatch.setenv("CHECKOUT_SESSION_TOKEN", "envtoken")
        gate = AuthGate()
        assert gate.enabled
        with pytest.raises(AuthenticationError):
            gate.require_user("other")
