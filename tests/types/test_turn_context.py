"""Tests for the poll protocol types."""

import pydantic
import pytest

from conflux.types import PENDING, Ready, SpawnError, TurnContext, is_ready


class TestTurnContextCreation:
    """Test cases for TurnContext creation and validation."""

    def test_default_context(self):
        """Test that a default context has a no-op waker and turn 1."""
        cx = TurnContext()
        assert cx.turn == 1
        cx.wake()  # must not raise

    def test_noop_context(self):
        """Test that noop() builds a first-turn context whose wake does nothing."""
        cx = TurnContext.noop()
        assert cx.turn == 1
        assert cx.wake() is None

    def test_turn_validation(self):
        """Test that non-positive turn numbers are rejected."""
        with pytest.raises(ValueError, match="'turn' must be >= 1"):
            TurnContext(turn=0)

    def test_context_is_frozen(self):
        """Test that a context cannot be modified in place."""
        cx = TurnContext()
        with pytest.raises(pydantic.ValidationError):
            cx.turn = 5


class TestTurnContextWaking:
    """Test cases for waking through a TurnContext."""

    def test_wake_calls_waker(self):
        """Test that wake() invokes the waker each time."""
        calls = []
        cx = TurnContext(waker=lambda: calls.append("woken"))
        cx.wake()
        cx.wake()
        assert calls == ["woken", "woken"]

    def test_next_turn_keeps_waker(self):
        """Test that next_turn() increments the turn and keeps the waker."""
        calls = []
        cx = TurnContext(waker=lambda: calls.append(1))
        nxt = cx.next_turn()
        assert nxt.turn == 2
        assert cx.turn == 1
        nxt.wake()
        assert calls == [1]


class TestPollResult:
    """Test cases for Ready and PENDING."""

    def test_pending_is_singleton_and_falsy(self):
        """Test the PENDING marker."""
        assert not PENDING
        assert repr(PENDING) == "PENDING"
        assert type(PENDING)() is PENDING

    def test_ready_equality(self):
        """Test that Ready values compare by content."""
        assert Ready(3) == Ready(3)
        assert Ready(3) != Ready(4)
        assert Ready(None).value is None

    def test_is_ready(self):
        """Test is_ready on both kinds of results."""
        assert is_ready(Ready(0))
        assert not is_ready(PENDING)


class TestSpawnError:
    """Test cases for SpawnError."""

    def test_shutdown_error(self):
        """Test the shutdown constructor."""
        err = SpawnError.shutdown()
        assert err.is_shutdown()
        assert "shutdown" in str(err)

    def test_generic_rejection(self):
        """Test a rejection that is not a shutdown."""
        err = SpawnError("queue full", reason="full")
        assert not err.is_shutdown()
        assert err.reason == "full"
