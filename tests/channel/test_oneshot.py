"""Tests for the one-shot channel."""

import gc

import pytest

from conflux.channel import channel
from conflux.types import PENDING, Canceled, ChannelClosed, Ready, TurnContext


class TestOneshotDelivery:
    """Test cases for sending and receiving a value."""

    def test_send_then_receive(self):
        """Test a value sent before the receiver polls."""
        tx, rx = channel()
        tx.send(42)
        assert rx.poll_recv(TurnContext.noop()) == Ready(42)

    def test_pending_receiver_is_woken(self):
        """Test that sending wakes a receiver that polled first."""
        woken = []
        tx, rx = channel()
        cx = TurnContext(waker=lambda: woken.append("rx"))
        assert rx.poll_recv(cx) is PENDING
        tx.send("v")
        assert woken == ["rx"]
        assert rx.poll_recv(cx) == Ready("v")

    def test_value_received_once(self):
        """Test that the value is handed out a single time."""
        tx, rx = channel()
        tx.send(1)
        rx.poll_recv(TurnContext.noop())
        with pytest.raises(Canceled):
            rx.poll_recv(TurnContext.noop())

    def test_second_send_rejected(self):
        """Test that a sender can send at most once."""
        tx, rx = channel()
        tx.send(1)
        with pytest.raises(ChannelClosed):
            tx.send(2)


class TestOneshotClosing:
    """Test cases for either end going away."""

    def test_sender_closed_without_value(self):
        """Test that the receiver sees Canceled when the sender drops."""
        woken = []
        tx, rx = channel()
        assert rx.poll_recv(TurnContext(waker=lambda: woken.append(True))) is PENDING
        tx.close()
        assert woken == [True]
        with pytest.raises(Canceled):
            rx.poll_recv(TurnContext.noop())

    def test_sender_garbage_collected(self):
        """Test that dropping the sender object closes it."""
        tx, rx = channel()
        del tx
        gc.collect()
        with pytest.raises(Canceled):
            rx.poll_recv(TurnContext.noop())

    def test_value_survives_sender_close(self):
        """Test that a sent value is still delivered after the sender closes."""
        tx, rx = channel()
        tx.send("kept")
        tx.close()
        assert rx.poll_recv(TurnContext.noop()) == Ready("kept")

    def test_receiver_closed(self):
        """Test that closing the receiver cancels the sender."""
        woken = []
        tx, rx = channel()
        assert not tx.is_canceled()
        assert tx.poll_canceled(TurnContext(waker=lambda: woken.append(True))) is PENDING
        rx.close()
        assert woken == [True]
        assert tx.is_canceled()
        assert tx.poll_canceled(TurnContext.noop()) == Ready(None)
        with pytest.raises(ChannelClosed, match="receiver is gone"):
            tx.send(1)

    def test_close_is_idempotent(self):
        """Test that closing twice is harmless."""
        tx, rx = channel()
        rx.close()
        rx.close()
        tx.close()
        tx.close()
