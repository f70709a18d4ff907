"""One-shot channel: one value, one producer, one consumer.

The shared state is guarded by a lock so the two ends may live on different
threads. Wakers are invoked outside the lock.
"""

import threading
from typing import Generic, TypeVar

from conflux.types import PENDING, Canceled, ChannelClosed, Poll, Ready, TurnContext

T = TypeVar("T")


class _Inner(Generic[T]):
    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.value: T | None = None
        self.has_value = False
        self.sent = False
        self.tx_closed = False
        self.rx_closed = False
        self.rx_cx: TurnContext | None = None
        self.tx_cx: TurnContext | None = None


class Sender(Generic[T]):
    """Producing end of a one-shot channel."""

    def __init__(self, inner: _Inner[T]):
        self._inner = inner

    def send(self, value: T) -> None:
        """Delivers the value to the receiver.

        Args:
            value: Value to deliver

        Raises:
            ChannelClosed: If a value was already sent, the sender was closed,
                or the receiver is gone
        """
        inner = self._inner
        with inner.lock:
            if inner.sent or inner.tx_closed:
                raise ChannelClosed("oneshot value already sent or sender closed")
            if inner.rx_closed:
                raise ChannelClosed("oneshot receiver is gone")
            inner.value = value
            inner.has_value = True
            inner.sent = True
            rx_cx, inner.rx_cx = inner.rx_cx, None
        if rx_cx is not None:
            rx_cx.wake()

    def is_canceled(self) -> bool:
        """Returns True once the receiver has been closed."""
        with self._inner.lock:
            return self._inner.rx_closed

    def poll_canceled(self, cx: TurnContext) -> Poll[None]:
        """Polls for the receiver going away, registering ``cx`` if it has not."""
        inner = self._inner
        with inner.lock:
            if inner.rx_closed:
                return Ready(None)
            inner.tx_cx = cx
        return PENDING

    def close(self) -> None:
        """Drops the sender. A receiver without a value then sees Canceled."""
        inner = self._inner
        with inner.lock:
            if inner.tx_closed:
                return
            inner.tx_closed = True
            rx_cx, inner.rx_cx = inner.rx_cx, None
        if rx_cx is not None:
            rx_cx.wake()

    def __del__(self) -> None:
        self.close()


class Receiver(Generic[T]):
    """Consuming end of a one-shot channel."""

    def __init__(self, inner: _Inner[T]):
        self._inner = inner

    def poll_recv(self, cx: TurnContext) -> Poll[T]:
        """Polls for the value.

        Returns:
            ``Ready(value)`` once sent, ``PENDING`` while waiting

        Raises:
            Canceled: If the sender was closed without sending, or the value
                was already received
        """
        inner = self._inner
        with inner.lock:
            if inner.has_value:
                value = inner.value
                inner.value = None
                inner.has_value = False
                return Ready(value)  # type: ignore[arg-type]
            if inner.tx_closed or inner.sent or inner.rx_closed:
                raise Canceled()
            inner.rx_cx = cx
        return PENDING

    def close(self) -> None:
        """Drops interest in the value, waking a sender in ``poll_canceled``."""
        inner = self._inner
        with inner.lock:
            if inner.rx_closed:
                return
            inner.rx_closed = True
            inner.value = None
            inner.has_value = False
            tx_cx, inner.tx_cx = inner.tx_cx, None
        if tx_cx is not None:
            tx_cx.wake()

    def __del__(self) -> None:
        self.close()


def channel() -> tuple[Sender[T], Receiver[T]]:
    """Creates a new one-shot channel, returning its two ends.

    Example:
        tx, rx = channel()
        tx.send(42)
        assert rx.poll_recv(TurnContext.noop()) == Ready(42)
    """
    inner: _Inner[T] = _Inner()
    return Sender(inner), Receiver(inner)
