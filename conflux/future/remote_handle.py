"""Split a future into a runnable half and an observer handle.

``remote_handle(fut)`` returns a ``Remote`` future, meant to be handed to an
executor, and a ``RemoteHandle`` that resolves to the original future's
value. The two halves talk through a one-shot channel. Dropping the handle
(``close()`` or garbage collection) tells the remote that nobody wants the
result any more; the remote then stops polling the wrapped future and
completes, unless the handle was ``forget()``-ed first.
"""

import threading
from typing import Any, Generic, TypeVar, cast

import structlog

from conflux.channel import Receiver, Sender, channel
from conflux.future.base import Future, into_future
from conflux.types import PENDING, Canceled, ChannelClosed, ContractViolation, Poll, Ready, TurnContext

logger = structlog.get_logger(__name__)

T = TypeVar("T")

# (True, value) on success, (False, exception) on failure
_Outcome = tuple[bool, Any]


class Remote(Future[None], Generic[T]):
    """The runnable half of a remote-handle pair.

    Polls the wrapped future and pushes its outcome into the channel. An
    exception raised by the wrapped future is delivered to the handle instead
    of escaping the executor.
    """

    def __init__(self, future: Future[T], tx: Sender[_Outcome], keep_running: threading.Event):
        self._future: Future[T] | None = future
        self._tx = tx
        self._keep_running = keep_running
        self._done = False

    def poll(self, cx: TurnContext) -> Poll[None]:
        if self._done:
            raise ContractViolation("Remote polled after completion")
        future = cast(Future[T], self._future)

        if isinstance(self._tx.poll_canceled(cx), Ready) and not self._keep_running.is_set():
            logger.debug("Remote handle dropped, abandoning task", future=repr(future))
            return self._finish()

        try:
            result = future.poll(cx)
        except Exception as exc:
            self._deliver((False, exc))
            return self._finish()
        if not isinstance(result, Ready):
            return PENDING
        self._deliver((True, result.value))
        return self._finish()

    def _deliver(self, outcome: _Outcome) -> None:
        try:
            self._tx.send(outcome)
        except ChannelClosed:
            logger.debug("Remote output discarded, handle is gone", ok=outcome[0])

    def _finish(self) -> Poll[None]:
        self._done = True
        self._future = None
        self._tx.close()
        return Ready(None)


class RemoteHandle(Future[T]):
    """Observer handle resolving to a spawned future's value.

    The handle can be polled or awaited independently of the task that runs
    the matching ``Remote``. It resolves exactly once: to the value, by
    re-raising the exception the future raised, or by raising ``Canceled``
    if the remote was dropped before finishing.

    Example:
        remote, handle = remote_handle(compute())
        spawner.spawn_obj(remote)
        value = await handle
    """

    def __init__(self, rx: Receiver[_Outcome], keep_running: threading.Event):
        self._rx = rx
        self._keep_running = keep_running
        self._done = False

    def poll(self, cx: TurnContext) -> Poll[T]:
        if self._done:
            raise ContractViolation("RemoteHandle polled after completion")
        try:
            result = self._rx.poll_recv(cx)
        except Canceled:
            self._done = True
            raise
        if not isinstance(result, Ready):
            return PENDING

        self._done = True
        ok, payload = result.value
        if ok:
            return Ready(payload)
        raise payload

    def forget(self) -> None:
        """Drops the handle but lets the remote future run to completion."""
        self._keep_running.set()
        self._rx.close()

    def close(self) -> None:
        """Drops the handle; the remote abandons its future on its next poll."""
        self._rx.close()

    def __del__(self) -> None:
        self.close()


def remote_handle(future: Any) -> tuple[Remote[Any], RemoteHandle[Any]]:
    """Creates a remote-handle pair for ``future``.

    Args:
        future: A Future, coroutine or awaitable

    Returns:
        ``(remote, handle)``: run ``remote`` on an executor, observe ``handle``
    """
    tx: Sender[_Outcome]
    rx: Receiver[_Outcome]
    tx, rx = channel()
    keep_running = threading.Event()
    return Remote(into_future(future), tx, keep_running), RemoteHandle(rx, keep_running)
